"""
Student roster URLs
"""
from django.urls import path
from ..views.teacher import students_view, student_detail_view

app_name = 'students'

urlpatterns = [
    path('', students_view, name='list'),
    path('<int:pk>', student_detail_view, name='detail'),
]
