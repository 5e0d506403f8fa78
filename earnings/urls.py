from django.urls import path
from earnings.views import dashboard_view, today_lessons_view, by_student_view

urlpatterns = [
    path('dashboard', dashboard_view, name='earnings-dashboard'),
    path('today', today_lessons_view, name='earnings-today'),
    path('by-student', by_student_view, name='earnings-by-student'),
]
