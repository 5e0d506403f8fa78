from django.urls import path
from reports.views import student_report_view

urlpatterns = [
    path('students/<int:student_id>', student_report_view, name='student-report'),
]
