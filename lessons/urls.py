from django.urls import path
from lessons.views.teacher import (
    lessons_view,
    lessons_range_view,
    lessons_month_view,
    lessons_recurring_view,
    lesson_detail_view,
    lesson_attendance_view,
)

urlpatterns = [
    path('', lessons_view, name='lessons-list'),
    path('range', lessons_range_view, name='lessons-range'),
    path('month', lessons_month_view, name='lessons-month'),
    path('recurring', lessons_recurring_view, name='lessons-recurring'),
    path('<int:pk>', lesson_detail_view, name='lesson-detail'),
    path('<int:pk>/attendance', lesson_attendance_view, name='lesson-attendance'),
]
