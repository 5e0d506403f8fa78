from django.contrib import admin
from .models import Lesson, Attendance


class AttendanceInline(admin.StackedInline):
    model = Attendance
    extra = 0
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Lesson)
class LessonAdmin(admin.ModelAdmin):
    list_display = ['student', 'date', 'duration', 'status', 'piece', 'teacher']
    list_filter = ['status', 'date']
    search_fields = ['student__name', 'piece__title']
    date_hierarchy = 'date'
    raw_id_fields = ['student', 'piece', 'teacher']
    inlines = [AttendanceInline]
    readonly_fields = ['created_at', 'updated_at']
