"""
Admin configuration for students app
"""
from django.contrib import admin
from .models import TeacherProfile, Student


@admin.register(TeacherProfile)
class TeacherProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'hourly_rate', 'created_at']
    search_fields = ['user__email', 'user__full_name']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    """Student Admin"""
    list_display = ['name', 'teacher', 'lesson_rate', 'created_at']
    list_filter = ['teacher']
    search_fields = ['name', 'teacher__user__email']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-created_at']
