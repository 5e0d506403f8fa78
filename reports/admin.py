from django.contrib import admin
from .models import MonthlyReport


@admin.register(MonthlyReport)
class MonthlyReportAdmin(admin.ModelAdmin):
    list_display = ['student', 'year', 'month', 'updated_at']
    list_filter = ['year', 'month']
    search_fields = ['student__name']
    raw_id_fields = ['student']
    readonly_fields = ['created_at', 'updated_at']
