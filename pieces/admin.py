from django.contrib import admin
from .models import Piece


@admin.register(Piece)
class PieceAdmin(admin.ModelAdmin):
    list_display = ['title', 'difficulty', 'teacher', 'created_at']
    list_filter = ['difficulty']
    search_fields = ['title']
    readonly_fields = ['created_at', 'updated_at']
