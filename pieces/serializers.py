"""
Serializers for pieces app
"""
from rest_framework import serializers
from .models import Piece


class PieceSerializer(serializers.ModelSerializer):
    lessonCount = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Piece
        fields = ['id', 'title', 'difficulty', 'description', 'lessonCount', 'createdAt']

    def get_lessonCount(self, obj):
        count = getattr(obj, 'lesson_count', None)
        if count is None:
            count = obj.lessons.count()
        return count


class PieceWriteSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200, trim_whitespace=True)
    difficulty = serializers.IntegerField(min_value=1, max_value=5, required=False)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True, allow_null=True)
