"""
Serializers for students app
"""
from decimal import Decimal

from rest_framework import serializers
from .models import Student, TeacherProfile

MAX_RATE = Decimal('10000000')


class MoneyField(serializers.DecimalField):
    """Decimal in, JSON number out (frontend expects numbers, not strings)."""

    def __init__(self, **kwargs):
        kwargs.setdefault('max_digits', 12)
        kwargs.setdefault('decimal_places', 2)
        kwargs.setdefault('min_value', Decimal('0'))
        kwargs.setdefault('max_value', MAX_RATE)
        super().__init__(**kwargs)

    def to_representation(self, value):
        return float(value) if value is not None else None


class TeacherProfileSerializer(serializers.ModelSerializer):
    hourlyRate = MoneyField(source='hourly_rate', read_only=True)

    class Meta:
        model = TeacherProfile
        fields = ['id', 'hourlyRate']


class StudentSummarySerializer(serializers.ModelSerializer):
    """Compact student payload embedded in lessons and earnings rows."""

    class Meta:
        model = Student
        fields = ['id', 'name', 'avatar']


class StudentSerializer(serializers.ModelSerializer):
    """Student serializer. lessonCount present when the queryset is annotated."""
    lessonRate = MoneyField(source='lesson_rate', read_only=True)
    teacherId = serializers.IntegerField(source='teacher_id', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    lessonCount = serializers.SerializerMethodField()

    class Meta:
        model = Student
        fields = ['id', 'teacherId', 'name', 'avatar', 'notes', 'lessonRate', 'lessonCount', 'createdAt']

    def get_lessonCount(self, obj):
        count = getattr(obj, 'lesson_count', None)
        if count is None:
            count = obj.lessons.count()
        return count


class StudentWriteSerializer(serializers.Serializer):
    """Input for create (partial=False) and update (partial=True)."""
    name = serializers.CharField(max_length=100, trim_whitespace=True)
    avatar = serializers.URLField(max_length=500, required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True, allow_null=True)
    lessonRate = MoneyField(required=False)

    def to_domain(self):
        """validated_data keyed by model field names."""
        data = dict(self.validated_data)
        if 'lessonRate' in data:
            data['lesson_rate'] = data.pop('lessonRate')
        return data
