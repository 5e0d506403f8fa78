"""
Serializers for lessons app
"""
from django.core.exceptions import ObjectDoesNotExist
from rest_framework import serializers

from students.serializers import MoneyField, StudentSummarySerializer
from .models import Lesson, Attendance, MIN_DURATION, MAX_DURATION


class AttendanceSerializer(serializers.ModelSerializer):
    lessonId = serializers.IntegerField(source='lesson_id', read_only=True)
    actualMin = serializers.IntegerField(source='actual_min', read_only=True)

    class Meta:
        model = Attendance
        fields = ['id', 'lessonId', 'date', 'status', 'actualMin', 'reason', 'note']


class PieceSummaryField(serializers.Field):
    def to_representation(self, piece):
        return {'id': piece.id, 'title': piece.title}


class LessonSerializer(serializers.ModelSerializer):
    """Lesson with embedded student summary, piece title and attendance (null when unmarked)."""
    studentId = serializers.IntegerField(source='student_id', read_only=True)
    pieceId = serializers.IntegerField(source='piece_id', read_only=True, allow_null=True)
    student = StudentSummarySerializer(read_only=True)
    piece = PieceSummaryField(read_only=True, allow_null=True)
    actualMin = serializers.IntegerField(source='actual_min', read_only=True, allow_null=True)
    cancelReason = serializers.CharField(source='cancel_reason', read_only=True, allow_null=True)
    attendance = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Lesson
        fields = [
            'id', 'studentId', 'pieceId', 'student', 'piece', 'date', 'duration', 'status',
            'actualMin', 'cancelReason', 'note', 'attendance', 'createdAt',
        ]

    def get_attendance(self, obj):
        try:
            attendance = obj.attendance
        except ObjectDoesNotExist:
            return None
        return AttendanceSerializer(attendance).data


class LessonWithEarningsSerializer(LessonSerializer):
    """Lesson plus the amount it contributes (lesson rate, or 0 when cancelled)."""
    earnings = MoneyField(read_only=True)

    class Meta(LessonSerializer.Meta):
        fields = LessonSerializer.Meta.fields + ['earnings']


# ---- input ----

class LessonCreateSerializer(serializers.Serializer):
    studentId = serializers.IntegerField(min_value=1)
    pieceId = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    date = serializers.DateTimeField()
    duration = serializers.IntegerField(min_value=MIN_DURATION, max_value=MAX_DURATION)
    status = serializers.ChoiceField(choices=Lesson.STATUS_CHOICES, required=False)

    def to_domain(self):
        data = self.validated_data
        return {
            'student_id': data['studentId'],
            'piece_id': data.get('pieceId'),
            'date': data['date'],
            'duration': data['duration'],
            'status': data.get('status'),
        }


class LessonUpdateSerializer(serializers.Serializer):
    """All fields optional; pieceId=null detaches the piece."""
    date = serializers.DateTimeField(required=False)
    duration = serializers.IntegerField(min_value=MIN_DURATION, max_value=MAX_DURATION, required=False)
    status = serializers.ChoiceField(choices=Lesson.STATUS_CHOICES, required=False)
    pieceId = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    cancelReason = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    actualMin = serializers.IntegerField(min_value=0, max_value=MAX_DURATION, required=False)
    note = serializers.CharField(max_length=1000, required=False, allow_blank=True, allow_null=True)

    FIELD_MAP = {
        'date': 'date',
        'duration': 'duration',
        'status': 'status',
        'pieceId': 'piece_id',
        'cancelReason': 'cancel_reason',
        'actualMin': 'actual_min',
        'note': 'note',
    }

    def to_domain(self):
        return {self.FIELD_MAP[key]: value for key, value in self.validated_data.items()}


class DateOrDateTimeField(serializers.DateField):
    """YYYY-MM-DD, or a full ISO datetime passed through for the service to localise."""

    def to_internal_value(self, value):
        if isinstance(value, str) and 'T' in value:
            return serializers.DateTimeField().to_internal_value(value)
        return super().to_internal_value(value)


class RecurringLessonSerializer(serializers.Serializer):
    studentId = serializers.IntegerField(min_value=1)
    pieceId = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    startDate = DateOrDateTimeField()
    dayOfWeek = serializers.IntegerField(min_value=0, max_value=6)
    time = serializers.TimeField(input_formats=['%H:%M'])
    duration = serializers.IntegerField(min_value=MIN_DURATION, max_value=MAX_DURATION)
    recurrenceMonths = serializers.ChoiceField(choices=[1, 2])

    def to_domain(self):
        data = self.validated_data
        return {
            'student_id': data['studentId'],
            'piece_id': data.get('pieceId'),
            'start_date': data['startDate'],
            'day_of_week': data['dayOfWeek'],
            'time_of_day': data['time'],
            'duration': data['duration'],
            'recurrence_months': int(data['recurrenceMonths']),
        }


class AttendanceMarkSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Attendance.STATUS_CHOICES)
    actualMin = serializers.IntegerField(min_value=0, max_value=MAX_DURATION, required=False)
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True)
    note = serializers.CharField(max_length=1000, required=False, allow_blank=True)

    def to_domain(self):
        data = self.validated_data
        return {
            'status': data['status'],
            'actual_min': data.get('actualMin'),
            'reason': data.get('reason'),
            'note': data.get('note'),
        }


class LessonListQuerySerializer(serializers.Serializer):
    studentId = serializers.IntegerField(min_value=1, required=False)
    status = serializers.ChoiceField(choices=Lesson.STATUS_CHOICES, required=False)


class DateRangeQuerySerializer(serializers.Serializer):
    # `from` is a reserved word, so that field is added in __init__
    to = serializers.DateField()

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['from'] = serializers.DateField()


class MonthQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=1900, max_value=2100)
    month = serializers.IntegerField(min_value=1, max_value=12)
