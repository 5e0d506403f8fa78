"""
Serializers for reports app
"""
from rest_framework import serializers

from lessons.serializers import LessonSerializer
from students.serializers import MoneyField, StudentSerializer
from .models import MonthlyReport, MAX_TEXT


class MonthlyReportSerializer(serializers.ModelSerializer):
    studentId = serializers.IntegerField(source='student_id', read_only=True)
    nextMonthPlan = serializers.CharField(source='next_month_plan', read_only=True, allow_null=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = MonthlyReport
        fields = ['id', 'studentId', 'month', 'year', 'summary', 'comments', 'nextMonthPlan', 'updatedAt']


class WeekEntrySerializer(serializers.Serializer):
    lessonId = serializers.IntegerField()
    day = serializers.IntegerField()
    status = serializers.CharField()


class WeekSerializer(serializers.Serializer):
    week = serializers.IntegerField()
    entries = WeekEntrySerializer(many=True)


class StudentReportSerializer(serializers.Serializer):
    """Payload of get_student_report; `report` is null until first saved."""
    report = MonthlyReportSerializer(allow_null=True)
    lessons = LessonSerializer(many=True)
    student = StudentSerializer()
    weeks = WeekSerializer(many=True)
    totalSessions = serializers.IntegerField()
    perSessionRate = MoneyField()
    totalTuition = MoneyField()
    teacherHourlyRate = MoneyField()


class PeriodQuerySerializer(serializers.Serializer):
    month = serializers.IntegerField(min_value=1, max_value=12)
    year = serializers.IntegerField(min_value=1900, max_value=2100)


class ReportUpsertSerializer(PeriodQuerySerializer):
    summary = serializers.CharField(max_length=MAX_TEXT, required=False, allow_blank=True)
    comments = serializers.CharField(max_length=MAX_TEXT, required=False, allow_blank=True)
    nextMonthPlan = serializers.CharField(max_length=MAX_TEXT, required=False, allow_blank=True)

    def to_domain(self):
        data = dict(self.validated_data)
        if 'nextMonthPlan' in data:
            data['next_month_plan'] = data.pop('nextMonthPlan')
        return data
