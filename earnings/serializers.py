from rest_framework import serializers

from students.serializers import MoneyField


class DashboardSerializer(serializers.Serializer):
    totalEarnings = MoneyField()
    currentMonthEarnings = MoneyField()
    currentMonthLoss = MoneyField()
    hourlyRate = MoneyField()


class StudentEarningsSerializer(serializers.Serializer):
    studentId = serializers.IntegerField()
    studentName = serializers.CharField()
    avatar = serializers.CharField(allow_null=True)
    totalMinutes = serializers.IntegerField()
    earnings = MoneyField()
    lessonCount = serializers.IntegerField()


class DayQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
