"""
Earnings API.
Endpoints:
- GET /api/earnings/dashboard       Totals for the current month and all time
- GET /api/earnings/today?date=     Lessons of a day with per-lesson earnings
- GET /api/earnings/by-student      Current-month earnings grouped per student
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from earnings import services
from earnings.serializers import DashboardSerializer, DayQuerySerializer, StudentEarningsSerializer
from lessons.serializers import LessonWithEarningsSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_view(request):
    totals = services.dashboard_totals(request.user)
    return Response(DashboardSerializer(totals).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def today_lessons_view(request):
    query = DayQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    lessons = services.today_lessons(request.user, query.validated_data.get('date'))
    return Response(LessonWithEarningsSerializer(lessons, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def by_student_view(request):
    rows = services.earnings_by_student(request.user)
    return Response(StudentEarningsSerializer(rows, many=True).data)
