"""
Lesson lifecycle API.
Endpoints:
- GET    /api/lessons/?studentId=&status=     List own lessons (date ascending)
- POST   /api/lessons/                        Create one lesson
- GET    /api/lessons/range?from=&to=         Lessons between two local dates (inclusive)
- GET    /api/lessons/month?year=&month=      Lessons in a calendar month
- POST   /api/lessons/recurring               Expand weekly rule -> {count}
- PATCH  /api/lessons/{id}                    Partial update (status, reschedule, piece, ...)
- DELETE /api/lessons/{id}                    Hard delete
- POST   /api/lessons/{id}/attendance         Upsert attendance record
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from lessons import services
from lessons.serializers import (
    AttendanceMarkSerializer,
    AttendanceSerializer,
    DateRangeQuerySerializer,
    LessonCreateSerializer,
    LessonListQuerySerializer,
    LessonSerializer,
    LessonUpdateSerializer,
    MonthQuerySerializer,
    RecurringLessonSerializer,
)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def lessons_view(request):
    if request.method == 'GET':
        query = LessonListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        lessons = services.list_lessons(
            request.user,
            student_id=query.validated_data.get('studentId'),
            status=query.validated_data.get('status'),
        )
        return Response(LessonSerializer(lessons, many=True).data)

    serializer = LessonCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    lesson = services.create_lesson(request.user, **serializer.to_domain())
    return Response(LessonSerializer(lesson).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def lessons_range_view(request):
    query = DateRangeQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    lessons = services.lessons_in_range(
        request.user, query.validated_data['from'], query.validated_data['to'],
    )
    return Response(LessonSerializer(lessons, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def lessons_month_view(request):
    query = MonthQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    lessons = services.lessons_for_month(
        request.user, query.validated_data['year'], query.validated_data['month'],
    )
    return Response(LessonSerializer(lessons, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def lessons_recurring_view(request):
    serializer = RecurringLessonSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    count = services.create_recurring_lessons(request.user, **serializer.to_domain())
    return Response({'count': count}, status=status.HTTP_201_CREATED)


@api_view(['PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def lesson_detail_view(request, pk):
    if request.method == 'PATCH':
        serializer = LessonUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        lesson = services.update_lesson(request.user, pk, **serializer.to_domain())
        return Response(LessonSerializer(lesson).data)

    lesson = services.delete_lesson(request.user, pk)
    return Response(LessonSerializer(lesson).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def lesson_attendance_view(request, pk):
    serializer = AttendanceMarkSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    attendance = services.mark_attendance(request.user, pk, **serializer.to_domain())
    return Response(AttendanceSerializer(attendance).data)
