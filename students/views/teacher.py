"""
Teacher roster API.
Endpoints:
- GET    /api/students/        List own students (newest first, lessonCount)
- POST   /api/students/        Create student (provisions teacher profile if missing)
- GET    /api/students/{id}    Student with 10 most recent lessons
- PATCH  /api/students/{id}    Partial update
- DELETE /api/students/{id}    Hard delete (lessons and reports cascade)
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from lessons.serializers import LessonSerializer
from students import services
from students.serializers import StudentSerializer, StudentWriteSerializer


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def students_view(request):
    if request.method == 'GET':
        students = services.list_students(request.user)
        return Response(StudentSerializer(students, many=True).data)

    serializer = StudentWriteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    student = services.create_student(request.user, **serializer.to_domain())
    return Response(StudentSerializer(student).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def student_detail_view(request, pk):
    if request.method == 'GET':
        student = services.get_student(request.user, pk)
        data = StudentSerializer(student).data
        recent = student.lessons.select_related('student', 'piece', 'attendance').order_by('-date')[:10]
        data['lessons'] = LessonSerializer(recent, many=True).data
        return Response(data)

    if request.method == 'PATCH':
        serializer = StudentWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        student = services.update_student(request.user, pk, **serializer.to_domain())
        return Response(StudentSerializer(student).data)

    services.delete_student(request.user, pk)
    return Response(status=status.HTTP_204_NO_CONTENT)
