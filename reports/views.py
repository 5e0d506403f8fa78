"""
Monthly report API.
Endpoints:
- GET /api/reports/students/{id}?month=&year=   Attendance grid, tuition line, saved narrative
- PUT /api/reports/students/{id}                Upsert narrative (only sent fields change)
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from reports import services
from reports.serializers import (
    MonthlyReportSerializer,
    PeriodQuerySerializer,
    ReportUpsertSerializer,
    StudentReportSerializer,
)


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def student_report_view(request, student_id):
    if request.method == 'GET':
        query = PeriodQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = services.get_student_report(
            request.user, student_id,
            month=query.validated_data['month'],
            year=query.validated_data['year'],
        )
        return Response(StudentReportSerializer(data).data)

    serializer = ReportUpsertSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    report = services.upsert_report(request.user, student_id, **serializer.to_domain())
    return Response(MonthlyReportSerializer(report).data)
