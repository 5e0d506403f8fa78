"""
Repertoire API.
Endpoints:
- GET/POST          /api/pieces/
- GET/PATCH/DELETE  /api/pieces/{id}
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from lessons.serializers import LessonSerializer
from pieces import services
from pieces.serializers import PieceSerializer, PieceWriteSerializer


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def pieces_view(request):
    if request.method == 'GET':
        return Response(PieceSerializer(services.list_pieces(request.user), many=True).data)

    serializer = PieceWriteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    piece = services.create_piece(request.user, **serializer.validated_data)
    return Response(PieceSerializer(piece).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def piece_detail_view(request, pk):
    if request.method == 'GET':
        piece = services.get_piece(request.user, pk)
        data = PieceSerializer(piece).data
        recent = piece.lessons.select_related('student', 'attendance').order_by('-date')[:10]
        data['lessons'] = LessonSerializer(recent, many=True).data
        return Response(data)

    if request.method == 'PATCH':
        serializer = PieceWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        piece = services.update_piece(request.user, pk, **serializer.validated_data)
        return Response(PieceSerializer(piece).data)

    services.delete_piece(request.user, pk)
    return Response(status=status.HTTP_204_NO_CONTENT)
