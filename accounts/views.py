"""
Authentication and profile views
Endpoints:
- POST  /api/auth/register          Create account + teacher profile, returns token
- POST  /api/auth/login             Email/password -> access token
- POST  /api/auth/logout            Client drops the token
- GET   /api/auth/me                Current user
- POST  /api/auth/change-password   {currentPassword, newPassword}
- GET   /api/profile/               User with teacher summary
- PATCH /api/profile/               {fullName?, email?, image?}
- PUT   /api/profile/rate           {hourlyRate}
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken

from students.serializers import TeacherProfileSerializer
from students.services import update_hourly_rate
from . import services
from .serializers import (
    ChangePasswordSerializer,
    HourlyRateSerializer,
    LoginSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)


def _token_response(user, status_code=status.HTTP_200_OK):
    refresh = RefreshToken.for_user(user)
    return Response(
        {'accessToken': str(refresh.access_token), 'user': UserSerializer(user).data},
        status=status_code,
    )


@api_view(['POST'])
@permission_classes([AllowAny])
def register_view(request):
    serializer = RegisterSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = services.register_user(
        email=serializer.validated_data['email'],
        password=serializer.validated_data['password'],
        full_name=serializer.validated_data['fullName'],
    )
    return _token_response(user, status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """
    Status codes:
    - 200: Success
    - 400: Invalid request format (missing fields, invalid email format)
    - 401: Invalid credentials or disabled account
    """
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user = serializer.validated_data['user']
    logger.info(f"[login] user_id={user.id}")
    return _token_response(user)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    # Stateless JWT: nothing to revoke server-side, the client clears its token.
    return Response({'detail': 'Successfully logged out.'}, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    return Response(UserSerializer(request.user).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def change_password_view(request):
    serializer = ChangePasswordSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    services.change_password(
        request.user,
        serializer.validated_data['currentPassword'],
        serializer.validated_data['newPassword'],
    )
    return Response({'detail': 'Password changed successfully'}, status=status.HTTP_200_OK)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def profile_view(request):
    if request.method == 'GET':
        return Response(ProfileSerializer(request.user).data)

    serializer = ProfileUpdateSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    user = services.update_profile(request.user, **serializer.to_domain())
    return Response(ProfileSerializer(user).data)


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def hourly_rate_view(request):
    serializer = HourlyRateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    teacher = update_hourly_rate(request.user, serializer.validated_data['hourlyRate'])
    return Response(TeacherProfileSerializer(teacher).data)
