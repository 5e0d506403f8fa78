"""
Serializers for accounts app
"""
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from django.contrib.auth import get_user_model

from students.serializers import MoneyField

User = get_user_model()

MIN_PASSWORD_LENGTH = 6


class UserSerializer(serializers.ModelSerializer):
    """User serializer for API responses"""
    fullName = serializers.CharField(source='full_name', read_only=True)
    createdAt = serializers.DateTimeField(source='date_joined', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'fullName', 'image', 'createdAt']
        read_only_fields = ['id', 'email', 'image']


class ProfileSerializer(UserSerializer):
    """User plus teacher profile summary (rate, roster and lesson counts)."""
    teacher = serializers.SerializerMethodField()

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ['teacher']

    def get_teacher(self, obj):
        teacher = getattr(obj, 'teacher_profile', None)
        if teacher is None:
            return None
        return {
            'id': teacher.id,
            'hourlyRate': MoneyField().to_representation(teacher.hourly_rate),
            'studentCount': teacher.students.count(),
            'lessonCount': teacher.lessons.count(),
        }


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=MIN_PASSWORD_LENGTH, style={'input_type': 'password'})
    fullName = serializers.CharField(max_length=100, trim_whitespace=True)


class LoginSerializer(serializers.Serializer):
    """Login serializer"""
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def validate(self, attrs):
        try:
            user = User.objects.get(email__iexact=attrs['email'])
        except User.DoesNotExist:
            raise AuthenticationFailed('Invalid email or password.')

        if not user.check_password(attrs['password']):
            raise AuthenticationFailed('Invalid email or password.')

        if not user.is_active:
            raise AuthenticationFailed('User account is disabled.')

        attrs['user'] = user
        return attrs


class ProfileUpdateSerializer(serializers.Serializer):
    fullName = serializers.CharField(max_length=100, min_length=1, required=False)
    email = serializers.EmailField(required=False)
    image = serializers.URLField(max_length=500, required=False, allow_blank=True)

    def to_domain(self):
        data = dict(self.validated_data)
        if 'fullName' in data:
            data['full_name'] = data.pop('fullName')
        return data


class ChangePasswordSerializer(serializers.Serializer):
    currentPassword = serializers.CharField(write_only=True)
    newPassword = serializers.CharField(write_only=True, min_length=MIN_PASSWORD_LENGTH)


class HourlyRateSerializer(serializers.Serializer):
    hourlyRate = MoneyField()
