from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.db import IntegrityError, transaction
from phonenumber_field.serializerfields import PhoneNumberField
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from core.exceptions import Conflict

User = get_user_model()


class UserRegistrationSerializer(serializers.ModelSerializer):
    """
    Serializer for self-registration.
    New accounts always get the customer role; staff roles are granted by an admin.
    """
    email = serializers.EmailField()
    phone = PhoneNumberField(region='UG', required=False, allow_blank=True)
    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )

    class Meta:
        model = User
        fields = ('id', 'email', 'full_name', 'phone', 'password')
        read_only_fields = ('id',)

    def validate_email(self, value):
        value = User.objects.normalize_email(value).lower()
        if User.objects.filter(email__iexact=value).exists():
            raise Conflict('An account with this email already exists')
        return value

    def create(self, validated_data):
        """Create a new customer-role user with a hashed password."""
        password = validated_data.pop('password')
        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    username=validated_data['email'],
                    password=password,
                    role=User.UserRole.CUSTOMER,
                    **validated_data
                )
        except IntegrityError:
            raise Conflict('An account with this email already exists')
        return user


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for user details.
    Used for retrieving and updating the caller's profile.
    """
    phone = PhoneNumberField(region='UG', required=False, allow_blank=True)
    display_name = serializers.CharField(source='get_full_name', read_only=True)
    role_display = serializers.CharField(source='get_role_display', read_only=True)

    class Meta:
        model = User
        fields = (
            'id', 'email', 'full_name', 'display_name', 'phone',
            'role', 'role_display', 'is_active', 'date_joined', 'created_at'
        )
        read_only_fields = (
            'id', 'email', 'display_name', 'role', 'role_display',
            'is_active', 'date_joined', 'created_at'
        )


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Custom JWT token serializer that includes additional user information.
    """
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['role'] = user.role
        return token

    def validate(self, attrs):
        data = super().validate(attrs)

        data['user'] = {
            'id': str(self.user.id),
            'email': self.user.email,
            'full_name': self.user.get_full_name(),
            'phone': str(self.user.phone) if self.user.phone else '',
            'role': self.user.role,
        }

        return data
