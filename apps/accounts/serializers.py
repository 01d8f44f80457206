from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """The signed-in user's own profile."""

    display_name = serializers.CharField(required=False, allow_blank=True, max_length=100)

    class Meta:
        model = User
        fields = ['id', 'email', 'display_name', 'is_staff', 'created_at', 'last_login']
        read_only_fields = ['id', 'email', 'is_staff', 'created_at', 'last_login']


class CredentialsSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def validate_email(self, value):
        return value.strip().lower()


class RegisterSerializer(CredentialsSerializer):
    """Sign-up form; the password must pass the configured validators (min 6 chars)."""

    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={'input_type': 'password'},
    )
    display_name = serializers.CharField(required=False, allow_blank=True, max_length=100)


class UserPublicSerializer(serializers.ModelSerializer):
    """Name shown next to a user's reviews and check-ins."""

    display_name = serializers.CharField(source='get_display_name', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'display_name']
        read_only_fields = fields
