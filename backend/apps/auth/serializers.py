from rest_framework import serializers
from rest_framework.exceptions import ValidationError
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from apps.users.serializers import UserSerializer
from apps.users.validators import (
    validate_password as validate_password_rules,
    validate_phone as validate_phone_rules,
    validate_username as validate_username_rules,
)


class RegisterRequestSerializer(serializers.Serializer):
    username = serializers.CharField()
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    first_name = serializers.CharField(max_length=150)
    last_name = serializers.CharField(max_length=150)
    phone = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_username(self, value: str) -> str:
        return validate_username_rules(value)

    def validate_password(self, value: str) -> str:
        return validate_password_rules(value)

    def validate_phone(self, value: str) -> str:
        return validate_phone_rules(value)


class RegisterResponseSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField()
    email = serializers.EmailField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()


class CurrentUserResponseSerializer(serializers.Serializer):
    authenticated = serializers.BooleanField()
    user = UserSerializer(allow_null=True)


class LogoutRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField()


class DetailResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()


class CustomerTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Token serializer that blocks staff/admin accounts."""

    def validate(self, attrs):
        data = super().validate(attrs)
        if getattr(self.user, "is_staff", False) or getattr(
            self.user, "is_superuser", False
        ):
            raise ValidationError(
                "Staff and admin accounts must use the staff login endpoint."
            )
        return data


class StaffTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Token serializer for the admin panel; only staff or superusers."""

    def validate(self, attrs):
        data = super().validate(attrs)
        if not (
            getattr(self.user, "is_staff", False)
            or getattr(self.user, "is_superuser", False)
        ):
            raise ValidationError("Only staff or admin accounts may use this endpoint.")
        return data
