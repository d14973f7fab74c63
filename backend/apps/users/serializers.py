from rest_framework import serializers

from .validators import validate_phone


class UserSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    username = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)
    first_name = serializers.CharField(allow_blank=True)
    last_name = serializers.CharField(allow_blank=True)
    phone = serializers.CharField(allow_blank=True)
    avatar_url = serializers.CharField(allow_blank=True)
    is_staff = serializers.BooleanField(read_only=True)
    date_joined = serializers.CharField(read_only=True, allow_null=True)


class ProfileUpdateSerializer(serializers.Serializer):
    first_name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    last_name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=50)
    avatar_url = serializers.URLField(required=False, allow_blank=True, max_length=500)

    def validate_phone(self, value: str) -> str:
        return validate_phone(value)
