import re
import string

from rest_framework import serializers

_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
_PHONE_PATTERN = re.compile(r"^\+?[0-9 ()-]{7,20}$")

_PASSWORD_RULES = (
    (str.isupper, "Password must include at least one uppercase letter."),
    (str.islower, "Password must include at least one lowercase letter."),
    (str.isdigit, "Password must include at least one number."),
    (lambda ch: ch in string.punctuation, "Password must include at least one special character."),
)


def validate_username(value: str) -> str:
    """At least 4 characters: letters, digits or underscores."""
    if value is None:
        raise serializers.ValidationError("Username is required.")
    trimmed = value.strip()
    if len(trimmed) < 4:
        raise serializers.ValidationError("Username must be at least 4 characters long.")
    if not _USERNAME_PATTERN.match(trimmed):
        raise serializers.ValidationError(
            "Username may contain only letters, numbers and underscores."
        )
    return trimmed


def validate_password(value: str) -> str:
    """Minimum 6 characters with upper, lower, digit and punctuation."""
    if value is None:
        raise serializers.ValidationError("Password is required.")
    if len(value) < 6:
        raise serializers.ValidationError("Password must be at least 6 characters long.")
    for check, message in _PASSWORD_RULES:
        if not any(check(ch) for ch in value):
            raise serializers.ValidationError(message)
    return value


def validate_phone(value: str) -> str:
    trimmed = (value or "").strip()
    if trimmed and not _PHONE_PATTERN.match(trimmed):
        raise serializers.ValidationError("Enter a valid phone number.")
    return trimmed
