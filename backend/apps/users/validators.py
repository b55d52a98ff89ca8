import re

from rest_framework import serializers

_PHONE_PATTERN = re.compile(r"^\+?[0-9][0-9\s-]{6,19}$")


def validate_password(value: str) -> str:
    """Minimum 8 characters with at least one letter and one digit."""
    if value is None:
        raise serializers.ValidationError("Password is required.")
    if len(value) < 8:
        raise serializers.ValidationError(
            "Password must be at least 8 characters long."
        )
    if not any(ch.isalpha() for ch in value) or not any(ch.isdigit() for ch in value):
        raise serializers.ValidationError(
            "Password must contain at least one letter and one number."
        )
    return value


def validate_phone_number(value: str) -> str:
    if value in (None, ""):
        return value
    trimmed = value.strip()
    if not _PHONE_PATTERN.match(trimmed):
        raise serializers.ValidationError("Enter a valid phone number.")
    return trimmed
