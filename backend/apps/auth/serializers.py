from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from apps.users.mappers import user_to_dto
from apps.users.serializers import UserSerializer


class EmailTokenObtainPairSerializer(TokenObtainPairSerializer):
    """JWT pair for email logins; the access token carries the user's role."""

    username_field = "email"

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["role"] = user.role
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data["user"] = UserSerializer(user_to_dto(self.user)).data
        return data


class LoginResponseSerializer(serializers.Serializer):
    access = serializers.CharField()
    refresh = serializers.CharField()
    user = UserSerializer()


class LogoutRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField()


class DetailResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()


class LogoutAllResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()
    tokensInvalidated = serializers.IntegerField(source="tokens_invalidated")
