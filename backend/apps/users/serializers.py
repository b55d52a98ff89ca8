from rest_framework import serializers

from .validators import validate_password, validate_phone_number


class UserSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    email = serializers.EmailField(read_only=True)
    name = serializers.CharField(read_only=True)
    role = serializers.CharField(read_only=True)
    phoneNumber = serializers.CharField(source="phone_number", read_only=True)
    restaurantId = serializers.IntegerField(
        source="restaurant_id", read_only=True, allow_null=True
    )
    createdAt = serializers.CharField(source="created_at", read_only=True, allow_null=True)


class RestaurantUserCreateSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=100)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=8, write_only=True)
    phoneNumber = serializers.CharField(validators=[validate_phone_number])
    restaurantId = serializers.IntegerField(min_value=1)


class RestaurantUserSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    email = serializers.EmailField()
    name = serializers.CharField()
    role = serializers.CharField()
    restaurantId = serializers.IntegerField(source="restaurant_id")


class CustomerRegisterSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=100)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, validators=[validate_password])
    phoneNumber = serializers.CharField(
        required=False, allow_blank=True, validators=[validate_phone_number]
    )
    address = serializers.CharField(required=False, allow_blank=True, max_length=500)


class CustomerProfileSerializer(serializers.Serializer):
    name = serializers.CharField()
    email = serializers.EmailField()
    phoneNumber = serializers.CharField(source="phone_number", allow_blank=True)
    address = serializers.CharField(allow_blank=True)
