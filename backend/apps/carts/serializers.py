from rest_framework import serializers

from apps.orders.serializers import DeliverySerializer, PaymentSerializer


class CartItemSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    price = serializers.CharField()
    quantity = serializers.IntegerField(min_value=1)
    imageUrl = serializers.CharField(required=False)


class PendingItemSerializer(serializers.Serializer):
    restaurantId = serializers.IntegerField()
    restaurantName = serializers.CharField()
    item = CartItemSerializer()


class CartSerializer(serializers.Serializer):
    restaurantId = serializers.IntegerField(allow_null=True)
    restaurantName = serializers.CharField(allow_null=True)
    items = CartItemSerializer(many=True)
    subtotal = serializers.CharField()
    itemCount = serializers.IntegerField()
    deliveryFee = serializers.CharField(allow_null=True)
    total = serializers.CharField(allow_null=True)
    pending = PendingItemSerializer(allow_null=True)


class CartResponseSerializer(serializers.Serializer):
    cart = CartSerializer()
    messages = serializers.ListField(child=serializers.CharField())


class CartAddSerializer(serializers.Serializer):
    restaurantId = serializers.IntegerField(min_value=1)
    menuItemId = serializers.IntegerField(min_value=1)


class CheckoutSerializer(serializers.Serializer):
    delivery = DeliverySerializer()
    payment = PaymentSerializer()
