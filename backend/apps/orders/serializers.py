from rest_framework import serializers

from .models import OrderStatus


class DeliverySerializer(serializers.Serializer):
    firstName = serializers.CharField(max_length=100)
    lastName = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    phoneNumber = serializers.CharField(min_length=7, max_length=30)
    deliveryAddress = serializers.CharField(min_length=5)
    notes = serializers.CharField(required=False, allow_blank=True, max_length=500)


class PaymentSerializer(serializers.Serializer):
    paymentMethod = serializers.ChoiceField(choices=["mobile_money"])
    mobileNumber = serializers.CharField(min_length=10, max_length=30)
    transactionId = serializers.CharField(min_length=6, max_length=20)
    providerName = serializers.CharField(required=False, allow_blank=True, max_length=50)


class OrderLineSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1, max_value=99)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)


class OrderCreateSerializer(serializers.Serializer):
    delivery = DeliverySerializer()
    payment = PaymentSerializer()
    items = OrderLineSerializer(many=True, allow_empty=False)
    restaurantId = serializers.IntegerField(min_value=1)
    total = serializers.DecimalField(max_digits=10, decimal_places=2)

    def validate_total(self, value):
        if value <= 0:
            raise serializers.ValidationError("Order total must be greater than zero.")
        return value


class OrderCreatedSerializer(serializers.Serializer):
    orderId = serializers.IntegerField(source="order_id")
    orderNumber = serializers.CharField(source="order_number")
    createdAt = serializers.CharField(source="created_at")


class OrderItemSerializer(serializers.Serializer):
    menuItemId = serializers.IntegerField(source="menu_item_id")
    name = serializers.CharField()
    price = serializers.CharField()
    quantity = serializers.IntegerField()


class OrderListItemSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    orderNumber = serializers.CharField(source="order_number")
    restaurantId = serializers.IntegerField(source="restaurant_id")
    restaurantName = serializers.CharField(source="restaurant_name")
    customerName = serializers.CharField(source="customer_name", allow_blank=True)
    status = serializers.CharField()
    total = serializers.CharField()
    createdAt = serializers.CharField(source="created_at")


class OrderDetailSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    orderNumber = serializers.CharField(source="order_number")
    restaurantId = serializers.IntegerField(source="restaurant_id")
    restaurantName = serializers.CharField(source="restaurant_name")
    customerId = serializers.IntegerField(source="customer_id")
    status = serializers.CharField()
    total = serializers.CharField()
    firstName = serializers.CharField(source="first_name")
    lastName = serializers.CharField(source="last_name")
    email = serializers.EmailField()
    phoneNumber = serializers.CharField(source="phone_number")
    deliveryAddress = serializers.CharField(source="delivery_address")
    notes = serializers.CharField(allow_blank=True)
    cancellationReason = serializers.CharField(
        source="cancellation_reason", allow_null=True
    )
    paymentMethod = serializers.CharField(source="payment_method", allow_null=True)
    paymentStatus = serializers.CharField(source="payment_status", allow_null=True)
    createdAt = serializers.CharField(source="created_at")
    updatedAt = serializers.CharField(source="updated_at")
    items = OrderItemSerializer(many=True)


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.values)
    cancellationReason = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=500
    )


class CustomerOrdersPageSerializer(serializers.Serializer):
    orders = OrderDetailSerializer(many=True)
    nextCursor = serializers.IntegerField(source="next_cursor", allow_null=True)
