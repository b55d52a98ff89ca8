from rest_framework import serializers


class RestaurantSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()


class ManagerSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField(allow_blank=True)
    email = serializers.EmailField()


class RestaurantSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    email = serializers.CharField(allow_blank=True)
    phoneNumber = serializers.CharField(source="phone_number", allow_blank=True)
    address = serializers.CharField(allow_blank=True)
    serviceArea = serializers.CharField(source="service_area", allow_blank=True)
    imageUrl = serializers.CharField(source="image_url", allow_blank=True)
    category = serializers.CharField(allow_blank=True)
    preparationTime = serializers.CharField(source="preparation_time", allow_blank=True)
    deliveryFee = serializers.CharField(source="delivery_fee")
    discountTag = serializers.CharField(source="discount_tag", allow_blank=True)
    rating = serializers.CharField()
    ratingCount = serializers.IntegerField(source="rating_count")
    isActive = serializers.BooleanField(source="is_active")
    createdAt = serializers.CharField(source="created_at", allow_null=True)


class RestaurantWithManagersSerializer(RestaurantSerializer):
    managers = ManagerSerializer(many=True)


class RestaurantWriteSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=150)
    description = serializers.CharField(required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    phoneNumber = serializers.CharField(required=False, allow_blank=True, max_length=30)
    address = serializers.CharField(required=False, allow_blank=True, max_length=255)
    serviceArea = serializers.CharField(required=False, allow_blank=True, max_length=255)
    imageUrl = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(required=False, allow_blank=True, max_length=100)
    preparationTime = serializers.CharField(
        required=False, allow_blank=True, max_length=50
    )
    deliveryFee = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=0, required=False
    )
    discountTag = serializers.CharField(required=False, allow_blank=True, max_length=100)
    isActive = serializers.BooleanField(required=False)


class MenuItemSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    restaurantId = serializers.IntegerField(source="restaurant_id")
    name = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    price = serializers.CharField()
    imageUrl = serializers.CharField(source="image_url", allow_blank=True)
    category = serializers.CharField(allow_blank=True)
    isAvailable = serializers.BooleanField(source="is_available")
    createdAt = serializers.CharField(source="created_at", allow_null=True)


class MenuItemWriteSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=1, max_length=150)
    description = serializers.CharField(required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    imageUrl = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(required=False, allow_blank=True, max_length=100)
    isAvailable = serializers.BooleanField(required=False)


class PublicMenuSerializer(serializers.Serializer):
    restaurant = RestaurantSerializer()
    menuItems = MenuItemSerializer(many=True)


class DashboardStatsSerializer(serializers.Serializer):
    menuItems = serializers.IntegerField(source="menu_items")
    activeOrders = serializers.IntegerField(source="active_orders")
    todaysOrders = serializers.IntegerField(source="todays_orders")
    customers = serializers.IntegerField()
    monthlySales = serializers.CharField(source="monthly_sales")
