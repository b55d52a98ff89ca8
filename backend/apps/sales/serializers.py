from rest_framework import serializers


class RestaurantSalesRowSerializer(serializers.Serializer):
    id = serializers.CharField()
    restaurantId = serializers.IntegerField(source="restaurant_id")
    restaurantName = serializers.CharField(source="restaurant_name")
    totalSales = serializers.CharField(source="total_sales")
    orderCount = serializers.IntegerField(source="order_count")
    commission = serializers.CharField()
    period = serializers.CharField()


class SalesSummarySerializer(serializers.Serializer):
    totalSales = serializers.CharField(source="total_sales")
    totalOrders = serializers.IntegerField(source="total_orders")
    commission = serializers.CharField()
    restaurantCount = serializers.IntegerField(source="restaurant_count")


class RestaurantSalesSummarySerializer(serializers.Serializer):
    totalSales = serializers.CharField(source="total_sales")
    orderCount = serializers.IntegerField(source="order_count")
    commission = serializers.CharField()
    averageOrderValue = serializers.CharField(source="average_order_value")
