from decimal import Decimal

from django.conf import settings
from django.db import models


class Restaurant(models.Model):
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True, default="")
    email = models.EmailField(blank=True, default="")
    phone_number = models.CharField(max_length=30, blank=True, default="")
    address = models.CharField(max_length=255, blank=True, default="")
    service_area = models.CharField(max_length=255, blank=True, default="")
    image_url = models.TextField(blank=True, default="")
    category = models.CharField(max_length=100, blank=True, default="")
    preparation_time = models.CharField(max_length=50, blank=True, default="")
    delivery_fee = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )
    discount_tag = models.CharField(max_length=100, blank=True, default="")
    rating = models.DecimalField(max_digits=3, decimal_places=1, default=Decimal("0.0"))
    rating_count = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    deleted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="restaurant_name_idx"),
            models.Index(fields=["is_active"], name="restaurant_active_idx"),
        ]

    def __str__(self):
        return self.name


class RestaurantManager(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="restaurant_manager",
    )
    restaurant = models.ForeignKey(
        Restaurant, on_delete=models.CASCADE, related_name="managers"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Manager {self.user_id} of restaurant {self.restaurant_id}"


class MenuItem(models.Model):
    restaurant = models.ForeignKey(
        Restaurant, on_delete=models.CASCADE, related_name="menu_items"
    )
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(max_digits=10, decimal_places=2)
    image_url = models.TextField(blank=True, default="")
    category = models.CharField(max_length=100, blank=True, default="")
    is_available = models.BooleanField(default=True)
    is_deleted = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["restaurant", "is_deleted"], name="menu_item_rest_idx"),
            models.Index(fields=["category"], name="menu_item_category_idx"),
        ]

    def __str__(self):
        return self.name
