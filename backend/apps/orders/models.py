from django.conf import settings
from django.db import models

from apps.restaurants.models import MenuItem, Restaurant


class OrderStatus(models.TextChoices):
    PLACED = "PLACED", "Placed"
    PREPARING = "PREPARING", "Preparing"
    DISPATCHED = "DISPATCHED", "Dispatched"
    DELIVERED = "DELIVERED", "Delivered"
    CANCELLED = "CANCELLED", "Cancelled"


ACTIVE_STATUSES = (OrderStatus.PLACED, OrderStatus.PREPARING, OrderStatus.DISPATCHED)


class PaymentStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    COMPLETED = "COMPLETED", "Completed"
    FAILED = "FAILED", "Failed"


class Order(models.Model):
    order_number = models.PositiveIntegerField(unique=True)
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="orders"
    )
    restaurant = models.ForeignKey(
        Restaurant, on_delete=models.PROTECT, related_name="orders"
    )
    status = models.CharField(
        max_length=20, choices=OrderStatus.choices, default=OrderStatus.PLACED
    )
    total = models.DecimalField(max_digits=10, decimal_places=2)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField()
    phone_number = models.CharField(max_length=30)
    delivery_address = models.TextField()
    notes = models.TextField(blank=True, default="")
    cancellation_reason = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["status"], name="order_status_idx"),
            models.Index(fields=["restaurant", "status"], name="order_rest_status_idx"),
            models.Index(fields=["created_at"], name="order_created_idx"),
        ]

    @property
    def display_number(self) -> str:
        return f"#{self.order_number}"

    def __str__(self):
        return self.display_number


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    menu_item = models.ForeignKey(
        MenuItem, on_delete=models.PROTECT, related_name="order_items"
    )
    name = models.CharField(max_length=150)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField()

    def __str__(self):
        return f"{self.quantity} x {self.name}"


class PaymentTransaction(models.Model):
    order = models.OneToOneField(Order, on_delete=models.CASCADE, related_name="payment")
    payment_method = models.CharField(max_length=30, default="mobile_money")
    mobile_number = models.CharField(max_length=30)
    transaction_id = models.CharField(max_length=20)
    provider_name = models.CharField(max_length=50, blank=True, default="")
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(
        max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Payment {self.transaction_id} for order {self.order_id}"
