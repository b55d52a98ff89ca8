from django.db import models
from django.contrib.auth.models import AbstractUser


class Role(models.TextChoices):
    CUSTOMER = "CUSTOMER", "Customer"
    RESTAURANT = "RESTAURANT", "Restaurant"
    ADMIN = "ADMIN", "Admin"


class User(AbstractUser):
    # id, username, password, is_active, is_staff, is_superuser, groups, user_permissions are inherited
    name = models.CharField(max_length=100, blank=True, default="")
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.CUSTOMER)
    phone_number = models.CharField(max_length=30, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["role"], name="user_role_idx"),
        ]

    def save(self, *args, **kwargs):
        # Admins always get Django staff access; superusers are admins.
        if self.is_superuser and self.role != Role.ADMIN:
            self.role = Role.ADMIN
        if self.role == Role.ADMIN:
            self.is_staff = True
        super().save(*args, **kwargs)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_customer(self) -> bool:
        return self.role == Role.CUSTOMER

    @property
    def is_restaurant_user(self) -> bool:
        return self.role == Role.RESTAURANT

    def __str__(self):
        return self.email or self.username


class Customer(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="customer")
    phone_number = models.CharField(max_length=30, blank=True, default="")
    address = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Customer {self.user_id}"
