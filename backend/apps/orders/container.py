from __future__ import annotations

from django.conf import settings

from apps.restaurants.repositories import MenuItemRepository, RestaurantRepository
from apps.users.repositories import CustomerRepository
from .notifications import OrderEmailNotifier
from .repositories import OrderRepository
from .services import OrderService


def build_order_service() -> OrderService:
    return OrderService(
        orders=OrderRepository(),
        restaurants=RestaurantRepository(),
        menu_items=MenuItemRepository(),
        customers=CustomerRepository(),
        notifier=OrderEmailNotifier(
            enabled=getattr(settings, "ORDER_NOTIFICATIONS_ENABLED", True)
        ),
    )
