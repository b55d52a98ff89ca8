from __future__ import annotations

from django.conf import settings

from apps.orders.container import build_order_service
from apps.restaurants.repositories import MenuItemRepository, RestaurantRepository
from .services import CartService
from .storage import CacheCartStorage


def build_cart_service() -> CartService:
    return CartService(
        restaurants=RestaurantRepository(),
        menu_items=MenuItemRepository(),
        orders=build_order_service(),
        storage=CacheCartStorage(ttl=getattr(settings, "CART_TTL_SECONDS", None)),
    )
