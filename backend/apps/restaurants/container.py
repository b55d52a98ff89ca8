from __future__ import annotations

from django.core.cache import cache

from apps.orders.repositories import OrderRepository
from .repositories import MenuItemRepository, RestaurantRepository
from .services import MenuItemService, RestaurantService


def build_restaurant_service(*, disable_cache: bool = False) -> RestaurantService:
    return RestaurantService(
        restaurants=RestaurantRepository(),
        orders=OrderRepository(),
        menu_items=MenuItemRepository(),
        cache_backend=cache,
        disable_cache=disable_cache,
    )


def build_menu_item_service() -> MenuItemService:
    return MenuItemService(
        restaurants=RestaurantRepository(),
        menu_items=MenuItemRepository(),
    )
