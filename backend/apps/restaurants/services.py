from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Tuple

from django.db import transaction
from django.utils import timezone

from apps.common import get_logger
from apps.common.listing import ListQuery, PageResult
from apps.common.money import money_str
from apps.common.periods import PERIOD_DAILY, PERIOD_MONTHLY, period_start
from .commands import MenuItemWriteCommand, RestaurantWriteCommand
from .dtos import DashboardStatsDTO, MenuItemDTO, RestaurantDTO, RestaurantSummaryDTO
from .mappers import MenuItemMapper, RestaurantMapper
from .protocols import (
    MenuItemRepositoryProtocol,
    OrderStatsProtocol,
    RestaurantRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="restaurants", layer="service")

ServiceError = Tuple[str, str, Optional[Any]]

RESTAURANT_SORT_FIELDS = {
    "name": "name",
    "createdAt": "created_at",
    "rating": "rating",
    "category": "category",
}

MENU_ITEM_SORT_FIELDS = {
    "createdAt": "created_at",
    "name": "name",
    "price": "price",
    "category": "category",
}


class CacheBackendProtocol(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None: ...


def _not_assigned(user_id: int) -> ServiceError:
    return (
        "FORBIDDEN",
        "You are not assigned to a restaurant",
        {"userId": str(user_id)},
    )


class RestaurantService:
    def __init__(
        self,
        restaurants: RestaurantRepositoryProtocol,
        orders: OrderStatsProtocol,
        menu_items: MenuItemRepositoryProtocol,
        cache_backend: CacheBackendProtocol,
        disable_cache: bool = False,
    ):
        self.restaurants = restaurants
        self.orders = orders
        self.menu_items = menu_items
        self.cache = cache_backend
        self.disable_cache = disable_cache
        self.logger = logger.bind(service="RestaurantService")
        self._cache_prefix = "restaurants:active"
        self._cache_version_key = f"{self._cache_prefix}:version"

    def _get_cache_version(self) -> int:
        return self.cache.get(self._cache_version_key) or 1

    def _bump_cache_version(self) -> None:
        version = self._get_cache_version() + 1
        self.cache.set(self._cache_version_key, version, timeout=None)
        self.logger.debug("Bumped restaurant cache version", new_version=version)

    def list_active(self) -> List[RestaurantSummaryDTO]:
        """Active, non-deleted restaurants ordered by name (read-through cached)."""
        if self.disable_cache:
            rows = list(self.restaurants.list_active_names())
        else:
            key = f"{self._cache_prefix}:v{self._get_cache_version()}"
            rows = self.cache.get(key)
            if rows is None:
                self.logger.debug("Active restaurant cache miss", cache_key=key)
                rows = list(self.restaurants.list_active_names())
                self.cache.set(key, rows)
        return [RestaurantSummaryDTO(id=r["id"], name=r["name"]) for r in rows]

    def list_with_managers(
        self, query: ListQuery
    ) -> Tuple[PageResult, Optional[ServiceError]]:
        qs = self.restaurants.search_with_managers(
            text=query.filter_value("filter"),
            ordering=query.ordering(RESTAURANT_SORT_FIELDS),
        )
        total = qs.count()
        start, end = query.slice_bounds()
        rows = RestaurantMapper.many_to_dto(qs[start:end], with_managers=True)
        return PageResult(rows, total), None

    def get_restaurant(
        self, restaurant_id: int, *, include_inactive: bool = False
    ) -> Tuple[Optional[RestaurantDTO], Optional[ServiceError]]:
        restaurant = (
            self.restaurants.get(id=restaurant_id, deleted_at__isnull=True)
            if include_inactive
            else self.restaurants.get_active(restaurant_id)
        )
        if restaurant is None:
            return None, (
                "NOT_FOUND",
                "Restaurant not found",
                {"id": str(restaurant_id)},
            )
        return RestaurantMapper.to_dto(restaurant), None

    def get_public_menu(
        self, restaurant_id: int
    ) -> Tuple[Optional[Dict[str, Any]], Optional[ServiceError]]:
        dto, error = self.get_restaurant(restaurant_id)
        if error:
            return None, error
        items = self.menu_items.search(
            restaurant_id,
            name=None,
            category=None,
            is_available=True,
            ordering="category",
        )
        return {
            "restaurant": dto,
            "menuItems": [MenuItemMapper.to_dto(i) for i in items],
        }, None

    def create_restaurant(self, cmd: RestaurantWriteCommand) -> RestaurantDTO:
        self.logger.info("Creating restaurant", name=cmd.fields.get("name"))
        restaurant = self.restaurants.create(**cmd.fields)
        self._bump_cache_version()
        self.logger.info("Restaurant created", restaurant_id=restaurant.id)
        return RestaurantMapper.to_dto(restaurant)

    def update_restaurant(
        self, cmd: RestaurantWriteCommand
    ) -> Tuple[Optional[RestaurantDTO], Optional[ServiceError]]:
        restaurant = self.restaurants.get(id=cmd.restaurant_id, deleted_at__isnull=True)
        if restaurant is None:
            self.logger.warning(
                "Restaurant update failed: not found", restaurant_id=cmd.restaurant_id
            )
            return None, (
                "NOT_FOUND",
                "Restaurant not found",
                {"id": str(cmd.restaurant_id)},
            )
        restaurant = self.restaurants.update(restaurant, **cmd.fields)
        self._bump_cache_version()
        self.logger.info(
            "Restaurant updated",
            restaurant_id=restaurant.id,
            fields=",".join(sorted(cmd.fields)),
        )
        return RestaurantMapper.to_dto(restaurant), None

    def delete_restaurant(
        self, restaurant_id: int
    ) -> Tuple[Optional[str], Optional[ServiceError]]:
        """Soft-delete restaurants with order history; hard-delete the rest.

        Returns ``"soft"`` or ``"hard"``.
        """
        restaurant = self.restaurants.get(id=restaurant_id, deleted_at__isnull=True)
        if restaurant is None:
            return None, (
                "NOT_FOUND",
                "Restaurant not found",
                {"id": str(restaurant_id)},
            )
        if self.orders.exists(restaurant_id=restaurant_id):
            self.restaurants.soft_delete(restaurant)
            mode = "soft"
        else:
            self.restaurants.delete(restaurant)
            mode = "hard"
        self._bump_cache_version()
        self.logger.info("Restaurant deleted", restaurant_id=restaurant_id, mode=mode)
        return mode, None

    def get_dashboard_stats(
        self, user_id: int
    ) -> Tuple[Optional[DashboardStatsDTO], Optional[ServiceError]]:
        restaurant_id = self.restaurants.manager_restaurant_id(user_id)
        if restaurant_id is None:
            self.logger.warning("Dashboard requested by unassigned user", user_id=user_id)
            return None, _not_assigned(user_id)
        now = timezone.now()
        stats = DashboardStatsDTO(
            menu_items=self.menu_items.count(restaurant_id=restaurant_id, is_deleted=False),
            active_orders=self.orders.count_active(restaurant_id),
            todays_orders=self.orders.count_since(
                restaurant_id, period_start(PERIOD_DAILY, now)
            ),
            customers=self.orders.count_customers(restaurant_id),
            monthly_sales=money_str(
                self.orders.delivered_total_since(
                    restaurant_id, period_start(PERIOD_MONTHLY, now)
                )
            ),
        )
        self.logger.debug("Computed dashboard stats", restaurant_id=restaurant_id)
        return stats, None


class MenuItemService:
    """Menu management scoped to the calling manager's restaurant."""

    def __init__(
        self,
        restaurants: RestaurantRepositoryProtocol,
        menu_items: MenuItemRepositoryProtocol,
    ):
        self.restaurants = restaurants
        self.menu_items = menu_items
        self.logger = logger.bind(service="MenuItemService")

    def _restaurant_for(self, user_id: int) -> Tuple[Optional[int], Optional[ServiceError]]:
        restaurant_id = self.restaurants.manager_restaurant_id(user_id)
        if restaurant_id is None:
            return None, _not_assigned(user_id)
        return restaurant_id, None

    def list_items(
        self, user_id: int, query: ListQuery
    ) -> Tuple[PageResult, Optional[ServiceError]]:
        restaurant_id, error = self._restaurant_for(user_id)
        if error:
            return PageResult([], 0), error
        raw_available = (query.filter_value("isAvailable") or "").lower()
        is_available = {"true": True, "false": False}.get(raw_available)
        qs = self.menu_items.search(
            restaurant_id,
            name=query.filter_value("filter"),
            category=query.filter_value("category"),
            is_available=is_available,
            ordering=query.ordering(MENU_ITEM_SORT_FIELDS),
        )
        total = qs.count()
        start, end = query.slice_bounds()
        rows = [MenuItemMapper.to_dto(i) for i in qs[start:end]]
        return PageResult(rows, total), None

    def get_item(
        self, user_id: int, item_id: int
    ) -> Tuple[Optional[MenuItemDTO], Optional[ServiceError]]:
        restaurant_id, error = self._restaurant_for(user_id)
        if error:
            return None, error
        item = self.menu_items.get_for_restaurant(restaurant_id, item_id)
        if item is None:
            return None, ("NOT_FOUND", "Menu item not found", {"id": str(item_id)})
        return MenuItemMapper.to_dto(item), None

    def create_item(
        self, user_id: int, cmd: MenuItemWriteCommand
    ) -> Tuple[Optional[MenuItemDTO], Optional[ServiceError]]:
        restaurant_id, error = self._restaurant_for(user_id)
        if error:
            return None, error
        item = self.menu_items.create(restaurant_id=restaurant_id, **cmd.fields)
        self.logger.info(
            "Menu item created", restaurant_id=restaurant_id, item_id=item.id
        )
        return MenuItemMapper.to_dto(item), None

    def update_item(
        self, user_id: int, cmd: MenuItemWriteCommand
    ) -> Tuple[Optional[MenuItemDTO], Optional[ServiceError]]:
        restaurant_id, error = self._restaurant_for(user_id)
        if error:
            return None, error
        item = self.menu_items.get_for_restaurant(restaurant_id, cmd.item_id)
        if item is None:
            return None, ("NOT_FOUND", "Menu item not found", {"id": str(cmd.item_id)})
        item = self.menu_items.update(item, **cmd.fields)
        self.logger.info("Menu item updated", item_id=item.id)
        return MenuItemMapper.to_dto(item), None

    def delete_item(
        self, user_id: int, item_id: int
    ) -> Tuple[Optional[str], Optional[ServiceError]]:
        """Items referenced by past orders are only hidden."""
        restaurant_id, error = self._restaurant_for(user_id)
        if error:
            return None, error
        item = self.menu_items.get_for_restaurant(restaurant_id, item_id)
        if item is None:
            return None, ("NOT_FOUND", "Menu item not found", {"id": str(item_id)})
        with transaction.atomic():
            if self.menu_items.is_referenced(item):
                self.menu_items.soft_delete(item)
                mode = "soft"
            else:
                self.menu_items.delete(item)
                mode = "hard"
        self.logger.info("Menu item deleted", item_id=item_id, mode=mode)
        return mode, None
