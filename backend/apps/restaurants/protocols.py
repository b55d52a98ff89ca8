from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.restaurants.models import MenuItem, Restaurant


class RestaurantRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional["Restaurant"]: ...

    def get_active(self, restaurant_id: int) -> Optional["Restaurant"]: ...

    def list_active_names(self) -> Any: ...

    def search_with_managers(self, *, text: Optional[str], ordering: str) -> Any: ...

    def manager_restaurant_id(self, user_id: int) -> Optional[int]: ...

    def create(self, **data) -> "Restaurant": ...

    def update(self, obj: "Restaurant", **data) -> "Restaurant": ...

    def delete(self, obj: "Restaurant") -> None: ...

    def soft_delete(self, restaurant: "Restaurant") -> "Restaurant": ...


class MenuItemRepositoryProtocol(Protocol):
    def get_for_restaurant(self, restaurant_id: int, item_id: int) -> Optional["MenuItem"]: ...

    def search(self, restaurant_id: int, **kwargs) -> Any: ...

    def create(self, **data) -> "MenuItem": ...

    def update(self, obj: "MenuItem", **data) -> "MenuItem": ...

    def delete(self, obj: "MenuItem") -> None: ...

    def is_referenced(self, item: "MenuItem") -> bool: ...

    def soft_delete(self, item: "MenuItem") -> "MenuItem": ...

    def count(self, **filters) -> int: ...


class OrderStatsProtocol(Protocol):
    def exists(self, **filters) -> bool: ...

    def count_active(self, restaurant_id: int) -> int: ...

    def count_since(self, restaurant_id: int, since: datetime) -> int: ...

    def count_customers(self, restaurant_id: int) -> int: ...

    def delivered_total_since(self, restaurant_id: int, since: datetime) -> Decimal: ...
