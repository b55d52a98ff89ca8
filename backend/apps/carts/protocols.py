from __future__ import annotations

from typing import Any, Optional, Protocol


class CartStorageProtocol(Protocol):
    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class CartNotifierProtocol(Protocol):
    def item_added(self, item_name: str) -> None: ...

    def item_removed(self, item_name: str) -> None: ...

    def restaurant_switched(self, restaurant_name: str) -> None: ...

    def cart_cleared(self) -> None: ...


class MenuLookupProtocol(Protocol):
    def get_for_restaurant(self, restaurant_id: int, item_id: int) -> Optional[Any]: ...


class RestaurantLookupProtocol(Protocol):
    def get_active(self, restaurant_id: int) -> Optional[Any]: ...


class OrderPlacementProtocol(Protocol):
    def create_order(self, cmd: Any) -> tuple: ...
