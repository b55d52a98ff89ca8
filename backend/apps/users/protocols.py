from __future__ import annotations

from typing import Any, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.restaurants.models import Restaurant, RestaurantManager
    from apps.users.models import Customer, User


class UserRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional["User"]: ...

    def email_taken(self, email: str) -> bool: ...

    def create_user(self, **data) -> "User": ...

    def search(self, *, text: Optional[str], role: Optional[str], ordering: str) -> Any: ...


class CustomerRepositoryProtocol(Protocol):
    def create(self, **data) -> "Customer": ...

    def for_user(self, user_id: int) -> Optional["Customer"]: ...


class RestaurantLookupProtocol(Protocol):
    def get_active(self, restaurant_id: int) -> Optional["Restaurant"]: ...

    def assign_manager(self, user: "User", restaurant: "Restaurant") -> "RestaurantManager": ...
