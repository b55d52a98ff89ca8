from typing import Optional

from .dtos import CustomerProfileDTO, RestaurantUserDTO, UserDTO
from .models import Customer, User


def _restaurant_id(user: User) -> Optional[int]:
    manager = getattr(user, "restaurant_manager", None)
    return getattr(manager, "restaurant_id", None)


def user_to_dto(user: User) -> UserDTO:
    created = getattr(user, "created_at", None) or getattr(user, "date_joined", None)
    return UserDTO(
        id=user.id,
        email=user.email,
        name=user.name or user.get_full_name() or user.username,
        role=user.role,
        phone_number=user.phone_number,
        restaurant_id=_restaurant_id(user),
        created_at=created.isoformat() if created else None,
    )


def customer_to_dto(customer: Customer) -> CustomerProfileDTO:
    user = customer.user
    return CustomerProfileDTO(
        name=user.name,
        email=user.email,
        phone_number=customer.phone_number or user.phone_number,
        address=customer.address,
    )


def restaurant_user_to_dto(user: User, restaurant_id: int) -> RestaurantUserDTO:
    return RestaurantUserDTO(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        restaurant_id=restaurant_id,
    )
