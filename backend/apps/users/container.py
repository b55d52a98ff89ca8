from __future__ import annotations

from apps.restaurants.repositories import RestaurantRepository
from .repositories import CustomerRepository, UserRepository
from .services import UserService


def build_user_service() -> UserService:
    return UserService(
        users=UserRepository(),
        customers=CustomerRepository(),
        restaurants=RestaurantRepository(),
    )
