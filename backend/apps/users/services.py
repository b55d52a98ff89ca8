from __future__ import annotations

from typing import Any, Optional, Tuple

from django.db import IntegrityError, transaction

from apps.common import get_logger
from apps.common.listing import ListQuery, PageResult
from .commands import CustomerRegisterCommand, RestaurantUserCreateCommand
from .dtos import CustomerProfileDTO, RestaurantUserDTO, UserDTO
from .mappers import customer_to_dto, restaurant_user_to_dto, user_to_dto
from .models import Role, User
from .protocols import (
    CustomerRepositoryProtocol,
    RestaurantLookupProtocol,
    UserRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="users", layer="service")

ServiceError = Tuple[str, str, Optional[Any]]

USER_SORT_FIELDS = {
    "createdAt": "created_at",
    "name": "name",
    "email": "email",
    "role": "role",
}


class UserService:
    def __init__(
        self,
        users: UserRepositoryProtocol,
        customers: CustomerRepositoryProtocol,
        restaurants: RestaurantLookupProtocol,
    ):
        self.users = users
        self.customers = customers
        self.restaurants = restaurants
        self.logger = logger.bind(service="UserService")

    def list_users(self, query: ListQuery) -> Tuple[PageResult, Optional[ServiceError]]:
        role = (query.filter_value("role") or "").upper() or None
        if role and role not in Role.values:
            return PageResult([], 0), (
                "VALIDATION_ERROR",
                "Invalid role",
                {"role": role},
            )
        qs = self.users.search(
            text=query.filter_value("filter"),
            role=role,
            ordering=query.ordering(USER_SORT_FIELDS),
        )
        total = qs.count()
        start, end = query.slice_bounds()
        rows = [user_to_dto(u) for u in qs[start:end]]
        self.logger.debug("Listed users", total=total, page=query.page, role=role)
        return PageResult(rows, total), None

    def create_restaurant_user(
        self, cmd: RestaurantUserCreateCommand
    ) -> Tuple[Optional[RestaurantUserDTO], Optional[ServiceError]]:
        self.logger.info(
            "Creating restaurant user",
            email=cmd.email,
            restaurant_id=cmd.restaurant_id,
        )
        restaurant = self.restaurants.get_active(cmd.restaurant_id)
        if restaurant is None:
            self.logger.warning(
                "Restaurant user creation failed: restaurant missing",
                restaurant_id=cmd.restaurant_id,
            )
            return None, (
                "NOT_FOUND",
                "Restaurant not found",
                {"restaurantId": str(cmd.restaurant_id)},
            )
        if self.users.email_taken(cmd.email):
            self.logger.info("Restaurant user email already in use", email=cmd.email)
            return None, ("CONFLICT", "Email already in use", {"email": cmd.email})
        try:
            with transaction.atomic():
                user: User = self.users.create_user(
                    username=cmd.email,
                    email=cmd.email,
                    password=cmd.password,
                    name=cmd.name,
                    phone_number=cmd.phone_number,
                    role=Role.RESTAURANT,
                )
                self.restaurants.assign_manager(user, restaurant)
        except IntegrityError as exc:
            self.logger.warning(
                "Restaurant user creation hit integrity error",
                email=cmd.email,
                error=str(exc),
            )
            return None, ("CONFLICT", "Email already in use", {"email": cmd.email})
        self.logger.info(
            "Restaurant user created", user_id=user.id, restaurant_id=restaurant.id
        )
        return restaurant_user_to_dto(user, restaurant.id), None

    def register_customer(
        self, cmd: CustomerRegisterCommand
    ) -> Tuple[Optional[UserDTO], Optional[ServiceError]]:
        self.logger.info("Registering customer", email=cmd.email)
        if self.users.email_taken(cmd.email):
            return None, ("CONFLICT", "Email already in use", {"email": cmd.email})
        try:
            with transaction.atomic():
                user: User = self.users.create_user(
                    username=cmd.email,
                    email=cmd.email,
                    password=cmd.password,
                    name=cmd.name,
                    phone_number=cmd.phone_number,
                    role=Role.CUSTOMER,
                )
                self.customers.create(
                    user=user,
                    phone_number=cmd.phone_number,
                    address=cmd.address,
                )
        except IntegrityError as exc:
            self.logger.warning(
                "Customer registration hit integrity error",
                email=cmd.email,
                error=str(exc),
            )
            return None, ("CONFLICT", "Email already in use", {"email": cmd.email})
        self.logger.info("Customer registered", user_id=user.id)
        return user_to_dto(user), None

    def get_current_customer(
        self, user_id: int
    ) -> Tuple[Optional[CustomerProfileDTO], Optional[ServiceError]]:
        customer = self.customers.for_user(user_id)
        if customer is None:
            self.logger.info("Customer profile not found", user_id=user_id)
            return None, (
                "NOT_FOUND",
                "Customer profile not found",
                {"userId": str(user_id)},
            )
        return customer_to_dto(customer), None
