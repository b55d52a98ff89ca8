from __future__ import annotations

import random
from decimal import Decimal
from typing import Any, Callable, Optional, Protocol, Tuple

from django.db import IntegrityError, transaction

from apps.common import get_logger
from apps.common.listing import ListQuery, PageResult
from apps.common.money import to_money
from apps.common.periods import date_bounds, parse_date
from apps.users.models import Role
from .commands import OrderCreateCommand, OrderStatusUpdateCommand
from .dtos import CustomerOrdersPageDTO, OrderCreatedDTO, OrderDetailDTO
from .mappers import OrderMapper
from .models import OrderStatus

logger = get_logger(__name__).bind(component="orders", layer="service")

ServiceError = Tuple[str, str, Optional[Any]]

ORDER_NUMBER_MIN = 1000
ORDER_NUMBER_MAX = 9999
ORDER_NUMBER_ATTEMPTS = 5

ORDER_SORT_FIELDS = {
    "createdAt": "created_at",
    "total": "total",
    "status": "status",
    "orderNumber": "order_number",
    "restaurantName": "restaurant__name",
}

# Customer-facing status groups.
CUSTOMER_STATUS_GROUPS = {
    "pending": (OrderStatus.PLACED, OrderStatus.PREPARING, OrderStatus.DISPATCHED),
    "delivered": (OrderStatus.DELIVERED,),
    "failed": (OrderStatus.CANCELLED,),
}

CUSTOMER_PAGE_DEFAULT = 10
CUSTOMER_PAGE_MAX = 50


class NotifierProtocol(Protocol):
    def order_placed(self, order: Any) -> None: ...


def parse_order_number(raw: Any) -> Optional[int]:
    text = str(raw or "").strip().lstrip("#")
    return int(text) if text.isdigit() else None


class OrderService:
    def __init__(
        self,
        orders,
        restaurants,
        menu_items,
        customers,
        notifier: NotifierProtocol,
        number_generator: Optional[Callable[[], int]] = None,
    ):
        self.orders = orders
        self.restaurants = restaurants
        self.menu_items = menu_items
        self.customers = customers
        self.notifier = notifier
        self.number_generator = number_generator or (
            lambda: random.randint(ORDER_NUMBER_MIN, ORDER_NUMBER_MAX)
        )
        self.logger = logger.bind(service="OrderService")

    def create_order(
        self, cmd: OrderCreateCommand
    ) -> Tuple[Optional[OrderCreatedDTO], Optional[ServiceError]]:
        log = self.logger.bind(customer_id=cmd.customer_id, restaurant_id=cmd.restaurant_id)
        log.info("Creating order", lines=len(cmd.items))
        if cmd.total <= 0:
            return None, (
                "VALIDATION_ERROR",
                "Order total must be greater than zero",
                {"total": str(cmd.total)},
            )
        if not cmd.items:
            return None, ("VALIDATION_ERROR", "Your cart is empty", None)

        customer = self.customers.for_user(cmd.customer_id)
        if customer is None or customer.user.role != Role.CUSTOMER:
            log.warning("Order rejected: caller has no customer profile")
            return None, (
                "FORBIDDEN",
                "Only customers can place orders",
                {"userId": str(cmd.customer_id)},
            )

        restaurant = self.restaurants.get_active(cmd.restaurant_id)
        if restaurant is None:
            return None, (
                "NOT_FOUND",
                "Restaurant not found",
                {"restaurantId": str(cmd.restaurant_id)},
            )

        wanted = [line.menu_item_id for line in cmd.items]
        available = self.menu_items.available_by_ids(restaurant.id, wanted)
        missing = [item_id for item_id in wanted if item_id not in available]
        if missing:
            log.warning("Order rejected: unavailable items", missing=missing)
            return None, (
                "VALIDATION_ERROR",
                "Some items are no longer available",
                {"items": [str(i) for i in missing]},
            )

        lines = []
        subtotal = Decimal("0")
        for line in cmd.items:
            menu_item = available[line.menu_item_id]
            subtotal += menu_item.price * line.quantity
            lines.append(
                {
                    "menu_item": menu_item,
                    "name": menu_item.name,
                    "price": menu_item.price,
                    "quantity": line.quantity,
                }
            )
        expected_total = to_money(subtotal + restaurant.delivery_fee)
        if to_money(cmd.total) != expected_total:
            log.warning(
                "Order rejected: total mismatch",
                submitted=str(cmd.total),
                expected=str(expected_total),
            )
            return None, (
                "VALIDATION_ERROR",
                "Order total does not match the cart",
                {"total": str(cmd.total), "expected": str(expected_total)},
            )

        delivery = cmd.delivery
        fields = dict(
            customer_id=cmd.customer_id,
            restaurant=restaurant,
            status=OrderStatus.PLACED,
            total=expected_total,
            first_name=delivery.first_name,
            last_name=delivery.last_name,
            email=delivery.email,
            phone_number=delivery.phone_number,
            delivery_address=delivery.delivery_address,
            notes=delivery.notes,
            items=lines,
            payment={
                "payment_method": cmd.payment.payment_method,
                "mobile_number": cmd.payment.mobile_number,
                "transaction_id": cmd.payment.transaction_id,
                "provider_name": cmd.payment.provider_name,
                "amount": expected_total,
            },
        )
        order = None
        for attempt in range(1, ORDER_NUMBER_ATTEMPTS + 1):
            candidate = self.number_generator()
            if self.orders.number_taken(candidate):
                log.debug("Order number collision", candidate=candidate, attempt=attempt)
                continue
            try:
                with transaction.atomic():
                    order = self.orders.create_order(order_number=candidate, **fields)
                break
            except IntegrityError as exc:
                log.warning(
                    "Order number taken at insert",
                    candidate=candidate,
                    attempt=attempt,
                    error=str(exc),
                )
        if order is None:
            log.error("Could not allocate order number", attempts=ORDER_NUMBER_ATTEMPTS)
            return None, ("CONFLICT", "Could not allocate an order number", None)

        log.info("Order placed", order_id=order.id, order_number=order.display_number)
        self.notifier.order_placed(order)
        return (
            OrderCreatedDTO(
                order_id=order.id,
                order_number=order.display_number,
                created_at=order.created_at.isoformat(),
            ),
            None,
        )

    # --- listings ---
    def _search(
        self, query: ListQuery, *, restaurant_id: Optional[int]
    ) -> Tuple[PageResult, Optional[ServiceError]]:
        status = (query.filter_value("status") or "ALL").upper()
        if status != "ALL" and status not in OrderStatus.values:
            return PageResult([], 0), ("VALIDATION_ERROR", "Invalid status", {"status": status})
        try:
            created_from, created_before = date_bounds(
                parse_date(query.filter_value("startDate")),
                parse_date(query.filter_value("endDate")),
            )
        except ValueError as exc:
            return PageResult([], 0), ("VALIDATION_ERROR", "Invalid date", {"detail": str(exc)})

        raw_number = query.filter_value("filter")
        number_fragment = None
        if raw_number:
            number_fragment = raw_number.strip().lstrip("#")
            if not number_fragment.isdigit():
                return PageResult([], 0), None

        qs = self.orders.search(
            restaurant_id=restaurant_id,
            number_fragment=number_fragment,
            status=None if status == "ALL" else status,
            restaurant_name=query.filter_value("restaurant"),
            created_from=created_from,
            created_before=created_before,
            ordering=query.ordering(ORDER_SORT_FIELDS),
        )
        total = qs.count()
        start, end = query.slice_bounds()
        rows = [OrderMapper.to_list_dto(o) for o in qs[start:end]]
        return PageResult(rows, total), None

    def list_all_orders(self, query: ListQuery) -> Tuple[PageResult, Optional[ServiceError]]:
        return self._search(query, restaurant_id=None)

    def list_restaurant_orders(
        self, user_id: int, query: ListQuery
    ) -> Tuple[PageResult, Optional[ServiceError]]:
        restaurant_id = self.restaurants.manager_restaurant_id(user_id)
        if restaurant_id is None:
            return PageResult([], 0), (
                "FORBIDDEN",
                "You are not assigned to a restaurant",
                {"userId": str(user_id)},
            )
        requested = query.filter_value("restaurantId")
        if requested and requested != str(restaurant_id):
            self.logger.warning(
                "Restaurant order list forbidden",
                user_id=user_id,
                requested=requested,
            )
            return PageResult([], 0), (
                "FORBIDDEN",
                "You do not have permission to access this restaurant",
                {"restaurantId": requested},
            )
        return self._search(query, restaurant_id=restaurant_id)

    # --- status ---
    def update_status(
        self, user_id: int, cmd: OrderStatusUpdateCommand
    ) -> Tuple[Optional[OrderDetailDTO], Optional[ServiceError]]:
        if cmd.status not in OrderStatus.values:
            return None, ("VALIDATION_ERROR", "Invalid status", {"status": cmd.status})
        order = self.orders.get_detail(cmd.order_id)
        if order is None:
            return None, ("NOT_FOUND", "Order not found", {"id": str(cmd.order_id)})
        restaurant_id = self.restaurants.manager_restaurant_id(user_id)
        if restaurant_id != order.restaurant_id:
            self.logger.warning(
                "Order status update forbidden",
                user_id=user_id,
                order_id=order.id,
            )
            return None, (
                "FORBIDDEN",
                "You do not have permission to access this restaurant",
                {"orderId": str(order.id)},
            )
        reason = cmd.cancellation_reason if cmd.status == OrderStatus.CANCELLED else None
        order = self.orders.update(order, status=cmd.status, cancellation_reason=reason)
        self.logger.info("Order status updated", order_id=order.id, status=cmd.status)
        return OrderMapper.to_detail_dto(order), None

    # --- customer views ---
    def list_customer_orders(
        self,
        user_id: int,
        *,
        status_group: Optional[str],
        limit: Optional[int],
        cursor: Optional[int],
    ) -> Tuple[Optional[CustomerOrdersPageDTO], Optional[ServiceError]]:
        statuses = None
        if status_group:
            statuses = CUSTOMER_STATUS_GROUPS.get(status_group.lower())
            if statuses is None:
                return None, (
                    "VALIDATION_ERROR",
                    "Invalid status",
                    {"status": status_group},
                )
        limit = min(max(int(limit or CUSTOMER_PAGE_DEFAULT), 1), CUSTOMER_PAGE_MAX)
        qs = self.orders.for_customer(user_id, statuses=statuses, before_id=cursor)
        # One extra row tells whether another page exists.
        window = list(qs[: limit + 1])
        next_cursor = None
        if len(window) > limit:
            window = window[:limit]
            next_cursor = window[-1].id
        return (
            CustomerOrdersPageDTO(
                orders=[OrderMapper.to_detail_dto(o) for o in window],
                next_cursor=next_cursor,
            ),
            None,
        )

    def get_by_display_number(
        self, user: Any, raw_number: Any
    ) -> Tuple[Optional[OrderDetailDTO], Optional[ServiceError]]:
        number = parse_order_number(raw_number)
        order = self.orders.by_number(number) if number is not None else None
        if order is None:
            return None, ("NOT_FOUND", "Order not found", {"orderNumber": str(raw_number)})
        role = Role.ADMIN if getattr(user, "is_superuser", False) else user.role
        allowed = (
            role == Role.ADMIN
            or (role == Role.CUSTOMER and order.customer_id == user.id)
            or (
                role == Role.RESTAURANT
                and self.restaurants.manager_restaurant_id(user.id) == order.restaurant_id
            )
        )
        if not allowed:
            self.logger.warning(
                "Order view forbidden", user_id=user.id, order_id=order.id
            )
            return None, (
                "FORBIDDEN",
                "You do not have permission to view this order",
                {"orderNumber": order.display_number},
            )
        return OrderMapper.to_detail_dto(order), None
