from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Tuple

from apps.common import get_logger
from apps.common.listing import ListQuery, PageResult
from apps.common.money import money_str, to_money
from apps.common.periods import (
    PERIOD_ALL,
    date_bounds,
    normalize_period,
    parse_date,
    period_start,
)
from apps.orders.mappers import OrderMapper
from apps.users.models import Role
from .dtos import RestaurantSalesRowDTO, RestaurantSalesSummaryDTO, SalesSummaryDTO

logger = get_logger(__name__).bind(component="sales", layer="service")

ServiceError = Tuple[str, str, Optional[Any]]

DEFAULT_COMMISSION_RATE = Decimal("0.10")

# Commission is a fixed share of sales, so it orders exactly like totalSales.
SALES_SORT_FIELDS = {
    "totalSales": "total_sales",
    "orderCount": "order_count",
    "commission": "total_sales",
    "restaurantName": "restaurant_name",
}

RESTAURANT_ORDER_SORT_FIELDS = {
    "createdAt": "created_at",
    "total": "total",
    "orderNumber": "order_number",
}


def commission_for(amount: Any, rate: Decimal = DEFAULT_COMMISSION_RATE) -> Decimal:
    return to_money(Decimal(amount or 0) * rate)


class SalesService:
    def __init__(self, sales, restaurants, commission_rate: Decimal = DEFAULT_COMMISSION_RATE):
        self.sales = sales
        self.restaurants = restaurants
        self.commission_rate = Decimal(commission_rate)
        self.logger = logger.bind(service="SalesService")

    def _window(
        self, period_raw: Optional[str], start_raw: Optional[str], end_raw: Optional[str]
    ) -> Tuple[Optional[str], Optional[datetime], Optional[datetime], Optional[ServiceError]]:
        period = normalize_period(period_raw)
        if period is None:
            return None, None, None, (
                "VALIDATION_ERROR",
                "Invalid period",
                {"period": period_raw},
            )
        try:
            lower, upper = date_bounds(parse_date(start_raw), parse_date(end_raw))
        except ValueError as exc:
            return None, None, None, ("VALIDATION_ERROR", "Invalid date", {"detail": str(exc)})
        start = period_start(period)
        if start is not None and (lower is None or start > lower):
            lower = start
        return period, lower, upper, None

    def _commission(self, amount: Any) -> Decimal:
        return commission_for(amount, self.commission_rate)

    def get_sales(self, query: ListQuery) -> Tuple[PageResult, Optional[ServiceError]]:
        """Per-restaurant totals over delivered orders in the selected window."""
        period, lower, upper, error = self._window(
            query.filter_value("period"),
            query.filter_value("startDate"),
            query.filter_value("endDate"),
        )
        if error:
            return PageResult([], 0), error
        delivered = self.sales.delivered(
            created_from=lower,
            created_before=upper,
            restaurant_name=query.filter_value("restaurant"),
        )
        grouped = self.sales.per_restaurant(delivered, query.ordering(SALES_SORT_FIELDS))
        total = grouped.count()
        start, end = query.slice_bounds()
        rows = [
            RestaurantSalesRowDTO(
                id=f"{row['restaurant_id']}-{period}",
                restaurant_id=row["restaurant_id"],
                restaurant_name=row["restaurant_name"],
                total_sales=money_str(row["total_sales"]),
                order_count=row["order_count"],
                commission=money_str(self._commission(row["total_sales"])),
                period=period,
            )
            for row in grouped[start:end]
        ]
        self.logger.debug("Computed sales page", period=period, total=total)
        return PageResult(rows, total), None

    def get_summary(
        self, period_raw: Optional[str] = PERIOD_ALL
    ) -> Tuple[Optional[SalesSummaryDTO], Optional[ServiceError]]:
        period, lower, upper, error = self._window(period_raw, None, None)
        if error:
            return None, error
        totals = self.sales.totals(
            self.sales.delivered(created_from=lower, created_before=upper)
        )
        total_sales = totals["total_sales"] or Decimal("0")
        return (
            SalesSummaryDTO(
                total_sales=money_str(total_sales),
                total_orders=totals["order_count"] or 0,
                commission=money_str(self._commission(total_sales)),
                restaurant_count=totals["restaurant_count"] or 0,
            ),
            None,
        )

    def get_restaurant_sales(
        self, user: Any, restaurant_id: int, query: ListQuery
    ) -> Tuple[PageResult, Optional[ServiceError]]:
        """Delivered orders of one restaurant plus a summary.

        Managers only see their own restaurant; admins see any.
        """
        is_admin = getattr(user, "is_superuser", False) or user.role == Role.ADMIN
        if not is_admin:
            managed = self.restaurants.manager_restaurant_id(user.id)
            if managed != restaurant_id:
                self.logger.warning(
                    "Restaurant sales forbidden",
                    user_id=user.id,
                    restaurant_id=restaurant_id,
                )
                return PageResult([], 0), (
                    "FORBIDDEN",
                    "You do not have permission to access this restaurant",
                    {"restaurantId": str(restaurant_id)},
                )
        if not self.sales.restaurant_exists(restaurant_id):
            return PageResult([], 0), (
                "NOT_FOUND",
                "Restaurant not found",
                {"restaurantId": str(restaurant_id)},
            )
        period, lower, upper, error = self._window(
            query.filter_value("period"),
            query.filter_value("startDate"),
            query.filter_value("endDate"),
        )
        if error:
            return PageResult([], 0), error
        delivered = self.sales.delivered(
            created_from=lower, created_before=upper, restaurant_id=restaurant_id
        )
        totals = self.sales.totals(delivered)
        total_sales = totals["total_sales"] or Decimal("0")
        order_count = totals["order_count"] or 0
        average = to_money(total_sales / order_count) if order_count else Decimal("0")
        summary = RestaurantSalesSummaryDTO(
            total_sales=money_str(total_sales),
            order_count=order_count,
            commission=money_str(self._commission(total_sales)),
            average_order_value=money_str(average),
        )
        ordered = delivered.select_related("restaurant", "customer").order_by(
            query.ordering(RESTAURANT_ORDER_SORT_FIELDS), "-id"
        )
        start, end = query.slice_bounds()
        rows = [OrderMapper.to_list_dto(o) for o in ordered[start:end]]
        return PageResult(rows, order_count, {"summary": summary}), None
