from datetime import datetime
from typing import Optional

from django.db.models import Count, F, Sum

from apps.orders.models import Order, OrderStatus
from apps.restaurants.models import Restaurant


class SalesRepository:
    """Read-only aggregations over delivered orders."""

    def delivered(
        self,
        *,
        created_from: Optional[datetime] = None,
        created_before: Optional[datetime] = None,
        restaurant_id: Optional[int] = None,
        restaurant_name: Optional[str] = None,
    ):
        qs = Order.objects.filter(status=OrderStatus.DELIVERED)
        if created_from is not None:
            qs = qs.filter(created_at__gte=created_from)
        if created_before is not None:
            qs = qs.filter(created_at__lt=created_before)
        if restaurant_id is not None:
            qs = qs.filter(restaurant_id=restaurant_id)
        if restaurant_name:
            qs = qs.filter(restaurant__name__icontains=restaurant_name)
        return qs

    def per_restaurant(self, qs, ordering: str):
        return (
            qs.values("restaurant_id", restaurant_name=F("restaurant__name"))
            .annotate(
                total_sales=Sum("total"),
                order_count=Count("id"),
            )
            .order_by(ordering, "restaurant_id")
        )

    def totals(self, qs):
        return qs.aggregate(
            total_sales=Sum("total"),
            order_count=Count("id"),
            restaurant_count=Count("restaurant_id", distinct=True),
        )

    def restaurant_exists(self, restaurant_id: int) -> bool:
        return Restaurant.objects.filter(id=restaurant_id).exists()
