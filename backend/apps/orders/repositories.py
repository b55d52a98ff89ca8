from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from django.db.models import Q, Sum

from apps.common.repository import GenericRepository
from .models import ACTIVE_STATUSES, Order, OrderItem, OrderStatus, PaymentTransaction


class OrderRepository(GenericRepository[Order]):
    def __init__(self):
        super().__init__(Order)

    def _detail_queryset(self):
        return self.model.objects.select_related(
            "restaurant", "customer", "payment"
        ).prefetch_related("items")

    def number_taken(self, order_number: int) -> bool:
        return self.model.objects.filter(order_number=order_number).exists()

    def create_order(self, *, items: Iterable[dict], payment: dict, **fields) -> Order:
        order = self.model.objects.create(**fields)
        OrderItem.objects.bulk_create([OrderItem(order=order, **item) for item in items])
        PaymentTransaction.objects.create(order=order, **payment)
        return order

    def by_number(self, order_number: int) -> Optional[Order]:
        return self._detail_queryset().filter(order_number=order_number).first()

    def get_detail(self, order_id: int) -> Optional[Order]:
        return self._detail_queryset().filter(id=order_id).first()

    def search(
        self,
        *,
        restaurant_id: Optional[int] = None,
        number_fragment: Optional[str] = None,
        status: Optional[str] = None,
        restaurant_name: Optional[str] = None,
        created_from: Optional[datetime] = None,
        created_before: Optional[datetime] = None,
        ordering: str = "-created_at",
    ):
        qs = self.model.objects.select_related("restaurant", "customer")
        if restaurant_id is not None:
            qs = qs.filter(restaurant_id=restaurant_id)
        if number_fragment:
            qs = qs.filter(order_number__icontains=number_fragment)
        if status:
            qs = qs.filter(status=status)
        if restaurant_name:
            qs = qs.filter(restaurant__name__icontains=restaurant_name)
        if created_from is not None:
            qs = qs.filter(created_at__gte=created_from)
        if created_before is not None:
            qs = qs.filter(created_at__lt=created_before)
        return qs.order_by(ordering, "-id")

    def for_customer(
        self, customer_id: int, *, statuses: Optional[Iterable[str]], before_id: Optional[int]
    ):
        qs = self.model.objects.select_related("restaurant").prefetch_related("items")
        qs = qs.filter(customer_id=customer_id)
        if statuses:
            qs = qs.filter(status__in=list(statuses))
        if before_id is not None:
            qs = qs.filter(id__lt=before_id)
        return qs.order_by("-id")

    # --- dashboard counters ---
    def count_active(self, restaurant_id: int) -> int:
        return self.model.objects.filter(
            restaurant_id=restaurant_id, status__in=ACTIVE_STATUSES
        ).count()

    def count_since(self, restaurant_id: int, since: datetime) -> int:
        return self.model.objects.filter(
            restaurant_id=restaurant_id, created_at__gte=since
        ).count()

    def count_customers(self, restaurant_id: int) -> int:
        return (
            self.model.objects.filter(restaurant_id=restaurant_id)
            .values("customer_id")
            .distinct()
            .count()
        )

    def delivered_total_since(self, restaurant_id: int, since: datetime) -> Decimal:
        agg = self.model.objects.filter(
            Q(restaurant_id=restaurant_id)
            & Q(status=OrderStatus.DELIVERED)
            & Q(created_at__gte=since)
        ).aggregate(total=Sum("total"))
        return agg["total"] or Decimal("0")
