from __future__ import annotations

from decimal import Decimal

from django.conf import settings

from apps.restaurants.repositories import RestaurantRepository
from .repositories import SalesRepository
from .services import SalesService


def build_sales_service() -> SalesService:
    return SalesService(
        sales=SalesRepository(),
        restaurants=RestaurantRepository(),
        commission_rate=Decimal(
            str(getattr(settings, "PLATFORM_COMMISSION_RATE", "0.10"))
        ),
    )
