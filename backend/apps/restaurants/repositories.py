from typing import Optional

from django.db.models import Count, Prefetch, Q
from django.utils import timezone

from apps.common.repository import GenericRepository
from .models import MenuItem, Restaurant, RestaurantManager


class RestaurantRepository(GenericRepository[Restaurant]):
    def __init__(self):
        super().__init__(Restaurant)

    def active(self):
        return self.model.objects.filter(is_active=True, deleted_at__isnull=True)

    def get_active(self, restaurant_id: int) -> Optional[Restaurant]:
        return self.active().filter(id=restaurant_id).first()

    def list_active_names(self):
        return self.active().order_by("name").values("id", "name")

    def search_with_managers(self, *, text: Optional[str], ordering: str):
        managers = RestaurantManager.objects.select_related("user").order_by("id")
        qs = (
            self.model.objects.filter(deleted_at__isnull=True)
            .annotate(manager_count=Count("managers", distinct=True))
            .prefetch_related(Prefetch("managers", queryset=managers))
        )
        if text:
            qs = qs.filter(Q(name__icontains=text) | Q(category__icontains=text))
        return qs.order_by(ordering, "id")

    def assign_manager(self, user, restaurant: Restaurant) -> RestaurantManager:
        return RestaurantManager.objects.create(user=user, restaurant=restaurant)

    def manager_restaurant_id(self, user_id: int) -> Optional[int]:
        return (
            RestaurantManager.objects.filter(user_id=user_id)
            .values_list("restaurant_id", flat=True)
            .first()
        )

    def soft_delete(self, restaurant: Restaurant) -> Restaurant:
        restaurant.is_active = False
        restaurant.deleted_at = timezone.now()
        restaurant.save(update_fields=["is_active", "deleted_at", "updated_at"])
        return restaurant


class MenuItemRepository(GenericRepository[MenuItem]):
    def __init__(self):
        super().__init__(MenuItem)

    def for_restaurant(self, restaurant_id: int):
        return self.model.objects.filter(restaurant_id=restaurant_id, is_deleted=False)

    def get_for_restaurant(self, restaurant_id: int, item_id: int) -> Optional[MenuItem]:
        return self.for_restaurant(restaurant_id).filter(id=item_id).first()

    def search(
        self,
        restaurant_id: int,
        *,
        name: Optional[str],
        category: Optional[str],
        is_available: Optional[bool],
        ordering: str,
    ):
        qs = self.for_restaurant(restaurant_id)
        if name:
            qs = qs.filter(name__icontains=name)
        if category:
            qs = qs.filter(category__iexact=category)
        if is_available is not None:
            qs = qs.filter(is_available=is_available)
        return qs.order_by(ordering, "id")

    def available_by_ids(self, restaurant_id: int, item_ids):
        return {
            item.id: item
            for item in self.for_restaurant(restaurant_id).filter(
                id__in=list(item_ids), is_available=True
            )
        }

    def is_referenced(self, item: MenuItem) -> bool:
        return item.order_items.exists()

    def soft_delete(self, item: MenuItem) -> MenuItem:
        item.is_deleted = True
        item.is_available = False
        item.save(update_fields=["is_deleted", "is_available", "updated_at"])
        return item
