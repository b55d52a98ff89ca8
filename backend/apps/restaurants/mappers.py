from typing import Iterable, List

from apps.common.money import money_str
from .dtos import ManagerDTO, MenuItemDTO, RestaurantDTO
from .models import MenuItem, Restaurant


def _iso(value):
    return value.isoformat() if value else None


class RestaurantMapper:
    @staticmethod
    def to_dto(restaurant: Restaurant, *, with_managers: bool = False) -> RestaurantDTO:
        managers: List[ManagerDTO] = []
        if with_managers:
            managers = [
                ManagerDTO(id=m.user.id, name=m.user.name, email=m.user.email)
                for m in restaurant.managers.all()
            ]
        return RestaurantDTO(
            id=restaurant.id,
            name=restaurant.name,
            description=restaurant.description,
            email=restaurant.email,
            phone_number=restaurant.phone_number,
            address=restaurant.address,
            service_area=restaurant.service_area,
            image_url=restaurant.image_url,
            category=restaurant.category,
            preparation_time=restaurant.preparation_time,
            delivery_fee=money_str(restaurant.delivery_fee),
            discount_tag=restaurant.discount_tag,
            rating=str(restaurant.rating),
            rating_count=restaurant.rating_count,
            is_active=restaurant.is_active,
            created_at=_iso(restaurant.created_at),
            managers=managers,
        )

    @staticmethod
    def many_to_dto(
        restaurants: Iterable[Restaurant], *, with_managers: bool = False
    ) -> List[RestaurantDTO]:
        return [
            RestaurantMapper.to_dto(r, with_managers=with_managers) for r in restaurants
        ]


class MenuItemMapper:
    @staticmethod
    def to_dto(item: MenuItem) -> MenuItemDTO:
        return MenuItemDTO(
            id=item.id,
            restaurant_id=item.restaurant_id,
            name=item.name,
            description=item.description,
            price=money_str(item.price),
            image_url=item.image_url,
            category=item.category,
            is_available=item.is_available,
            created_at=_iso(item.created_at),
        )
