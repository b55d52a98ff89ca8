from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional

# API field name -> model attribute
RESTAURANT_FIELDS = {
    "name": "name",
    "description": "description",
    "email": "email",
    "phoneNumber": "phone_number",
    "address": "address",
    "serviceArea": "service_area",
    "imageUrl": "image_url",
    "category": "category",
    "preparationTime": "preparation_time",
    "deliveryFee": "delivery_fee",
    "discountTag": "discount_tag",
    "isActive": "is_active",
}

MENU_ITEM_FIELDS = {
    "name": "name",
    "description": "description",
    "price": "price",
    "imageUrl": "image_url",
    "category": "category",
    "isAvailable": "is_available",
}


def _translate(data: Dict[str, Any], mapping: Dict[str, str]) -> Dict[str, Any]:
    return {mapping[key]: value for key, value in data.items() if key in mapping}


@dataclass
class RestaurantWriteCommand:
    fields: Dict[str, Any] = field(default_factory=dict)
    restaurant_id: Optional[int] = None

    @staticmethod
    def from_validated(
        data: Dict[str, Any], restaurant_id: Optional[int] = None
    ) -> "RestaurantWriteCommand":
        return RestaurantWriteCommand(
            fields=_translate(data, RESTAURANT_FIELDS), restaurant_id=restaurant_id
        )


@dataclass
class MenuItemWriteCommand:
    fields: Dict[str, Any] = field(default_factory=dict)
    item_id: Optional[int] = None

    @staticmethod
    def from_validated(
        data: Dict[str, Any], item_id: Optional[int] = None
    ) -> "MenuItemWriteCommand":
        fields = _translate(data, MENU_ITEM_FIELDS)
        if "price" in fields and fields["price"] is not None:
            fields["price"] = Decimal(str(fields["price"]))
        return MenuItemWriteCommand(fields=fields, item_id=item_id)
