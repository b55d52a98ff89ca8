from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class RestaurantUserCreateCommand:
    name: str
    email: str
    password: str
    phone_number: str
    restaurant_id: int

    @staticmethod
    def from_validated(data: Dict[str, Any]) -> "RestaurantUserCreateCommand":
        return RestaurantUserCreateCommand(
            name=data["name"].strip(),
            email=data["email"].strip().lower(),
            password=data["password"],
            phone_number=str(data.get("phoneNumber") or "").strip(),
            restaurant_id=int(data["restaurantId"]),
        )


@dataclass
class CustomerRegisterCommand:
    name: str
    email: str
    password: str
    phone_number: str
    address: str

    @staticmethod
    def from_validated(data: Dict[str, Any]) -> "CustomerRegisterCommand":
        return CustomerRegisterCommand(
            name=data["name"].strip(),
            email=data["email"].strip().lower(),
            password=data["password"],
            phone_number=str(data.get("phoneNumber") or "").strip(),
            address=str(data.get("address") or "").strip(),
        )
