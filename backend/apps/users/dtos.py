from dataclasses import dataclass
from typing import Optional


@dataclass
class UserDTO:
    id: int
    email: str
    name: str
    role: str
    phone_number: str
    restaurant_id: Optional[int]
    created_at: Optional[str]


@dataclass
class CustomerProfileDTO:
    name: str
    email: str
    phone_number: str
    address: str


@dataclass
class RestaurantUserDTO:
    id: int
    email: str
    name: str
    role: str
    restaurant_id: int
