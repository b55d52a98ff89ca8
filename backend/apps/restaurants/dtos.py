from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class RestaurantSummaryDTO:
    id: int
    name: str


@dataclass
class ManagerDTO:
    id: int
    name: str
    email: str


@dataclass
class RestaurantDTO:
    id: int
    name: str
    description: str
    email: str
    phone_number: str
    address: str
    service_area: str
    image_url: str
    category: str
    preparation_time: str
    delivery_fee: str
    discount_tag: str
    rating: str
    rating_count: int
    is_active: bool
    created_at: Optional[str] = None
    managers: List[ManagerDTO] = field(default_factory=list)


@dataclass
class MenuItemDTO:
    id: int
    restaurant_id: int
    name: str
    description: str
    price: str
    image_url: str
    category: str
    is_available: bool
    created_at: Optional[str] = None


@dataclass
class DashboardStatsDTO:
    menu_items: int
    active_orders: int
    todays_orders: int
    customers: int
    monthly_sales: str
