from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class OrderCreatedDTO:
    order_id: int
    order_number: str
    created_at: str


@dataclass
class OrderItemDTO:
    menu_item_id: int
    name: str
    price: str
    quantity: int


@dataclass
class OrderListItemDTO:
    id: int
    order_number: str
    restaurant_id: int
    restaurant_name: str
    customer_name: str
    status: str
    total: str
    created_at: str


@dataclass
class OrderDetailDTO:
    id: int
    order_number: str
    restaurant_id: int
    restaurant_name: str
    customer_id: int
    status: str
    total: str
    first_name: str
    last_name: str
    email: str
    phone_number: str
    delivery_address: str
    notes: str
    cancellation_reason: Optional[str]
    payment_method: Optional[str]
    payment_status: Optional[str]
    created_at: str
    updated_at: str
    items: List[OrderItemDTO] = field(default_factory=list)


@dataclass
class CustomerOrdersPageDTO:
    orders: List[OrderDetailDTO]
    next_cursor: Optional[int]
