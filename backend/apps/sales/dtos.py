from dataclasses import dataclass


@dataclass
class RestaurantSalesRowDTO:
    id: str
    restaurant_id: int
    restaurant_name: str
    total_sales: str
    order_count: int
    commission: str
    period: str


@dataclass
class SalesSummaryDTO:
    total_sales: str
    total_orders: int
    commission: str
    restaurant_count: int


@dataclass
class RestaurantSalesSummaryDTO:
    total_sales: str
    order_count: int
    commission: str
    average_order_value: str
