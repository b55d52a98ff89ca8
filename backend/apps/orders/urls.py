from django.urls import path
from .views import (
    CustomerOrderListView,
    OrderDetailView,
    OrderListView,
    OrderStatusView,
    RestaurantOrderListView,
)

urlpatterns = [
    path("", OrderListView.as_view(), name="orders-list"),
    path("mine/", CustomerOrderListView.as_view(), name="orders-mine"),
    path("restaurant/", RestaurantOrderListView.as_view(), name="orders-restaurant"),
    path("<int:order_id>/status/", OrderStatusView.as_view(), name="orders-status"),
    path(
        "number/<str:order_number>/",
        OrderDetailView.as_view(),
        name="orders-by-number",
    ),
]
