from django.urls import path

from apps.sales.views import RestaurantSalesView
from .views import (
    AdminRestaurantListView,
    DashboardStatsView,
    MenuItemDetailView,
    MenuItemListView,
    RestaurantDetailView,
    RestaurantListView,
)

urlpatterns = [
    path("", RestaurantListView.as_view(), name="restaurants-list"),
    path("admin/", AdminRestaurantListView.as_view(), name="restaurants-admin-list"),
    path(
        "<int:restaurant_id>/",
        RestaurantDetailView.as_view(),
        name="restaurants-detail",
    ),
    path(
        "<int:restaurant_id>/sales/",
        RestaurantSalesView.as_view(),
        name="restaurants-sales",
    ),
]

# Routes for the signed-in restaurant manager, mounted under /api/restaurant/.
manager_urlpatterns = [
    path("dashboard/", DashboardStatsView.as_view(), name="restaurant-dashboard"),
    path("menu-items/", MenuItemListView.as_view(), name="restaurant-menu-items"),
    path(
        "menu-items/<int:item_id>/",
        MenuItemDetailView.as_view(),
        name="restaurant-menu-item-detail",
    ),
]
