from django.urls import path
from .views import CurrentCustomerView, RestaurantUserCreateView, UserListView

urlpatterns = [
    path("", UserListView.as_view(), name="users-list"),
    path(
        "restaurant-users/",
        RestaurantUserCreateView.as_view(),
        name="users-restaurant-create",
    ),
    path("me/customer/", CurrentCustomerView.as_view(), name="users-current-customer"),
]
