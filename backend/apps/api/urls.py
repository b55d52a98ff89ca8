from django.urls import path, include

from apps.restaurants.urls import manager_urlpatterns

urlpatterns = [
    path("users/", include("apps.users.urls")),
    path("restaurants/", include("apps.restaurants.urls")),
    # Endpoints scoped to the calling manager's restaurant
    path("restaurant/", include(manager_urlpatterns)),
    path("orders/", include("apps.orders.urls")),
    path("sales/", include("apps.sales.urls")),
    path("cart/", include("apps.carts.urls")),
    path("auth/", include("apps.auth.urls")),
]
