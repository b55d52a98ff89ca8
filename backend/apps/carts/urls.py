from django.urls import path

from .views import (
    CartCheckoutView,
    CartItemDecreaseView,
    CartItemDetailView,
    CartItemListView,
    CartPendingView,
    CartView,
    LastOrderView,
)

urlpatterns = [
    path("", CartView.as_view(), name="cart"),
    path("items/", CartItemListView.as_view(), name="cart-items"),
    path("items/<int:item_id>/", CartItemDetailView.as_view(), name="cart-item-detail"),
    path(
        "items/<int:item_id>/decrease/",
        CartItemDecreaseView.as_view(),
        name="cart-item-decrease",
    ),
    path("pending/", CartPendingView.as_view(), name="cart-pending"),
    path("checkout/", CartCheckoutView.as_view(), name="cart-checkout"),
    path("last-order/", LastOrderView.as_view(), name="cart-last-order"),
]
