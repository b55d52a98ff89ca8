from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from apps.common import get_logger
from apps.common.money import money_str, to_money
from apps.orders.commands import OrderCreateCommand
from .notifications import CollectingNotifier
from .protocols import (
    CartStorageProtocol,
    MenuLookupProtocol,
    OrderPlacementProtocol,
    RestaurantLookupProtocol,
)
from .store import AddOutcome, CartItem, CartStore

logger = get_logger(__name__).bind(component="carts", layer="service")

ServiceError = Tuple[str, str, Optional[Any]]


def cart_owner(user_id: int) -> str:
    return f"user:{user_id}"


class CartService:
    """Server-side cart operations for one authenticated customer at a time."""

    def __init__(
        self,
        restaurants: RestaurantLookupProtocol,
        menu_items: MenuLookupProtocol,
        orders: OrderPlacementProtocol,
        storage: CartStorageProtocol,
    ):
        self.restaurants = restaurants
        self.menu_items = menu_items
        self.orders = orders
        self.storage = storage
        self.logger = logger.bind(service="CartService")

    def open(self, user_id: int) -> CartStore:
        return CartStore(self.storage, CollectingNotifier(), cart_owner(user_id))

    def summary(self, store: CartStore) -> Dict[str, Any]:
        """Cart payload with delivery fee and total when bound to a restaurant."""
        data = store.to_dict()
        fee = None
        if not store.is_empty:
            restaurant = self.restaurants.get_active(store.state.restaurant_id)
            if restaurant is not None:
                fee = to_money(restaurant.delivery_fee)
        data["deliveryFee"] = money_str(fee) if fee is not None else None
        data["total"] = money_str(store.subtotal + fee) if fee is not None else None
        return data

    def add_item(
        self, store: CartStore, restaurant_id: int, menu_item_id: int
    ) -> Tuple[Optional[AddOutcome], Optional[ServiceError]]:
        restaurant = self.restaurants.get_active(restaurant_id)
        if restaurant is None:
            return None, (
                "NOT_FOUND",
                "Restaurant not found",
                {"restaurantId": str(restaurant_id)},
            )
        menu_item = self.menu_items.get_for_restaurant(restaurant_id, menu_item_id)
        if menu_item is None or not menu_item.is_available:
            return None, (
                "NOT_FOUND",
                "Menu item not found",
                {"id": str(menu_item_id)},
            )
        item = CartItem(
            id=menu_item.id,
            name=menu_item.name,
            price=to_money(menu_item.price),
            image_url=menu_item.image_url or None,
        )
        outcome = store.add_item(restaurant.id, restaurant.name, item)
        self.logger.debug(
            "Cart add",
            owner=store.owner,
            item_id=menu_item.id,
            outcome=outcome.value,
        )
        return outcome, None

    def checkout(
        self, store: CartStore, user_id: int, data: Dict[str, Any]
    ) -> Tuple[Optional[Any], Optional[ServiceError]]:
        """Place an order for the cart contents and clear the cart on success.

        ``data`` holds validated ``delivery`` and ``payment`` sections.
        """
        if store.is_empty:
            return None, ("VALIDATION_ERROR", "Your cart is empty", None)
        restaurant = self.restaurants.get_active(store.state.restaurant_id)
        if restaurant is None:
            return None, (
                "NOT_FOUND",
                "Restaurant not found",
                {"restaurantId": str(store.state.restaurant_id)},
            )
        prices = {}
        for line in store.state.items:
            menu_item = self.menu_items.get_for_restaurant(restaurant.id, line.id)
            if menu_item is not None:
                prices[line.id] = menu_item.price
        store.refresh_prices(prices)
        total = to_money(store.subtotal + restaurant.delivery_fee)
        cmd = OrderCreateCommand.from_validated(
            user_id,
            {
                "delivery": data["delivery"],
                "payment": data["payment"],
                "restaurantId": restaurant.id,
                "total": total,
                "items": [
                    {"id": item.id, "quantity": item.quantity}
                    for item in store.state.items
                ],
            },
        )
        created, error = self.orders.create_order(cmd)
        if error:
            self.logger.warning(
                "Checkout failed", owner=store.owner, code=error[0]
            )
            return None, error
        store.remember_order(created.order_number)
        store.clear_cart()
        self.logger.info(
            "Checkout completed", owner=store.owner, order_number=created.order_number
        )
        return created, None
