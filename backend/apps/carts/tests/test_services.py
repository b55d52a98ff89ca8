import types
import unittest
from decimal import Decimal

from apps.carts.services import CartService, cart_owner
from apps.carts.storage import InMemoryCartStorage
from apps.carts.store import AddOutcome
from apps.orders.dtos import OrderCreatedDTO


class FakeRestaurants:
    def __init__(self, *restaurants):
        self.by_id = {r.id: r for r in restaurants}

    def get_active(self, restaurant_id):
        return self.by_id.get(restaurant_id)


class FakeMenuItems:
    def __init__(self, *items):
        self.items = list(items)

    def get_for_restaurant(self, restaurant_id, item_id):
        return next(
            (i for i in self.items if i.restaurant_id == restaurant_id and i.id == item_id),
            None,
        )


class FakeOrders:
    def __init__(self, error=None):
        self.error = error
        self.commands = []

    def create_order(self, cmd):
        self.commands.append(cmd)
        if self.error:
            return None, self.error
        return OrderCreatedDTO(order_id=55, order_number="#4821", created_at="2024-05-16T12:00:00+00:00"), None


def restaurant(rid, name, fee="15.00"):
    return types.SimpleNamespace(id=rid, name=name, delivery_fee=Decimal(fee))


def menu_item(iid, rid, name, price, available=True):
    return types.SimpleNamespace(
        id=iid,
        restaurant_id=rid,
        name=name,
        price=Decimal(price),
        image_url="",
        is_available=available,
    )


CHECKOUT = {
    "delivery": {
        "firstName": "Ama",
        "lastName": "Mensah",
        "email": "Ama@Example.com",
        "phoneNumber": "0244111111",
        "deliveryAddress": "House 5, Ring Road",
        "notes": "",
    },
    "payment": {
        "paymentMethod": "mobile_money",
        "mobileNumber": "0244111111",
        "transactionId": "TX123456",
        "providerName": "MTN",
    },
}


class CartServiceTests(unittest.TestCase):
    def setUp(self):
        self.orders = FakeOrders()
        self.service = CartService(
            restaurants=FakeRestaurants(restaurant(1, "Mama Efua"), restaurant(2, "Tokyo Bowl", "20.00")),
            menu_items=FakeMenuItems(
                menu_item(10, 1, "Jollof", "5.00"),
                menu_item(11, 1, "Sobolo", "12.00", available=False),
                menu_item(20, 2, "Ramen", "95.00"),
            ),
            orders=self.orders,
            storage=InMemoryCartStorage(),
        )

    def test_cart_owner_key(self):
        self.assertEqual(cart_owner(7), "user:7")

    def test_add_item_uses_server_price(self):
        store = self.service.open(7)
        outcome, error = self.service.add_item(store, 1, 10)
        self.assertIsNone(error)
        self.assertIs(outcome, AddOutcome.ADDED)
        self.assertEqual(store.state.items[0].price, Decimal("5.00"))
        self.assertEqual(store.notifier.messages, ["Jollof was added to your cart"])

    def test_add_item_rejects_unknown_restaurant(self):
        outcome, error = self.service.add_item(self.service.open(7), 99, 10)
        self.assertIsNone(outcome)
        self.assertEqual(error[0], "NOT_FOUND")

    def test_add_item_rejects_unavailable_or_foreign_item(self):
        store = self.service.open(7)
        self.assertEqual(self.service.add_item(store, 1, 11)[1][0], "NOT_FOUND")
        self.assertEqual(self.service.add_item(store, 1, 20)[1][0], "NOT_FOUND")
        self.assertTrue(store.is_empty)

    def test_add_from_other_restaurant_is_pending(self):
        store = self.service.open(7)
        self.service.add_item(store, 1, 10)
        outcome, error = self.service.add_item(store, 2, 20)
        self.assertIsNone(error)
        self.assertIs(outcome, AddOutcome.PENDING)
        self.assertEqual(self.service.open(7).pending.restaurant_id, 2)

    def test_summary_includes_delivery_fee_and_total(self):
        store = self.service.open(7)
        self.service.add_item(store, 1, 10)
        self.service.add_item(store, 1, 10)
        data = self.service.summary(store)
        self.assertEqual(data["subtotal"], "10.00")
        self.assertEqual(data["deliveryFee"], "15.00")
        self.assertEqual(data["total"], "25.00")
        self.assertEqual(data["itemCount"], 2)

    def test_summary_of_empty_cart_has_no_total(self):
        data = self.service.summary(self.service.open(7))
        self.assertIsNone(data["deliveryFee"])
        self.assertIsNone(data["total"])

    def test_checkout_empty_cart_fails(self):
        dto, error = self.service.checkout(self.service.open(7), 7, CHECKOUT)
        self.assertIsNone(dto)
        self.assertEqual(error[0], "VALIDATION_ERROR")
        self.assertEqual(self.orders.commands, [])

    def test_checkout_places_order_and_clears_cart(self):
        store = self.service.open(7)
        self.service.add_item(store, 1, 10)
        self.service.add_item(store, 1, 10)
        dto, error = self.service.checkout(store, 7, CHECKOUT)
        self.assertIsNone(error)
        self.assertEqual(dto.order_number, "#4821")
        cmd = self.orders.commands[0]
        self.assertEqual(cmd.total, Decimal("25.00"))
        self.assertEqual(cmd.restaurant_id, 1)
        self.assertEqual([(l.menu_item_id, l.quantity) for l in cmd.items], [(10, 2)])
        self.assertEqual(cmd.delivery.email, "ama@example.com")
        reloaded = self.service.open(7)
        self.assertTrue(reloaded.is_empty)
        self.assertEqual(reloaded.last_order_number, "#4821")

    def test_checkout_failure_keeps_cart(self):
        self.orders.error = ("VALIDATION_ERROR", "Some items are no longer available", None)
        store = self.service.open(7)
        self.service.add_item(store, 1, 10)
        dto, error = self.service.checkout(store, 7, CHECKOUT)
        self.assertIsNone(dto)
        self.assertEqual(error[1], "Some items are no longer available")
        self.assertFalse(self.service.open(7).is_empty)

    def test_checkout_uses_current_menu_prices(self):
        store = self.service.open(7)
        self.service.add_item(store, 1, 10)
        self.service.add_item(store, 1, 10)
        self.service.menu_items.items[0].price = Decimal("6.00")
        dto, error = self.service.checkout(store, 7, CHECKOUT)
        self.assertIsNone(error)
        self.assertEqual(self.orders.commands[0].total, Decimal("27.00"))

    def test_price_change_survives_failed_checkout(self):
        self.orders.error = ("VALIDATION_ERROR", "Some items are no longer available", None)
        store = self.service.open(7)
        self.service.add_item(store, 1, 10)
        self.service.menu_items.items[0].price = Decimal("6.00")
        self.service.checkout(store, 7, CHECKOUT)
        self.assertEqual(self.service.open(7).state.items[0].price, Decimal("6.00"))

    def test_notifier_messages_follow_cart_changes(self):
        store = self.service.open(7)
        self.service.add_item(store, 1, 10)
        self.service.add_item(store, 2, 20)
        store.confirm_pending()
        store.remove_item(20)
        store.clear_cart()
        self.assertEqual(
            store.notifier.messages,
            [
                "Jollof was added to your cart",
                "Switched to a new restaurant: Tokyo Bowl",
                "Ramen was removed from your cart",
                "Your cart has been cleared",
            ],
        )
