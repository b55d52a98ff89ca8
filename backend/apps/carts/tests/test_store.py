import unittest
from decimal import Decimal

from apps.carts.storage import InMemoryCartStorage
from apps.carts.store import AddOutcome, CartItem, CartState, CartStore


class RecordingNotifier:
    def __init__(self):
        self.events = []

    def item_added(self, item_name):
        self.events.append(("added", item_name))

    def item_removed(self, item_name):
        self.events.append(("removed", item_name))

    def restaurant_switched(self, restaurant_name):
        self.events.append(("switched", restaurant_name))

    def cart_cleared(self):
        self.events.append(("cleared", None))


class BrokenStorage:
    def get(self, key):
        raise ConnectionError("cache down")

    def set(self, key, value):
        raise ConnectionError("cache down")

    def delete(self, key):
        raise ConnectionError("cache down")


JOLLOF = CartItem(id=1, name="Jollof", price=Decimal("5.00"))
KELEWELE = CartItem(id=2, name="Kelewele", price=Decimal("2.50"), image_url="/k.png")
RAMEN = CartItem(id=9, name="Ramen", price=Decimal("9.00"))


def make_store(storage=None):
    notifier = RecordingNotifier()
    store = CartStore(storage or InMemoryCartStorage(), notifier, "user:7")
    return store, notifier


class CartStoreTests(unittest.TestCase):
    def test_new_store_is_empty(self):
        store, _ = make_store()
        self.assertTrue(store.is_empty)
        self.assertEqual(store.item_count, 0)
        self.assertEqual(
            store.state.to_dict(),
            {"restaurantId": None, "restaurantName": None, "items": [], "subtotal": "0.00"},
        )

    def test_adding_same_item_twice_merges_line(self):
        store, notifier = make_store()
        store.add_item(1, "Mama Efua", JOLLOF)
        outcome = store.add_item(1, "Mama Efua", JOLLOF)
        self.assertIs(outcome, AddOutcome.ADDED)
        self.assertEqual(len(store.state.items), 1)
        self.assertEqual(store.state.items[0].quantity, 2)
        self.assertEqual(store.subtotal, Decimal("10.00"))
        self.assertEqual(notifier.events, [("added", "Jollof"), ("added", "Jollof")])

    def test_subtotal_tracks_every_add(self):
        store, _ = make_store()
        for item in (JOLLOF, KELEWELE, KELEWELE):
            store.add_item(1, "Mama Efua", item)
            expected = sum(i.price * i.quantity for i in store.state.items)
            self.assertEqual(store.subtotal, expected)
        self.assertEqual(store.item_count, 3)
        self.assertEqual(store.subtotal, Decimal("10.00"))

    def test_removing_last_line_resets_cart(self):
        store, notifier = make_store()
        store.add_item(1, "Mama Efua", JOLLOF)
        self.assertTrue(store.remove_item(1))
        self.assertEqual(
            store.state.to_dict(),
            {"restaurantId": None, "restaurantName": None, "items": [], "subtotal": "0.00"},
        )
        self.assertEqual(notifier.events[-1], ("removed", "Jollof"))

    def test_decrease_on_quantity_one_equals_remove(self):
        decreased, _ = make_store()
        removed, _ = make_store()
        for store in (decreased, removed):
            store.add_item(1, "Mama Efua", JOLLOF)
            store.add_item(1, "Mama Efua", KELEWELE)
        decreased.decrease_item_quantity(2)
        removed.remove_item(2)
        self.assertEqual(decreased.state, removed.state)

    def test_decrease_keeps_line_above_one(self):
        store, _ = make_store()
        store.add_item(1, "Mama Efua", JOLLOF)
        store.add_item(1, "Mama Efua", JOLLOF)
        store.decrease_item_quantity(1)
        self.assertEqual(store.state.items[0].quantity, 1)
        self.assertEqual(store.subtotal, Decimal("5.00"))

    def test_missing_item_is_a_no_op(self):
        store, notifier = make_store()
        self.assertFalse(store.decrease_item_quantity(99))
        self.assertFalse(store.remove_item(99))
        self.assertEqual(notifier.events, [])

    def test_other_restaurant_is_parked_as_pending(self):
        store, notifier = make_store()
        store.add_item(1, "Mama Efua", JOLLOF)
        outcome = store.add_item(2, "Tokyo Bowl", RAMEN)
        self.assertIs(outcome, AddOutcome.PENDING)
        self.assertEqual(store.state.restaurant_id, 1)
        self.assertEqual([i.id for i in store.state.items], [1])
        self.assertEqual(store.pending.restaurant_id, 2)
        self.assertEqual(notifier.events, [("added", "Jollof")])

    def test_confirm_pending_switches_restaurant(self):
        store, notifier = make_store()
        store.add_item(1, "Mama Efua", JOLLOF)
        store.add_item(1, "Mama Efua", JOLLOF)
        store.add_item(2, "Tokyo Bowl", RAMEN)
        self.assertTrue(store.confirm_pending())
        self.assertEqual(store.state.restaurant_id, 2)
        self.assertEqual(store.state.restaurant_name, "Tokyo Bowl")
        self.assertEqual([(i.id, i.quantity) for i in store.state.items], [(9, 1)])
        self.assertEqual(store.subtotal, Decimal("9.00"))
        self.assertIsNone(store.pending)
        self.assertEqual(notifier.events[-1], ("switched", "Tokyo Bowl"))

    def test_cancel_pending_keeps_cart(self):
        store, _ = make_store()
        store.add_item(1, "Mama Efua", JOLLOF)
        store.add_item(2, "Tokyo Bowl", RAMEN)
        self.assertTrue(store.cancel_pending())
        self.assertIsNone(store.pending)
        self.assertEqual(store.state.restaurant_id, 1)
        self.assertFalse(store.confirm_pending())

    def test_clear_cart_notifies_even_when_empty(self):
        store, notifier = make_store()
        store.clear_cart()
        self.assertTrue(store.is_empty)
        self.assertEqual(notifier.events, [("cleared", None)])

    def test_state_round_trips_through_storage(self):
        storage = InMemoryCartStorage()
        store, _ = make_store(storage)
        store.add_item(1, "Mama Efua", JOLLOF)
        store.add_item(1, "Mama Efua", KELEWELE)
        store.add_item(1, "Mama Efua", KELEWELE)
        store.add_item(3, "Burger Yard", RAMEN)
        reloaded, _ = make_store(storage)
        self.assertEqual(reloaded.state, store.state)
        self.assertEqual(reloaded.pending, store.pending)
        self.assertEqual(
            storage.get("dashiCart:user:7"),
            {
                "restaurantId": 1,
                "restaurantName": "Mama Efua",
                "items": [
                    {"id": 1, "name": "Jollof", "price": "5.00", "quantity": 1},
                    {"id": 2, "name": "Kelewele", "price": "2.50", "quantity": 2, "imageUrl": "/k.png"},
                ],
                "subtotal": "10.00",
            },
        )

    def test_carts_are_scoped_per_owner(self):
        storage = InMemoryCartStorage()
        store, _ = make_store(storage)
        store.add_item(1, "Mama Efua", JOLLOF)
        other = CartStore(storage, RecordingNotifier(), "user:8")
        self.assertTrue(other.is_empty)

    def test_storage_failures_do_not_break_mutations(self):
        store, notifier = make_store(BrokenStorage())
        self.assertTrue(store.is_empty)
        store.add_item(1, "Mama Efua", JOLLOF)
        self.assertEqual(store.item_count, 1)
        self.assertEqual(notifier.events, [("added", "Jollof")])
        self.assertIsNone(store.last_order_number)

    def test_last_order_number_survives_clear(self):
        storage = InMemoryCartStorage()
        store, _ = make_store(storage)
        store.add_item(1, "Mama Efua", JOLLOF)
        store.remember_order("#1234")
        store.clear_cart()
        self.assertEqual(make_store(storage)[0].last_order_number, "#1234")

    def test_state_from_dict_ignores_empty_items(self):
        state = CartState.from_dict({"restaurantId": 4, "restaurantName": "X", "items": []})
        self.assertEqual(state, CartState())

    def test_unreadable_entries_fall_back_to_empty_cart(self):
        storage = InMemoryCartStorage()
        storage.set("dashiCart:user:7", {"restaurantId": 1, "items": [{"id": 1, "price": "abc"}]})
        storage.set("dashiCartPending:user:7", {"restaurantId": "x"})
        with self.assertLogs("apps.carts.store", level="ERROR"):
            store, _ = make_store(storage)
        self.assertTrue(store.is_empty)
        self.assertIsNone(store.pending)
        store.add_item(1, "Mama Efua", JOLLOF)
        self.assertEqual(make_store(storage)[0].item_count, 1)

    def test_non_mapping_entry_falls_back_to_empty_cart(self):
        storage = InMemoryCartStorage()
        storage.set("dashiCart:user:7", "not a cart")
        store, _ = make_store(storage)
        self.assertTrue(store.is_empty)

    def test_same_restaurant_add_drops_stale_pending(self):
        storage = InMemoryCartStorage()
        store, _ = make_store(storage)
        store.add_item(1, "Mama Efua", JOLLOF)
        store.add_item(2, "Tokyo Bowl", RAMEN)
        store.add_item(1, "Mama Efua", KELEWELE)
        self.assertIsNone(store.pending)
        self.assertIsNone(make_store(storage)[0].pending)
        self.assertFalse(store.confirm_pending())
        self.assertEqual(store.state.restaurant_id, 1)

    def test_merge_takes_latest_price(self):
        store, _ = make_store()
        store.add_item(1, "Mama Efua", JOLLOF)
        store.add_item(1, "Mama Efua", CartItem(id=1, name="Jollof", price=Decimal("6.00")))
        self.assertEqual(store.state.items[0].quantity, 2)
        self.assertEqual(store.subtotal, Decimal("12.00"))

    def test_refresh_prices(self):
        storage = InMemoryCartStorage()
        store, _ = make_store(storage)
        store.add_item(1, "Mama Efua", JOLLOF)
        store.add_item(1, "Mama Efua", KELEWELE)
        self.assertFalse(store.refresh_prices({1: Decimal("5.00")}))
        self.assertTrue(store.refresh_prices({1: Decimal("6.00"), 99: Decimal("1.00")}))
        self.assertEqual(store.subtotal, Decimal("8.50"))
        self.assertEqual(make_store(storage)[0].subtotal, Decimal("8.50"))
