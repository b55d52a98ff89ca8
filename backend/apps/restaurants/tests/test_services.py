from decimal import Decimal

from django.test import TestCase

from apps.common.listing import ListQuery
from apps.orders.models import Order, OrderItem, OrderStatus
from apps.orders.repositories import OrderRepository
from apps.restaurants.commands import MenuItemWriteCommand, RestaurantWriteCommand
from apps.restaurants.models import MenuItem, Restaurant, RestaurantManager
from apps.restaurants.repositories import MenuItemRepository, RestaurantRepository
from apps.restaurants.services import MenuItemService, RestaurantService
from apps.users.models import Role, User


class DictCache:
    def __init__(self):
        self.data = {}

    def get(self, key, default=None):
        return self.data.get(key, default)

    def set(self, key, value, timeout=None):
        self.data[key] = value


def make_user(email, role=Role.CUSTOMER):
    return User.objects.create_user(
        username=email, email=email, password="secret123", name=email.split("@")[0], role=role
    )


def make_order(restaurant, customer, number, status=OrderStatus.PLACED, total="50.00", item=None):
    order = Order.objects.create(
        order_number=number,
        customer=customer,
        restaurant=restaurant,
        status=status,
        total=Decimal(total),
        first_name="Ama",
        last_name="Mensah",
        email=customer.email,
        phone_number="0244111111",
        delivery_address="Ring Road",
    )
    if item is not None:
        OrderItem.objects.create(order=order, menu_item=item, name=item.name, price=item.price, quantity=1)
    return order


class RestaurantServiceTests(TestCase):
    def setUp(self):
        self.cache = DictCache()
        self.service = RestaurantService(
            restaurants=RestaurantRepository(),
            orders=OrderRepository(),
            menu_items=MenuItemRepository(),
            cache_backend=self.cache,
        )
        self.tokyo = Restaurant.objects.create(name="Tokyo Bowl", category="Japanese")
        self.burger = Restaurant.objects.create(name="Burger Yard", category="Fast food")
        Restaurant.objects.create(name="Closed Cafe", is_active=False)

    def test_list_active_is_sorted_and_cached(self):
        names = [r.name for r in self.service.list_active()]
        self.assertEqual(names, ["Burger Yard", "Tokyo Bowl"])
        self.assertIn("restaurants:active:v1", self.cache.data)
        Restaurant.objects.filter(id=self.tokyo.id).update(name="Renamed Directly")
        self.assertEqual([r.name for r in self.service.list_active()], names)

    def test_writes_bump_the_cache_version(self):
        self.service.list_active()
        self.service.create_restaurant(RestaurantWriteCommand(fields={"name": "Accra Grill"}))
        self.assertEqual(self.cache.get("restaurants:active:version"), 2)
        names = [r.name for r in self.service.list_active()]
        self.assertEqual(names, ["Accra Grill", "Burger Yard", "Tokyo Bowl"])

    def test_disabled_cache_reads_through(self):
        service = RestaurantService(
            RestaurantRepository(), OrderRepository(), MenuItemRepository(), self.cache, disable_cache=True
        )
        service.list_active()
        self.assertEqual(self.cache.data, {})

    def test_update_restaurant(self):
        dto, error = self.service.update_restaurant(
            RestaurantWriteCommand.from_validated(
                {"deliveryFee": Decimal("12.5"), "serviceArea": "Airport"}, self.tokyo.id
            )
        )
        self.assertIsNone(error)
        self.assertEqual(dto.delivery_fee, "12.50")
        self.assertEqual(dto.service_area, "Airport")
        _, error = self.service.update_restaurant(RestaurantWriteCommand({"name": "x"}, 999))
        self.assertEqual(error[0], "NOT_FOUND")

    def test_delete_without_orders_is_hard(self):
        mode, error = self.service.delete_restaurant(self.burger.id)
        self.assertIsNone(error)
        self.assertEqual(mode, "hard")
        self.assertFalse(Restaurant.objects.filter(id=self.burger.id).exists())

    def test_delete_with_orders_is_soft(self):
        make_order(self.tokyo, make_user("ama@example.com"), 1001)
        mode, _ = self.service.delete_restaurant(self.tokyo.id)
        self.assertEqual(mode, "soft")
        self.tokyo.refresh_from_db()
        self.assertFalse(self.tokyo.is_active)
        self.assertIsNotNone(self.tokyo.deleted_at)
        _, error = self.service.delete_restaurant(self.tokyo.id)
        self.assertEqual(error[0], "NOT_FOUND")

    def test_public_menu_hides_unavailable_items(self):
        MenuItem.objects.create(restaurant=self.tokyo, name="Ramen", price=Decimal("95"), category="Ramen")
        MenuItem.objects.create(
            restaurant=self.tokyo, name="Sold out", price=Decimal("10"), is_available=False
        )
        data, error = self.service.get_public_menu(self.tokyo.id)
        self.assertIsNone(error)
        self.assertEqual(data["restaurant"].name, "Tokyo Bowl")
        self.assertEqual([i.name for i in data["menuItems"]], ["Ramen"])
        self.assertEqual(data["menuItems"][0].price, "95.00")

    def test_inactive_restaurant_menu_is_not_found(self):
        closed = Restaurant.objects.get(name="Closed Cafe")
        _, error = self.service.get_public_menu(closed.id)
        self.assertEqual(error[0], "NOT_FOUND")

    def test_list_with_managers(self):
        manager = make_user("chef@tokyobowl.example", Role.RESTAURANT)
        RestaurantManager.objects.create(user=manager, restaurant=self.tokyo)
        result, _ = self.service.list_with_managers(
            ListQuery(sort_field="name", sort_order="asc", filters={"filter": "japan"})
        )
        self.assertEqual(result.total, 1)
        self.assertEqual(result.rows[0].managers[0].email, "chef@tokyobowl.example")

    def test_dashboard_stats(self):
        manager = make_user("chef@tokyobowl.example", Role.RESTAURANT)
        RestaurantManager.objects.create(user=manager, restaurant=self.tokyo)
        MenuItem.objects.create(restaurant=self.tokyo, name="Ramen", price=Decimal("95"))
        MenuItem.objects.create(restaurant=self.tokyo, name="Gone", price=Decimal("5"), is_deleted=True)
        ama = make_user("ama@example.com")
        kofi = make_user("kofi@example.com")
        make_order(self.tokyo, ama, 1001, OrderStatus.DELIVERED, "110.00")
        make_order(self.tokyo, ama, 1002, OrderStatus.PREPARING)
        make_order(self.tokyo, kofi, 1003, OrderStatus.CANCELLED)
        make_order(self.burger, kofi, 1004, OrderStatus.DELIVERED, "999.00")
        stats, error = self.service.get_dashboard_stats(manager.id)
        self.assertIsNone(error)
        self.assertEqual(stats.menu_items, 1)
        self.assertEqual(stats.active_orders, 1)
        self.assertEqual(stats.todays_orders, 3)
        self.assertEqual(stats.customers, 2)
        self.assertEqual(stats.monthly_sales, "110.00")

    def test_dashboard_requires_assignment(self):
        _, error = self.service.get_dashboard_stats(make_user("loner@example.com", Role.RESTAURANT).id)
        self.assertEqual(error[0], "FORBIDDEN")


class MenuItemServiceTests(TestCase):
    def setUp(self):
        self.restaurant = Restaurant.objects.create(name="Mama Efua")
        self.other = Restaurant.objects.create(name="Tokyo Bowl")
        self.manager = make_user("chef@mamaefua.example", Role.RESTAURANT)
        RestaurantManager.objects.create(user=self.manager, restaurant=self.restaurant)
        self.service = MenuItemService(RestaurantRepository(), MenuItemRepository())
        self.jollof = MenuItem.objects.create(
            restaurant=self.restaurant, name="Jollof", price=Decimal("55"), category="Mains"
        )
        self.sobolo = MenuItem.objects.create(
            restaurant=self.restaurant, name="Sobolo", price=Decimal("12"), category="Drinks", is_available=False
        )
        self.ramen = MenuItem.objects.create(restaurant=self.other, name="Ramen", price=Decimal("95"))

    def test_create_item_is_scoped_to_manager_restaurant(self):
        dto, error = self.service.create_item(
            self.manager.id,
            MenuItemWriteCommand.from_validated({"name": "Kelewele", "price": "20", "category": "Sides"}),
        )
        self.assertIsNone(error)
        self.assertEqual(dto.restaurant_id, self.restaurant.id)
        self.assertEqual(dto.price, "20.00")

    def test_list_filters(self):
        result, _ = self.service.list_items(self.manager.id, ListQuery(filters={"isAvailable": "false"}))
        self.assertEqual([r.name for r in result.rows], ["Sobolo"])
        result, _ = self.service.list_items(self.manager.id, ListQuery(filters={"category": "mains"}))
        self.assertEqual([r.name for r in result.rows], ["Jollof"])
        result, _ = self.service.list_items(self.manager.id, ListQuery())
        self.assertEqual(result.total, 2)

    def test_other_restaurant_items_are_not_found(self):
        _, error = self.service.get_item(self.manager.id, self.ramen.id)
        self.assertEqual(error[0], "NOT_FOUND")
        _, error = self.service.update_item(
            self.manager.id, MenuItemWriteCommand({"name": "Mine now"}, self.ramen.id)
        )
        self.assertEqual(error[0], "NOT_FOUND")

    def test_update_item(self):
        dto, error = self.service.update_item(
            self.manager.id, MenuItemWriteCommand.from_validated({"isAvailable": True}, self.sobolo.id)
        )
        self.assertIsNone(error)
        self.assertTrue(dto.is_available)

    def test_delete_unreferenced_item_is_hard(self):
        mode, _ = self.service.delete_item(self.manager.id, self.sobolo.id)
        self.assertEqual(mode, "hard")
        self.assertFalse(MenuItem.objects.filter(id=self.sobolo.id).exists())

    def test_delete_referenced_item_is_soft(self):
        make_order(self.restaurant, make_user("ama@example.com"), 1001, item=self.jollof)
        mode, _ = self.service.delete_item(self.manager.id, self.jollof.id)
        self.assertEqual(mode, "soft")
        self.jollof.refresh_from_db()
        self.assertTrue(self.jollof.is_deleted)
        self.assertFalse(self.jollof.is_available)
        _, error = self.service.get_item(self.manager.id, self.jollof.id)
        self.assertEqual(error[0], "NOT_FOUND")

    def test_unassigned_manager(self):
        loner = make_user("loner@example.com", Role.RESTAURANT)
        result, error = self.service.list_items(loner.id, ListQuery())
        self.assertEqual(error[0], "FORBIDDEN")
        self.assertEqual(result.rows, [])
