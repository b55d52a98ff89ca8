from decimal import Decimal

from django.test import TestCase

from apps.common.listing import ListQuery
from apps.orders.commands import (
    DeliveryDetails,
    OrderCreateCommand,
    OrderLine,
    OrderStatusUpdateCommand,
    PaymentDetails,
)
from apps.orders.models import Order, OrderStatus, PaymentStatus
from apps.orders.repositories import OrderRepository
from apps.orders.services import OrderService, parse_order_number
from apps.restaurants.models import MenuItem, Restaurant, RestaurantManager
from apps.restaurants.repositories import MenuItemRepository, RestaurantRepository
from apps.users.models import Customer, Role, User
from apps.users.repositories import CustomerRepository


class RecordingNotifier:
    def __init__(self):
        self.placed = []

    def order_placed(self, order):
        self.placed.append(order.id)


def numbers(*values):
    it = iter(values)
    return lambda: next(it)


def make_user(email, role=Role.CUSTOMER, **extra):
    return User.objects.create_user(
        username=email, email=email, password="secret123", name=email.split("@")[0], role=role, **extra
    )


class OrderServiceTestCase(TestCase):
    def setUp(self):
        self.restaurant = Restaurant.objects.create(
            name="Mama Efua", email="kitchen@mamaefua.example", delivery_fee=Decimal("15.00")
        )
        self.other_restaurant = Restaurant.objects.create(name="Tokyo Bowl")
        self.jollof = MenuItem.objects.create(
            restaurant=self.restaurant, name="Jollof", price=Decimal("55.00")
        )
        self.kelewele = MenuItem.objects.create(
            restaurant=self.restaurant, name="Kelewele", price=Decimal("20.00")
        )
        self.ramen = MenuItem.objects.create(
            restaurant=self.other_restaurant, name="Ramen", price=Decimal("95.00")
        )
        self.customer = make_user("ama@example.com")
        Customer.objects.create(user=self.customer, address="Ring Road")
        self.manager = make_user("chef@mamaefua.example", Role.RESTAURANT)
        RestaurantManager.objects.create(user=self.manager, restaurant=self.restaurant)
        self.other_manager = make_user("chef@tokyobowl.example", Role.RESTAURANT)
        RestaurantManager.objects.create(user=self.other_manager, restaurant=self.other_restaurant)
        self.notifier = RecordingNotifier()
        self.service = self.build_service(numbers(4821, 4822, 4823, 4824, 4825))

    def build_service(self, number_generator):
        return OrderService(
            orders=OrderRepository(),
            restaurants=RestaurantRepository(),
            menu_items=MenuItemRepository(),
            customers=CustomerRepository(),
            notifier=self.notifier,
            number_generator=number_generator,
        )

    def command(self, total="145.00", items=None, restaurant_id=None, customer_id=None):
        return OrderCreateCommand(
            customer_id=customer_id or self.customer.id,
            restaurant_id=restaurant_id or self.restaurant.id,
            total=Decimal(total),
            delivery=DeliveryDetails(
                first_name="Ama",
                last_name="Mensah",
                email="ama@example.com",
                phone_number="0244111111",
                delivery_address="House 5, Ring Road",
            ),
            payment=PaymentDetails(
                payment_method="mobile_money",
                mobile_number="0244111111",
                transaction_id="TX123456",
                provider_name="MTN",
            ),
            items=items
            if items is not None
            else [OrderLine(self.jollof.id, 2), OrderLine(self.kelewele.id, 1)],
        )

    def place(self, **kwargs):
        dto, error = self.service.create_order(self.command(**kwargs))
        self.assertIsNone(error)
        return Order.objects.get(id=dto.order_id)


class CreateOrderTests(OrderServiceTestCase):
    def test_places_order_with_items_and_pending_payment(self):
        dto, error = self.service.create_order(self.command())
        self.assertIsNone(error)
        self.assertEqual(dto.order_number, "#4821")
        order = Order.objects.get(id=dto.order_id)
        self.assertEqual(order.status, OrderStatus.PLACED)
        self.assertEqual(order.total, Decimal("145.00"))
        self.assertEqual(
            sorted((i.name, i.quantity, i.price) for i in order.items.all()),
            [("Jollof", 2, Decimal("55.00")), ("Kelewele", 1, Decimal("20.00"))],
        )
        self.assertEqual(order.payment.status, PaymentStatus.PENDING)
        self.assertEqual(order.payment.amount, Decimal("145.00"))
        self.assertEqual(self.notifier.placed, [order.id])

    def test_total_mismatch_is_rejected(self):
        dto, error = self.service.create_order(self.command(total="100.00"))
        self.assertIsNone(dto)
        self.assertEqual(error[0], "VALIDATION_ERROR")
        self.assertEqual(error[2], {"total": "100.00", "expected": "145.00"})
        self.assertFalse(Order.objects.exists())

    def test_non_positive_total_is_rejected(self):
        _, error = self.service.create_order(self.command(total="0"))
        self.assertEqual(error[1], "Order total must be greater than zero")

    def test_empty_items_are_rejected(self):
        _, error = self.service.create_order(self.command(items=[]))
        self.assertEqual(error[1], "Your cart is empty")

    def test_only_customers_may_order(self):
        _, error = self.service.create_order(self.command(customer_id=self.manager.id))
        self.assertEqual(error[0], "FORBIDDEN")

    def test_inactive_restaurant_is_not_found(self):
        self.restaurant.is_active = False
        self.restaurant.save()
        _, error = self.service.create_order(self.command())
        self.assertEqual(error[0], "NOT_FOUND")

    def test_items_from_other_restaurants_are_unavailable(self):
        _, error = self.service.create_order(
            self.command(total="110.00", items=[OrderLine(self.ramen.id, 1)])
        )
        self.assertEqual(error[1], "Some items are no longer available")
        self.assertEqual(error[2], {"items": [str(self.ramen.id)]})

    def test_unavailable_item_is_rejected(self):
        self.kelewele.is_available = False
        self.kelewele.save()
        _, error = self.service.create_order(self.command())
        self.assertEqual(error[2], {"items": [str(self.kelewele.id)]})

    def test_number_collision_retries(self):
        self.place()
        service = self.build_service(numbers(4821, 4821, 5000))
        dto, error = service.create_order(self.command())
        self.assertIsNone(error)
        self.assertEqual(dto.order_number, "#5000")

    def test_insert_collision_picks_new_number(self):
        self.place()

        class RacingOrderRepository(OrderRepository):
            # Another request grabs the number between the check and the insert.
            def number_taken(self, order_number):
                return False

        service = self.build_service(numbers(4821, 5000))
        service.orders = RacingOrderRepository()
        dto, error = service.create_order(self.command())
        self.assertIsNone(error)
        self.assertEqual(dto.order_number, "#5000")
        self.assertEqual(Order.objects.filter(order_number=5000).count(), 1)
        self.assertEqual(Order.objects.count(), 2)

    def test_insert_collisions_give_up_after_attempts(self):
        self.place()

        class RacingOrderRepository(OrderRepository):
            def number_taken(self, order_number):
                return False

        service = self.build_service(lambda: 4821)
        service.orders = RacingOrderRepository()
        _, error = service.create_order(self.command())
        self.assertEqual(error[0], "CONFLICT")
        self.assertEqual(Order.objects.count(), 1)

    def test_number_allocation_gives_up(self):
        self.place()
        service = self.build_service(lambda: 4821)
        _, error = service.create_order(self.command())
        self.assertEqual(error[0], "CONFLICT")

    def test_parse_order_number(self):
        self.assertEqual(parse_order_number("#4821"), 4821)
        self.assertEqual(parse_order_number(" 4821 "), 4821)
        self.assertIsNone(parse_order_number("#abc"))
        self.assertIsNone(parse_order_number(None))


class OrderListingTests(OrderServiceTestCase):
    def test_admin_list_filters_by_status_and_number(self):
        first = self.place()
        self.place()
        first.status = OrderStatus.DELIVERED
        first.save()
        result, error = self.service.list_all_orders(ListQuery(filters={"status": "delivered"}))
        self.assertIsNone(error)
        self.assertEqual([r.id for r in result.rows], [first.id])
        result, _ = self.service.list_all_orders(ListQuery(filters={"filter": "#4822"}))
        self.assertEqual([r.order_number for r in result.rows], ["#4822"])

    def test_non_numeric_number_filter_matches_nothing(self):
        self.place()
        result, error = self.service.list_all_orders(ListQuery(filters={"filter": "jollof"}))
        self.assertIsNone(error)
        self.assertEqual(result.total, 0)

    def test_invalid_status_and_dates(self):
        _, error = self.service.list_all_orders(ListQuery(filters={"status": "LOST"}))
        self.assertEqual(error[1], "Invalid status")
        _, error = self.service.list_all_orders(ListQuery(filters={"startDate": "16/05/2024"}))
        self.assertEqual(error[1], "Invalid date")

    def test_manager_sees_only_own_restaurant(self):
        self.place()
        result, error = self.service.list_restaurant_orders(self.other_manager.id, ListQuery())
        self.assertIsNone(error)
        self.assertEqual(result.total, 0)
        result, _ = self.service.list_restaurant_orders(self.manager.id, ListQuery())
        self.assertEqual(result.total, 1)

    def test_manager_cannot_request_other_restaurant(self):
        _, error = self.service.list_restaurant_orders(
            self.manager.id, ListQuery(filters={"restaurantId": str(self.other_restaurant.id)})
        )
        self.assertEqual(error[0], "FORBIDDEN")

    def test_unassigned_manager_is_forbidden(self):
        loner = make_user("loner@example.com", Role.RESTAURANT)
        _, error = self.service.list_restaurant_orders(loner.id, ListQuery())
        self.assertEqual(error[1], "You are not assigned to a restaurant")


class StatusUpdateTests(OrderServiceTestCase):
    def test_cancellation_reason_only_kept_for_cancelled(self):
        order = self.place()
        dto, error = self.service.update_status(
            self.manager.id,
            OrderStatusUpdateCommand(order.id, OrderStatus.PREPARING, "ignored"),
        )
        self.assertIsNone(error)
        self.assertEqual(dto.status, OrderStatus.PREPARING)
        self.assertIsNone(dto.cancellation_reason)
        dto, _ = self.service.update_status(
            self.manager.id,
            OrderStatusUpdateCommand(order.id, OrderStatus.CANCELLED, "Out of rice"),
        )
        self.assertEqual(dto.cancellation_reason, "Out of rice")

    def test_other_restaurant_manager_is_forbidden(self):
        order = self.place()
        _, error = self.service.update_status(
            self.other_manager.id, OrderStatusUpdateCommand(order.id, OrderStatus.PREPARING)
        )
        self.assertEqual(error[0], "FORBIDDEN")
        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.PLACED)

    def test_unknown_order_and_status(self):
        _, error = self.service.update_status(
            self.manager.id, OrderStatusUpdateCommand(999, OrderStatus.PREPARING)
        )
        self.assertEqual(error[0], "NOT_FOUND")
        _, error = self.service.update_status(self.manager.id, OrderStatusUpdateCommand(1, "LOST"))
        self.assertEqual(error[0], "VALIDATION_ERROR")


class CustomerOrdersTests(OrderServiceTestCase):
    def test_cursor_pagination_walks_newest_first(self):
        placed = [self.place().id for _ in range(3)]
        page, error = self.service.list_customer_orders(
            self.customer.id, status_group=None, limit=2, cursor=None
        )
        self.assertIsNone(error)
        self.assertEqual([o.id for o in page.orders], [placed[2], placed[1]])
        self.assertEqual(page.next_cursor, placed[1])
        page, _ = self.service.list_customer_orders(
            self.customer.id, status_group=None, limit=2, cursor=page.next_cursor
        )
        self.assertEqual([o.id for o in page.orders], [placed[0]])
        self.assertIsNone(page.next_cursor)

    def test_status_groups(self):
        order = self.place()
        self.place()
        order.status = OrderStatus.CANCELLED
        order.save()
        page, _ = self.service.list_customer_orders(
            self.customer.id, status_group="failed", limit=None, cursor=None
        )
        self.assertEqual([o.id for o in page.orders], [order.id])
        page, _ = self.service.list_customer_orders(
            self.customer.id, status_group="PENDING", limit=None, cursor=None
        )
        self.assertEqual(len(page.orders), 1)
        _, error = self.service.list_customer_orders(
            self.customer.id, status_group="lost", limit=None, cursor=None
        )
        self.assertEqual(error[0], "VALIDATION_ERROR")


class DisplayNumberAccessTests(OrderServiceTestCase):
    def test_owner_manager_and_admin_may_view(self):
        self.place()
        admin = make_user("admin@dashi.example", Role.ADMIN)
        for user in (self.customer, self.manager, admin):
            dto, error = self.service.get_by_display_number(user, "#4821")
            self.assertIsNone(error)
            self.assertEqual(dto.order_number, "#4821")
            self.assertEqual(len(dto.items), 2)

    def test_strangers_are_forbidden(self):
        self.place()
        stranger = make_user("kofi@example.com")
        for user in (stranger, self.other_manager):
            _, error = self.service.get_by_display_number(user, "4821")
            self.assertEqual(error[0], "FORBIDDEN")

    def test_unknown_number(self):
        _, error = self.service.get_by_display_number(self.customer, "#0000")
        self.assertEqual(error[0], "NOT_FOUND")
