from decimal import Decimal
from smtplib import SMTPException
from unittest import mock

from django.core import mail
from django.test import TestCase

from apps.orders.models import Order, OrderItem
from apps.orders.notifications import OrderEmailNotifier
from apps.restaurants.models import MenuItem, Restaurant
from apps.users.models import User


class OrderEmailNotifierTests(TestCase):
    def setUp(self):
        self.customer = User.objects.create_user(
            username="ama@example.com", email="ama@example.com", password="secret123", name="Ama"
        )
        self.restaurant = Restaurant.objects.create(
            name="Mama Efua", email="kitchen@mamaefua.example"
        )
        jollof = MenuItem.objects.create(
            restaurant=self.restaurant, name="Jollof", price=Decimal("55.00")
        )
        self.order = Order.objects.create(
            order_number=4821,
            customer=self.customer,
            restaurant=self.restaurant,
            total=Decimal("125.00"),
            first_name="Ama",
            last_name="Mensah",
            email="ama@example.com",
            phone_number="0244111111",
            delivery_address="House 5, Ring Road",
        )
        OrderItem.objects.create(
            order=self.order, menu_item=jollof, name="Jollof", price=Decimal("55.00"), quantity=2
        )

    def test_order_placed_emails_restaurant_and_customer(self):
        OrderEmailNotifier().order_placed(self.order)
        self.assertEqual(len(mail.outbox), 2)
        to_restaurant, to_customer = mail.outbox
        self.assertEqual(to_restaurant.to, ["kitchen@mamaefua.example"])
        self.assertIn("#4821", to_restaurant.subject)
        self.assertIn("2 x Jollof", to_restaurant.body)
        self.assertIn("Notes: -", to_restaurant.body)
        self.assertEqual(to_customer.to, ["ama@example.com"])
        self.assertIn("Mama Efua", to_customer.body)

    def test_restaurant_without_email_only_notifies_customer(self):
        self.restaurant.email = ""
        self.restaurant.save()
        OrderEmailNotifier().order_placed(self.order)
        self.assertEqual([m.to for m in mail.outbox], [["ama@example.com"]])

    def test_disabled_notifier_sends_nothing(self):
        OrderEmailNotifier(enabled=False).order_placed(self.order)
        self.assertEqual(mail.outbox, [])

    @mock.patch("apps.orders.notifications.send_mail", side_effect=SMTPException("down"))
    def test_delivery_failure_is_swallowed(self, mock_send):
        OrderEmailNotifier().order_placed(self.order)
        self.assertEqual(mock_send.call_count, 2)
