from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.orders.models import Order, OrderItem, OrderStatus, PaymentStatus, PaymentTransaction
from apps.restaurants.models import MenuItem, Restaurant, RestaurantManager
from apps.users.models import Customer, Role, User

DEMO_PASSWORD = "dashi1234"

RESTAURANTS = [
    {
        "name": "Mama Efua's Kitchen",
        "description": "Home-style Ghanaian dishes cooked fresh every day.",
        "email": "hello@mamaefua.example",
        "phone_number": "0244000001",
        "address": "12 Oxford St, Osu",
        "service_area": "Osu, Labone, Cantonments",
        "category": "Local",
        "preparation_time": "25-35 min",
        "delivery_fee": Decimal("15.00"),
        "discount_tag": "10% off first order",
        "rating": Decimal("4.6"),
        "rating_count": 212,
        "menu": [
            ("Jollof Rice with Chicken", "Smoky party jollof, grilled chicken", "55.00", "Mains"),
            ("Waakye Special", "Rice and beans, gari, egg, shito", "45.00", "Mains"),
            ("Kelewele", "Spicy fried plantain", "20.00", "Sides"),
            ("Sobolo", "Chilled hibiscus drink", "12.00", "Drinks"),
        ],
    },
    {
        "name": "Tokyo Bowl",
        "description": "Ramen, donburi and sushi rolls.",
        "email": "orders@tokyobowl.example",
        "phone_number": "0244000002",
        "address": "4 Liberation Rd, Airport",
        "service_area": "Airport, East Legon",
        "category": "Japanese",
        "preparation_time": "20-30 min",
        "delivery_fee": Decimal("20.00"),
        "rating": Decimal("4.4"),
        "rating_count": 98,
        "menu": [
            ("Tonkotsu Ramen", "Pork broth, chashu, soft egg", "95.00", "Ramen"),
            ("Chicken Katsu Don", "Crispy chicken over rice", "80.00", "Donburi"),
            ("California Roll", "8 pieces", "70.00", "Sushi"),
            ("Green Tea", "Hot or iced", "15.00", "Drinks"),
        ],
    },
    {
        "name": "Burger Yard",
        "description": "Smash burgers and loaded fries.",
        "email": "team@burgeryard.example",
        "phone_number": "0244000003",
        "address": "7 Spintex Rd",
        "service_area": "Spintex, Tema Community 25",
        "category": "Fast food",
        "preparation_time": "15-25 min",
        "delivery_fee": Decimal("10.00"),
        "rating": Decimal("4.2"),
        "rating_count": 341,
        "menu": [
            ("Double Smash Burger", "Two patties, cheddar, pickles", "75.00", "Burgers"),
            ("Loaded Fries", "Cheese sauce, beef bits, jalapenos", "40.00", "Sides"),
            ("Vanilla Shake", "Thick and cold", "30.00", "Drinks"),
        ],
    },
]

CUSTOMERS = [
    ("Ama Mensah", "ama@example.com", "0244111111", "House 5, Ring Road, Accra"),
    ("Kofi Boateng", "kofi@example.com", "0244222222", "Flat 2B, East Legon"),
]


class Command(BaseCommand):
    help = "Seed demo restaurants, menus, users and a few delivered orders."

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush", action="store_true", help="Delete existing marketplace data before seeding"
        )

    def _user(self, email, name, role, phone="", **extra):
        user, created = User.objects.get_or_create(
            email=email,
            defaults={"username": email, "name": name, "role": role, "phone_number": phone, **extra},
        )
        if created:
            user.set_password(DEMO_PASSWORD)
            user.save()
        return user

    @transaction.atomic
    def handle(self, *args, **options):
        if options["flush"]:
            self.stdout.write("Flushing existing data...")
            PaymentTransaction.objects.all().delete()
            OrderItem.objects.all().delete()
            Order.objects.all().delete()
            MenuItem.objects.all().delete()
            RestaurantManager.objects.all().delete()
            Restaurant.objects.all().delete()
            Customer.objects.all().delete()
            User.objects.filter(is_superuser=False).delete()

        self.stdout.write("Seeding admin...")
        self._user("admin@dashi.example", "Dashi Admin", Role.ADMIN)

        self.stdout.write("Seeding restaurants, menus and managers...")
        restaurants = []
        for index, payload in enumerate(RESTAURANTS, start=1):
            attrs = dict(payload)
            menu = attrs.pop("menu")
            restaurant, _ = Restaurant.objects.get_or_create(name=attrs["name"], defaults=attrs)
            for name, description, price, category in menu:
                MenuItem.objects.get_or_create(
                    restaurant=restaurant,
                    name=name,
                    defaults={
                        "description": description,
                        "price": Decimal(price),
                        "category": category,
                    },
                )
            manager = self._user(
                f"manager{index}@dashi.example",
                f"{restaurant.name} Manager",
                Role.RESTAURANT,
                restaurant.phone_number,
            )
            RestaurantManager.objects.update_or_create(
                user=manager, defaults={"restaurant": restaurant}
            )
            restaurants.append(restaurant)

        self.stdout.write("Seeding customers...")
        customers = []
        for name, email, phone, address in CUSTOMERS:
            user = self._user(email, name, Role.CUSTOMER, phone)
            Customer.objects.get_or_create(
                user=user, defaults={"phone_number": phone, "address": address}
            )
            customers.append(user)

        self.stdout.write("Seeding delivered orders...")
        number = 1000
        for restaurant in restaurants:
            for customer in customers:
                number += 1
                if Order.objects.filter(order_number=number).exists():
                    continue
                items = list(restaurant.menu_items.filter(is_deleted=False)[:2])
                subtotal = sum((item.price for item in items), Decimal("0"))
                total = subtotal + restaurant.delivery_fee
                first, _, last = customer.name.partition(" ")
                order = Order.objects.create(
                    order_number=number,
                    customer=customer,
                    restaurant=restaurant,
                    status=OrderStatus.DELIVERED,
                    total=total,
                    first_name=first,
                    last_name=last or first,
                    email=customer.email,
                    phone_number=customer.phone_number,
                    delivery_address=customer.customer.address,
                )
                OrderItem.objects.bulk_create(
                    OrderItem(order=order, menu_item=item, name=item.name, price=item.price, quantity=1)
                    for item in items
                )
                PaymentTransaction.objects.create(
                    order=order,
                    mobile_number=customer.phone_number,
                    transaction_id=f"TX{number}00",
                    provider_name="MTN",
                    amount=total,
                    status=PaymentStatus.COMPLETED,
                )

        self.stdout.write(
            self.style.SUCCESS(f"Dashi seed completed. Demo password: {DEMO_PASSWORD}")
        )
