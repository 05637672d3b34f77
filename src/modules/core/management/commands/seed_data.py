from __future__ import annotations

import random
from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.accounts.models import Role, User
from modules.accounts.principal import Principal
from modules.customers.models import Customer
from modules.orders.constants import OrderStatus, PaymentMethod
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.stock.models import StockItem
from modules.stock.repositories.django_repository import StockDjangoRepository

SEED_USERS = [
    ("admin", "admin12345", Role.ADMIN),
    ("rep.north", "rep12345", Role.REPRESENTATIVE),
    ("rep.south", "rep12345", Role.REPRESENTATIVE),
]

CATALOG = [
    ("Basmati Rice 5kg", "4791234000011", "Groceries", Decimal("2450.00")),
    ("Red Lentils 1kg", "4791234000028", "Groceries", Decimal("420.00")),
    ("Coconut Oil 750ml", "4791234000035", "Groceries", Decimal("780.00")),
    ("Ceylon Tea 400g", "4791234000042", "Beverages", Decimal("1150.00")),
    ("Instant Coffee 200g", "4791234000059", "Beverages", Decimal("1390.00")),
    ("Milk Powder 400g", "4791234000066", "Dairy", Decimal("1080.00")),
    ("Laundry Soap Bar", "4791234000073", "Household", Decimal("95.00")),
    ("Dishwash Liquid 500ml", "4791234000080", "Household", Decimal("340.00")),
    ("Toothpaste 120g", "4791234000097", "Personal Care", Decimal("260.00")),
    ("Shampoo 180ml", "4791234000103", "Personal Care", Decimal("610.00")),
]

CUSTOMERS = [
    ("Perera Stores", "North", "0771234501", Decimal("50000")),
    ("Silva Mini Mart", "North", "0771234502", Decimal("25000")),
    ("Fernando Traders", "South", "0771234503", Decimal("75000")),
    ("Jayasinghe Grocery", "South", "0771234504", Decimal("30000")),
]

# Statuses new seed orders are created with; mostly completed sales.
ORDER_STATUSES = [
    OrderStatus.COMPLETED,
    OrderStatus.COMPLETED,
    OrderStatus.COMPLETED,
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
]


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument(
            "--orders", type=int, default=20, help="Number of sample orders."
        )

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users = self._seed_users()
        items = self._seed_stock(users["admin"])
        customers = self._seed_customers(users)
        orders_created = self._seed_orders(users, items, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={len(users)}, "
                f"stock_items={len(items)}, "
                f"customers={customers}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self) -> dict[str, User]:
        users: dict[str, User] = {}
        for username, password, role in SEED_USERS:
            user = User.objects.filter(username=username).first()
            if user is None:
                user = User(username=username, role=role, is_staff=role == Role.ADMIN)
                user.set_password(password)
                user.save()
            users[username] = user
        return users

    def _seed_stock(self, admin: User) -> list[StockItem]:
        self.stdout.write("Creating stock items...")
        items: list[StockItem] = []
        for name, barcode, category, price in CATALOG:
            item, _ = StockItem.objects.get_or_create(
                barcode=barcode,
                defaults={
                    "name": name,
                    "category": category,
                    "price": price,
                    "quantity": random.randint(40, 200),
                    "created_by": admin,
                },
            )
            items.append(item)
        self.stdout.write(self.style.SUCCESS("Creating stock items... Done!"))
        return items

    def _seed_customers(self, users: dict[str, User]) -> int:
        self.stdout.write("Creating customers...")
        created = 0
        for name, route, telephone, credit_limit in CUSTOMERS:
            owner = users["rep.north"] if route == "North" else users["rep.south"]
            _, was_created = Customer.objects.get_or_create(
                telephone=telephone,
                defaults={
                    "name": name,
                    "route": route,
                    "credit_limit": credit_limit,
                    "added_by": owner,
                },
            )
            created += int(was_created)
        self.stdout.write(self.style.SUCCESS("Creating customers... Done!"))
        return created

    def _seed_orders(
        self, users: dict[str, User], items: list[StockItem], count: int
    ) -> int:
        if Order.objects.exists():
            self.stdout.write(self.style.WARNING("Skipping orders (already seeded)."))
            return 0

        self.stdout.write("Creating orders...")
        service = OrderService(
            order_repository=OrderDjangoRepository(),
            stock_repository=StockDjangoRepository(),
        )
        sellers = [users["rep.north"], users["rep.south"], users["admin"]]
        customer_names = [name for name, *_ in CUSTOMERS]

        for _ in range(count):
            seller = random.choice(sellers)
            lines = [
                CreateOrderItemDTO(
                    product_id=item.id,
                    quantity=random.randint(1, 3),
                    price=item.price,
                )
                for item in random.sample(items, k=random.randint(1, 4))
            ]
            subtotal = sum((line.price * line.quantity for line in lines), Decimal("0"))
            service.create_order(
                Principal.from_user(seller),
                CreateOrderDTO(
                    items=lines,
                    subtotal=subtotal,
                    total=subtotal,
                    payment_method=random.choice(PaymentMethod.values),
                    status=random.choice(ORDER_STATUSES),
                    customer_name=random.choice(customer_names + [""]),
                ),
            )

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return count
