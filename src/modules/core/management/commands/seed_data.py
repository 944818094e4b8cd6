from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from modules.orders.constants import OrderStatus
from modules.orders.repositories.django_repository import OrderDjangoRepository

# (product_id, name, unit price) as published by the demo catalog
DEMO_PRODUCTS = [
    (1, "Mechanical Keyboard", Decimal("89.90")),
    (2, "Wireless Mouse", Decimal("24.99")),
    (3, "27in Monitor", Decimal("249.00")),
    (4, "USB-C Dock", Decimal("129.50")),
    (5, "Laptop Stand", Decimal("39.00")),
]
DEMO_USER_IDS = [1, 2, 3, 4]


class Command(BaseCommand):
    help = "Seed the order store with development data (no catalog calls)."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=12)

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        orders_created = self._seed_orders(options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: users={users_created}, orders={orders_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="user").exists():
            User.objects.create_user("user", password="user123")
            created += 1
        return created

    def _seed_orders(self, count: int) -> int:
        self.stdout.write("Creating orders...")
        repository = OrderDjangoRepository()
        statuses = list(OrderStatus)
        now = timezone.now()

        for index in range(count):
            lines = random.sample(DEMO_PRODUCTS, k=random.randint(1, 3))
            items = [
                {
                    "product_id": product_id,
                    "product_name": name,
                    "quantity": random.randint(1, 4),
                    "unit_price": price,
                }
                for product_id, name, price in lines
            ]
            repository.create(
                {
                    "user_id": random.choice(DEMO_USER_IDS),
                    "status": random.choice(statuses),
                    "order_date": now - timedelta(days=index),
                    "total_amount": sum(
                        (i["unit_price"] * i["quantity"] for i in items),
                        Decimal("0.00"),
                    ),
                    "items": items,
                }
            )
        return count
