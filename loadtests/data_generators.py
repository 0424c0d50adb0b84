"""Faker-based payloads and seed data for the checkout scenarios.

Payloads use the camelCase field names of the API's Pydantic request
schemas.
"""

import json
import os
import random
import uuid
from functools import lru_cache
from pathlib import Path

from faker import Faker

fake = Faker()

SEED_FILE = Path(os.getenv("LOADTEST_SEED_FILE", Path(__file__).parent / "seed.json"))


@lru_cache(maxsize=1)
def seed() -> dict:
    """Ids written by ``manage.py seed-demo``."""
    with SEED_FILE.open() as fh:
        return json.load(fh)


def random_customer_id() -> str:
    return random.choice(seed()["customer_ids"])


def random_product_ids(count: int) -> list[str]:
    product_ids = seed()["product_ids"]
    return random.sample(product_ids, k=min(count, len(product_ids)))


def scarce_product_id() -> str:
    return seed()["scarce_product_id"]


def promo_code() -> str | None:
    """Seeded code for roughly a third of orders."""
    return seed().get("promo_code") if random.random() < 0.33 else None


def shipping_address() -> dict:
    if random.random() < 0.3:
        return {
            "name": fake.name()[:255],
            "phone": fake.phone_number()[:50],
            "city": fake.city()[:100],
            "pickupPointId": f"PVZ-{random.randint(1000, 9999)}",
            "pickupPointName": fake.company()[:255],
            "pickupPointAddress": fake.street_address()[:500],
            "provider": "pickup",
        }
    return {
        "name": fake.name()[:255],
        "phone": fake.phone_number()[:50],
        "city": fake.city()[:100],
        "street": fake.street_name()[:255],
        "house": fake.building_number()[:50],
        "postalCode": fake.postcode()[:20],
    }


def checkout_data(product_ids: list[str], loyalty_points: int = 0) -> dict:
    return {
        "items": [{"productId": pid, "quantity": random.randint(1, 2)} for pid in product_ids],
        "shippingAddress": shipping_address(),
        "paymentMethod": random.choice(["card", "cash", "online"]),
        "promoCode": promo_code(),
        "loyaltyPointsToUse": loyalty_points,
    }


def idempotency_key() -> str:
    return f"LT-{uuid.uuid4().hex}"
