"""Shopper journey: browse the cart, check a code, place an order, look back.

One SequentialTaskSet per simulated visit. Each visit builds a cart,
validates the seeded promo code, checks out with an idempotency key
(submitted twice to exercise replay), then reads order history and the
loyalty summary.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import checkout_data, idempotency_key, random_customer_id, random_product_ids, seed
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ShopperState


class CheckoutJourney(SequentialTaskSet):
    def on_start(self):
        self.state = ShopperState(customer_id=random_customer_id())
        self.headers = {"X-Customer-Id": self.state.customer_id}

    @task
    def fill_cart(self):
        for product_id in random_product_ids(random.randint(1, 3)):
            with self.client.post(
                "/cart",
                json={"productId": product_id, "quantity": 1},
                headers=self.headers,
                catch_response=True,
                name="POST /cart",
            ) as resp:
                if resp.status_code == 200:
                    self.state.cart_product_ids.append(product_id)
                elif resp.status_code == 400:
                    # Not enough stock left; shoppers move on
                    resp.success()
                else:
                    resp.failure(f"Add to cart failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def view_cart(self):
        self.client.get("/cart", headers=self.headers, name="GET /cart")

    @task
    def validate_promo(self):
        code = seed().get("promo_code")
        if not code:
            return
        with self.client.post(
            "/orders/validate-promo",
            json={"code": code, "subtotal": 5000},
            headers=self.headers,
            catch_response=True,
            name="POST /orders/validate-promo",
        ) as resp:
            if resp.status_code in (200, 400):
                resp.success()
            else:
                resp.failure(f"Validate promo failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def place_order(self):
        if not self.state.cart_product_ids:
            self.interrupt()
            return

        payload = checkout_data(self.state.cart_product_ids, loyalty_points=random.choice([0, 0, 50]))
        headers = {**self.headers, "Idempotency-Key": idempotency_key()}

        for attempt in ("first", "replay"):
            with self.client.post(
                "/orders",
                json=payload,
                headers=headers,
                catch_response=True,
                name=f"POST /orders ({attempt})",
            ) as resp:
                if resp.status_code == 200:
                    order_id = resp.json()["id"]
                    if attempt == "replay" and order_id not in self.state.order_ids:
                        resp.failure("Idempotent replay returned a different order")
                    elif attempt == "first":
                        self.state.order_ids.append(order_id)
                elif resp.status_code in (400, 409):
                    if resp.status_code == 409:
                        self.state.sold_out_count += 1
                    resp.success()
                    self.interrupt()
                else:
                    resp.failure(f"Checkout failed: {resp.status_code} {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def order_history(self):
        self.client.get("/orders?page=1&limit=10", headers=self.headers, name="GET /orders")
        for order_id in self.state.order_ids[-1:]:
            self.client.get(f"/orders/{order_id}", headers=self.headers, name="GET /orders/{id}")

    @task
    def loyalty(self):
        self.client.get("/loyalty", headers=self.headers, name="GET /loyalty")

    @task
    def done(self):
        self.interrupt()


class ShopperUser(HttpUser):
    tasks = [CheckoutJourney]
    wait_time = between(1, 3)
