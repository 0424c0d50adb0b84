"""Contention scenario: every user tries to buy the same scarce product.

Exactly as many orders succeed as there were units in stock; everyone else
must get a 409 with code ``sold_out``. Any other answer is a failure.
"""

from locust import HttpUser, between, task

from loadtests.data_generators import idempotency_key, random_customer_id, scarce_product_id, shipping_address
from loadtests.helpers.response import extract_error_detail


class LastUnitRushUser(HttpUser):
    wait_time = between(0.1, 0.5)

    def on_start(self):
        self.headers = {"X-Customer-Id": random_customer_id()}

    @task
    def grab_last_unit(self):
        payload = {
            "items": [{"productId": scarce_product_id(), "quantity": 1}],
            "shippingAddress": shipping_address(),
            "paymentMethod": "card",
        }
        with self.client.post(
            "/orders",
            json=payload,
            headers={**self.headers, "Idempotency-Key": idempotency_key()},
            catch_response=True,
            name="POST /orders (scarce)",
        ) as resp:
            if resp.status_code == 200:
                return
            if resp.status_code == 409 and resp.json().get("code") == "sold_out":
                resp.success()
                return
            resp.failure(f"Unexpected checkout answer: {resp.status_code} {extract_error_detail(resp)}")
