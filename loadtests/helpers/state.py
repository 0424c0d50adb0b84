"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own state; nothing is shared across users.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks a single simulated customer's session."""

    customer_id: str | None = None
    cart_product_ids: list[str] = field(default_factory=list)
    order_ids: list[str] = field(default_factory=list)
    sold_out_count: int = 0
