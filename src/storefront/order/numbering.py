"""Human-presentable order numbers, e.g. ``BB-LK3J9A1-X7QM``."""

import secrets
import string
import time

from storefront import settings

_BASE36 = string.digits + string.ascii_uppercase


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("base36 encoding needs a non-negative integer")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_order_number(prefix=None, now_ms=None) -> str:
    """``PREFIX-<base36 ms timestamp>-<4 random base36 chars>``.

    Not unique by construction; the unique ``order_number`` field catches
    the rare collision and checkout retries with a fresh number.
    """
    prefix = prefix or settings.ORDER_NUMBER_PREFIX
    millis = int(time.time() * 1000) if now_ms is None else int(now_ms)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(4))
    return f"{prefix}-{to_base36(millis)}-{suffix}".upper()
