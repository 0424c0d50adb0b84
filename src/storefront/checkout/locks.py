"""In-process keyed locks serializing checkouts that touch the same resources.

Every checkout takes one lock per product, per promotion code and per
customer, always in sorted key order so two checkouts cannot deadlock.
Across processes, aggregate versioning takes over.
"""

import threading
from collections import defaultdict
from contextlib import ExitStack, contextmanager

from storefront import settings
from storefront.promotions.promotion import normalize_code
from storefront.shared.exceptions import CheckoutUnavailable


class KeyedLocks:
    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = defaultdict(threading.Lock)

    def _lock_for(self, key):
        with self._guard:
            return self._locks[key]

    @contextmanager
    def hold(self, keys, timeout=None):
        """Acquire every key in sorted order; raise CheckoutUnavailable on timeout."""
        timeout = settings.CHECKOUT_LOCK_TIMEOUT if timeout is None else timeout
        with ExitStack() as stack:
            for key in sorted(set(keys)):
                lock = self._lock_for(key)
                if not lock.acquire(timeout=timeout):
                    raise CheckoutUnavailable(f"Timed out waiting for {key}")
                stack.callback(lock.release)
            yield


checkout_locks = KeyedLocks()


def resource_keys(customer_id, product_ids, promo_code=None):
    keys = {f"customer:{customer_id}"}
    keys.update(f"product:{product_id}" for product_id in product_ids)
    code = normalize_code(promo_code)
    if code:
        keys.add(f"promotion:{code}")
    return keys
