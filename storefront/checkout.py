import logging
import threading

from .cart import Cart
from .catalog import Catalog
from .errors import CheckoutBusyError, CheckoutError, ConfigError, EmptyCartError
from .metrics import ORDERS_FAILED, ORDERS_SUBMITTED
from .orders import build_order
from .schemas import Customer, Order
from .webhook import WebhookClient

logger = logging.getLogger(__name__)

_FAILURE_REASONS = {
    "ConfigError": "config",
    "EmptyCartError": "empty_cart",
    "CheckoutBusyError": "busy",
    "WebhookError": "webhook",
    "TransportError": "transport",
}


class CheckoutSubmitter:
    """
    Sends orders to the webhook and commits the local effects on success.

    Only one submission runs at a time. On any failure the cart and the
    catalog are left exactly as they were.
    """

    def __init__(self, cart: Cart, catalog: Catalog, webhook: WebhookClient):
        self.cart = cart
        self.catalog = catalog
        self.webhook = webhook
        self._busy = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._busy.locked()

    def submit_order(self, order: Order) -> str:
        if not self._busy.acquire(blocking=False):
            raise self._failed(CheckoutBusyError())
        try:
            try:
                if not self.webhook.configured:
                    raise ConfigError()
                if self.cart.is_empty():
                    raise EmptyCartError()
                self.webhook.post_order(order)
            except (CheckoutError, ConfigError) as e:
                raise self._failed(e)
            self._commit(order)
        finally:
            self._busy.release()

        ORDERS_SUBMITTED.inc()
        logger.info("Order %s submitted (%d items, total %d)", order.id, len(order.items), order.total)
        return order.id

    def checkout(self, customer: Customer) -> Order:
        """Build an order from the current cart and submit it."""
        lines = self.cart.lines()
        if not lines:
            raise self._failed(EmptyCartError())
        order = build_order(lines, customer)
        self.submit_order(order)
        return order

    def _commit(self, order: Order) -> None:
        # only what was submitted; lines added while the POST was in flight stay
        self.catalog.decrement_stock(order.items)
        self.cart.take(order.items)

    def _failed(self, error: Exception) -> Exception:
        reason = _FAILURE_REASONS.get(type(error).__name__, "other")
        ORDERS_FAILED.labels(reason=reason).inc()
        logger.warning("Checkout failed (%s): %s", reason, error)
        return error
