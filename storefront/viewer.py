import hmac
import logging
from typing import List, Optional, Protocol

from .errors import AuthError, ConfigError, FetchError
from .metrics import FETCH_FAILED
from .schemas import Order
from .webhook import WebhookClient

logger = logging.getLogger(__name__)


class SecretVerifier(Protocol):
    def verify(self, provided: Optional[str]) -> bool: ...


class SharedSecretVerifier:
    """Equality against one configured secret. An unset secret admits nobody."""

    def __init__(self, expected: str):
        self._expected = expected or ""

    def verify(self, provided: Optional[str]) -> bool:
        if not self._expected or provided is None:
            return False
        return hmac.compare_digest(provided.encode(), self._expected.encode())


class OrderViewer:
    """Admin read path: previously submitted orders, as the webhook lists them."""

    def __init__(self, verifier: SecretVerifier, webhook: WebhookClient):
        self.verifier = verifier
        self.webhook = webhook

    def fetch_orders(self, secret_provided: Optional[str]) -> List[Order]:
        if not self.verifier.verify(secret_provided):
            FETCH_FAILED.labels(reason="auth").inc()
            logger.warning("Order listing refused: bad admin secret")
            raise AuthError()
        try:
            orders = self.webhook.fetch_orders()
        except ConfigError:
            FETCH_FAILED.labels(reason="config").inc()
            raise
        except FetchError as e:
            FETCH_FAILED.labels(reason="fetch").inc()
            logger.error("Order listing failed: %s", e)
            raise
        logger.info("Fetched %d orders", len(orders))
        return orders
