"""HTTP client for the spreadsheet webhook.

The webhook is a single URL that accepts order submissions (POST) and answers
read requests (GET with an ``action`` query parameter). Spreadsheet script
hosts reply through redirects, so redirects are followed.
"""

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from .config import Settings
from .errors import ConfigError, FetchError, TransportError, WebhookError
from .schemas import Order, OrderList, Product, ProductList

logger = logging.getLogger(__name__)


class WebhookClient:
    """Thin wrapper over httpx bound to the configured webhook URL."""

    def __init__(self, settings: Settings, transport: Optional[httpx.BaseTransport] = None):
        self.settings = settings
        self._transport = transport

    @property
    def configured(self) -> bool:
        return self.settings.webhook_configured

    def _get_client(self) -> httpx.Client:
        """Get a configured httpx client."""
        return httpx.Client(
            timeout=self.settings.webhook_timeout,
            follow_redirects=True,
            transport=self._transport,
        )

    def _require_configured(self) -> None:
        if not self.configured:
            raise ConfigError()

    def post_order(self, order: Order) -> None:
        """Send one order. Exactly one POST; no retry.

        Raises:
            ConfigError: webhook URL unset or a placeholder
            WebhookError: non-2xx response
            TransportError: the request never completed
        """
        self._require_configured()
        try:
            with self._get_client() as client:
                response = client.post(self.settings.webhook_url, json=order.to_wire())
        except httpx.RequestError as e:
            logger.error("Webhook unreachable while submitting %s: %s", order.id, e)
            raise TransportError(str(e)) from e

        if not response.is_success:
            logger.error("Webhook rejected order %s with status %s", order.id, response.status_code)
            raise WebhookError(f"webhook returned {response.status_code}", status=response.status_code)

    def _get(self, action: str) -> dict:
        self._require_configured()
        try:
            with self._get_client() as client:
                response = client.get(self.settings.webhook_url, params={"action": action})
        except httpx.RequestError as e:
            logger.warning("Webhook unreachable for action=%s: %s", action, e)
            raise FetchError(str(e)) from e

        if not response.is_success:
            raise FetchError(f"webhook returned {response.status_code}")
        try:
            data = response.json()
        except ValueError as e:
            raise FetchError("webhook returned malformed JSON") from e
        if not isinstance(data, dict):
            raise FetchError("webhook returned an unexpected payload")
        return data

    def fetch_orders(self) -> List[Order]:
        """Orders in the order the webhook lists them; a missing `orders` field is []."""
        data = self._get("orders")
        try:
            parsed = OrderList.model_validate(data)
        except ValidationError as e:
            raise FetchError(f"invalid order data: {e.error_count()} error(s)") from e
        return parsed.orders or []

    def fetch_products(self) -> List[Product]:
        data = self._get("products")
        try:
            parsed = ProductList.model_validate(data)
        except ValidationError as e:
            raise FetchError(f"invalid product data: {e.error_count()} error(s)") from e
        return parsed.products or []
