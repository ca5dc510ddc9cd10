"""Admin notifications posted to the storefront's automation webhook."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import requests

from tools.observability import instrument_call

logger = logging.getLogger(__name__)


class InvalidWebhookURLError(ValueError):
    """Raised when the configured webhook URL is not a valid HTTP or HTTPS URL."""


class WebhookDeliveryError(RuntimeError):
    """Raised when the webhook cannot be reached or answers with a non-2xx status."""


def _validate_url(url: str) -> None:
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise InvalidWebhookURLError(f"Unsupported or invalid webhook URL: {url}")


class WebhookNotifier:
    """Posts JSON events to a webhook; unconfigured notifiers do nothing."""

    def __init__(self, webhook_url: Optional[str], timeout: float = 10.0) -> None:
        if webhook_url:
            _validate_url(webhook_url)
        self.webhook_url = webhook_url
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    @instrument_call("webhook")
    def post(self, payload: Dict[str, Any]) -> None:
        """Deliver ``payload``.

        Raises:
            WebhookDeliveryError: For network issues or non-2xx responses.
        """

        if not self.webhook_url:
            raise WebhookDeliveryError("Webhook URL is not configured")
        try:
            response = requests.post(self.webhook_url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise WebhookDeliveryError(f"Network error posting webhook: {exc}") from exc
        if not 200 <= response.status_code < 300:
            raise WebhookDeliveryError(f"Webhook answered HTTP {response.status_code}")

    def notify(self, payload: Dict[str, Any]) -> bool:
        """Best-effort delivery; returns whether the webhook accepted the event."""

        if not self.enabled:
            logger.info("Webhook URL not configured; skipping %s notification", payload.get("type"))
            return False
        try:
            self.post(payload)
        except WebhookDeliveryError as exc:
            logger.warning("Failed to send %s notification: %s", payload.get("type"), exc)
            return False
        return True


__all__ = ["InvalidWebhookURLError", "WebhookDeliveryError", "WebhookNotifier"]
