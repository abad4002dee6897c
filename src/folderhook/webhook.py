"""HTTP delivery of notifications to the configured webhook."""

import logging
from typing import Optional

import httpx

from .exceptions import DeliveryError
from .models import NotificationPayload

logger = logging.getLogger(__name__)


class WebhookClient:
    """Posts notification payloads as JSON to a single webhook URL."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def send(self, payload: NotificationPayload) -> bool:
        """
        Send a payload to the webhook.

        Failures are logged and reported through the return value; nothing is
        retried and no exception escapes.

        Args:
            payload: The notification to deliver

        Returns:
            True if the webhook accepted the request
        """
        try:
            self._post(payload)
        except DeliveryError as e:
            logger.error(f"Failed to deliver notification: {e}")
            return False

        logger.info(
            "Sent notification to webhook (%d embed(s), %d field(s))",
            len(payload), payload.field_count(),
        )
        return True

    def _post(self, payload: NotificationPayload) -> None:
        try:
            body = payload.to_json()
        except (TypeError, ValueError) as e:
            raise DeliveryError(f"cannot serialize payload: {e}") from e

        try:
            resp = self._client.post(
                self.url,
                content=body,
                headers={"Content-Type": "application/json"},
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DeliveryError(
                f"webhook returned HTTP {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except httpx.InvalidURL as e:
            raise DeliveryError(f"invalid webhook URL {self.url!r}: {e}") from e
        except httpx.HTTPError as e:
            raise DeliveryError(f"request to webhook failed: {e}") from e

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
