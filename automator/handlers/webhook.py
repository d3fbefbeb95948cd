"""HTTP webhook handler."""

from typing import Any

import httpx

from automator.core.config import Settings, get_settings
from automator.core.logging import get_logger
from automator.handlers.base import WebhookSender

logger = get_logger(__name__)


class HttpWebhookSender(WebhookSender):
    """Posts JSON bodies to webhook URLs."""

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize HTTP client.

        Args:
            settings: Application settings
            client: Preconfigured client (tests pass one with a mock transport)
        """
        settings = settings or get_settings()
        self._client = client or httpx.AsyncClient(timeout=settings.webhook_timeout_seconds)

    async def post(self, url: str, body: dict[str, Any]) -> None:
        """POST body to url.

        Raises:
            httpx.HTTPError: On network failure or non-2xx response
        """
        response = await self._client.post(url, json=body)
        response.raise_for_status()
        logger.debug("Webhook delivered", url=url, status_code=response.status_code)

    async def close(self) -> None:
        """Close HTTP client."""
        await self._client.aclose()
