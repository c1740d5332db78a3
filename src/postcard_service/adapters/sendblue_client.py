"""Sendblue messaging API client adapter."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from postcard_service.errors import GatewayError, GatewayErrorReason

logger = logging.getLogger(__name__)


class MessagingGateway(Protocol):
    """Interface for sending text messages to a phone number."""

    async def send(self, to_phone: str, content: str) -> None:
        """Send a text message, raising GatewayError on failure."""


@dataclass
class HttpxSendblueClient(MessagingGateway):
    """Sendblue client implemented with httpx."""

    api_key: str
    api_secret: str
    from_number: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, api_key: str, api_secret: str, from_number: str, base_url: str
    ) -> "HttpxSendblueClient":
        """Create a Sendblue client with a managed httpx session."""
        return cls(
            api_key=api_key,
            api_secret=api_secret,
            from_number=from_number,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
        )

    async def send(self, to_phone: str, content: str) -> None:
        """Send a message using Sendblue's send-message API."""
        url = f"{self.base_url.rstrip('/')}/send-message"
        payload = {
            "from_number": self.from_number,
            "number": to_phone,
            "content": content,
        }
        headers = {
            "SB-API-KEY-ID": self.api_key,
            "SB-API-SECRET-KEY": self.api_secret,
        }
        try:
            response = await self.http_client.post(
                url, json=payload, headers=headers, timeout=10
            )
        except httpx.HTTPError as exc:
            raise GatewayError(
                GatewayErrorReason.SERVER_ERROR, detail=type(exc).__name__
            ) from exc
        if response.is_success:
            return
        logger.warning(
            "Sendblue rejected message",
            extra={"status_code": response.status_code, "number": to_phone},
        )
        raise GatewayError.from_status(response.status_code, detail=response.text)

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
