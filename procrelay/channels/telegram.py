"""Telegram Bot API channel implementation."""

import json
import logging
from typing import Any

import httpx

from procrelay.channels.base import BaseChannel, DeliveryError
from procrelay.models.destination import Destination

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.telegram.org"
PARSE_MODE = "MarkdownV2"


def mask_token(token: str) -> str:
    """Hide all but the bot id part of a token for logging."""
    bot_id, sep, _ = token.partition(":")
    if sep:
        return f"{bot_id}:***"
    return "***"


class TelegramChannel(BaseChannel):
    """Sends one sendMessage call per notification."""

    def __init__(
        self,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return "telegram"

    def build_url(self, destination: Destination) -> str:
        return f"{self._api_base}/bot{destination.bot_token}/sendMessage"

    def build_payload(self, destination: Destination, text: str) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "chat_id": destination.chat_id,
            "text": text,
            "parse_mode": PARSE_MODE,
        }
        if destination.message_thread_id:
            payload["message_thread_id"] = destination.message_thread_id
        return payload

    async def send(self, destination: Destination, text: str) -> None:
        body = json.dumps(self.build_payload(destination, text)).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "Content-Length": str(len(body)),
        }

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.post(self.build_url(destination), content=body, headers=headers)

        if not 200 <= response.status_code <= 299:
            raise DeliveryError(response.status_code, response.text)

        logger.info(
            f"Message sent to Telegram chat {destination.chat_id} "
            f"(bot {mask_token(destination.bot_token)})"
        )
