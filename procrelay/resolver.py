"""Per-source destination lookup."""

import logging
from typing import Any

from procrelay.models.config import ModuleConfig
from procrelay.models.destination import Destination

logger = logging.getLogger(__name__)

GROUP_CHAT_PREFIX = "g"


def normalize_chat_id(chat_id: str) -> str:
    """Strip the group marker from a configured chat id."""
    if chat_id.startswith(GROUP_CHAT_PREFIX):
        return chat_id[len(GROUP_CHAT_PREFIX):]
    return chat_id


class DestinationResolver:
    """Resolves and memoizes the Telegram destination of each source.

    Module configuration is read once at startup and never changes, so a
    resolved destination (or ``None`` for a source with notifications
    disabled) stays valid for the lifetime of the process.
    """

    def __init__(self, config: ModuleConfig):
        self._config = config
        self._cache: dict[str, Destination | None] = {}

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def is_cached(self, source_name: str) -> bool:
        return source_name in self._cache

    def resolve(self, source_name: str) -> Destination | None:
        """Return the destination for ``source_name``, or None when disabled."""
        if source_name not in self._cache:
            self._cache[source_name] = self._build(source_name)
        return self._cache[source_name]

    def _lookup(self, key: str, source_name: str) -> str:
        value: Any = self._config.get(f"{key}-{source_name}") or self._config.get(key)
        if not value:
            return ""
        return str(value)

    def _build(self, source_name: str) -> Destination | None:
        bot_token = self._lookup("telegram_bot_token", source_name)
        chat_id = self._lookup("telegram_chat_id", source_name)
        if not bot_token or not chat_id:
            logger.debug(f"Notifications disabled for {source_name}: no bot token or chat id")
            return None

        thread_id = self._lookup("telegram_message_thread_id", source_name)
        return Destination(
            bot_token=bot_token,
            chat_id=normalize_chat_id(chat_id),
            message_thread_id=thread_id or None,
        )
