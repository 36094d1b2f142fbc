"""Module configuration models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ModuleConfig(BaseModel):
    """Flat key/value configuration of the relay module.

    Besides the declared keys the mapping carries per-source overrides
    (``telegram_bot_token-<source>`` and friends) and one boolean per custom
    event name, so unknown keys are kept as extras.
    """

    model_config = ConfigDict(extra="allow", frozen=True, coerce_numbers_to_str=True)

    telegram_bot_token: str = Field(default="", description="Default bot token")
    telegram_chat_id: str = Field(default="", description="Default chat id, 'g' prefix for groups")
    telegram_message_thread_id: str = Field(default="", description="Default forum topic id")

    queue_limit: int = Field(default=100, description="Pending messages before log lines are dropped")
    log: bool = Field(default=False, description="Relay stdout log lines")
    error: bool = Field(default=True, description="Relay stderr log lines")
    kill: bool = Field(default=True, description="Relay process manager kill messages")
    exception: bool = Field(default=True, description="Relay uncaught exceptions")
    auto_event_only: bool = Field(default=False, description="Ignore manually triggered events")
    module_name: str = Field(default="procrelay", description="Own process name, never notified")

    def get(self, key: str, default: Any = None) -> Any:
        """Return a declared or extra key, or ``default`` when absent."""
        if key in type(self).model_fields:
            return getattr(self, key)
        extra = self.model_extra or {}
        return extra.get(key, default)

    def event_enabled(self, event_name: str) -> bool:
        return bool(self.get(event_name))
