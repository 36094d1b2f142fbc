"""Resolved Telegram destination for a source."""

from pydantic import BaseModel, ConfigDict


class Destination(BaseModel):
    """Bot credentials and chat a source's notifications are sent to."""

    model_config = ConfigDict(frozen=True)

    bot_token: str
    chat_id: str
    message_thread_id: str | None = None
