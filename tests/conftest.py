"""Shared test fixtures for procrelay."""

from typing import Any, Callable

import pytest

from procrelay.channels.base import BaseChannel, DeliveryError
from procrelay.models.config import ModuleConfig
from procrelay.models.destination import Destination
from procrelay.models.event import BusEvent, EventKind, ProcessInfo


class RecordingChannel(BaseChannel):
    """Channel that records messages instead of sending them."""

    def __init__(self, fail_when: Callable[[str], bool] | None = None):
        self.sent: list[tuple[Destination, str]] = []
        self.attempts: list[str] = []
        self._fail_when = fail_when

    @property
    def name(self) -> str:
        return "recording"

    async def send(self, destination: Destination, text: str) -> None:
        self.attempts.append(text)
        if self._fail_when and self._fail_when(text):
            raise DeliveryError(500, "simulated failure")
        self.sent.append((destination, text))


@pytest.fixture
def make_config() -> Callable[..., ModuleConfig]:
    """Build a ModuleConfig with working default credentials."""

    def _make(**overrides: Any) -> ModuleConfig:
        data: dict[str, Any] = {
            "telegram_bot_token": "123456:ABC-token",
            "telegram_chat_id": "g-100200",
            "module_name": "procrelay",
            "queue_limit": 10,
            "log": True,
            "error": True,
            "kill": True,
            "exception": True,
        }
        data.update(overrides)
        return ModuleConfig.model_validate(data)

    return _make


@pytest.fixture
def make_event() -> Callable[..., BusEvent]:
    def _make(kind: EventKind, name: str = "api", **fields: Any) -> BusEvent:
        return BusEvent(kind=kind, process=ProcessInfo(name=name), **fields)

    return _make


@pytest.fixture
def recording_channel() -> RecordingChannel:
    return RecordingChannel()
