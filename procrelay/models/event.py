"""Bus events and the notification requests derived from them."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EventKind(str, Enum):
    """Channels published on the process manager's event bus."""

    LOG_OUT = "log:out"
    LOG_ERR = "log:err"
    KILL = "pm2:kill"
    EXCEPTION = "process:exception"
    PROCESS_EVENT = "process:event"


class ProcessInfo(BaseModel):
    """The process an event was emitted for."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(description="Process name as registered in the process manager")
    pm_id: int | None = Field(default=None, description="Process manager id, if known")


class BusEvent(BaseModel):
    """A single event received from the process manager's bus."""

    kind: EventKind
    process: ProcessInfo
    data: Any = Field(default=None, description="Log chunk or exception payload")
    msg: str | None = Field(default=None, description="Kill message")
    event: str | None = Field(default=None, description="Custom event name")
    manually: bool = Field(default=False, description="Event was triggered by a user action")

    @property
    def source_name(self) -> str:
        return self.process.name


class NotificationRequest(BaseModel):
    """One message waiting in the serial queue."""

    model_config = ConfigDict(frozen=True)

    source_name: str
    raw_text: str
