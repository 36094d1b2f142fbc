"""PM2 bus payload parser."""

from typing import Any

from procrelay.models.event import BusEvent, EventKind, ProcessInfo
from procrelay.sources.base import BaseSource


class Pm2Source(BaseSource):
    """Parser for payloads forwarded from a PM2 ``launchBus`` listener."""

    @property
    def name(self) -> str:
        return "pm2"

    def parse(self, kind: EventKind, payload: dict[str, Any]) -> BusEvent:
        process = payload.get("process")
        if not isinstance(process, dict) or not process.get("name"):
            raise ValueError("payload has no process name")

        return BusEvent(
            kind=kind,
            process=ProcessInfo.model_validate(
                {**process, "name": str(process["name"]), "pm_id": self._parse_pm_id(process.get("pm_id"))}
            ),
            data=payload.get("data"),
            msg=payload.get("msg"),
            event=payload.get("event"),
            manually=bool(payload.get("manually", False)),
        )

    def _parse_pm_id(self, value: Any) -> int | None:
        try:
            return int(value)
        except (TypeError, ValueError):
            return None
