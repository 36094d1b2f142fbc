"""Base class for bus payload parsers."""

from abc import ABC, abstractmethod
from typing import Any

from procrelay.models.event import BusEvent, EventKind


class BaseSource(ABC):
    """Abstract base class for bus payload parsers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Source name identifier."""
        ...

    @abstractmethod
    def parse(self, kind: EventKind, payload: dict[str, Any]) -> BusEvent:
        """Parse a raw bus payload into a BusEvent."""
        ...
