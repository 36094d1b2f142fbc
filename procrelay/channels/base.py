"""Base class for notification channels."""

import logging
from abc import ABC, abstractmethod
from enum import Enum

from procrelay.models.destination import Destination

logger = logging.getLogger(__name__)


class DeliveryOutcome(str, Enum):
    """Result of one delivery attempt."""

    DELIVERED = "delivered"
    FAILED = "failed"
    SKIPPED = "skipped"


class DeliveryError(Exception):
    """Raised by a channel when the remote API rejects a message."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"Status: {status_code}\n{body}")
        self.status_code = status_code
        self.body = body


class BaseChannel(ABC):
    """Abstract base class for notification channels."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Channel name for logging."""
        ...

    @abstractmethod
    async def send(self, destination: Destination, text: str) -> None:
        """Send a formatted message, raising on failure."""
        ...

    async def send_safe(self, destination: Destination, text: str) -> DeliveryOutcome:
        """Send a message with error handling. Never raises."""
        try:
            await self.send(destination, text)
        except Exception as e:
            logger.exception(f"Failed to send to channel {self.name}: {e}")
            return DeliveryOutcome.FAILED
        return DeliveryOutcome.DELIVERED
