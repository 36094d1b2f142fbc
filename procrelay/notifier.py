"""Queue worker body: resolve, format and deliver one request."""

import logging

from procrelay.channels.base import BaseChannel, DeliveryOutcome
from procrelay.channels.markdown import format_message
from procrelay.models.event import NotificationRequest
from procrelay.resolver import DestinationResolver

logger = logging.getLogger(__name__)


class Notifier:
    """Delivers notification requests through a channel."""

    def __init__(self, resolver: DestinationResolver, channel: BaseChannel):
        self._resolver = resolver
        self._channel = channel

    async def notify(self, request: NotificationRequest) -> DeliveryOutcome:
        destination = self._resolver.resolve(request.source_name)
        if destination is None:
            logger.debug(f"No destination for {request.source_name}, message skipped")
            return DeliveryOutcome.SKIPPED

        text = format_message(request.source_name, request.raw_text)
        outcome = await self._channel.send_safe(destination, text)

        if outcome is DeliveryOutcome.FAILED:
            logger.error(f"Failed to deliver message from {request.source_name} to {self._channel.name}")
        return outcome
