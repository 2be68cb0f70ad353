"""Push notification delivery channel."""

import logging
from typing import Protocol

from ..models import PushMessage

logger = logging.getLogger(__name__)


class PushProviderError(Exception):
    """A provider rejected or failed to deliver a message."""


class PushProvider(Protocol):
    """
    External push service (FCM, APNs, web push, ...).

    send() returns on success and raises on any failure, timeouts included.
    Timeouts and payload formatting are the provider's business.
    """

    async def send(self, platform: str, token: str, message: PushMessage) -> None:
        ...


class LoggingPushProvider:
    """Development provider: logs the message and reports success."""

    async def send(self, platform: str, token: str, message: PushMessage) -> None:
        logger.info(
            f"[push] {platform} device: title={message.title!r} "
            f"category={message.category}"
        )


# Set by the process entry point when a real provider is configured
_provider: PushProvider | None = None


def set_push_provider(provider: PushProvider | None) -> None:
    """Set the process-wide push provider."""
    global _provider
    _provider = provider


def get_push_provider() -> PushProvider | None:
    return _provider
