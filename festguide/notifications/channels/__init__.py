"""Delivery channels."""

from .push import (
    LoggingPushProvider,
    PushProvider,
    PushProviderError,
    get_push_provider,
    set_push_provider,
)

__all__ = [
    "PushProvider",
    "PushProviderError",
    "LoggingPushProvider",
    "get_push_provider",
    "set_push_provider",
]
