"""
Festival guide backend - notification engine.

Delivers push notifications to attendees' devices, gated on their
preferences, and keeps a per-user audit trail of every attempt.
"""

from .errors import (
    Err,
    ForbiddenError,
    InvalidPreferenceError,
    NotificationError,
    Ok,
    Result,
)

__all__ = [
    "Ok",
    "Err",
    "Result",
    "NotificationError",
    "ForbiddenError",
    "InvalidPreferenceError",
]
