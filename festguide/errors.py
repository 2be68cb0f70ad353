"""
Errors and tagged results for ownership-checked operations.

Operations that verify a resource belongs to the caller return Ok or Err
instead of raising, so callers can match on the outcome:

    result = await registry.deactivate_by_id(user_id, device_token_id)
    if isinstance(result, Err):
        raise HTTPException(403, str(result.error))
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


class NotificationError(Exception):
    """Base class for notification engine errors."""


class ForbiddenError(NotificationError):
    """Resource missing or owned by another user."""


class InvalidPreferenceError(NotificationError):
    """A preference update would leave the stored row inconsistent."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: NotificationError

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise self.error


Result = Union[Ok[T], Err]
