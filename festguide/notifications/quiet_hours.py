"""Quiet-hours window check."""

from datetime import datetime, time, timezone


def is_quiet_now(
    now: datetime | time,
    start: time | None,
    end: time | None,
) -> bool:
    """
    Whether pushes are suppressed at `now` for the window [start, end).

    The start bound blocks, the end bound allows sending again. A window with
    start > end wraps past midnight (22:00-08:00). start == end is an empty
    window. Either bound missing means no quiet hours.

    An aware `now` is converted to UTC first, a naive one is taken as UTC;
    either way its wall-clock time is compared with no other conversion.
    """
    if start is None or end is None:
        return False

    if isinstance(now, datetime):
        if now.tzinfo is not None:
            now = now.astimezone(timezone.utc)
        current = now.time()
    else:
        current = now
    # Drop tzinfo so aware and naive times compare
    current = current.replace(tzinfo=None)
    start = start.replace(tzinfo=None)
    end = end.replace(tzinfo=None)

    if start <= end:
        return start <= current < end

    # Overnight window
    return current >= start or current < end
