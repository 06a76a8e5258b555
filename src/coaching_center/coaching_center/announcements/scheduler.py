from __future__ import annotations

from datetime import datetime
from typing import Tuple

from ..common.datetime_utils import end_of_day, start_of_day
from ..core.enums import AnnouncementStatus
from ..core.exceptions import InvalidDateRangeError


def derive_announcement_status(now: datetime, start_at: datetime, end_at: datetime) -> AnnouncementStatus:
    """Status of an announcement window at ``now``. Both ends are inclusive."""
    if now < start_at:
        return AnnouncementStatus.SCHEDULED
    if now > end_at:
        return AnnouncementStatus.EXPIRED
    return AnnouncementStatus.ACTIVE


def normalize_window(start_at: datetime, end_at: datetime) -> Tuple[datetime, datetime]:
    """Validate a display window and return the one to store.

    A window whose two ends fall on the same calendar date but do not move
    forward in time (typically both at midnight) is read as "all of that day".
    Any other window ending before it starts is rejected.
    """
    if start_at.date() == end_at.date() and end_at <= start_at:
        day = start_at.date()
        return start_of_day(day), end_of_day(day)
    if end_at < start_at:
        raise InvalidDateRangeError(
            f"end {end_at.isoformat()} is before start {start_at.isoformat()}"
        )
    return start_at, end_at
