"""Batch lifecycle: status as a pure function of the date range and today."""
from __future__ import annotations

from datetime import date

from ..core.enums import BatchStatus


def derive_batch_status(today: date, start_date: date, end_date: date) -> BatchStatus:
    if today < start_date:
        return BatchStatus.UPCOMING
    if today > end_date:
        return BatchStatus.COMPLETED
    return BatchStatus.ACTIVE
