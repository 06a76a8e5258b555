from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import FrozenSet, Optional, Tuple

from ..core.enums import BatchStatus, Weekday


@dataclass(frozen=True)
class BatchSchedule:
    """Weekly timetable: which weekdays, and the HH:MM window on each."""

    days: Tuple[Weekday, ...]
    start_time: str
    end_time: str

    def to_dict(self) -> dict:
        return {
            "days": [d.value for d in self.days],
            "start_time": self.start_time,
            "end_time": self.end_time,
        }


@dataclass(frozen=True)
class Batch:
    """Domain entity: a group studying one subject under one teacher for a date range.

    ``enrolled_student_ids`` is the roster, the batch's view of enrollment.
    ``status`` is derived from the date range (see ``lifecycle``).
    """

    batch_id: int
    name: str
    standard_id: int
    subject_id: int
    teacher_id: int
    start_date: date
    end_date: date
    schedule: BatchSchedule
    capacity: int
    fees: Decimal
    status: BatchStatus
    enrolled_student_ids: FrozenSet[int] = frozenset()
    description: Optional[str] = None

    @property
    def enrolled_count(self) -> int:
        return len(self.enrolled_student_ids)

    @property
    def is_full(self) -> bool:
        return self.enrolled_count >= self.capacity

    @property
    def seats_left(self) -> int:
        return max(self.capacity - self.enrolled_count, 0)

    def to_dict(self) -> dict:
        return {
            "batch_id": self.batch_id,
            "name": self.name,
            "standard_id": self.standard_id,
            "subject_id": self.subject_id,
            "teacher_id": self.teacher_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "schedule": self.schedule.to_dict(),
            "capacity": self.capacity,
            "fees": str(self.fees),
            "status": self.status.value,
            "enrolled_student_ids": sorted(self.enrolled_student_ids),
            "seats_left": self.seats_left,
            "description": self.description,
        }
