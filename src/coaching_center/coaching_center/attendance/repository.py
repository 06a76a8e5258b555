from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def upsert(
        self,
        *,
        student_id: int,
        batch_id: int,
        attendance_date: date,
        status: AttendanceStatus,
        remarks: str = "",
        marked_by: Optional[int] = None,
    ) -> int:
        """Insert or overwrite the record keyed by (student, batch, day).

        The store's unique key on that triple is what prevents duplicate rows,
        however often a submission is retried. Returns attendance_id.
        """

        raise NotImplementedError

    def list_for_batch_and_date(self, *, batch_id: int, attendance_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_batch_range(self, *, batch_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        """Ordered by date, then student."""

        raise NotImplementedError

    def list_for_student_and_batch(
        self,
        *,
        student_id: int,
        batch_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Newest first."""

        raise NotImplementedError

    def delete_for_student(self, student_id: int) -> int:
        raise NotImplementedError

    def delete_for_batch(self, batch_id: int) -> int:
        raise NotImplementedError
