"""Read-side attendance statistics.

Everything here is pure: callers pass in the records, nothing is fetched or
written.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Tuple

from ..core.constants import MONTH_FORMAT
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


def percentage(part: int, total: int) -> int:
    """Round-half-up integer percentage; 0 when there is nothing to count.

    Integer arithmetic only, so 1/8 gives 13 and not the 12 that banker's
    rounding of 12.5 would.
    """
    if total <= 0:
        return 0
    return (200 * part + total) // (2 * total)


@dataclass(frozen=True)
class AttendanceSummary:
    total: int
    present: int
    absent: int
    late: int
    attendance_percentage: int
    absent_percentage: int
    late_percentage: int

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "attendance_percentage": self.attendance_percentage,
            "absent_percentage": self.absent_percentage,
            "late_percentage": self.late_percentage,
        }


def summarize(records: Iterable[AttendanceRecord]) -> AttendanceSummary:
    counts = {s: 0 for s in AttendanceStatus}
    for r in records:
        counts[r.status] += 1

    total = sum(counts.values())
    present = counts[AttendanceStatus.PRESENT]
    absent = counts[AttendanceStatus.ABSENT]
    late = counts[AttendanceStatus.LATE]
    return AttendanceSummary(
        total=total,
        present=present,
        absent=absent,
        late=late,
        attendance_percentage=percentage(present, total),
        absent_percentage=percentage(absent, total),
        late_percentage=percentage(late, total),
    )


@dataclass(frozen=True)
class StudentAttendanceStats:
    student_id: int
    batch_id: int
    summary: AttendanceSummary
    monthly: Tuple[Tuple[str, AttendanceSummary], ...]

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "batch_id": self.batch_id,
            **self.summary.to_dict(),
            "monthly": [{"month": month, **s.to_dict()} for month, s in self.monthly],
        }


@dataclass(frozen=True)
class BatchDayStats:
    batch_id: int
    day: date
    summary: AttendanceSummary

    def to_dict(self) -> dict:
        return {"batch_id": self.batch_id, "date": self.day.isoformat(), **self.summary.to_dict()}


def student_batch_stats(student_id: int, batch_id: int, records: Iterable[AttendanceRecord]) -> StudentAttendanceStats:
    mine = [r for r in records if r.student_id == student_id and r.batch_id == batch_id]

    by_month: Dict[str, List[AttendanceRecord]] = defaultdict(list)
    for r in mine:
        by_month[r.attendance_date.strftime(MONTH_FORMAT)].append(r)

    return StudentAttendanceStats(
        student_id=student_id,
        batch_id=batch_id,
        summary=summarize(mine),
        monthly=tuple((month, summarize(by_month[month])) for month in sorted(by_month)),
    )


def batch_day_stats(batch_id: int, day: date, records: Iterable[AttendanceRecord]) -> BatchDayStats:
    return BatchDayStats(
        batch_id=batch_id,
        day=day,
        summary=summarize(r for r in records if r.batch_id == batch_id and r.attendance_date == day),
    )


def batch_student_breakdown(batch_id: int, records: Iterable[AttendanceRecord]) -> List[StudentAttendanceStats]:
    """Per-student stats over a whole batch, ordered by student id."""
    by_student: Dict[int, List[AttendanceRecord]] = defaultdict(list)
    for r in records:
        if r.batch_id == batch_id:
            by_student[r.student_id].append(r)
    return [student_batch_stats(sid, batch_id, by_student[sid]) for sid in sorted(by_student)]
