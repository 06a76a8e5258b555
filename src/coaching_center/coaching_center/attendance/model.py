from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one presence fact per (student, batch, day)."""

    attendance_id: int
    student_id: int
    batch_id: int
    attendance_date: date
    status: AttendanceStatus
    remarks: str = ""
    marked_by: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "student_id": self.student_id,
            "batch_id": self.batch_id,
            "date": self.attendance_date.isoformat(),
            "status": self.status.value,
            "remarks": self.remarks,
            "marked_by": self.marked_by,
        }


@dataclass(frozen=True)
class AttendanceEntry:
    """One line of a bulk submission."""

    student_id: int
    status: AttendanceStatus
    remarks: str = ""


@dataclass(frozen=True)
class RecordOutcome:
    student_id: Optional[int]
    ok: bool
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {"student_id": self.student_id, "ok": self.ok, "error": self.error}


@dataclass(frozen=True)
class SubmissionResult:
    """Per-record outcome of one bulk submission; partial success is possible."""

    batch_id: int
    attendance_date: date
    outcomes: Tuple[RecordOutcome, ...]

    @property
    def saved(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> Tuple[RecordOutcome, ...]:
        return tuple(o for o in self.outcomes if not o.ok)

    @property
    def all_ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict:
        return {
            "batch_id": self.batch_id,
            "date": self.attendance_date.isoformat(),
            "saved": self.saved,
            "failed": len(self.failed),
            "outcomes": [o.to_dict() for o in self.outcomes],
        }


@dataclass(frozen=True)
class SheetRow:
    """Read-model for the marking screen: every rostered student, recorded or not."""

    student_id: int
    student_name: str
    status: AttendanceStatus
    remarks: str
    recorded: bool

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "student_name": self.student_name,
            "status": self.status.value,
            "remarks": self.remarks,
            "recorded": self.recorded,
        }
