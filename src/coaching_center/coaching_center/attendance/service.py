from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import structlog

from ..batches.model import Batch
from ..batches.repository import BatchRepository
from ..common.datetime_utils import parse_iso_date, parse_optional_date
from ..common.validators import require_enum, require_positive_int
from ..core.constants import DEFAULT_MAX_ATTENDANCE_RECORDS
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    BatchNotFoundError,
    DomainError,
    InvalidDateRangeError,
    StoreUnavailableError,
    StudentNotFoundError,
    ValidationError,
)
from ..students.repository import StudentRepository
from .model import AttendanceEntry, AttendanceRecord, RecordOutcome, SheetRow, SubmissionResult
from .repository import AttendanceRepository
from .stats import BatchDayStats, StudentAttendanceStats, batch_day_stats, student_batch_stats

logger = structlog.get_logger(__name__)

RawEntry = Union[AttendanceEntry, Mapping[str, Any]]


@dataclass(frozen=True)
class HistoryDay:
    day: date
    records: Tuple[AttendanceRecord, ...]
    stats: BatchDayStats

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "records": [r.to_dict() for r in self.records],
            "stats": self.stats.to_dict(),
        }


@dataclass(frozen=True)
class StudentAttendanceReport:
    records: Tuple[AttendanceRecord, ...]
    stats: StudentAttendanceStats

    def to_dict(self) -> dict:
        return {"records": [r.to_dict() for r in self.records], "stats": self.stats.to_dict()}


def _to_entry(raw: RawEntry) -> AttendanceEntry:
    if isinstance(raw, AttendanceEntry):
        return raw
    if not isinstance(raw, Mapping):
        raise ValidationError("each record must be an object with student_id and status")
    return AttendanceEntry(
        student_id=require_positive_int(raw.get("student_id"), "student_id"),
        status=require_enum(AttendanceStatus, raw.get("status"), "status"),
        remarks=str(raw.get("remarks") or "").strip(),
    )


def _raw_student_id(raw: RawEntry) -> Optional[int]:
    if isinstance(raw, AttendanceEntry):
        return raw.student_id
    value = raw.get("student_id") if isinstance(raw, Mapping) else None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class AttendanceService:
    """Use case: bulk attendance marking and the read views built on it."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        batches: BatchRepository,
        students: StudentRepository,
        *,
        max_records: int = DEFAULT_MAX_ATTENDANCE_RECORDS,
    ):
        self._attendance = attendance
        self._batches = batches
        self._students = students
        self._max_records = int(max_records)

    def _require_batch(self, batch_id: int) -> Batch:
        batch = self._batches.get_by_id(int(batch_id))
        if not batch:
            raise BatchNotFoundError(batch_id)
        return batch

    def submit_batch_attendance(
        self,
        batch_id: int,
        attendance_date: object,
        records: Sequence[RawEntry],
        *,
        marked_by: Optional[int] = None,
    ) -> SubmissionResult:
        """Upsert one record per entry.

        Whole-request problems (bad date, unknown batch, empty or oversized
        list) raise. Anything wrong with a single entry is reported in its
        outcome and the remaining entries are still written.
        """
        day = parse_iso_date(attendance_date)
        batch = self._require_batch(batch_id)
        if not records:
            raise ValidationError("records must contain at least one entry")
        if len(records) > self._max_records:
            raise ValidationError(f"at most {self._max_records} records can be submitted at once, got {len(records)}")

        outcomes: List[RecordOutcome] = []
        for raw in records:
            outcomes.append(self._apply(batch, day, raw, marked_by))

        result = SubmissionResult(batch_id=batch.batch_id, attendance_date=day, outcomes=tuple(outcomes))
        log = logger.info if result.all_ok else logger.warning
        log(
            "attendance_submitted",
            batch_id=batch.batch_id,
            date=day.isoformat(),
            saved=result.saved,
            failed=len(result.failed),
            marked_by=marked_by,
        )
        return result

    def _apply(self, batch: Batch, day: date, raw: RawEntry, marked_by: Optional[int]) -> RecordOutcome:
        student_id = _raw_student_id(raw)
        try:
            entry = _to_entry(raw)
            if entry.student_id not in batch.enrolled_student_ids:
                raise ValidationError(f"student {entry.student_id} is not enrolled in batch {batch.batch_id}")
            self._attendance.upsert(
                student_id=entry.student_id,
                batch_id=batch.batch_id,
                attendance_date=day,
                status=entry.status,
                remarks=entry.remarks,
                marked_by=marked_by,
            )
        except StoreUnavailableError:
            logger.exception("attendance_record_failed", batch_id=batch.batch_id, student_id=student_id)
            return RecordOutcome(student_id=student_id, ok=False, error="could not be saved, try again")
        except DomainError as e:
            return RecordOutcome(student_id=student_id, ok=False, error=str(e))
        return RecordOutcome(student_id=student_id, ok=True)

    def get_batch_attendance(self, batch_id: int, attendance_date: object) -> Sequence[AttendanceRecord]:
        day = parse_iso_date(attendance_date)
        batch = self._require_batch(batch_id)
        return self._attendance.list_for_batch_and_date(batch_id=batch.batch_id, attendance_date=day)

    def get_attendance_sheet(self, batch_id: int, attendance_date: object) -> List[SheetRow]:
        """Every rostered student for the day; unrecorded ones show as absent."""
        day = parse_iso_date(attendance_date)
        batch = self._require_batch(batch_id)
        recorded = {
            r.student_id: r
            for r in self._attendance.list_for_batch_and_date(batch_id=batch.batch_id, attendance_date=day)
        }

        rows: List[SheetRow] = []
        for sid in sorted(batch.enrolled_student_ids):
            student = self._students.get_by_id(sid)
            record = recorded.get(sid)
            rows.append(
                SheetRow(
                    student_id=sid,
                    student_name=student.name if student else "",
                    status=record.status if record else AttendanceStatus.ABSENT,
                    remarks=record.remarks if record else "",
                    recorded=record is not None,
                )
            )
        return rows

    def get_batch_history(self, batch_id: int, start: object, end: object) -> List[HistoryDay]:
        start_day, end_day = parse_iso_date(start), parse_iso_date(end)
        if end_day < start_day:
            raise InvalidDateRangeError("end must be on or after start")
        batch = self._require_batch(batch_id)

        by_day: Dict[date, List[AttendanceRecord]] = defaultdict(list)
        for r in self._attendance.list_for_batch_range(batch_id=batch.batch_id, start=start_day, end=end_day):
            by_day[r.attendance_date].append(r)

        return [
            HistoryDay(day=d, records=tuple(by_day[d]), stats=batch_day_stats(batch.batch_id, d, by_day[d]))
            for d in sorted(by_day)
        ]

    def get_student_attendance(
        self,
        student_id: int,
        batch_id: int,
        *,
        start: object = None,
        end: object = None,
    ) -> StudentAttendanceReport:
        start_day, end_day = parse_optional_date(start), parse_optional_date(end)
        if start_day and end_day and end_day < start_day:
            raise InvalidDateRangeError("end must be on or after start")

        student = self._students.get_by_id(int(student_id))
        if not student:
            raise StudentNotFoundError(student_id)
        batch = self._require_batch(batch_id)

        records = tuple(
            self._attendance.list_for_student_and_batch(
                student_id=student.student_id,
                batch_id=batch.batch_id,
                start=start_day,
                end=end_day,
            )
        )
        return StudentAttendanceReport(
            records=records,
            stats=student_batch_stats(student.student_id, batch.batch_id, records),
        )
