from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Sequence

import structlog

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import parse_iso_date, parse_time_of_day, today_local
from ..common.validators import (
    require_enum,
    require_non_empty,
    require_non_negative_amount,
    require_positive_int,
)
from ..core.enums import BatchStatus, BatchUpdate, Weekday
from ..core.exceptions import BatchNotFoundError, InvalidDateRangeError, TeacherNotFoundError, ValidationError
from ..students.repository import StudentRepository
from ..teachers.repository import TeacherRepository
from .lifecycle import derive_batch_status
from .model import Batch, BatchSchedule
from .repository import BatchRepository

logger = structlog.get_logger(__name__)

_WEEK_ORDER = list(Weekday)


def parse_schedule(value: Any) -> BatchSchedule:
    if isinstance(value, BatchSchedule):
        return value
    if not isinstance(value, Mapping):
        raise ValidationError("schedule must be an object with days, start_time and end_time")

    raw_days = value.get("days") or []
    if isinstance(raw_days, str):
        raw_days = [d.strip() for d in raw_days.split(",") if d.strip()]
    days = {require_enum(Weekday, str(d).strip().capitalize(), "schedule.days") for d in raw_days}
    if not days:
        raise ValidationError("schedule.days must name at least one weekday")

    start_time = parse_time_of_day(value.get("start_time"), "schedule.start_time")
    end_time = parse_time_of_day(value.get("end_time"), "schedule.end_time")
    if end_time <= start_time:
        raise ValidationError("schedule.end_time must be after schedule.start_time")

    return BatchSchedule(days=tuple(sorted(days, key=_WEEK_ORDER.index)), start_time=start_time, end_time=end_time)


class BatchService:
    """Use case: manage batches and keep their derived status current."""

    def __init__(
        self,
        batches: BatchRepository,
        teachers: TeacherRepository,
        students: StudentRepository,
        attendance: AttendanceRepository,
    ):
        self._batches = batches
        self._teachers = teachers
        self._students = students
        self._attendance = attendance

    def _clean(self, data: Mapping[str, Any], *, current: Optional[Batch] = None) -> dict:
        if "status" in data:
            raise ValidationError("status is derived from the batch dates and cannot be set")

        def pick(key: str):
            if key in data:
                return data[key]
            return getattr(current, key) if current is not None else None

        fields = {
            "name": require_non_empty(pick("name"), "name"),
            "standard_id": require_positive_int(pick("standard_id"), "standard_id"),
            "subject_id": require_positive_int(pick("subject_id"), "subject_id"),
            "teacher_id": require_positive_int(pick("teacher_id"), "teacher_id"),
            "start_date": parse_iso_date(pick("start_date")),
            "end_date": parse_iso_date(pick("end_date")),
            "schedule": parse_schedule(pick("schedule")),
            "capacity": require_positive_int(pick("capacity"), "capacity"),
            "fees": require_non_negative_amount(pick("fees") if pick("fees") is not None else 0, "fees"),
            "description": (pick("description") or "").strip() or None,
        }

        if fields["end_date"] < fields["start_date"]:
            raise InvalidDateRangeError("end_date must be on or after start_date")
        if not self._teachers.get_by_id(fields["teacher_id"]):
            raise TeacherNotFoundError(fields["teacher_id"])
        return fields

    def create_batch(self, data: Mapping[str, Any], *, today: date | None = None) -> Batch:
        today = today or today_local()
        fields = self._clean(data)
        status = derive_batch_status(today, fields["start_date"], fields["end_date"])

        batch_id = self._batches.create_batch(**fields, status=status)
        logger.info("batch_created", batch_id=batch_id, status=status.value)
        return self.get_batch(batch_id, today=today)

    def update_batch(self, batch_id: int, data: Mapping[str, Any], *, today: date | None = None) -> Batch:
        today = today or today_local()
        current = self._require(batch_id)
        fields = self._clean(data, current=current)

        status = derive_batch_status(today, fields["start_date"], fields["end_date"])
        outcome = self._batches.update_batch(batch_id=current.batch_id, **fields, status=status)
        if outcome == BatchUpdate.BATCH_MISSING:
            raise BatchNotFoundError(batch_id)
        if outcome == BatchUpdate.BELOW_ROSTER:
            raise ValidationError("capacity cannot be lower than the number of students already enrolled")
        logger.info("batch_updated", batch_id=current.batch_id, status=status.value)
        return self.get_batch(current.batch_id, today=today)

    def _require(self, batch_id: int) -> Batch:
        batch = self._batches.get_by_id(int(batch_id))
        if not batch:
            raise BatchNotFoundError(batch_id)
        return batch

    def _with_current_status(self, batch: Batch, today: date) -> Batch:
        status = derive_batch_status(today, batch.start_date, batch.end_date)
        if status == batch.status:
            return batch
        if self._batches.set_status(batch_id=batch.batch_id, status=status):
            logger.info("batch_status_healed", batch_id=batch.batch_id, old=batch.status.value, new=status.value)
        return replace(batch, status=status)

    def get_batch(self, batch_id: int, *, today: date | None = None) -> Batch:
        """Read a batch; a stale stored status is corrected on the way out."""
        return self._with_current_status(self._require(batch_id), today or today_local())

    def list_batches(
        self,
        *,
        status: BatchStatus | str | None = None,
        subject_ids: Iterable[Any] | None = None,
        standard_id: Any = None,
        teacher_id: Any = None,
        today: date | None = None,
    ) -> Sequence[Batch]:
        """Batches matching every filter given; a batch matches ``subject_ids`` if its subject is any of them."""
        today = today or today_local()
        wanted = require_enum(BatchStatus, status, "status") if status else None
        subjects = {require_positive_int(s, "subject_ids") for s in subject_ids} if subject_ids else None
        standard = require_positive_int(standard_id, "standard_id") if standard_id not in (None, "") else None
        teacher = require_positive_int(teacher_id, "teacher_id") if teacher_id not in (None, "") else None

        result = []
        for batch in self._batches.list_all():
            if subjects is not None and batch.subject_id not in subjects:
                continue
            if standard is not None and batch.standard_id != standard:
                continue
            if teacher is not None and batch.teacher_id != teacher:
                continue
            batch = self._with_current_status(batch, today)
            if wanted is None or batch.status == wanted:
                result.append(batch)
        return result

    def refresh_statuses(self, *, today: date | None = None) -> list[int]:
        """Sweep: rewrite every stale status. Returns the ids that changed."""
        today = today or today_local()
        changed: list[int] = []
        for batch in self._batches.list_all():
            status = derive_batch_status(today, batch.start_date, batch.end_date)
            if status != batch.status and self._batches.set_status(batch_id=batch.batch_id, status=status):
                changed.append(batch.batch_id)
        logger.info("batch_status_sweep", today=today.isoformat(), changed=changed)
        return changed

    def delete_batch(self, batch_id: int) -> None:
        batch = self._require(batch_id)
        student_ids = set(batch.enrolled_student_ids) | set(self._students.list_student_ids_with_batch(batch.batch_id))
        for student_id in sorted(student_ids):
            self._students.remove_batch(student_id=student_id, batch_id=batch.batch_id)

        deleted = self._attendance.delete_for_batch(batch.batch_id)
        self._batches.delete_by_id(batch.batch_id)
        logger.info("batch_deleted", batch_id=batch.batch_id, students=sorted(student_ids), attendance_deleted=deleted)
