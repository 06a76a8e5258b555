from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

import structlog

from ..attendance.repository import AttendanceRepository
from ..batches.repository import BatchRepository
from ..common.datetime_utils import parse_optional_date
from ..common.validators import require_email, require_enum, require_id_list, require_non_empty, require_positive_int
from ..core.enums import StudentStatus
from ..core.exceptions import DuplicateEmailError, StudentNotFoundError
from .model import Student
from .repository import StudentRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StudentDeletion:
    student_id: int
    rosters_left: tuple[int, ...]
    attendance_deleted: int


class StudentService:
    """Use case: admit, edit and withdraw students."""

    def __init__(self, students: StudentRepository, batches: BatchRepository, attendance: AttendanceRepository):
        self._students = students
        self._batches = batches
        self._attendance = attendance

    def _clean(self, data: Mapping[str, Any], *, current: Optional[Student] = None) -> dict:
        def pick(key: str, default=None):
            if key in data:
                return data[key]
            return getattr(current, key) if current is not None else default

        return {
            "name": require_non_empty(pick("name"), "name"),
            "email": require_email(pick("email")),
            "phone": require_non_empty(pick("phone"), "phone"),
            "standard_id": require_positive_int(pick("standard_id"), "standard_id"),
            "subject_ids": require_id_list(pick("subject_ids", ()), "subject_ids"),
            "status": require_enum(StudentStatus, pick("status", StudentStatus.ACTIVE), "status"),
            "joining_date": parse_optional_date(pick("joining_date")),
            "parent_name": (pick("parent_name") or "").strip() or None,
            "parent_phone": (pick("parent_phone") or "").strip() or None,
        }

    def create_student(self, data: Mapping[str, Any]) -> Student:
        fields = self._clean(data)
        if self._students.get_by_email(fields["email"]):
            raise DuplicateEmailError(fields["email"])

        student_id = self._students.create_student(**fields)
        logger.info("student_created", student_id=student_id)
        return self.get_student(student_id)

    def get_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise StudentNotFoundError(student_id)
        return student

    def list_students(self) -> Sequence[Student]:
        return self._students.list_all()

    def update_student(self, student_id: int, data: Mapping[str, Any]) -> Student:
        current = self.get_student(student_id)
        fields = self._clean(data, current=current)

        if fields["email"] != current.email:
            other = self._students.get_by_email(fields["email"])
            if other and other.student_id != current.student_id:
                raise DuplicateEmailError(fields["email"])

        if not self._students.update_student(student_id=current.student_id, **fields):
            raise StudentNotFoundError(student_id)
        return self.get_student(student_id)

    def set_status(self, student_id: int, status: StudentStatus | str) -> Student:
        return self.update_student(student_id, {"status": require_enum(StudentStatus, status, "status")})

    def delete_student(self, student_id: int) -> StudentDeletion:
        """Withdraw a student: leave every roster, drop attendance, delete the record.

        Each step is its own write; if one fails the reconcile sweep drops whatever
        roster entries still point at the removed student.
        """
        student = self.get_student(student_id)

        batch_ids = set(student.batch_ids) | set(self._batches.list_batch_ids_for_student(student.student_id))
        left: list[int] = []
        for batch_id in sorted(batch_ids):
            if self._batches.remove_from_roster(batch_id=batch_id, student_id=student.student_id):
                left.append(batch_id)

        deleted = self._attendance.delete_for_student(student.student_id)
        self._students.delete_by_id(student.student_id)

        logger.info(
            "student_deleted",
            student_id=student.student_id,
            rosters_left=left,
            attendance_deleted=deleted,
        )
        return StudentDeletion(student_id=student.student_id, rosters_left=tuple(left), attendance_deleted=deleted)
