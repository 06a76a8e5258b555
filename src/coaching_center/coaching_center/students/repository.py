from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import StudentStatus
from .model import Student


class StudentRepository(Protocol):
    """Repository interface for students.

    Services depend on this Protocol, never on a concrete database.
    """

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Student]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        """All students ordered by id, with their batch lists."""

        raise NotImplementedError

    def create_student(
        self,
        *,
        name: str,
        email: str,
        phone: str,
        standard_id: int,
        subject_ids: Sequence[int],
        status: StudentStatus,
        joining_date: Optional[date] = None,
        parent_name: Optional[str] = None,
        parent_phone: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_student(
        self,
        *,
        student_id: int,
        name: str,
        email: str,
        phone: str,
        standard_id: int,
        subject_ids: Sequence[int],
        status: StudentStatus,
        joining_date: Optional[date] = None,
        parent_name: Optional[str] = None,
        parent_phone: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, student_id: int) -> bool:
        raise NotImplementedError

    def add_batch(self, *, student_id: int, batch_id: int) -> bool:
        """Add a batch to the student's own list.

        Returns True only if this call inserted the link.
        """

        raise NotImplementedError

    def remove_batch(self, *, student_id: int, batch_id: int) -> bool:
        """Returns True only if this call removed the link."""

        raise NotImplementedError

    def list_student_ids_with_batch(self, batch_id: int) -> Sequence[int]:
        raise NotImplementedError
