from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import FrozenSet, Optional, Tuple

from ..core.enums import StudentStatus


@dataclass(frozen=True)
class Student:
    """Domain entity: a student admitted to the center.

    ``batch_ids`` is the student's own view of enrollment; the batch roster is the
    other view and the two are kept in step by the enrollment service.
    """

    student_id: int
    name: str
    email: str
    phone: str
    standard_id: int
    subject_ids: Tuple[int, ...] = ()
    batch_ids: FrozenSet[int] = frozenset()
    status: StudentStatus = StudentStatus.ACTIVE
    joining_date: Optional[date] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "standard_id": self.standard_id,
            "subject_ids": list(self.subject_ids),
            "batch_ids": sorted(self.batch_ids),
            "status": self.status.value,
            "joining_date": self.joining_date.isoformat() if self.joining_date else None,
            "parent_name": self.parent_name,
            "parent_phone": self.parent_phone,
        }
