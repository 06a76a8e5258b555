from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Teacher:
    teacher_id: int
    name: str
    email: str
    phone: str = ""
    subject_ids: Tuple[int, ...] = ()

    def to_dict(self) -> dict:
        return {
            "teacher_id": self.teacher_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "subject_ids": list(self.subject_ids),
        }
