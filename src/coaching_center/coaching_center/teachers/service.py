from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..common.validators import require_email, require_id_list, require_non_empty
from ..core.exceptions import DuplicateEmailError, TeacherNotFoundError
from .model import Teacher
from .repository import TeacherRepository


class TeacherService:
    def __init__(self, teachers: TeacherRepository):
        self._teachers = teachers

    def create_teacher(self, data: Mapping[str, Any]) -> Teacher:
        name = require_non_empty(data.get("name"), "name")
        email = require_email(data.get("email"))
        phone = (data.get("phone") or "").strip()
        subject_ids = require_id_list(data.get("subject_ids"), "subject_ids")

        if self._teachers.get_by_email(email):
            raise DuplicateEmailError(email)

        teacher_id = self._teachers.create_teacher(name=name, email=email, phone=phone, subject_ids=subject_ids)
        return self.get_teacher(teacher_id)

    def get_teacher(self, teacher_id: int) -> Teacher:
        teacher = self._teachers.get_by_id(int(teacher_id))
        if not teacher:
            raise TeacherNotFoundError(teacher_id)
        return teacher

    def list_teachers(self) -> Sequence[Teacher]:
        return self._teachers.list_all()
