from __future__ import annotations

import pytest

from src.coaching_center.coaching_center.core.exceptions import DuplicateEmailError, TeacherNotFoundError


def test_create_and_list_teachers(container, teacher):
    other = container.teacher_service.create_teacher(
        {"name": "Vikram Iyer", "email": "Vikram@Example.com", "subject_ids": [4, 2]}
    )

    assert other.email == "vikram@example.com"
    assert other.subject_ids == (2, 4)
    assert [t.teacher_id for t in container.teacher_service.list_teachers()] == [teacher.teacher_id, other.teacher_id]


def test_teacher_email_is_unique(container, teacher):
    with pytest.raises(DuplicateEmailError):
        container.teacher_service.create_teacher({"name": "Copy", "email": teacher.email})


def test_unknown_teacher(container):
    with pytest.raises(TeacherNotFoundError):
        container.teacher_service.get_teacher(404)
