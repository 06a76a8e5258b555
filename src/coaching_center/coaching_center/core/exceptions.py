from __future__ import annotations

from .enums import ErrorKind


class DomainError(Exception):
    """Base exception for business rule violations."""

    kind: ErrorKind = ErrorKind.INVALID


class ValidationError(DomainError):
    """Raised when a field is missing or malformed."""

    kind = ErrorKind.VALIDATION_FAILED


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""

    kind = ErrorKind.FORBIDDEN


class NotFoundError(DomainError):
    kind = ErrorKind.NOT_FOUND


class StudentNotFoundError(NotFoundError):
    def __init__(self, student_id: int):
        super().__init__(f"Student {student_id} not found")
        self.student_id = student_id


class TeacherNotFoundError(NotFoundError):
    def __init__(self, teacher_id: int):
        super().__init__(f"Teacher {teacher_id} not found")
        self.teacher_id = teacher_id


class BatchNotFoundError(NotFoundError):
    def __init__(self, batch_id: int):
        super().__init__(f"Batch {batch_id} not found")
        self.batch_id = batch_id


class AnnouncementNotFoundError(NotFoundError):
    def __init__(self, announcement_id: int):
        super().__init__(f"Announcement {announcement_id} not found")
        self.announcement_id = announcement_id


class ConflictError(DomainError):
    kind = ErrorKind.CONFLICT


class AlreadyEnrolledError(ConflictError):
    def __init__(self, student_id: int, batch_id: int):
        super().__init__(f"Student {student_id} is already enrolled in batch {batch_id}")
        self.student_id = student_id
        self.batch_id = batch_id


class NotEnrolledError(ConflictError):
    def __init__(self, student_id: int, batch_id: int):
        super().__init__(f"Student {student_id} is not enrolled in batch {batch_id}")
        self.student_id = student_id
        self.batch_id = batch_id


class DuplicateEmailError(ConflictError):
    def __init__(self, email: str):
        super().__init__(f"Email already registered: {email}")
        self.email = email


class InvalidError(DomainError):
    kind = ErrorKind.INVALID


class InvalidDateError(InvalidError):
    def __init__(self, value: object):
        super().__init__(f"Invalid date {value!r}. Expected YYYY-MM-DD")
        self.value = value


class InvalidDateRangeError(InvalidError):
    """End of a date range falls before its start."""


class BatchFullError(InvalidError):
    def __init__(self, batch_id: int, capacity: int):
        super().__init__(f"Batch {batch_id} is full (capacity {capacity})")
        self.batch_id = batch_id
        self.capacity = capacity


class StoreUnavailableError(DomainError):
    """The entity store failed; details are logged, never shown to callers."""

    kind = ErrorKind.INTERNAL
