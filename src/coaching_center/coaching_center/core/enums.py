from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller roles resolved by the auth layer."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"
    STAFF = "staff"


class StudentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class BatchStatus(str, Enum):
    """Derived from the batch date range, never set by clients."""

    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class AnnouncementStatus(str, Enum):
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    EXPIRED = "expired"


class TargetAudience(str, Enum):
    ALL = "All"
    STUDENTS = "Students"
    TEACHERS = "Teachers"
    STAFF = "Staff"


class AnnouncementType(str, Enum):
    GENERAL = "General"
    EVENT = "Event"
    HOLIDAY = "Holiday"
    EXAM = "Exam"
    EMERGENCY = "Emergency"
    OTHER = "Other"


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Weekday(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class RosterChange(str, Enum):
    """Outcome of the atomic roster append."""

    ADDED = "ADDED"
    ALREADY_PRESENT = "ALREADY_PRESENT"
    FULL = "FULL"
    BATCH_MISSING = "BATCH_MISSING"


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID = "invalid"
    VALIDATION_FAILED = "validation_failed"
    INTERNAL = "internal"
    FORBIDDEN = "forbidden"


class BatchUpdate(str, Enum):
    """Outcome of the locked batch update."""

    UPDATED = "UPDATED"
    BATCH_MISSING = "BATCH_MISSING"
    BELOW_ROSTER = "BELOW_ROSTER"
