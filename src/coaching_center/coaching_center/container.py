from __future__ import annotations

from dataclasses import dataclass

from .announcements.mysql_announcement_repository import MySQLAnnouncementRepository
from .announcements.repository import AnnouncementRepository
from .announcements.service import AnnouncementService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .batches.mysql_batch_repository import MySQLBatchRepository
from .batches.repository import BatchRepository
from .batches.service import BatchService
from .core.constants import DEFAULT_MAX_ATTENDANCE_RECORDS, DEFAULT_SWEEP_INTERVAL_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .enrollment.service import EnrollmentService
from .maintenance.worker import MaintenanceWorker
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .teachers.mysql_teacher_repository import MySQLTeacherRepository
from .teachers.repository import TeacherRepository
from .teachers.service import TeacherService


@dataclass(frozen=True)
class Container:
    students_repo: StudentRepository
    teachers_repo: TeacherRepository
    batches_repo: BatchRepository
    attendance_repo: AttendanceRepository
    announcements_repo: AnnouncementRepository

    student_service: StudentService
    teacher_service: TeacherService
    batch_service: BatchService
    enrollment_service: EnrollmentService
    attendance_service: AttendanceService
    announcement_service: AnnouncementService
    maintenance_worker: MaintenanceWorker


def wire(
    *,
    students_repo: StudentRepository,
    teachers_repo: TeacherRepository,
    batches_repo: BatchRepository,
    attendance_repo: AttendanceRepository,
    announcements_repo: AnnouncementRepository,
    max_attendance_records: int = DEFAULT_MAX_ATTENDANCE_RECORDS,
    sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
) -> Container:
    """Build the services on top of any set of repositories."""
    student_service = StudentService(students_repo, batches_repo, attendance_repo)
    teacher_service = TeacherService(teachers_repo)
    batch_service = BatchService(batches_repo, teachers_repo, students_repo, attendance_repo)
    enrollment_service = EnrollmentService(students_repo, batches_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        batches_repo,
        students_repo,
        max_records=max_attendance_records,
    )
    announcement_service = AnnouncementService(announcements_repo)
    maintenance_worker = MaintenanceWorker(
        batch_service,
        announcement_service,
        enrollment_service,
        interval_seconds=sweep_interval_seconds,
    )

    return Container(
        students_repo=students_repo,
        teachers_repo=teachers_repo,
        batches_repo=batches_repo,
        attendance_repo=attendance_repo,
        announcements_repo=announcements_repo,
        student_service=student_service,
        teacher_service=teacher_service,
        batch_service=batch_service,
        enrollment_service=enrollment_service,
        attendance_service=attendance_service,
        announcement_service=announcement_service,
        maintenance_worker=maintenance_worker,
    )


def build_container(
    *,
    db_config: dict,
    max_attendance_records: int = DEFAULT_MAX_ATTENDANCE_RECORDS,
    sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        students_repo=MySQLStudentRepository(conn),
        teachers_repo=MySQLTeacherRepository(conn),
        batches_repo=MySQLBatchRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        announcements_repo=MySQLAnnouncementRepository(conn),
        max_attendance_records=max_attendance_records,
        sweep_interval_seconds=sweep_interval_seconds,
    )
