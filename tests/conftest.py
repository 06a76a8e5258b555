from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime

import pytest

from src.coaching_center.coaching_center.announcements.model import Announcement
from src.coaching_center.coaching_center.attendance.model import AttendanceRecord
from src.coaching_center.coaching_center.batches.model import Batch
from src.coaching_center.coaching_center.container import wire
from src.coaching_center.coaching_center.core.enums import BatchUpdate, RosterChange
from src.coaching_center.coaching_center.students.model import Student
from src.coaching_center.coaching_center.teachers.model import Teacher


class InMemoryStore:
    """Shared tables behind the fake repositories.

    Mirrors the MySQL layout: the roster and the student's own batch list are
    separate sets, and deleting a row cascades the way the foreign keys do.
    """

    def __init__(self):
        self.lock = threading.RLock()
        self.students: dict[int, Student] = {}
        self.teachers: dict[int, Teacher] = {}
        self.batches: dict[int, Batch] = {}
        self.rosters: dict[int, set[int]] = {}
        self.student_links: dict[int, set[int]] = {}
        self.attendance: dict[tuple[int, int, date], AttendanceRecord] = {}
        self.announcements: dict[int, Announcement] = {}
        self._next_id = 1

    def next_id(self) -> int:
        with self.lock:
            nid = self._next_id
            self._next_id += 1
            return nid


class InMemoryStudentRepository:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def _view(self, student: Student) -> Student:
        return replace(student, batch_ids=frozenset(self._s.student_links.get(student.student_id, set())))

    def get_by_id(self, student_id):
        with self._s.lock:
            student = self._s.students.get(int(student_id))
            return self._view(student) if student else None

    def get_by_email(self, email):
        with self._s.lock:
            for student in self._s.students.values():
                if student.email == email:
                    return self._view(student)
            return None

    def list_all(self):
        with self._s.lock:
            return [self._view(self._s.students[sid]) for sid in sorted(self._s.students)]

    def create_student(self, **fields):
        with self._s.lock:
            sid = self._s.next_id()
            self._s.students[sid] = Student(student_id=sid, **fields)
            self._s.student_links[sid] = set()
            return sid

    def update_student(self, *, student_id, **fields):
        with self._s.lock:
            current = self._s.students.get(int(student_id))
            if not current:
                return False
            self._s.students[int(student_id)] = replace(current, **fields)
            return True

    def delete_by_id(self, student_id):
        with self._s.lock:
            self._s.student_links.pop(int(student_id), None)
            return self._s.students.pop(int(student_id), None) is not None

    def add_batch(self, *, student_id, batch_id):
        with self._s.lock:
            if int(student_id) not in self._s.students:
                return False
            links = self._s.student_links.setdefault(int(student_id), set())
            if int(batch_id) in links:
                return False
            links.add(int(batch_id))
            return True

    def remove_batch(self, *, student_id, batch_id):
        with self._s.lock:
            links = self._s.student_links.get(int(student_id), set())
            if int(batch_id) not in links:
                return False
            links.discard(int(batch_id))
            return True

    def list_student_ids_with_batch(self, batch_id):
        with self._s.lock:
            return sorted(sid for sid, links in self._s.student_links.items() if int(batch_id) in links)


class InMemoryTeacherRepository:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, teacher_id):
        return self._s.teachers.get(int(teacher_id))

    def get_by_email(self, email):
        return next((t for t in self._s.teachers.values() if t.email == email), None)

    def list_all(self):
        return [self._s.teachers[tid] for tid in sorted(self._s.teachers)]

    def create_teacher(self, **fields):
        tid = self._s.next_id()
        self._s.teachers[tid] = Teacher(teacher_id=tid, **fields)
        return tid


class InMemoryBatchRepository:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def _view(self, batch: Batch) -> Batch:
        return replace(batch, enrolled_student_ids=frozenset(self._s.rosters.get(batch.batch_id, set())))

    def get_by_id(self, batch_id):
        with self._s.lock:
            batch = self._s.batches.get(int(batch_id))
            return self._view(batch) if batch else None

    def list_all(self):
        with self._s.lock:
            return [self._view(self._s.batches[bid]) for bid in sorted(self._s.batches)]

    def create_batch(self, **fields):
        with self._s.lock:
            bid = self._s.next_id()
            self._s.batches[bid] = Batch(batch_id=bid, **fields)
            self._s.rosters[bid] = set()
            return bid

    def update_batch(self, *, batch_id, **fields):
        with self._s.lock:
            current = self._s.batches.get(int(batch_id))
            if not current:
                return BatchUpdate.BATCH_MISSING
            if len(self._s.rosters.get(int(batch_id), set())) > fields["capacity"]:
                return BatchUpdate.BELOW_ROSTER
            self._s.batches[int(batch_id)] = replace(current, **fields)
            return BatchUpdate.UPDATED

    def set_status(self, *, batch_id, status):
        with self._s.lock:
            current = self._s.batches.get(int(batch_id))
            if not current or current.status == status:
                return False
            self._s.batches[int(batch_id)] = replace(current, status=status)
            return True

    def delete_by_id(self, batch_id):
        with self._s.lock:
            self._s.rosters.pop(int(batch_id), None)
            return self._s.batches.pop(int(batch_id), None) is not None

    def add_to_roster(self, *, batch_id, student_id):
        with self._s.lock:
            batch = self._s.batches.get(int(batch_id))
            if not batch:
                return RosterChange.BATCH_MISSING
            roster = self._s.rosters.setdefault(int(batch_id), set())
            if int(student_id) in roster:
                return RosterChange.ALREADY_PRESENT
            if len(roster) >= batch.capacity:
                return RosterChange.FULL
            roster.add(int(student_id))
            return RosterChange.ADDED

    def remove_from_roster(self, *, batch_id, student_id):
        with self._s.lock:
            roster = self._s.rosters.get(int(batch_id), set())
            if int(student_id) not in roster:
                return False
            roster.discard(int(student_id))
            return True

    def list_batch_ids_for_student(self, student_id):
        with self._s.lock:
            return sorted(bid for bid, roster in self._s.rosters.items() if int(student_id) in roster)


class InMemoryAttendanceRepository:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def upsert(self, *, student_id, batch_id, attendance_date, status, remarks="", marked_by=None):
        with self._s.lock:
            key = (int(student_id), int(batch_id), attendance_date)
            existing = self._s.attendance.get(key)
            attendance_id = existing.attendance_id if existing else self._s.next_id()
            self._s.attendance[key] = AttendanceRecord(
                attendance_id=attendance_id,
                student_id=int(student_id),
                batch_id=int(batch_id),
                attendance_date=attendance_date,
                status=status,
                remarks=remarks or "",
                marked_by=marked_by,
            )
            return attendance_id

    def list_for_batch_and_date(self, *, batch_id, attendance_date):
        rows = [r for r in self._s.attendance.values() if r.batch_id == batch_id and r.attendance_date == attendance_date]
        return sorted(rows, key=lambda r: r.student_id)

    def list_for_batch_range(self, *, batch_id, start, end):
        rows = [r for r in self._s.attendance.values() if r.batch_id == batch_id and start <= r.attendance_date <= end]
        return sorted(rows, key=lambda r: (r.attendance_date, r.student_id))

    def list_for_student_and_batch(self, *, student_id, batch_id, start=None, end=None):
        rows = [
            r
            for r in self._s.attendance.values()
            if r.student_id == student_id
            and r.batch_id == batch_id
            and (start is None or r.attendance_date >= start)
            and (end is None or r.attendance_date <= end)
        ]
        return sorted(rows, key=lambda r: r.attendance_date, reverse=True)

    def delete_for_student(self, student_id):
        keys = [k for k in self._s.attendance if k[0] == int(student_id)]
        for k in keys:
            del self._s.attendance[k]
        return len(keys)

    def delete_for_batch(self, batch_id):
        keys = [k for k in self._s.attendance if k[1] == int(batch_id)]
        for k in keys:
            del self._s.attendance[k]
        return len(keys)


class InMemoryAnnouncementRepository:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, announcement_id):
        return self._s.announcements.get(int(announcement_id))

    def list_all(self):
        return sorted(self._s.announcements.values(), key=lambda a: (a.start_at, a.announcement_id), reverse=True)

    def create_announcement(self, **fields):
        aid = self._s.next_id()
        self._s.announcements[aid] = Announcement(announcement_id=aid, **fields)
        return aid

    def update_announcement(self, *, announcement_id, **fields):
        current = self._s.announcements.get(int(announcement_id))
        if not current:
            return False
        self._s.announcements[int(announcement_id)] = replace(current, **fields)
        return True

    def set_status(self, *, announcement_id, status):
        current = self._s.announcements.get(int(announcement_id))
        if not current or current.status == status:
            return False
        self._s.announcements[int(announcement_id)] = replace(current, status=status)
        return True

    def delete_by_id(self, announcement_id):
        return self._s.announcements.pop(int(announcement_id), None) is not None


@pytest.fixture()
def fixed_now():
    return datetime(2024, 1, 15, 10, 0, 0)


@pytest.fixture()
def store():
    return InMemoryStore()


@pytest.fixture()
def container(store):
    return wire(
        students_repo=InMemoryStudentRepository(store),
        teachers_repo=InMemoryTeacherRepository(store),
        batches_repo=InMemoryBatchRepository(store),
        attendance_repo=InMemoryAttendanceRepository(store),
        announcements_repo=InMemoryAnnouncementRepository(store),
        max_attendance_records=50,
        sweep_interval_seconds=0,
    )


@pytest.fixture()
def teacher(container):
    return container.teacher_service.create_teacher({"name": "Asha Rao", "email": "asha@example.com"})


@pytest.fixture()
def make_student(container):
    counter = iter(range(1, 10_000))

    def _make(**overrides):
        n = next(counter)
        data = {
            "name": f"Student {n}",
            "email": f"student{n}@example.com",
            "phone": f"98000{n:05d}",
            "standard_id": 10,
        }
        data.update(overrides)
        return container.student_service.create_student(data)

    return _make


@pytest.fixture()
def make_batch(container, teacher, fixed_now):
    def _make(**overrides):
        data = {
            "name": "Physics 10A",
            "standard_id": 10,
            "subject_id": 3,
            "teacher_id": teacher.teacher_id,
            "start_date": "2024-01-01",
            "end_date": "2024-01-31",
            "schedule": {"days": ["Monday", "Wednesday"], "start_time": "16:00", "end_time": "17:30"},
            "capacity": 30,
            "fees": "1500.00",
        }
        data.update(overrides)
        return container.batch_service.create_batch(data, today=fixed_now.date())

    return _make
