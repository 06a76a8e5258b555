from __future__ import annotations

from typing import Sequence

import structlog

from ..batches.model import Batch
from ..batches.repository import BatchRepository
from ..core.enums import RosterChange
from ..core.exceptions import (
    AlreadyEnrolledError,
    BatchFullError,
    BatchNotFoundError,
    NotEnrolledError,
    StudentNotFoundError,
)
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import EnrollmentResult, ReconcileIssue, ReconcileReport

logger = structlog.get_logger(__name__)


class EnrollmentService:
    """Keeps a batch's roster and each student's batch list in step.

    The store only guarantees atomic writes to one side at a time, so each
    operation orders its two writes such that the roster write is the deciding
    one and a retry after a crash between them finishes the job. ``reconcile``
    repairs anything that still drifts (out-of-band edits, partial cascades).
    """

    def __init__(self, students: StudentRepository, batches: BatchRepository):
        self._students = students
        self._batches = batches

    def _require_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise StudentNotFoundError(student_id)
        return student

    def _require_batch(self, batch_id: int) -> Batch:
        batch = self._batches.get_by_id(int(batch_id))
        if not batch:
            raise BatchNotFoundError(batch_id)
        return batch

    def enroll(self, student_id: int, batch_id: int) -> EnrollmentResult:
        student = self._require_student(student_id)
        batch = self._require_batch(batch_id)
        sid, bid = student.student_id, batch.batch_id

        if sid in batch.enrolled_student_ids:
            if bid in student.batch_ids:
                raise AlreadyEnrolledError(sid, bid)
            # Roster has the student but the student's own list does not. Only
            # the call that actually writes the missing link reports success.
            if not self._students.add_batch(student_id=sid, batch_id=bid):
                raise AlreadyEnrolledError(sid, bid)
            logger.warning("enrollment_completed", student_id=sid, batch_id=bid)
            return EnrollmentResult(student_id=sid, batch_id=bid, repaired=True)

        if batch.is_full:
            raise BatchFullError(bid, batch.capacity)

        # Student side first: the roster append below is the arbiter, and a
        # crash between the two writes leaves a state a retry completes.
        inserted = self._students.add_batch(student_id=sid, batch_id=bid)
        change = self._batches.add_to_roster(batch_id=bid, student_id=sid)

        if change == RosterChange.ADDED:
            logger.info("student_enrolled", student_id=sid, batch_id=bid)
            return EnrollmentResult(student_id=sid, batch_id=bid)
        if change == RosterChange.ALREADY_PRESENT:
            raise AlreadyEnrolledError(sid, bid)

        if inserted:
            self._students.remove_batch(student_id=sid, batch_id=bid)
        if change == RosterChange.BATCH_MISSING:
            raise BatchNotFoundError(bid)
        raise BatchFullError(bid, batch.capacity)

    def unenroll(self, student_id: int, batch_id: int) -> EnrollmentResult:
        student = self._require_student(student_id)
        batch = self._require_batch(batch_id)
        sid, bid = student.student_id, batch.batch_id

        if sid not in batch.enrolled_student_ids:
            raise NotEnrolledError(sid, bid)

        # Roster last, so a retried unenroll still sees the student on the roster.
        self._students.remove_batch(student_id=sid, batch_id=bid)
        if not self._batches.remove_from_roster(batch_id=bid, student_id=sid):
            raise NotEnrolledError(sid, bid)

        logger.info("student_unenrolled", student_id=sid, batch_id=bid)
        return EnrollmentResult(student_id=sid, batch_id=bid)

    def list_roster(self, batch_id: int) -> Sequence[Student]:
        batch = self._require_batch(batch_id)
        students = (self._students.get_by_id(sid) for sid in sorted(batch.enrolled_student_ids))
        return [s for s in students if s is not None]

    def list_student_batches(self, student_id: int) -> Sequence[Batch]:
        student = self._require_student(student_id)
        batches = (self._batches.get_by_id(bid) for bid in sorted(student.batch_ids))
        return [b for b in batches if b is not None]

    def reconcile(self) -> ReconcileReport:
        """Converge both views of every enrollment.

        Rosters are checked first, then student lists, each in ascending id
        order. Running it again right after reports nothing.
        """
        report = ReconcileReport()
        try:
            self._reconcile_rosters(report)
            self._reconcile_student_lists(report)
        except Exception:
            logger.exception("reconcile_aborted", **report.counts())
            raise

        log = logger.warning if not report.is_empty else logger.info
        log("reconcile_completed", **report.counts())
        return report

    def _reconcile_rosters(self, report: ReconcileReport) -> None:
        students = {s.student_id: s for s in self._students.list_all()}
        for batch in sorted(self._batches.list_all(), key=lambda b: b.batch_id):
            bid = batch.batch_id
            for sid in sorted(batch.enrolled_student_ids):
                student = students.get(sid)
                if student is None:
                    if self._batches.remove_from_roster(batch_id=bid, student_id=sid):
                        report.roster_entries_dropped.append((sid, bid))
                        report.errors.append(ReconcileIssue(sid, bid, "roster lists a student that does not exist"))
                elif bid not in student.batch_ids:
                    if self._students.add_batch(student_id=sid, batch_id=bid):
                        report.student_links_added.append((sid, bid))

    def _reconcile_student_lists(self, report: ReconcileReport) -> None:
        batches = {b.batch_id: b for b in self._batches.list_all()}
        for student in sorted(self._students.list_all(), key=lambda s: s.student_id):
            sid = student.student_id
            for bid in sorted(student.batch_ids):
                batch = batches.get(bid)
                if batch is not None and sid in batch.enrolled_student_ids:
                    continue

                change = RosterChange.BATCH_MISSING
                if batch is not None:
                    change = self._batches.add_to_roster(batch_id=bid, student_id=sid)
                if change == RosterChange.ADDED:
                    report.roster_entries_added.append((sid, bid))
                    continue
                if change == RosterChange.ALREADY_PRESENT:
                    continue

                if self._students.remove_batch(student_id=sid, batch_id=bid):
                    report.student_links_dropped.append((sid, bid))
                    reason = "batch does not exist" if change == RosterChange.BATCH_MISSING else "batch is full"
                    report.errors.append(ReconcileIssue(sid, bid, reason))
