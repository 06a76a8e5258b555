from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import BatchStatus, BatchUpdate, RosterChange
from .model import Batch, BatchSchedule


class BatchRepository(Protocol):
    def get_by_id(self, batch_id: int) -> Optional[Batch]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Batch]:
        """All batches ordered by id, rosters included."""

        raise NotImplementedError

    def create_batch(
        self,
        *,
        name: str,
        standard_id: int,
        subject_id: int,
        teacher_id: int,
        start_date: date,
        end_date: date,
        schedule: BatchSchedule,
        capacity: int,
        fees: Decimal,
        status: BatchStatus,
        description: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_batch(
        self,
        *,
        batch_id: int,
        name: str,
        standard_id: int,
        subject_id: int,
        teacher_id: int,
        start_date: date,
        end_date: date,
        schedule: BatchSchedule,
        capacity: int,
        fees: Decimal,
        status: BatchStatus,
        description: Optional[str] = None,
    ) -> BatchUpdate:
        """Lock the batch row and apply the update.

        The new capacity is checked against the roster size inside the same
        transaction, so a concurrent enroll cannot slip between check and write.
        """

        raise NotImplementedError

    def set_status(self, *, batch_id: int, status: BatchStatus) -> bool:
        """Returns True only if the stored status actually changed."""

        raise NotImplementedError

    def delete_by_id(self, batch_id: int) -> bool:
        raise NotImplementedError

    def add_to_roster(self, *, batch_id: int, student_id: int) -> RosterChange:
        """Atomically append a student to the roster.

        Membership and ``count < capacity`` are checked in the same atomic step
        as the insert, so concurrent callers can never overfill a batch or add a
        student twice.
        """

        raise NotImplementedError

    def remove_from_roster(self, *, batch_id: int, student_id: int) -> bool:
        """Returns True only if this call removed the student."""

        raise NotImplementedError

    def list_batch_ids_for_student(self, student_id: int) -> Sequence[int]:
        """Batches whose roster lists the student."""

        raise NotImplementedError
