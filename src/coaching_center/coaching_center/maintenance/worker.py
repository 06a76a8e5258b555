from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

import structlog

from ..announcements.service import AnnouncementService
from ..batches.service import BatchService
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_SWEEP_INTERVAL_SECONDS
from ..enrollment.model import ReconcileReport
from ..enrollment.service import EnrollmentService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SweepReport:
    started_at: datetime
    batches_changed: list[int]
    announcements_changed: list[int]
    reconcile: ReconcileReport

    def to_dict(self) -> dict:
        return {
            "started_at": self.started_at.isoformat(),
            "batches_changed": self.batches_changed,
            "announcements_changed": self.announcements_changed,
            "reconcile": self.reconcile.to_dict(),
        }


class MaintenanceWorker:
    """Background ticker for the idempotent housekeeping jobs.

    Each tick refreshes batch statuses, then announcement statuses, then runs
    the enrollment reconcile. A failing job ends the tick; whatever earlier jobs
    wrote stays written and the next tick starts over.
    """

    def __init__(
        self,
        batches: BatchService,
        announcements: AnnouncementService,
        enrollment: EnrollmentService,
        *,
        interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._batches = batches
        self._announcements = announcements
        self._enrollment = enrollment
        self._interval = float(interval_seconds)
        self._clock = clock
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> SweepReport:
        now = self._clock()
        log = logger.bind(tick_at=now.isoformat())

        job = "batch_status"
        try:
            batches_changed = self._batches.refresh_statuses(today=now.date())
            job = "announcement_status"
            announcements_changed = self._announcements.refresh_statuses(now=now)
            job = "reconcile"
            reconcile = self._enrollment.reconcile()
        except Exception:
            log.exception("maintenance_job_failed", job=job)
            raise

        report = SweepReport(
            started_at=now,
            batches_changed=batches_changed,
            announcements_changed=announcements_changed,
            reconcile=reconcile,
        )
        log.info(
            "maintenance_tick",
            batches_changed=len(batches_changed),
            announcements_changed=len(announcements_changed),
            **reconcile.counts(),
        )
        return report

    def _loop(self) -> None:
        logger.info("maintenance_worker_started", interval_seconds=self._interval)
        while not self._stop.wait(self._interval):
            try:
                self.run_once()
            except Exception:
                # Already logged with its traceback; keep ticking.
                logger.warning("maintenance_tick_aborted")
        logger.info("maintenance_worker_stopped")

    def start(self) -> None:
        if self.is_running:
            return
        if self._interval <= 0:
            raise ValueError("interval_seconds must be positive to start the worker")
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="maintenance-worker", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
