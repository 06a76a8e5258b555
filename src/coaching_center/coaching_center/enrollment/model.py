from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

Link = Tuple[int, int]
"""A ``(student_id, batch_id)`` pair."""


@dataclass(frozen=True)
class EnrollmentResult:
    student_id: int
    batch_id: int
    repaired: bool = False
    """True when the call only completed the missing half of an earlier write."""

    def to_dict(self) -> dict:
        return {"student_id": self.student_id, "batch_id": self.batch_id, "repaired": self.repaired}


@dataclass(frozen=True)
class ReconcileIssue:
    student_id: int
    batch_id: int
    reason: str


@dataclass
class ReconcileReport:
    """Repairs made by one reconcile pass. Repairs are not errors."""

    student_links_added: List[Link] = field(default_factory=list)
    roster_entries_added: List[Link] = field(default_factory=list)
    roster_entries_dropped: List[Link] = field(default_factory=list)
    student_links_dropped: List[Link] = field(default_factory=list)
    errors: List[ReconcileIssue] = field(default_factory=list)

    @property
    def repair_count(self) -> int:
        return (
            len(self.student_links_added)
            + len(self.roster_entries_added)
            + len(self.roster_entries_dropped)
            + len(self.student_links_dropped)
        )

    @property
    def is_empty(self) -> bool:
        return self.repair_count == 0 and not self.errors

    def counts(self) -> dict:
        return {
            "student_links_added": len(self.student_links_added),
            "roster_entries_added": len(self.roster_entries_added),
            "roster_entries_dropped": len(self.roster_entries_dropped),
            "student_links_dropped": len(self.student_links_dropped),
            "errors": len(self.errors),
        }

    def to_dict(self) -> dict:
        def pairs(links: List[Link]) -> list:
            return [{"student_id": s, "batch_id": b} for s, b in links]

        return {
            "counts": self.counts(),
            "student_links_added": pairs(self.student_links_added),
            "roster_entries_added": pairs(self.roster_entries_added),
            "roster_entries_dropped": pairs(self.roster_entries_dropped),
            "student_links_dropped": pairs(self.student_links_dropped),
            "errors": [{"student_id": e.student_id, "batch_id": e.batch_id, "reason": e.reason} for e in self.errors],
        }
