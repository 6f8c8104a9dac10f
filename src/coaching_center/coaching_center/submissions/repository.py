from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ApprovalStatus
from .model import AttendanceSubmission


class SubmissionRepository(Protocol):
    """Append-only store of attendance submissions."""

    def add_many(self, submissions: Sequence[AttendanceSubmission]) -> None:
        raise NotImplementedError

    def get(self, submission_id: str) -> Optional[AttendanceSubmission]:
        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceSubmission]:
        """Every submission in insertion order."""

        raise NotImplementedError

    def list_recent(
        self,
        *,
        status: Optional[ApprovalStatus] = None,
        teacher_id: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[AttendanceSubmission]:
        """Newest first, optionally filtered."""

        raise NotImplementedError

    def decide(
        self,
        *,
        submission_id: str,
        status: ApprovalStatus,
        decided_by: str,
        decided_at: datetime,
    ) -> bool:
        """Move a submission out of `pending`.

        Must only succeed while the stored row is still pending (compare-and-swap);
        returns False when the id is unknown or already decided.
        """

        raise NotImplementedError

    def approve_into_ledger(
        self,
        *,
        submission: AttendanceSubmission,
        decided_by: str,
        decided_at: datetime,
    ) -> bool:
        """Approve a pending submission and upsert its status into the ledger.

        Both writes commit together or not at all, so a failed ledger write
        leaves the submission pending. Returns False when it is no longer pending.
        """

        raise NotImplementedError
