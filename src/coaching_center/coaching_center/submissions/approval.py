from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from ..common.validators import require_non_empty, require_role
from ..core.enums import ApprovalStatus, Role
from ..notifications.service import NotificationService
from .model import AttendanceBatch, AttendanceSubmission
from .repository import SubmissionRepository

logger = logging.getLogger(__name__)


class ApprovalService:
    """Admin decisions on pending submissions.

    Every entry point funnels into `_decide`. Unknown or already decided ids
    are skipped; the result only says whether anything changed. Approved
    entries reach the ledger in the same store transaction that flips them out of
    `pending`; rejected ones never touch it.
    """

    def __init__(
        self,
        submissions: SubmissionRepository,
        notifications: Optional[NotificationService] = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._submissions = submissions
        self._notifications = notifications
        self._clock = clock or datetime.now

    def approve(self, *, current_role: Role, submission_ids: Iterable[str], admin_id: str) -> bool:
        return self._decide(current_role, submission_ids, admin_id, ApprovalStatus.APPROVED)

    def reject(self, *, current_role: Role, submission_ids: Iterable[str], admin_id: str) -> bool:
        return self._decide(current_role, submission_ids, admin_id, ApprovalStatus.REJECTED)

    def approve_batch(self, *, current_role: Role, batch: AttendanceBatch, admin_id: str) -> bool:
        return self.approve(current_role=current_role, submission_ids=batch.submission_ids, admin_id=admin_id)

    def reject_batch(self, *, current_role: Role, batch: AttendanceBatch, admin_id: str) -> bool:
        return self.reject(current_role=current_role, submission_ids=batch.submission_ids, admin_id=admin_id)

    def _decide(
        self,
        current_role: Role,
        submission_ids: Iterable[str],
        admin_id: str,
        outcome: ApprovalStatus,
    ) -> bool:
        require_role(current_role, Role.ADMIN)
        admin_id = require_non_empty(str(admin_id or ""), "Admin id")

        ids = list(dict.fromkeys(str(i) for i in submission_ids))
        if not ids:
            return False

        decided_at = self._clock()
        changed: List[AttendanceSubmission] = []

        for submission_id in ids:
            sub = self._submissions.get(submission_id)
            if sub is None or not sub.is_pending:
                logger.debug("skip %s: unknown or already decided", submission_id)
                continue

            # Only the caller that flips pending wins; a concurrent decision makes this False.
            if outcome == ApprovalStatus.APPROVED:
                won = self._submissions.approve_into_ledger(
                    submission=sub,
                    decided_by=admin_id,
                    decided_at=decided_at,
                )
            else:
                won = self._submissions.decide(
                    submission_id=submission_id,
                    status=outcome,
                    decided_by=admin_id,
                    decided_at=decided_at,
                )
            if not won:
                logger.debug("skip %s: decided concurrently", submission_id)
                continue
            changed.append(sub)

        if not changed:
            return False

        logger.info("admin %s %s %d of %d submissions", admin_id, outcome.value, len(changed), len(ids))
        if self._notifications:
            self._notifications.attendance_decided(
                approved=outcome == ApprovalStatus.APPROVED,
                count=len(changed),
                grades=(s.grade for s in changed),
                dates=(s.work_date for s in changed),
                teacher_names=(s.teacher_name for s in changed),
            )
        return True
