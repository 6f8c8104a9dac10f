from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Iterable, Optional, Sequence

from ..core.constants import DEFAULT_NOTIFICATION_LIMIT
from ..core.enums import NotificationType
from ..core.exceptions import NotFoundError
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


def _join(values: Iterable[str]) -> str:
    return ", ".join(sorted(set(values)))


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


class NotificationService:
    """Records human-readable events for the notification bell.

    Delivery (email, per-teacher routing) happens elsewhere; this only stores
    the event and keeps the store capped to the newest `limit` rows.
    """

    def __init__(
        self,
        notifications: NotificationRepository,
        *,
        limit: int = DEFAULT_NOTIFICATION_LIMIT,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._notifications = notifications
        self._limit = int(limit)
        self._clock = clock or datetime.now

    def notify(
        self,
        message: str,
        *,
        type: NotificationType = NotificationType.INFO,
        student_id: Optional[int] = None,
    ) -> int:
        notification_id = self._notifications.add(
            type=type,
            message=message,
            created_at=self._clock(),
            student_id=student_id,
        )
        self._notifications.prune(keep=self._limit)
        logger.info("notification %s [%s]: %s", notification_id, type.value, message)
        return notification_id

    # ---- attendance events ----
    def attendance_submitted(self, *, teacher_name: str, work_date: date, count: int) -> int:
        return self.notify(
            f"{teacher_name} submitted attendance for {_plural(count, 'student')} "
            f"on {work_date.isoformat()} for approval"
        )

    def attendance_decided(
        self,
        *,
        approved: bool,
        count: int,
        grades: Iterable[str],
        dates: Iterable[date],
        teacher_names: Iterable[str],
    ) -> int:
        verb = "approved" if approved else "rejected"
        return self.notify(
            f"Attendance {verb} for {_plural(count, 'student')} "
            f"in {_join(grades)} on {_join(d.isoformat() for d in dates)} "
            f"(submitted by {_join(teacher_names)})"
        )

    def attendance_saved(self, *, work_date: date, count: int) -> int:
        return self.notify(
            f"Attendance saved for {work_date.isoformat()} ({_plural(count, 'student')})",
            type=NotificationType.ATTENDANCE,
        )

    def absence_marked(self, *, student_id: int, student_name: str, work_date: date) -> int:
        return self.notify(
            f"{student_name} was marked absent on {work_date.isoformat()}",
            type=NotificationType.ATTENDANCE,
            student_id=int(student_id),
        )

    # ---- bell ----
    def list_recent(self, *, limit: Optional[int] = None) -> Sequence[Notification]:
        return self._notifications.list_recent(limit=int(limit or self._limit))

    def unread_count(self) -> int:
        return self._notifications.unread_count()

    def mark_read(self, notification_id: int) -> None:
        if not self._notifications.mark_read(notification_id=int(notification_id)):
            raise NotFoundError("Notification not found")

    def mark_all_read(self) -> int:
        return self._notifications.mark_all_read()
