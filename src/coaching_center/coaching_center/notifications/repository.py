from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationType
from .model import Notification


class NotificationRepository(Protocol):
    def add(
        self,
        *,
        type: NotificationType,
        message: str,
        created_at: datetime,
        student_id: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def list_recent(self, *, limit: int) -> Sequence[Notification]:
        """Newest first."""

        raise NotImplementedError

    def mark_read(self, *, notification_id: int) -> bool:
        raise NotImplementedError

    def mark_all_read(self) -> int:
        raise NotImplementedError

    def unread_count(self) -> int:
        raise NotImplementedError

    def prune(self, *, keep: int) -> int:
        """Delete everything but the `keep` newest rows; returns rows removed."""

        raise NotImplementedError
