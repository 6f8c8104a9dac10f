from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add(
        self,
        *,
        type: NotificationType,
        message: str,
        created_at: datetime,
        student_id: Optional[int] = None,
    ) -> int:
        with self._db.transaction() as cur:
            cur.execute(
                """
                INSERT INTO notifications(type, message, student_id, is_read, created_at)
                VALUES(%s,%s,%s,0,%s)
                """,
                (type.value, message, student_id, created_at),
            )
            return int(cur.lastrowid)

    def list_recent(self, *, limit: int) -> Sequence[Notification]:
        with self._db.transaction() as cur:
            cur.execute(
                """
                SELECT notification_id, type, message, student_id, is_read, created_at
                FROM notifications
                ORDER BY created_at DESC, notification_id DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                Notification(
                    notification_id=int(r["notification_id"]),
                    type=NotificationType(r["type"]),
                    message=r["message"],
                    created_at=r["created_at"],
                    read=bool(r["is_read"]),
                    student_id=r.get("student_id"),
                )
                for r in cur.fetchall()
            ]

    def mark_read(self, *, notification_id: int) -> bool:
        with self._db.transaction() as cur:
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE notification_id=%s",
                (int(notification_id),),
            )
            if cur.rowcount > 0:
                return True
            # Already-read rows report rowcount 0; they still exist.
            cur.execute("SELECT 1 AS found FROM notifications WHERE notification_id=%s", (int(notification_id),))
            return cur.fetchone() is not None

    def mark_all_read(self) -> int:
        with self._db.transaction() as cur:
            cur.execute("UPDATE notifications SET is_read=1 WHERE is_read=0")
            return int(cur.rowcount)

    def unread_count(self) -> int:
        with self._db.transaction() as cur:
            cur.execute("SELECT COUNT(*) AS n FROM notifications WHERE is_read=0")
            r = cur.fetchone()
            return int(r["n"]) if r else 0

    def prune(self, *, keep: int) -> int:
        with self._db.transaction() as cur:
            cur.execute(
                """
                DELETE FROM notifications
                WHERE notification_id NOT IN (
                    SELECT notification_id FROM (
                        SELECT notification_id
                        FROM notifications
                        ORDER BY created_at DESC, notification_id DESC
                        LIMIT %s
                    ) AS newest
                )
                """,
                (int(keep),),
            )
            return int(cur.rowcount)
