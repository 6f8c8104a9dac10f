from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationType


@dataclass(frozen=True)
class Notification:
    notification_id: int
    type: NotificationType
    message: str
    created_at: datetime
    read: bool = False
    student_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "type": self.type.value,
            "message": self.message,
            "timestamp": self.created_at.isoformat(timespec="seconds"),
            "read": self.read,
            "student_id": self.student_id,
        }
