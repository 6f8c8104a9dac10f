from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from .attendance.model import ledger_to_json
from .container import Container


def build_snapshot(container: Container, *, clock: Optional[Callable[[], datetime]] = None) -> dict:
    """Ledger plus every submission (any status) as one JSON-ready document."""
    exported_at = (clock or datetime.now)()
    return {
        "attendance": ledger_to_json(container.attendance_service.get_ledger()),
        "attendance_submissions": [s.to_dict() for s in container.submission_service.list_all()],
        "exportDate": exported_at.isoformat(timespec="seconds"),
    }
