"""Example: drive the approval workflow through the service layer (no Flask).

Controllers stay thin; the workflow lives in the services.
"""

from datetime import date

from config import load_settings

from src.coaching_center.coaching_center.container import build_container
from src.coaching_center.coaching_center.core.enums import Role


def main():
    container = build_container(db_config=load_settings().DB_CONFIG)

    created = container.submission_service.submit_for_approval(
        current_role=Role.TEACHER,
        work_date=date.today(),
        statuses={101: "present", 102: "absent"},
        teacher_id="t1",
        teacher_name="Ms. Johnson",
    )
    print(f"submitted {len(created)} entries")

    for batch in container.submission_service.get_pending_batches():
        print(batch.batch_id, batch.pending_count)
        container.approval_service.approve_batch(current_role=Role.ADMIN, batch=batch, admin_id="admin")

    print(container.attendance_service.get_day(date.today()))


if __name__ == "__main__":
    main()
