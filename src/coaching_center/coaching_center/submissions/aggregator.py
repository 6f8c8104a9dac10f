from __future__ import annotations

from typing import Dict, Iterable, List

from .model import AttendanceBatch, AttendanceSubmission, batch_key


def build_pending_batches(submissions: Iterable[AttendanceSubmission]) -> List[AttendanceBatch]:
    """Group pending submissions by (date, grade, teacher).

    A batch takes `submitted_at` and `teacher_name` from the first submission
    met in iteration order, so callers should pass submissions in insertion
    order. Result is sorted newest batch first; ties keep first-seen order.
    """

    batches: Dict[str, AttendanceBatch] = {}

    for sub in submissions:
        if not sub.is_pending:
            continue

        key = batch_key(sub.work_date, sub.grade, sub.teacher_id)
        batch = batches.get(key)
        if batch is None:
            batch = AttendanceBatch(
                batch_id=key,
                work_date=sub.work_date,
                grade=sub.grade,
                teacher_id=sub.teacher_id,
                teacher_name=sub.teacher_name,
                submitted_at=sub.submitted_at,
            )
            batches[key] = batch

        batch.submissions.append(sub)
        batch.total_students += 1
        batch.pending_count += 1

    return sorted(batches.values(), key=lambda b: b.submitted_at, reverse=True)
