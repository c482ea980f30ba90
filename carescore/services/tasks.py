"""
Nurse work queue

What this file is for
Given what is pending on the unit right now:
- how many medication administrations are overdue
- how many are due in the next 30 minutes
- how many patients have vitals more than 8 hours old (or none at all)
- the nurse's own outstanding assigned tasks

we produce one ordered list of work items for the "priority tasks" panel.

The ordering is deliberately simple and explainable: overdue beats not
overdue, then high beats medium beats low. Anything that ties keeps the order
it was added in (medication batches, then vitals, then assigned tasks), so
the sort has to be stable. Python's sort is.

Also in here: the small time comparisons that feed those counts, and the
admission priority used on the ward admissions list. Every function takes
"now" from the caller.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Iterator, Optional, Sequence

from carescore.core.config import settings
from carescore.core.exceptions import CallerContractViolation
from carescore.core.logging import get_logger
from carescore.schemas.clinical import (
    AdmissionPriority,
    AssignedTask,
    AssignedTaskRecord,
    EncounterType,
    OverdueMedicationBatch,
    OverdueVitalsBatch,
    TaskQueue,
    UpcomingMedicationBatch,
    WorkItem,
)

logger = get_logger(__name__)


# -------------------------
# Weights
# -------------------------
# Being overdue outranks any priority on its own: 10 is bigger than the
# largest priority weight, so an overdue low task still beats a high task that
# is not yet due.

OVERDUE_WEIGHT = 10

PRIORITY_WEIGHT: dict[str, int] = {
    "high": 3,
    "medium": 2,
    "low": 1,
}

COMPLETED_STATUS = "completed"


def priority_weight(priority: str) -> int:
    # unknown labels sort last rather than failing the whole panel
    return PRIORITY_WEIGHT.get(priority, 0)


def queue_score(item: WorkItem) -> int:
    return (OVERDUE_WEIGHT if item.overdue else 0) + priority_weight(item.priority)


# -------------------------
# Detection helpers
# -------------------------


@contextmanager
def _comparable_datetimes() -> Iterator[None]:
    """Report mixed naive/aware datetimes as a contract violation."""
    try:
        yield
    except TypeError as exc:
        raise CallerContractViolation(
            "Cannot compare timezone-aware and naive datetimes; pass both in the same form."
        ) from exc


def _before(a: datetime, b: datetime) -> bool:
    with _comparable_datetimes():
        return a < b


def _age(now: datetime, then: datetime) -> timedelta:
    with _comparable_datetimes():
        return now - then


def count_overdue_medications(scheduled_times: Iterable[datetime], now: datetime) -> int:
    """Due administrations scheduled strictly before now."""
    return sum(1 for t in scheduled_times if _before(t, now))


def count_upcoming_medications(
    scheduled_times: Iterable[datetime],
    now: datetime,
    window_minutes: Optional[int] = None,
) -> int:
    """Due administrations scheduled within [now, now + window], both ends included."""
    if window_minutes is None:
        window_minutes = settings.upcoming_medication_window_minutes
    horizon = now + timedelta(minutes=window_minutes)
    return sum(1 for t in scheduled_times if not _before(t, now) and not _before(horizon, t))


def count_overdue_vitals(
    last_recorded: Iterable[Optional[datetime]],
    now: datetime,
    hours: Optional[int] = None,
) -> int:
    """
    Patients whose latest vitals are more than `hours` old (8 by default).

    A patient with nothing recorded counts as overdue.
    """
    if hours is None:
        hours = settings.vitals_overdue_hours
    limit = timedelta(hours=hours)
    return sum(1 for t in last_recorded if t is None or _age(now, t) > limit)


def count_vitals_due(
    last_recorded: Iterable[Optional[datetime]],
    now: datetime,
    hours: Optional[int] = None,
) -> int:
    """
    Dashboard "vitals due" count: nothing recorded, or at least `hours` old
    (6 by default).

    Note the inclusive bound and the shorter window compared to
    count_overdue_vitals(); the two numbers are shown in different places.
    """
    if hours is None:
        hours = settings.vitals_due_hours
    limit = timedelta(hours=hours)
    return sum(1 for t in last_recorded if t is None or _age(now, t) >= limit)


# -------------------------
# Assigned tasks
# -------------------------


# English regardless of the process locale
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def format_due_time(due: datetime) -> str:
    """e.g. "Mar 5, 2:07 PM" """
    hour = due.hour % 12 or 12
    meridiem = "AM" if due.hour < 12 else "PM"
    return f"{MONTH_ABBREVIATIONS[due.month - 1]} {due.day}, {hour}:{due.minute:02d} {meridiem}"


def select_assigned_tasks(
    tasks: Iterable[AssignedTaskRecord],
    now: datetime,
    limit: Optional[int] = None,
) -> list[AssignedTaskRecord]:
    """
    Pick the assigned tasks that make it onto the panel.

    Completed tasks and tasks due after tomorrow (by calendar date) are
    dropped. The rest are ordered by priority (high first) then due date
    (earliest first) and cut to `limit` (3 by default).

    The cut happens here, before merging with the batches. That is how the
    panel has always behaved: it is a top 3 of assigned tasks, not a top 3 of
    the whole queue.
    """
    if limit is None:
        limit = settings.assigned_task_limit

    last_day = (now + timedelta(days=1)).date()
    open_tasks = [
        t for t in tasks
        if t.status != COMPLETED_STATUS and t.due_date.date() <= last_day
    ]
    with _comparable_datetimes():
        open_tasks.sort(key=lambda t: (-priority_weight(t.priority), t.due_date))
    return open_tasks[:limit]


def to_work_item(task: AssignedTaskRecord, now: datetime) -> AssignedTask:
    return AssignedTask(
        id=f"task-{task.id}",
        title=task.title,
        priority=task.priority,
        due_time=format_due_time(task.due_date),
        due_at=task.due_date,
        overdue=_before(task.due_date, now),
    )


# -------------------------
# Queue
# -------------------------


@dataclass(frozen=True)
class RankedItem:
    """Keeps a work item next to its queue score."""
    item: WorkItem
    score: int


def rank_work_items(items: Sequence[WorkItem]) -> list[RankedItem]:
    ranked = [RankedItem(item=item, score=queue_score(item)) for item in items]
    # stable: equal scores keep insertion order
    ranked.sort(key=lambda r: -r.score)
    return ranked


def build_task_queue(
    now: datetime,
    overdue_medications: int = 0,
    upcoming_medications: int = 0,
    overdue_vitals: int = 0,
    assigned_tasks: Iterable[AssignedTaskRecord] = (),
    assigned_task_limit: Optional[int] = None,
) -> TaskQueue:
    """
    Merge batch counts and assigned tasks into one ordered queue.

    Batches only appear when their count is above zero. Items are appended
    in a fixed order (overdue meds, upcoming meds, overdue vitals, then the
    pre-sorted assigned tasks) and then ranked by overdue (+10) plus priority
    weight, highest first.
    """
    for name, count in (
        ("overdue_medications", overdue_medications),
        ("upcoming_medications", upcoming_medications),
        ("overdue_vitals", overdue_vitals),
    ):
        if count < 0:
            raise CallerContractViolation(f"{name} cannot be negative (got {count}).", fields=[name])

    items: list[WorkItem] = []

    if overdue_medications > 0:
        items.append(OverdueMedicationBatch(count=overdue_medications))

    if upcoming_medications > 0:
        items.append(UpcomingMedicationBatch(count=upcoming_medications))

    if overdue_vitals > 0:
        items.append(OverdueVitalsBatch(count=overdue_vitals))

    for task in select_assigned_tasks(assigned_tasks, now, limit=assigned_task_limit):
        items.append(to_work_item(task, now))

    ranked = rank_work_items(items)
    logger.debug("task_queue_built", size=len(ranked), top_score=ranked[0].score if ranked else None)

    return TaskQueue(items=[r.item for r in ranked])


# -------------------------
# Admissions
# -------------------------


def admission_priority(
    encounter_type: Optional[EncounterType],
    admitted_at: datetime,
    now: datetime,
) -> AdmissionPriority:
    """
    Priority of an encounter still waiting for a bed.

    Emergencies always come first. Anyone else waiting more than two hours
    since admission becomes urgent.
    """
    if encounter_type == EncounterType.emergency:
        return AdmissionPriority.emergency
    if _age(now, admitted_at) > timedelta(hours=2):
        return AdmissionPriority.urgent
    return AdmissionPriority.routine
