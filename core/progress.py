# core/progress.py

from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple

from core.errors import Forbidden
from core.permission_helpers import allows
from models.actor import Actor
from models.task import ChecklistItem, Task

CHECKLIST_TOGGLE_PERMISSION = "jobs:tasks:checklist:toggle"


def _percent(completed: int, total: int) -> int:
    # Half-up rounding in integers: 1/8 -> 13, 1/3 -> 33
    if total <= 0:
        return 0
    return (200 * completed + total) // (2 * total)


def checklist_counts(task: Task) -> Tuple[int, int]:
    """(completed, total) for a task's checklist."""
    items = task.checklist
    return sum(1 for item in items if item.is_completed), len(items)


def task_progress(task: Task) -> int:
    """
    Completion percentage of a task's checklist, 0..100.
    A task without checklist items is 0% done, never 100%.
    """
    completed, total = checklist_counts(task)
    return _percent(completed, total)


def work_order_progress(tasks: Iterable[Task]) -> int:
    """Mean progress over a work order's tasks; 0 when there are none."""
    values = [task_progress(t) for t in tasks]
    if not values:
        return 0
    return _percent(sum(values), 100 * len(values))


def toggle_checklist_item(
    actor: Actor,
    item: ChecklistItem,
    is_completed: bool,
    now: Optional[datetime] = None,
) -> ChecklistItem:
    """
    Mark a checklist item complete or incomplete.
    Completing stamps who and when; un-completing clears both.
    """
    if not allows(actor, CHECKLIST_TOGGLE_PERMISSION):
        raise Forbidden(CHECKLIST_TOGGLE_PERMISSION)

    if is_completed:
        return item.model_copy(update={
            "is_completed": True,
            "completed_by_id": actor.id,
            "completed_at": now or datetime.now(timezone.utc),
        })

    return item.model_copy(update={
        "is_completed": False,
        "completed_by_id": None,
        "completed_at": None,
    })
