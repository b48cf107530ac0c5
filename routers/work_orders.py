# routers/work_orders.py

from fastapi import APIRouter, Depends

from dependencies.auth import get_current_actor
from core import store
from core.permission_helpers import require_work_order_access
from core.progress import checklist_counts
from models.actor import Actor
from models.task import ChecklistItem, ChecklistToggle, TaskProgressRead
from models.work_order import StatusChangeRequest, WorkOrderRead
from services import work_orders as service

router = APIRouter(
    prefix="/work-orders",
    tags=["Work Orders"],
)


@router.get("/{work_order_id}", response_model=WorkOrderRead)
def get_work_order(work_order_id: str, current_actor: Actor = Depends(get_current_actor)):
    work_order = store.get_work_order(work_order_id)
    require_work_order_access(current_actor, work_order)
    return WorkOrderRead.from_work_order(work_order)


# -----------------------------------------------------
# PATCH /work-orders/{id}/status
# On Hold / Cancelled need a reason (422 with target_status otherwise)
# -----------------------------------------------------
@router.patch("/{work_order_id}/status", response_model=WorkOrderRead)
def change_status(
    work_order_id: str,
    payload: StatusChangeRequest,
    current_actor: Actor = Depends(get_current_actor),
):
    work_order = store.get_work_order(work_order_id)
    updated = service.transition_status(current_actor, work_order, payload.status, payload.reason)
    return WorkOrderRead.from_work_order(updated)


@router.get("/{work_order_id}/tasks/{task_id}/progress", response_model=TaskProgressRead)
def get_task_progress(
    work_order_id: str,
    task_id: str,
    current_actor: Actor = Depends(get_current_actor),
):
    work_order = store.get_work_order(work_order_id)
    require_work_order_access(current_actor, work_order)

    task = store.get_task(work_order_id, task_id)
    completed, total = checklist_counts(task)
    return TaskProgressRead(
        task_id=task.id,
        completed=completed,
        total=total,
        progress=service.task_progress(task),
    )


@router.patch("/{work_order_id}/checklist/{item_id}", response_model=ChecklistItem)
def toggle_checklist_item(
    work_order_id: str,
    item_id: str,
    payload: ChecklistToggle,
    current_actor: Actor = Depends(get_current_actor),
):
    work_order = store.get_work_order(work_order_id)
    item = store.get_checklist_item(work_order_id, item_id)
    return service.toggle_checklist(current_actor, work_order, item, payload.is_completed)
