# routers/files.py

from typing import List
from fastapi import APIRouter, Depends

from dependencies.auth import get_current_actor
from core import store
from core.permission_helpers import require_work_order_access, requires_permission
from models.actor import Actor
from models.file import ClientVisibleFile, FileRecord, VisibilityUpdate
from services import work_orders as service

router = APIRouter(
    prefix="/work-orders/{work_order_id}/files",
    tags=["Files"],
)


# -----------------------------------------------------
# Internal list (every file, with visibility flags)
# -----------------------------------------------------
@router.get("", response_model=List[FileRecord])
def list_files(
    work_order_id: str,
    current_actor: Actor = Depends(requires_permission("jobs:files:view")),
):
    work_order = store.get_work_order(work_order_id)
    require_work_order_access(current_actor, work_order)
    return store.list_files(work_order_id)


# -----------------------------------------------------
# Client-facing list, only through the visibility policy
# -----------------------------------------------------
@router.get("/client", response_model=List[ClientVisibleFile])
def list_client_files(work_order_id: str, current_actor: Actor = Depends(get_current_actor)):
    work_order = store.get_work_order(work_order_id)
    return service.client_files(current_actor, work_order)


@router.patch("/{file_id}/visibility", response_model=FileRecord)
def set_visibility(
    work_order_id: str,
    file_id: str,
    payload: VisibilityUpdate,
    current_actor: Actor = Depends(get_current_actor),
):
    work_order = store.get_work_order(work_order_id)
    require_work_order_access(current_actor, work_order)

    file = store.get_file(work_order_id, file_id)
    return service.toggle_file_visibility(current_actor, file, payload.visible_to_client)
