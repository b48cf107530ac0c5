# routers/permissions.py

from fastapi import APIRouter, Depends, Query

from dependencies.auth import get_current_actor
from core.permission_helpers import allows, get_effective_permissions
from models.actor import Actor

router = APIRouter(
    prefix="/permissions",
    tags=["Permissions"],
)


# -----------------------------------------------------
# GET /permissions/me
# What the UI uses to decide which actions to render
# -----------------------------------------------------
@router.get("/me", summary="Current actor's role and granted keys")
def my_permissions(current_actor: Actor = Depends(get_current_actor)):
    granted = sorted(get_effective_permissions(current_actor)) if current_actor.is_active else []
    return {
        "actor_id": current_actor.id,
        "role": current_actor.role,
        "is_active": current_actor.is_active,
        "permissions": granted,
    }


# -----------------------------------------------------
# GET /permissions/check?key=jobs:tasks:checklist:toggle
# -----------------------------------------------------
@router.get("/check", summary="Evaluate a single permission key")
def check_permission(
    key: str = Query(..., description="Hierarchical key, e.g. jobs:files:manage"),
    current_actor: Actor = Depends(get_current_actor),
):
    """
    Malformed keys are not an error: they are simply not allowed.
    """
    return {"key": key, "allowed": allows(current_actor, key)}
