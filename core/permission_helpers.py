import re
from typing import FrozenSet, Iterable

from fastapi import Depends, HTTPException

from core.permissions import ROLE_PERMISSIONS
from core.roles import Role
from models.actor import Actor


# -----------------------------------------------------
# Key grammar
#   domain:resource:action[:qualifier]
#   1..4 lowercase segments, no wildcards in requested keys
# -----------------------------------------------------
SEGMENT_RE = re.compile(r"^[a-z][a-z0-9_]*$")
MAX_KEY_DEPTH = 4
WILDCARD = "*"

# Keys a deactivated actor may still be granted (by role)
INACTIVE_EXEMPT_KEYS = frozenset({"account:reactivate"})


def is_valid_key(key) -> bool:
    """True when `key` is a well-formed, wildcard-free permission key."""
    if not isinstance(key, str) or not key:
        return False

    segments = key.split(":")
    if len(segments) > MAX_KEY_DEPTH:
        return False

    return all(SEGMENT_RE.match(segment) for segment in segments)


def is_valid_grant(grant) -> bool:
    """Granted keys may additionally end in a single '*' segment."""
    if grant == WILDCARD:
        return True
    if not isinstance(grant, str) or not grant:
        return False

    if grant.endswith(":" + WILDCARD):
        return is_valid_key(grant[: -len(WILDCARD) - 1])
    return is_valid_key(grant)


def grant_matches(grant: str, key: str) -> bool:
    """
    Exact match, or a wildcard ancestor of `key`.
    "jobs:*" covers "jobs:tasks:view" but not "jobs" itself.
    """
    if grant == WILDCARD:
        return True
    if grant.endswith(":" + WILDCARD):
        return key.startswith(grant[:-len(WILDCARD)])
    return grant == key


# -----------------------------------------------------
# Collect effective permissions for the actor's role.
# Misconfigured catalog entries are dropped, not raised.
# -----------------------------------------------------
def get_effective_permissions(actor: Actor) -> FrozenSet[str]:
    if actor.role == Role.unknown:
        return frozenset()

    return frozenset(
        grant for grant in ROLE_PERMISSIONS.get(actor.role, [])
        if is_valid_grant(grant)
    )


# -----------------------------------------------------
# Permission evaluation
# -----------------------------------------------------
def allows(actor: Actor, key: str) -> bool:
    """
    May `actor` perform the action named by `key`?
    Fails closed: malformed keys, unknown roles and
    deactivated actors all answer False.
    """
    if actor is None or not is_valid_key(key):
        return False

    if not actor.is_active and key not in INACTIVE_EXEMPT_KEYS:
        return False

    return any(grant_matches(grant, key) for grant in get_effective_permissions(actor))


def has_any_permission(actor: Actor, keys: Iterable[str]) -> bool:
    return any(allows(actor, key) for key in keys)


def has_all_permissions(actor: Actor, keys: Iterable[str]) -> bool:
    keys = list(keys)
    return bool(keys) and all(allows(actor, key) for key in keys)


# -----------------------------------------------------
# FastAPI dependency wrapper
# -----------------------------------------------------
def requires_permission(permission: str):
    """
    Usage:
        @router.get("/", dependencies=[Depends(requires_permission("clients:read"))])
    """
    from dependencies.auth import get_current_actor

    def dependency(current_actor: Actor = Depends(get_current_actor)):
        if not allows(current_actor, permission):
            raise HTTPException(
                status_code=403,
                detail=f"Insufficient permissions: '{permission}' required"
            )
        return current_actor

    return dependency


# ============================================================
# WORK-ORDER-LEVEL SCOPING
# ============================================================
VIEW_ALL_WORK_ORDERS = "work_orders:view_all"
VIEW_ASSIGNED_WORK_ORDERS = "work_orders:view_assigned"


def is_involved(actor: Actor, work_order) -> bool:
    """Owner, assigned technician or team member."""
    return (
        actor.id == work_order.owner_id
        or actor.id in work_order.assigned_actor_ids
        or actor.id in work_order.team_actor_ids
    )


def can_view_work_order(actor: Actor, work_order) -> bool:
    """
    view_all sees every work order; view_assigned only the ones
    the actor owns, is assigned to, or is on the team of.
    """
    if allows(actor, VIEW_ALL_WORK_ORDERS):
        return True
    return allows(actor, VIEW_ASSIGNED_WORK_ORDERS) and is_involved(actor, work_order)


def require_work_order_access(actor: Actor, work_order):
    """Raise Forbidden unless the actor may see this work order."""
    from core.errors import Forbidden

    if not can_view_work_order(actor, work_order):
        raise Forbidden(message=f"You do not have access to work order {work_order.id}")
