# tests/test_permissions.py

"""
Tests for the permission catalog and the hierarchical key evaluator.
"""

import pytest

from core.permissions import ROLE_PERMISSIONS
from core.permission_helpers import (
    allows,
    can_view_work_order,
    get_effective_permissions,
    grant_matches,
    has_all_permissions,
    has_any_permission,
    is_valid_grant,
    is_valid_key,
    require_work_order_access,
)
from core.errors import Forbidden
from core.roles import Role, STAFF_ROLES, parse_role
from models.actor import Actor


# Keys exercised across the platform, used for the catalog sweep below
KNOWN_KEYS = [
    "account:reactivate",
    "dashboard:view",
    "users:read",
    "users:roles:assign",
    "work_orders:read",
    "work_orders:view_all",
    "work_orders:view_assigned",
    "work_orders:status:change",
    "jobs:files:view",
    "jobs:files:manage",
    "jobs:tasks:view",
    "jobs:tasks:delete",
    "jobs:tasks:checklist:toggle",
    "jobs:tasks:checklist:delete",
    "clients:read",
    "client_hub:view",
    "client_hub:manage_contacts",
    "client_hub:messages:send",
    "client_hub:files:read",
    "timesheets:own:submit",
    "settings:update",
]


def _expected(role: Role, key: str) -> bool:
    """Reference reading of the catalog: exact grant or wildcard ancestor."""
    for grant in ROLE_PERMISSIONS[role]:
        if grant == "*" or grant == key:
            return True
        if grant.endswith(":*") and key.startswith(grant[:-1]):
            return True
    return False


# ------------------------------------------------------------
# Catalog exactness
# ------------------------------------------------------------
@pytest.mark.parametrize("role", [r for r in Role if r != Role.unknown])
def test_allows_matches_catalog_for_every_role(role):
    actor = Actor(id="u-1", role=role)
    for key in KNOWN_KEYS:
        assert allows(actor, key) == _expected(role, key), (role, key)


def test_every_catalog_entry_is_a_valid_grant():
    for role, grants in ROLE_PERMISSIONS.items():
        for grant in grants:
            assert is_valid_grant(grant), (role, grant)


def test_catalog_covers_every_role():
    assert set(ROLE_PERMISSIONS) == set(Role)


def test_super_admin_allows_any_well_formed_key():
    actor = Actor(id="sa", role="super_admin")
    assert allows(actor, "anything:at:all:here")
    assert allows(actor, "x")


# ------------------------------------------------------------
# Key grammar
# ------------------------------------------------------------
@pytest.mark.parametrize("key", [
    "jobs",
    "jobs:tasks",
    "jobs:tasks:checklist:toggle",
    "client_hub:view",
    "a1:b_2",
])
def test_valid_keys(key):
    assert is_valid_key(key)


@pytest.mark.parametrize("key", [
    "",
    None,
    42,
    "Jobs:tasks",
    "jobs::view",
    ":jobs",
    "jobs:",
    "jobs:*",
    "*",
    "jobs:tasks:checklist:toggle:extra",
    "jobs tasks",
    "1jobs:view",
])
def test_malformed_keys_are_rejected(key):
    assert not is_valid_key(key)


@pytest.mark.parametrize("key", ["jobs:*", "", "Jobs:tasks", "a:b:c:d:e"])
def test_malformed_keys_never_allowed_even_for_super_admin(key):
    assert not allows(Actor(id="sa", role="super_admin"), key)


def test_wildcard_grant_covers_descendants_not_prefix_itself():
    assert grant_matches("jobs:*", "jobs:tasks:view")
    assert grant_matches("jobs:*", "jobs:files")
    assert not grant_matches("jobs:*", "jobs")
    assert not grant_matches("jobs:*", "jobsite:view")


def test_invalid_grants():
    assert is_valid_grant("*")
    assert is_valid_grant("jobs:tasks:*")
    assert not is_valid_grant("jobs:*:view")
    assert not is_valid_grant("jobs*")
    assert not is_valid_grant(None)


def test_invalid_catalog_entries_are_dropped(monkeypatch):
    monkeypatch.setitem(ROLE_PERMISSIONS, Role.office_staff, ["clients:read", "BROKEN KEY", "jobs:*:view"])
    actor = Actor(id="o", role="office_staff")
    assert get_effective_permissions(actor) == frozenset({"clients:read"})


# ------------------------------------------------------------
# Fail-closed rules
# ------------------------------------------------------------
def test_unrecognised_role_string_becomes_unknown():
    actor = Actor(id="u", role="regional_overlord")
    assert actor.role == Role.unknown
    assert get_effective_permissions(actor) == frozenset()
    assert not allows(actor, "dashboard:view")
    assert not allows(actor, "account:reactivate")


def test_role_strings_are_normalized():
    assert parse_role("Project Coordinator") == Role.project_coordinator
    assert parse_role("office-staff") == Role.office_staff
    assert parse_role(None) == Role.unknown


def test_inactive_actor_keeps_only_reactivation():
    actor = Actor(id="a", role="admin", is_active=False)
    assert allows(actor, "account:reactivate")
    assert not allows(actor, "work_orders:status:change")
    assert not allows(actor, "dashboard:view")


def test_inactive_client_contact_cannot_reactivate():
    actor = Actor(id="c", role="client_contact", is_active=False)
    assert not allows(actor, "account:reactivate")


def test_missing_actor_is_denied():
    assert not allows(None, "dashboard:view")


def test_technician_has_no_hub_permission():
    tech = Actor(id="t", role="technician")
    assert not allows(tech, "client_hub:view")
    assert allows(tech, "jobs:tasks:checklist:toggle")
    assert allows(tech, "timesheets:own:submit")


def test_technician_is_internal_staff():
    assert Role.technician in STAFF_ROLES
    assert Role.client_contact not in STAFF_ROLES


def test_has_any_and_all():
    actor = Actor(id="o", role="office_staff")
    assert has_any_permission(actor, ["jobs:files:manage", "jobs:files:view"])
    assert not has_all_permissions(actor, ["jobs:files:manage", "jobs:files:view"])
    assert has_all_permissions(actor, ["jobs:files:view", "clients:read"])
    assert not has_all_permissions(actor, [])


# ------------------------------------------------------------
# Work-order scoping
# ------------------------------------------------------------
def test_view_all_sees_every_work_order(office_staff, work_order):
    assert can_view_work_order(office_staff, work_order)


def test_technician_sees_only_assigned_work_orders(technician, work_order, work_order_without_client):
    assert can_view_work_order(technician, work_order)
    assert not can_view_work_order(technician, work_order_without_client)

    with pytest.raises(Forbidden):
        require_work_order_access(technician, work_order_without_client)


def test_client_contact_cannot_view_internal_work_order(client_user, work_order):
    assert not can_view_work_order(client_user, work_order)
