# core/roles.py

from typing import Optional

from models.enums import BaseStrEnum


# ============================================
# CLOSED ROLE SET
# ============================================
class Role(BaseStrEnum):
    """
    Every role the platform knows about.
    Stored role strings that don't match one of these become `unknown`,
    which the permission evaluator always rejects.
    """

    super_admin = "super_admin"
    admin = "admin"
    supervisor = "supervisor"
    project_coordinator = "project_coordinator"
    office_staff = "office_staff"
    technician = "technician"
    client_contact = "client_contact"
    unknown = "unknown"


# Internal employees (user_type = 'internal' in the roles table)
STAFF_ROLES = frozenset({
    Role.super_admin,
    Role.admin,
    Role.supervisor,
    Role.project_coordinator,
    Role.office_staff,
    Role.technician,
})

# External people reaching the platform through the client portal
CLIENT_ROLES = frozenset({Role.client_contact})


def parse_role(value: Optional[str]) -> Role:
    """Normalize a stored role slug. Unrecognised values fail closed."""
    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        return Role.unknown

    slug = value.strip().lower().replace(" ", "_").replace("-", "_")
    try:
        return Role(slug)
    except ValueError:
        return Role.unknown


def is_staff(role: Role) -> bool:
    return role in STAFF_ROLES


def is_client(role: Role) -> bool:
    return role in CLIENT_ROLES
