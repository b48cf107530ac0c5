from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# JOB STATUS
# -----------------------------------------------------
class JobStatus(BaseStrEnum):
    """Lifecycle status of a work order."""

    open = "Open"
    active = "Active"
    on_hold = "On Hold"
    completed = "Completed"
    submitted = "Submitted"
    invoiced = "Invoiced"
    cancelled = "Cancelled"


# Statuses that must always carry a non-empty justification
REASON_REQUIRED_STATUSES = frozenset({JobStatus.on_hold, JobStatus.cancelled})


# -----------------------------------------------------
# CLIENT HUB ACCESS
# -----------------------------------------------------
class HubAccess(BaseStrEnum):
    """
    Outcome of a Client Hub access check.
    no_client is not a denial: the hub simply has nobody to talk to.
    """

    no_client = "no_client"
    denied = "denied"
    granted = "granted"


# -----------------------------------------------------
# WORK ORDER EVENTS
# -----------------------------------------------------
class WorkOrderEventType(BaseStrEnum):
    """Change notifications fanned out to work order subscribers."""

    status_changed = "status_changed"
    file_visibility_changed = "file_visibility_changed"
    contact_added = "contact_added"
    contact_removed = "contact_removed"
    hub_message_posted = "hub_message_posted"
    checklist_toggled = "checklist_toggled"
