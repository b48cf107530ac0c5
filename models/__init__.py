# -------------------------
# Enums
# -------------------------
from .enums import (
    JobStatus,
    HubAccess,
    WorkOrderEventType,
    REASON_REQUIRED_STATUSES,
)

# -------------------------
# Work Order Models
# -------------------------
from .work_order import (
    WorkOrder,
    WorkOrderRead,
    StatusChangeRequest,
)

# -------------------------
# File Models
# -------------------------
from .file import (
    FileRecord,
    ClientVisibleFile,
    VisibilityUpdate,
)

# -------------------------
# Contact Models
# -------------------------
from .contact import (
    Contact,
    ContactGrant,
    ContactGrantCreate,
)

# -------------------------
# Task / Checklist Models
# -------------------------
from .task import (
    ChecklistItem,
    Task,
    ChecklistToggle,
    TaskProgressRead,
)

# -------------------------
# Client Hub Models
# -------------------------
from .hub import (
    HubMessage,
    HubMessageCreate,
    HubSnapshot,
    HubPayload,
    HubAccessRead,
)

# Actor is imported from models.actor directly: it depends on core.roles,
# which itself imports models.enums.

__all__ = [
    # enums
    "JobStatus",
    "HubAccess",
    "WorkOrderEventType",
    "REASON_REQUIRED_STATUSES",

    # work orders
    "WorkOrder",
    "WorkOrderRead",
    "StatusChangeRequest",

    # files
    "FileRecord",
    "ClientVisibleFile",
    "VisibilityUpdate",

    # contacts
    "Contact",
    "ContactGrant",
    "ContactGrantCreate",

    # tasks
    "ChecklistItem",
    "Task",
    "ChecklistToggle",
    "TaskProgressRead",

    # client hub
    "HubMessage",
    "HubMessageCreate",
    "HubSnapshot",
    "HubPayload",
    "HubAccessRead",
]
