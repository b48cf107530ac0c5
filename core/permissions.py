# ============================================
# CENTRALIZED ROLE → PERMISSIONS MAP
# ============================================
# Keys are hierarchical: domain:resource:action[:qualifier]
# A trailing "*" segment grants every key beneath its prefix.
from core.roles import Role


ROLE_PERMISSIONS = {

    # =====================================================
    # SUPER ADMIN: Full access to everything
    # =====================================================
    Role.super_admin: ["*"],

    # =====================================================
    # SYSTEM ADMIN
    # =====================================================
    Role.admin: [
        "account:reactivate",
        "dashboard:*",

        # User & role management
        "users:*",
        "roles:*",

        # Work orders and every job tab
        "work_orders:*",
        "jobs:*",

        # Clients and the client-facing hub
        "clients:*",
        "client_hub:*",

        # Resources
        "technicians:*",
        "equipment:*",
        "vehicles:*",
        "timesheets:*",

        "reports:*",
        "settings:*",
    ],

    # =====================================================
    # SUPERVISOR: runs the field, no user/role admin
    # =====================================================
    Role.supervisor: [
        "account:reactivate",
        "dashboard:view",

        "work_orders:read",
        "work_orders:view_all",
        "work_orders:update",
        "work_orders:assign",
        "work_orders:status:change",

        "jobs:*",

        "clients:read",
        "client_hub:view",
        "client_hub:messages:*",

        "technicians:read",
        "timesheets:approve",
        "reports:read",
    ],

    # =====================================================
    # PROJECT COORDINATOR: office side of a job
    # =====================================================
    Role.project_coordinator: [
        "account:reactivate",
        "dashboard:view",

        "work_orders:create",
        "work_orders:read",
        "work_orders:view_all",
        "work_orders:update",
        "work_orders:status:change",

        # All job tabs visible
        "jobs:requirements:*",
        "jobs:technicians:view",
        "jobs:team:view",
        "jobs:files:*",
        "jobs:shipments:*",

        # Tasks: everything except deleting tasks / checklist items
        "jobs:tasks:view",
        "jobs:tasks:create",
        "jobs:tasks:edit",
        "jobs:tasks:assign",
        "jobs:tasks:status",
        "jobs:tasks:block",
        "jobs:tasks:comment",
        "jobs:tasks:comment:edit_own",
        "jobs:tasks:comment:delete_own",
        "jobs:tasks:checklist:add",
        "jobs:tasks:checklist:toggle",
        "jobs:tasks:checklist:edit",

        "clients:create",
        "clients:read",
        "clients:update",
        "client_hub:view",
        "client_hub:messages:*",
    ],

    # =====================================================
    # OFFICE STAFF: reads everything, talks to clients
    # =====================================================
    Role.office_staff: [
        "account:reactivate",
        "dashboard:view",

        "work_orders:read",
        "work_orders:view_all",

        "jobs:requirements:view",
        "jobs:tasks:view",
        "jobs:technicians:view",
        "jobs:team:view",
        "jobs:files:view",
        "jobs:shipments:view",

        "clients:read",
        "client_hub:view",
        "client_hub:messages:*",
    ],

    # =====================================================
    # TECHNICIAN: own assignments only, never the hub
    # =====================================================
    Role.technician: [
        "account:reactivate",
        "dashboard:view",

        "work_orders:view_assigned",

        "jobs:tasks:view",
        "jobs:tasks:status",
        "jobs:tasks:comment",
        "jobs:tasks:comment:edit_own",
        "jobs:tasks:comment:delete_own",
        "jobs:tasks:checklist:add",
        "jobs:tasks:checklist:toggle",
        "jobs:tasks:checklist:edit",

        "jobs:team:view",
        "jobs:team:manage",

        "timesheets:own:*",
    ],

    # =====================================================
    # CLIENT CONTACT: portal login for a client's PM
    # =====================================================
    Role.client_contact: [
        "client_hub:messages:read",
        "client_hub:messages:send",
        "client_hub:files:read",
    ],

    # =====================================================
    # FALLBACK
    # =====================================================
    Role.unknown: [],
}
