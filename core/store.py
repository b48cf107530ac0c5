# core/store.py

"""
Persistence collaborator for the policy core.

Thin Supabase adapter: reads rows, turns them into models, writes
results back. No policy decisions happen here. Writes are
last-write-wins; there is no version token on work orders.
"""

from typing import List, Optional

from pydantic import ValidationError

from core.errors import NotFound, TransportError, handle_supabase_error
from core.lifecycle import parse_status, requires_reason
from core.logging_config import logger
from core.supabase_client import get_supabase_client
from models.actor import Actor
from models.contact import Contact, ContactGrant
from models.file import FileRecord
from models.enums import JobStatus
from models.hub import HubMessage
from models.task import ChecklistItem, Task
from models.work_order import WorkOrder

FILE_COLUMNS = (
    "id, work_order_id, is_client_visible, category_id, file_name, file_url, "
    "file_size, mime_type, uploaded_by, created_at, category:file_categories(name)"
)
CONTACT_COLUMNS = "id, client_id, name, email, phone, user_profile_id"


def _client():
    client = get_supabase_client()
    if client is None:
        raise TransportError("Supabase client not configured")
    return client


def _first(rows):
    return rows[0] if rows else None


# -----------------------------------------------------
# Row → model helpers
# -----------------------------------------------------
def _file_from_row(row: dict) -> FileRecord:
    category = row.pop("category", None) or {}
    return FileRecord.model_validate({**row, "category_name": category.get("name")})


def _work_order_from_row(row: dict, **id_sets) -> WorkOrder:
    """
    Older rows may hold a null job_status (the column defaults to Open)
    or a reason left behind on a status that no longer takes one. Both
    are read leniently. An On Hold or Cancelled row without a reason
    cannot be repaired here and is reported as corrupt.
    """
    try:
        status = parse_status(row.get("job_status") or JobStatus.open)
    except ValueError as e:
        logger.error(f"Work order {row.get('id')} has an unreadable status: {e}")
        raise TransportError("Corrupt work order row", str(e)) from e

    reason = row.get("job_status_reason") if requires_reason(status) else None

    try:
        return WorkOrder.model_validate({
            **row,
            **id_sets,
            "job_status": status,
            "job_status_reason": reason,
        })
    except ValidationError as e:
        logger.error(f"Work order {row.get('id')} failed validation: {e}")
        raise TransportError("Corrupt work order row", f"work order {row.get('id')}") from e


def _message_from_row(row: dict) -> HubMessage:
    sender = row.pop("sender", None) or {}
    return HubMessage.model_validate({
        **row,
        "sender_name": sender.get("display_name"),
        "file_references": row.get("file_references") or [],
    })


# =====================================================
# Actors
# =====================================================
def get_actor(actor_id: str) -> Actor:
    try:
        rows = (
            _client().table("user_profiles")
            .select("id, display_name, is_active, role:roles(name)")
            .eq("id", actor_id)
            .limit(1)
            .execute()
        ).data
    except TransportError:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load actor") from e

    row = _first(rows)
    if not row:
        raise NotFound("Actor", actor_id)

    role = (row.get("role") or {}).get("name")
    return Actor(
        id=row["id"],
        role=role,
        is_active=row.get("is_active", True) is not False,
        display_name=row.get("display_name"),
    )


# =====================================================
# Work orders
# =====================================================
def _id_column(table: str, column: str, work_order_id: str) -> List[str]:
    rows = (
        _client().table(table)
        .select(column)
        .eq("work_order_id", work_order_id)
        .execute()
    ).data or []
    return [r[column] for r in rows if r.get(column)]


def get_work_order(work_order_id: str) -> WorkOrder:
    try:
        rows = (
            _client().table("work_orders")
            .select("id, job_status, job_status_reason, owner_id, client_id, pm_id")
            .eq("id", work_order_id)
            .limit(1)
            .execute()
        ).data
        row = _first(rows)
        if not row:
            raise NotFound("Work order", work_order_id)

        assigned = _id_column("work_order_assignments", "technician_id", work_order_id)
        team = _id_column("work_order_team", "user_profile_id", work_order_id)
        grants = _id_column("work_order_client_access", "project_manager_id", work_order_id)
    except (NotFound, TransportError):
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load work order") from e

    return _work_order_from_row(
        row,
        assigned_actor_ids=assigned,
        team_actor_ids=team,
        additional_contact_ids=grants,
    )


def save_work_order(work_order: WorkOrder) -> WorkOrder:
    """Persist status and reason. Last write wins."""
    updates = {
        "job_status": work_order.status.value,
        "job_status_reason": work_order.status_reason,
    }
    try:
        rows = (
            _client().table("work_orders")
            .update(updates)
            .eq("id", work_order.id)
            .execute()
        ).data
    except TransportError:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update job status") from e

    row = _first(rows)
    if not row:
        raise NotFound("Work order", work_order.id)

    stored = {k: row[k] for k in ("job_status", "job_status_reason") if k in row}
    return _work_order_from_row({**work_order.model_dump(by_alias=True), **stored})


# =====================================================
# Files
# =====================================================
def get_file(work_order_id: str, file_id: str) -> FileRecord:
    try:
        rows = (
            _client().table("work_order_files")
            .select(FILE_COLUMNS)
            .eq("id", file_id)
            .eq("work_order_id", work_order_id)
            .limit(1)
            .execute()
        ).data
    except TransportError:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load file") from e

    row = _first(rows)
    if not row:
        raise NotFound("File", file_id)
    return _file_from_row(row)


def list_files(work_order_id: str) -> List[FileRecord]:
    try:
        rows = (
            _client().table("work_order_files")
            .select(FILE_COLUMNS)
            .eq("work_order_id", work_order_id)
            .order("created_at", desc=True)
            .execute()
        ).data or []
    except TransportError:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to list files") from e

    return [_file_from_row(r) for r in rows]


def save_file_visibility(file: FileRecord) -> FileRecord:
    try:
        rows = (
            _client().table("work_order_files")
            .update({"is_client_visible": file.visible_to_client})
            .eq("id", file.id)
            .execute()
        ).data
    except TransportError:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update file visibility") from e

    if not rows:
        raise NotFound("File", file.id)
    return file


# =====================================================
# Contacts
# =====================================================
def get_contact(contact_id: str) -> Contact:
    try:
        rows = (
            _client().table("project_managers")
            .select(CONTACT_COLUMNS)
            .eq("id", contact_id)
            .limit(1)
            .execute()
        ).data
    except TransportError:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load contact") from e

    row = _first(rows)
    if not row:
        raise NotFound("Contact", contact_id)
    return Contact.model_validate(row)


def get_actor_contact(actor_id: str) -> Optional[Contact]:
    """The contact record linked to a portal login, if any."""
    try:
        rows = (
            _client().table("project_managers")
            .select(CONTACT_COLUMNS)
            .eq("user_profile_id", actor_id)
            .limit(1)
            .execute()
        ).data
    except TransportError:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load linked contact") from e

    row = _first(rows)
    return Contact.model_validate(row) if row else None


def list_client_contacts(client_id: str) -> List[Contact]:
    try:
        rows = (
            _client().table("project_managers")
            .select(CONTACT_COLUMNS)
            .eq("client_id", client_id)
            .order("name")
            .execute()
        ).data or []
    except TransportError:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to list contacts") from e

    return [Contact.model_validate(r) for r in rows]


def get_client_name(client_id: str) -> Optional[str]:
    try:
        rows = (
            _client().table("clients")
            .select("name")
            .eq("id", client_id)
            .limit(1)
            .execute()
        ).data
    except TransportError:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load client") from e

    row = _first(rows)
    return row.get("name") if row else None


def add_contact_grant(grant: ContactGrant) -> ContactGrant:
    try:
        rows = (
            _client().table("work_order_client_access")
            .insert({
                "work_order_id": grant.work_order_id,
                "project_manager_id": grant.contact_id,
                "added_by": grant.added_by,
            })
            .execute()
        ).data
    except TransportError:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to add client contact") from e

    row = _first(rows)
    return ContactGrant.model_validate(row) if row else grant


def remove_contact_grant(work_order_id: str, contact_id: str) -> None:
    """Hard delete. No audit trail is kept."""
    try:
        (
            _client().table("work_order_client_access")
            .delete()
            .eq("work_order_id", work_order_id)
            .eq("project_manager_id", contact_id)
            .execute()
        )
    except TransportError:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to remove client contact") from e


# =====================================================
# Tasks
# =====================================================
def get_task(work_order_id: str, task_id: str) -> Task:
    try:
        rows = (
            _client().table("work_order_tasks")
            .select("id, work_order_id, name")
            .eq("id", task_id)
            .eq("work_order_id", work_order_id)
            .limit(1)
            .execute()
        ).data
        row = _first(rows)
        if not row:
            raise NotFound("Task", task_id)

        items = (
            _client().table("task_checklists")
            .select("*")
            .eq("task_id", task_id)
            .order("sort_order")
            .execute()
        ).data or []
    except (NotFound, TransportError):
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load task") from e

    return Task.model_validate({**row, "checklist": items})


def get_checklist_item(work_order_id: str, item_id: str) -> ChecklistItem:
    try:
        rows = (
            _client().table("task_checklists")
            .select("*, task:work_order_tasks!inner(work_order_id)")
            .eq("id", item_id)
            .eq("task.work_order_id", work_order_id)
            .limit(1)
            .execute()
        ).data
    except TransportError:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load checklist item") from e

    row = _first(rows)
    if not row:
        raise NotFound("Checklist item", item_id)
    row.pop("task", None)
    return ChecklistItem.model_validate(row)


def save_checklist_item(item: ChecklistItem) -> ChecklistItem:
    updates = {
        "is_completed": item.is_completed,
        "completed_by_id": item.completed_by_id,
        "completed_at": item.completed_at.isoformat() if item.completed_at else None,
    }
    try:
        rows = (
            _client().table("task_checklists")
            .update(updates)
            .eq("id", item.id)
            .execute()
        ).data
    except TransportError:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to update checklist item") from e

    if not rows:
        raise NotFound("Checklist item", item.id)
    return item


# =====================================================
# Hub messages
# =====================================================
def list_hub_messages(work_order_id: str) -> List[HubMessage]:
    try:
        rows = (
            _client().table("work_order_client_chat")
            .select(
                "id, work_order_id, sender_id, message, file_references, "
                "sender_company_name, is_deleted, created_at, "
                "sender:user_profiles!work_order_client_chat_sender_id_fkey(display_name)"
            )
            .eq("work_order_id", work_order_id)
            .eq("is_deleted", False)
            .order("created_at")
            .execute()
        ).data or []
    except TransportError:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to load hub messages") from e

    return [_message_from_row(r) for r in rows]


def insert_hub_message(message: HubMessage) -> HubMessage:
    try:
        rows = (
            _client().table("work_order_client_chat")
            .insert({
                "work_order_id": message.work_order_id,
                "sender_id": message.sender_id,
                "message": message.message,
                "file_references": message.file_references,
                "sender_company_name": message.sender_company_name,
            })
            .execute()
        ).data
    except TransportError:
        raise
    except Exception as e:
        raise handle_supabase_error(e, "Failed to send hub message") from e

    row = _first(rows)
    if not row:
        return message
    return HubMessage.model_validate({
        **message.model_dump(),
        "id": row.get("id"),
        "created_at": row.get("created_at"),
    })
