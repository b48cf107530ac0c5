# services/work_orders.py

"""
Operations exposed to the API layer.

Each one gates on the permission evaluator, runs the relevant policy,
persists through core.store and fans out a change event. No-op
changes are neither saved nor announced.
"""

from typing import Iterable, List, Optional

from core import store
from core.client_hub import build_hub_message, filter_hub_payload, hub_access as decide_hub_access
from core.errors import Forbidden, NoClientAssigned, NotFound
from core.lifecycle import transition
from core.logging_config import logger
from core.notifications import WorkOrderEvent, notify
from core.permission_helpers import allows, require_work_order_access
from core.progress import task_progress, toggle_checklist_item
from core.roles import is_staff
from core.visibility import (
    authorize_contact_grant,
    authorize_contact_revoke,
    filter_for_client,
    set_client_visibility,
)
from models.actor import Actor
from models.contact import Contact, ContactGrant
from models.enums import HubAccess, JobStatus, WorkOrderEventType
from models.file import ClientVisibleFile, FileRecord
from models.hub import HubMessage, HubPayload, HubSnapshot
from models.task import ChecklistItem
from models.work_order import WorkOrder

STATUS_CHANGE_PERMISSION = "work_orders:status:change"

__all__ = [
    "allows",
    "task_progress",
    "transition_status",
    "toggle_file_visibility",
    "hub_access",
    "load_hub_payload",
    "client_files",
    "add_hub_contact",
    "remove_hub_contact",
    "post_hub_message",
    "toggle_checklist",
]


def _announce(event_type: WorkOrderEventType, work_order_id: str, actor: Actor, **data):
    notify(work_order_id, WorkOrderEvent(
        type=event_type,
        work_order_id=work_order_id,
        actor_id=actor.id,
        data=data,
    ))


# -----------------------------------------------------
# Status
# -----------------------------------------------------
def transition_status(
    actor: Actor,
    work_order: WorkOrder,
    requested: JobStatus,
    reason: Optional[str] = None,
) -> WorkOrder:
    if not allows(actor, STATUS_CHANGE_PERMISSION):
        logger.warning(f"Actor {actor.id} ({actor.role}) denied status change on {work_order.id}")
        raise Forbidden(STATUS_CHANGE_PERMISSION)
    require_work_order_access(actor, work_order)

    updated = transition(work_order, requested, reason)
    if updated == work_order:
        return work_order

    saved = store.save_work_order(updated)
    logger.info(f"Work order {work_order.id}: {work_order.status} -> {saved.status} by {actor.id}")

    _announce(
        WorkOrderEventType.status_changed, work_order.id, actor,
        previous=work_order.status.value,
        status=saved.status.value,
        reason=saved.status_reason,
    )
    return saved


# -----------------------------------------------------
# File visibility
# -----------------------------------------------------
def toggle_file_visibility(actor: Actor, file: FileRecord, make_visible: bool) -> FileRecord:
    updated = set_client_visibility(actor, file, make_visible)
    if updated is file:
        return file

    saved = store.save_file_visibility(updated)
    logger.info(f"File {file.id} visible_to_client={saved.visible_to_client} by {actor.id}")

    _announce(
        WorkOrderEventType.file_visibility_changed, file.work_order_id, actor,
        file_id=file.id,
        visible_to_client=saved.visible_to_client,
    )
    return saved


# -----------------------------------------------------
# Client Hub
# -----------------------------------------------------
def linked_contact(actor: Actor) -> Optional[Contact]:
    """Staff never act through a contact record."""
    if is_staff(actor.role):
        return None
    return store.get_actor_contact(actor.id)


def _contact_for(actor: Actor, work_order: WorkOrder) -> Optional[Contact]:
    if work_order.client_id is None or actor.id == work_order.owner_id:
        return None
    return linked_contact(actor)


def hub_access(actor: Actor, work_order: WorkOrder) -> HubAccess:
    return decide_hub_access(actor, work_order, _contact_for(actor, work_order))


def _require_hub(actor: Actor, work_order: WorkOrder) -> Optional[Contact]:
    """Gate for reading or writing Hub content, which always needs a client."""
    contact = _contact_for(actor, work_order)
    access = decide_hub_access(actor, work_order, contact)
    if access == HubAccess.no_client or work_order.client_id is None:
        raise NoClientAssigned(work_order.id)
    if access == HubAccess.denied:
        raise Forbidden(message="The Client Hub is only accessible to work order owners, office staff, and authorized client contacts.")
    return contact


def load_hub_payload(actor: Actor, work_order: WorkOrder) -> HubPayload:
    contact = _require_hub(actor, work_order)

    snapshot = HubSnapshot(
        files=store.list_files(work_order.id),
        contacts=store.list_client_contacts(work_order.client_id),
        messages=store.list_hub_messages(work_order.id),
    )
    return filter_hub_payload(actor, work_order, snapshot, contact)


def client_files(actor: Actor, work_order: WorkOrder) -> List[ClientVisibleFile]:
    _require_hub(actor, work_order)
    return filter_for_client(store.list_files(work_order.id))


def post_hub_message(
    actor: Actor,
    work_order: WorkOrder,
    text: str,
    file_references: Iterable[str] = (),
) -> HubMessage:
    contact = _require_hub(actor, work_order)
    file_references = list(file_references)

    message = build_hub_message(
        actor, work_order, text,
        contact=contact,
        client_name=store.get_client_name(work_order.client_id),
        files=store.list_files(work_order.id) if file_references else (),
        file_references=file_references,
    )
    saved = store.insert_hub_message(message)

    _announce(
        WorkOrderEventType.hub_message_posted, work_order.id, actor,
        message_id=saved.id,
    )
    return saved


def add_hub_contact(actor: Actor, work_order: WorkOrder, contact_id: str) -> ContactGrant:
    contact = store.get_contact(contact_id)
    authorize_contact_grant(actor, work_order, contact)

    grant = store.add_contact_grant(ContactGrant(
        work_order_id=work_order.id,
        contact_id=contact.id,
        added_by=actor.id,
    ))
    logger.info(f"Contact {contact.id} added to Client Hub of {work_order.id} by {actor.id}")

    _announce(WorkOrderEventType.contact_added, work_order.id, actor, contact_id=contact.id)
    return grant


def remove_hub_contact(actor: Actor, work_order: WorkOrder, contact_id: str) -> None:
    authorize_contact_revoke(actor, work_order, contact_id)
    if contact_id not in work_order.additional_contact_ids:
        raise NotFound("Contact grant", contact_id)

    store.remove_contact_grant(work_order.id, contact_id)
    logger.info(f"Contact {contact_id} removed from Client Hub of {work_order.id} by {actor.id}")

    _announce(WorkOrderEventType.contact_removed, work_order.id, actor, contact_id=contact_id)


# -----------------------------------------------------
# Checklists
# -----------------------------------------------------
def toggle_checklist(
    actor: Actor,
    work_order: WorkOrder,
    item: ChecklistItem,
    is_completed: bool,
) -> ChecklistItem:
    require_work_order_access(actor, work_order)

    updated = toggle_checklist_item(actor, item, is_completed)
    if item.is_completed == updated.is_completed:
        return item

    saved = store.save_checklist_item(updated)

    _announce(
        WorkOrderEventType.checklist_toggled, work_order.id, actor,
        item_id=item.id,
        is_completed=saved.is_completed,
    )
    return saved
