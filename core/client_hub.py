# core/client_hub.py

"""
Client Hub access controller.

The Hub is the client-facing channel of a single work order: shared files,
the contact list and the chat. Entering the Hub is necessary but not
sufficient; every item surfaced inside it still goes through the
visibility policy.
"""

from typing import Iterable, Optional

from core.config import settings
from core.errors import Forbidden, PolicyError
from core.logging_config import logger
from core.permission_helpers import allows
from core.roles import Role, is_staff
from core.visibility import filter_for_client, visible_contacts
from models.actor import Actor
from models.contact import Contact
from models.enums import HubAccess
from models.file import FileRecord
from models.hub import HubMessage, HubPayload, HubSnapshot, MAX_MESSAGE_LENGTH
from models.work_order import WorkOrder

HUB_VIEW_PERMISSION = "client_hub:view"


def _is_linked_contact(actor: Actor, work_order: WorkOrder, contact: Optional[Contact]) -> bool:
    if contact is None or contact.user_profile_id != actor.id:
        return False
    if contact.client_id != work_order.client_id:
        return False
    return contact.id == work_order.pm_id or contact.id in work_order.additional_contact_ids


def hub_access(actor: Actor, work_order: WorkOrder, contact: Optional[Contact] = None) -> HubAccess:
    """
    Decide whether `actor` may enter the Hub of `work_order`.

    `contact` is the Contact record linked to the actor's login, if any.
    Evaluation order:
      1. active work order owner -> granted, whatever the role
      2. no client on the work order -> no_client
      3. deactivated actor -> denied
      4. staff role holding client_hub:view -> granted
      5. technician -> denied, even with a linked contact
      6. primary or additional contact of the client -> granted
    """
    if actor is not None and actor.is_active and actor.id == work_order.owner_id:
        return HubAccess.granted

    if work_order.client_id is None:
        return HubAccess.no_client

    if actor is None or not actor.is_active:
        return HubAccess.denied

    if is_staff(actor.role) and allows(actor, HUB_VIEW_PERMISSION):
        return HubAccess.granted

    if actor.role == Role.technician:
        logger.info(f"Technician {actor.id} denied Client Hub for work order {work_order.id}")
        return HubAccess.denied

    if _is_linked_contact(actor, work_order, contact):
        return HubAccess.granted

    return HubAccess.denied


def can_enter_hub(actor: Actor, work_order: WorkOrder, contact: Optional[Contact] = None) -> bool:
    return hub_access(actor, work_order, contact) == HubAccess.granted


# -----------------------------------------------------
# Payload filtering
# -----------------------------------------------------
def _visible_file_ids(files: Iterable[FileRecord]) -> set:
    return {f.id for f in files if f.visible_to_client}


def filter_hub_payload(
    actor: Actor,
    work_order: WorkOrder,
    snapshot: HubSnapshot,
    contact: Optional[Contact] = None,
) -> HubPayload:
    """
    Reduce raw Hub data to what `actor` may see. Anything short of
    `granted` yields an empty payload.
    """
    if not can_enter_hub(actor, work_order, contact):
        return HubPayload()

    own_files = [f for f in snapshot.files if f.work_order_id == work_order.id]
    visible_ids = _visible_file_ids(own_files)

    messages = []
    for message in snapshot.messages:
        if message.is_deleted or message.work_order_id != work_order.id:
            continue
        refs = [ref for ref in message.file_references if ref in visible_ids]
        if refs != message.file_references:
            message = message.model_copy(update={"file_references": refs})
        messages.append(message)

    return HubPayload(
        files=filter_for_client(own_files),
        contacts=visible_contacts(work_order, snapshot.contacts),
        messages=messages,
    )


# -----------------------------------------------------
# Writing to the channel
# -----------------------------------------------------
def build_hub_message(
    actor: Actor,
    work_order: WorkOrder,
    text: str,
    *,
    contact: Optional[Contact] = None,
    client_name: Optional[str] = None,
    files: Iterable[FileRecord] = (),
    file_references: Iterable[str] = (),
) -> HubMessage:
    """
    Validate and tag a message about to be posted to the Hub.

    Client contacts are labelled with their client's name, everybody
    else with the company name. Attached files must be client-visible
    files of the same work order.
    """
    if not can_enter_hub(actor, work_order, contact):
        raise Forbidden(HUB_VIEW_PERMISSION, "You do not have access to this Client Hub")

    body = (text or "").strip()
    if not body:
        raise PolicyError("Message cannot be empty")
    if len(body) > MAX_MESSAGE_LENGTH:
        raise PolicyError(f"Message exceeds {MAX_MESSAGE_LENGTH} characters")

    visible_ids = _visible_file_ids(f for f in files if f.work_order_id == work_order.id)
    refs = list(dict.fromkeys(file_references))
    hidden = [ref for ref in refs if ref not in visible_ids]
    if hidden:
        raise PolicyError(f"Files are not shared with the client: {', '.join(hidden)}")

    if _is_linked_contact(actor, work_order, contact) and not is_staff(actor.role):
        sender_name = actor.display_name or contact.name
        company = client_name
    else:
        sender_name = actor.display_name
        company = settings.COMPANY_NAME

    return HubMessage(
        work_order_id=work_order.id,
        sender_id=actor.id,
        sender_name=sender_name,
        sender_company_name=company,
        message=body,
        file_references=refs,
    )
