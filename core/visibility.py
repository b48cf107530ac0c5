# core/visibility.py

from typing import Iterable, List

from core.errors import Forbidden, PolicyError
from core.logging_config import logger
from core.permission_helpers import allows
from models.actor import Actor
from models.contact import Contact
from models.file import ClientVisibleFile, FileRecord
from models.work_order import WorkOrder

FILES_MANAGE_PERMISSION = "jobs:files:manage"
MANAGE_CONTACTS_PERMISSION = "client_hub:manage_contacts"


# -----------------------------------------------------
# Files
# -----------------------------------------------------
def set_client_visibility(actor: Actor, file: FileRecord, make_visible: bool) -> FileRecord:
    """
    Return `file` with visible_to_client set to `make_visible`.
    Setting the value it already has returns the very same record.
    """
    if not allows(actor, FILES_MANAGE_PERMISSION):
        logger.warning(f"Actor {actor.id} ({actor.role}) denied visibility toggle on file {file.id}")
        raise Forbidden(FILES_MANAGE_PERMISSION)

    make_visible = bool(make_visible)
    if file.visible_to_client == make_visible:
        return file

    return file.model_copy(update={"visible_to_client": make_visible})


def project_for_client(file: FileRecord) -> ClientVisibleFile:
    return ClientVisibleFile(
        id=file.id,
        file_name=file.file_name,
        file_url=file.file_url,
        file_size=file.file_size,
        mime_type=file.mime_type,
        category_name=file.category_name,
        created_at=file.created_at,
    )


def filter_for_client(files: Iterable[FileRecord]) -> List[ClientVisibleFile]:
    """
    The only way client-facing code may read a file list:
    hidden files are dropped and the rest are projected.
    """
    return [project_for_client(f) for f in files if f.visible_to_client]


# -----------------------------------------------------
# Contacts
# -----------------------------------------------------
def is_contact_exposed(work_order: WorkOrder, contact: Contact) -> bool:
    """Primary contact, or an explicitly granted additional contact."""
    if contact is None or work_order.client_id is None:
        return False
    if contact.client_id != work_order.client_id:
        return False
    return contact.id == work_order.pm_id or contact.id in work_order.additional_contact_ids


def visible_contacts(work_order: WorkOrder, contacts: Iterable[Contact]) -> List[Contact]:
    """Exposed contacts, primary first."""
    exposed = [c for c in contacts if is_contact_exposed(work_order, c)]
    return sorted(exposed, key=lambda c: (c.id != work_order.pm_id, c.name.lower()))


def available_contacts(work_order: WorkOrder, contacts: Iterable[Contact]) -> List[Contact]:
    """Contacts of the work order's client that could still be added to the Hub."""
    if work_order.client_id is None:
        return []
    return [
        c for c in contacts
        if c.client_id == work_order.client_id and not is_contact_exposed(work_order, c)
    ]


def authorize_contact_grant(actor: Actor, work_order: WorkOrder, contact: Contact) -> None:
    """Raise unless `actor` may add `contact` as an additional Hub contact."""
    if not allows(actor, MANAGE_CONTACTS_PERMISSION):
        raise Forbidden(MANAGE_CONTACTS_PERMISSION)

    if work_order.client_id is None:
        raise PolicyError("Work order has no client assigned")
    if contact.client_id != work_order.client_id:
        raise PolicyError("Contact does not belong to this work order's client")
    if contact.id == work_order.pm_id:
        raise PolicyError("Contact is already the primary contact")
    if contact.id in work_order.additional_contact_ids:
        raise PolicyError("Contact already has access to this work order")


def authorize_contact_revoke(actor: Actor, work_order: WorkOrder, contact_id: str) -> None:
    """Raise unless `actor` may remove an additional contact's grant."""
    if not allows(actor, MANAGE_CONTACTS_PERMISSION):
        raise Forbidden(MANAGE_CONTACTS_PERMISSION)

    if contact_id == work_order.pm_id:
        raise PolicyError("The primary contact cannot be removed from the Hub")
