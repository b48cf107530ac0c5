# routers/client_hub.py

from typing import List
from fastapi import APIRouter, Depends

from dependencies.auth import get_current_actor
from core import store
from core.permission_helpers import requires_permission
from core.visibility import MANAGE_CONTACTS_PERMISSION, available_contacts
from models.actor import Actor
from models.contact import Contact, ContactGrantCreate
from models.hub import HubAccessRead, HubMessage, HubMessageCreate, HubPayload
from services import work_orders as service

router = APIRouter(
    prefix="/work-orders/{work_order_id}/hub",
    tags=["Client Hub"],
)


# -----------------------------------------------------
# GET /work-orders/{id}/hub/access
# Tri-state: the UI renders "no client assigned" and
# "access restricted" as two different empty states
# -----------------------------------------------------
@router.get("/access", response_model=HubAccessRead)
def get_hub_access(work_order_id: str, current_actor: Actor = Depends(get_current_actor)):
    work_order = store.get_work_order(work_order_id)
    return HubAccessRead(
        work_order_id=work_order.id,
        access=service.hub_access(current_actor, work_order),
    )


@router.get("", response_model=HubPayload)
def get_hub(work_order_id: str, current_actor: Actor = Depends(get_current_actor)):
    """
    Files, contacts and messages of the Hub, already filtered
    for the calling actor.
    """
    work_order = store.get_work_order(work_order_id)
    return service.load_hub_payload(current_actor, work_order)


@router.post("/messages", response_model=HubMessage, status_code=201)
def send_hub_message(
    work_order_id: str,
    payload: HubMessageCreate,
    current_actor: Actor = Depends(get_current_actor),
):
    work_order = store.get_work_order(work_order_id)
    return service.post_hub_message(
        current_actor, work_order, payload.message, payload.file_references
    )


# -----------------------------------------------------
# Additional contacts
# -----------------------------------------------------
@router.get("/contacts/available", response_model=List[Contact])
def list_available_contacts(
    work_order_id: str,
    current_actor: Actor = Depends(requires_permission(MANAGE_CONTACTS_PERMISSION)),
):
    work_order = store.get_work_order(work_order_id)
    if work_order.client_id is None:
        return []
    return available_contacts(work_order, store.list_client_contacts(work_order.client_id))


@router.post("/contacts", status_code=201)
def add_contact(
    work_order_id: str,
    payload: ContactGrantCreate,
    current_actor: Actor = Depends(get_current_actor),
):
    work_order = store.get_work_order(work_order_id)
    grant = service.add_hub_contact(current_actor, work_order, payload.contact_id)
    return {
        "id": grant.id,
        "work_order_id": grant.work_order_id,
        "contact_id": grant.contact_id,
        "added_by": grant.added_by,
    }


@router.delete("/contacts/{contact_id}", status_code=204)
def remove_contact(
    work_order_id: str,
    contact_id: str,
    current_actor: Actor = Depends(get_current_actor),
):
    """Hard delete of the grant. Past Hub history is untouched."""
    work_order = store.get_work_order(work_order_id)
    service.remove_hub_contact(current_actor, work_order, contact_id)
