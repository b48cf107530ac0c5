# tests/test_client_hub.py

"""
Tests for the Client Hub access controller and payload filtering.
"""

import pytest

from core.client_hub import build_hub_message, can_enter_hub, filter_hub_payload, hub_access
from core.config import settings
from core.errors import Forbidden, PolicyError
from models.actor import Actor
from models.enums import HubAccess
from models.hub import HubMessage, HubSnapshot, MAX_MESSAGE_LENGTH


# ------------------------------------------------------------
# Tri-state access
# ------------------------------------------------------------
def test_unassigned_technician_is_denied(work_order):
    outsider = Actor(id="tech-9", role="technician")
    assert hub_access(outsider, work_order) == HubAccess.denied


def test_technician_on_work_order_without_client(technician, work_order_without_client):
    assert hub_access(technician, work_order_without_client) == HubAccess.no_client


def test_assigned_technician_is_still_denied(technician, work_order):
    assert hub_access(technician, work_order) == HubAccess.denied


def test_technician_linked_to_contact_is_denied(work_order, primary_contact):
    tech = Actor(id="portal-1", role="technician")
    assert hub_access(tech, work_order, primary_contact) == HubAccess.denied


@pytest.mark.parametrize("role", ["technician", "client_contact", "unknown", "office_staff"])
def test_owner_is_granted_regardless_of_role(work_order, work_order_without_client, role):
    owner = Actor(id="owner-1", role=role)
    assert hub_access(owner, work_order) == HubAccess.granted
    assert hub_access(owner, work_order_without_client) == HubAccess.granted


def test_inactive_owner_is_denied(work_order):
    owner = Actor(id="owner-1", role="admin", is_active=False)
    assert hub_access(owner, work_order) == HubAccess.denied


@pytest.mark.parametrize("fixture", ["super_admin", "admin", "supervisor", "coordinator", "office_staff"])
def test_office_staff_roles_are_granted(request, work_order, fixture):
    actor = request.getfixturevalue(fixture)
    assert hub_access(actor, work_order) == HubAccess.granted


def test_no_client_for_staff(admin, work_order_without_client):
    assert hub_access(admin, work_order_without_client) == HubAccess.no_client


def test_primary_contact_is_granted(client_user, work_order, primary_contact):
    assert hub_access(client_user, work_order, primary_contact) == HubAccess.granted


def test_additional_contact_is_granted(extra_client_user, work_order, extra_contact):
    assert hub_access(extra_client_user, work_order, extra_contact) == HubAccess.granted


def test_ungranted_contact_is_denied(work_order, spare_contact):
    actor = Actor(id="portal-3", role="client_contact")
    linked = spare_contact.model_copy(update={"user_profile_id": "portal-3"})
    assert hub_access(actor, work_order, linked) == HubAccess.denied


def test_contact_of_another_client_is_denied(work_order, foreign_contact):
    actor = Actor(id="portal-9", role="client_contact")
    foreign = foreign_contact.model_copy(update={"id": "pm-2"})
    assert hub_access(actor, work_order, foreign) == HubAccess.denied


def test_contact_record_must_belong_to_actor(extra_client_user, work_order, primary_contact):
    assert hub_access(extra_client_user, work_order, primary_contact) == HubAccess.denied


def test_client_contact_without_record_is_denied(client_user, work_order):
    assert hub_access(client_user, work_order) == HubAccess.denied


def test_inactive_contact_is_denied(work_order, primary_contact):
    actor = Actor(id="portal-1", role="client_contact", is_active=False)
    assert hub_access(actor, work_order, primary_contact) == HubAccess.denied


def test_can_enter_hub(admin, technician, work_order):
    assert can_enter_hub(admin, work_order)
    assert not can_enter_hub(technician, work_order)


# ------------------------------------------------------------
# Payload filtering
# ------------------------------------------------------------
@pytest.fixture
def snapshot(files, primary_contact, extra_contact, spare_contact):
    return HubSnapshot(
        files=files,
        contacts=[spare_contact, extra_contact, primary_contact],
        messages=[
            HubMessage(id="m-1", work_order_id="wo-1", sender_id="admin-1", message="Layout attached",
                       file_references=["f-shared", "f-internal"]),
            HubMessage(id="m-2", work_order_id="wo-1", sender_id="portal-1", message="deleted", is_deleted=True),
            HubMessage(id="m-3", work_order_id="wo-other", sender_id="admin-1", message="wrong order"),
        ],
    )


def test_payload_for_client_contact(client_user, work_order, primary_contact, snapshot):
    payload = filter_hub_payload(client_user, work_order, snapshot, primary_contact)

    assert [f.id for f in payload.files] == ["f-shared"]
    assert [c.id for c in payload.contacts] == ["pm-1", "pm-2"]
    assert [m.id for m in payload.messages] == ["m-1"]
    assert payload.messages[0].file_references == ["f-shared"]


def test_payload_for_staff_is_still_filtered(admin, work_order, snapshot):
    payload = filter_hub_payload(admin, work_order, snapshot)
    assert [f.id for f in payload.files] == ["f-shared"]


def test_payload_empty_when_denied(technician, work_order, snapshot):
    payload = filter_hub_payload(technician, work_order, snapshot)

    assert payload.files == []
    assert payload.contacts == []
    assert payload.messages == []


def test_payload_does_not_mutate_snapshot(admin, work_order, snapshot):
    filter_hub_payload(admin, work_order, snapshot)
    assert snapshot.messages[0].file_references == ["f-shared", "f-internal"]


# ------------------------------------------------------------
# Posting messages
# ------------------------------------------------------------
def test_staff_message_tagged_with_company(admin, work_order, files):
    message = build_hub_message(admin, work_order, "  On our way  ", files=files, file_references=["f-shared"])

    assert message.message == "On our way"
    assert message.sender_company_name == settings.COMPANY_NAME
    assert message.sender_name == "Ada Admin"
    assert message.file_references == ["f-shared"]


def test_contact_message_tagged_with_client_name(client_user, work_order, primary_contact):
    message = build_hub_message(
        client_user, work_order, "When will you arrive?",
        contact=primary_contact, client_name="Acme Retail",
    )
    assert message.sender_company_name == "Acme Retail"
    assert message.sender_id == "portal-1"


def test_message_requires_hub_access(technician, work_order):
    with pytest.raises(Forbidden):
        build_hub_message(technician, work_order, "hello")


@pytest.mark.parametrize("text", ["", "   ", None, "x" * (MAX_MESSAGE_LENGTH + 1)])
def test_message_length_bounds(admin, work_order, text):
    with pytest.raises(PolicyError):
        build_hub_message(admin, work_order, text)


def test_message_at_max_length(admin, work_order):
    message = build_hub_message(admin, work_order, "x" * MAX_MESSAGE_LENGTH)
    assert len(message.message) == MAX_MESSAGE_LENGTH


def test_message_cannot_reference_hidden_file(admin, work_order, files):
    with pytest.raises(PolicyError):
        build_hub_message(admin, work_order, "see sheet", files=files, file_references=["f-internal"])
