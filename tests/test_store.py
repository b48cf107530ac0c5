# tests/test_store.py

"""
Tests for the Supabase adapter. The client is mocked; each table
returns canned rows.
"""

from unittest.mock import Mock, patch

import pytest

from core import store
from core.errors import NotFound, TransportError
from models.enums import JobStatus
from models.work_order import WorkOrder


def _work_order_row(status, reason):
    return {
        "id": "wo-1",
        "job_status": status,
        "job_status_reason": reason,
        "owner_id": "owner-1",
        "client_id": "client-1",
        "pm_id": "pm-1",
    }


@pytest.fixture
def load(fake_supabase):
    def _load(row, **extra_tables):
        tables = {"work_orders": [row] if row else [], **extra_tables}
        with patch("core.store.get_supabase_client", return_value=fake_supabase(tables)):
            return store.get_work_order("wo-1")

    return _load


# ------------------------------------------------------------
# get_work_order
# ------------------------------------------------------------
def test_get_work_order_with_id_sets(load):
    wo = load(
        _work_order_row("Active", None),
        work_order_assignments=[{"technician_id": "tech-1"}],
        work_order_team=[{"user_profile_id": "team-1"}],
        work_order_client_access=[{"project_manager_id": "pm-2"}],
    )

    assert wo.status == JobStatus.active
    assert wo.assigned_actor_ids == frozenset({"tech-1"})
    assert wo.team_actor_ids == frozenset({"team-1"})
    assert wo.additional_contact_ids == frozenset({"pm-2"})


def test_null_status_reads_as_open(load):
    wo = load(_work_order_row(None, None))

    assert wo.status == JobStatus.open
    assert wo.status_reason is None


def test_stale_reason_dropped_on_status_without_one(load):
    wo = load(_work_order_row("Active", "parts delay"))

    assert wo.status == JobStatus.active
    assert wo.status_reason is None


def test_on_hold_row_keeps_its_reason(load):
    wo = load(_work_order_row("On Hold", "parts delay"))
    assert wo.status_reason == "parts delay"


@pytest.mark.parametrize("reason", [None, "", "   "])
def test_on_hold_row_without_reason_is_corrupt(load, reason):
    with pytest.raises(TransportError) as exc:
        load(_work_order_row("On Hold", reason))

    assert exc.value.operation == "Corrupt work order row"


def test_unknown_status_is_corrupt(load):
    with pytest.raises(TransportError):
        load(_work_order_row("Archived", None))


def test_missing_work_order(load):
    with pytest.raises(NotFound):
        load(None)


def test_not_configured():
    with patch("core.store.get_supabase_client", return_value=None):
        with pytest.raises(TransportError):
            store.get_work_order("wo-1")


def test_query_failure_becomes_transport_error():
    client = Mock()
    client.table.side_effect = RuntimeError("connection reset")

    with patch("core.store.get_supabase_client", return_value=client):
        with pytest.raises(TransportError) as exc:
            store.get_work_order("wo-1")

    assert "connection reset" in exc.value.detail


# ------------------------------------------------------------
# save_work_order
# ------------------------------------------------------------
def test_save_work_order_returns_stored_state(fake_supabase):
    wo = WorkOrder(id="wo-1", owner_id="owner-1", job_status="Cancelled",
                   job_status_reason="duplicate", assigned_actor_ids=["tech-1"])
    tables = {"work_orders": [{"id": "wo-1", "job_status": "Cancelled", "job_status_reason": "duplicate"}]}

    with patch("core.store.get_supabase_client", return_value=fake_supabase(tables)):
        saved = store.save_work_order(wo)

    assert saved == wo


def test_save_missing_work_order(fake_supabase):
    wo = WorkOrder(id="wo-x", owner_id="owner-1")
    with patch("core.store.get_supabase_client", return_value=fake_supabase({})):
        with pytest.raises(NotFound):
            store.save_work_order(wo)
