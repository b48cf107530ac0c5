# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import pytest
from fastapi.testclient import TestClient
from typing import Generator
from unittest.mock import MagicMock, Mock

from main import create_app
from dependencies.auth import get_current_actor
from models.actor import Actor
from models.contact import Contact
from models.file import FileRecord
from models.work_order import WorkOrder


@pytest.fixture(scope="function")
def app():
    """Create a test FastAPI application instance."""
    return create_app()


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides = {}


@pytest.fixture
def login_as(app):
    """
    Pretend the bearer token resolved to `actor`.
    Usage: login_as(admin)
    """
    def _login(actor: Actor):
        app.dependency_overrides[get_current_actor] = lambda: actor
        return actor

    return _login


@pytest.fixture(autouse=True)
def reset_subscribers():
    """Event subscribers never leak between tests."""
    from core.notifications import clear_subscribers, drain
    clear_subscribers()
    yield
    drain(timeout=5)
    clear_subscribers()


# ------------------------------------------------------------
# Actors
# ------------------------------------------------------------
@pytest.fixture
def super_admin():
    return Actor(id="sa-1", role="super_admin", display_name="Root")


@pytest.fixture
def admin():
    return Actor(id="admin-1", role="admin", display_name="Ada Admin")


@pytest.fixture
def supervisor():
    return Actor(id="sup-1", role="supervisor", display_name="Sam Supervisor")


@pytest.fixture
def coordinator():
    return Actor(id="pc-1", role="project_coordinator", display_name="Pat Coordinator")


@pytest.fixture
def office_staff():
    return Actor(id="office-1", role="office_staff", display_name="Olive Office")


@pytest.fixture
def technician():
    return Actor(id="tech-1", role="technician", display_name="Theo Tech")


@pytest.fixture
def client_user():
    """Portal login of the primary contact."""
    return Actor(id="portal-1", role="client_contact", display_name="Carla Client")


@pytest.fixture
def extra_client_user():
    """Portal login of a contact added to the hub later."""
    return Actor(id="portal-2", role="client_contact", display_name="Xavier Extra")


# ------------------------------------------------------------
# Domain data
# ------------------------------------------------------------
@pytest.fixture
def primary_contact():
    return Contact(id="pm-1", client_id="client-1", name="Carla Client", user_profile_id="portal-1")


@pytest.fixture
def extra_contact():
    return Contact(id="pm-2", client_id="client-1", name="Xavier Extra", user_profile_id="portal-2")


@pytest.fixture
def spare_contact():
    return Contact(id="pm-3", client_id="client-1", name="Bea Bystander")


@pytest.fixture
def foreign_contact():
    return Contact(id="pm-9", client_id="client-2", name="Other Client PM", user_profile_id="portal-9")


@pytest.fixture
def work_order():
    return WorkOrder(
        id="wo-1",
        job_status="Active",
        owner_id="owner-1",
        client_id="client-1",
        pm_id="pm-1",
        assigned_actor_ids=["tech-1"],
        team_actor_ids=["team-1"],
        additional_contact_ids=["pm-2"],
    )


@pytest.fixture
def work_order_without_client():
    return WorkOrder(id="wo-2", job_status="Open", owner_id="owner-1")


@pytest.fixture
def files():
    return [
        FileRecord(
            id="f-shared",
            work_order_id="wo-1",
            is_client_visible=True,
            category_id="cat-1",
            category_name="Drawings",
            file_name="layout.pdf",
            file_url="https://files.example.com/layout.pdf",
            uploaded_by="admin-1",
        ),
        FileRecord(
            id="f-internal",
            work_order_id="wo-1",
            is_client_visible=False,
            file_name="cost-sheet.xlsx",
            uploaded_by="admin-1",
        ),
    ]


@pytest.fixture
def fake_supabase():
    """
    Build a mock Supabase client from {table: rows}.
    Every query builder method chains; execute() returns the table's rows.
    """
    def _build(rows_by_table: dict):
        def table(name):
            query = MagicMock()
            for method in ("select", "eq", "limit", "order", "update", "insert", "delete"):
                getattr(query, method).return_value = query
            query.execute.return_value = Mock(data=rows_by_table.get(name, []))
            return query

        client = Mock()
        client.table.side_effect = table
        return client

    return _build
