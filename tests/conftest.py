"""Shared fixtures: a fresh in-memory database and a scriptable Loops.so client."""

import asyncio
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from loops_panel.api.deps import install_services
from loops_panel.database import Base, SessionLocal, engine, init_db
from loops_panel.exceptions import ExternalApiError
from loops_panel.main import app
from loops_panel.models import LoopsAccount
from loops_panel.services.job_runner import JobContextRegistry, JobRunner
from loops_panel.services.job_store import JobStore


class FakeLoopsClient:
    """Stands in for LoopsClient.

    ``failures`` maps an email to the error its import raises, ``gates``
    maps an email to an asyncio.Event the import waits on, and
    ``on_call`` runs before every contact import.
    """

    def __init__(self):
        self.created: List[str] = []
        self.sent: List[dict] = []
        self.failures: Dict[str, Exception] = {}
        self.gates: Dict[str, asyncio.Event] = {}
        self.started: Dict[str, asyncio.Event] = {}
        self.on_call = None
        self.closed = False

    def gate(self, email: str) -> asyncio.Event:
        self.gates[email] = asyncio.Event()
        self.started[email] = asyncio.Event()
        return self.gates[email]

    async def create_contact(self, api_key: str, email: str):
        if self.on_call:
            self.on_call(email)
        if email in self.gates:
            self.started[email].set()
            await self.gates[email].wait()
        if email in self.failures:
            raise self.failures[email]
        self.created.append(email)
        return {"success": True, "id": f"contact-{len(self.created)}"}

    async def send_transactional(self, api_key: str, payload: dict):
        if payload["to"] in self.failures:
            raise self.failures[payload["to"]]
        self.sent.append(payload)
        return {"success": True}

    async def find_contact(self, api_key: str, email: str):
        return [{"email": email, "subscribed": True}]

    async def delete_contact(self, api_key: str, email: str):
        return {"success": True, "message": "Contact deleted."}

    async def test_api_key(self, api_key: str):
        return {"success": True, "teamName": "Test team"}

    async def close(self):
        self.closed = True


def upstream_error(email: str, message: str = "duplicate", status: Optional[int] = 400) -> ExternalApiError:
    return ExternalApiError(status, "/contacts/create", f"Loops.so API Error {status}: {message} ({email})")


@pytest.fixture(autouse=True)
def reset_database():
    """Every test starts from empty tables"""
    init_db()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def fake_client() -> FakeLoopsClient:
    return FakeLoopsClient()


@pytest.fixture
def store() -> JobStore:
    return JobStore(SessionLocal)


@pytest.fixture
def runner(store: JobStore, fake_client: FakeLoopsClient) -> JobRunner:
    return JobRunner(store, fake_client, JobContextRegistry(), SessionLocal)


@pytest.fixture
def account() -> LoopsAccount:
    with SessionLocal() as db:
        account = LoopsAccount(id="acct-1", name="Main", api_key="key-1234567", is_active=True)
        db.add(account)
        db.commit()
        db.refresh(account)
        return account


def use_fake_client(client: TestClient, fake_client: FakeLoopsClient) -> None:
    """Replace the LoopsClient built at startup, closing it first"""
    client.portal.call(app.state.loops_client.close)
    install_services(app, client=fake_client)


@pytest.fixture
def api(fake_client: FakeLoopsClient):
    """TestClient with the job services wired to the fake Loops client"""
    with TestClient(app) as client:
        use_fake_client(client, fake_client)
        yield client
