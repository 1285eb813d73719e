"""Test configuration and fixtures"""

import pytest
from httpx import ASGITransport, AsyncClient

from tablebook.api.deps import get_backend, get_notifier
from tablebook.errors import NotificationError
from tablebook.main import app
from tablebook.schemas.reservation import ReservationCreate
from tablebook.storage.memory import InMemoryBackend


class RecordingNotifier:
    """Stands in for CallFluentClient and records every call it is asked to place"""
    
    def __init__(self, auto_call_enabled: bool = True, fail: bool = False):
        self.auto_call_enabled = auto_call_enabled
        self.fail = fail
        self.confirmations = []
        self.reminders = []
    
    async def trigger_confirmation_call(self, reservation):
        self.confirmations.append(reservation)
        if self.fail:
            raise NotificationError("CallFluent API returned 503: unavailable")
        return {"status": "queued"}
    
    async def trigger_reminder_call(self, reservation):
        self.reminders.append(reservation)
        if self.fail:
            raise NotificationError("CallFluent API returned 503: unavailable")
        return {"status": "queued"}


@pytest.fixture
def backend():
    """Empty in-memory store"""
    return InMemoryBackend()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def sample_reservation_data():
    """Valid create request body, as the dashboard sends it"""
    return {
        "customerName": "John Doe",
        "phoneNumber": "+1 (555) 123-4567",
        "date": "2025-03-15",
        "time": "19:00:00",
        "partySize": 4,
        "source": "Manual",
        "status": "Pending",
        "notes": "Window seat preferred",
    }


@pytest.fixture
def create_sample_reservation(backend, sample_reservation_data):
    """Factory fixture storing a reservation directly in the backend"""
    async def _create(**overrides):
        data = {**sample_reservation_data, **overrides}
        return await backend.create_reservation(ReservationCreate(**data))
    return _create


@pytest.fixture
async def client(backend, notifier):
    """Create test client with overridden backend and notifier"""
    app.dependency_overrides[get_backend] = lambda: backend
    app.dependency_overrides[get_notifier] = lambda: notifier
    
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    
    app.dependency_overrides.clear()


@pytest.fixture
async def unconfigured_client(backend):
    """Client for an app without CallFluent credentials"""
    app.dependency_overrides[get_backend] = lambda: backend
    app.dependency_overrides[get_notifier] = lambda: None
    
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    
    app.dependency_overrides.clear()
