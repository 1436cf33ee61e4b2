"""Shared test fixtures for Membership Portal tests"""

import os
from typing import AsyncGenerator
from unittest.mock import MagicMock, patch

import pytest
import pytest_asyncio

# Set test environment before importing app
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_PATH"] = ":memory:"
os.environ["SEED_DEFAULTS"] = "true"
os.environ["MOCK_LATENCY_MS"] = "0"
os.environ["API_MODE"] = "mock"
for key in ("SMTP_HOST", "SMTP_USERNAME", "SMTP_PASSWORD", "EMAIL_FROM"):
    os.environ.pop(key, None)

from tests.factories import ADMIN_EMAIL, ADMIN_PASSWORD, MEMBER_PASSWORD  # noqa: E402


# =============================================================================
# Record Store
# =============================================================================

@pytest.fixture(autouse=True)
def store():
    """Fresh in-memory record store with factory defaults for every test.

    The service singletons share this instance, so the API and the facade see
    the same data.
    """
    from membership_portal.services.database_service import db_service

    db_service.open(":memory:")
    yield db_service
    db_service.close()


@pytest.fixture
def empty_store():
    """Unseeded in-memory store"""
    from membership_portal.services.database_service import DatabaseService

    db = DatabaseService(":memory:", seed_defaults=False)
    yield db
    db.close()


# =============================================================================
# Mock Email Service
# =============================================================================

@pytest.fixture(autouse=True)
def mock_email():
    """Mock email service (unconfigured SMTP, every send reported as delivered)"""
    from membership_portal.services.membership_service import membership_service

    mock = MagicMock()
    mock.configured = False
    mock.send_welcome.return_value = {"sent": True}
    mock.send_reset_code.return_value = {"sent": True}
    mock.send_expiry_reminder.return_value = {"sent": True}

    with patch.object(membership_service, "_email", mock):
        yield mock


# =============================================================================
# Services
# =============================================================================

@pytest.fixture
def membership(store, mock_email):
    from membership_portal.services.membership_service import membership_service
    return membership_service


@pytest.fixture
def payments(store):
    from membership_portal.services.payment_service import payment_service
    return payment_service


@pytest.fixture
def messages(store):
    from membership_portal.services.message_service import message_service
    return message_service


@pytest.fixture
def sessions(store):
    from membership_portal.services.session_service import session_service
    return session_service


# =============================================================================
# Application and Client Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def app():
    """Get the FastAPI application"""
    from membership_portal.main import app as fastapi_app
    return fastapi_app


@pytest_asyncio.fixture
async def test_client(app) -> AsyncGenerator:
    """Create async HTTP client for testing"""
    from httpx import AsyncClient, ASGITransport

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def local_api(store, membership):
    """Mock-mode facade over the shared store"""
    from membership_portal.client import LocalPortalApi

    api = LocalPortalApi(store, membership=membership)
    yield api
    await api.aclose()


# =============================================================================
# Seeded accounts
# =============================================================================

@pytest.fixture
def admin_credentials() -> dict:
    return {"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}


@pytest.fixture
def member_credentials() -> dict:
    """Active member (user-1) whose membership runs out in 15 days"""
    return {"email": "chinedu@ecolife.com", "password": MEMBER_PASSWORD}


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
