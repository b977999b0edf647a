"""
Shared pytest fixtures.

The portal API is replaced by FakePortal, injected through
app.dependency_overrides, so no network is needed for tests.
"""
import pytest
from fastapi.testclient import TestClient

from app.clients.portal_api import get_portal_client
from app.main import app
from tests.fakes import FakePortal


@pytest.fixture()
def portal():
    return FakePortal()


@pytest.fixture()
def client(portal):
    async def override_get_portal_client():
        yield portal

    app.dependency_overrides[get_portal_client] = override_get_portal_client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
