"""
Centralized Test Configuration.

HTTP tests drive the real DeliveryApiClient against an in-process FastAPI
stub of the delivery backend.
"""

import pytest
from httpx import ASGITransport

from frontend.app.services.api_client import DeliveryApiClient
from frontend.app.services.package_view import PackageListView
from frontend.tests.factories import user_payload
from frontend.tests.stub_backend import StubBackend, build_stub_app


@pytest.fixture
def backend():
    stub = StubBackend()
    stub.users = [
        user_payload("drv-1", "Pedro Soto", role="DRIVER"),
        user_payload("drv-2", "Luis Vera", role="DRIVER", status="PENDIENTE"),
        user_payload("cli-1", "Tienda Sur"),
    ]
    return stub


@pytest.fixture
async def api(backend):
    """Async backend client wired to the stub app."""
    transport = ASGITransport(app=build_stub_app(backend))
    async with DeliveryApiClient(base_url="http://test/api", token="test-token", transport=transport) as client:
        yield client


@pytest.fixture
async def view(api):
    package_view = PackageListView(api, page_size=25, refresh_seconds=60)
    yield package_view
    await package_view.stop_auto_refresh()
