"""
Backend client tests against the stub backend.
"""

from datetime import date

import httpx
import pytest

from frontend.app.core.exceptions import (
    ApiResponseError,
    InputValidationError,
    InvalidPayloadError,
    NetworkError,
    ResourceNotFoundError,
)
from frontend.app.core.observability import CORRELATION_HEADER
from frontend.app.models.package_enums import PackageStatus
from frontend.app.schemas.filters import PackageFilters, Pagination
from frontend.app.schemas.package import PackageUpdate
from frontend.app.services.api_client import DeliveryApiClient


@pytest.mark.asyncio
async def test_list_packages_sends_filters_and_page(api, backend):
    backend.add_package(status="PROBLEMA")
    backend.add_package(status="PENDIENTE")

    filters = PackageFilters(status=PackageStatus.PROBLEM, search_query="  ")
    packages, total = await api.list_packages(filters, Pagination(page=1, limit=10))

    assert total == 1
    assert packages[0].status == PackageStatus.PROBLEM
    method, path, params = backend.requests[-1]
    assert (method, path) == ("GET", "/api/packages")
    assert params == {"statusFilter": "PROBLEMA", "page": "1", "limit": "10"}


@pytest.mark.asyncio
async def test_list_packages_limit_zero_returns_everything(api, backend):
    for _ in range(30):
        backend.add_package()

    packages, total = await api.list_packages(PackageFilters(), Pagination(limit=0))

    assert total == 30
    assert len(packages) == 30


@pytest.mark.asyncio
async def test_invalid_date_range_is_never_sent(api, backend):
    filters = PackageFilters(start_date=date(2024, 5, 10), end_date=date(2024, 5, 1))

    with pytest.raises(InputValidationError):
        await api.list_packages(filters, Pagination())

    assert backend.requests == []


@pytest.mark.asyncio
async def test_status_change_uses_workflow_endpoint(api, backend):
    package = backend.add_package(status="PROBLEMA")

    updated = await api.update_package_status(package["id"], PackageStatus.RETURN_PENDING)

    assert updated.status == PackageStatus.RETURN_PENDING
    assert backend.requests[-1][:2] == ("POST", f"/api/packages/{package['id']}/mark-for-return")


@pytest.mark.asyncio
async def test_confirm_return_sends_receiver_details(api, backend):
    package = backend.add_package(status="PENDIENTE_DEVOLUCION")

    updated = await api.update_package_status(
        package["id"],
        PackageStatus.RETURNED,
        {"receiver_name": "Bodega Central", "receiver_id": "12.345.678-9"},
    )

    assert updated.status == PackageStatus.RETURNED
    assert backend.requests[-1][2] == {
        "receiverName": "Bodega Central",
        "receiverId": "12.345.678-9",
        "photosBase64": [],
    }


@pytest.mark.asyncio
async def test_status_change_without_required_metadata(api, backend):
    package = backend.add_package(status="EN_TRANSITO")

    with pytest.raises(InputValidationError):
        await api.update_package_status(package["id"], PackageStatus.DELIVERED, {"receiver_name": ""})

    assert backend.requests == []


@pytest.mark.asyncio
async def test_plain_status_change_is_a_put(api, backend):
    package = backend.add_package(status="EN_TRANSITO")

    updated = await api.update_package_status(package["id"], PackageStatus.DELAYED)

    assert updated.status == PackageStatus.DELAYED
    assert backend.requests[-1] == ("PUT", f"/api/packages/{package['id']}", {"status": "RETRASADO"})


@pytest.mark.asyncio
async def test_assign_and_unassign_driver(api, backend):
    package = backend.add_package()

    assigned = await api.assign_driver(package["id"], "drv-1", date(2024, 5, 12))
    assert assigned.driver_id == "drv-1"
    assert backend.requests[-1][2] == {"driverId": "drv-1", "newDeliveryDate": "2024-05-12"}

    cleared = await api.assign_driver(package["id"], None, date(2024, 5, 12))
    assert cleared.driver_id is None


@pytest.mark.asyncio
async def test_batch_assign_returns_backend_message(api, backend):
    ids = [backend.add_package()["id"] for _ in range(3)]

    message = await api.batch_assign_driver(ids, "drv-1", date(2024, 5, 12))

    assert message == "3 packages assigned"
    assert all(backend.packages[i]["driverId"] == "drv-1" for i in ids)

    with pytest.raises(InputValidationError):
        await api.batch_assign_driver([], "drv-1", date(2024, 5, 12))


@pytest.mark.asyncio
async def test_update_package_sends_only_changed_fields(api, backend):
    package = backend.add_package()

    updated = await api.update_package(package["id"], PackageUpdate(notes="Leave at reception"))

    assert updated.notes == "Leave at reception"
    assert backend.requests[-1][2] == {"notes": "Leave at reception"}


@pytest.mark.asyncio
async def test_delete_missing_package_is_not_found(api, backend):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await api.delete_package("PKG-unknown")

    assert exc_info.value.status_code == 404
    assert exc_info.value.error_code == "ERR_NOT_FOUND"
    assert exc_info.value.message == "Package not found"


@pytest.mark.asyncio
async def test_server_error_carries_backend_message(api, backend):
    backend.fail("GET", "/api/users", status_code=500, message="Database unavailable")

    with pytest.raises(ApiResponseError) as exc_info:
        await api.get_users()

    assert exc_info.value.error_code == "ERR_INTERNAL_SERVER"
    assert exc_info.value.message == "Database unavailable"
    assert exc_info.value.details == {"method": "GET", "path": "/api/users"}


@pytest.mark.asyncio
async def test_unexpected_payload_is_rejected(api, backend):
    backend.add_package(status="PERDIDO")

    with pytest.raises(InvalidPayloadError):
        await api.list_packages(PackageFilters(), Pagination())


@pytest.mark.asyncio
async def test_get_users(api):
    users = await api.get_users()

    assert [u.id for u in users] == ["drv-1", "drv-2", "cli-1"]
    assert not users[1].is_approved


@pytest.mark.asyncio
async def test_get_pickup_runs_rejects_inverted_range(api, backend):
    with pytest.raises(InputValidationError):
        await api.get_pickup_runs(date(2024, 5, 2), date(2024, 5, 1))

    backend.pickup_runs = [{
        "id": "run-1",
        "driverId": "drv-1",
        "driverName": "Pedro Soto",
        "date": "2024-05-10",
        "shift": "MANANA",
        "assignments": [],
    }]
    runs = await api.get_pickup_runs(date(2024, 5, 10), date(2024, 5, 10))

    assert runs[0].run_date == date(2024, 5, 10)
    assert backend.requests[-1][2] == {"startDate": "2024-05-10", "endDate": "2024-05-10"}


@pytest.mark.asyncio
async def test_requests_carry_token_and_correlation_id():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    async with DeliveryApiClient(base_url="http://test/api", token="secret", transport=httpx.MockTransport(handler)) as api:
        await api.get_users()

    assert seen[0].headers["Authorization"] == "Bearer secret"
    assert seen[0].headers[CORRELATION_HEADER]


@pytest.mark.asyncio
async def test_transport_failure_is_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with DeliveryApiClient(base_url="http://test/api", transport=httpx.MockTransport(handler)) as api:
        with pytest.raises(NetworkError) as exc_info:
            await api.delete_package("PKG-1")

    assert exc_info.value.error_code == "ERR_NETWORK"
    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_error_without_body_uses_status_line():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    async with DeliveryApiClient(base_url="http://test/api", transport=httpx.MockTransport(handler)) as api:
        with pytest.raises(ApiResponseError) as exc_info:
            await api.get_users()

    assert exc_info.value.message == "Error 503: Service Unavailable"
    assert exc_info.value.error_code == "ERR_UNKNOWN"


@pytest.mark.asyncio
async def test_non_json_success_body_is_invalid_payload():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>Bad gateway</html>", headers={"content-type": "text/html"})

    async with DeliveryApiClient(base_url="http://test/api", transport=httpx.MockTransport(handler)) as api:
        with pytest.raises(InvalidPayloadError) as exc_info:
            await api.get_users()

    assert exc_info.value.error_code == "ERR_PAYLOAD"
    assert exc_info.value.details["path"] == "/api/users"
    assert exc_info.value.details["content_type"] == "text/html"


@pytest.mark.asyncio
async def test_request_timers_are_released_on_any_failure():
    errors = [RuntimeError("transport bug"), None]

    def handler(request: httpx.Request) -> httpx.Response:
        error = errors.pop(0)
        if error is None:
            raise httpx.ConnectError("connection refused", request=request)
        raise error

    async with DeliveryApiClient(base_url="http://test/api", transport=httpx.MockTransport(handler)) as api:
        with pytest.raises(RuntimeError):
            await api.get_users()
        with pytest.raises(NetworkError):
            await api.get_users()

        assert api._request_logger._started == {}
