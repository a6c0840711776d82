"""
Delivery backend API client.

Every read and every mutation the frontend performs goes through this
client. Each call is a single request: failures are raised to the caller,
never retried.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from frontend.app.core.config import settings
from frontend.app.core.exceptions import (
    InputValidationError,
    InvalidPayloadError,
    NetworkError,
    error_from_response,
)
from frontend.app.core.observability import RequestLogger
from frontend.app.models.package_enums import PackageStatus
from frontend.app.schemas.filters import PackageFilters, Pagination
from frontend.app.schemas.package import (
    BatchDriverAssignment,
    DeliveryConfirmation,
    DriverAssignment,
    Package,
    PackageListResponse,
    PackageUpdate,
    ProblemReport,
)
from frontend.app.schemas.pickup import PickupRun
from frontend.app.schemas.user import UserResponse

logger = logging.getLogger(__name__)

# Target status -> (endpoint suffix, body schema)
STATUS_ENDPOINTS = {
    PackageStatus.RETURN_PENDING: ("mark-for-return", None),
    PackageStatus.PROBLEM: ("problem", ProblemReport),
    PackageStatus.DELIVERED: ("deliver", DeliveryConfirmation),
    PackageStatus.RETURNED: ("return", DeliveryConfirmation),
    PackageStatus.PICKED_UP: ("pickup", None),
}


def _validate(schema: Any, data: Any) -> Any:
    try:
        return TypeAdapter(schema).validate_python(data)
    except ValidationError as exc:
        raise InvalidPayloadError(details={"errors": exc.errors(include_url=False)}) from exc


def _body(model: BaseModel, partial: bool = False) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_unset=partial)


class DeliveryApiClient:
    """
    Async client for the delivery backend.

    Usage:
        async with DeliveryApiClient() as api:
            packages, total = await api.list_packages(PackageFilters(), Pagination())
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        base_url = base_url or f"{settings.api_base_url.rstrip('/')}{settings.api_prefix}"
        token = token if token is not None else settings.api_token

        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._request_logger = RequestLogger()
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout or settings.request_timeout_seconds,
            transport=transport,
            event_hooks=self._request_logger.event_hooks(),
        )

    async def __aenter__(self) -> "DeliveryApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send one request and decode the JSON answer.

        Returns:
            Decoded body, or None for an empty / 204 response

        Raises:
            NetworkError on transport failure
            ApiResponseError (or ResourceNotFoundError) on non-2xx status
            InvalidPayloadError if a success body is not JSON
        """
        request = self._client.build_request(method, endpoint, params=params, json=json)
        try:
            response = await self._client.send(request)
        except httpx.TransportError as exc:
            logger.error("Request %s %s failed: %s", method, request.url.path, exc)
            raise NetworkError(details={"method": method, "path": request.url.path}) from exc
        finally:
            # No-op once the response hook has logged the exchange
            self._request_logger.discard(request)

        if response.is_error:
            raise error_from_response(response)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise InvalidPayloadError(
                details={
                    "method": method,
                    "path": request.url.path,
                    "content_type": response.headers.get("content-type"),
                }
            ) from exc

    # Packages

    async def list_packages(self, filters: PackageFilters, pagination: Pagination) -> Tuple[List[Package], int]:
        """
        Fetch one page of packages matching the filters.

        Args:
            filters: Active filter bar values
            pagination: Page and page size (limit 0 fetches everything)

        Returns:
            (packages, total matching count)
        """
        filters.validate_range()
        params = {**filters.to_query_params(), **pagination.to_query_params()}
        data = await self._request("GET", "/packages", params=params)
        page = _validate(PackageListResponse, data)
        return page.packages, page.total

    async def update_package_status(
        self,
        package_id: str,
        new_status: PackageStatus,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Package:
        """
        Ask the backend to move a package to a new status.

        Statuses with a dedicated workflow (problem report, delivery or return
        confirmation, pickup, return request) use their own endpoint; metadata
        carries that workflow's fields. Anything else is a plain status edit.

        Raises:
            InputValidationError if metadata is missing required fields
        """
        endpoint, schema = STATUS_ENDPOINTS.get(new_status, (None, None))

        if endpoint is None:
            data = await self._request(
                "PUT", f"/packages/{package_id}", json={"status": new_status.value}
            )
            return _validate(Package, data)

        body: Dict[str, Any] = {}
        if schema is not None:
            try:
                body = _body(schema.model_validate(metadata or {}))
            except ValidationError as exc:
                raise InputValidationError(
                    f"Missing information to set status {new_status.value}",
                    details={"errors": exc.errors(include_url=False)}
                ) from exc

        logger.info("Changing package %s status to %s", package_id, new_status.value)
        data = await self._request("POST", f"/packages/{package_id}/{endpoint}", json=body)
        return _validate(Package, data)

    async def assign_driver(self, package_id: str, driver_id: Optional[str], delivery_date: date) -> Package:
        """Assign (or clear, with None) the driver of one package."""
        body = _body(DriverAssignment(driver_id=driver_id, new_delivery_date=delivery_date))
        data = await self._request("POST", f"/packages/{package_id}/assign-driver", json=body)
        return _validate(Package, data)

    async def batch_assign_driver(self, package_ids: List[str], driver_id: str, delivery_date: date) -> Optional[str]:
        """Assign one driver to several packages; returns the backend's message."""
        try:
            assignment = BatchDriverAssignment(
                package_ids=package_ids, driver_id=driver_id, new_delivery_date=delivery_date
            )
        except ValidationError as exc:
            raise InputValidationError("Select at least one package to assign") from exc
        data = await self._request("POST", "/packages/batch-assign-driver", json=_body(assignment))
        return data.get("message") if isinstance(data, dict) else None

    async def update_package(self, package_id: str, changes: PackageUpdate) -> Package:
        data = await self._request("PUT", f"/packages/{package_id}", json=_body(changes, partial=True))
        return _validate(Package, data)

    async def delete_package(self, package_id: str) -> None:
        await self._request("DELETE", f"/packages/{package_id}")

    # Users & pickups

    async def get_users(self) -> List[UserResponse]:
        data = await self._request("GET", "/users")
        return _validate(List[UserResponse], data)

    async def get_pickup_runs(self, start_date: date, end_date: date) -> List[PickupRun]:
        if start_date > end_date:
            raise InputValidationError("Start date must not be after end date")
        params = {"startDate": start_date.isoformat(), "endDate": end_date.isoformat()}
        data = await self._request("GET", "/pickups", params=params)
        return _validate(List[PickupRun], data)

