"""Unit tests for the CatalogApiClient and the HTTP collection gateways."""

import json

import httpx
import pytest

from catalog_client.application.services import (
    COMPANIES,
    PRODUCTS,
    SCHEDULES,
    USER_TAGS,
    CollectionService,
    ParentScopedCache,
)
from catalog_client.domain.entities import BranchAspect, OrderUpdate
from catalog_client.domain.exceptions import (
    CatalogApiError,
    EntityNotFoundError,
    NetworkError,
    UnsupportedOperationError,
)
from catalog_client.infrastructure.http import (
    CatalogApiClient,
    HttpBranchLocationGateway,
    HttpCollectionGateway,
    HttpSiblingPropagationGateway,
)
from catalog_client.infrastructure.http.collection_gateway import (
    COMPANY_ENDPOINTS,
    PRODUCT_ENDPOINTS,
    SCHEDULE_ENDPOINTS,
    USER_TAG_ENDPOINTS,
)


# ── Helpers ──


def _envelope(data: dict | None = None, success: bool = True, error: str | None = None) -> dict:
    body: dict = {"success": success}
    if data is not None:
        body["data"] = data
    if error is not None:
        body["error"] = error
    return body


def _recording_transport(
    response_data: dict,
    status_code: int = 200,
) -> tuple[httpx.MockTransport, list[httpx.Request]]:
    """Mock transport that returns a fixed response and records requests."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status_code, json=response_data)

    return httpx.MockTransport(handler), requests


def _client(transport: httpx.MockTransport) -> CatalogApiClient:
    return CatalogApiClient(
        base_url="http://catalog.test/api/",
        http_client=httpx.AsyncClient(transport=transport),
    )


# ── API client ──


@pytest.mark.asyncio
async def test_request_unwraps_envelope():
    transport, requests = _recording_transport(_envelope({"products": []}))
    client = _client(transport)

    data = await client.get("/products/category/3")

    assert data == {"products": []}
    assert str(requests[0].url) == "http://catalog.test/api/products/category/3"


@pytest.mark.asyncio
async def test_success_false_raises_with_envelope_error():
    transport, _ = _recording_transport(_envelope(success=False, error="Category not found"))
    client = _client(transport)

    with pytest.raises(CatalogApiError) as exc_info:
        await client.get("/categories/branch/1")

    assert exc_info.value.status_code == 200
    assert exc_info.value.message == "Category not found"


@pytest.mark.asyncio
async def test_non_2xx_raises_with_status():
    transport, _ = _recording_transport(_envelope(success=False, error="Forbidden"), status_code=403)
    client = _client(transport)

    with pytest.raises(CatalogApiError) as exc_info:
        await client.delete("/products/1")

    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "Forbidden"


@pytest.mark.asyncio
async def test_non_json_error_body_uses_text():
    transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway"))
    client = _client(transport)

    with pytest.raises(CatalogApiError) as exc_info:
        await client.get("/branches/company/1")

    assert exc_info.value.status_code == 502
    assert "Bad Gateway" in exc_info.value.message


@pytest.mark.asyncio
async def test_transport_error_becomes_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(httpx.MockTransport(handler))

    with pytest.raises(NetworkError) as exc_info:
        await client.get("/products/category/1")

    assert exc_info.value.status_code == 0


@pytest.mark.asyncio
async def test_timeout_becomes_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    client = _client(httpx.MockTransport(handler))

    with pytest.raises(NetworkError) as exc_info:
        await client.get("/products/category/1")

    assert "timed out" in exc_info.value.message


def _corrupt_gzip_transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"content-encoding": "gzip"}, content=b"not gzip at all")

    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_undecodable_body_becomes_network_error():
    client = _client(_corrupt_gzip_transport())

    with pytest.raises(NetworkError) as exc_info:
        await client.get("/products/category/1")

    assert exc_info.value.status_code == 0


@pytest.mark.asyncio
async def test_undecodable_body_fails_the_load_instead_of_raising():
    gateway = HttpCollectionGateway(PRODUCTS, PRODUCT_ENDPOINTS, _client(_corrupt_gzip_transport()))
    service = CollectionService(ParentScopedCache(PRODUCTS), gateway)

    result = await service.load(5)

    assert not result.ok
    assert not service.cache.has_loaded(5)
    assert service.last_error(5) is not None


# ── Collection gateway ──


@pytest.mark.asyncio
async def test_gateway_lists_and_validates_records():
    transport, requests = _recording_transport(_envelope({"products": [{
        "id": 1,
        "categoryId": 3,
        "name": "Pizza",
        "basePrice": "12.50",
        "images": '["a.png"]',
        "hasStockControl": True,
        "currentStock": 2,
        "sortOrder": 1,
    }]}))
    gateway = HttpCollectionGateway(PRODUCTS, PRODUCT_ENDPOINTS, _client(transport))

    records = await gateway.list_children(3)

    assert requests[0].method == "GET"
    assert requests[0].url.path == "/api/products/category/3"
    assert records[0]["category_id"] == 3
    assert records[0]["has_stock_control"] is True
    assert str(records[0]["base_price"]) == "12.50"


@pytest.mark.asyncio
async def test_gateway_create_adds_parent_field():
    transport, requests = _recording_transport(_envelope({"product": {
        "id": 9, "categoryId": 3, "name": "New", "basePrice": "1", "sortOrder": 4,
    }}))
    gateway = HttpCollectionGateway(PRODUCTS, PRODUCT_ENDPOINTS, _client(transport))

    record = await gateway.create_child(3, {"name": "New", "basePrice": "1"})

    assert json.loads(requests[0].content) == {"name": "New", "basePrice": "1", "categoryId": 3}
    assert record["id"] == 9


@pytest.mark.asyncio
async def test_gateway_reorder_sends_updates_batch():
    transport, requests = _recording_transport(_envelope({}))
    gateway = HttpCollectionGateway(PRODUCTS, PRODUCT_ENDPOINTS, _client(transport))

    await gateway.reorder(3, [OrderUpdate(2, 1), OrderUpdate(1, 2)])

    assert requests[0].method == "PATCH"
    assert requests[0].url.path == "/api/products/reorder"
    assert json.loads(requests[0].content) == {
        "updates": [{"id": 2, "sortOrder": 1}, {"id": 1, "sortOrder": 2}]
    }


@pytest.mark.asyncio
async def test_schedule_gateway_uses_nested_routes():
    transport, requests = _recording_transport(_envelope({"schedules": [
        {"id": 1, "branchId": 4, "dayOfWeek": "monday", "openTime": "09:00", "closeTime": "18:00"},
    ]}))
    gateway = HttpCollectionGateway(SCHEDULES, SCHEDULE_ENDPOINTS, _client(transport))

    records = await gateway.replace_children(4, [{"dayOfWeek": "monday", "openTime": "09:00"}])

    assert requests[0].method == "PUT"
    assert requests[0].url.path == "/api/branches/4/schedules/batch"
    assert json.loads(requests[0].content) == {"schedules": [{"dayOfWeek": "monday", "openTime": "09:00"}]}
    assert records[0]["sort_order"] is None


@pytest.mark.asyncio
async def test_nested_route_without_parent_raises_not_found():
    transport, requests = _recording_transport(_envelope({}))
    gateway = HttpCollectionGateway(SCHEDULES, SCHEDULE_ENDPOINTS, _client(transport))

    with pytest.raises(EntityNotFoundError):
        await gateway.delete_child(5)

    assert requests == []


@pytest.mark.asyncio
async def test_propagation_gateway_posts_to_apply_route():
    transport, requests = _recording_transport(_envelope({}))
    gateway = HttpSiblingPropagationGateway(_client(transport), timeout=30.0)

    await gateway.apply_to_siblings(7, 2, BranchAspect.SOCIALS)

    assert requests[0].method == "POST"
    assert requests[0].url.path == "/api/companies/7/apply-socials/2"


@pytest.mark.asyncio
async def test_company_gateway_lists_without_parent_in_route():
    transport, requests = _recording_transport(_envelope({"companies": [
        {"id": 4, "ownerId": 77, "name": "Napoli", "logoUrl": None},
    ]}))
    gateway = HttpCollectionGateway(COMPANIES, COMPANY_ENDPOINTS, _client(transport))

    records = await gateway.list_children(77)

    assert requests[0].url.path == "/api/companies"
    assert records[0]["owner_id"] == 77


@pytest.mark.asyncio
async def test_user_tags_cannot_be_updated():
    transport, requests = _recording_transport(_envelope({}))
    gateway = HttpCollectionGateway(USER_TAGS, USER_TAG_ENDPOINTS, _client(transport))

    with pytest.raises(UnsupportedOperationError):
        await gateway.update_child(3, {"tagConfig": "{}"})

    assert requests == []


@pytest.mark.asyncio
async def test_location_gateway_posts_and_validates():
    transport, requests = _recording_transport(_envelope({"location": {
        "id": 1, "branchId": 4, "address": "Via Roma 12", "city": "Rome", "state": "RM",
        "country": "IT", "postalCode": "00100",
    }}))
    gateway = HttpBranchLocationGateway(_client(transport))

    location = await gateway.save_location(4, {"address": "Via Roma 12"})

    assert requests[0].method == "POST"
    assert requests[0].url.path == "/api/branches/4/location"
    assert location["postal_code"] == "00100"


@pytest.mark.asyncio
async def test_location_gateway_rejects_missing_location():
    transport, _ = _recording_transport(_envelope({}))
    gateway = HttpBranchLocationGateway(_client(transport))

    with pytest.raises(CatalogApiError):
        await gateway.save_location(4, {"address": "Via Roma 12"})
