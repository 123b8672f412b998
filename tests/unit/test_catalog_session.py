"""Unit tests for CatalogSession wiring over a mocked HTTP authority."""

import json
import logging

import httpx
import pytest

from catalog_client.config import Settings
from catalog_client.domain.entities import BranchAspect
from catalog_client.infrastructure.dependencies import CatalogSession
from catalog_client.infrastructure.logging.log_config import setup_logging


# ── Helpers ──


class FakeAuthority:
    """Routes requests to canned envelopes and counts them."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.fail_reorder = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        if path == "/companies" and request.method == "GET":
            return self._ok({"companies": [{"id": 9, "ownerId": 77, "name": "Napoli"}]})
        if path == "/companies/9" and request.method == "DELETE":
            return self._ok({})
        if path == "/branches/1/location" and request.method == "POST":
            body = json.loads(request.content)
            return self._ok({"location": {"id": 5, "branchId": 1, **body}})
        if path == "/branches/company/9":
            return self._ok({"branches": [
                {"id": 1, "companyId": 9, "name": "Main", "sortOrder": 0},
                {"id": 2, "companyId": 9, "name": "North", "sortOrder": 1},
            ]})
        if path == "/categories/branch/1":
            return self._ok({"categories": [
                {"id": 11, "branchId": 1, "name": "Food", "sortOrder": 1},
                {"id": 12, "branchId": 1, "name": "Drinks", "sortOrder": 2},
            ]})
        if path == "/categories/reorder":
            if self.fail_reorder:
                return httpx.Response(500, json={"success": False, "error": "Reorder failed"})
            return self._ok({})
        if path == "/products/category/11":
            return self._ok({"products": [
                {"id": 21, "categoryId": 11, "name": "Pizza", "basePrice": "10.00", "discount": "20", "sortOrder": 1},
            ]})
        if path == "/categories/11" and request.method == "DELETE":
            return self._ok({})
        if path.startswith("/branches/") and path.endswith("/schedules"):
            branch_id = int(path.split("/")[2])
            return self._ok({"schedules": [
                {"id": branch_id * 10, "branchId": branch_id, "dayOfWeek": "friday"},
            ]})
        if path == "/companies/9/apply-schedules/1":
            return self._ok({})
        return httpx.Response(404, json={"success": False, "error": f"No route {path}"})

    @staticmethod
    def _ok(data: dict) -> httpx.Response:
        return httpx.Response(200, json={"success": True, "data": data})

    def count(self, path: str) -> int:
        return sum(1 for r in self.requests if r.url.path == f"/api{path}")


def _session(authority: FakeAuthority) -> CatalogSession:
    return CatalogSession(
        Settings(_env_file=None),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(authority.handler)),
        configure_logging=False,
    )


# ── Tests ──


@pytest.mark.asyncio
async def test_products_load_once_with_derived_prices():
    authority = FakeAuthority()
    session = _session(authority)

    await session.products.load(11)
    result = await session.products.load(11)

    assert authority.count("/products/category/11") == 1
    assert result.value[0].final_price == 8.0
    assert result.value[0].has_discount is True


@pytest.mark.asyncio
async def test_category_reorder_rolls_back_over_http():
    authority = FakeAuthority()
    authority.fail_reorder = True
    session = _session(authority)
    await session.categories.load(1)

    result = await session.category_reorder.reorder(1, 1, 0)

    assert not result.ok
    reorder_request = next(r for r in authority.requests if r.url.path == "/api/categories/reorder")
    assert json.loads(reorder_request.content) == {
        "updates": [{"id": 12, "sortOrder": 1}, {"id": 11, "sortOrder": 2}]
    }
    assert [c.id for c in session.categories.get_children(1)] == [11, 12]
    assert session.notifications.history[-1].message.startswith("The new categories order")


@pytest.mark.asyncio
async def test_deleting_a_category_drops_its_products():
    authority = FakeAuthority()
    session = _session(authority)
    await session.categories.load(1)
    await session.products.load(11)

    result = await session.categories.delete(11)

    assert result.ok
    assert not session.product_cache.has_loaded(11)
    assert [c.id for c in session.categories.get_children(1)] == [12]


@pytest.mark.asyncio
async def test_apply_schedules_reloads_loaded_sibling():
    authority = FakeAuthority()
    session = _session(authority)
    await session.schedules.load(2)

    result = await session.propagation.apply_to_siblings(9, 1, BranchAspect.SCHEDULES)

    assert result.ok
    assert result.value == [2]
    assert authority.count("/branches/2/schedules") == 2
    assert session.schedules.get_children(2)[0].sort_order == 4


@pytest.mark.asyncio
async def test_deleting_a_company_drops_everything_below_it():
    authority = FakeAuthority()
    session = _session(authority)
    await session.companies.load(77)
    await session.branches.load(9)
    await session.categories.load(1)
    await session.products.load(11)
    await session.schedules.load(2)

    result = await session.companies.delete(9)

    assert result.ok
    assert session.companies.get_children(77) == []
    assert not session.branch_cache.has_loaded(9)
    assert not session.category_cache.has_loaded(1)
    assert not session.product_cache.has_loaded(11)
    assert not session.schedule_cache.has_loaded(2)


@pytest.mark.asyncio
async def test_saving_a_location_updates_the_cached_branch():
    authority = FakeAuthority()
    session = _session(authority)
    await session.branches.load(9)

    result = await session.locations.save(
        1, {"address": "Via Roma 12", "city": "Rome", "state": "RM", "country": "IT"}
    )

    assert result.ok
    branch = next(b for b in session.branches.get_children(9) if b.id == 1)
    assert branch.location.city == "Rome"
    assert authority.count("/branches/1/location") == 1


@pytest.mark.asyncio
async def test_logout_clears_every_cache():
    authority = FakeAuthority()
    session = _session(authority)
    await session.branches.load(9)
    await session.categories.load(1)

    session.logout()

    assert all(cache.loaded_scopes() == [] for cache in session.caches)
    await session.aclose()


def test_setup_logging_applies_category_levels():
    setup_logging(Settings(_env_file=None, log_level_http="ERROR", log_level_cache="DEBUG"))
    assert logging.getLogger("httpx").level == logging.ERROR
    assert logging.getLogger("CollectionService").level == logging.DEBUG
