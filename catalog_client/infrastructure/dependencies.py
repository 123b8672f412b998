"""Session wiring — connects the HTTP infrastructure to the application layer.

A ``CatalogSession`` is the store object of one signed-in user: it owns
every cache and is cleared on logout. Nothing here is module-global, so two
sessions never share cached records.
"""

import logging
from typing import Any

import httpx

from catalog_client.application.interfaces import (
    BranchLocationGateway,
    CollectionGateway,
    SiblingPropagationGateway,
)
from catalog_client.application.services import (
    BRANCHES,
    CATEGORIES,
    COMPANIES,
    PRODUCTS,
    SCHEDULES,
    SOCIALS,
    USER_TAGS,
    BranchLocationService,
    CollectionService,
    NotificationCenter,
    ParentScopedCache,
    ReorderService,
    SiblingPropagationService,
)
from catalog_client.config import Settings, get_settings
from catalog_client.domain.entities import (
    Branch,
    BranchAspect,
    BranchSchedule,
    BranchSocial,
    Category,
    Company,
    Product,
    UserTag,
)
from catalog_client.infrastructure.http import (
    CatalogApiClient,
    HttpBranchLocationGateway,
    HttpSiblingPropagationGateway,
    build_collection_gateways,
)
from catalog_client.infrastructure.logging.log_config import setup_logging

logger = logging.getLogger(__name__)


class CatalogSession:
    """Composition root for one user session.

    Gateways can be swapped (tests pass in-memory fakes); by default they
    talk to ``settings.api_base_url`` through one shared ``httpx.AsyncClient``.
    Companies and user tags are scoped by the signed-in user's id.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        gateways: dict[str, CollectionGateway] | None = None,
        propagation_gateway: SiblingPropagationGateway | None = None,
        location_gateway: BranchLocationGateway | None = None,
        configure_logging: bool = True,
    ):
        self.settings = settings or get_settings()
        if configure_logging:
            setup_logging(self.settings)

        self._owns_http_client = http_client is None and gateways is None
        self._http_client = http_client
        if self._owns_http_client:
            self._http_client = httpx.AsyncClient(timeout=self.settings.request_timeout)
        self.api = CatalogApiClient(
            base_url=self.settings.api_base_url,
            timeout=self.settings.request_timeout,
            http_client=self._http_client,
        )
        if gateways is None:
            gateways = dict(build_collection_gateways(self.api))
        if propagation_gateway is None:
            propagation_gateway = HttpSiblingPropagationGateway(
                self.api, timeout=self.settings.propagation_timeout
            )
        if location_gateway is None:
            location_gateway = HttpBranchLocationGateway(self.api)

        self.notifications = NotificationCenter()

        self.company_cache: ParentScopedCache[Company] = ParentScopedCache(COMPANIES)
        self.branch_cache: ParentScopedCache[Branch] = ParentScopedCache(BRANCHES)
        self.category_cache: ParentScopedCache[Category] = ParentScopedCache(CATEGORIES)
        self.product_cache: ParentScopedCache[Product] = ParentScopedCache(PRODUCTS)
        self.schedule_cache: ParentScopedCache[BranchSchedule] = ParentScopedCache(SCHEDULES)
        self.social_cache: ParentScopedCache[BranchSocial] = ParentScopedCache(SOCIALS)
        self.user_tag_cache: ParentScopedCache[UserTag] = ParentScopedCache(USER_TAGS)

        # deleting a parent drops the scopes keyed by its id, all the way down
        self.companies = CollectionService(
            self.company_cache,
            gateways[COMPANIES.name],
            dependents=[self.branch_cache],
        )
        self.branches = CollectionService(
            self.branch_cache,
            gateways[BRANCHES.name],
            dependents=[self.category_cache, self.schedule_cache, self.social_cache],
        )
        self.categories = CollectionService(
            self.category_cache,
            gateways[CATEGORIES.name],
            dependents=[self.product_cache],
        )
        self.products = CollectionService(self.product_cache, gateways[PRODUCTS.name])
        self.schedules = CollectionService(self.schedule_cache, gateways[SCHEDULES.name])
        self.socials = CollectionService(self.social_cache, gateways[SOCIALS.name])
        self.user_tags = CollectionService(self.user_tag_cache, gateways[USER_TAGS.name])
        self.locations = BranchLocationService(self.branches, location_gateway)

        self.product_reorder = ReorderService(self.products, self.notifications)
        self.category_reorder = ReorderService(self.categories, self.notifications)

        self.propagation = SiblingPropagationService(
            self.branches,
            {
                BranchAspect.SCHEDULES: self.schedules,
                BranchAspect.SOCIALS: self.socials,
            },
            propagation_gateway,
            self.notifications,
        )

    @property
    def caches(self) -> list[ParentScopedCache[Any]]:
        return [
            self.company_cache,
            self.branch_cache,
            self.category_cache,
            self.product_cache,
            self.schedule_cache,
            self.social_cache,
            self.user_tag_cache,
        ]

    def clear(self) -> None:
        """Drop every cached scope; in-flight loads resolve into the void."""
        for cache in self.caches:
            cache.clear()
        logger.info("Catalog session caches cleared")

    def logout(self) -> None:
        self.clear()
        self.notifications.clear_history()

    async def aclose(self) -> None:
        """Clear the session and release network resources."""
        self.logout()
        await self.notifications.shutdown()
        if self._owns_http_client and self._http_client is not None:
            await self._http_client.aclose()

    async def __aenter__(self) -> "CatalogSession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
