"""Per-collection parameters of the generic cache engine."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from catalog_client.application.schemas import (
    BranchRecord,
    CategoryRecord,
    CompanyRecord,
    ProductRecord,
    ScheduleRecord,
    SocialRecord,
    UserTagRecord,
)
from catalog_client.application.services import derived_values as dv
from catalog_client.domain.entities import (
    Branch,
    BranchSchedule,
    BranchSocial,
    Category,
    Company,
    Product,
    UserTag,
)

D = TypeVar("D")


@dataclass(frozen=True)
class CollectionDefinition(Generic[D]):
    """Everything that differs between the collections of the engine.

    ``pipeline_fields`` are the source fields that feed the derived value
    pipeline: an update touching any of them forces a full re-derive
    instead of a shallow patch. ``derived_fields`` are computed by the
    pipeline and never accepted from a partial update. ``order_base`` is
    the first ``sortOrder`` assigned by a reorder (0- or 1-based, fixed
    per collection).
    """

    name: str
    entity_name: str
    record_schema: type[BaseModel]
    derive: Callable[[Mapping[str, Any]], D]
    to_source: Callable[[D], dict[str, Any]]
    pipeline_fields: frozenset[str] = frozenset()
    derived_fields: frozenset[str] = frozenset()
    order_base: int = 0


PRODUCTS: CollectionDefinition[Product] = CollectionDefinition(
    name="products",
    entity_name="Product",
    record_schema=ProductRecord,
    derive=dv.derive_product,
    to_source=dv.product_to_source,
    pipeline_fields=frozenset({
        "images",
        "base_price",
        "discount",
        "has_stock_control",
        "current_stock",
        "stock_alert_threshold",
        "stock_stop_threshold",
    }),
    derived_fields=frozenset({
        "main_image",
        "final_price",
        "has_discount",
        "discount_amount",
        "stock_status",
    }),
    order_base=1,
)

CATEGORIES: CollectionDefinition[Category] = CollectionDefinition(
    name="categories",
    entity_name="Category",
    record_schema=CategoryRecord,
    derive=dv.derive_category,
    to_source=dv.category_to_source,
    pipeline_fields=frozenset({"gradient_config", "background_mode"}),
    derived_fields=frozenset({"gradient"}),
    order_base=1,
)

BRANCHES: CollectionDefinition[Branch] = CollectionDefinition(
    name="branches",
    entity_name="Branch",
    record_schema=BranchRecord,
    derive=dv.derive_branch,
    to_source=dv.branch_to_source,
    pipeline_fields=frozenset({"location"}),
)

SCHEDULES: CollectionDefinition[BranchSchedule] = CollectionDefinition(
    name="schedules",
    entity_name="BranchSchedule",
    record_schema=ScheduleRecord,
    derive=dv.derive_schedule,
    to_source=dv.schedule_to_source,
    pipeline_fields=frozenset({"day_of_week"}),
)

SOCIALS: CollectionDefinition[BranchSocial] = CollectionDefinition(
    name="socials",
    entity_name="BranchSocial",
    record_schema=SocialRecord,
    derive=dv.derive_social,
    to_source=dv.social_to_source,
)

# Scoped by the signed-in user's id; the listing routes take no parent.
COMPANIES: CollectionDefinition[Company] = CollectionDefinition(
    name="companies",
    entity_name="Company",
    record_schema=CompanyRecord,
    derive=dv.derive_company,
    to_source=dv.company_to_source,
)

USER_TAGS: CollectionDefinition[UserTag] = CollectionDefinition(
    name="user_tags",
    entity_name="UserTag",
    record_schema=UserTagRecord,
    derive=dv.derive_user_tag,
    to_source=dv.user_tag_to_source,
    pipeline_fields=frozenset({"tag_config"}),
)
