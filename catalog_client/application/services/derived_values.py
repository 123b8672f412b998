"""Derived value pipeline — turns stored records into display-ready entities.

Every function here is pure: it takes a *source* mapping (snake_case field
names, serialized sub-fields still encoded as JSON strings) and returns a
domain entity with the sub-fields parsed and the display-only values
computed. Each ``derive_*`` has a ``*_to_source`` inverse so the cache can
rebuild a source-shaped record and re-run the pipeline after a mutation.

Malformed serialized fields never raise: they are logged and replaced with
an empty structure.
"""

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any, TypeVar

from catalog_client.domain.entities import (
    BackgroundMode,
    Branch,
    BranchLocation,
    BranchSchedule,
    BranchSocial,
    Category,
    Company,
    DayOfWeek,
    GradientConfig,
    GradientType,
    Product,
    StockStatus,
    TagSize,
    UserTag,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ── Serialized sub-fields ────────────────────────────────────────────


def parse_json_field(
    raw: Any,
    default_factory: Callable[[], T],
    *,
    expected_type: type,
    field_name: str,
) -> T:
    """Decode a JSON-encoded sub-field, falling back to ``default_factory()``.

    Values that are already structured (the authority sometimes returns
    arrays instead of strings) are accepted as-is when they have the
    expected type.
    """
    if raw is None or raw == "":
        return default_factory()
    if isinstance(raw, expected_type):
        return raw
    try:
        value = json.loads(raw)
    except (TypeError, ValueError) as exc:
        logger.warning("Could not parse %s, using empty value: %s", field_name, exc)
        return default_factory()
    if not isinstance(value, expected_type):
        logger.warning(
            "Unexpected %s type %s, using empty value",
            field_name,
            type(value).__name__,
        )
        return default_factory()
    return value


def parse_images(raw: Any) -> list[str]:
    images = parse_json_field(raw, list, expected_type=list, field_name="images")
    return [url for url in images if isinstance(url, str)]


def serialize_images(images: list[str] | None) -> str | None:
    if not images:
        return None
    return json.dumps(list(images))


def parse_gradient(raw: Any) -> GradientConfig | None:
    data = parse_json_field(raw, dict, expected_type=dict, field_name="gradientConfig")
    if not data:
        return None
    try:
        return GradientConfig(
            type=GradientType(data.get("type", GradientType.LINEAR.value)),
            angle=int(data.get("angle", 0)),
            colors=[str(c) for c in data.get("colors", [])],
        )
    except (TypeError, ValueError) as exc:
        logger.warning("Invalid gradientConfig, ignoring: %s", exc)
        return None


def serialize_gradient(gradient: GradientConfig | None) -> str | None:
    if gradient is None:
        return None
    return json.dumps(
        {"type": gradient.type.value, "angle": gradient.angle, "colors": list(gradient.colors)}
    )


# ── Price & stock ────────────────────────────────────────────────────


@dataclass
class PriceBreakdown:
    final_price: float
    has_discount: bool
    discount_amount: float


def to_decimal(value: Any, *, field_name: str = "price") -> Decimal:
    """Parse a decimal value (the authority sends decimals as strings)."""
    if value is None or value == "":
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        logger.warning("Could not parse %s=%r, treating as 0", field_name, value)
        return Decimal(0)


def _optional_decimal(value: Any, field_name: str) -> Decimal | None:
    if value is None or value == "":
        return None
    return to_decimal(value, field_name=field_name)


def price_breakdown(base_price: Any, discount: Any = None) -> PriceBreakdown:
    """``final = base - base * (discount or 0) / 100``."""
    base = float(to_decimal(base_price, field_name="basePrice"))
    pct = float(to_decimal(discount, field_name="discount")) if discount is not None else 0.0
    final_price = base - base * pct / 100
    return PriceBreakdown(
        final_price=final_price,
        has_discount=pct > 0,
        discount_amount=base - final_price,
    )


def compute_price(product: Product) -> Product:
    """Return a copy of *product* with the final price fields filled in."""
    breakdown = price_breakdown(product.base_price, product.discount)
    return replace(
        product,
        final_price=breakdown.final_price,
        has_discount=breakdown.has_discount,
        discount_amount=breakdown.discount_amount,
    )


def classify_stock(
    has_control: bool | None,
    current_stock: int | float | None,
    alert_threshold: int | float | None,
    stop_threshold: int | float | None,
) -> StockStatus:
    """Classify stock by precedence: no-control, critical, low, ok.

    Missing numbers make a comparison impossible; that comparison is
    skipped, so a product with no thresholds is simply ``ok``.
    """
    if not has_control:
        return StockStatus.NO_CONTROL
    if current_stock is None:
        return StockStatus.OK
    if stop_threshold is not None and current_stock <= stop_threshold:
        return StockStatus.CRITICAL
    if alert_threshold is not None and current_stock <= alert_threshold:
        return StockStatus.LOW
    return StockStatus.OK


# ── Products ─────────────────────────────────────────────────────────


def parse_product(source: Mapping[str, Any]) -> Product:
    """Parse images and classify stock; prices are left to ``compute_price``."""
    images = parse_images(source.get("images"))
    has_control = bool(source.get("has_stock_control", False))
    current_stock = source.get("current_stock")
    alert = source.get("stock_alert_threshold")
    stop = source.get("stock_stop_threshold")
    return Product(
        id=source["id"],
        category_id=source["category_id"],
        name=source.get("name", ""),
        base_price=to_decimal(source.get("base_price"), field_name="basePrice"),
        sort_order=source.get("sort_order") or 0,
        description=source.get("description"),
        images=images,
        main_image=images[0] if images else None,
        discount=_optional_decimal(source.get("discount"), "discount"),
        has_stock_control=has_control,
        current_stock=current_stock,
        stock_alert_threshold=alert,
        stock_stop_threshold=stop,
        is_available=source.get("is_available", True),
        created_at=source.get("created_at"),
        updated_at=source.get("updated_at"),
        stock_status=classify_stock(has_control, current_stock, alert, stop),
    )


def derive_product(source: Mapping[str, Any]) -> Product:
    return compute_price(parse_product(source))


def product_to_source(product: Product) -> dict[str, Any]:
    return {
        "id": product.id,
        "category_id": product.category_id,
        "name": product.name,
        "description": product.description,
        "images": serialize_images(product.images),
        "base_price": product.base_price,
        "discount": product.discount,
        "has_stock_control": product.has_stock_control,
        "current_stock": product.current_stock,
        "stock_alert_threshold": product.stock_alert_threshold,
        "stock_stop_threshold": product.stock_stop_threshold,
        "is_available": product.is_available,
        "sort_order": product.sort_order,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


# ── Categories ───────────────────────────────────────────────────────


def derive_category(source: Mapping[str, Any]) -> Category:
    return Category(
        id=source["id"],
        branch_id=source["branch_id"],
        name=source.get("name", ""),
        sort_order=source.get("sort_order") or 0,
        description=source.get("description"),
        image_url=source.get("image_url"),
        text_color=source.get("text_color") or "#000000",
        background_mode=BackgroundMode(source.get("background_mode") or BackgroundMode.SOLID),
        background_color=source.get("background_color") or "#FFFFFF",
        gradient=parse_gradient(source.get("gradient_config")),
        created_at=source.get("created_at"),
        updated_at=source.get("updated_at"),
    )


def category_to_source(category: Category) -> dict[str, Any]:
    return {
        "id": category.id,
        "branch_id": category.branch_id,
        "name": category.name,
        "description": category.description,
        "image_url": category.image_url,
        "text_color": category.text_color,
        "background_mode": category.background_mode,
        "background_color": category.background_color,
        "gradient_config": serialize_gradient(category.gradient),
        "sort_order": category.sort_order,
        "created_at": category.created_at,
        "updated_at": category.updated_at,
    }


# ── Branches and per-branch aspects ──────────────────────────────────


def derive_location(raw: Any) -> BranchLocation | None:
    if raw is None:
        return None
    if isinstance(raw, BranchLocation):
        return raw
    return BranchLocation(
        address=raw.get("address", ""),
        city=raw.get("city", ""),
        state=raw.get("state", ""),
        country=raw.get("country", ""),
        id=raw.get("id"),
        branch_id=raw.get("branch_id"),
        postal_code=raw.get("postal_code"),
        latitude=raw.get("latitude"),
        longitude=raw.get("longitude"),
    )


def derive_branch(source: Mapping[str, Any]) -> Branch:
    return Branch(
        id=source["id"],
        company_id=source["company_id"],
        name=source.get("name"),
        sort_order=source.get("sort_order") or 0,
        is_active=source.get("is_active", True),
        location=derive_location(source.get("location")),
        deleted_at=source.get("deleted_at"),
        created_at=source.get("created_at"),
        updated_at=source.get("updated_at"),
    )


def branch_to_source(branch: Branch) -> dict[str, Any]:
    return {
        "id": branch.id,
        "company_id": branch.company_id,
        "name": branch.name,
        "sort_order": branch.sort_order,
        "is_active": branch.is_active,
        "location": branch.location,
        "deleted_at": branch.deleted_at,
        "created_at": branch.created_at,
        "updated_at": branch.updated_at,
    }


def derive_schedule(source: Mapping[str, Any]) -> BranchSchedule:
    day = DayOfWeek(source["day_of_week"])
    sort_order = source.get("sort_order")
    return BranchSchedule(
        id=source["id"],
        branch_id=source["branch_id"],
        day_of_week=day,
        sort_order=day.index if sort_order is None else sort_order,
        open_time=source.get("open_time"),
        close_time=source.get("close_time"),
        is_closed=source.get("is_closed", False),
    )


def schedule_to_source(schedule: BranchSchedule) -> dict[str, Any]:
    return {
        "id": schedule.id,
        "branch_id": schedule.branch_id,
        "day_of_week": schedule.day_of_week,
        # None when the order was derived from the weekday, so a day change re-derives it
        "sort_order": None if schedule.sort_order == schedule.day_of_week.index else schedule.sort_order,
        "open_time": schedule.open_time,
        "close_time": schedule.close_time,
        "is_closed": schedule.is_closed,
    }


def derive_social(source: Mapping[str, Any]) -> BranchSocial:
    return BranchSocial(
        id=source["id"],
        branch_id=source["branch_id"],
        platform=source.get("platform", ""),
        url=source.get("url", ""),
        sort_order=source.get("sort_order") or 0,
    )


def social_to_source(social: BranchSocial) -> dict[str, Any]:
    return {
        "id": social.id,
        "branch_id": social.branch_id,
        "platform": social.platform,
        "url": social.url,
        "sort_order": social.sort_order,
    }


# ── Companies and user tags ──────────────────────────────────────────


def derive_company(source: Mapping[str, Any]) -> Company:
    return Company(
        id=source["id"],
        owner_id=source["owner_id"],
        name=source.get("name", ""),
        description=source.get("description"),
        logo_url=source.get("logo_url"),
        is_active=source.get("is_active", True),
        deleted_at=source.get("deleted_at"),
        created_at=source.get("created_at"),
        updated_at=source.get("updated_at"),
    )


def company_to_source(company: Company) -> dict[str, Any]:
    return {
        "id": company.id,
        "owner_id": company.owner_id,
        "name": company.name,
        "description": company.description,
        "logo_url": company.logo_url,
        "is_active": company.is_active,
        "deleted_at": company.deleted_at,
        "created_at": company.created_at,
        "updated_at": company.updated_at,
    }


def _tag_size(raw: Any) -> TagSize:
    try:
        return TagSize(raw or TagSize.MEDIUM)
    except ValueError:
        logger.warning("Unknown tag size %r, using medium", raw)
        return TagSize.MEDIUM


def derive_user_tag(source: Mapping[str, Any]) -> UserTag:
    """Unpack the serialized ``tagConfig`` (camelCase keys) into the tag's fields."""
    config = parse_json_field(source.get("tag_config"), dict, expected_type=dict, field_name="tagConfig")
    return UserTag(
        id=source["id"],
        user_id=source["user_id"],
        name=str(config.get("name", "")),
        text_color=config.get("textColor") or "#000000",
        background_color=config.get("backgroundColor") or "#FFFFFF",
        icon=config.get("icon"),
        has_border=bool(config.get("hasBorder", False)),
        size=_tag_size(config.get("size")),
        created_at=source.get("created_at"),
        updated_at=source.get("updated_at"),
    )


def serialize_tag_config(tag: UserTag) -> str:
    config: dict[str, Any] = {
        "name": tag.name,
        "textColor": tag.text_color,
        "backgroundColor": tag.background_color,
        "hasBorder": tag.has_border,
        "size": tag.size.value,
    }
    if tag.icon is not None:
        config["icon"] = tag.icon
    return json.dumps(config)


def user_tag_to_source(tag: UserTag) -> dict[str, Any]:
    return {
        "id": tag.id,
        "user_id": tag.user_id,
        "tag_config": serialize_tag_config(tag),
        "created_at": tag.created_at,
        "updated_at": tag.updated_at,
    }
