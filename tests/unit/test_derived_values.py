"""Unit tests for the derived value pipeline."""

from decimal import Decimal

import pytest

from catalog_client.application.services import derived_values as dv
from catalog_client.domain.entities import BackgroundMode, DayOfWeek, GradientType, StockStatus, TagSize


# ── Helpers ──


def _product_source(**overrides) -> dict:
    source = {
        "id": 1,
        "category_id": 10,
        "name": "Pizza",
        "base_price": "100.00",
        "discount": None,
        "images": None,
        "has_stock_control": False,
        "current_stock": None,
        "stock_alert_threshold": None,
        "stock_stop_threshold": None,
        "sort_order": 1,
    }
    source.update(overrides)
    return source


# ── Price ──


def test_price_with_discount():
    product = dv.derive_product(_product_source(base_price="100", discount="25"))
    assert product.final_price == 75.0
    assert product.discount_amount == 25.0
    assert product.has_discount is True


def test_price_without_discount():
    product = dv.derive_product(_product_source(base_price="50", discount=None))
    assert product.final_price == 50.0
    assert product.discount_amount == 0.0
    assert product.has_discount is False


def test_zero_discount_is_not_a_discount():
    breakdown = dv.price_breakdown("80", "0")
    assert breakdown.final_price == 80.0
    assert breakdown.has_discount is False


def test_unparsable_price_is_treated_as_zero():
    assert dv.to_decimal("abc") == Decimal(0)
    assert dv.price_breakdown("abc", "10").final_price == 0.0


# ── Stock ──


@pytest.mark.parametrize(
    ("has_control", "current", "alert", "stop", "expected"),
    [
        (True, 2, 5, 1, StockStatus.LOW),
        (True, 3, 5, 1, StockStatus.LOW),
        (True, 1, 5, 1, StockStatus.CRITICAL),
        (True, 0, 5, 1, StockStatus.CRITICAL),
        (True, 10, 5, 1, StockStatus.OK),
        (False, 0, 5, 1, StockStatus.NO_CONTROL),
        (True, 3, None, None, StockStatus.OK),
        (True, None, 5, 1, StockStatus.OK),
    ],
)
def test_classify_stock(has_control, current, alert, stop, expected):
    assert dv.classify_stock(has_control, current, alert, stop) == expected


def test_critical_wins_over_low():
    """A stock at both thresholds is critical, not low."""
    assert dv.classify_stock(True, 2, 2, 2) == StockStatus.CRITICAL


# ── Serialized sub-fields ──


def test_images_parsed_and_main_image_set():
    product = dv.derive_product(_product_source(images='["a.png", "b.png"]'))
    assert product.images == ["a.png", "b.png"]
    assert product.main_image == "a.png"


def test_images_already_a_list_are_accepted():
    product = dv.derive_product(_product_source(images=["x.png"]))
    assert product.images == ["x.png"]


@pytest.mark.parametrize("raw", ["not json", '{"a": 1}', "[1, 2", ""])
def test_malformed_images_become_empty(raw):
    product = dv.derive_product(_product_source(images=raw))
    assert product.images == []
    assert product.main_image is None


def test_malformed_images_log_a_warning(caplog):
    with caplog.at_level("WARNING"):
        dv.parse_images("not json")
    assert "images" in caplog.text


def test_gradient_round_trip_through_source():
    category = dv.derive_category({
        "id": 5,
        "branch_id": 2,
        "name": "Drinks",
        "background_mode": "gradient",
        "gradient_config": '{"type": "radial", "angle": 45, "colors": ["#fff", "#000"]}',
        "sort_order": 3,
    })
    assert category.background_mode == BackgroundMode.GRADIENT
    assert category.gradient is not None
    assert category.gradient.type == GradientType.RADIAL
    assert category.gradient.colors == ["#fff", "#000"]

    rebuilt = dv.derive_category(dv.category_to_source(category))
    assert rebuilt == category


def test_malformed_gradient_becomes_none():
    category = dv.derive_category({"id": 5, "branch_id": 2, "name": "X", "gradient_config": "{oops"})
    assert category.gradient is None


def test_serialize_images_empty_is_none():
    assert dv.serialize_images([]) is None
    assert dv.serialize_images(None) is None


# ── Schedules ──


def test_schedule_sort_order_falls_back_to_weekday():
    schedule = dv.derive_schedule({"id": 1, "branch_id": 3, "day_of_week": "wednesday"})
    assert schedule.day_of_week == DayOfWeek.WEDNESDAY
    assert schedule.sort_order == 2


def test_schedule_explicit_sort_order_is_kept():
    schedule = dv.derive_schedule({"id": 1, "branch_id": 3, "day_of_week": "monday", "sort_order": 9})
    assert schedule.sort_order == 9


def test_schedule_day_change_rederives_sort_order():
    schedule = dv.derive_schedule({"id": 1, "branch_id": 3, "day_of_week": "monday"})
    source = dv.schedule_to_source(schedule)
    source["day_of_week"] = "friday"
    assert dv.derive_schedule(source).sort_order == 4


# ── Companies and user tags ──


def test_company_is_scoped_by_owner():
    company = dv.derive_company({"id": 4, "owner_id": 77, "name": "Napoli"})
    assert company.parent_id == 77
    assert company.sort_order == 0
    assert dv.derive_company(dv.company_to_source(company)) == company


def test_user_tag_config_is_unpacked():
    tag = dv.derive_user_tag({
        "id": 3,
        "user_id": 77,
        "tag_config": '{"name": "Spicy", "textColor": "#F00", "backgroundColor": "#FEE", "icon": "x", "hasBorder": true, "size": "large"}',
    })
    assert tag.name == "Spicy"
    assert tag.text_color == "#F00"
    assert tag.has_border is True
    assert tag.size == TagSize.LARGE
    assert dv.derive_user_tag(dv.user_tag_to_source(tag)) == tag


def test_malformed_user_tag_config_falls_back_to_defaults(caplog):
    with caplog.at_level("WARNING"):
        tag = dv.derive_user_tag({"id": 3, "user_id": 77, "tag_config": "{broken"})
    assert tag.name == ""
    assert tag.size == TagSize.MEDIUM
    assert "tagConfig" in caplog.text


def test_unknown_tag_size_becomes_medium():
    tag = dv.derive_user_tag({"id": 3, "user_id": 77, "tag_config": {"name": "A", "size": "huge"}})
    assert tag.size == TagSize.MEDIUM
