"""Domain entity for products — the display-ready (derived) form."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum


class StockStatus(str, Enum):
    """Stock classification of a product."""

    NO_CONTROL = "no-control"
    OK = "ok"
    LOW = "low"
    CRITICAL = "critical"


@dataclass
class Product:
    """A product after images were parsed and price/stock were computed.

    ``images`` holds the parsed URL list; the wire form is a JSON-encoded
    array. ``final_price``, ``has_discount``, ``discount_amount`` and
    ``stock_status`` are never persisted.
    """

    id: int
    category_id: int
    name: str
    base_price: Decimal
    sort_order: int = 0
    description: str | None = None
    images: list[str] = field(default_factory=list)
    main_image: str | None = None
    discount: Decimal | None = None
    has_stock_control: bool = False
    current_stock: int | None = None
    stock_alert_threshold: int | None = None
    stock_stop_threshold: int | None = None
    is_available: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # Computed
    final_price: float = 0.0
    has_discount: bool = False
    discount_amount: float = 0.0
    stock_status: StockStatus = StockStatus.NO_CONTROL

    @property
    def parent_id(self) -> int:
        return self.category_id
