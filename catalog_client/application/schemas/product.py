"""Pydantic DTOs (Data Transfer Objects) for the Product collection."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class ProductRecord(BaseModel):
    """A product as stored by the remote authority (``images`` still serialized)."""

    id: int
    category_id: int
    name: str
    description: str | None = None
    images: str | list[str] | None = None
    base_price: Decimal
    discount: Decimal | None = None
    has_stock_control: bool = False
    current_stock: int | None = None
    stock_alert_threshold: int | None = None
    stock_stop_threshold: int | None = None
    is_available: bool = True
    sort_order: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class ProductCreate(BaseModel):
    """Schema for creating a product — the category is supplied by the scope."""

    name: str = Field(..., min_length=1, max_length=255, examples=["Pizza Margherita"])
    base_price: Decimal = Field(..., ge=0, examples=["12.99"])
    description: str | None = None
    discount: Decimal | None = Field(None, ge=0, le=100)
    has_stock_control: bool = False
    current_stock: int | None = None
    stock_alert_threshold: int | None = None
    stock_stop_threshold: int | None = None
    is_available: bool = True
    images: list[str] | None = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class ProductUpdate(BaseModel):
    """Schema for updating an existing product — all fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    base_price: Decimal | None = Field(None, ge=0)
    description: str | None = None
    discount: Decimal | None = Field(None, ge=0, le=100)
    has_stock_control: bool | None = None
    current_stock: int | None = None
    stock_alert_threshold: int | None = None
    stock_stop_threshold: int | None = None
    is_available: bool | None = None
    images: list[str] | None = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
