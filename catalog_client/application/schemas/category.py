"""Pydantic DTOs for the Category collection."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from catalog_client.domain.entities import BackgroundMode, GradientType


class GradientConfigSchema(BaseModel):
    type: GradientType = GradientType.LINEAR
    angle: int = Field(0, ge=0, le=360)
    colors: list[str] = Field(..., min_length=2, max_length=4)


class CategoryRecord(BaseModel):
    """A category as stored by the remote authority (``gradientConfig`` serialized)."""

    id: int
    branch_id: int
    name: str
    description: str | None = None
    image_url: str | None = None
    text_color: str = "#000000"
    background_mode: BackgroundMode = BackgroundMode.SOLID
    background_color: str = "#FFFFFF"
    gradient_config: str | dict[str, Any] | None = None
    sort_order: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class CategoryCreate(BaseModel):
    """Schema for creating a category — the branch is supplied by the scope."""

    name: str = Field(..., min_length=1, max_length=255, examples=["Pizzas"])
    description: str | None = None
    image_url: str | None = None
    text_color: str | None = None
    background_mode: BackgroundMode | None = None
    background_color: str | None = None
    gradient: GradientConfigSchema | None = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class CategoryUpdate(BaseModel):
    """Schema for updating a category — all fields optional."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    image_url: str | None = None
    text_color: str | None = None
    background_mode: BackgroundMode | None = None
    background_color: str | None = None
    gradient: GradientConfigSchema | None = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
