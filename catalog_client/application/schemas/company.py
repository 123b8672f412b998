"""Pydantic DTOs for companies and the signed-in user's custom tags."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_serializer
from pydantic.alias_generators import to_camel

from catalog_client.domain.entities import TagSize

_WIRE = {"alias_generator": to_camel, "populate_by_name": True}


# ── Companies ────────────────────────────────────────────────────────


class CompanyRecord(BaseModel):
    id: int
    owner_id: int
    name: str
    description: str | None = None
    logo_url: str | None = None
    is_active: bool = True
    deleted_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = _WIRE


class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["Pizzeria Napoli"])
    description: str | None = None
    logo_url: str | None = None

    model_config = _WIRE


class CompanyUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    logo_url: str | None = None

    model_config = _WIRE


# ── User tags ────────────────────────────────────────────────────────


class TagConfigurationSchema(BaseModel):
    """Appearance of one custom tag, as produced by the tag editor."""

    name: str = Field(..., min_length=1, max_length=50, examples=["Vegetarian"])
    text_color: str = Field(..., examples=["#10B981"])
    background_color: str = Field(..., examples=["#D1FAE5"])
    icon: str | None = None
    has_border: bool = False
    size: TagSize = TagSize.MEDIUM

    model_config = _WIRE


class UserTagRecord(BaseModel):
    """A tag as stored by the authority (``tagConfig`` serialized)."""

    id: int
    user_id: int
    tag_config: str | dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = _WIRE


class UserTagCreate(BaseModel):
    tag_config: TagConfigurationSchema

    model_config = _WIRE

    @field_serializer("tag_config")
    def _serialize_config(self, config: TagConfigurationSchema) -> str:
        # the authority stores the configuration as one JSON string
        return config.model_dump_json(by_alias=True, exclude_none=True)
