"""Pydantic DTOs for branches, branch schedules and branch social links."""

from datetime import datetime

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from catalog_client.domain.entities import DayOfWeek

_WIRE = {"alias_generator": to_camel, "populate_by_name": True}


# ── Branches ─────────────────────────────────────────────────────────


class BranchLocationRecord(BaseModel):
    address: str
    city: str
    state: str
    country: str
    id: int | None = None
    branch_id: int | None = None
    postal_code: str | None = None
    latitude: str | None = None
    longitude: str | None = None

    model_config = _WIRE


class BranchRecord(BaseModel):
    """A branch as returned by the authority, location embedded."""

    id: int
    company_id: int
    name: str | None = None
    is_active: bool = True
    location: BranchLocationRecord | None = None
    sort_order: int = 0
    deleted_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = _WIRE


class BranchCreate(BaseModel):
    name: str | None = Field(None, max_length=255)

    model_config = _WIRE


class BranchUpdate(BaseModel):
    name: str | None = Field(None, max_length=255)

    model_config = _WIRE


class BranchLocationInput(BaseModel):
    """Body of ``POST /branches/{id}/location``; creates or replaces the location."""

    address: str = Field(..., min_length=1, max_length=255, examples=["Via Roma 12"])
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    country: str = Field(..., min_length=1, max_length=100)
    postal_code: str | None = Field(None, max_length=20)
    latitude: str | None = None
    longitude: str | None = None

    model_config = _WIRE


# ── Schedules ────────────────────────────────────────────────────────

_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class ScheduleRecord(BaseModel):
    id: int
    branch_id: int
    day_of_week: DayOfWeek
    open_time: str | None = None
    close_time: str | None = None
    is_closed: bool = False
    sort_order: int | None = None  # authority may omit; derived from the weekday

    model_config = _WIRE


class ScheduleEntry(BaseModel):
    """One weekday of opening hours, used for create, update and batch replace."""

    day_of_week: DayOfWeek
    open_time: str | None = Field(None, pattern=_TIME_PATTERN, examples=["09:00"])
    close_time: str | None = Field(None, pattern=_TIME_PATTERN, examples=["18:00"])
    is_closed: bool = False

    model_config = _WIRE


# ── Socials ──────────────────────────────────────────────────────────


class SocialRecord(BaseModel):
    id: int
    branch_id: int
    platform: str
    url: str
    sort_order: int = 0

    model_config = _WIRE


class SocialLinkCreate(BaseModel):
    platform: str = Field(..., min_length=1, max_length=50, examples=["instagram"])
    url: str = Field(..., min_length=1, max_length=500)

    model_config = _WIRE


class SocialLinkUpdate(BaseModel):
    platform: str | None = Field(None, min_length=1, max_length=50)
    url: str | None = Field(None, min_length=1, max_length=500)

    model_config = _WIRE
