"""Domain entities for branches and their per-branch aspects (schedules, socials)."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass
class BranchLocation:
    """Physical location of a branch."""

    address: str
    city: str
    state: str
    country: str
    id: int | None = None
    branch_id: int | None = None
    postal_code: str | None = None
    latitude: str | None = None
    longitude: str | None = None


@dataclass
class Branch:
    id: int
    company_id: int
    name: str | None = None
    sort_order: int = 0
    is_active: bool = True
    location: BranchLocation | None = None
    deleted_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def parent_id(self) -> int:
        return self.company_id


class DayOfWeek(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def index(self) -> int:
        return list(DayOfWeek).index(self)


@dataclass
class BranchSchedule:
    """Opening hours of a branch for one weekday ("HH:mm" times)."""

    id: int
    branch_id: int
    day_of_week: DayOfWeek
    sort_order: int = 0
    open_time: str | None = None
    close_time: str | None = None
    is_closed: bool = False

    @property
    def parent_id(self) -> int:
        return self.branch_id


@dataclass
class BranchSocial:
    """A social network link shown for a branch."""

    id: int
    branch_id: int
    platform: str
    url: str
    sort_order: int = 0

    @property
    def parent_id(self) -> int:
        return self.branch_id


class BranchAspect(str, Enum):
    """Per-branch sub-collections that can be copied to sibling branches."""

    SCHEDULES = "schedules"
    SOCIALS = "socials"
