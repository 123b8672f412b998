"""Domain entities owned directly by a signed-in user: companies and tags."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass
class Company:
    """Root of the tenant hierarchy; scoped by its owner.

    The authority keeps no explicit order for companies. ``sort_order`` stays
    0, so the stable sort keeps the listing order and appends new ones.
    """

    id: int
    owner_id: int
    name: str
    description: str | None = None
    logo_url: str | None = None
    is_active: bool = True
    sort_order: int = 0
    deleted_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def parent_id(self) -> int:
        return self.owner_id


class TagSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


@dataclass
class UserTag:
    """A custom product label, with its serialized configuration parsed."""

    id: int
    user_id: int
    name: str = ""
    text_color: str = "#000000"
    background_color: str = "#FFFFFF"
    icon: str | None = None
    has_border: bool = False
    size: TagSize = TagSize.MEDIUM
    sort_order: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def parent_id(self) -> int:
        return self.user_id
