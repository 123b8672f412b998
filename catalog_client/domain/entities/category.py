"""Domain entity for menu categories."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class BackgroundMode(str, Enum):
    SOLID = "solid"
    GRADIENT = "gradient"


class GradientType(str, Enum):
    LINEAR = "linear"
    RADIAL = "radial"


@dataclass
class GradientConfig:
    """Gradient background — two to four colour stops."""

    type: GradientType = GradientType.LINEAR
    angle: int = 0
    colors: list[str] = field(default_factory=list)


@dataclass
class Category:
    """A category with its serialized gradient already parsed.

    ``gradient`` is ``None`` when the stored ``gradientConfig`` is empty or
    malformed.
    """

    id: int
    branch_id: int
    name: str
    sort_order: int = 0
    description: str | None = None
    image_url: str | None = None
    text_color: str = "#000000"
    background_mode: BackgroundMode = BackgroundMode.SOLID
    background_color: str = "#FFFFFF"
    gradient: GradientConfig | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def parent_id(self) -> int:
        return self.branch_id
