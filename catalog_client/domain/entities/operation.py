"""Outcome values returned by every cache-facing operation."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class OperationResult(Generic[T]):
    """Caller-visible outcome of a remote-backed operation.

    Remote failures are folded into ``error`` instead of propagating, so a
    caller can always tell "did not complete" apart from "completed with no
    value" via ``ok``.
    """

    ok: bool
    value: T | None = None
    error: str | None = None

    @classmethod
    def success(cls, value: T | None = None) -> "OperationResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "OperationResult[T]":
        return cls(ok=False, error=error)


class ReorderState(str, Enum):
    """States of the drag-and-drop reorder protocol."""

    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTING = "committing"
    ROLLING_BACK = "rolling_back"


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Notification:
    """A user-visible message (toast)."""

    level: NotificationLevel
    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, str]:
        return {
            "level": self.level.value,
            "message": self.message,
            "created_at": self.created_at.isoformat(),
        }
