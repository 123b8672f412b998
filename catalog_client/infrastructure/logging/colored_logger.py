"""Colored operation logger — ANSI-colored console logging for cache operations.

Provides an OperationLogger with color-coded output per operation stage,
making it easy to trace loads, mutations and reorders of a scope in the
terminal.

Color scheme:
    🔵 Blue    — Load / refresh
    🟢 Green   — Create
    🟠 Cyan    — Update
    🟡 Yellow  — Delete
    🟣 Magenta — Reorder
    ⚪ White   — Sibling propagation
    🔴 Red     — Errors / rollback
    ⚪ Gray    — Timing / Stats
"""

import logging
import time
from contextlib import contextmanager
from typing import Any


# ── ANSI Color Codes ─────────────────────────────────────────────────

class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    GRAY = "\033[90m"


# ── Operation Stage Definitions ──────────────────────────────────────

class OperationStage:
    """Predefined operation stages with colors and icons."""

    LOAD = ("LOAD", _Colors.BLUE, "📥")
    CREATE = ("CREATE", _Colors.GREEN, "➕")
    UPDATE = ("UPDATE", _Colors.CYAN, "✏️")
    DELETE = ("DELETE", _Colors.YELLOW, "🗑️")
    REORDER = ("REORDER", _Colors.MAGENTA, "↕️")
    ROLLBACK = ("ROLLBACK", _Colors.RED, "↩️")
    PROPAGATE = ("PROPAGATE", _Colors.WHITE, "📣")
    ERROR = ("ERROR", _Colors.RED, "❌")


# ── OperationLogger ──────────────────────────────────────────────────

class OperationLogger:
    """Color-coded logger for cache-backed operations.

    Usage:
        log = OperationLogger("CollectionService")
        log.step_start(OperationStage.LOAD, "Loading products", parent_id=3)
        log.detail("Cache hit — skipping fetch")
        log.step_complete(OperationStage.LOAD, "Loaded 12 products")
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)
        self._component = component_name

    @staticmethod
    def _details(kwargs: dict[str, Any], color: str) -> str:
        if not kwargs:
            return ""
        details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
        return f" {color}({details}){_Colors.RESET}"

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        """Log the start of an operation with its stage color."""
        label, color, icon = stage
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        self._logger.info(formatted + self._details(kwargs, _Colors.GRAY))

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        """Log the successful completion of an operation."""
        label, color, icon = stage
        formatted = (
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}"
        )
        self._logger.info(formatted + self._details(kwargs, _Colors.GRAY))

    def step_error(self, stage: tuple[str, str, str], message: str, error: Exception | None = None) -> None:
        """Log an operation error in red."""
        label, _, icon = stage
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted)

    def detail(self, message: str, **kwargs: Any) -> None:
        """Log additional detail at debug level (gray/dimmed)."""
        formatted = f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}"
        self._logger.debug(formatted + self._details(kwargs, _Colors.DIM))

    def stats(self, **kwargs: Any) -> None:
        """Log statistics / timing information."""
        parts = [f"{_Colors.GRAY}{k}: {v}" for k, v in kwargs.items()]
        self._logger.info(f"   {_Colors.GRAY}📈 {' | '.join(parts)}{_Colors.RESET}")

    @contextmanager
    def timed_step(self, stage: tuple[str, str, str], message: str, **kwargs: Any):
        """Context manager that logs start/end with elapsed time.

        Usage:
            with log.timed_step(OperationStage.LOAD, "Fetching products"):
                records = await gateway.list_children(category_id)
        """
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.step_error(stage, f"{message} — failed after {elapsed:.2f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step_complete(stage, f"{message} — {elapsed:.2f}s", **kwargs)
