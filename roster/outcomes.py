"""Explicit result values for core operations and input validation helpers."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Any

_HANDLE_RE = re.compile(r"^[A-Za-z0-9_]{5,32}$")


class Failure(str, enum.Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class Outcome:
    """Success or failure of a business operation.

    Expected rule violations (unknown ids, duplicate assignments, illegal
    transitions) come back as a failed ``Outcome``; storage errors are raised.
    """

    ok: bool
    value: Any = None
    failure: Failure | None = None
    reason: str = ""

    @classmethod
    def success(cls, value: Any = None) -> Outcome:
        return cls(ok=True, value=value)

    @classmethod
    def fail(cls, failure: Failure, reason: str) -> Outcome:
        return cls(ok=False, failure=failure, reason=reason)

    def __bool__(self) -> bool:
        return self.ok


class InvalidInput(ValueError):
    """Raised by the parse helpers when a raw argument is malformed."""


def parse_id(raw) -> int:
    """Parse a positive numeric identifier from user input."""
    if isinstance(raw, bool):
        raise InvalidInput(f"Invalid id: {raw!r}")
    try:
        value = int(str(raw).strip().lstrip("#"))
    except (TypeError, ValueError):
        raise InvalidInput(f"Invalid id: {raw!r}") from None
    if value <= 0:
        raise InvalidInput(f"Invalid id: {raw!r}")
    return value


def parse_choice(raw, choices) -> str:
    """Return the matching ``TextChoices`` member for a raw string value."""
    value = str(raw or "").strip().lower()
    if value not in choices.values:
        allowed = ", ".join(choices.values)
        raise InvalidInput(f"`{value}` is not one of: {allowed}")
    return choices(value)


def normalize_handle(raw) -> str:
    """Strip a leading ``@`` and validate the handle format."""
    handle = str(raw or "").strip()
    if handle.startswith("@"):
        handle = handle[1:]
    if not _HANDLE_RE.match(handle):
        raise InvalidInput(
            f"`{raw}` is not a valid handle (5-32 letters, digits or underscores)"
        )
    return handle
