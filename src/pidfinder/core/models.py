"""Core data models for pidfinder.

Defines the records produced by a procfs scan, the match criteria a
caller supplies, and the single result shape every resolution returns.
All models are constructed fresh per call and never persisted.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Reconcile(str, Enum):
    """Named strategies for picking one pid out of several hits."""

    FIRST = "first"
    PARENT = "parent"
    UPTIME = "uptime"


class ResolutionError(Enum):
    """Reason codes for a failed resolution."""

    UNSUPPORTED_PLATFORM = "unsupported_platform"
    MISSING_PROCFS = "missing_procfs"
    INVALID_PATTERN = "invalid_pattern"
    SECURITY_UNREADABLE = "security_unreadable"
    NO_MATCH = "no_match"
    AMBIGUOUS_NO_STRATEGY = "ambiguous_no_strategy"
    AMBIGUOUS_AFTER_RECONCILIATION = "ambiguous_after_reconciliation"
    UNKNOWN_STRATEGY = "unknown_strategy"


@dataclass(frozen=True)
class ProcessRecord:
    """Identity attributes of one live process at scan time.

    ``path`` and ``cwd`` are empty strings when the corresponding
    symlink could not be read.  ``start`` is the start tick since boot
    and is only meaningful relative to other records of the same scan.
    """

    pid: int
    ppid: int
    name: str
    path: str = ""
    cwd: str = ""
    start: int = 0


# External (camelCase) key -> dataclass field
_CRITERIA_KEYS: dict[str, str] = {
    "processName": "process_name",
    "processPath": "process_path",
    "processCwd": "process_cwd",
    "process_name": "process_name",
    "process_path": "process_path",
    "process_cwd": "process_cwd",
    "reconcile": "reconcile",
}

_REGEX_FIELDS = frozenset({"process_name", "process_path", "process_cwd"})


@dataclass(frozen=True)
class MatchCriteria:
    """Optional regex filters plus an optional reconciliation token.

    ``reconcile`` is kept as the raw token so an unrecognised value can
    be reported when it is actually needed instead of being rejected up
    front.
    """

    process_name: str | None = None
    process_path: str | None = None
    process_cwd: str | None = None
    reconcile: str | None = None

    @property
    def has_filters(self) -> bool:
        return bool(self.process_name or self.process_path or self.process_cwd)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MatchCriteria:
        """Build criteria from a mapping using snake_case or camelCase keys.

        Unknown keys are ignored.  ``None`` and empty strings count as
        "not set".  Numeric regex values (YAML reads ``1234`` as an int)
        are turned into strings; anything else non-string is kept so
        compilation can reject it.
        """
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            field_name = _CRITERIA_KEYS.get(key)
            if field_name is None:
                continue
            if isinstance(value, Reconcile):
                value = value.value
            elif field_name in _REGEX_FIELDS and isinstance(value, (int, float)) \
                    and not isinstance(value, bool):
                value = str(value)
            kwargs[field_name] = None if value is None or value == "" else value
        return cls(**kwargs)


@dataclass(frozen=True)
class Resolution:
    """Outcome of one resolution call.

    Either ``pid`` is non-zero and ``reason`` is ``None``, or ``pid`` is
    zero and both ``reason`` and ``error`` are populated.
    """

    pid: int
    reason: str | None = None
    error: ResolutionError | None = None

    def __post_init__(self) -> None:
        if self.pid == 0 and (self.reason is None or self.error is None):
            raise ValueError("a failed resolution needs a reason and an error code")
        if self.pid != 0 and (self.reason is not None or self.error is not None):
            raise ValueError("a successful resolution carries no reason")

    @classmethod
    def found(cls, pid: int) -> Resolution:
        return cls(pid=pid)

    @classmethod
    def failed(cls, error: ResolutionError, reason: str) -> Resolution:
        return cls(pid=0, reason=reason, error=error)

    @property
    def ok(self) -> bool:
        return self.pid != 0

    def to_dict(self) -> dict[str, Any]:
        """Return the ``{pid, reason?}`` shape exposed to callers."""
        if self.ok:
            return {"pid": self.pid}
        return {"pid": self.pid, "reason": self.reason}
