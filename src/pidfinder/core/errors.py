"""Exceptions raised inside the resolution pipeline.

None of these reach the caller of ``resolve_process_id``; the pipeline
converts them into a failed :class:`~pidfinder.core.models.Resolution`.
"""

from __future__ import annotations

import re


class PidFinderError(Exception):
    """Base class for pidfinder errors."""


class InvalidPatternError(PidFinderError):
    """A caller-supplied regex failed to compile."""

    def __init__(self, field: str, pattern: object, error: re.error | TypeError) -> None:
        self.field = field
        self.pattern = pattern
        self.error = error
        super().__init__(f"Invalid {field} regex {pattern!r}: {error}")


class UnreadableAttributeError(PidFinderError):
    """A filter was requested on an attribute that could not be read."""

    REASONS = {
        "path": (
            "A path regex was specified but path was not readable, "
            "this may be a security issue"
        ),
        "cwd": (
            "A CWD regex was specified but CWD was not readable, "
            "this may be a security issue"
        ),
    }

    def __init__(self, field: str, pid: int) -> None:
        self.field = field
        self.pid = pid
        super().__init__(self.REASONS[field])

    @property
    def reason(self) -> str:
        return self.REASONS[self.field]
