"""Criteria filter — decides which scanned processes are hits.

Criteria are applied per record in a fixed order: name, then path,
then cwd.  A requested path or cwd filter on a record whose attribute
could not be read fails closed: the whole scan is aborted and the
record is never silently dropped.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from pidfinder.core.errors import InvalidPatternError, UnreadableAttributeError
from pidfinder.core.models import MatchCriteria, ProcessRecord

logger = logging.getLogger(__name__)


def _compile(field: str, pattern: Any) -> re.Pattern[str] | None:
    if not pattern:
        return None
    if not isinstance(pattern, str):
        raise InvalidPatternError(
            field, pattern, TypeError(f"expected a string, got {type(pattern).__name__}"),
        )
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(field, pattern, e) from e


@dataclass(frozen=True)
class CriteriaFilter:
    """Compiled match criteria.

    Build with :meth:`compile` so each pattern is compiled once per
    call rather than once per record.
    """

    name: re.Pattern[str] | None = None
    path: re.Pattern[str] | None = None
    cwd: re.Pattern[str] | None = None

    @classmethod
    def compile(cls, criteria: MatchCriteria) -> CriteriaFilter:
        """Compile the regexes in *criteria*.

        Raises :class:`InvalidPatternError` for a malformed pattern.
        """
        return cls(
            name=_compile("processName", criteria.process_name),
            path=_compile("processPath", criteria.process_path),
            cwd=_compile("processCwd", criteria.process_cwd),
        )

    def check(self, record: ProcessRecord) -> bool:
        """Return ``True`` if *record* is a hit.

        Raises :class:`UnreadableAttributeError` when a path or cwd
        filter is active and that attribute of *record* is empty.
        """
        if self.name is not None and not self.name.search(record.name):
            return False
        if self.path is not None:
            if not record.path:
                raise UnreadableAttributeError("path", record.pid)
            if not self.path.search(record.path):
                return False
        if self.cwd is not None:
            if not record.cwd:
                raise UnreadableAttributeError("cwd", record.pid)
            if not self.cwd.search(record.cwd):
                return False
        return True

    def collect(self, records: Iterable[ProcessRecord]) -> list[ProcessRecord]:
        """Return the hits among *records*, preserving their order.

        An :class:`UnreadableAttributeError` stops iteration at once and
        propagates; hits gathered so far are discarded.
        """
        hits: list[ProcessRecord] = []
        for record in records:
            if self.check(record):
                hits.append(record)
        logger.debug("Filter accepted %d process(es)", len(hits))
        return hits
