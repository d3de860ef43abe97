"""Resolution pipeline — enumerator, filter and reconciler in one call.

Flow:

1. Platform check (Linux only) and procfs presence check.  Neither
   touches any per-process file.
2. Criteria compilation.  A malformed regex fails here, before the scan.
3. Enumeration + filtering.  An unreadable path/cwd under an active
   filter aborts the scan immediately.
4. Reconciliation of the hits to one pid.

Every outcome is returned as a :class:`Resolution`; nothing listed above
is raised to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import psutil

from pidfinder.core.errors import InvalidPatternError, UnreadableAttributeError
from pidfinder.core.models import MatchCriteria, Resolution, ResolutionError
from pidfinder.detection.filters import CriteriaFilter
from pidfinder.detection.reconciler import reconcile
from pidfinder.sensors.procfs import ProcFS

logger = logging.getLogger(__name__)

UNSUPPORTED_PLATFORM_REASON = "OS not supported"
MISSING_PROCFS_REASON = "OS is missing procfs"


class ProcessFinder:
    """Resolve a single pid from :class:`MatchCriteria`.

    Parameters
    ----------
    procfs:
        Enumerator to scan.  Defaults to the host's ``/proc``.
    is_linux:
        Platform override for tests.  Defaults to ``psutil.LINUX``.
    """

    def __init__(
        self,
        procfs: ProcFS | None = None,
        is_linux: bool | None = None,
    ) -> None:
        self._procfs = procfs if procfs is not None else ProcFS()
        self._is_linux = psutil.LINUX if is_linux is None else is_linux

    @property
    def procfs(self) -> ProcFS:
        return self._procfs

    def resolve(self, criteria: MatchCriteria | Mapping[str, Any]) -> Resolution:
        """Scan live processes once and return the resolved pid."""
        if not isinstance(criteria, MatchCriteria):
            criteria = MatchCriteria.from_dict(criteria)

        if not self._is_linux:
            return Resolution.failed(
                ResolutionError.UNSUPPORTED_PLATFORM, UNSUPPORTED_PLATFORM_REASON,
            )
        if not self._procfs.is_mounted():
            logger.warning("procfs not found at %s", self._procfs.root)
            return Resolution.failed(
                ResolutionError.MISSING_PROCFS, MISSING_PROCFS_REASON,
            )

        try:
            criteria_filter = CriteriaFilter.compile(criteria)
        except InvalidPatternError as e:
            logger.info("Rejected criteria: %s", e)
            return Resolution.failed(ResolutionError.INVALID_PATTERN, str(e))

        try:
            hits = criteria_filter.collect(self._procfs.iter_records())
        except UnreadableAttributeError as e:
            logger.warning(
                "Aborting scan: %s filter requested but pid %d %s is unreadable",
                e.field, e.pid, e.field,
            )
            return Resolution.failed(ResolutionError.SECURITY_UNREADABLE, e.reason)

        result = reconcile(hits, criteria.reconcile)
        if result.ok:
            logger.debug(
                "Resolved pid %d from %d hit(s) (reconcile=%s)",
                result.pid, len(hits), criteria.reconcile,
            )
        else:
            logger.info("Resolution failed: %s", result.reason)
        return result


def resolve_process_id(
    criteria: MatchCriteria | Mapping[str, Any],
    procfs: ProcFS | None = None,
) -> Resolution:
    """Resolve one pid from *criteria* against the host procfs."""
    return ProcessFinder(procfs=procfs).resolve(criteria)
