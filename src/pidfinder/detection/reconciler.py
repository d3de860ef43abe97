"""Reconciler — reduces a set of hits to exactly one pid.

Strategies:
- ``first``  — the first hit in enumeration order
- ``parent`` — the single hit whose parent lies outside the hit set
- ``uptime`` — the hit with the smallest start tick (earliest started)

Each strategy is a plain function of the hit list returning a
:class:`Resolution`; :func:`reconcile` handles the zero/one/many cases
and dispatches on the strategy token.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from pidfinder.core.models import ProcessRecord, Reconcile, Resolution, ResolutionError

logger = logging.getLogger(__name__)

NO_MATCH_REASON = "Unable to find a process"
NO_STRATEGY_REASON = "Multiple processes found but no way to reconcile to one"
NOT_ALL_CHILDREN_REASON = "Multiple processes found which are not all children"
NO_ROOT_REASON = "Multiple processes found but none is a parent of the others"
UNKNOWN_STRATEGY_REASON = "Unknown reconciliation"


def _first(hits: Sequence[ProcessRecord]) -> Resolution:
    return Resolution.found(hits[0].pid)


def _parent(hits: Sequence[ProcessRecord]) -> Resolution:
    roots = [
        h for h in hits
        if not any(other.pid != h.pid and other.pid == h.ppid for other in hits)
    ]
    if len(roots) == 1:
        return Resolution.found(roots[0].pid)
    if roots:
        logger.debug(
            "parent strategy found %d roots: %s",
            len(roots), [r.pid for r in roots],
        )
        return Resolution.failed(
            ResolutionError.AMBIGUOUS_AFTER_RECONCILIATION, NOT_ALL_CHILDREN_REASON,
        )
    # Every hit has its parent inside the set: only possible with a cycle
    return Resolution.failed(
        ResolutionError.AMBIGUOUS_AFTER_RECONCILIATION, NO_ROOT_REASON,
    )


def _uptime(hits: Sequence[ProcessRecord]) -> Resolution:
    earliest = hits[0]
    for h in hits[1:]:
        if h.start < earliest.start:
            earliest = h
    return Resolution.found(earliest.pid)


_STRATEGIES: dict[str, Callable[[Sequence[ProcessRecord]], Resolution]] = {
    Reconcile.FIRST.value: _first,
    Reconcile.PARENT.value: _parent,
    Reconcile.UPTIME.value: _uptime,
}


def reconcile(
    hits: Sequence[ProcessRecord],
    strategy: str | Reconcile | None = None,
) -> Resolution:
    """Resolve *hits* to one pid using *strategy* when there are several.

    A single hit always wins regardless of *strategy*.
    """
    if not hits:
        return Resolution.failed(ResolutionError.NO_MATCH, NO_MATCH_REASON)
    if len(hits) == 1:
        return Resolution.found(hits[0].pid)
    if not strategy:
        return Resolution.failed(ResolutionError.AMBIGUOUS_NO_STRATEGY, NO_STRATEGY_REASON)

    token = strategy.value if isinstance(strategy, Reconcile) else strategy
    handler = _STRATEGIES.get(token) if isinstance(token, str) else None
    if handler is None:
        logger.warning("Unknown reconciliation strategy %r", token)
        return Resolution.failed(ResolutionError.UNKNOWN_STRATEGY, UNKNOWN_STRATEGY_REASON)
    return handler(hits)
