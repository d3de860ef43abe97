"""Label helpers."""

from __future__ import annotations

import re

_WHITESPACE_RUN = re.compile(r"\s+")


def format_source(source: str | None) -> str:
    """Return *source* with every run of whitespace replaced by ``-``.

    Metric sources may not contain spaces; ``None`` becomes ``""``.
    """
    return _WHITESPACE_RUN.sub("-", source or "")
