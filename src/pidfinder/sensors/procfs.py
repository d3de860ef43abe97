"""procfs enumerator — lists live processes and reads their identity.

Captures, per process:
- short name, parent pid and start tick from ``<root>/<pid>/stat``
- executable path from the ``exe`` symlink
- working directory from the ``cwd`` symlink

Pids are yielded in the order the directory listing returns them.  No
sort is applied: the ``first`` reconciliation strategy depends on this
order (kernel-reported, no guaranteed total order).

A process can exit between being listed and being read.  When that
happens to the stat file the process is skipped and the scan continues.
Unreadable ``exe``/``cwd`` links are reported as empty strings.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from pidfinder.core.models import ProcessRecord

logger = logging.getLogger(__name__)

DEFAULT_PROC_ROOT = "/proc"

# 1-based field numbers from proc(5), counted from the start of the line
_STAT_PPID_FIELD = 4
_STAT_STARTTIME_FIELD = 22
# Fields 1 (pid) and 2 (comm) precede the split point after ")"
_FIELDS_BEFORE_STATE = 2


def parse_stat(text: str) -> tuple[str, int, int]:
    """Parse a stat line into ``(name, ppid, start)``.

    The command name is wrapped in parentheses and may itself contain
    spaces or parentheses, so it is taken up to the *last* ``)``.

    Raises ``ValueError`` on malformed input.
    """
    open_idx = text.find("(")
    close_idx = text.rfind(")")
    if open_idx < 0 or close_idx < open_idx:
        raise ValueError(f"malformed stat line: {text[:80]!r}")
    name = text[open_idx + 1:close_idx]
    rest = text[close_idx + 1:].split()
    ppid_idx = _STAT_PPID_FIELD - _FIELDS_BEFORE_STATE - 1
    start_idx = _STAT_STARTTIME_FIELD - _FIELDS_BEFORE_STATE - 1
    if len(rest) <= start_idx:
        raise ValueError(f"truncated stat line: {text[:80]!r}")
    return name, int(rest[ppid_idx]), int(rest[start_idx])


class ProcFS:
    """Read-only view of a procfs mount.

    Parameters
    ----------
    root:
        Mount point of procfs.  Tests point this at a fake tree.
    """

    def __init__(self, root: str | Path = DEFAULT_PROC_ROOT) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def is_mounted(self) -> bool:
        """Return ``True`` if the procfs root is present."""
        return self._root.is_dir()

    def list_pids(self) -> list[int]:
        """Return every numeric entry of the root in listing order."""
        return [
            int(entry) for entry in os.listdir(self._root)
            if entry.isascii() and entry.isdigit()
        ]

    def read_stat(self, pid: int) -> tuple[str, int, int]:
        """Read and parse ``<root>/<pid>/stat``.

        Not guarded: ``OSError`` and ``ValueError`` propagate so the
        caller can apply the vanished-process policy.
        """
        text = (self._root / str(pid) / "stat").read_text(
            encoding="utf-8", errors="replace"
        )
        return parse_stat(text)

    def read_link(self, pid: int, name: str) -> str:
        """Resolve ``<root>/<pid>/<name>``, or ``""`` if it cannot be read."""
        try:
            return os.readlink(self._root / str(pid) / name)
        except OSError as e:
            logger.debug("Could not read %s link of pid %d: %s", name, pid, e)
            return ""

    def read_record(self, pid: int) -> ProcessRecord | None:
        """Build a :class:`ProcessRecord`, or ``None`` if the process vanished."""
        try:
            name, ppid, start = self.read_stat(pid)
        except (OSError, ValueError) as e:
            logger.debug("Skipping pid %d, stat unreadable: %s", pid, e)
            return None
        return ProcessRecord(
            pid=pid,
            ppid=ppid,
            name=name,
            path=self.read_link(pid, "exe"),
            cwd=self.read_link(pid, "cwd"),
            start=start,
        )

    def iter_records(self) -> Iterator[ProcessRecord]:
        """Yield one record per live process, lazily and in listing order."""
        for pid in self.list_pids():
            record = self.read_record(pid)
            if record is not None:
                yield record
