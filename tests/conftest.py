"""Shared test fixtures for pidfinder."""

from __future__ import annotations

import os
from pathlib import Path

import pytest


def stat_line(pid: int, name: str, ppid: int, start: int) -> str:
    """Return a realistic ``/proc/<pid>/stat`` line."""
    # Fields 3..52 per proc(5); only ppid (4) and starttime (22) matter here
    fields = ["S", str(ppid)] + ["0"] * 17 + [str(start)] + ["0"] * 30
    return f"{pid} ({name}) " + " ".join(fields) + "\n"


class FakeProcfs:
    """Builds a procfs-like tree of real files and symlinks under tmp_path."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def add(
        self,
        pid: int,
        name: str,
        ppid: int = 1,
        start: int = 100,
        exe: str | None = "/usr/bin/true",
        cwd: str | None = "/",
    ) -> Path:
        """Add a process. ``exe``/``cwd`` of ``None`` leave the link missing."""
        proc_dir = self.root / str(pid)
        proc_dir.mkdir()
        (proc_dir / "stat").write_text(stat_line(pid, name, ppid, start))
        if exe is not None:
            os.symlink(exe, proc_dir / "exe")
        if cwd is not None:
            os.symlink(cwd, proc_dir / "cwd")
        return proc_dir


@pytest.fixture
def fake_procfs(tmp_path):
    """Provide an empty fake procfs root."""
    return FakeProcfs(tmp_path / "proc")
