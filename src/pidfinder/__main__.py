"""Entry point for pidfinder.

Resolves one process id from regex criteria and prints it:
  1. Configuration (YAML file, then command-line overrides)
  2. Logging
  3. Optional memory reclaimer
  4. One procfs scan

Usage:
    python -m pidfinder --name nginx --reconcile parent
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pidfinder import __version__
from pidfinder.core.config import FinderConfig, default_config_path
from pidfinder.core.models import Reconcile

logger = logging.getLogger("pidfinder")

_HANDLER_NAME = "pidfinder-cli"


def _setup_logging(config: FinderConfig, verbose: bool = False) -> None:
    """Configure logging with a console and an optional rotating file handler."""
    root_logger = logging.getLogger()
    # Repeated main() calls in one process must not stack handlers
    for handler in [h for h in root_logger.handlers if h.get_name() == _HANDLER_NAME]:
        root_logger.removeHandler(handler)
        handler.close()
    level_name = "DEBUG" if verbose else str(config.get("logging.level", "WARNING"))
    root_logger.setLevel(getattr(logging, level_name.upper(), logging.WARNING))

    fmt = logging.Formatter(
        "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
    )

    console = logging.StreamHandler()
    console.set_name(_HANDLER_NAME)
    console.setFormatter(fmt)
    root_logger.addHandler(console)

    log_file = config.get("logging.file")
    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=int(config.get("logging.max_bytes", 10 * 1024 * 1024)),
            backupCount=int(config.get("logging.backup_count", 5)),
            encoding="utf-8",
        )
        file_handler.set_name(_HANDLER_NAME)
        file_handler.setFormatter(fmt)
        root_logger.addHandler(file_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pidfinder",
        description="Find a single process id by name, path and cwd regex.",
    )
    parser.add_argument("--name", dest="process_name", help="regex for the process name")
    parser.add_argument("--path", dest="process_path", help="regex for the executable path")
    parser.add_argument("--cwd", dest="process_cwd", help="regex for the working directory")
    parser.add_argument(
        "--reconcile",
        help="strategy when several processes match: "
        + ", ".join(r.value for r in Reconcile),
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"YAML config file (default: {default_config_path()})",
    )
    parser.add_argument("--procfs", help="procfs mount point (default: /proc)")
    parser.add_argument("--json", action="store_true", help="print the result as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _apply_overrides(config: FinderConfig, args: argparse.Namespace) -> None:
    for key in ("process_name", "process_path", "process_cwd", "reconcile"):
        value = getattr(args, key)
        if value is not None:
            config.set(f"match.{key}", value)
    if args.procfs:
        config.set("procfs.root", args.procfs)


def main(argv: list[str] | None = None) -> int:
    """Resolve a pid and print it. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    config_path = args.config or default_config_path()
    config = FinderConfig.load(config_path)
    _apply_overrides(config, args)

    _setup_logging(config, verbose=args.verbose)
    logger.debug("pidfinder v%s, config from %s", __version__, config_path)

    if config.get("reclaim.enabled", False):
        from pidfinder.core.reclaimer import start_reclaimer

        start_reclaimer(float(config.get("reclaim.interval_seconds", 5.0)))

    from pidfinder.detection.pipeline import ProcessFinder
    from pidfinder.sensors.procfs import ProcFS

    finder = ProcessFinder(procfs=ProcFS(config.get("procfs.root", "/proc")))
    result = finder.resolve(config.criteria())

    if args.json:
        print(json.dumps(result.to_dict()))
    elif result.ok:
        print(result.pid)
    else:
        print(result.reason, file=sys.stderr)
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
