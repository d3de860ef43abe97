"""pidfinder — resolve one process id from regex match criteria on procfs hosts."""

from pidfinder.detection.pipeline import ProcessFinder, resolve_process_id
from pidfinder.labels import format_source

__version__ = "0.1.0"

__all__ = [
    "ProcessFinder",
    "__version__",
    "format_source",
    "resolve_process_id",
]
