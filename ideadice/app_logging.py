"""Log file setup.

Textual owns the terminal while the app runs, so log records go to a
rotating file instead of the console.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s"
)


def configure_logging(
    log_dir: Path,
    level: int = logging.DEBUG,
    max_bytes: int = 1024 * 1024,
    backup_count: int = 3,
) -> logging.Handler:
    """Send all records to ``log_dir/ideadice.log`` and return the handler."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        log_dir / "ideadice.log",
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(level)
    # Replace a handler left over from an earlier call.
    for old in [h for h in root.handlers if getattr(h, "_ideadice", False)]:
        root.removeHandler(old)
        old.close()
    handler._ideadice = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    return handler
