from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _ConsoleNoiseFilter(logging.Filter):
    """Keep taskboard logs; only let third-party loggers through at WARNING+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "taskboard" or record.name.startswith("taskboard."):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_dir: Optional[Union[str, Path]] = None,
) -> None:
    """
    Configure the root logger once, early in process startup.

    Console output goes to stderr. When ``log_dir`` is given, everything
    at DEBUG and above is also written to ``<log_dir>/taskboard.log``.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if log_dir else level)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_dir / "taskboard.log"), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    logging.captureWarnings(True)
