"""Logging setup for the advisory CRM service."""
import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "advisory_crm"


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Configure and return the package logger.

    Every module logs through ``logging.getLogger(__name__)``, so configuring
    the ``advisory_crm`` parent once is enough. Calling this again is a no-op.

    Args:
        level: Logging level (name or number).
        log_file: Optional path to a log file. If None, logs to stderr only.

    Returns:
        The configured package logger.
    """
    log = logging.getLogger(LOGGER_NAME)
    if log.handlers:
        return log

    log.setLevel(level)
    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    h = logging.StreamHandler(sys.stderr)
    h.setFormatter(fmt)
    log.addHandler(h)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(fmt)
        log.addHandler(fh)

    return log
