"""Logging setup for the HTTP service.

Writes to the console plus two files under ``logs/``:
- info.log: INFO level and above
- error.log: ERROR level and above

Library code only uses module loggers; handlers are installed by the
service entry point.
"""

import logging
import sys
from pathlib import Path

from slashfill.core.config import Settings, get_settings

DEFAULT_LOG_DIR = Path(__file__).parent.parent.parent / "logs"


def setup_logging(settings: Settings | None = None, log_dir: Path | None = None) -> logging.Logger:
    """Install console and file handlers on the root logger.

    Args:
        settings: Settings providing the log level. Defaults to global settings.
        log_dir: Directory for the log files. Defaults to ``logs/`` in the project root.

    Returns:
        The configured root logger.
    """
    settings = settings or get_settings()
    level = logging.DEBUG if settings.log_level == "DEBUG" else logging.INFO

    log_dir = log_dir or DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    detailed_formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    simple_formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    info_handler = logging.FileHandler(log_dir / "info.log", encoding="utf-8")
    info_handler.setLevel(logging.INFO)
    info_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(info_handler)

    error_handler = logging.FileHandler(log_dir / "error.log", encoding="utf-8")
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(error_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(simple_formatter)
    root_logger.addHandler(console_handler)

    return root_logger
