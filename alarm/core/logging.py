"""
Logging setup — console plus a dated log file under ~/.alarm/logs.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path


def get_alarm_home() -> Path:
    """Get the Alarm home directory."""
    return Path.home() / ".alarm"


def setup_logging(
    log_dir: Path | None = None,
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> logging.Logger:
    """
    Setup Alarm logging.

    Args:
        log_dir: Directory for log files (default: ~/.alarm/logs)
        console_level: Minimum level for console output
        file_level: Minimum level for file output

    Returns:
        The configured logger
    """
    log_dir = log_dir or (get_alarm_home() / "logs")

    logger = logging.getLogger("alarm")
    logger.setLevel(logging.DEBUG)

    # Clear existing handlers
    logger.handlers = []

    # Console handler (minimal output, stderr so it never mixes with alerts)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(console_handler)

    # File handler (detailed output); skipped when the home dir is read-only
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"alarm_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as e:
        logger.warning(f"File logging disabled: {e}")
        return logger

    file_handler.setLevel(file_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(file_handler)

    logger.info(f"Logging initialized. File: {log_file}")

    return logger
