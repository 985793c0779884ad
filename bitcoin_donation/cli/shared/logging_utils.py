"""Loguru helpers for CLI logging."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from bitcoin_donation.config.loader import get_data_dir

_SINK_IDS: dict[str, int] = {}

STDERR_FORMAT = "<dim>{time:HH:mm:ss.SSS}</dim> | <level>{level: <8}</level> | <level>{message}</level>"


def configure_logging(*, verbose: bool, level: str = "INFO", log_file: bool = False) -> Path | None:
    """Enable package logs on stderr when verbose, optionally to a rotating file too."""
    if verbose:
        logger.remove()
        logger.add(sys.stderr, level="DEBUG", format=STDERR_FORMAT)
    path = ensure_rotating_log_file("bitcoin-donation", level="DEBUG" if verbose else level) if log_file else None
    if verbose or log_file:
        logger.enable("bitcoin_donation")
    else:
        logger.disable("bitcoin_donation")
    return path


def ensure_rotating_log_file(name: str, level: str = "INFO") -> Path:
    """Ensure a rotating log sink for the given command name."""
    log_path = get_data_dir() / "logs" / f"{name}.log"
    if name in _SINK_IDS:
        return log_path
    log_path.parent.mkdir(parents=True, exist_ok=True)
    _SINK_IDS[name] = logger.add(
        str(log_path),
        level=level,
        rotation="10 MB",
        retention="14 days",
        encoding="utf-8",
        backtrace=False,
        diagnose=False,
    )
    return log_path
