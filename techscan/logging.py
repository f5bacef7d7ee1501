"""Logging utilities for techscan commands and services."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

_LOGGER_NAME = "techscan"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the techscan hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install a stderr handler (and optional file sink) on the techscan logger."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated configuration in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter("[techscan] %(levelname)s %(message)s"))
    logger.addHandler(console)

    if log_file is not None:
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(level)
        sink.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(sink)

    return logger


@contextmanager
def log_stage(logger: logging.Logger, label: str) -> Iterator[None]:
    """Log start, duration and failure of one pipeline stage; errors are re-raised."""
    started = time.perf_counter()
    logger.info("=== %s ===", label)
    try:
        yield
    except Exception:
        logger.exception("%s failed", label)
        raise
    logger.debug("%s finished in %.2fs", label, time.perf_counter() - started)


__all__ = ["configure_logging", "get_logger", "log_stage"]
