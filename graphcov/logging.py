"""Logging utilities for graphcov commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "graphcov"
_QUIET_FORMAT = "[graphcov] %(levelname)s %(message)s"
_VERBOSE_FORMAT = "[graphcov:%(stage)s] %(levelname)s %(message)s"


class _StageFilter(logging.Filter):
    """Tag records with the pipeline stage, e.g. ``loader`` for graphcov.loader."""

    def filter(self, record: logging.LogRecord) -> bool:
        prefix = f"{_LOGGER_NAME}."
        name = record.name
        record.stage = name[len(prefix) :] if name.startswith(prefix) else "main"
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the graphcov hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the graphcov logger.

    Records go to stderr, since stdout carries the JSON report. Verbose mode
    lowers the level to DEBUG (per-file tokenizer errors, effective
    configuration) and prefixes each line with its pipeline stage.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.addFilter(_StageFilter())
    stream_handler.setFormatter(logging.Formatter(_VERBOSE_FORMAT if verbose else _QUIET_FORMAT))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
