"""Logging utilities for specgen commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "specgen"


class ComponentFormatter(logging.Formatter):
    """Console formatter tagging each line with the emitting pipeline stage.

    ``specgen.generator.schema`` renders as ``[specgen:generator.schema]`` so
    verbose runs show which stage produced a diagnostic.
    """

    def __init__(self, *, show_component: bool = False) -> None:
        super().__init__("%(tag)s %(levelname)s %(message)s")
        self.show_component = show_component

    def format(self, record: logging.LogRecord) -> str:
        component = record.name[len(_LOGGER_NAME) + 1:] if record.name.startswith(f"{_LOGGER_NAME}.") else ""
        record.tag = f"[{_LOGGER_NAME}:{component}]" if self.show_component and component else f"[{_LOGGER_NAME}]"
        return super().format(record)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``specgen.<name>``, the logger for one pipeline stage."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Route specgen logs to stderr (and ``log_file``); verbose adds DEBUG and stage tags."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated CLI invocations in one process would otherwise duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(ComponentFormatter(show_component=verbose))
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["ComponentFormatter", "configure_logging", "get_logger"]
