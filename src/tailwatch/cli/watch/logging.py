"""Centralized logging for tailwatch (component loggers and CLI formatting)."""

from __future__ import annotations

import logging
from enum import Enum

from tailwatch.utils import PrefixedLogHandler

ROOT_LOGGER_NAME = "tailwatch"


class LogComponent(str, Enum):
    """Where a log originated (used for prefixes and filtering)."""

    SERVICE = "service"
    SUPERVISOR = "supervisor"
    TAILWIND = "tailwind"
    DETECT = "detect"
    BINARY = "binary"
    BUILD = "build"
    PROCESS_CONTROL = "process_control"
    CONFIG = "config"


_COMPONENT_COLOR: dict[LogComponent, str] = {
    LogComponent.SERVICE: "bright_blue",
    LogComponent.SUPERVISOR: "bright_blue",
    LogComponent.TAILWIND: "cyan",
    LogComponent.DETECT: "magenta",
    LogComponent.BINARY: "magenta",
    LogComponent.BUILD: "green",
    LogComponent.PROCESS_CONTROL: "bright_blue",
    LogComponent.CONFIG: "magenta",
}


def get_logger(component: LogComponent) -> logging.Logger:
    """Get the logger for a component (do not call stdlib logging directly)."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{component.value}")


def configure_logging(*, verbose: bool = False) -> None:
    """Print all component logs to the console with a per-component prefix.

    Safe to call more than once; handlers are replaced, not stacked.
    """
    level = logging.DEBUG if verbose else logging.INFO

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.propagate = False

    width = max(len(component.value) for component in LogComponent)
    for component in LogComponent:
        logger = get_logger(component)
        logger.setLevel(level)
        logger.handlers.clear()
        handler = PrefixedLogHandler(
            component.value, _COMPONENT_COLOR[component], width=width
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
