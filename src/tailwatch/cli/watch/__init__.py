"""Watch command group: supervise Tailwind CLI watchers for a project."""

from tailwatch.cli.watch.binary import (
    BinaryDirectoryNotFoundError,
    BinaryNotFoundError,
    locate_binary,
)
from tailwatch.cli.watch.detect import ProjectFileError, resolve_targets
from tailwatch.cli.watch.service import WatcherService, WatcherStateError
from tailwatch.cli.watch.supervisor import ManagedProcess, ProcessSupervisor
from tailwatch.models import WatcherOptions, WatcherState, WatchTarget

__all__ = [
    "BinaryDirectoryNotFoundError",
    "BinaryNotFoundError",
    "ManagedProcess",
    "ProcessSupervisor",
    "ProjectFileError",
    "WatchTarget",
    "WatcherOptions",
    "WatcherService",
    "WatcherState",
    "WatcherStateError",
    "locate_binary",
    "resolve_targets",
]
