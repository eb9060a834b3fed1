"""Killing a watcher together with every process it spawned.

A watcher is recorded right after launch as a `TrackedProcess`. The record
holds the process group (POSIX) and the creation time, so a kill issued
during teardown can never hit an unrelated process that reused the pid.
"""

from __future__ import annotations

import os
import signal
from typing import ClassVar

import psutil
from pydantic import BaseModel, ConfigDict

from tailwatch.cli.watch.logging import LogComponent, get_logger

logger = get_logger(LogComponent.PROCESS_CONTROL)

# Creation times are reported as floats; allow for rounding.
CREATE_TIME_TOLERANCE = 0.001


class TrackedProcess(BaseModel):
    """A launched watcher, identified by pid and creation time."""

    pid: int
    create_time: float
    pgid: int | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    def lookup(self) -> psutil.Process | None:
        """Return the live process, or None if it is gone or the pid was reused."""
        try:
            proc = psutil.Process(self.pid)
            if abs(proc.create_time() - self.create_time) > CREATE_TIME_TOLERANCE:
                return None
            return proc
        except psutil.Error:
            return None

    def descendants(self) -> list[psutil.Process]:
        proc = self.lookup()
        if proc is None:
            return []
        try:
            return proc.children(recursive=True)
        except psutil.Error:
            return []


def track_process(pid: int) -> TrackedProcess | None:
    """Record a just-launched watcher. Returns None if it already exited."""
    try:
        create_time = psutil.Process(pid).create_time()
    except psutil.Error:
        return None

    pgid = None
    if os.name != "nt":
        try:
            pgid = os.getpgid(pid)
        except OSError:
            pass
    return TrackedProcess(pid=pid, create_time=create_time, pgid=pgid)


def kill_process_tree(tp: TrackedProcess, *, name: str, timeout: float = 2.0) -> None:
    """SIGKILL a watcher and its descendants.

    On POSIX the whole process group goes first; helpers that left the group
    are then killed one by one. Windows has no groups, so every descendant is
    killed individually before the root.
    """
    root = tp.lookup()
    # Collect descendants before the root dies and they get reparented.
    descendants = tp.descendants()
    logger.debug(f"Killing {name} pid={tp.pid} ({len(descendants)} descendant(s))")

    if tp.pgid is not None:
        try:
            os.killpg(tp.pgid, signal.SIGKILL)
        except ProcessLookupError:
            pass

    for proc in [*descendants, *([root] if root is not None else [])]:
        try:
            proc.kill()
        except psutil.NoSuchProcess:
            continue
    # The root is reaped by asyncio; only the descendants are waited on here.
    psutil.wait_procs(descendants, timeout=timeout)
