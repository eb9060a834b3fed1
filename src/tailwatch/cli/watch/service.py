"""Top-level watcher service: resolve inputs and binary, start and stop watchers.

Lifecycle:

    NOT_STARTED -> STARTING -> RUNNING -> STOPPING -> STOPPED
                       |
                       +-> FAILED (binary could not be resolved)

The embedding application owns the shutdown event. Setting it kills every
watcher (via the supervisor's bindings) and ends `run()`, which then performs
the teardown exactly once.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from tailwatch.cli.watch.binary import BinaryNotFoundError, locate_binary
from tailwatch.cli.watch.detect import resolve_targets
from tailwatch.cli.watch.logging import LogComponent, get_logger
from tailwatch.cli.watch.supervisor import (
    KillFn,
    ManagedProcess,
    ProcessSupervisor,
    kill_managed_process,
)
from tailwatch.models import WatcherOptions, WatcherState, WatchTarget

logger = get_logger(LogComponent.SERVICE)


class WatcherStateError(RuntimeError):
    """An operation was requested in a state that does not allow it."""


class WatcherService:
    """Runs one Tailwind watcher per input until shutdown is requested."""

    def __init__(
        self,
        options: WatcherOptions,
        *,
        shutdown: asyncio.Event | None = None,
        kill: KillFn = kill_managed_process,
    ) -> None:
        self.options: WatcherOptions = options
        if shutdown is None:
            shutdown = asyncio.Event()
        self.shutdown: asyncio.Event = shutdown
        self._kill: KillFn = kill
        self._state: WatcherState = WatcherState.NOT_STARTED
        self._supervisor: ProcessSupervisor | None = None
        self.root: Path | None = None
        self.binary: Path | None = None
        self.targets: tuple[WatchTarget, ...] = ()

    @property
    def state(self) -> WatcherState:
        return self._state

    @property
    def processes(self) -> tuple[ManagedProcess, ...]:
        if self._supervisor is None:
            return ()
        return self._supervisor.processes

    async def start(self) -> None:
        """Resolve targets and binary, then launch a watcher per target.

        Raises:
            WatcherStateError: the service was already started.
            BinaryNotFoundError: no usable binary; the service is FAILED and
                nothing was launched.
        """
        if self._state is not WatcherState.NOT_STARTED:
            raise WatcherStateError(
                f"Cannot start a watcher in state {self._state.value}"
            )
        self._state = WatcherState.STARTING

        root = self.options.resolve_root()
        self.root = root
        try:
            self.targets = resolve_targets(self.options, root)
            self.binary = locate_binary(root)
        except BinaryNotFoundError:
            self._state = WatcherState.FAILED
            raise
        except Exception as e:
            self._state = WatcherState.FAILED
            logger.error(f"Failed to resolve Tailwind inputs: {e}")
            raise

        supervisor = ProcessSupervisor(root, self.shutdown, kill=self._kill)
        self._supervisor = supervisor
        for target in self.targets:
            if self.shutdown.is_set():
                break
            await supervisor.launch(self.binary, target)

        if self._state is WatcherState.STARTING:
            self._state = WatcherState.RUNNING
            logger.info(
                f"Watching {len(supervisor.processes)} of {len(self.targets)} "
                "Tailwind input(s)"
            )

    async def stop(self) -> None:
        """Tear down all watchers. Only the first call does any work."""
        if self._state in (
            WatcherState.STOPPING,
            WatcherState.STOPPED,
            WatcherState.FAILED,
        ):
            return
        self._state = WatcherState.STOPPING

        supervisor, self._supervisor = self._supervisor, None
        if supervisor is not None:
            await supervisor.stop_all()

        self._state = WatcherState.STOPPED
        logger.debug("Tailwind watcher service stopped")

    async def run(self) -> None:
        """Start, hold until the shutdown event is set, then stop."""
        try:
            await self.start()
            await self.shutdown.wait()
        finally:
            await self.stop()
