"""Launch, relay and tear down one Tailwind watcher subprocess per target.

Each launched watcher becomes a `ManagedProcess` owned by the supervisor:
- its stdout/stderr are relayed line by line to the `tailwind` logger,
- a binding task kills its process tree as soon as the shared shutdown event
  is set,
- `stop_all()` kills whatever is left and releases every handle.

Launch failures are scoped to their target. Teardown failures are scoped to
their process.
"""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
from collections.abc import Callable
from contextlib import suppress
from pathlib import Path

from tailwatch.cli.watch.logging import LogComponent, get_logger
from tailwatch.cli.watch.process_control import (
    TrackedProcess,
    kill_process_tree,
    track_process,
)
from tailwatch.constants import STREAM_LINE_LIMIT, TEARDOWN_TIMEOUT
from tailwatch.models import WatchTarget
from tailwatch.tailwind import build_watch_command

logger = get_logger(LogComponent.SUPERVISOR)
tailwind_logger = get_logger(LogComponent.TAILWIND)


class ManagedProcess:
    """A running watcher and everything tied to its lifetime."""

    def __init__(
        self,
        target: WatchTarget,
        output: Path,
        process: asyncio.subprocess.Process,
        tracked: TrackedProcess | None,
    ) -> None:
        self.target: WatchTarget = target
        self.output: Path = output
        self.process: asyncio.subprocess.Process = process
        self.tracked: TrackedProcess | None = tracked
        self.binding: asyncio.Task[None] | None = None
        self.tasks: list[asyncio.Task[None]] = []
        self.killed: bool = False

    @property
    def running(self) -> bool:
        return self.process.returncode is None


KillFn = Callable[[ManagedProcess], None]


def kill_managed_process(managed: ManagedProcess) -> None:
    """Kill a watcher together with every process it spawned."""
    tp = managed.tracked or track_process(managed.process.pid)
    if tp is None:
        with suppress(ProcessLookupError):
            managed.process.kill()
        return
    kill_process_tree(tp, name=f"watcher for {managed.target.input}")


class ProcessSupervisor:
    """Owns the watcher subprocesses of one service instance."""

    def __init__(
        self,
        root: Path,
        shutdown: asyncio.Event,
        *,
        kill: KillFn = kill_managed_process,
        teardown_timeout: float = TEARDOWN_TIMEOUT,
    ) -> None:
        self.root: Path = root
        self._shutdown: asyncio.Event = shutdown
        self._kill: KillFn = kill
        self._teardown_timeout: float = teardown_timeout
        self._processes: list[ManagedProcess] = []
        self._closed: bool = False

    @property
    def processes(self) -> tuple[ManagedProcess, ...]:
        return tuple(self._processes)

    async def _spawn(self, command: list[str]) -> asyncio.subprocess.Process:
        # Own session/process group so the whole tree can be killed.
        creationflags = 0
        start_new_session = False
        if os.name == "nt":
            creationflags = subprocess.CREATE_NEW_PROCESS_GROUP  # type: ignore[attr-defined]
        else:
            start_new_session = True

        # Tailwind's watch mode exits when stdin closes, so hold a pipe open.
        return await asyncio.create_subprocess_exec(
            *command,
            cwd=self.root,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            limit=STREAM_LINE_LIMIT,
            start_new_session=start_new_session,
            creationflags=creationflags,
        )

    async def launch(
        self, binary: Path, target: WatchTarget
    ) -> ManagedProcess | None:
        """Start a watcher for `target`.

        Returns None, after logging the reason, if the watcher could not be
        started. Other targets are never affected.
        """
        if self._closed:
            logger.warning(
                f"Not starting watcher for {target.input}: supervisor is stopping"
            )
            return None

        if not target.resolve_input(self.root).is_file():
            logger.error(
                f"Failed to start Tailwind watcher for {target.input}: "
                "input file does not exist"
            )
            return None

        output = target.resolve_output(self.root)
        command = build_watch_command(binary, target.input, output)
        logger.debug(f"Running: {' '.join(command)}")
        try:
            process = await self._spawn(command)
        except Exception as e:
            logger.error(f"Failed to start Tailwind watcher for {target.input}: {e}")
            return None

        managed = ManagedProcess(target, output, process, track_process(process.pid))
        if self._closed:
            # Teardown started while the process was being spawned.
            await self._release(managed)
            return None

        managed.tasks = [
            asyncio.create_task(self._relay(process.stdout, target, logging.INFO)),
            asyncio.create_task(self._relay(process.stderr, target, logging.ERROR)),
            asyncio.create_task(self._monitor_exit(managed)),
        ]
        managed.binding = asyncio.create_task(self._kill_on_shutdown(managed))
        self._processes.append(managed)

        logger.info(f"Started watching: {target.input} -> {output}")
        return managed

    async def _relay(
        self, stream: asyncio.StreamReader | None, target: WatchTarget, level: int
    ) -> None:
        """Log each non-blank line of a watcher stream until it closes."""
        if stream is None:
            return
        while True:
            try:
                raw = await stream.readline()
            except ValueError:
                # The reader has already discarded the oversized line.
                logger.warning(
                    f"Dropped an output line of {target.input} longer than "
                    f"{STREAM_LINE_LIMIT} bytes"
                )
                continue
            if not raw:
                return
            line = raw.decode("utf-8", errors="replace").strip()
            if line:
                tailwind_logger.log(
                    level,
                    f"[Tailwind][{target.input}] {line}",
                    extra={"input_path": target.input},
                )

    async def _monitor_exit(self, managed: ManagedProcess) -> None:
        returncode = await managed.process.wait()
        if managed.killed:
            return
        # Watchers are not restarted; the exit is only reported.
        message = (
            f"Tailwind watcher for {managed.target.input} exited with code {returncode}"
        )
        if returncode == 0:
            logger.warning(message)
        else:
            logger.error(message)

    async def _kill_on_shutdown(self, managed: ManagedProcess) -> None:
        await self._shutdown.wait()
        self._terminate(managed)

    def _terminate(self, managed: ManagedProcess) -> None:
        """Kill a watcher once; later calls are no-ops."""
        if managed.killed:
            return
        managed.killed = True
        if not managed.running:
            return
        try:
            self._kill(managed)
        except Exception as e:
            logger.warning(
                f"Error while killing watcher for {managed.target.input}: {e}"
            )

    async def _release(self, managed: ManagedProcess) -> None:
        if managed.binding is not None and not managed.binding.done():
            managed.binding.cancel()
        self._terminate(managed)

        try:
            await asyncio.wait_for(
                managed.process.wait(), timeout=self._teardown_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Watcher for {managed.target.input} did not exit within "
                f"{self._teardown_timeout}s"
            )

        # Readers end on their own once the pipes close; give them a moment.
        pending = [task for task in managed.tasks if not task.done()]
        if pending:
            _, still_pending = await asyncio.wait(pending, timeout=0.5)
            for task in still_pending:
                task.cancel()

        leftovers = list(managed.tasks)
        if managed.binding is not None:
            leftovers.append(managed.binding)
        await asyncio.gather(*leftovers, return_exceptions=True)
        managed.tasks = []
        managed.binding = None

    async def stop_all(self) -> None:
        """Kill and release every watcher. Safe to call more than once."""
        self._closed = True
        processes, self._processes = self._processes, []
        for managed in processes:
            try:
                await self._release(managed)
            except Exception as e:
                logger.warning(
                    f"Error while disposing watcher for {managed.target.input}: {e}"
                )
        if processes:
            logger.info(f"Stopped {len(processes)} Tailwind watcher(s)")
