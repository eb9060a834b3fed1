"""Watch command for the tailwatch CLI."""

import asyncio
import signal
from contextlib import suppress
from pathlib import Path
from typing import Annotated

from typer import Argument, Exit, Option

from tailwatch.cli.watch.binary import BinaryNotFoundError
from tailwatch.cli.watch.detect import ProjectFileError
from tailwatch.cli.watch.logging import configure_logging
from tailwatch.cli.watch.service import WatcherService
from tailwatch.config import ConfigError, load_watch_options, parse_target
from tailwatch.models import WatcherOptions
from tailwatch.utils import console


async def run_watcher(options: WatcherOptions) -> None:
    """Run the watcher service until SIGINT/SIGTERM."""
    shutdown = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # Windows event loops don't support signal handlers.
        with suppress(NotImplementedError):
            loop.add_signal_handler(sig, shutdown.set)

    await WatcherService(options, shutdown=shutdown).run()


def watch(
    root_directory: Annotated[
        Path | None,
        Argument(
            help="The directory containing the project. If not provided, current working directory will be used"
        ),
    ] = None,
    auto_detect: Annotated[
        bool | None,
        Option(
            "--auto-detect/--no-auto-detect",
            help="Detect inputs from TailwindInput elements of the project file",
        ),
    ] = None,
    inputs: Annotated[
        list[str] | None,
        Option(
            "--input",
            "-i",
            help="Stylesheet to watch, as INPUT[=OUTPUT]. Can be repeated",
        ),
    ] = None,
    config_file: Annotated[
        Path | None,
        Option(
            "--config",
            help="TOML file with a [tool.tailwatch] table (default: pyproject.toml)",
        ),
    ] = None,
    verbose: Annotated[bool, Option("--verbose", "-v", help="Show debug logs")] = False,
) -> None:
    """Run a Tailwind CLI watcher for every input until interrupted."""
    configure_logging(verbose=verbose)

    try:
        targets = [parse_target(value) for value in inputs or []]
        options = load_watch_options(
            root_directory,
            config_file,
            auto_detect=auto_detect,
            inputs=targets,
        )
    except ConfigError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise Exit(code=1)

    if not options.inputs and not options.auto_detect:
        console.print(
            "[yellow]⚠️  No inputs configured; pass --input or --auto-detect[/yellow]"
        )

    try:
        asyncio.run(run_watcher(options))
    except (BinaryNotFoundError, ProjectFileError) as e:
        console.print(f"[red]❌ {e}[/red]")
        raise Exit(code=1)
    except KeyboardInterrupt:
        # Only reachable where signal handlers are unsupported; teardown ran in run().
        pass

    console.print("[green]✅ Tailwind watchers stopped[/green]")
