import logging
import time
from collections.abc import Generator
from contextlib import contextmanager

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from typing_extensions import override

# Tailwind prints UTF-8 (checkmarks, arrows); keep it intact on Windows consoles.
console = Console(legacy_windows=False)


def format_elapsed_ms(start_time_perf: float) -> str:
    """Format the time since `start_time_perf` as `850ms` or `2s 40ms`."""
    elapsed_seconds = time.perf_counter() - start_time_perf
    if elapsed_seconds < 1:
        return f"{int(elapsed_seconds * 1000)}ms"
    seconds = int(elapsed_seconds)
    remaining_ms = int((elapsed_seconds - seconds) * 1000)
    return f"{seconds}s {remaining_ms}ms"


@contextmanager
def progress_spinner(
    description: str, success_message: str
) -> Generator[float, None, None]:
    """Show a transient spinner while a build runs.

    The success message, with the elapsed time appended, is printed only if
    the block completes without raising. Yields the perf_counter start time.
    """
    phase_start = time.perf_counter()

    with Progress(
        SpinnerColumn(finished_text=""),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(description, total=None)
        yield phase_start

    console.print(f"{success_message} ({format_elapsed_ms(phase_start)})")


def print_with_prefix(prefix: str, text: str, color: str, width: int = 10):
    """Print `<timestamp> | <prefix> | <text>`, one row per line of text.

    Relayed Tailwind output may contain `[` characters, so both the prefix
    and the text are escaped before rich renders them.
    """
    now = time.time()
    timestamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(now))
    timestamp = f"{timestamp}.{int((now % 1) * 1000):03d}"

    padded_prefix = escape(prefix.ljust(width))
    for line in text.split("\n"):
        console.print(f"{timestamp} | [{color}]{padded_prefix}[/] | {escape(line)}")


class PrefixedLogHandler(logging.Handler):
    """Render records of one tailwatch component through `print_with_prefix`.

    Warnings are shown in yellow and errors in red, whatever the component's
    own color is.
    """

    def __init__(self, prefix: str, color: str, width: int = 10):
        super().__init__()
        self.prefix: str = prefix
        self.color: str = color
        self.width: int = width

    @override
    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            color = self.color
            if record.levelno >= logging.ERROR:
                color = "red"
            elif record.levelno >= logging.WARNING:
                color = "yellow"

            print_with_prefix(self.prefix, msg, color, width=self.width)
        except Exception:
            self.handleError(record)
