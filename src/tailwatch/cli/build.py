import os
import shutil
import subprocess
import tempfile
import time
import uuid
from pathlib import Path
from typing import Annotated

from typer import Argument, Exit, Option

from tailwatch.cli.watch.binary import BinaryNotFoundError, locate_binary
from tailwatch.cli.watch.logging import LogComponent, configure_logging, get_logger
from tailwatch.models import CommandResult
from tailwatch.tailwind import build_minify_command
from tailwatch.utils import console, format_elapsed_ms, progress_spinner

logger = get_logger(LogComponent.BUILD)


class BuildError(RuntimeError):
    """A one-shot Tailwind build failed."""

    def __init__(self, message: str, result: CommandResult | None = None):
        super().__init__(message)
        self.result: CommandResult | None = result


def run_tailwind(command: list[str], cwd: Path) -> CommandResult:
    """Run the Tailwind CLI to completion, capturing its output."""
    start = time.perf_counter()
    result = subprocess.run(
        command,
        cwd=cwd,
        capture_output=True,
        text=True,
        env=os.environ,
    )
    return CommandResult(
        command=command,
        cwd=str(cwd),
        returncode=result.returncode,
        stdout=result.stdout,
        stderr=result.stderr,
        duration_ms=int((time.perf_counter() - start) * 1000),
    )


def _temp_output_path(input_file: Path) -> Path:
    name = f"{input_file.stem}.{uuid.uuid4()}{input_file.suffix}"
    return Path(tempfile.gettempdir()) / name


def process_file(
    input_file: Path,
    cli_path: Path,
    *,
    output_directory: Path | None = None,
    project_directory: Path | None = None,
    in_place: bool = False,
) -> Path:
    """Compile and minify a single stylesheet with the Tailwind CLI.

    The output keeps the input's file name and goes to `output_directory`,
    or next to the input when no directory is given. With `in_place` the
    input itself is overwritten.

    Returns the path that was written.

    Raises:
        BuildError: invalid arguments, a failing CLI or a missing output.
    """
    project_directory = project_directory or Path.cwd()
    if not input_file.is_absolute():
        input_file = project_directory / input_file

    if not input_file.is_file():
        raise BuildError(f"Input file does not exist: {input_file}")
    if not cli_path.is_file():
        raise BuildError(f"Tailwind CLI not found at: {cli_path}")

    logger.info(f"Processing file: {input_file}")
    logger.debug(f"Output directory: {output_directory}")
    logger.debug(f"Tailwind CLI: {cli_path}")

    if output_directory is not None and not output_directory.is_dir():
        output_directory.mkdir(parents=True, exist_ok=True)
        logger.info(f"Created output directory: {output_directory}")

    if in_place:
        output_path = _temp_output_path(input_file)
    else:
        output_path = (output_directory or input_file.parent) / input_file.name

    command = build_minify_command(cli_path, input_file, output_path)
    logger.info(f"Running: {' '.join(command)}")

    try:
        try:
            result = run_tailwind(command, project_directory)
        except OSError as e:
            raise BuildError(f"Failed to start Tailwind CLI process: {e}") from e

        if result.stdout.strip():
            logger.info(result.stdout.strip())

        if not result.ok:
            message = f"Tailwind CLI exited with code {result.returncode}"
            logger.error(message)
            if result.stderr.strip():
                logger.error(result.stderr.strip())
            raise BuildError(message, result)

        if not output_path.is_file():
            raise BuildError(
                f"Expected output file was not created: {output_path}", result
            )

        if in_place:
            try:
                shutil.copyfile(output_path, input_file)
            except OSError as e:
                raise BuildError(
                    f"Failed to copy processed file back to original location: {e}",
                    result,
                ) from e
            logger.info(f"Updated file in-place: {input_file}")
            return input_file
    finally:
        if in_place:
            output_path.unlink(missing_ok=True)

    logger.info(f"Generated output file: {output_path}")
    return output_path


def build(
    input_file: Annotated[Path, Argument(help="The stylesheet to process")],
    cli_path: Annotated[
        Path | None,
        Option(
            "--cli-path",
            help="Path to the Tailwind CLI. Detected from the project's .tailwind directory if omitted",
        ),
    ] = None,
    output_directory: Annotated[
        Path | None,
        Option(help="Directory to write the processed file to (default: next to the input)"),
    ] = None,
    project_directory: Annotated[
        Path | None,
        Option(help="Directory relative inputs are resolved against (default: cwd)"),
    ] = None,
    in_place: Annotated[
        bool, Option("--in-place", help="Overwrite the input file with the result")
    ] = False,
    verbose: Annotated[bool, Option("--verbose", "-v", help="Show debug logs")] = False,
) -> None:
    """Compile and minify a stylesheet once with the Tailwind CLI."""
    configure_logging(verbose=verbose)
    project_directory = project_directory or Path.cwd()

    if cli_path is None:
        try:
            cli_path = locate_binary(project_directory)
        except BinaryNotFoundError as e:
            console.print(f"[red]❌ {e}[/red]")
            raise Exit(code=1)

    start_time_perf = time.perf_counter()
    try:
        with progress_spinner("🎨 Building stylesheet...", "✅ Stylesheet built"):
            output = process_file(
                input_file,
                cli_path,
                output_directory=output_directory,
                project_directory=project_directory,
                in_place=in_place,
            )
    except BuildError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise Exit(code=1)

    console.print(f"✅ Wrote {output} in ({format_elapsed_ms(start_time_perf)})")
