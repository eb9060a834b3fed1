"""Command lines for the Tailwind CLI.

The binary is invoked the same way at build time and at watch time: an input
file, an output file and a mode flag.
"""

from __future__ import annotations

from pathlib import Path

from tailwatch.constants import MINIFY_FLAG, WATCH_FLAG


def build_command(
    binary: Path | str, input_path: Path | str, output_path: Path | str, flag: str
) -> list[str]:
    return [
        str(binary),
        "--input",
        str(input_path),
        "--output",
        str(output_path),
        flag,
    ]


def build_watch_command(
    binary: Path | str, input_path: Path | str, output_path: Path | str
) -> list[str]:
    """Command line for a long-running watcher."""
    return build_command(binary, input_path, output_path, WATCH_FLAG)


def build_minify_command(
    binary: Path | str, input_path: Path | str, output_path: Path | str
) -> list[str]:
    """Command line for a single minified build."""
    return build_command(binary, input_path, output_path, MINIFY_FLAG)
