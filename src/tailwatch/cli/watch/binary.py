"""Locate the platform-specific Tailwind CLI binary under `<root>/.tailwind`."""

from __future__ import annotations

import sys
from pathlib import Path

from tailwatch.cli.watch.logging import LogComponent, get_logger
from tailwatch.constants import BINARY_PATTERNS, TAILWIND_DIR_NAME

logger = get_logger(LogComponent.BINARY)


class BinaryNotFoundError(FileNotFoundError):
    """No Tailwind CLI binary matches the running platform."""


class BinaryDirectoryNotFoundError(BinaryNotFoundError):
    """The `.tailwind` directory does not exist."""


def platform_family(platform: str | None = None) -> str:
    """Map `sys.platform` to one of the families in `BINARY_PATTERNS`.

    Linux and the BSDs share the linux binaries; anything unrecognised falls
    back to windows.
    """
    platform = sys.platform if platform is None else platform
    if platform == "darwin":
        return "macos"
    if platform.startswith(("linux", "freebsd", "openbsd", "netbsd")):
        return "linux"
    return "windows"


def locate_binary(root: Path, platform: str | None = None) -> Path:
    """Return the absolute path of the Tailwind CLI binary for this platform.

    Raises:
        BinaryDirectoryNotFoundError: `<root>/.tailwind` does not exist.
        BinaryNotFoundError: nothing in it matches the platform pattern.
    """
    tailwind_dir = root / TAILWIND_DIR_NAME
    if not tailwind_dir.is_dir():
        logger.critical(f"Failed to detect tailwind directory in {root}")
        raise BinaryDirectoryNotFoundError(
            f"Failed to detect tailwind directory {tailwind_dir}"
        )

    pattern = BINARY_PATTERNS[platform_family(platform)]
    matches = sorted(p for p in tailwind_dir.glob(pattern) if p.is_file())
    if not matches:
        logger.critical(f"No file matching {pattern} in {tailwind_dir}")
        raise BinaryNotFoundError(
            f"Failed to detect Tailwind binary in {tailwind_dir}"
        )

    if len(matches) > 1:
        # No version comparison happens here; stale downloads win by name.
        names = ", ".join(p.name for p in matches)
        logger.warning(
            f"Multiple Tailwind binaries found ({names}), using {matches[0].name}"
        )

    binary = matches[0].resolve()
    logger.debug(f"Using Tailwind binary {binary}")
    return binary
