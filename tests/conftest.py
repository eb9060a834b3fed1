from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

from tailwatch.cli.watch.binary import platform_family
from tailwatch.cli.watch.logging import ROOT_LOGGER_NAME, LogComponent, get_logger
from tailwatch.constants import TAILWIND_DIR_NAME

FAKE_TAILWIND_SCRIPT = """\
#!{python}
import json
import sys
import time

with open({argv_file!r}, "w") as f:
    json.dump(sys.argv[1:], f)

print("Rebuilding...", flush=True)
print("   ", flush=True)
print("Done in 12ms.", flush=True)
print("warn - no utility classes were detected", file=sys.stderr, flush=True)
time.sleep(60)
"""


class FakeProcess:
    """In-memory stand-in for `asyncio.subprocess.Process`."""

    def __init__(
        self,
        pid: int,
        stdout: list[str] | None = None,
        stderr: list[str] | None = None,
    ) -> None:
        self.pid = pid
        self.returncode: int | None = None
        self.stdin = None
        self.stdout = asyncio.StreamReader()
        self.stderr = asyncio.StreamReader()
        for line in stdout or []:
            self.stdout.feed_data(f"{line}\n".encode())
        for line in stderr or []:
            self.stderr.feed_data(f"{line}\n".encode())
        self._exited = asyncio.Event()
        self.kill_count = 0

    def exit(self, returncode: int) -> None:
        if self.returncode is not None:
            return
        self.returncode = returncode
        self.stdout.feed_eof()
        self.stderr.feed_eof()
        self._exited.set()

    def kill(self) -> None:
        self.kill_count += 1
        self.exit(-9)

    async def wait(self) -> int:
        await self._exited.wait()
        assert self.returncode is not None
        return self.returncode


def kill_fake(managed) -> None:
    managed.process.kill()


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo `configure_logging` so caplog sees every component logger."""
    yield
    names = [ROOT_LOGGER_NAME] + [get_logger(c).name for c in LogComponent]
    for name in names:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project root with one stylesheet and an (empty) .tailwind directory."""
    (tmp_path / "Styles").mkdir()
    (tmp_path / "Styles" / "app.css").write_text("@tailwind base;\n")
    (tmp_path / TAILWIND_DIR_NAME).mkdir()
    return tmp_path


@pytest.fixture
def binary_name() -> str:
    return f"tailwindcss-{platform_family()}-x64"


@pytest.fixture
def fake_binary(project: Path, binary_name: str) -> Path:
    """A placeholder binary file; never executed."""
    binary = project / TAILWIND_DIR_NAME / binary_name
    binary.write_text("")
    return binary


@pytest.fixture
def fake_tailwind(project: Path, binary_name: str) -> Path:
    """An executable script behaving like `tailwindcss --watch` (POSIX only)."""
    if sys.platform == "win32":
        pytest.skip("shebang scripts are not executable on Windows")
    binary = project / TAILWIND_DIR_NAME / binary_name
    binary.write_text(
        FAKE_TAILWIND_SCRIPT.format(
            python=sys.executable, argv_file=str(project / "argv.json")
        )
    )
    binary.chmod(0o755)
    return binary
