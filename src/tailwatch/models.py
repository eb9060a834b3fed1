"""Centralized Pydantic models and enums for tailwatch."""

from __future__ import annotations

from enum import Enum
from pathlib import Path, PurePath
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from tailwatch.constants import DEFAULT_OUTPUT_DIR_NAME


# === Enums ===


class WatcherState(str, Enum):
    """Lifecycle of a watcher service."""

    NOT_STARTED = "not_started"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    FAILED = "failed"


# === Configuration Models ===


class WatchTarget(BaseModel):
    """A single stylesheet input and the file it compiles to.

    `output` may be left unset, in which case it is inferred as
    `<root>/wwwroot/<input file name>` when the watcher starts.
    """

    input: str = Field(description="The source stylesheet.", min_length=1)
    output: str | None = Field(
        default=None, description="The file to output to. Inferred if unset."
    )

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    def resolve_output(self, root: Path) -> Path:
        """Return the explicit output path, or the one inferred from the root."""
        if self.output is not None:
            return Path(self.output)
        return root / DEFAULT_OUTPUT_DIR_NAME / PurePath(self.input).name

    def resolve_input(self, root: Path) -> Path:
        """Return the input path, resolved against the root when relative."""
        return root / self.input


class WatcherOptions(BaseModel):
    """Configuration of the watcher service.

    Built once from configuration and never mutated; auto-detected targets are
    returned by `resolve_targets` instead of being appended here.
    """

    auto_detect: bool = Field(
        default=False,
        description="Whether to detect inputs from the project file.",
        alias="auto-detect",
    )
    root_directory: Path | None = Field(
        default=None,
        description="The directory containing the project file. Defaults to cwd.",
        alias="root-directory",
    )
    inputs: tuple[WatchTarget, ...] = ()

    model_config: ClassVar[ConfigDict] = ConfigDict(
        frozen=True, populate_by_name=True, extra="forbid"
    )

    def resolve_root(self) -> Path:
        """Return the absolute root directory, defaulting to the cwd.

        Watchers run with the root as their cwd, so a relative root would be
        applied twice to the output paths passed to them.
        """
        if self.root_directory is None:
            return Path.cwd()
        return self.root_directory.absolute()


# === Process Models ===


class CommandResult(BaseModel):
    """Result of running a shell command."""

    command: list[str]
    cwd: str
    returncode: int
    stdout: str
    stderr: str
    duration_ms: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0
