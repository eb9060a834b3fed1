"""Load watcher options from `pyproject.toml` and command-line overrides.

    [tool.tailwatch]
    auto-detect = true
    inputs = [
        { input = "Styles/app.css", output = "wwwroot/css/app.css" },
        { input = "Styles/admin.css" },
    ]
"""

from __future__ import annotations

import tomllib
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from tailwatch.cli.watch.logging import LogComponent, get_logger
from tailwatch.constants import PYPROJECT_FILE_NAME, PYPROJECT_TOOL_TABLE
from tailwatch.models import WatcherOptions, WatchTarget

logger = get_logger(LogComponent.CONFIG)


class ConfigError(ValueError):
    """The configuration file or a command-line value is invalid."""


def parse_target(value: str) -> WatchTarget:
    """Parse an `INPUT[=OUTPUT]` command-line value."""
    input_path, sep, output_path = value.partition("=")
    input_path = input_path.strip()
    output_path = output_path.strip()
    if not input_path or (sep and not output_path):
        raise ConfigError(f"Invalid input {value!r}, expected INPUT[=OUTPUT]")
    return WatchTarget(input=input_path, output=output_path or None)


def read_config_table(config_file: Path) -> dict[str, Any]:
    """Return the watcher settings of a TOML file.

    A `pyproject.toml` contributes only its `[tool.tailwatch]` table, which
    may be absent. Any other file is a dedicated config file and is used whole.
    """
    try:
        with config_file.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to read {config_file}: {e}") from e

    if config_file.name != PYPROJECT_FILE_NAME:
        return data

    tool = data.get("tool", {})
    table = tool.get(PYPROJECT_TOOL_TABLE, {}) if isinstance(tool, dict) else {}
    if not isinstance(table, dict):
        raise ConfigError(
            f"[tool.{PYPROJECT_TOOL_TABLE}] in {config_file} must be a table"
        )
    return table


def load_watch_options(
    root: Path | None = None,
    config_file: Path | None = None,
    *,
    auto_detect: bool | None = None,
    inputs: Sequence[WatchTarget] = (),
) -> WatcherOptions:
    """Build the watcher options from the config file and CLI overrides.

    `auto_detect` replaces the file value when given; `inputs` are appended
    after the inputs listed in the file.
    """
    if config_file is None:
        candidate = (root or Path.cwd()) / PYPROJECT_FILE_NAME
        config_file = candidate if candidate.is_file() else None
    elif not config_file.is_file():
        raise ConfigError(f"Config file {config_file} does not exist")

    options = WatcherOptions()
    if config_file is not None:
        table = read_config_table(config_file)
        try:
            options = WatcherOptions.model_validate(table)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {config_file}: {e}") from e
        logger.debug(f"Loaded watcher configuration from {config_file}")

    root_directory = options.root_directory
    if root_directory is not None and config_file is not None:
        # Relative to the file that declares it, not to the cwd.
        root_directory = config_file.parent / root_directory
    if root is not None:
        root_directory = root
    if root_directory is not None:
        root_directory = root_directory.absolute()

    return options.model_copy(
        update={
            "root_directory": root_directory,
            "auto_detect": options.auto_detect if auto_detect is None else auto_detect,
            "inputs": (*options.inputs, *inputs),
        }
    )
