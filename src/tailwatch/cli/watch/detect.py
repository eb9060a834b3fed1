"""Resolve the final list of watch targets, optionally from the project file.

Auto-detection reads `TailwindInput` elements from the first `*.csproj` found
directly in the root directory:

    <ItemGroup>
      <TailwindInput Include="Styles/app.css" Output="wwwroot/css/app.css" />
      <TailwindInput Include="Styles/admin.css" />
    </ItemGroup>

Detected targets are appended after the configured ones, in document order.
"""

from __future__ import annotations

import xml.etree.ElementTree as ElementTree
from pathlib import Path

from tailwatch.cli.watch.logging import LogComponent, get_logger
from tailwatch.constants import (
    INPUT_ELEMENT_NAME,
    INPUT_INCLUDE_ATTRIBUTE,
    INPUT_OUTPUT_ATTRIBUTE,
    PROJECT_FILE_PATTERN,
)
from tailwatch.models import WatcherOptions, WatchTarget

logger = get_logger(LogComponent.DETECT)


class ProjectFileError(ValueError):
    """The project file exists but cannot be parsed."""


def find_project_file(root: Path) -> Path | None:
    """Return the first project file directly inside `root` (not recursive)."""
    if not root.is_dir():
        return None
    for candidate in sorted(root.glob(PROJECT_FILE_PATTERN)):
        if candidate.is_file():
            return candidate
    return None


def _local_name(tag: str) -> str:
    # Strip an XML namespace ("{uri}Name" -> "Name").
    return tag.rsplit("}", 1)[-1]


def discover_targets(project_file: Path) -> list[WatchTarget]:
    """Parse all `TailwindInput` elements of a project file.

    An element without `Include` is logged and skipped; its siblings are kept.
    """
    try:
        document = ElementTree.parse(project_file)
    except ElementTree.ParseError as e:
        raise ProjectFileError(
            f"Failed to parse project file {project_file}: {e}"
        ) from e

    targets: list[WatchTarget] = []
    elements = [
        element
        for element in document.getroot().iter()
        if isinstance(element.tag, str)
        and _local_name(element.tag) == INPUT_ELEMENT_NAME
    ]
    for position, element in enumerate(elements, start=1):
        include = element.get(INPUT_INCLUDE_ATTRIBUTE)
        if not include:
            logger.error(
                f"{INPUT_ELEMENT_NAME} #{position} in {project_file} must have an "
                f"{INPUT_INCLUDE_ATTRIBUTE} attribute, skipping it"
            )
            continue

        targets.append(
            WatchTarget(input=include, output=element.get(INPUT_OUTPUT_ATTRIBUTE))
        )
    return targets


def resolve_targets(options: WatcherOptions, root: Path) -> tuple[WatchTarget, ...]:
    """Return the configured targets followed by any auto-detected ones.

    `options` is never modified.
    """
    targets = list(options.inputs)
    if not options.auto_detect:
        return tuple(targets)

    project_file = find_project_file(root)
    if project_file is None:
        logger.warning(f"No project file found in root folder {root}")
        return tuple(targets)

    logger.debug(f"Using {project_file} to infer watch files")
    discovered = discover_targets(project_file)
    logger.debug(f"Detected {len(discovered)} input(s) in {project_file.name}")
    targets.extend(discovered)
    return tuple(targets)
