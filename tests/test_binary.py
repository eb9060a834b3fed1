import logging
from pathlib import Path

import pytest

from tailwatch.cli.watch.binary import (
    BinaryDirectoryNotFoundError,
    BinaryNotFoundError,
    locate_binary,
    platform_family,
)


@pytest.mark.parametrize(
    "platform, family",
    [
        ("linux", "linux"),
        ("freebsd14", "linux"),
        ("openbsd7", "linux"),
        ("darwin", "macos"),
        ("win32", "windows"),
        ("cygwin", "windows"),
    ],
)
def test_platform_family(platform: str, family: str) -> None:
    assert platform_family(platform) == family


class TestLocateBinary:
    """Tests for resolving the Tailwind CLI binary under .tailwind."""

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(BinaryDirectoryNotFoundError):
            locate_binary(tmp_path, platform="linux")

    def test_missing_directory_is_a_binary_error(self, tmp_path: Path) -> None:
        with pytest.raises(BinaryNotFoundError):
            locate_binary(tmp_path, platform="linux")

    def test_no_match_for_platform(self, tmp_path: Path) -> None:
        tailwind_dir = tmp_path / ".tailwind"
        tailwind_dir.mkdir()
        (tailwind_dir / "tailwindcss-macos-arm64").write_text("")
        with pytest.raises(BinaryNotFoundError) as exc_info:
            locate_binary(tmp_path, platform="linux")
        assert not isinstance(exc_info.value, BinaryDirectoryNotFoundError)

    @pytest.mark.parametrize(
        "platform, name",
        [
            ("linux", "tailwindcss-linux-x64"),
            ("darwin", "tailwindcss-macos-arm64"),
            ("win32", "tailwindcss-windows-x64.exe"),
        ],
    )
    def test_selects_platform_binary(
        self, tmp_path: Path, platform: str, name: str
    ) -> None:
        tailwind_dir = tmp_path / ".tailwind"
        tailwind_dir.mkdir()
        for other in (
            "tailwindcss-linux-x64",
            "tailwindcss-macos-arm64",
            "tailwindcss-windows-x64.exe",
        ):
            (tailwind_dir / other).write_text("")

        binary = locate_binary(tmp_path, platform=platform)

        assert binary == (tailwind_dir / name).resolve()
        assert binary.is_absolute()

    def test_first_lexical_match_wins_with_warning(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        tailwind_dir = tmp_path / ".tailwind"
        tailwind_dir.mkdir()
        (tailwind_dir / "tailwindcss-linux-x64").write_text("")
        (tailwind_dir / "tailwindcss-linux-arm64").write_text("")

        with caplog.at_level(logging.WARNING):
            binary = locate_binary(tmp_path, platform="linux")

        assert binary.name == "tailwindcss-linux-arm64"
        assert "Multiple Tailwind binaries" in caplog.text

    def test_directories_are_ignored(self, tmp_path: Path) -> None:
        tailwind_dir = tmp_path / ".tailwind"
        (tailwind_dir / "tailwindcss-linux-old").mkdir(parents=True)
        with pytest.raises(BinaryNotFoundError):
            locate_binary(tmp_path, platform="linux")
