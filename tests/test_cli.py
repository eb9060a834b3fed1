"""Tests for the tailwatch command line."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

from typer.testing import CliRunner

from tailwatch import __version__
from tailwatch.__main__ import app
from tailwatch.cli.watch.binary import BinaryDirectoryNotFoundError
from tailwatch.models import WatcherOptions, WatchTarget

runner: CliRunner = CliRunner()


class TestVersion:
    def test_prints_version(self) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert f"tailwatch {__version__}" in result.output


class TestWatch:
    """Tests for `tailwatch watch`, with the service patched out."""

    def test_options_from_arguments(self, tmp_path: Path) -> None:
        run = AsyncMock()
        with patch("tailwatch.cli.watch.commands.run_watcher", run):
            result = runner.invoke(
                app,
                [
                    "watch",
                    str(tmp_path),
                    "--input",
                    "Styles/app.css=wwwroot/css/app.css",
                    "-i",
                    "Styles/admin.css",
                ],
            )

        assert result.exit_code == 0, result.output
        (options,), _ = run.await_args
        assert options == WatcherOptions(
            root_directory=tmp_path,
            inputs=(
                WatchTarget(input="Styles/app.css", output="wwwroot/css/app.css"),
                WatchTarget(input="Styles/admin.css"),
            ),
        )
        assert "Tailwind watchers stopped" in result.output

    def test_auto_detect_from_pyproject(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            "[tool.tailwatch]\nauto-detect = true\n"
        )
        run = AsyncMock()
        with patch("tailwatch.cli.watch.commands.run_watcher", run):
            result = runner.invoke(app, ["watch", str(tmp_path)])

        assert result.exit_code == 0, result.output
        (options,), _ = run.await_args
        assert options.auto_detect is True

    def test_warns_without_inputs(self, tmp_path: Path) -> None:
        with patch("tailwatch.cli.watch.commands.run_watcher", AsyncMock()):
            result = runner.invoke(app, ["watch", str(tmp_path)])
        assert result.exit_code == 0
        assert "No inputs configured" in result.output

    def test_invalid_input_value(self, tmp_path: Path) -> None:
        run = AsyncMock()
        with patch("tailwatch.cli.watch.commands.run_watcher", run):
            result = runner.invoke(app, ["watch", str(tmp_path), "--input", "=x"])
        assert result.exit_code == 1
        assert "expected INPUT[=OUTPUT]" in result.output
        run.assert_not_awaited()

    def test_missing_config_file(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["watch", str(tmp_path), "--config", str(tmp_path / "nope.toml")]
        )
        assert result.exit_code == 1
        assert "Config file" in result.output

    def test_fatal_start_error(self, tmp_path: Path) -> None:
        error = BinaryDirectoryNotFoundError(
            f"Tailwind binary directory not found: {tmp_path / '.tailwind'}"
        )
        with patch(
            "tailwatch.cli.watch.commands.run_watcher", AsyncMock(side_effect=error)
        ):
            result = runner.invoke(app, ["watch", str(tmp_path), "-i", "app.css"])
        assert result.exit_code == 1
        assert "binary directory not found" in result.output

    def test_missing_binary_directory_end_to_end(self, tmp_path: Path) -> None:
        (tmp_path / "app.css").write_text("")
        result = runner.invoke(app, ["watch", str(tmp_path), "-i", "app.css"])
        assert result.exit_code == 1
