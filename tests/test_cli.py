"""End-to-end tests for the bmspack CLI.

This module tests the CLI interface using Typer's CliRunner on real
temporary directory trees.
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from bmspack import __version__
from bmspack.cli import app

from conftest import list_names, write_tree


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a CliRunner instance for testing."""
    return CliRunner()


class TestGlobalOptions:

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("split", "undo-split", "merge-split", "move-works", "move-out",
                        "merge-same-name", "dedup-media", "presets"):
            assert command in result.output

    def test_presets_command(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["presets"])
        assert result.exit_code == 0
        assert "oraja" in result.output
        assert "mpg_fill_wmv" in result.output


class TestSplitCommands:

    def test_split_and_undo(self, cli_runner: CliRunner, split_pack: Path) -> None:
        result = cli_runner.invoke(app, ["split", str(split_pack)])
        assert result.exit_code == 0
        assert (split_pack.parent / "Insane [ABCD]").is_dir()

        result = cli_runner.invoke(app, ["undo-split", str(split_pack), "--yes"])
        assert result.exit_code == 0
        assert list_names(split_pack.parent) == ["Insane"]

    def test_undo_split_declined(self, cli_runner: CliRunner, temp_dir: Path) -> None:
        write_tree(temp_dir / "Pack", {"Alpha/": b""})
        write_tree(temp_dir / "Pack [RST]", {"Ruins/": b""})

        result = cli_runner.invoke(app, ["undo-split", str(temp_dir / "Pack")], input="n\n")

        assert result.exit_code == 0
        assert list_names(temp_dir) == ["Pack", "Pack [RST]"]

    def test_undo_split_confirmed_interactively(self, cli_runner: CliRunner, temp_dir: Path) -> None:
        write_tree(temp_dir / "Pack", {"Alpha/": b""})
        write_tree(temp_dir / "Pack [RST]", {"Ruins/": b""})

        result = cli_runner.invoke(app, ["undo-split", str(temp_dir / "Pack")], input="y\n")

        assert result.exit_code == 0
        assert list_names(temp_dir / "Pack") == ["Alpha", "Ruins"]

    def test_split_bracketed_root_fails(self, cli_runner: CliRunner, temp_dir: Path) -> None:
        root = write_tree(temp_dir / "Pack [ABCD]", {"Alpha/": b""})

        result = cli_runner.invoke(app, ["split", str(root)])

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_split_missing_path(self, cli_runner: CliRunner, temp_dir: Path) -> None:
        result = cli_runner.invoke(app, ["split", str(temp_dir / "missing")])
        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_split_dry_run(self, cli_runner: CliRunner, split_pack: Path) -> None:
        result = cli_runner.invoke(app, ["split", str(split_pack), "--dry-run"])

        assert result.exit_code == 0
        assert "[DRY RUN MODE]" in result.output
        assert list_names(split_pack.parent) == ["Insane"]

    def test_keyboard_interrupt_exit_code(self, cli_runner: CliRunner, split_pack: Path) -> None:
        with patch(
            "bmspack.cli.PackOrchestrator.split_by_first_char",
            side_effect=KeyboardInterrupt,
        ):
            result = cli_runner.invoke(app, ["split", str(split_pack)])

        assert result.exit_code == 130

    def test_merge_split_duplicate_destination(self, cli_runner: CliRunner, temp_dir: Path) -> None:
        root = write_tree(
            temp_dir / "root", {"Foo/": b"", "Foo [ABCD]/": b"", "Foo [RST]/": b""}
        )

        result = cli_runner.invoke(app, ["merge-split", str(root), "--yes"])

        assert result.exit_code == 1
        assert "Duplicate merge destinations" in result.output
        assert list_names(root) == ["Foo", "Foo [ABCD]", "Foo [RST]"]

    def test_merge_split_with_log_file(self, cli_runner: CliRunner, temp_dir: Path) -> None:
        root = write_tree(temp_dir / "root", {"Foo/a.bms": b"a", "Foo [ABCD]/b.bms": b"b"})
        log_file = temp_dir / "merge.log"

        result = cli_runner.invoke(
            app, ["merge-split", str(root), "--yes", "--log-file", str(log_file)]
        )

        assert result.exit_code == 0
        assert log_file.exists()
        assert "Log written to" in result.output
        assert list_names(root / "Foo") == ["a.bms", "b.bms"]


class TestMoveCommands:

    def test_move_works(self, cli_runner: CliRunner, temp_dir: Path) -> None:
        root_from = write_tree(temp_dir / "from", {"W1/a.bms": b"a"})
        root_to = write_tree(temp_dir / "to", {})

        result = cli_runner.invoke(app, ["move-works", str(root_from), str(root_to)])

        assert result.exit_code == 0
        assert list_names(root_to) == ["W1"]

    def test_move_out_dry_run(self, cli_runner: CliRunner, temp_dir: Path) -> None:
        root = write_tree(temp_dir / "root", {"Collection/W1/a.bms": b"a"})

        result = cli_runner.invoke(app, ["move-out", str(root), "-n"])

        assert result.exit_code == 0
        assert list_names(root) == ["Collection"]

    def test_merge_same_name(self, cli_runner: CliRunner, temp_dir: Path) -> None:
        root_from = write_tree(temp_dir / "from", {"Artist A/new.bms": b"n"})
        root_to = write_tree(temp_dir / "to", {"Something Artist A Remix/old.bms": b"o"})

        result = cli_runner.invoke(
            app, ["merge-same-name", str(root_from), str(root_to), "-y"]
        )

        assert result.exit_code == 0
        assert list_names(root_to / "Something Artist A Remix") == ["new.bms", "old.bms"]

    def test_merge_same_name_missing_target(self, cli_runner: CliRunner, temp_dir: Path) -> None:
        result = cli_runner.invoke(
            app, ["merge-same-name", str(temp_dir), str(temp_dir / "missing")]
        )
        assert result.exit_code == 1
        assert "Target path does not exist" in result.output


class TestDedupMediaCommand:

    def test_dedup_with_named_preset(self, cli_runner: CliRunner, media_root: Path) -> None:
        result = cli_runner.invoke(app, ["dedup-media", str(media_root), "--preset", "oraja"])

        assert result.exit_code == 0
        assert list_names(media_root / "WorkA") == ["bgm.flac", "chart.bms", "track.mp4"]

    def test_dedup_prompts_for_preset(self, cli_runner: CliRunner, media_root: Path) -> None:
        result = cli_runner.invoke(app, ["dedup-media", str(media_root)], input="1\n")

        assert result.exit_code == 0
        assert "bgm.flac" not in list_names(media_root / "WorkA")
        assert "bgm.ogg" in list_names(media_root / "WorkA")

    def test_dedup_unknown_preset(self, cli_runner: CliRunner, media_root: Path) -> None:
        result = cli_runner.invoke(app, ["dedup-media", str(media_root), "--preset", "bogus"])

        assert result.exit_code == 2
        assert len(list_names(media_root / "WorkA")) == 6
