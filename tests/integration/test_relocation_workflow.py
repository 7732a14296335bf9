"""
Integration tests for moving works between roots and flattening collections.
"""

from pathlib import Path

import pytest

from bmspack.orchestration import PackOrchestrator

# Import from conftest through tests package
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))
from conftest import ScriptedTUI, list_names, write_tree


@pytest.mark.integration
class TestRelocationWorkflow:

    def test_flatten_then_move_to_library(self, temp_dir: Path) -> None:
        incoming = write_tree(
            temp_dir / "incoming",
            {
                "Event 2023/Song A/a.bms": b"a",
                "Event 2023/Song B/b.bms": b"b",
                "Event 2024/Song C/c.bms": b"c",
            },
        )
        library = write_tree(temp_dir / "library", {"Song A/a_old.bms": b"old"})
        orchestrator = PackOrchestrator(tui=ScriptedTUI())

        orchestrator.move_out_works(incoming)
        assert list_names(incoming) == ["Song A", "Song B", "Song C"]

        orchestrator.move_works(incoming, library)

        assert list_names(incoming) == []
        assert list_names(library) == ["Song A", "Song B", "Song C"]
        assert list_names(library / "Song A") == ["a.bms", "a_old.bms"]

    def test_move_works_chart_conflict_keeps_both(self, temp_dir: Path) -> None:
        root_from = write_tree(temp_dir / "from", {"Song/song.bms": b"#TITLE new"})
        root_to = write_tree(temp_dir / "to", {"Song/song.bms": b"#TITLE old!"})

        summary = PackOrchestrator(tui=ScriptedTUI()).move_works(root_from, root_to)

        assert list_names(root_to / "Song") == ["song.1.bms", "song.bms"]
        assert (root_to / "Song" / "song.bms").read_bytes() == b"#TITLE old!"
        assert summary.files_renamed == 1

    def test_same_name_merge_then_cleanup(self, temp_dir: Path) -> None:
        root_from = write_tree(
            temp_dir / "from",
            {"Artist A/x.bms": b"x", "Artist B/y.bms": b"y", "Unknown/z.bms": b"z"},
        )
        root_to = write_tree(
            temp_dir / "to",
            {"Something Artist A Remix/": b"", "Artist B (2019)/": b""},
        )
        tui = ScriptedTUI(answers=[True])

        summary = PackOrchestrator(tui=tui).move_works_with_same_name(root_from, root_to)

        assert summary.total_actions == 2
        assert list_names(root_from) == ["Unknown"]
        assert list_names(root_to / "Artist B (2019)") == ["y.bms"]
        assert tui.prompts == ["Merge?"]
