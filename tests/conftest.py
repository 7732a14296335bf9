"""Pytest fixtures for bmspack tests."""

import io
import tempfile
from pathlib import Path
from typing import Dict, Generator, List, Optional, Sequence

import pytest
from rich.console import Console

from bmspack.models import RulePreset
from bmspack.operations import FileOperations
from bmspack.orchestration import PackOrchestrator
from bmspack.ui import PackTUI


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast tests without filesystem side effects")
    config.addinivalue_line("markers", "integration: multi-step workflows on real directories")


class ScriptedTUI(PackTUI):
    """PackTUI whose prompts are answered from a script.

    Output is rendered to an in-memory console so tests can inspect it.

    Attributes:
        answers: Queue of confirm() answers; an exhausted queue answers no.
        preset_choice: Index returned by select_preset().
        prompts: Every confirm() prompt, in order.
    """

    def __init__(self, answers: Optional[Sequence[bool]] = None, preset_choice: int = 0) -> None:
        self.output = io.StringIO()
        super().__init__(console=Console(file=self.output, force_terminal=False, width=200))
        self.answers: List[bool] = list(answers or [])
        self.preset_choice = preset_choice
        self.prompts: List[str] = []
        self.preset_requests = 0

    def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        if not self.answers:
            return False
        return self.answers.pop(0)

    def select_preset(self, presets: Sequence[RulePreset]) -> int:
        self.preset_requests += 1
        return self.preset_choice

    def text(self) -> str:
        return self.output.getvalue()


def write_tree(root: Path, files: Dict[str, bytes]) -> Path:
    """Create files (and their parent folders) under root.

    Args:
        root: Base directory; created if missing.
        files: Mapping of relative POSIX paths to file content. A path
            ending with '/' creates an empty directory.

    Returns:
        The root path.
    """
    root.mkdir(parents=True, exist_ok=True)
    for rel_path, content in files.items():
        target = root / rel_path
        if rel_path.endswith("/"):
            target.mkdir(parents=True, exist_ok=True)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
    return root


def list_names(path: Path) -> List[str]:
    """Sorted names of the direct children of path."""
    return sorted(child.name for child in path.iterdir())


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for isolated test environments.

    Yields:
        Path to the temporary directory.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def tui_with_output() -> tuple[PackTUI, io.StringIO]:
    """Create a PackTUI with captured output.

    Returns:
        Tuple of (PackTUI instance, StringIO for reading output).
    """
    output = io.StringIO()
    console = Console(file=output, force_terminal=False, width=200)
    return PackTUI(console=console), output


@pytest.fixture
def scripted_tui() -> ScriptedTUI:
    """A TUI that answers yes to the first confirmation."""
    return ScriptedTUI(answers=[True])


@pytest.fixture
def file_operations_instance() -> FileOperations:
    return FileOperations()


@pytest.fixture
def orchestrator(scripted_tui: ScriptedTUI) -> PackOrchestrator:
    """Live-mode orchestrator driven by the scripted TUI."""
    return PackOrchestrator(tui=scripted_tui)


@pytest.fixture
def split_pack(temp_dir: Path) -> Path:
    """Create a pack folder with works in several buckets.

    Creates:
        packs/
        └── Insane/
            ├── 2night/chart.bms
            ├── Angelic/chart.bms
            ├── angel2/chart.bms
            ├── Ruins/chart.bms
            ├── あいうえお/chart.bms
            ├── カタカナ/chart.bms
            ├── 東方/chart.bms
            ├── _hidden/chart.bms
            └── readme.txt

    Returns:
        Path to the Insane folder.
    """
    return write_tree(
        temp_dir / "packs" / "Insane",
        {
            "2night/chart.bms": b"#TITLE 2night",
            "Angelic/chart.bms": b"#TITLE Angelic",
            "angel2/chart.bms": b"#TITLE angel2",
            "Ruins/chart.bms": b"#TITLE Ruins",
            "あいうえお/chart.bms": b"#TITLE hiragana",
            "カタカナ/chart.bms": b"#TITLE katakana",
            "東方/chart.bms": b"#TITLE kanji",
            "_hidden/chart.bms": b"#TITLE other",
            "readme.txt": b"pack readme",
        },
    )


@pytest.fixture
def media_root(temp_dir: Path) -> Path:
    """Create a root with two work folders holding duplicate media.

    Creates:
        library/
        ├── WorkA/  track.mp4, track.avi, bgm.flac, bgm.wav, bgm.ogg, chart.bms
        └── WorkB/  intro.mp4 (empty), intro.avi, extra.mp4

    Returns:
        Path to the library folder.
    """
    return write_tree(
        temp_dir / "library",
        {
            "WorkA/track.mp4": b"mp4 data",
            "WorkA/track.avi": b"avi data",
            "WorkA/bgm.flac": b"flac data",
            "WorkA/bgm.wav": b"wav data",
            "WorkA/bgm.ogg": b"ogg data",
            "WorkA/chart.bms": b"#TITLE A",
            "WorkB/intro.mp4": b"",
            "WorkB/intro.avi": b"avi data",
            "WorkB/extra.mp4": b"mp4 data",
        },
    )
