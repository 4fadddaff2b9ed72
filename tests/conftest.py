from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.crate_builder import CrateBuilder

PROJECT_STUB = Path(__file__).parent / "_fixtures" / "project_stub"


@pytest.fixture
def crate_builder(tmp_path: Path) -> CrateBuilder:
    """Provide a reusable crate builder rooted at the pytest tmp_path."""
    return CrateBuilder(tmp_path)


@pytest.fixture
def project_stub() -> Path:
    return PROJECT_STUB


@pytest.fixture
def godot_project(tmp_path: Path) -> Path:
    """An empty Godot project directory with a `native` folder and cargo target."""
    project = tmp_path / "godot"
    (project / "native").mkdir(parents=True)
    (project / "target").mkdir()
    (project / "project.godot").write_text("config_version=4\n", encoding="utf-8")
    return project.resolve()
