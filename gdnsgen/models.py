"""Core data models shared across gdnsgen components."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePath
from typing import Dict, FrozenSet

Classes = FrozenSet[str]
"""Names of the types found by a scan."""

BinarySet = Dict[str, PurePath]
"""Platform identifier to compiled library path, in manifest order."""


class BuildMode(Enum):
    """Cargo build profile of the crate."""

    DEBUG = "debug"
    RELEASE = "release"

    @classmethod
    def parse(cls, value: str) -> "BuildMode":
        """Return the mode named by ``value`` (case-insensitive)."""
        normalized = value.strip().lower()
        for mode in cls:
            if mode.value == normalized:
                return mode
        raise ValueError(f"Unknown build mode: {value!r} (expected 'debug' or 'release')")


@dataclass(frozen=True)
class ProjectLayout:
    """Resolved, canonical paths and names for one generator run."""

    project_dir: Path
    resource_output_dir: Path
    target_dir: Path
    lib_name: str
    build_mode: BuildMode

    @property
    def gdnlib_path(self) -> Path:
        return self.resource_output_dir / f"{self.lib_name}.gdnlib"

    def gdns_path(self, name: str) -> Path:
        return self.resource_output_dir / f"{name}.gdns"
