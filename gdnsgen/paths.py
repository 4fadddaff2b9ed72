"""Path helpers for locating compiled libraries from inside a Godot project."""

from __future__ import annotations

import os
from pathlib import PurePath
from typing import NamedTuple, Optional, Tuple

from .models import BinarySet, BuildMode

RES_PREFIX = "res://"

# (platform identifier, cross-compilation target triple, filename pattern)
_PLATFORMS: Tuple[Tuple[str, Optional[str], str], ...] = (
    ("Android.armeabi-v7a", "armv7-linux-androideabi", "lib{name}.so"),
    ("Android.arm64-v8a", "aarch64-linux-android", "lib{name}.so"),
    ("Android.x86", "i686-linux-android", "lib{name}.so"),
    ("Android.x86_64", "x86_64-linux-android", "lib{name}.so"),
    ("X11.64", None, "lib{name}.so"),
    ("OSX.64", None, "lib{name}.dylib"),
    ("Windows.64", None, "{name}.dll"),
)

PLATFORMS: Tuple[str, ...] = tuple(platform for platform, _, _ in _PLATFORMS)


class ResourcePath(NamedTuple):
    """A path as Godot should see it: ``res://`` relative or absolute."""

    prefix: str
    path: PurePath

    def as_posix(self) -> str:
        return f"{self.prefix}{to_slash(self.path)}"


def to_slash(path: PurePath) -> str:
    """Render ``path`` with forward slashes regardless of the host OS."""
    rendered = path.as_posix()
    return "" if rendered == "." else rendered


def relativize(base: PurePath, against: PurePath) -> ResourcePath:
    """Express ``base`` relative to the project root ``against`` when possible.

    Paths inside ``against`` get the ``res://`` prefix. Anything else keeps
    its absolute form with an empty prefix, since Godot cannot address files
    outside its project through ``res://``.
    """
    try:
        relative = PurePath(os.path.relpath(base, against))
    except ValueError:
        # Windows: no relative path between different drives.
        return ResourcePath("", PurePath(base))

    if relative.parts and relative.parts[0] == os.pardir:
        return ResourcePath("", PurePath(base))
    return ResourcePath(RES_PREFIX, relative)


def normalize_lib_name(name: str) -> str:
    """Apply cargo's artifact naming: hyphens in crate names become underscores."""
    return name.replace("-", "_")


def binary_paths(artifact_base: PurePath, mode: BuildMode, lib_name: str) -> BinarySet:
    """Return the expected library path for every supported platform."""
    name = normalize_lib_name(lib_name)
    base = PurePath(artifact_base)

    binaries: BinarySet = {}
    for platform, triple, pattern in _PLATFORMS:
        directory = base / triple if triple else base
        binaries[platform] = directory / mode.value / pattern.format(name=name)
    return binaries


__all__ = [
    "PLATFORMS",
    "RES_PREFIX",
    "ResourcePath",
    "binary_paths",
    "normalize_lib_name",
    "relativize",
    "to_slash",
]
