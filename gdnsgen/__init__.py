"""Generate Godot ``.gdnlib`` and ``.gdns`` resources for GDNative crates.

Scan the crate sources for types deriving ``NativeClass`` and hand the
result to the :class:`Generator`::

    classes = scan_crate("src")
    Generator().godot_project_dir("../game").build(classes)
"""

from .config import GeneratorOptions, load_config, resolve_layout
from .errors import (
    CanonicalizeError,
    ConfigError,
    DeriveAttributeError,
    GenerateError,
    ParseError,
    ReadError,
    ResourceWriteError,
    ScanError,
    WalkError,
)
from .generator import GenerateResult, Generator
from .models import BuildMode, Classes, ProjectLayout
from .scanner import CrateScanner, scan_crate, scan_files

__all__ = [
    "BuildMode",
    "CanonicalizeError",
    "Classes",
    "ConfigError",
    "CrateScanner",
    "DeriveAttributeError",
    "GenerateError",
    "GenerateResult",
    "Generator",
    "GeneratorOptions",
    "ParseError",
    "ProjectLayout",
    "ReadError",
    "ResourceWriteError",
    "ScanError",
    "WalkError",
    "load_config",
    "resolve_layout",
    "scan_crate",
    "scan_files",
]
