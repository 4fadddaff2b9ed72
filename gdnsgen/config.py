"""Configuration loading (.gdnsgen.yml) and layout resolution for the generator."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .errors import CanonicalizeError, ConfigError
from .logging import get_logger
from .models import BuildMode, ProjectLayout

CONFIG_FILENAME = ".gdnsgen.yml"

_logger = get_logger("config")


@dataclass
class GeneratorOptions:
    """Generator inputs as given by the user; unset values fall back later."""

    godot_project_dir: Optional[Path] = None
    resource_output_dir: Optional[Path] = None
    target_dir: Optional[Path] = None
    lib_name: Optional[str] = None
    build_mode: Optional[BuildMode] = None
    overwrite_manifest: bool = False
    exclude_paths: List[str] = field(default_factory=list)

    def merged_over(self, base: "GeneratorOptions") -> "GeneratorOptions":
        """Return ``base`` with every value set here taking precedence."""
        return replace(
            base,
            godot_project_dir=self.godot_project_dir or base.godot_project_dir,
            resource_output_dir=self.resource_output_dir or base.resource_output_dir,
            target_dir=self.target_dir or base.target_dir,
            lib_name=self.lib_name or base.lib_name,
            build_mode=self.build_mode or base.build_mode,
            overwrite_manifest=self.overwrite_manifest or base.overwrite_manifest,
            exclude_paths=[*base.exclude_paths, *self.exclude_paths],
        )


def load_config(config_path: Path) -> GeneratorOptions:
    """Load generator options from a ``.gdnsgen.yml`` file or the directory holding it."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent

    if not config_file.exists():
        return GeneratorOptions()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    build_mode = None
    raw_mode = _as_str(data.get("build_mode"))
    if raw_mode:
        build_mode = _parse_build_mode(raw_mode)

    lib_name = _as_str(data.get("lib_name"))

    return GeneratorOptions(
        godot_project_dir=_as_path(data.get("godot_project_dir"), root),
        resource_output_dir=_as_path(data.get("resource_output_dir"), root),
        target_dir=_as_path(data.get("target_dir"), root),
        lib_name=lib_name or None,
        build_mode=build_mode,
        overwrite_manifest=_as_bool(data.get("overwrite_manifest")) or False,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
    )


def resolve_layout(
    options: GeneratorOptions,
    env: Optional[Mapping[str, str]] = None,
    crate_dir: Optional[Path] = None,
) -> ProjectLayout:
    """Resolve ``options`` into canonical paths, falling back on cargo's build environment.

    Fallback order per setting:

    * ``godot_project_dir``: option only (required).
    * ``lib_name``: option, ``CARGO_PKG_NAME``, ``Cargo.toml`` in ``crate_dir``.
    * ``target_dir``: option, ``CARGO_TARGET_DIR``, four levels above ``OUT_DIR``.
    * ``build_mode``: option, ``PROFILE``.
    * ``resource_output_dir``: option, ``<godot_project_dir>/native``.
    """
    env = os.environ if env is None else env

    if options.godot_project_dir is None:
        raise ConfigError("Godot project dir not given", key="godot_project_dir")
    project_dir = _canonicalize("godot_project_dir", options.godot_project_dir)

    lib_name = options.lib_name or _lib_name_from_env(env, crate_dir)
    if not lib_name:
        raise ConfigError("Package name not given and unable to find", key="lib_name")

    target_dir = _resolve_target_dir(options.target_dir, env)

    build_mode = options.build_mode or _build_mode_from_env(env)
    if build_mode is None:
        raise ConfigError("Build mode not given and unable to find", key="build_mode")

    if options.resource_output_dir is not None:
        output_dir = _canonicalize("resource_output_dir", options.resource_output_dir, strict=False)
    else:
        output_dir = project_dir / "native"

    layout = ProjectLayout(
        project_dir=project_dir,
        resource_output_dir=output_dir,
        target_dir=target_dir,
        lib_name=lib_name,
        build_mode=build_mode,
    )
    _logger.debug("Resolved layout: %s", layout)
    return layout


def _resolve_target_dir(explicit: Optional[Path], env: Mapping[str, str]) -> Path:
    if explicit is not None:
        return _canonicalize("target_dir", explicit)

    cargo_target = env.get("CARGO_TARGET_DIR")
    if cargo_target:
        return _canonicalize("CARGO_TARGET_DIR", Path(cargo_target))

    out_dir = env.get("OUT_DIR")
    if out_dir:
        # target/{debug,release}/build/<crate>-<hash>/out
        return _canonicalize("OUT_DIR", Path(out_dir) / ".." / ".." / ".." / "..")

    raise ConfigError("Target dir not given and unable to find", key="target_dir")


def _build_mode_from_env(env: Mapping[str, str]) -> Optional[BuildMode]:
    profile = env.get("PROFILE")
    if profile == "release":
        return BuildMode.RELEASE
    if profile == "debug":
        return BuildMode.DEBUG
    return None


def _lib_name_from_env(env: Mapping[str, str], crate_dir: Optional[Path]) -> Optional[str]:
    name = env.get("CARGO_PKG_NAME")
    if name:
        return name
    if crate_dir is None:
        return None
    return lib_name_from_manifest(Path(crate_dir) / "Cargo.toml")


def lib_name_from_manifest(manifest_path: Path) -> Optional[str]:
    """Return the library name declared by a ``Cargo.toml``, if any."""
    if not manifest_path.is_file():
        return None
    try:
        data = tomllib.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to read {manifest_path}: {exc}", key="lib_name") from exc

    for table in ("lib", "package"):
        name = _as_str(_as_dict(data.get(table)).get("name"))
        if name:
            return name
    return None


def _canonicalize(key: str, path: Path, *, strict: bool = True) -> Path:
    try:
        return Path(path).expanduser().resolve(strict=strict)
    except (OSError, RuntimeError) as exc:
        raise CanonicalizeError(key, Path(path), str(exc)) from exc


def _parse_build_mode(value: str) -> BuildMode:
    try:
        return BuildMode.parse(value)
    except ValueError as exc:
        raise ConfigError(str(exc), key="build_mode") from exc


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}

    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_path(value: Any, root: Path) -> Optional[Path]:
    text = _as_str(value)
    if not text:
        return None
    return root / Path(text).expanduser()


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "GeneratorOptions",
    "lib_name_from_manifest",
    "load_config",
    "resolve_layout",
]
