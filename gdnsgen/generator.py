"""Generation of ``.gdnlib`` and ``.gdns`` resources for a GDNative crate."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path, PurePath
from typing import Iterable, List, Mapping, Optional

from .config import GeneratorOptions, resolve_layout
from .errors import ResourceWriteError
from .logging import get_logger
from .models import BuildMode, ProjectLayout
from .paths import ResourcePath, binary_paths, relativize
from .templates import render_gdnlib, render_gdns


@dataclass
class GenerateResult:
    """Files touched by a generator run."""

    gdnlib_path: Path
    written: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)


class Generator:
    """Builder holding everything needed to place resources in a Godot project.

    Setters come in two flavours: ``with_*`` mutates in place, the bare name
    returns the builder for chaining::

        Generator().godot_project_dir("../game").build_mode(BuildMode.DEBUG).build(classes)
    """

    def __init__(self, options: Optional[GeneratorOptions] = None) -> None:
        if options is None:
            options = GeneratorOptions()
        # Own copy: the with_* setters must not reach back into the caller.
        self.options = replace(options, exclude_paths=list(options.exclude_paths))
        self.logger = get_logger("generator")

    @classmethod
    def from_config(cls, options: GeneratorOptions) -> "Generator":
        return cls(options)

    def with_godot_project_dir(self, path: os.PathLike[str] | str) -> None:
        """**Required.** Set the root of the Godot project."""
        self.options.godot_project_dir = Path(path)

    def godot_project_dir(self, path: os.PathLike[str] | str) -> "Generator":
        self.with_godot_project_dir(path)
        return self

    def with_godot_resource_output_dir(self, path: os.PathLike[str] | str) -> None:
        """Set the directory inside the Godot project receiving the generated files."""
        self.options.resource_output_dir = Path(path)

    def godot_resource_output_dir(self, path: os.PathLike[str] | str) -> "Generator":
        self.with_godot_resource_output_dir(path)
        return self

    def with_target_dir(self, path: os.PathLike[str] | str) -> None:
        """Set cargo's ``target`` directory holding the build artefacts."""
        self.options.target_dir = Path(path)

    def target_dir(self, path: os.PathLike[str] | str) -> "Generator":
        self.with_target_dir(path)
        return self

    def with_lib_name(self, name: str) -> None:
        """Set the name of the crate."""
        self.options.lib_name = name

    def lib_name(self, name: str) -> "Generator":
        self.with_lib_name(name)
        return self

    def with_build_mode(self, mode: BuildMode) -> None:
        """Set the build mode; it selects the artefact directory the ``.gdnlib`` points to."""
        self.options.build_mode = mode

    def build_mode(self, mode: BuildMode) -> "Generator":
        self.with_build_mode(mode)
        return self

    def with_overwrite_manifest(self, overwrite: bool = True) -> None:
        """Regenerate the ``.gdnlib`` on every run instead of keeping an existing one."""
        self.options.overwrite_manifest = overwrite

    def overwrite_manifest(self, overwrite: bool = True) -> "Generator":
        self.with_overwrite_manifest(overwrite)
        return self

    def resolve(
        self, env: Optional[Mapping[str, str]] = None, crate_dir: Optional[Path] = None
    ) -> ProjectLayout:
        return resolve_layout(self.options, env=env, crate_dir=crate_dir)

    def build(
        self,
        classes: Iterable[str],
        *,
        env: Optional[Mapping[str, str]] = None,
        crate_dir: Optional[Path] = None,
    ) -> GenerateResult:
        """Generate the library manifest and one NativeScript per class.

        Existing ``.gdns`` files are never touched, and neither is an
        existing ``.gdnlib`` unless ``overwrite_manifest`` is set, so that
        hand edits survive repeated builds.
        """
        layout = self.resolve(env=env, crate_dir=crate_dir)
        result = GenerateResult(gdnlib_path=layout.gdnlib_path)

        try:
            layout.resource_output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ResourceWriteError(layout.resource_output_dir, str(exc)) from exc

        self._write_gdnlib(layout, result)

        gdnlib_ref = self._gdnlib_reference(layout)
        for name in sorted(set(classes)):
            path = layout.gdns_path(name)
            if path.is_file():
                self.logger.debug("Keeping existing %s", path)
                result.skipped.append(path)
                continue
            _write(path, render_gdns(gdnlib_ref.prefix, gdnlib_ref.path, name))
            self.logger.info("Wrote %s", path)
            result.written.append(path)

        return result

    def _write_gdnlib(self, layout: ProjectLayout, result: GenerateResult) -> None:
        path = layout.gdnlib_path
        if path.is_file() and not self.options.overwrite_manifest:
            self.logger.debug("Keeping existing %s", path)
            result.skipped.append(path)
            return

        target = relativize(layout.target_dir, layout.project_dir)
        binaries = binary_paths(target.path, layout.build_mode, layout.lib_name)
        _write(path, render_gdnlib(target.prefix, binaries))
        self.logger.info("Wrote %s", path)
        result.written.append(path)

    @staticmethod
    def _gdnlib_reference(layout: ProjectLayout) -> ResourcePath:
        reference = relativize(layout.gdnlib_path, layout.project_dir)
        if reference.prefix:
            return reference
        # Outside the project Godot resolves ext_resource paths against the
        # referencing file's directory; the .gdns files live next to the .gdnlib.
        relative = os.path.relpath(layout.gdnlib_path, layout.resource_output_dir)
        return ResourcePath("", PurePath(relative))


def _write(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8", newline="\n")
    except OSError as exc:
        raise ResourceWriteError(path, str(exc)) from exc


__all__ = ["GenerateResult", "Generator"]
