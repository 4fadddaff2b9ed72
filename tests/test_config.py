"""Tests for gdnsgen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from gdnsgen.config import GeneratorOptions, lib_name_from_manifest, load_config, resolve_layout
from gdnsgen.errors import CanonicalizeError, ConfigError
from gdnsgen.models import BuildMode


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    options = load_config(tmp_path)

    assert options == GeneratorOptions()


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".gdnsgen.yml"
    config_file.write_text(
        """
godot_project_dir: ../game
resource_output_dir: ../game/native/classes
target_dir: /opt/cargo/target
lib_name: "my-lib"
build_mode: Release
overwrite_manifest: true
exclude_paths:
  - "examples/"
  - "*.generated.rs"
""",
        encoding="utf-8",
    )

    options = load_config(config_file)

    root = config_file.resolve().parent
    assert options.godot_project_dir == root / "../game"
    assert options.resource_output_dir == root / "../game/native/classes"
    assert options.target_dir == Path("/opt/cargo/target")
    assert options.lib_name == "my-lib"
    assert options.build_mode is BuildMode.RELEASE
    assert options.overwrite_manifest is True
    assert options.exclude_paths == ["examples/", "*.generated.rs"]


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".gdnsgen.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".gdnsgen.yml").write_text("lib_name: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_undecodable_file(tmp_path: Path) -> None:
    (tmp_path / ".gdnsgen.yml").write_bytes(b"\xff\xfe bad")

    with pytest.raises(ConfigError) as excinfo:
        load_config(tmp_path)
    assert ".gdnsgen.yml" in str(excinfo.value)


def test_load_config_rejects_unknown_build_mode(tmp_path: Path) -> None:
    (tmp_path / ".gdnsgen.yml").write_text("build_mode: profiling\n", encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_config(tmp_path)
    assert excinfo.value.key == "build_mode"


def test_merged_over_prefers_explicit_values(tmp_path: Path) -> None:
    base = GeneratorOptions(
        godot_project_dir=tmp_path / "from-file",
        lib_name="file_lib",
        build_mode=BuildMode.RELEASE,
        exclude_paths=["benches/"],
    )
    explicit = GeneratorOptions(lib_name="cli_lib", exclude_paths=["examples/"])

    merged = explicit.merged_over(base)

    assert merged.godot_project_dir == tmp_path / "from-file"
    assert merged.lib_name == "cli_lib"
    assert merged.build_mode is BuildMode.RELEASE
    assert merged.exclude_paths == ["benches/", "examples/"]


def test_resolve_layout_with_explicit_options(godot_project: Path) -> None:
    options = GeneratorOptions(
        godot_project_dir=godot_project,
        target_dir=godot_project / "target",
        lib_name="demo",
        build_mode=BuildMode.DEBUG,
    )

    layout = resolve_layout(options, env={})

    assert layout.project_dir == godot_project
    assert layout.resource_output_dir == godot_project / "native"
    assert layout.target_dir == godot_project / "target"
    assert layout.lib_name == "demo"
    assert layout.build_mode is BuildMode.DEBUG
    assert layout.gdnlib_path == godot_project / "native" / "demo.gdnlib"


def test_resolve_layout_requires_project_dir() -> None:
    with pytest.raises(ConfigError) as excinfo:
        resolve_layout(GeneratorOptions(), env={})
    assert excinfo.value.key == "godot_project_dir"


def test_resolve_layout_rejects_missing_project_dir(tmp_path: Path) -> None:
    options = GeneratorOptions(godot_project_dir=tmp_path / "nowhere")

    with pytest.raises(CanonicalizeError) as excinfo:
        resolve_layout(options, env={})
    assert excinfo.value.key == "godot_project_dir"
    assert "nowhere" in str(excinfo.value)


def test_resolve_layout_falls_back_to_cargo_environment(godot_project: Path, tmp_path: Path) -> None:
    target = tmp_path / "cargo-target"
    out_dir = target / "release" / "build" / "demo-0123abcd" / "out"
    out_dir.mkdir(parents=True)

    env = {
        "CARGO_PKG_NAME": "env-lib",
        "OUT_DIR": str(out_dir),
        "PROFILE": "release",
    }

    layout = resolve_layout(GeneratorOptions(godot_project_dir=godot_project), env=env)

    assert layout.lib_name == "env-lib"
    assert layout.target_dir == target.resolve()
    assert layout.build_mode is BuildMode.RELEASE


def test_resolve_layout_prefers_cargo_target_dir_over_out_dir(
    godot_project: Path, tmp_path: Path
) -> None:
    explicit_target = tmp_path / "shared-target"
    explicit_target.mkdir()
    env = {
        "CARGO_TARGET_DIR": str(explicit_target),
        "OUT_DIR": str(tmp_path),
        "PROFILE": "debug",
        "CARGO_PKG_NAME": "demo",
    }

    layout = resolve_layout(GeneratorOptions(godot_project_dir=godot_project), env=env)

    assert layout.target_dir == explicit_target.resolve()
    assert layout.build_mode is BuildMode.DEBUG


def test_resolve_layout_reads_lib_name_from_cargo_toml(godot_project: Path, project_stub: Path) -> None:
    options = GeneratorOptions(
        godot_project_dir=godot_project,
        target_dir=godot_project / "target",
        build_mode=BuildMode.DEBUG,
    )

    layout = resolve_layout(options, env={}, crate_dir=project_stub)

    assert layout.lib_name == "project-stub"


@pytest.mark.parametrize(
    ("env", "key"),
    [
        ({"PROFILE": "debug", "CARGO_TARGET_DIR": "."}, "lib_name"),
        ({"PROFILE": "debug", "CARGO_PKG_NAME": "demo"}, "target_dir"),
        ({"CARGO_PKG_NAME": "demo", "CARGO_TARGET_DIR": "."}, "build_mode"),
        ({"PROFILE": "bench", "CARGO_PKG_NAME": "demo", "CARGO_TARGET_DIR": "."}, "build_mode"),
    ],
)
def test_resolve_layout_reports_missing_setting(
    godot_project: Path, env: dict[str, str], key: str
) -> None:
    with pytest.raises(ConfigError) as excinfo:
        resolve_layout(GeneratorOptions(godot_project_dir=godot_project), env=env)
    assert excinfo.value.key == key


def test_resolve_layout_keeps_missing_output_dir(godot_project: Path) -> None:
    options = GeneratorOptions(
        godot_project_dir=godot_project,
        resource_output_dir=godot_project / "gen" / "scripts",
        target_dir=godot_project / "target",
        lib_name="demo",
        build_mode=BuildMode.DEBUG,
    )

    layout = resolve_layout(options, env={})

    assert layout.resource_output_dir == godot_project / "gen" / "scripts"


def test_lib_name_from_manifest_prefers_lib_table(tmp_path: Path) -> None:
    manifest = tmp_path / "Cargo.toml"
    manifest.write_text(
        '[package]\nname = "pkg-name"\n\n[lib]\nname = "custom_lib"\n', encoding="utf-8"
    )

    assert lib_name_from_manifest(manifest) == "custom_lib"
    assert lib_name_from_manifest(tmp_path / "absent.toml") is None
