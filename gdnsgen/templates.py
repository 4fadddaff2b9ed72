"""Renderers for the GDNative resource files Godot loads at runtime."""

from __future__ import annotations

from pathlib import PurePath
from typing import Mapping

from .paths import to_slash

_GDNLIB_GENERAL = """[general]

singleton=false
load_once=true
symbol_prefix="godot_"
reloadable=true
"""

_GDNS_TEMPLATE = """[gd_resource type="NativeScript" load_steps=2 format=2]

[ext_resource path="{prefix}{gdnlib}" type="GDNativeLibrary" id=1]

[resource]
class_name = "{name}"
script_class_name = "{name}"
library = ExtResource( 1 )
"""


def render_gdnlib(prefix: str, binaries: Mapping[str, PurePath]) -> str:
    """Render a ``.gdnlib`` library manifest.

    ``binaries`` maps platform identifiers (``X11.64``, ``Windows.64``, ...)
    to library paths; entries keep the mapping's order.
    """
    entries = [
        f'{platform}="{prefix}{to_slash(path)}"' for platform, path in binaries.items()
    ]
    dependencies = [f"{platform}=[  ]" for platform in binaries]

    lines = ["[entry]", *entries, "", "[dependencies]", "", *dependencies, ""]
    return "\n".join(lines) + "\n" + _GDNLIB_GENERAL


def render_gdns(prefix: str, gdnlib_path: PurePath, name: str) -> str:
    """Render a ``.gdns`` NativeScript resource binding ``name`` to the library."""
    return _GDNS_TEMPLATE.format(prefix=prefix, gdnlib=to_slash(gdnlib_path), name=name)


__all__ = ["render_gdnlib", "render_gdns"]
