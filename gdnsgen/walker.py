"""Source tree walking with gitignore-style exclusion rules.

Ignore files are honored per directory: a ``.gitignore`` or ``.ignore``
found anywhere under the root applies to that directory and everything
below it, with patterns matched relative to the directory holding the
file. Rules from deeper directories are consulted after those of their
parents, so a nested ``!pattern`` can re-include what a parent excluded.
Configured exclude patterns are rooted at the walk root and are applied
last.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import WalkError

_IGNORE_FILES = (".gitignore", ".ignore")


@dataclass(frozen=True)
class IgnoreRule:
    """One gitignore-style pattern, scoped to the directory that declared it.

    ``base`` is that directory relative to the walk root, ``""`` for the
    root itself. ``anchored`` patterns (a leading or inner ``/``) match the
    whole path below ``base``; the others match any single path component.
    """

    pattern: str
    base: str = ""
    directory_only: bool = False
    anchored: bool = False
    negate: bool = False

    def _scoped(self, rel_path: str) -> Optional[str]:
        if not self.base:
            return rel_path
        prefix = f"{self.base}/"
        if rel_path.startswith(prefix):
            return rel_path[len(prefix):]
        return None

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        target = self._scoped(rel_path)
        if not target:
            return False
        if self.anchored:
            return fnmatchcase(target, self.pattern)
        return fnmatchcase(target.rsplit("/", 1)[-1], self.pattern)


def build_ignore_rule(pattern: str, negate: bool = False, base: str = "") -> IgnoreRule | None:
    pattern = pattern.strip()
    directory_only = pattern.endswith("/")
    pattern = pattern.rstrip("/")
    anchored = "/" in pattern
    pattern = pattern.lstrip("/")
    if not pattern:
        return None
    return IgnoreRule(
        pattern=pattern,
        base=base,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
    )


def parse_ignore_file(path: Path, base: str = "") -> List[IgnoreRule]:
    """Read the rules of one ignore file; a missing file yields none."""
    if not path.is_file():
        return []

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise WalkError(path, f"unreadable ignore file ({exc})") from exc

    rules: List[IgnoreRule] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        rule = build_ignore_rule(line[1:] if negate else line, negate=negate, base=base)
        if rule is not None:
            rules.append(rule)
    return rules


def load_ignore_rules(directory: Path, base: str = "") -> List[IgnoreRule]:
    """Rules declared by the ignore files sitting directly in ``directory``."""
    rules: List[IgnoreRule] = []
    for name in _IGNORE_FILES:
        rules.extend(parse_ignore_file(directory / name, base))
    return rules


def should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    # Last matching rule wins.
    for rule in reversed(rules):
        if rule.matches(rel_path, is_dir):
            return not rule.negate
    return False


def _join(rel_dir: str, name: str) -> str:
    return f"{rel_dir}/{name}" if rel_dir else name


def _kept(rel_dir: str, name: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    if name.startswith("."):
        return False
    return not should_ignore(_join(rel_dir, name), is_dir, rules)


def _raise_walk_error(exc: OSError) -> None:
    raise WalkError(Path(exc.filename or "."), exc.strerror or str(exc)) from exc


def iter_source_files(
    root: Path, suffix: str = ".rs", exclude_paths: Iterable[str] = ()
) -> List[Path]:
    """Return files under ``root`` ending in ``suffix``, sorted by relative path.

    Hidden files and directories are skipped, as are entries matched by a
    ``.gitignore`` / ``.ignore`` in their directory or any parent up to
    ``root``, or by ``exclude_paths``. The order compares ``/``-separated
    relative paths, so it does not depend on the platform or on how the
    filesystem lists a directory.
    """
    root = Path(root)
    if not root.is_dir():
        raise WalkError(root, "not an existing directory")

    excludes = [rule for rule in map(build_ignore_rule, exclude_paths) if rule is not None]
    scopes: Dict[str, List[IgnoreRule]] = {}
    found: List[Tuple[str, Path]] = []

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""
        parent = rel_dir.rpartition("/")[0]
        inherited = scopes.get(parent, []) if rel_dir else []
        scope = inherited + load_ignore_rules(current_dir, rel_dir)
        scopes[rel_dir] = scope
        rules = scope + excludes

        dirnames[:] = [name for name in dirnames if _kept(rel_dir, name, True, rules)]
        for filename in filenames:
            if filename.endswith(suffix) and _kept(rel_dir, filename, False, rules):
                found.append((_join(rel_dir, filename), current_dir / filename))

    found.sort(key=lambda item: item[0])
    return [path for _, path in found]


__all__ = [
    "IgnoreRule",
    "build_ignore_rule",
    "iter_source_files",
    "load_ignore_rules",
    "parse_ignore_file",
    "should_ignore",
]
