"""Exception types raised while scanning crates and generating resources."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


class ScanError(RuntimeError):
    """Base class for failures while scanning crate sources."""


class WalkError(ScanError):
    """Raised when the source tree cannot be explored."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"Directory walking error at {path}: {message}")
        self.path = path


class ReadError(ScanError):
    """Raised when a Rust source file cannot be read."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"File reading error in {path}: {message}")
        self.path = path


class ParseError(ScanError):
    """Raised when a Rust source file does not parse.

    Parsing is done by the tree-sitter Rust grammar, and any error or missing
    node it produces is reported here. Syntax newer than the installed
    grammar (for example `unsafe extern` blocks with `safe fn` items) is
    therefore reported as a parse error even when rustc accepts it.
    """

    def __init__(self, path: Path, line: int, column: int, message: str) -> None:
        super().__init__(f"Parsing error in {path}:{line}:{column}: {message}")
        self.path = path
        self.line = line
        self.column = column


@dataclass(frozen=True, order=True)
class AttributeIssue:
    """A malformed ``#[derive]`` attribute on a single declaration."""

    path: Path
    line: int
    column: int
    message: str

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}: {self.message}"


class DeriveAttributeError(ScanError):
    """One or more declarations carry a ``derive`` attribute that is not a token list."""

    def __init__(self, issues: List[AttributeIssue]) -> None:
        self.issues: List[AttributeIssue] = list(issues)
        super().__init__(self._describe())

    def combine(self, other: "DeriveAttributeError") -> None:
        """Absorb the issues of ``other`` into this error."""
        self.issues.extend(other.issues)
        self.args = (self._describe(),)

    def _describe(self) -> str:
        if len(self.issues) == 1:
            return f"Unexpected #[derive] attribute at {self.issues[0]}"
        details = "\n".join(f"  {issue}" for issue in self.issues)
        return f"Unexpected #[derive] attributes ({len(self.issues)}):\n{details}"


class ConfigError(RuntimeError):
    """Raised when a required generator setting cannot be resolved."""

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message)
        self.key = key


class CanonicalizeError(ConfigError):
    """Raised when a configured path cannot be made absolute and resolved."""

    def __init__(self, key: str, path: Path, reason: str) -> None:
        super().__init__(f"Unable to resolve {key} path {path}: {reason}", key=key)
        self.path = path


class GenerateError(RuntimeError):
    """Base class for failures while writing Godot resources."""


class ResourceWriteError(GenerateError):
    """Raised when a resource file or directory cannot be written."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Unable to write {path}: {reason}")
        self.path = path


__all__ = [
    "AttributeIssue",
    "CanonicalizeError",
    "ConfigError",
    "DeriveAttributeError",
    "GenerateError",
    "ParseError",
    "ReadError",
    "ResourceWriteError",
    "ScanError",
    "WalkError",
]
