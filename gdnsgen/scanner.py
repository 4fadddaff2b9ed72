"""Scanning of crate sources for types that derive ``NativeClass``."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Set

import tree_sitter_rust
from tree_sitter import Language, Node, Parser

from .errors import AttributeIssue, DeriveAttributeError, ParseError, ReadError
from .logging import get_logger
from .models import Classes
from .walker import iter_source_files

MARKER = "NativeClass"

RUST_LANGUAGE = Language(tree_sitter_rust.language())

_DECLARATION_TYPES = frozenset({"struct_item", "enum_item"})
_COMMENT_TYPES = frozenset({"line_comment", "block_comment"})


@dataclass
class FileScan:
    """Names and attribute issues found in a single source file."""

    classes: Set[str] = field(default_factory=set)
    issues: List[AttributeIssue] = field(default_factory=list)


class CrateScanner:
    """Finds struct and enum declarations that derive a marker trait."""

    def __init__(self, marker: str = MARKER) -> None:
        self.marker = marker
        self._marker_bytes = marker.encode("utf-8")
        self._parser = Parser(RUST_LANGUAGE)
        self.logger = get_logger("scanner")

    def scan(self, root: Path | str, exclude_paths: Iterable[str] = ()) -> Classes:
        """Walk ``root`` for ``*.rs`` files and return every marked type name."""
        root_path = Path(root).expanduser()
        self.logger.debug("Scanning crate sources under %s", root_path)
        return self.scan_files(iter_source_files(root_path, ".rs", exclude_paths))

    def scan_files(self, paths: Iterable[Path | str]) -> Classes:
        """Return the marked type names declared across ``paths``.

        Read and parse failures abort immediately. Malformed ``derive``
        attributes are collected from every file and raised together as one
        :class:`DeriveAttributeError` once all files were scanned.
        """
        classes: Set[str] = set()
        issues: List[AttributeIssue] = []
        file_count = 0

        for path in paths:
            result = self.scan_file(Path(path))
            classes |= result.classes
            issues.extend(result.issues)
            file_count += 1

        if issues:
            issues.sort()
            error = DeriveAttributeError(issues[:1])
            for issue in issues[1:]:
                error.combine(DeriveAttributeError([issue]))
            raise error

        self.logger.info("Found %d class(es) in %d file(s)", len(classes), file_count)
        return frozenset(classes)

    def scan_file(self, path: Path) -> FileScan:
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ReadError(path, str(exc)) from exc

        tree = self._parser.parse(source.encode("utf-8"))
        root = tree.root_node
        if root.has_error:
            bad = _first_error(root) or root
            line, column = bad.start_point
            what = f"missing {bad.type}" if bad.is_missing else "unexpected syntax"
            raise ParseError(path, line + 1, column + 1, what)

        result = FileScan()
        self._visit(root, path, result)
        self.logger.debug("%s: %d class(es)", path, len(result.classes))
        return result

    def _visit(self, root: Node, path: Path, result: FileScan) -> None:
        # Explicit stack: generated code can nest far deeper than the
        # interpreter recursion limit.
        stack = list(reversed(root.named_children))
        while stack:
            node = stack.pop()
            if node.type in _DECLARATION_TYPES:
                self._check_declaration(node, path, result)
            stack.extend(reversed(node.named_children))

    def _check_declaration(self, node: Node, path: Path, result: FileScan) -> None:
        name_node = node.child_by_field_name("name")
        if name_node is None or name_node.text is None:
            return

        derives = False
        for attribute in _outer_attributes(node):
            arguments = attribute.child_by_field_name("arguments")
            if arguments is None:
                if attribute.child_by_field_name("value") is not None:
                    line, column = attribute.start_point
                    result.issues.append(
                        AttributeIssue(
                            path, line + 1, column + 1, "expected a parenthesized derive list"
                        )
                    )
                continue
            for token in arguments.named_children:
                if token.type == "identifier" and token.text == self._marker_bytes:
                    derives = True
                    break

        if derives:
            result.classes.add(name_node.text.decode("utf-8"))


def _outer_attributes(node: Node) -> List[Node]:
    """Return the ``#[derive(...)]`` attributes attached to ``node``."""
    attributes: List[Node] = []
    sibling = node.prev_named_sibling
    while sibling is not None and (
        sibling.type == "attribute_item" or sibling.type in _COMMENT_TYPES
    ):
        if sibling.type == "attribute_item":
            for attribute in sibling.named_children:
                if attribute.type != "attribute" or attribute.named_child_count == 0:
                    continue
                path_node = attribute.named_children[0]
                if path_node.type == "identifier" and path_node.text == b"derive":
                    attributes.append(attribute)
        sibling = sibling.prev_named_sibling
    attributes.reverse()
    return attributes


def _first_error(root: Node) -> Optional[Node]:
    """Return the first ERROR or MISSING node of ``root`` in source order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            return node
        stack.extend(
            child for child in reversed(node.children) if child.has_error or child.is_missing
        )
    return None


def scan_files(paths: Iterable[Path | str]) -> Classes:
    """Scan the given Rust source files for types that derive ``NativeClass``."""
    return CrateScanner().scan_files(paths)


def scan_crate(root: Path | str, exclude_paths: Iterable[str] = ()) -> Classes:
    """Scan the directory at ``root`` for all ``*.rs`` files and find ``NativeClass`` types."""
    return CrateScanner().scan(root, exclude_paths)


__all__ = ["MARKER", "CrateScanner", "FileScan", "scan_crate", "scan_files"]
