"""
Java source scanning via tree-sitter: locates the import block of a file
and checks whether a rewritten file still parses.

Uses tree-sitter >= 0.22 API with the tree-sitter-java language package.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import tree_sitter as ts
import tree_sitter_java

from .imports import normalize_import

logger = logging.getLogger(__name__)

_PARSER: ts.Parser | None = None


def _get_parser() -> ts.Parser:
    """Return the shared Java parser, creating it on first use."""
    global _PARSER
    if _PARSER is None:
        _PARSER = ts.Parser(ts.Language(tree_sitter_java.language()))
    return _PARSER


@dataclass
class ImportBlock:
    """Existing imports of a file and the character span they occupy."""
    imports: list[str] = field(default_factory=list)
    start_pos: int = 0
    end_pos: int = 0

    @property
    def span(self) -> tuple[int, int]:
        return (self.start_pos, self.end_pos)


def _char_offset(source_bytes: bytes, byte_offset: int) -> int:
    """Convert a UTF-8 byte offset into a character offset."""
    return len(source_bytes[:byte_offset].decode("utf-8", errors="replace"))


def find_import_block(text: str) -> ImportBlock:
    """Find the import section of Java source *text*.

    The span runs from the first top-level import declaration to the end
    of the last one.  A file without imports gets an empty span right
    after its package declaration, or at offset 0 if it has none.
    """
    source_bytes = text.encode("utf-8")
    tree = _get_parser().parse(source_bytes)

    imports: list[str] = []
    first_byte: int | None = None
    last_byte = 0
    package_end = 0

    for node in tree.root_node.children:
        if node.type == "package_declaration":
            package_end = node.end_byte
        elif node.type == "import_declaration":
            if first_byte is None:
                first_byte = node.start_byte
            last_byte = node.end_byte
            stmt = normalize_import(node.text.decode("utf-8", errors="replace"))
            if stmt not in imports:
                imports.append(stmt)

    if first_byte is None:
        pos = _char_offset(source_bytes, package_end)
        return ImportBlock(imports=[], start_pos=pos, end_pos=pos)

    return ImportBlock(
        imports=imports,
        start_pos=_char_offset(source_bytes, first_byte),
        end_pos=_char_offset(source_bytes, last_byte),
    )


def has_syntax_errors(text: str) -> bool:
    """True if tree-sitter reports an error or missing node in *text*."""
    tree = _get_parser().parse(text.encode("utf-8"))
    return tree.root_node.has_error
