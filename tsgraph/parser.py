"""Tree-sitter parsing for JavaScript/TypeScript sources.

Each file is parsed with the grammar matching its extension:

- ``.ts``: tree-sitter-typescript (typescript dialect)
- ``.tsx``: tree-sitter-typescript (tsx dialect)
- ``.js`` / ``.jsx``: tree-sitter-javascript (JSX included)

tree-sitter recovers from bad input instead of failing, so a tree that
contains ERROR or MISSING nodes is reported as a ParseError here.
"""

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Optional

import tree_sitter
import tree_sitter_javascript
import tree_sitter_typescript

from .errors import ParseError

logger = logging.getLogger(__name__)

EXTENSION_TO_DIALECT = {
    ".ts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".jsx": "javascript",
}

SUPPORTED_DIALECTS = {"typescript", "tsx", "javascript"}

_parsers: dict[str, tree_sitter.Parser] = {}


def dialect_for_path(path: str) -> Optional[str]:
    """Return the parser dialect for a file name, or None if not a source file."""
    return EXTENSION_TO_DIALECT.get(PurePosixPath(path).suffix.lower())


def is_source_file(name: str) -> bool:
    return dialect_for_path(name) is not None


def _get_parser(dialect: str) -> tree_sitter.Parser:
    """Get or create a tree-sitter parser for the dialect."""
    if dialect not in SUPPORTED_DIALECTS:
        raise ValueError(f"Unsupported dialect: {dialect}")

    if dialect not in _parsers:
        if dialect == "tsx":
            lang = tree_sitter.Language(tree_sitter_typescript.language_tsx())
        elif dialect == "typescript":
            lang = tree_sitter.Language(tree_sitter_typescript.language_typescript())
        else:
            lang = tree_sitter.Language(tree_sitter_javascript.language())
        _parsers[dialect] = tree_sitter.Parser(lang)
    return _parsers[dialect]


@dataclass
class SyntaxTree:
    """A parsed file: the tree-sitter tree plus the bytes it was parsed from."""

    tree: Any
    source: bytes
    dialect: str

    @property
    def root(self):
        return self.tree.root_node

    def text_of(self, node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def body(self) -> list:
        """Top-level statements of the program, comments excluded."""
        return [child for child in self.root.named_children if child.type != "comment"]

    def location_of(self, node) -> tuple[int, int]:
        """Return (1-based line, 0-based column) of a node's start.

        tree-sitter columns are byte offsets; the column here counts UTF-16
        code units, the way JavaScript tools report positions.
        """
        row, col = node.start_point[0], node.start_point[1]
        line_start = node.start_byte - col
        prefix = self.source[line_start:node.start_byte].decode("utf-8", errors="replace")
        return row + 1, len(prefix.encode("utf-16-le")) // 2


def _first_node(node, predicate):
    """First node in document order satisfying ``predicate``, searching error subtrees."""
    stack = [node]
    while stack:
        current = stack.pop()
        if predicate(current):
            return current
        stack.extend(reversed([c for c in current.children if c.has_error or c.is_missing]))
    return None


def _error_position(root):
    """Node to report for a tree with errors.

    A MISSING node marks where the expected token should have been. Otherwise
    the last token inside the first ERROR node is the one that could not be
    placed.
    """
    missing = _first_node(root, lambda n: n.is_missing)
    if missing is not None:
        return missing

    error = _first_node(root, lambda n: n.is_error)
    if error is None:
        return root
    while error.children:
        error = error.children[-1]
    return error


def parse(text: str, dialect: str = "tsx", path: str = "<string>") -> SyntaxTree:
    """Parse source text into a SyntaxTree.

    Args:
        text: Source text
        dialect: "typescript", "tsx" or "javascript"
        path: File path used in error messages

    Returns:
        SyntaxTree for the source

    Raises:
        ParseError: If the source contains a syntax error
        ValueError: If the dialect is unknown
    """
    parser = _get_parser(dialect)
    source = text.encode("utf-8")
    tree = parser.parse(source)
    syntax_tree = SyntaxTree(tree=tree, source=source, dialect=dialect)

    root = tree.root_node
    if root.has_error:
        bad = _error_position(root)
        line, column = syntax_tree.location_of(bad)
        detail = f"missing {bad.type}" if bad.is_missing else "unexpected token"
        logger.debug(f"Parse error in {path} at {line}:{column} ({detail})")
        raise ParseError(path, line, column, detail)

    return syntax_tree


def parse_file_text(text: str, path: str) -> SyntaxTree:
    """Parse text using the dialect implied by the file path."""
    dialect = dialect_for_path(path)
    if dialect is None:
        raise ValueError(f"Not a JavaScript/TypeScript file: {path}")
    return parse(text, dialect, path=path)
