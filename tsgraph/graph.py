"""File-level import graph.

Resolves the relative import declarations of every parsed file against the
whole project tree:

1. Collect the top-level ``import ... from "<specifier>"`` declarations
2. Skip package imports (specifiers not starting with ".")
3. Resolve the specifier against the importing file's path
4. Look up the resolved path in the tree, ignoring JS/TS extensions
5. Record the found node's path in the importing file's ``imports``

Import cycles are kept as-is; nothing here follows ``imports`` edges, so
cycles cannot cause non-termination.
"""

import logging
import re
from dataclasses import replace
from typing import Iterable, Optional, Union

from .models import ProjectNode
from .parser import SyntaxTree, is_source_file
from .resolver import is_relative_specifier, resolve_import

logger = logging.getLogger(__name__)

_SOURCE_EXT_RE = re.compile(r"\.(js|jsx|ts|tsx)$")


def strip_source_extension(path: str) -> str:
    return _SOURCE_EXT_RE.sub("", path)


def find_by_path(
    tree: Union[ProjectNode, Iterable[ProjectNode]], target_path: str
) -> Optional[ProjectNode]:
    """Find a file node by path, ignoring .js/.jsx/.ts/.tsx on both sides.

    Directories are searched depth-first, children in stored order; the
    first match wins.
    """
    nodes = [tree] if isinstance(tree, ProjectNode) else tree
    target = strip_source_extension(target_path)

    for node in nodes:
        if node.is_file and strip_source_extension(node.path) == target:
            return node
        if node.is_dir and node.children:
            found = find_by_path(node.children, target_path)
            if found is not None:
                return found
    return None


def import_specifiers(syntax_tree: SyntaxTree) -> list[str]:
    """Return the module specifiers of top-level import declarations in order."""
    specifiers = []
    for node in syntax_tree.body():
        if node.type != "import_statement":
            continue
        source_node = node.child_by_field_name("source")
        if source_node is None or source_node.type != "string":
            continue
        # strip the quotes
        value = syntax_tree.text_of(source_node)[1:-1]
        if value:
            specifiers.append(value)
    return specifiers


def _resolve_file_imports(file: ProjectNode, root: ProjectNode) -> list[str]:
    imports = []
    for specifier in import_specifiers(file.syntax_tree):
        if not is_relative_specifier(specifier):
            continue

        resolved = resolve_import(specifier, file.path)
        target = find_by_path(root, resolved)
        if target is None:
            logger.debug(f"Unresolved import {specifier!r} in {file.path} (looked for {resolved})")
            continue
        if is_source_file(target.name) and target.syntax_tree is None:
            # failed to parse, so it is not a graph node
            logger.debug(f"Import {specifier!r} in {file.path} points at unparsed {target.path}")
            continue
        imports.append(target.path)
    return imports


def _clone(node: ProjectNode) -> ProjectNode:
    """Copy the node structure; syntax trees and texts are shared, not copied."""
    return replace(
        node,
        imports=list(node.imports),
        children=[_clone(child) for child in node.children],
    )


def build_import_graph(tree: ProjectNode) -> ProjectNode:
    """Return a copy of ``tree`` with every parsed file's ``imports`` filled in.

    The input tree is left untouched.
    """
    resolved_tree = _clone(tree)

    for file in resolved_tree.iter_files():
        if file.syntax_tree is None:
            continue
        file.imports = _resolve_file_imports(file, resolved_tree)

    return resolved_tree


def import_adjacency(tree: ProjectNode) -> dict[str, list[str]]:
    """Map each parsed file's path to the paths it imports."""
    return {
        file.path: list(file.imports)
        for file in tree.iter_files()
        if file.syntax_tree is not None
    }
