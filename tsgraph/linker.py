"""Cross-file function dependencies by declared-name matching.

This is a coarse heuristic layer: names are matched project-wide with no
import or scope checking, so same-named functions in different files alias
and ``caller`` equals ``callee`` by construction. Use the per-file call
edges from :mod:`tsgraph.calls` for binding-aware resolution.
"""

import logging
from typing import Iterable, Union

from .models import FunctionDependency, ProjectNode
from .calls import FUNCTION_DECLARATIONS

logger = logging.getLogger(__name__)


def _parsed_files(project: Union[ProjectNode, Iterable[ProjectNode]]) -> list[ProjectNode]:
    roots = [project] if isinstance(project, ProjectNode) else list(project)
    return [
        file
        for root in roots
        for file in root.iter_files()
        if file.syntax_tree is not None
    ]


def build_function_map(files: list[ProjectNode]) -> dict[str, tuple[str, str]]:
    """Map top-level function names to (file path, file id); last one wins."""
    function_map = {}
    for file in files:
        tree = file.syntax_tree
        for node in tree.body():
            if node.type not in FUNCTION_DECLARATIONS:
                continue
            name_node = node.child_by_field_name("name")
            if name_node is None:
                continue
            name = tree.text_of(name_node)
            if name in function_map:
                logger.debug(f"Function {name} redeclared in {file.path} (was {function_map[name][0]})")
            function_map[name] = (file.path, file.id)
    return function_map


def _top_level_call_names(file: ProjectNode) -> list[str]:
    """Identifiers called directly by top-level expression statements."""
    tree = file.syntax_tree
    names = []
    for node in tree.body():
        if node.type != "expression_statement":
            continue
        expression = node.named_children[0] if node.named_children else None
        if expression is None or expression.type != "call_expression":
            continue
        callee = expression.child_by_field_name("function")
        if callee is not None and callee.type == "identifier":
            names.append(tree.text_of(callee))
    return names


def link_dependencies(
    project: Union[ProjectNode, Iterable[ProjectNode]]
) -> list[FunctionDependency]:
    """Link top-level calls to functions declared anywhere in the project.

    Args:
        project: Root node, or a sequence of root nodes, of a project tree

    Returns:
        FunctionDependency records in file order
    """
    files = _parsed_files(project)
    function_map = build_function_map(files)

    dependencies = []
    for file in files:
        for callee in _top_level_call_names(file):
            if callee in function_map:
                dependencies.append(FunctionDependency(caller=callee, callee=callee, file=file.path))
    return dependencies
