"""Project scanning and analysis runs.

A run:

1. Recursively lists the source tree through a provider, skipping excluded
   entries and reporting progress per file
2. Fetches and parses every .js/.jsx/.ts/.tsx file and collects its call
   edges
3. Resolves the import graph over the complete tree
4. Links cross-file function dependencies

Every run owns its results; call edges are accumulated on the returned
ScanResult, never in module state. A file that fails to parse is recorded
in ``errors`` and contributes nothing to either graph; fetch failures
abort the run.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Callable, Optional

from .calls import analyze_tree
from .errors import FileError, ParseError
from .graph import build_import_graph
from .ignore import is_excluded, load_exclusions
from .linker import link_dependencies
from .models import DIR, FILE, FunctionCallEdge, FunctionDependency, ProjectNode
from .parser import dialect_for_path, parse
from .sources import SourceTreeProvider

if TYPE_CHECKING:
    from pathspec import PathSpec

logger = logging.getLogger(__name__)

PROGRESS_COMPLETE = "Parsing Complete"

# Files above this size are recorded as errors and not parsed;
# override with TSGRAPH_MAX_FILE_SIZE
DEFAULT_MAX_FILE_SIZE = 5_000_000  # 5MB
MAX_FILE_SIZE = int(os.environ.get("TSGRAPH_MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE))

ProgressCallback = Callable[[str], object]


@dataclass
class ScanResult:
    tree: ProjectNode
    call_edges: list[FunctionCallEdge] = field(default_factory=list)
    errors: list[FileError] = field(default_factory=list)


@dataclass
class ProjectAnalysis:
    """Everything one analysis run produces."""

    tree: ProjectNode
    call_edges: list[FunctionCallEdge]
    dependencies: list[FunctionDependency]
    errors: list[FileError]

    def to_dict(self) -> dict:
        return {
            "tree": self.tree.to_dict(),
            "call_edges": [edge.to_dict() for edge in self.call_edges],
            "dependencies": [dep.to_dict() for dep in self.dependencies],
            "errors": [error.to_dict() for error in self.errors],
        }


def _load_file(
    provider: SourceTreeProvider,
    name: str,
    path: str,
    content_ref: Optional[str],
    result: ScanResult,
    max_file_size: int,
) -> ProjectNode:
    node = ProjectNode(name=name, path=path, kind=FILE)
    dialect = dialect_for_path(name)
    if dialect is None:
        return node

    text = provider.fetch_content(content_ref or path)
    node.raw_text = text

    size = len(text.encode("utf-8"))
    if size > max_file_size:
        logger.warning(f"Skipping {path}: {size:,} bytes exceeds limit of {max_file_size:,} bytes")
        result.errors.append(FileError(path=path, message=f"file too large ({size:,} bytes)"))
        return node

    try:
        node.syntax_tree = parse(text, dialect, path=path)
    except ParseError as e:
        logger.warning(f"Parse failed for {path}: {e}")
        result.errors.append(FileError(path=path, message=e.detail, line=e.line, column=e.column))
        return node

    result.call_edges.extend(analyze_tree(node.syntax_tree))
    return node


def _scan_directory(
    provider: SourceTreeProvider,
    path: str,
    result: ScanResult,
    on_progress: Optional[ProgressCallback],
    exclusions: Optional["PathSpec"],
    max_file_size: int,
) -> list[ProjectNode]:
    items = []
    for entry in provider.list_entries(path):
        if exclusions is not None and is_excluded(entry.name, entry.kind == DIR, exclusions):
            logger.debug(f"Excluded {entry.path}")
            continue

        if entry.kind == FILE:
            if on_progress is not None:
                on_progress(entry.name)
            items.append(_load_file(provider, entry.name, entry.path, entry.content_ref, result, max_file_size))
        elif entry.kind == DIR:
            children = _scan_directory(provider, entry.path, result, on_progress, exclusions, max_file_size)
            items.append(ProjectNode(name=entry.name, path=entry.path, kind=DIR, children=children))
    return items


def scan_tree(
    provider: SourceTreeProvider,
    path: str = "",
    on_progress: Optional[ProgressCallback] = None,
    exclusions: Optional["PathSpec"] = None,
    max_file_size: int = MAX_FILE_SIZE,
    respect_ignore: bool = True,
) -> ScanResult:
    """Build the ProjectNode tree rooted at ``path`` and collect call edges.

    Args:
        provider: Source tree provider
        path: Directory to start from ("" for the root)
        on_progress: Called with each file name, in traversal order
        exclusions: PathSpec of excluded entry names (None: the default template)
        max_file_size: Files larger than this many bytes are not parsed
        respect_ignore: If False, nothing is excluded

    Returns:
        ScanResult whose tree is a directory node for ``path``

    Raises:
        FetchError: If a listing or file content cannot be fetched
    """
    if not respect_ignore:
        exclusions = None
    elif exclusions is None:
        exclusions = load_exclusions()

    name = PurePosixPath(path).name if path else ""
    root = ProjectNode(name=name, path=path, kind=DIR)
    result = ScanResult(tree=root)
    root.children = _scan_directory(provider, path, result, on_progress, exclusions, max_file_size)
    return result


def analyze_project(
    provider: SourceTreeProvider,
    path: str = "",
    on_progress: Optional[ProgressCallback] = None,
    exclusions: Optional["PathSpec"] = None,
    max_file_size: int = MAX_FILE_SIZE,
    respect_ignore: bool = True,
) -> ProjectAnalysis:
    """Run a complete analysis: scan, import graph, cross-file dependencies."""
    scan = scan_tree(provider, path, on_progress, exclusions, max_file_size, respect_ignore)

    tree = build_import_graph(scan.tree)
    dependencies = link_dependencies(tree)

    logger.debug(
        f"Analyzed {sum(1 for _ in tree.iter_files())} files: "
        f"{len(scan.call_edges)} call edges, {len(dependencies)} dependencies, {len(scan.errors)} errors"
    )
    if on_progress is not None:
        on_progress(PROGRESS_COMPLETE)

    return ProjectAnalysis(
        tree=tree,
        call_edges=scan.call_edges,
        dependencies=dependencies,
        errors=scan.errors,
    )
