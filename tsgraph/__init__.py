"""Import graphs and call graphs for JavaScript/TypeScript projects."""

from .calls import analyze, analyze_tree
from .errors import FetchError, FileError, InvalidUrlFormat, NonRelativeImport, ParseError, TsGraphError
from .graph import build_import_graph, find_by_path
from .linker import link_dependencies
from .models import FunctionCallEdge, FunctionDependency, ProjectNode
from .parser import parse
from .resolver import resolve_import
from .scanner import PROGRESS_COMPLETE, ProjectAnalysis, analyze_project, scan_tree
from .sources import GitHubTreeProvider, LocalTreeProvider, SourceEntry, parse_github_url

__version__ = "0.1.0"

__all__ = [
    "FetchError",
    "FileError",
    "FunctionCallEdge",
    "FunctionDependency",
    "GitHubTreeProvider",
    "InvalidUrlFormat",
    "LocalTreeProvider",
    "NonRelativeImport",
    "PROGRESS_COMPLETE",
    "ParseError",
    "ProjectAnalysis",
    "ProjectNode",
    "SourceEntry",
    "TsGraphError",
    "analyze",
    "analyze_project",
    "analyze_tree",
    "build_import_graph",
    "find_by_path",
    "link_dependencies",
    "parse",
    "parse_github_url",
    "resolve_import",
    "scan_tree",
]
