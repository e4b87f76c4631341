"""Data model shared by the import graph and the call graph."""

import uuid
from dataclasses import dataclass, field
from typing import Iterator, Optional

FILE = "file"
DIR = "dir"

LOCAL = "local"
IMPORTED = "imported"
UNKNOWN = "unknown"


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class ProjectNode:
    """A file or directory of the analyzed project.

    ``path`` is project-relative and unique within one tree. ``imports``
    holds paths of other nodes (never the nodes themselves).
    """

    name: str
    path: str
    kind: str
    raw_text: Optional[str] = None
    syntax_tree: Optional[object] = None
    imports: list[str] = field(default_factory=list)
    children: list["ProjectNode"] = field(default_factory=list)
    id: str = field(default_factory=_new_id)

    @property
    def is_file(self) -> bool:
        return self.kind == FILE

    @property
    def is_dir(self) -> bool:
        return self.kind == DIR

    def iter_nodes(self) -> Iterator["ProjectNode"]:
        """Yield this node and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def iter_files(self) -> Iterator["ProjectNode"]:
        for node in self.iter_nodes():
            if node.is_file:
                yield node

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "type": self.kind,
        }
        if self.is_file:
            data["imports"] = list(self.imports)
            data["parsed"] = self.syntax_tree is not None
        else:
            data["contents"] = [child.to_dict() for child in self.children]
        return data


@dataclass
class FunctionCallEdge:
    """One call site inside a named function."""

    callee_name: str
    caller_name: Optional[str]
    line: int
    column: int
    resolution: str
    import_source: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "name": self.callee_name,
            "caller": self.caller_name,
            "location": {"line": self.line, "column": self.column},
            "resolved": self.resolution,
        }
        if self.import_source is not None:
            data["source"] = self.import_source
        return data


@dataclass(frozen=True)
class FunctionDependency:
    """Cross-file record linking a call to a declared function by name."""

    caller: str
    callee: str
    file: str

    def to_dict(self) -> dict:
        return {"caller": self.caller, "callee": self.callee, "file": self.file}
