"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from tsgraph.models import DIR, FILE, ProjectNode
from tsgraph.parser import dialect_for_path, parse


def make_file(path: str, text: str | None = None) -> ProjectNode:
    """Build a file node, parsed when it is a JS/TS file with text."""
    name = path.rsplit("/", 1)[-1]
    node = ProjectNode(name=name, path=path, kind=FILE, raw_text=text)
    dialect = dialect_for_path(name)
    if text is not None and dialect is not None:
        node.syntax_tree = parse(text, dialect, path=path)
    return node


def make_dir(path: str, *children: ProjectNode) -> ProjectNode:
    name = path.rsplit("/", 1)[-1] if path else ""
    return ProjectNode(name=name, path=path, kind=DIR, children=list(children))


@pytest.fixture
def write_project(tmp_path: Path):
    """Write {relative path: content} to tmp_path and return the root."""

    def _write(files: dict[str, str]) -> Path:
        for rel, content in files.items():
            target = tmp_path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        return tmp_path

    return _write
