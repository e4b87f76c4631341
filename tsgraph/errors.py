"""Exceptions raised while analyzing a project tree."""

from dataclasses import dataclass
from typing import Optional


class TsGraphError(Exception):
    """Base class for all tsgraph errors."""


class FetchError(TsGraphError):
    """Raised when the source tree (or one of its entries) cannot be fetched."""

    def __init__(self, target: str, reason: str):
        self.target = target
        self.reason = reason
        super().__init__(f"Failed to fetch {target}: {reason}")


class InvalidUrlFormat(TsGraphError, ValueError):
    """Raised when a repository URL does not match the expected format."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Invalid GitHub URL format: {url}")


class ParseError(TsGraphError):
    """Raised when a source file fails to parse.

    ``line`` is 1-based and ``column`` is 0-based.
    """

    def __init__(self, path: str, line: int, column: int, detail: str = "syntax error"):
        self.path = path
        self.line = line
        self.column = column
        self.detail = detail
        super().__init__(f"{path}:{line}:{column}: {detail}")


class NonRelativeImport(TsGraphError, ValueError):
    """Raised when a package/bare import specifier is given to the resolver."""

    def __init__(self, specifier: str):
        self.specifier = specifier
        super().__init__(f"Not a relative import: {specifier!r}")


@dataclass
class FileError:
    """A file-scoped failure recorded on an analysis result."""

    path: str
    message: str
    line: Optional[int] = None
    column: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "message": self.message,
            "line": self.line,
            "column": self.column,
        }
