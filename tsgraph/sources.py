"""Source tree providers.

A provider lists the entries of one directory and fetches file contents:

- LocalTreeProvider: a directory on disk
- GitHubTreeProvider: a GitHub repository via the contents API (httpx)

Both report failures as FetchError.
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

import httpx

from .errors import FetchError, InvalidUrlFormat

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
GITHUB_TOKEN = os.environ.get("GITHUB_TOKEN")
REQUEST_TIMEOUT = float(os.environ.get("TSGRAPH_REQUEST_TIMEOUT", 30))

_GITHUB_URL_RE = re.compile(r"^https://github\.com/([^/]+)/([^/]+?)(?:/(.*?))?/?$")


@dataclass
class SourceEntry:
    """One directory listing entry."""

    kind: str  # "file" or "dir"
    name: str
    path: str
    content_ref: Optional[str] = None


class SourceTreeProvider(Protocol):
    def list_entries(self, path: str) -> list[SourceEntry]: ...

    def fetch_content(self, content_ref: str) -> str: ...

    def close(self) -> None: ...


class LocalTreeProvider:
    """Serves a directory on disk; entry paths are POSIX, relative to root."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def list_entries(self, path: str) -> list[SourceEntry]:
        directory = self.root / path if path else self.root
        if not directory.is_dir():
            raise FetchError(str(directory), "not a directory")

        entries = []
        for child in sorted(directory.iterdir(), key=lambda p: p.name):
            rel = child.relative_to(self.root).as_posix()
            if child.is_dir():
                entries.append(SourceEntry(kind="dir", name=child.name, path=rel))
            elif child.is_file():
                entries.append(SourceEntry(kind="file", name=child.name, path=rel, content_ref=rel))
        return entries

    def fetch_content(self, content_ref: str) -> str:
        file_path = self.root / content_ref
        try:
            return file_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise FetchError(str(file_path), str(e)) from e

    def close(self) -> None:
        """Nothing to release; present so callers can close any provider."""


class GitHubTreeProvider:
    """Serves a GitHub repository through the REST contents API."""

    def __init__(
        self,
        owner: str,
        repo: str,
        token: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.owner = owner
        self.repo = repo
        token = token if token is not None else GITHUB_TOKEN

        headers = {"Accept": "application/vnd.github+json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.client = client or httpx.Client(
            base_url=GITHUB_API_URL, headers=headers, timeout=REQUEST_TIMEOUT
        )

    def _get(self, url: str) -> httpx.Response:
        try:
            response = self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise FetchError(url, str(e)) from e
        return response

    def list_entries(self, path: str) -> list[SourceEntry]:
        url = f"/repos/{self.owner}/{self.repo}/contents/{path}"
        logger.debug(f"Listing {self.owner}/{self.repo}:{path or '/'}")
        data = self._get(url).json()
        items = data if isinstance(data, list) else [data]

        entries = []
        for item in items:
            kind = item.get("type")
            if kind == "file":
                entries.append(SourceEntry(
                    kind="file",
                    name=item["name"],
                    path=item["path"],
                    content_ref=item.get("download_url"),
                ))
            elif kind == "dir":
                entries.append(SourceEntry(kind="dir", name=item["name"], path=item["path"]))
        return entries

    def fetch_content(self, content_ref: str) -> str:
        if not content_ref:
            raise FetchError(self.repo, "file has no download URL")
        return self._get(content_ref).text

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "GitHubTreeProvider":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def parse_github_url(url: str) -> tuple[str, str, str]:
    """Split a GitHub URL into (owner, repo, path).

    Accepts ``https://github.com/<owner>/<repo>`` optionally followed by a
    path and a trailing slash.

    Raises:
        InvalidUrlFormat: If the URL does not match
    """
    match = _GITHUB_URL_RE.match(url)
    if not match:
        raise InvalidUrlFormat(url)
    owner, repo, path = match.groups()
    return owner, repo, path or ""


def is_valid_github_url(url: str) -> bool:
    return _GITHUB_URL_RE.match(url) is not None


def provider_for(target: str) -> tuple[SourceTreeProvider, str]:
    """Pick a provider for a URL or local directory.

    Returns:
        (provider, start path)
    """
    if target.startswith(("http://", "https://")):
        owner, repo, path = parse_github_url(target)
        return GitHubTreeProvider(owner, repo), path

    root = Path(target)
    if not root.is_dir():
        raise FetchError(target, "not a directory")
    return LocalTreeProvider(root), ""
