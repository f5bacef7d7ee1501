"""Minimal GitHub REST v3 client used by the repository explorer."""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from ..logging import get_logger
from ..models import RepositoryInfo, TreeEntry

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_USER_AGENT = "techscan-agent"
DEFAULT_TIMEOUT = 30.0


class NetworkError(RuntimeError):
    """Raised when a GitHub request fails or returns a non-2xx status."""

    def __init__(self, message: str, *, status: Optional[int] = None, url: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.url = url


@dataclass
class GitHubRequest:
    """Represents one GET against the GitHub API."""

    url: str
    headers: Dict[str, str]
    timeout: Optional[float]


@dataclass
class GitHubResponse:
    """Status and raw body returned by a transport."""

    status: int
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        try:
            return json.loads(self.body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise NetworkError("GitHub API returned invalid JSON", status=self.status) from exc


Transport = Callable[[GitHubRequest], GitHubResponse]


class GitHubClient:
    """Issues authenticated, strictly sequential GETs for one owner/repo pair."""

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        *,
        api_url: str = DEFAULT_API_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        request_timeout: Optional[float] = DEFAULT_TIMEOUT,
        transport: Transport | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.api_url = api_url.rstrip("/")
        self.request_timeout = request_timeout
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": user_agent,
        }
        self._transport = transport or _urllib_transport
        self.logger = get_logger("github")

    @property
    def repo_url(self) -> str:
        return f"{self.api_url}/repos/{quote(self.owner, safe='')}/{quote(self.repo, safe='')}"

    def get(self, url: str) -> GitHubResponse:
        self.logger.debug("GET %s", url)
        request = GitHubRequest(url=url, headers=dict(self.headers), timeout=self.request_timeout)
        return self._transport(request)

    def get_repository(self) -> RepositoryInfo:
        url = self.repo_url
        response = self.get(url)
        if not response.ok:
            raise NetworkError(
                f"Failed to fetch repository info: {response.status}",
                status=response.status,
                url=url,
            )
        payload = response.json()
        if not isinstance(payload, dict):
            raise NetworkError("Repository info response was not an object", status=response.status, url=url)
        return RepositoryInfo.from_api(payload)

    def get_tree(self, branch: str) -> List[TreeEntry]:
        """Return blob entries of the recursive tree for ``branch``."""
        url = f"{self.repo_url}/git/trees/{quote(branch, safe='')}?recursive=1"
        response = self.get(url)
        if not response.ok:
            raise NetworkError(
                f"Failed to fetch file tree: {response.status}",
                status=response.status,
                url=url,
            )
        payload = response.json()
        tree = payload.get("tree") if isinstance(payload, dict) else None
        if not isinstance(tree, list):
            raise NetworkError("File tree response did not include a tree", status=response.status, url=url)
        if isinstance(payload, dict) and payload.get("truncated"):
            self.logger.warning("GitHub truncated the tree listing for %s/%s", self.owner, self.repo)

        entries: List[TreeEntry] = []
        for item in tree:
            if not isinstance(item, dict) or item.get("type") != "blob":
                continue
            path = item.get("path")
            if not isinstance(path, str):
                continue
            size = item.get("size")
            entries.append(TreeEntry(path=path, type="blob", size=size if isinstance(size, int) else 0))
        return entries

    def get_file(self, path: str) -> Optional[tuple[str, int]]:
        """Return ``(decoded_text, size)`` for ``path``.

        Returns None when the API answers without base64 content (directories,
        submodules, files over the contents API size limit). Raises NetworkError
        on non-2xx statuses.
        """
        url = f"{self.repo_url}/contents/{quote(path)}"
        response = self.get(url)
        if not response.ok:
            raise NetworkError(f"Failed to fetch {path}: {response.status}", status=response.status, url=url)
        payload = response.json()
        if not isinstance(payload, dict):
            return None
        content = payload.get("content")
        if not content or payload.get("encoding") != "base64":
            return None
        try:
            raw = base64.b64decode(content)
        except (binascii.Error, ValueError) as exc:
            raise NetworkError(f"Invalid base64 content for {path}", status=response.status, url=url) from exc
        size = payload.get("size")
        return raw.decode("utf-8", errors="replace"), size if isinstance(size, int) else len(raw)


def _urllib_transport(request: GitHubRequest) -> GitHubResponse:
    http_request = Request(request.url, headers=request.headers, method="GET")
    timeout = request.timeout or DEFAULT_TIMEOUT
    try:
        with urlopen(http_request, timeout=timeout) as response:  # type: ignore[arg-type]
            return GitHubResponse(
                status=response.status,
                body=response.read(),
                headers={key.lower(): value for key, value in response.headers.items()},
            )
    except HTTPError as exc:
        body = exc.read() if hasattr(exc, "read") else b""
        return GitHubResponse(status=exc.code, body=body or b"")
    except URLError as exc:
        raise NetworkError(f"GitHub request failed: {exc.reason}", url=request.url) from exc
    except OSError as exc:  # socket timeouts surface outside URLError
        raise NetworkError(f"GitHub request failed: {exc}", url=request.url) from exc


__all__ = [
    "DEFAULT_API_URL",
    "DEFAULT_USER_AGENT",
    "GitHubClient",
    "GitHubRequest",
    "GitHubResponse",
    "NetworkError",
    "Transport",
]
