"""Repository exploration: metadata, file tree and prioritized file contents."""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import Iterable, List, Optional, Sequence, Set, Union

from .github import GitHubClient, Transport
from .logging import get_logger
from .models import ExplorationResult, FileRecord, RepositoryInfo, TreeEntry

MAX_PRIORITY_FILES = 50
FALLBACK_BRANCH = "main"

_CRITICAL_FILES: tuple[str, ...] = (
    # package management
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "requirements.txt",
    "setup.py",
    "pyproject.toml",
    "Pipfile",
    "composer.json",
    "Gemfile",
    "go.mod",
    "Cargo.toml",
    # framework and tooling configuration
    "next.config.js",
    "next.config.mjs",
    "nuxt.config.js",
    "vue.config.js",
    "angular.json",
    "svelte.config.js",
    "vite.config.js",
    "webpack.config.js",
    "tailwind.config.js",
    "postcss.config.js",
    "tsconfig.json",
    "jsconfig.json",
    "babel.config.js",
    ".eslintrc.js",
    ".eslintrc.json",
    "prettier.config.js",
    # infrastructure
    "Dockerfile",
    "docker-compose.yml",
    "docker-compose.yaml",
    "vercel.json",
    "netlify.toml",
    ".env.example",
    ".env.local.example",
    # database
    "prisma/schema.prisma",
    "supabase/config.toml",
    # documentation
    "README.md",
    "CHANGELOG.md",
    "LICENSE",
    # ci
    ".github/workflows/deploy.yml",
    ".github/workflows/ci.yml",
    ".github/workflows/test.yml",
)

_IMPORTANT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^src/.*\.(ts|tsx|js|jsx)$"),
    re.compile(r"^app/.*\.(ts|tsx|js|jsx)$"),
    re.compile(r"^pages/.*\.(ts|tsx|js|jsx)$"),
    re.compile(r"^components/.*\.(ts|tsx|js|jsx)$"),
    re.compile(r"^lib/.*\.(ts|tsx|js|jsx)$"),
    re.compile(r"^utils/.*\.(ts|tsx|js|jsx)$"),
    re.compile(r"^hooks/.*\.(ts|tsx|js|jsx)$"),
    re.compile(r"^api/.*\.(ts|tsx|js|jsx)$"),
    re.compile(r"^server/.*\.(ts|tsx|js|jsx)$"),
    re.compile(r"supabase/migrations/.*\.sql$"),
    re.compile(r".*\.config\.(js|ts|mjs)$"),
    re.compile(r".*\.env\.example$"),
)

_TYPE_BY_EXTENSION = {
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "json": "json",
    "md": "markdown",
    "yml": "yaml",
    "yaml": "yaml",
    "toml": "toml",
    "sql": "sql",
    "py": "python",
    "rb": "ruby",
    "go": "go",
    "rs": "rust",
    "php": "php",
    "java": "java",
    "css": "css",
    "scss": "scss",
    "html": "html",
}

PathLike = Union[TreeEntry, str]


def get_file_type(path: str) -> str:
    """Map a path's extension onto a lowercase language tag, ``text`` if unknown."""
    extension = path.rsplit(".", 1)[-1].lower()
    return _TYPE_BY_EXTENSION.get(extension, "text")


def build_directory_structure(all_files: Iterable[PathLike]) -> List[str]:
    """Return the sorted set of ancestor directories of every file path."""
    directories: Set[str] = set()
    for entry in all_files:
        parts = _path_of(entry).split("/")
        for depth in range(1, len(parts)):
            directories.add("/".join(parts[:depth]))
    return sorted(directories)


def _path_of(entry: PathLike) -> str:
    return entry if isinstance(entry, str) else entry.path


class RepositoryExplorer:
    """Collects repository metadata and a bounded set of file contents from GitHub."""

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        *,
        branch: str | None = None,
        max_files: int = MAX_PRIORITY_FILES,
        client: GitHubClient | None = None,
        transport: Transport | None = None,
        **client_options: object,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.branch = branch
        self.max_files = max(0, min(max_files, MAX_PRIORITY_FILES))
        self.client = client or GitHubClient(
            token, owner, repo, transport=transport, **client_options  # type: ignore[arg-type]
        )
        self.logger = get_logger("explorer")
        self._repository_info: Optional[RepositoryInfo] = None

    def explore(self) -> ExplorationResult:
        """Run the exploration sequence and return the hand-off artifact."""
        self.logger.info("Exploring repository %s/%s", self.owner, self.repo)
        try:
            repository_info = self.get_repository_info()
            all_files = self.get_all_files()
            selected = self.prioritize_files(all_files)
            files = self.fetch_file_contents(selected)
            directories = self.build_directory_structure(all_files)
        except Exception:
            self.logger.error("Repository exploration failed for %s/%s", self.owner, self.repo)
            raise

        self.logger.info(
            "Exploration complete: scanned %d files, fetched %d key files",
            len(all_files),
            len(files),
        )
        return ExplorationResult(
            repository_info=repository_info,
            files=files,
            directory_structure=directories,
            total_files_scanned=len(all_files),
            analysis_timestamp=datetime.now(UTC).isoformat(),
        )

    def get_repository_info(self) -> RepositoryInfo:
        self.logger.debug("Fetching repository information")
        self._repository_info = self.client.get_repository()
        return self._repository_info

    def get_default_branch(self) -> str:
        """Branch used for the tree fetch.

        An explicit ``branch`` wins, then the repository's reported default
        branch, then ``main``.
        """
        if self.branch:
            return self.branch
        if self._repository_info is not None and self._repository_info.default_branch:
            return self._repository_info.default_branch
        return FALLBACK_BRANCH

    def get_all_files(self) -> List[TreeEntry]:
        branch = self.get_default_branch()
        self.logger.debug("Listing files on branch %s", branch)
        return self.client.get_tree(branch)

    def prioritize_files(self, all_files: Sequence[PathLike]) -> List[str]:
        """Select at most ``max_files`` paths: critical files first, then pattern matches."""
        present = {_path_of(entry) for entry in all_files}
        selected: List[str] = []
        seen: Set[str] = set()

        for name in _CRITICAL_FILES:
            if len(selected) >= self.max_files:
                break
            if name in present and name not in seen:
                selected.append(name)
                seen.add(name)

        for entry in all_files:
            if len(selected) >= self.max_files:
                break
            path = _path_of(entry)
            if path in seen:
                continue
            if any(pattern.search(path) for pattern in _IMPORTANT_PATTERNS):
                selected.append(path)
                seen.add(path)

        self.logger.debug("Selected %d priority files for analysis", len(selected))
        return selected

    def fetch_file_contents(self, paths: Sequence[str]) -> List[FileRecord]:
        """Fetch and decode each path in order; individual failures are skipped."""
        self.logger.debug("Fetching contents of %d files", len(paths))
        records: List[FileRecord] = []
        fetched: Set[str] = set()
        for path in paths:
            if path in fetched:
                continue
            try:
                result = self.client.get_file(path)
            except Exception as exc:
                self.logger.warning("Failed to fetch %s: %s", path, exc)
                continue
            if result is None:
                self.logger.debug("Skipping %s: no base64 content returned", path)
                continue
            content, size = result
            records.append(FileRecord(path=path, content=content, size=size, type=get_file_type(path)))
            fetched.add(path)
        self.logger.debug("Fetched %d file contents", len(records))
        return records

    def build_directory_structure(self, all_files: Iterable[PathLike]) -> List[str]:
        return build_directory_structure(all_files)


__all__ = [
    "FALLBACK_BRANCH",
    "MAX_PRIORITY_FILES",
    "RepositoryExplorer",
    "build_directory_structure",
    "get_file_type",
]
