"""Configuration loading for techscan (.techscan.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .explorer import MAX_PRIORITY_FILES
from .github import DEFAULT_API_URL, DEFAULT_USER_AGENT
from .github.client import DEFAULT_TIMEOUT

CONFIG_FILENAME = ".techscan.yml"
DEFAULT_TOKEN_ENV = "GITHUB_TOKEN"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class GitHubConfig:
    """GitHub API access settings."""

    api_url: str = DEFAULT_API_URL
    user_agent: str = DEFAULT_USER_AGENT
    request_timeout: float = DEFAULT_TIMEOUT
    token_env: str = DEFAULT_TOKEN_ENV
    branch: Optional[str] = None


@dataclass
class ExplorerConfig:
    max_files: int = MAX_PRIORITY_FILES


@dataclass
class AnalysisConfig:
    """Defaults recorded in report metadata when callers omit them."""

    depth: str = "standard"
    focus_areas: List[str] = field(default_factory=list)


@dataclass
class TechScanConfig:
    """Represents the settings defined in .techscan.yml."""

    root: Path
    github: GitHubConfig = field(default_factory=GitHubConfig)
    explorer: ExplorerConfig = field(default_factory=ExplorerConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)

    def orchestrator_options(self) -> Dict[str, Any]:
        """Keyword arguments understood by ``AnalysisOrchestrator``."""
        return {
            "branch": self.github.branch,
            "max_files": self.explorer.max_files,
            "api_url": self.github.api_url,
            "user_agent": self.github.user_agent,
            "request_timeout": self.github.request_timeout,
        }


def load_config(config_path: Path) -> TechScanConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return TechScanConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    github = GitHubConfig()
    github_data = _as_dict(data.get("github"))
    if github_data:
        github.api_url = _as_str(github_data.get("api_url")) or github.api_url
        github.user_agent = _as_str(github_data.get("user_agent")) or github.user_agent
        timeout = _as_float(github_data.get("request_timeout"))
        if timeout is not None and timeout > 0:
            github.request_timeout = timeout
        github.token_env = _as_str(github_data.get("token_env")) or github.token_env
        github.branch = _as_str(github_data.get("branch"))

    explorer = ExplorerConfig()
    explorer_data = _as_dict(data.get("explorer"))
    max_files = _as_int(explorer_data.get("max_files")) if explorer_data else None
    if max_files is not None:
        explorer.max_files = max(0, min(max_files, MAX_PRIORITY_FILES))

    analysis = AnalysisConfig()
    analysis_data = _as_dict(data.get("analysis"))
    if analysis_data:
        analysis.depth = _as_str(analysis_data.get("depth")) or analysis.depth
        analysis.focus_areas = _as_str_list(analysis_data.get("focus_areas"))

    return TechScanConfig(root=root, github=github, explorer=explorer, analysis=analysis)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "AnalysisConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "ExplorerConfig",
    "GitHubConfig",
    "TechScanConfig",
    "load_config",
]
