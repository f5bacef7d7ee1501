"""GitHub API access."""

from .client import (
    DEFAULT_API_URL,
    DEFAULT_USER_AGENT,
    GitHubClient,
    GitHubRequest,
    GitHubResponse,
    NetworkError,
    Transport,
)

__all__ = [
    "DEFAULT_API_URL",
    "DEFAULT_USER_AGENT",
    "GitHubClient",
    "GitHubRequest",
    "GitHubResponse",
    "NetworkError",
    "Transport",
]
