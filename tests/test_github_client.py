"""Tests for techscan.github.client."""

from __future__ import annotations

import base64
import json
from urllib.error import URLError

import pytest

from techscan.github import GitHubClient, GitHubRequest, GitHubResponse, NetworkError
from techscan.github import client as client_module
from tests._fixtures.fake_github import FakeGitHub


def _client(transport, **kwargs) -> GitHubClient:
    return GitHubClient("secret-token", "acme", "webapp", transport=transport, **kwargs)


def test_requests_carry_auth_accept_and_user_agent_headers(fake_github: FakeGitHub) -> None:
    client = _client(fake_github, user_agent="custom-agent", request_timeout=5)

    client.get_repository()

    request = fake_github.requests[0]
    assert request.url == "https://api.github.com/repos/acme/webapp"
    assert request.headers["Authorization"] == "Bearer secret-token"
    assert request.headers["Accept"] == "application/vnd.github.v3+json"
    assert request.headers["User-Agent"] == "custom-agent"
    assert request.timeout == 5


def test_get_repository_parses_metadata(fake_github: FakeGitHub) -> None:
    info = _client(fake_github).get_repository()

    assert info.name == "webapp"
    assert info.full_name == "acme/webapp"
    assert info.description == "Sample web application"
    assert info.default_branch == "main"
    assert info.size == 1024


def test_get_repository_raises_on_non_2xx(fake_github: FakeGitHub) -> None:
    fake_github.repo_status = 404

    with pytest.raises(NetworkError) as excinfo:
        _client(fake_github).get_repository()

    assert str(excinfo.value) == "Failed to fetch repository info: 404"
    assert excinfo.value.status == 404
    assert excinfo.value.url.endswith("/repos/acme/webapp")


def test_get_tree_returns_blobs_only() -> None:
    fake = FakeGitHub(files={"package.json": "{}", "src/index.ts": "export {}"})

    entries = _client(fake).get_tree("main")

    assert sorted(entry.path for entry in entries) == ["package.json", "src/index.ts"]
    assert all(entry.type == "blob" for entry in entries)
    assert fake.requests[0].url.endswith("/git/trees/main?recursive=1")


def test_get_tree_raises_on_missing_branch(fake_github: FakeGitHub) -> None:
    with pytest.raises(NetworkError, match="Failed to fetch file tree: 404"):
        _client(fake_github).get_tree("develop")


def test_get_file_decodes_base64_content() -> None:
    fake = FakeGitHub(files={"README.md": "# Hello\n"})

    result = _client(fake).get_file("README.md")

    assert result == ("# Hello\n", 8)


def test_get_file_returns_none_without_base64_content() -> None:
    def transport(request: GitHubRequest) -> GitHubResponse:
        return GitHubResponse(status=200, body=json.dumps({"type": "submodule"}).encode())

    assert _client(transport).get_file("vendor/lib") is None


def test_get_file_raises_on_non_2xx() -> None:
    fake = FakeGitHub(files={"README.md": "x"})
    fake.fail("README.md", status=403)

    with pytest.raises(NetworkError) as excinfo:
        _client(fake).get_file("README.md")

    assert excinfo.value.status == 403


def test_get_file_uses_reported_size() -> None:
    payload = {"encoding": "base64", "content": base64.b64encode(b"abc").decode(), "size": 99}

    def transport(request: GitHubRequest) -> GitHubResponse:
        return GitHubResponse(status=200, body=json.dumps(payload).encode())

    assert _client(transport).get_file("a.txt") == ("abc", 99)


def test_invalid_json_body_raises_network_error() -> None:
    def transport(request: GitHubRequest) -> GitHubResponse:
        return GitHubResponse(status=200, body=b"<html>")

    with pytest.raises(NetworkError, match="invalid JSON"):
        _client(transport).get_repository()


def test_api_url_override_is_used() -> None:
    seen: list[str] = []

    def transport(request: GitHubRequest) -> GitHubResponse:
        seen.append(request.url)
        return GitHubResponse(status=200, body=b"{}")

    _client(transport, api_url="https://ghe.example.com/api/v3/").get_repository()

    assert seen == ["https://ghe.example.com/api/v3/repos/acme/webapp"]


def test_urllib_transport_wraps_connection_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(*args, **kwargs):
        raise URLError("connection refused")

    monkeypatch.setattr(client_module, "urlopen", boom)

    with pytest.raises(NetworkError) as excinfo:
        GitHubClient("t", "acme", "webapp").get_repository()

    assert excinfo.value.status is None
    assert "connection refused" in str(excinfo.value)
