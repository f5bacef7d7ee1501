"""Tests for the FastAPI service mode."""

from __future__ import annotations

import json
from typing import Any

import pytest
from fastapi.testclient import TestClient

from techscan.orchestrator import AnalysisOrchestrator
from techscan.service import create_app
from tests._fixtures.fake_github import FakeGitHub


@pytest.fixture
def fake() -> FakeGitHub:
    return FakeGitHub(
        files={
            "package.json": json.dumps({"dependencies": {"react": "^18.2.0", "express": "4.18.2"}}),
            "src/server.js": "const express = require('express')",
        }
    )


@pytest.fixture
def calls() -> list[dict[str, Any]]:
    return []


@pytest.fixture
def client(fake: FakeGitHub, calls: list[dict[str, Any]]) -> TestClient:
    def factory(**kwargs: Any) -> AnalysisOrchestrator:
        calls.append(kwargs)
        return AnalysisOrchestrator(**kwargs, transport=fake)

    return TestClient(create_app(factory))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_analyze_returns_final_report(client: TestClient, calls: list[dict[str, Any]]) -> None:
    response = client.post(
        "/analyze",
        json={
            "repository_url": "https://github.com/acme/webapp",
            "github_token": "token",
            "user_id": "user-42",
            "focus_areas": ["backend"],
        },
    )

    assert response.status_code == 200
    report = response.json()
    assert report["analysis_metadata"]["user_id"] == "user-42"
    assert report["analysis_metadata"]["analysis_depth"] == "standard"
    assert report["stage_2_technology_analysis"]["technologies"]["backend"] == ["Express-4.18.2"]
    assert report["summary"]["analysis_success"] is True
    assert calls[0]["github_token"] == "token"
    assert calls[0]["focus_areas"] == ["backend"]


def test_explore_returns_exploration(client: TestClient) -> None:
    response = client.post(
        "/explore",
        json={"repository_url": "acme/webapp", "github_token": "token"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["total_files_scanned"] == 2
    assert sorted(record["path"] for record in payload["files"]) == ["package.json", "src/server.js"]


def test_invalid_url_maps_to_400(client: TestClient, fake: FakeGitHub) -> None:
    response = client.post(
        "/analyze",
        json={"repository_url": "not-a-url", "github_token": "token", "user_id": "u"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Orchestration failed: Invalid repository URL format"
    assert fake.requests == []


def test_github_failure_maps_to_502(client: TestClient, fake: FakeGitHub) -> None:
    fake.repo_status = 404

    response = client.post(
        "/analyze",
        json={"repository_url": "acme/webapp", "github_token": "token", "user_id": "u"},
    )

    assert response.status_code == 502
    assert "Failed to fetch repository info: 404" in response.json()["detail"]


def test_unknown_depth_is_a_validation_error(client: TestClient, calls: list[dict[str, Any]]) -> None:
    response = client.post(
        "/analyze",
        json={
            "repository_url": "acme/webapp",
            "github_token": "token",
            "user_id": "u",
            "analysis_depth": "exhaustive",
        },
    )

    assert response.status_code == 422
    assert calls == []
