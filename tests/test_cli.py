"""CLI parser and command behaviour tests."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterator

import pytest

from techscan import cli
from techscan.cli import _build_parser
from techscan.orchestrator import OrchestrationError
from tests._fixtures.stacks import make_exploration


class _StubOrchestrator:
    instances: list["_StubOrchestrator"] = []
    error: Exception | None = None

    def __init__(self, token: str, url: str, user_id: str, depth: str, focus: list[str], **options: Any) -> None:
        self.args = {"token": token, "url": url, "user_id": user_id, "depth": depth, "focus": focus}
        self.options = options
        _StubOrchestrator.instances.append(self)

    def orchestrate(self) -> dict[str, Any]:
        if self.error is not None:
            raise self.error
        return {
            "analysis_metadata": {"repository_url": self.args["url"]},
            "summary": {
                "total_technologies_detected": 5,
                "total_gaps_identified": 8,
                "high_priority_recommendations": 2,
                "analysis_success": True,
            },
        }

    def explore_only(self):
        return make_exploration({"package.json": "{}"}, total_files_scanned=12)


@pytest.fixture(autouse=True)
def _isolated(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.setattr(cli, "AnalysisOrchestrator", _StubOrchestrator)
    _StubOrchestrator.instances = []
    _StubOrchestrator.error = None
    yield
    logger = logging.getLogger("techscan")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True


def test_cli_accepts_verbose_before_and_after_command() -> None:
    parser = _build_parser()

    assert parser.parse_args(["--verbose", "analyze", "acme/webapp"]).verbose is True
    assert parser.parse_args(["analyze", "acme/webapp", "-v"]).verbose is True


def test_cli_analyze_options() -> None:
    args = _build_parser().parse_args(
        ["analyze", "acme/webapp", "--depth", "basic", "--focus", "ai", "frontend", "--user-id", "u1"]
    )

    assert args.command == "analyze"
    assert args.depth == "basic"
    assert args.focus == ["ai", "frontend"]
    assert args.user_id == "u1"


def test_cli_rejects_unknown_depth() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args(["analyze", "acme/webapp", "--depth", "deep"])


def test_missing_token_exits_before_orchestrating(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["analyze", "https://github.com/acme/webapp"])

    assert excinfo.value.code == 1
    assert "GITHUB_TOKEN" in capsys.readouterr().err
    assert _StubOrchestrator.instances == []


def test_analyze_prints_report_json(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "env-token")

    cli.main(["analyze", "https://github.com/acme/webapp", "--focus", "ai"])

    captured = capsys.readouterr()
    report = json.loads(captured.out)
    assert report["summary"]["total_technologies_detected"] == 5
    assert "5 technologies" in captured.err
    stub = _StubOrchestrator.instances[0]
    assert stub.args == {
        "token": "env-token",
        "url": "https://github.com/acme/webapp",
        "user_id": "cli",
        "depth": "standard",
        "focus": ["ai"],
    }
    assert stub.options["max_files"] == 50


def test_analyze_uses_config_defaults_and_writes_output(tmp_path: Path) -> None:
    (tmp_path / ".techscan.yml").write_text(
        "github:\n  branch: develop\nanalysis:\n  depth: basic\n  focus_areas: [database]\n",
        encoding="utf-8",
    )
    output = tmp_path / "report.json"

    cli.main(["analyze", "acme/webapp", "--token", "t", "--output", str(output)])

    assert json.loads(output.read_text(encoding="utf-8"))["summary"]["analysis_success"] is True
    stub = _StubOrchestrator.instances[0]
    assert stub.args["depth"] == "basic"
    assert stub.args["focus"] == ["database"]
    assert stub.options["branch"] == "develop"


def test_analyze_failure_exits_with_message(capsys: pytest.CaptureFixture[str]) -> None:
    _StubOrchestrator.error = OrchestrationError("Orchestration failed: Failed to fetch file tree: 404")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["analyze", "acme/webapp", "--token", "t"])

    assert excinfo.value.code == 1
    assert "Failed to fetch file tree: 404" in capsys.readouterr().err


def test_explore_prints_exploration_json(capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["explore", "acme/webapp", "--token", "t"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["total_files_scanned"] == 12
    assert [record["path"] for record in payload["files"]] == ["package.json"]


def test_invalid_config_exits(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / ".techscan.yml").write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["analyze", "acme/webapp", "--token", "t"])

    assert excinfo.value.code == 1
    assert "mapping" in capsys.readouterr().err
