"""Tests for techscan.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from techscan.config import ConfigError, TechScanConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, TechScanConfig)
    assert config.root == tmp_path.resolve()
    assert config.github.api_url == "https://api.github.com"
    assert config.github.user_agent == "techscan-agent"
    assert config.github.token_env == "GITHUB_TOKEN"
    assert config.github.branch is None
    assert config.explorer.max_files == 50
    assert config.analysis.depth == "standard"
    assert config.analysis.focus_areas == []


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".techscan.yml"
    config_file.write_text(
        """
github:
  api_url: "https://ghe.example.com/api/v3"
  user_agent: "acme-scanner"
  request_timeout: 12.5
  token_env: ACME_GH_TOKEN
  branch: develop
explorer:
  max_files: 20
analysis:
  depth: comprehensive
  focus_areas: [frontend, ai]
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.github.api_url == "https://ghe.example.com/api/v3"
    assert config.github.user_agent == "acme-scanner"
    assert config.github.request_timeout == 12.5
    assert config.github.token_env == "ACME_GH_TOKEN"
    assert config.github.branch == "develop"
    assert config.explorer.max_files == 20
    assert config.analysis.depth == "comprehensive"
    assert config.analysis.focus_areas == ["frontend", "ai"]
    assert config.orchestrator_options() == {
        "branch": "develop",
        "max_files": 20,
        "api_url": "https://ghe.example.com/api/v3",
        "user_agent": "acme-scanner",
        "request_timeout": 12.5,
    }


def test_max_files_is_clamped(tmp_path: Path) -> None:
    (tmp_path / ".techscan.yml").write_text("explorer:\n  max_files: 500\n", encoding="utf-8")

    assert load_config(tmp_path).explorer.max_files == 50


def test_invalid_values_fall_back_to_defaults(tmp_path: Path) -> None:
    (tmp_path / ".techscan.yml").write_text(
        "github:\n  request_timeout: soon\n  user_agent: [a, b]\nexplorer:\n  max_files: lots\n",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.github.request_timeout == 30.0
    assert config.github.user_agent == "techscan-agent"
    assert config.explorer.max_files == 50


def test_empty_file_yields_defaults(tmp_path: Path) -> None:
    (tmp_path / ".techscan.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).analysis.depth == "standard"


def test_non_mapping_root_raises(tmp_path: Path) -> None:
    (tmp_path / ".techscan.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path)


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    (tmp_path / ".techscan.yml").write_text("github: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)
