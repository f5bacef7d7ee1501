"""Parsers turning dependency manifests into ``name -> version`` mappings.

Each parser takes the decoded file text and either returns a mapping or
raises ``ManifestError``; callers decide whether a failure is fatal.
"""

from __future__ import annotations

import json
import re
import tomllib
from typing import Any, Callable, Dict, Tuple

UNVERSIONED = "latest"


class ManifestError(ValueError):
    """Raised when a manifest cannot be parsed."""


_REQUIREMENT = re.compile(
    r"^(?P<name>[A-Za-z0-9][A-Za-z0-9._-]*)"
    r"(?:\[[^\]]*\])?"
    r"\s*(?:(?P<op>===|==|>=|<=|~=|!=|>|<)\s*(?P<version>[^\s;#,]+(?:\s*,\s*[<>=!~]+\s*[^\s;#,]+)*))?"
)
_GEM = re.compile(r"gem\s+['\"]([^'\"]+)['\"](?:\s*,\s*['\"]([^'\"]+)['\"])?")
_GO_REQUIRE_BLOCK = re.compile(r"require\s+\(([^)]*)\)")
_GO_REQUIRE_LINE = re.compile(r"^require[ \t]+(\S+)[ \t]+(\S+)", re.MULTILINE)


def _load_json_object(content: str, filename: str) -> Dict[str, Any]:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ManifestError(f"{filename} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestError(f"{filename} must contain a JSON object")
    return data


def _string_map(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(name): str(version) for name, version in value.items() if version is not None}


def parse_package_json(content: str) -> Dict[str, str]:
    """Merge ``dependencies`` and ``devDependencies``; dev entries win on collision."""
    data = _load_json_object(content, "package.json")
    deps = _string_map(data.get("dependencies"))
    deps.update(_string_map(data.get("devDependencies")))
    return deps


def parse_requirements_txt(content: str) -> Dict[str, str]:
    deps: Dict[str, str] = {}
    for raw in content.splitlines():
        line = raw.split(" #", 1)[0].strip()
        if not line or line.startswith(("#", "-")) or "://" in line:
            continue
        match = _REQUIREMENT.match(line)
        if not match:
            continue
        op = match.group("op")
        version = match.group("version")
        if not op:
            deps[match.group("name")] = UNVERSIONED
        elif op == "==":
            deps[match.group("name")] = version
        else:
            deps[match.group("name")] = f"{op}{version}"
    return deps


def parse_pyproject_toml(content: str) -> Dict[str, str]:
    """Collect PEP 621 and Poetry dependencies from pyproject.toml."""
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        raise ManifestError(f"pyproject.toml is not valid TOML: {exc}") from exc

    requirements: list[str] = []
    project = data.get("project")
    if isinstance(project, dict):
        requirements.extend(item for item in project.get("dependencies", []) or [] if isinstance(item, str))
        optional = project.get("optional-dependencies", {}) or {}
        if isinstance(optional, dict):
            for values in optional.values():
                requirements.extend(item for item in values or [] if isinstance(item, str))
    deps = parse_requirements_txt("\n".join(requirements))

    tool = data.get("tool")
    poetry = tool.get("poetry", {}) if isinstance(tool, dict) else {}
    if isinstance(poetry, dict):
        for name, spec in (poetry.get("dependencies") or {}).items():
            if name.lower() == "python":
                continue
            deps[name] = _table_version(spec)
    return deps


def parse_gemfile(content: str) -> Dict[str, str]:
    deps: Dict[str, str] = {}
    for match in _GEM.finditer(content):
        deps[match.group(1)] = match.group(2) or UNVERSIONED
    return deps


def parse_composer_json(content: str) -> Dict[str, str]:
    data = _load_json_object(content, "composer.json")
    deps = _string_map(data.get("require"))
    deps.update(_string_map(data.get("require-dev")))
    return deps


def parse_go_mod(content: str) -> Dict[str, str]:
    deps: Dict[str, str] = {}
    for line in _GO_REQUIRE_LINE.finditer(content):
        if line.group(1) != "(":
            deps[line.group(1)] = line.group(2)
    block = _GO_REQUIRE_BLOCK.search(content)
    if block:
        for raw in block.group(1).splitlines():
            line = raw.split("//", 1)[0].strip()
            parts = line.split()
            if len(parts) >= 2:
                deps[parts[0]] = parts[1]
    return deps


def parse_cargo_toml(content: str) -> Dict[str, str]:
    """Read the ``[dependencies]`` table; entries without a version are skipped."""
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        raise ManifestError(f"Cargo.toml is not valid TOML: {exc}") from exc
    section = data.get("dependencies")
    if not isinstance(section, dict):
        return {}
    deps: Dict[str, str] = {}
    for name, spec in section.items():
        version = _table_version(spec, default="")
        if version:
            deps[name] = version
    return deps


def _table_version(spec: Any, default: str = UNVERSIONED) -> str:
    if isinstance(spec, str):
        return spec
    if isinstance(spec, dict) and isinstance(spec.get("version"), str):
        return spec["version"]
    return default


# Merge order matters: later manifests overwrite earlier names.
MANIFEST_PARSERS: Tuple[Tuple[str, Callable[[str], Dict[str, str]]], ...] = (
    ("package.json", parse_package_json),
    ("requirements.txt", parse_requirements_txt),
    ("pyproject.toml", parse_pyproject_toml),
    ("Gemfile", parse_gemfile),
    ("composer.json", parse_composer_json),
    ("go.mod", parse_go_mod),
    ("Cargo.toml", parse_cargo_toml),
)


__all__ = [
    "MANIFEST_PARSERS",
    "ManifestError",
    "UNVERSIONED",
    "parse_cargo_toml",
    "parse_composer_json",
    "parse_gemfile",
    "parse_go_mod",
    "parse_package_json",
    "parse_pyproject_toml",
    "parse_requirements_txt",
]
