"""Builders for pipeline artifacts used by analyzer and gap-engine tests."""

from __future__ import annotations

import textwrap
from typing import Dict, List, Mapping, Optional

from techscan.explorer import get_file_type
from techscan.models import (
    ExplorationResult,
    FileRecord,
    RepositoryInfo,
    StructuredTechStack,
    TechnologyCategories,
)


def make_repository_info(description: Optional[str] = "Sample web application") -> RepositoryInfo:
    return RepositoryInfo(
        name="webapp",
        full_name="acme/webapp",
        description=description,
        language="TypeScript",
        size=1024,
        updated_at="2024-01-01T00:00:00Z",
        default_branch="main",
    )


def make_exploration(
    files: Mapping[str, str],
    *,
    description: Optional[str] = "Sample web application",
    total_files_scanned: Optional[int] = None,
) -> ExplorationResult:
    """Build an exploration result whose fetched files are exactly ``files``."""
    records: List[FileRecord] = []
    for path, content in files.items():
        text = textwrap.dedent(content).lstrip("\n")
        records.append(
            FileRecord(path=path, content=text, size=len(text.encode("utf-8")), type=get_file_type(path))
        )
    return ExplorationResult(
        repository_info=make_repository_info(description),
        files=records,
        directory_structure=[],
        total_files_scanned=len(records) if total_files_scanned is None else total_files_scanned,
        analysis_timestamp="2024-01-01T00:00:00+00:00",
    )


def make_stack(
    *,
    description: Optional[str] = "Sample web application",
    **technologies: List[str],
) -> StructuredTechStack:
    """Build a stack with the given category lists and otherwise empty fields."""
    empty: Dict[str, List[str]] = {}
    return StructuredTechStack(
        repository_info=make_repository_info(description),
        technologies=TechnologyCategories(**technologies),
        frameworks=[],
        languages=[],
        package_managers=[],
        development_tools=[],
        dependencies={},
        configurations={},
        infrastructure=dict(empty),
        database=dict(empty),
        ai_integrations=dict(empty),
        analysis_metadata={},
    )


__all__ = ["make_exploration", "make_repository_info", "make_stack"]
