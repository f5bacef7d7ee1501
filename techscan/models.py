"""Core data models shared across the analysis pipeline stages."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, Iterator, List, Optional, Tuple

CATEGORIES: Tuple[str, ...] = (
    "frontend",
    "backend",
    "database",
    "infrastructure",
    "platforms",
    "ai",
    "development",
    "integrations",
)

PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"


@dataclass(frozen=True)
class RepositoryInfo:
    """Snapshot of repository metadata returned by the GitHub API."""

    name: str
    full_name: str
    description: Optional[str]
    language: Optional[str]
    size: int
    updated_at: Optional[str]
    default_branch: Optional[str]

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "RepositoryInfo":
        size = payload.get("size")
        return cls(
            name=str(payload.get("name") or ""),
            full_name=str(payload.get("full_name") or ""),
            description=payload.get("description"),
            language=payload.get("language"),
            size=size if isinstance(size, int) else 0,
            updated_at=payload.get("updated_at"),
            default_branch=payload.get("default_branch"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TreeEntry:
    """Blob entry from the recursive git tree listing."""

    path: str
    type: str
    size: int = 0


@dataclass(frozen=True)
class FileRecord:
    """Decoded content of a fetched repository file."""

    path: str
    content: str
    size: int
    type: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ExplorationResult:
    """Hand-off artifact produced by the repository explorer."""

    repository_info: RepositoryInfo
    files: List[FileRecord]
    directory_structure: List[str]
    total_files_scanned: int
    analysis_timestamp: str

    def file(self, path: str) -> Optional[FileRecord]:
        """Return the fetched file at ``path`` if present."""
        for record in self.files:
            if record.path == path:
                return record
        return None

    def has_file(self, path: str) -> bool:
        return self.file(path) is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "repository_info": self.repository_info.to_dict(),
            "files": [record.to_dict() for record in self.files],
            "directory_structure": list(self.directory_structure),
            "total_files_scanned": self.total_files_scanned,
            "analysis_timestamp": self.analysis_timestamp,
        }


@dataclass
class TechnologyCategories:
    """The eight fixed technology buckets, each an insertion-ordered list."""

    frontend: List[str] = field(default_factory=list)
    backend: List[str] = field(default_factory=list)
    database: List[str] = field(default_factory=list)
    infrastructure: List[str] = field(default_factory=list)
    platforms: List[str] = field(default_factory=list)
    ai: List[str] = field(default_factory=list)
    development: List[str] = field(default_factory=list)
    integrations: List[str] = field(default_factory=list)

    def get(self, category: str) -> List[str]:
        if category not in CATEGORIES:
            raise KeyError(f"Unknown technology category: {category}")
        return getattr(self, category)

    def items(self) -> Iterator[Tuple[str, List[str]]]:
        for category in CATEGORIES:
            yield category, getattr(self, category)

    def flatten(self) -> List[str]:
        return [tech for _, techs in self.items() for tech in techs]

    def copy(self) -> "TechnologyCategories":
        return TechnologyCategories(**{name: list(techs) for name, techs in self.items()})

    def to_dict(self) -> Dict[str, List[str]]:
        return {name: list(techs) for name, techs in self.items()}


@dataclass(frozen=True)
class ConfigurationInfo:
    """Presence record for a known configuration file."""

    exists: bool
    size: int
    content_preview: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class StructuredTechStack:
    """Categorized technology inventory produced by the technology analyzer."""

    repository_info: RepositoryInfo
    technologies: TechnologyCategories
    frameworks: List[str]
    languages: List[str]
    package_managers: List[str]
    development_tools: List[str]
    dependencies: Dict[str, str]
    configurations: Dict[str, ConfigurationInfo]
    infrastructure: Dict[str, List[str]]
    database: Dict[str, List[str]]
    ai_integrations: Dict[str, List[str]]
    analysis_metadata: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "repository_info": self.repository_info.to_dict(),
            "technologies": self.technologies.to_dict(),
            "frameworks": list(self.frameworks),
            "languages": list(self.languages),
            "package_managers": list(self.package_managers),
            "development_tools": list(self.development_tools),
            "dependencies": dict(self.dependencies),
            "configurations": {
                name: info.to_dict() for name, info in self.configurations.items()
            },
            "infrastructure": _copy_buckets(self.infrastructure),
            "database": _copy_buckets(self.database),
            "ai_integrations": _copy_buckets(self.ai_integrations),
            "analysis_metadata": dict(self.analysis_metadata),
        }


@dataclass
class GapAnalysisResult:
    """Gap findings for a single technology category."""

    current_technologies: List[str]
    identified_gaps: List[str]
    recommendations: List[str]
    priority: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_technologies": list(self.current_technologies),
            "identified_gaps": list(self.identified_gaps),
            "recommendations": list(self.recommendations),
            "priority": self.priority,
        }


@dataclass(frozen=True)
class StrategicRecommendation:
    """Prioritized, category-level action item."""

    category: str
    title: str
    description: str
    priority: str
    timeline: str
    impact: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class EnhancedTechStack(StructuredTechStack):
    """Technology stack annotated with gap analysis output.

    ``technologies`` holds the gap-annotated category lists; the analyzer's
    original lists remain available via ``gap_analysis[category].current_technologies``.
    """

    gap_analysis: Dict[str, GapAnalysisResult] = field(default_factory=dict)
    key_decisions: List[str] = field(default_factory=list)
    migration_notes: List[str] = field(default_factory=list)
    recommendations: List[StrategicRecommendation] = field(default_factory=list)

    @classmethod
    def from_stack(
        cls,
        stack: StructuredTechStack,
        *,
        technologies: TechnologyCategories,
        gap_analysis: Dict[str, GapAnalysisResult],
        key_decisions: List[str],
        migration_notes: List[str],
        recommendations: List[StrategicRecommendation],
    ) -> "EnhancedTechStack":
        base = {
            item.name: getattr(stack, item.name)
            for item in fields(StructuredTechStack)
            if item.name != "technologies"
        }
        return cls(
            technologies=technologies,
            gap_analysis=gap_analysis,
            key_decisions=key_decisions,
            migration_notes=migration_notes,
            recommendations=recommendations,
            **base,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["gap_analysis"] = {
            category: result.to_dict() for category, result in self.gap_analysis.items()
        }
        payload["key_decisions"] = list(self.key_decisions)
        payload["migration_notes"] = list(self.migration_notes)
        payload["recommendations"] = [item.to_dict() for item in self.recommendations]
        return payload


def _copy_buckets(buckets: Dict[str, List[str]]) -> Dict[str, List[str]]:
    return {name: list(values) for name, values in buckets.items()}


__all__ = [
    "CATEGORIES",
    "ConfigurationInfo",
    "EnhancedTechStack",
    "ExplorationResult",
    "FileRecord",
    "GapAnalysisResult",
    "PRIORITY_HIGH",
    "PRIORITY_LOW",
    "PRIORITY_MEDIUM",
    "RepositoryInfo",
    "StrategicRecommendation",
    "StructuredTechStack",
    "TechnologyCategories",
    "TreeEntry",
]
