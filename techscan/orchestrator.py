"""Three-stage repository analysis pipeline: explore, analyze, find gaps."""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .analyzers import TechnologyAnalyzer
from .explorer import MAX_PRIORITY_FILES, RepositoryExplorer
from .gaps import GAP_PREFIX, GapAnalysisEngine
from .github import Transport
from .logging import get_logger, log_stage
from .models import (
    CATEGORIES,
    PRIORITY_HIGH,
    EnhancedTechStack,
    ExplorationResult,
    StructuredTechStack,
)

ANALYSIS_DEPTHS: Tuple[str, ...] = ("basic", "standard", "comprehensive")
DEFAULT_DEPTH = "standard"
AGENT_SEQUENCE: Tuple[str, ...] = (
    "Repository Explorer",
    "Technology Analyzer",
    "Gap Analysis Engine",
)

# Category -> key of its "GAP: ..." list in the report's enhanced_tech_stack.
GAP_REPORT_KEYS: Tuple[Tuple[str, str], ...] = (
    ("frontend", "frontend_gaps"),
    ("backend", "backend_gaps"),
    ("database", "database_gaps"),
    ("infrastructure", "infrastructure_gaps"),
    ("platforms", "platforms_gaps"),
    ("ai", "ai_gaps"),
    ("development", "development_gaps"),
    ("integrations", "integration_gaps"),
)

_GITHUB_PREFIX = re.compile(r"^https?://github\.com/")
_GIT_SUFFIX = re.compile(r"\.git$")

ExplorerFactory = Callable[[str, str, str], RepositoryExplorer]


class InvalidRepositoryURL(ValueError):
    """Raised when a repository URL does not name an owner and a repository."""


class OrchestrationError(RuntimeError):
    """Raised when any pipeline stage fails; the stage error is the ``__cause__``."""


def parse_repository_url(url: str) -> Tuple[str, str]:
    """Split a GitHub URL (or ``owner/repo`` shorthand) into ``(owner, repo)``."""
    cleaned = _GIT_SUFFIX.sub("", _GITHUB_PREFIX.sub("", url.strip()))
    parts = cleaned.split("/")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise InvalidRepositoryURL("Invalid repository URL format")
    return parts[0], parts[1]


class AnalysisOrchestrator:
    """Runs the explorer, analyzer and gap engine in sequence for one repository.

    ``analysis_depth`` and ``focus_areas`` are validated and recorded in the
    report metadata; they do not change which files are fetched or which gap
    rules run.
    """

    def __init__(
        self,
        github_token: str,
        repository_url: str,
        user_id: str,
        analysis_depth: str = DEFAULT_DEPTH,
        focus_areas: Optional[Sequence[str]] = None,
        *,
        explorer_factory: ExplorerFactory | None = None,
        transport: Transport | None = None,
        branch: str | None = None,
        max_files: int = MAX_PRIORITY_FILES,
        **client_options: Any,
    ) -> None:
        self.github_token = github_token
        self.repository_url = repository_url
        self.user_id = user_id
        self.analysis_depth = analysis_depth
        self.focus_areas: List[str] = list(focus_areas or [])
        self._explorer_factory = explorer_factory
        self._transport = transport
        self._branch = branch
        self._max_files = max_files
        self._client_options = client_options
        self.logger = get_logger("orchestrator")

    def _build_explorer(self, owner: str, repo: str) -> RepositoryExplorer:
        if self._explorer_factory is not None:
            return self._explorer_factory(self.github_token, owner, repo)
        return RepositoryExplorer(
            self.github_token,
            owner,
            repo,
            branch=self._branch,
            max_files=self._max_files,
            transport=self._transport,
            **self._client_options,
        )

    def _validate(self) -> Tuple[str, str]:
        if self.analysis_depth not in ANALYSIS_DEPTHS:
            raise ValueError(
                f"Unsupported analysis depth '{self.analysis_depth}'; "
                f"expected one of {', '.join(ANALYSIS_DEPTHS)}"
            )
        return parse_repository_url(self.repository_url)

    def explore_only(self) -> ExplorationResult:
        """Run Stage 1 alone; errors are wrapped like ``orchestrate``."""
        try:
            owner, repo = self._validate()
            with log_stage(self.logger, "STAGE 1: Repository Explorer"):
                return self._build_explorer(owner, repo).explore()
        except Exception as exc:
            raise OrchestrationError(f"Orchestration failed: {exc}") from exc

    def orchestrate(self) -> Dict[str, Any]:
        try:
            owner, repo = self._validate()
            self.logger.info("Analyzing repository %s/%s", owner, repo)

            with log_stage(self.logger, "STAGE 1: Repository Explorer"):
                exploration = self._build_explorer(owner, repo).explore()
            self.logger.info(
                "Stage 1 complete: %d files scanned, %d key files analyzed",
                exploration.total_files_scanned,
                len(exploration.files),
            )

            with log_stage(self.logger, "STAGE 2: Technology Analyzer"):
                stack = TechnologyAnalyzer(exploration).analyze()
            self.logger.info("Stage 2 complete: %d technology categories analyzed", len(CATEGORIES))

            with log_stage(self.logger, "STAGE 3: Gap Analysis Engine"):
                enhanced = GapAnalysisEngine(stack).analyze()
            self.logger.info(
                "Stage 3 complete: %d strategic recommendations generated",
                len(enhanced.recommendations),
            )

            report = self.build_report(exploration, stack, enhanced)
        except Exception as exc:
            raise OrchestrationError(f"Orchestration failed: {exc}") from exc

        summary = report["summary"]
        self.logger.info(
            "Final summary: %d technologies, %d gaps, %d high-priority recommendations",
            summary["total_technologies_detected"],
            summary["total_gaps_identified"],
            summary["high_priority_recommendations"],
        )
        return report

    def build_report(
        self,
        exploration: ExplorationResult,
        stack: StructuredTechStack,
        enhanced: EnhancedTechStack,
    ) -> Dict[str, Any]:
        """Assemble the JSON-ready final report from the three stage outputs."""
        technologies = stack.technologies.to_dict()
        enhanced_tech_stack: Dict[str, List[str]] = dict(technologies)
        for category, key in GAP_REPORT_KEYS:
            result = enhanced.gap_analysis.get(category)
            recommendations = result.recommendations if result is not None else []
            enhanced_tech_stack[key] = [f"{GAP_PREFIX}{rec}" for rec in recommendations]

        return {
            "analysis_metadata": {
                "repository_url": self.repository_url,
                "user_id": self.user_id,
                "analysis_depth": self.analysis_depth,
                "focus_areas": list(self.focus_areas),
                "analysis_timestamp": datetime.now(UTC).isoformat(),
                "agent_sequence": list(AGENT_SEQUENCE),
            },
            "stage_1_exploration": {
                "repository_info": exploration.repository_info.to_dict(),
                "files_scanned": exploration.total_files_scanned,
                "key_files_analyzed": len(exploration.files),
                "directory_structure": list(exploration.directory_structure),
            },
            "stage_2_technology_analysis": {
                "technologies": technologies,
                "frameworks": list(stack.frameworks),
                "languages": list(stack.languages),
                "package_managers": list(stack.package_managers),
                "infrastructure": {name: list(values) for name, values in stack.infrastructure.items()},
                "development_tools": list(stack.development_tools),
            },
            "stage_3_gap_analysis": {
                "gap_analysis": {
                    category: result.to_dict() for category, result in enhanced.gap_analysis.items()
                },
                "recommendations": [item.to_dict() for item in enhanced.recommendations],
                "key_decisions": list(enhanced.key_decisions),
                "migration_notes": list(enhanced.migration_notes),
            },
            "enhanced_tech_stack": enhanced_tech_stack,
            "summary": {
                "total_technologies_detected": len(stack.technologies.flatten()),
                "total_gaps_identified": len(enhanced.gap_analysis),
                "high_priority_recommendations": sum(
                    1 for item in enhanced.recommendations if item.priority == PRIORITY_HIGH
                ),
                "analysis_success": True,
            },
        }


def orchestrate(
    repository_url: str,
    github_token: str,
    user_id: str,
    analysis_depth: str = DEFAULT_DEPTH,
    focus_areas: Optional[Sequence[str]] = None,
    **options: Any,
) -> Dict[str, Any]:
    """Run the full pipeline and return the final report; raises ``OrchestrationError``."""
    return AnalysisOrchestrator(
        github_token,
        repository_url,
        user_id,
        analysis_depth,
        focus_areas,
        **options,
    ).orchestrate()


__all__ = [
    "AGENT_SEQUENCE",
    "ANALYSIS_DEPTHS",
    "GAP_REPORT_KEYS",
    "AnalysisOrchestrator",
    "InvalidRepositoryURL",
    "OrchestrationError",
    "orchestrate",
    "parse_repository_url",
]
