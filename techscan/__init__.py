"""Repository technology-stack exploration and gap analysis."""

from .orchestrator import (
    AnalysisOrchestrator,
    InvalidRepositoryURL,
    OrchestrationError,
    orchestrate,
    parse_repository_url,
)

__version__ = "0.1.0"

__all__ = [
    "AnalysisOrchestrator",
    "InvalidRepositoryURL",
    "OrchestrationError",
    "orchestrate",
    "parse_repository_url",
]
