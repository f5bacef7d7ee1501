"""Gap analysis over a categorized technology stack."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

from .logging import get_logger
from .models import (
    CATEGORIES,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    EnhancedTechStack,
    GapAnalysisResult,
    StrategicRecommendation,
    StructuredTechStack,
    TechnologyCategories,
)

GAP_PREFIX = "GAP: "

# Substring of a gap message -> recommendation, per category. Matching is
# case-sensitive and every key is tried against every gap.
_RECOMMENDATIONS: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "frontend": (
        ("TypeScript", "Implement TypeScript for type safety"),
        ("CSS", "Add Tailwind CSS for utility-first styling"),
        ("State", "Implement Zustand or Redux for state management"),
        ("framework", "Choose React or Vue.js framework"),
    ),
    "backend": (
        ("API", "Implement Express.js or Fastify API framework"),
        ("Auth", "Add NextAuth.js or Supabase Auth"),
        ("documentation", "Implement OpenAPI/Swagger documentation"),
        ("Rate", "Add rate limiting middleware"),
    ),
    "database": (
        ("database", "Implement PostgreSQL with Supabase"),
        ("ORM", "Add Prisma ORM for database operations"),
        ("Cache", "Implement Redis for caching"),
        ("backup", "Set up automated database backups"),
    ),
    "infrastructure": (
        ("Deployment", "Deploy on Vercel or Netlify"),
        ("monitoring", "Add Sentry for error monitoring"),
        ("Analytics", "Implement Google Analytics or Mixpanel"),
        ("CDN", "Add CloudFlare CDN"),
    ),
    "platforms": (
        ("Payment", "Integrate Stripe for payments"),
        ("Email", "Add SendGrid for email service"),
        ("Search", "Implement Algolia for search"),
    ),
    "ai": (
        ("AI API", "Integrate OpenAI or Anthropic API"),
        ("framework", "Add LangChain framework"),
        ("Vector", "Implement Pinecone vector database"),
    ),
    "development": (
        ("linting", "Add ESLint and Prettier"),
        ("Testing", "Implement Jest and Cypress testing"),
        ("TypeScript", "Migrate to TypeScript"),
        ("hooks", "Add Husky pre-commit hooks"),
    ),
    "integrations": (
        ("Auth", "Implement OAuth integrations"),
        ("API", "Add webhook integrations"),
        ("Third-party", "Integrate essential third-party services"),
    ),
}

_AI_PROJECT_KEYWORDS = ("ai", "strategy")


def _has(technologies: Iterable[str], *markers: str) -> bool:
    return any(marker in tech for tech in technologies for marker in markers)


def recommend(category: str, gaps: Sequence[str]) -> List[str]:
    """Map each gap to the recommendations whose key occurs in its text."""
    table = _RECOMMENDATIONS[category]
    recommendations: List[str] = []
    for gap in gaps:
        for key, recommendation in table:
            if key in gap:
                recommendations.append(recommendation)
    return recommendations


def graded_priority(gap_count: int, *, high_above: int | None = 2, medium_above: int = 0) -> str:
    """Priority from gap count; ``high_above=None`` disables the high tier."""
    if high_above is not None and gap_count > high_above:
        return PRIORITY_HIGH
    if gap_count > medium_above:
        return PRIORITY_MEDIUM
    return PRIORITY_LOW


class GapAnalysisEngine:
    """Applies fixed per-category rules to flag missing capabilities.

    The engine is pure: it reads the stack handed to it, never mutates it, and
    performs no I/O.
    """

    def __init__(self, tech_stack: StructuredTechStack) -> None:
        self.tech_stack = tech_stack
        self.logger = get_logger("gaps")

    @property
    def technologies(self) -> TechnologyCategories:
        return self.tech_stack.technologies

    def analyze(self) -> EnhancedTechStack:
        self.logger.info("Running gap analysis for %s", self.tech_stack.repository_info.name)
        gap_analysis: Dict[str, GapAnalysisResult] = {
            "frontend": self.analyze_frontend_gaps(),
            "backend": self.analyze_backend_gaps(),
            "database": self.analyze_database_gaps(),
            "infrastructure": self.analyze_infrastructure_gaps(),
            "platforms": self.analyze_platform_gaps(),
            "ai": self.analyze_ai_gaps(),
            "development": self.analyze_development_gaps(),
            "integrations": self.analyze_integration_gaps(),
        }
        recommendations = self.generate_strategic_recommendations(gap_analysis)
        enhanced = EnhancedTechStack.from_stack(
            self.tech_stack,
            technologies=self.enhance_technologies(gap_analysis),
            gap_analysis=gap_analysis,
            key_decisions=self.generate_key_decisions(),
            migration_notes=self.generate_migration_notes(),
            recommendations=recommendations,
        )
        self.logger.info(
            "Gap analysis complete: %d categories, %d strategic recommendations",
            len(gap_analysis),
            len(recommendations),
        )
        return enhanced

    def _result(self, category: str, gaps: List[str], priority: str) -> GapAnalysisResult:
        self.logger.debug("%s: %d gaps, priority %s", category, len(gaps), priority)
        return GapAnalysisResult(
            current_technologies=list(self.technologies.get(category)),
            identified_gaps=gaps,
            recommendations=recommend(category, gaps),
            priority=priority,
        )

    def analyze_frontend_gaps(self) -> GapAnalysisResult:
        frontend = self.technologies.frontend
        gaps: List[str] = []
        if not _has(frontend, "React", "Vue", "Angular"):
            gaps.append("No frontend framework detected")
        if not _has(frontend, "TypeScript"):
            gaps.append("Consider TypeScript for type safety")
        if not _has(frontend, "Tailwind", "CSS"):
            gaps.append("No CSS framework detected - consider Tailwind CSS")
        if not _has(frontend, "State", "Redux", "Zustand"):
            gaps.append("Consider state management (Redux, Zustand, Jotai)")
        return self._result("frontend", gaps, graded_priority(len(gaps)))

    def analyze_backend_gaps(self) -> GapAnalysisResult:
        backend = self.technologies.backend
        gaps: List[str] = []
        if not _has(backend, "Express", "Fastify", "API-Routes"):
            gaps.append("No API framework detected")
        if not _has(backend, "Auth", "Supabase"):
            gaps.append("Authentication system needed (NextAuth, Supabase Auth)")
        if not _has(backend, "OpenAPI", "Swagger"):
            gaps.append("API documentation tools (OpenAPI, Swagger)")
        if not _has(backend, "Rate", "Limit"):
            gaps.append("Rate limiting and security middleware")
        return self._result("backend", gaps, graded_priority(len(gaps)))

    def analyze_database_gaps(self) -> GapAnalysisResult:
        database = self.technologies.database
        gaps: List[str] = []
        if not database:
            gaps.append("No database detected - consider PostgreSQL, MySQL, or MongoDB")
        if not _has(database, "Prisma", "Sequelize", "TypeORM"):
            gaps.append("ORM recommended (Prisma, Sequelize, TypeORM)")
        if not _has(database, "Redis", "Cache"):
            gaps.append("Caching layer (Redis, Memcached)")
        # Always reported, regardless of the detected stack.
        gaps.append("Database backup and recovery strategy")
        return self._result("database", gaps, graded_priority(len(gaps)))

    def analyze_infrastructure_gaps(self) -> GapAnalysisResult:
        infrastructure = self.technologies.infrastructure
        gaps: List[str] = []
        if not _has(infrastructure, "Vercel", "Netlify", "AWS"):
            gaps.append("Deployment platform (Vercel, Netlify, AWS)")
        if not _has(infrastructure, "Sentry", "Monitor"):
            gaps.append("Error monitoring (Sentry, Bugsnag)")
        if not _has(infrastructure, "Analytics", "Tracking"):
            gaps.append("Analytics and tracking (Google Analytics, Mixpanel)")
        if not _has(infrastructure, "CDN", "CloudFlare"):
            gaps.append("CDN for asset delivery (CloudFlare, AWS CloudFront)")
        return self._result("infrastructure", gaps, graded_priority(len(gaps)))

    def analyze_platform_gaps(self) -> GapAnalysisResult:
        platforms = self.technologies.platforms
        gaps: List[str] = []
        if not _has(platforms, "Stripe", "PayPal"):
            gaps.append("Payment processing (Stripe, PayPal)")
        if not _has(platforms, "SendGrid", "Email"):
            gaps.append("Email service (SendGrid, Mailgun, SES)")
        if not _has(platforms, "Search", "Elasticsearch"):
            gaps.append("Search functionality (Elasticsearch, Algolia)")
        return self._result("platforms", gaps, graded_priority(len(gaps), high_above=None, medium_above=1))

    def is_ai_project(self) -> bool:
        description = (self.tech_stack.repository_info.description or "").lower()
        return any(keyword in description for keyword in _AI_PROJECT_KEYWORDS)

    def analyze_ai_gaps(self) -> GapAnalysisResult:
        """AI gaps are only raised for repositories describing themselves as AI/strategy tools."""
        ai = self.technologies.ai
        gaps: List[str] = []
        if self.is_ai_project():
            if not ai:
                gaps.append("AI API integration (OpenAI, Anthropic, Google AI)")
            if not _has(ai, "LangChain", "Framework"):
                gaps.append("AI framework (LangChain, LlamaIndex)")
            if not _has(ai, "Vector", "Pinecone"):
                gaps.append("Vector database (Pinecone, Weaviate, Chroma)")
        return self._result("ai", gaps, graded_priority(len(gaps), high_above=1))

    def analyze_development_gaps(self) -> GapAnalysisResult:
        development = self.technologies.development
        gaps: List[str] = []
        if not _has(development, "ESLint", "Lint"):
            gaps.append("Code linting (ESLint, Prettier)")
        if not _has(development, "Jest", "Test"):
            gaps.append("Testing framework (Jest, Vitest, Cypress)")
        if not _has(development, "TypeScript"):
            gaps.append("Type checking (TypeScript)")
        if not _has(development, "Husky", "Hook"):
            gaps.append("Pre-commit hooks (Husky, lint-staged)")
        return self._result("development", gaps, graded_priority(len(gaps)))

    def analyze_integration_gaps(self) -> GapAnalysisResult:
        integrations = self.technologies.integrations
        gaps: List[str] = []
        if not _has(integrations, "Auth"):
            gaps.append("Authentication integration")
        if not _has(integrations, "API", "Webhook"):
            gaps.append("API and webhook integrations")
        if len(integrations) < 3:
            gaps.append("Third-party service integrations")
        return self._result("integrations", gaps, graded_priority(len(gaps), high_above=None, medium_above=1))

    def generate_key_decisions(self) -> List[str]:
        """Templated rationale for notable technology choices; illustrative, not inferred."""
        tech = self.technologies
        decisions: List[str] = []
        if _has(tech.frontend, "Next.js"):
            decisions.append("Chose Next.js over Create React App for SSR capabilities and API routes")
        if _has(tech.database, "Supabase"):
            decisions.append(
                "Chose Supabase over Firebase for PostgreSQL compatibility and better developer experience"
            )
        if _has(tech.frontend, "Tailwind"):
            decisions.append("Chose Tailwind CSS over styled-components for utility-first styling approach")
        if _has(tech.development, "TypeScript"):
            decisions.append("Chose TypeScript over JavaScript for type safety and better developer experience")
        return decisions

    def generate_migration_notes(self) -> List[str]:
        frontend = self.technologies.frontend
        notes: List[str] = []
        if _has(frontend, "React-17"):
            notes.append("Plan React 18 migration for concurrent features")
        if _has(frontend, "Next.js-13"):
            notes.append("Consider Next.js 14 upgrade for improved performance")
        notes.append("Regular dependency updates and security patches")
        notes.append("Consider progressive migration to newer framework versions")
        return notes

    def generate_strategic_recommendations(
        self, gap_analysis: Dict[str, GapAnalysisResult]
    ) -> List[StrategicRecommendation]:
        recommendations: List[StrategicRecommendation] = []
        for category, analysis in gap_analysis.items():
            if analysis.priority != PRIORITY_HIGH:
                continue
            recommendations.append(
                StrategicRecommendation(
                    category=category,
                    title=f"{category[:1].upper()}{category[1:]} Enhancement",
                    description=f"Address critical gaps in {category} technology stack",
                    priority=PRIORITY_HIGH,
                    timeline="immediate",
                    impact="high",
                )
            )
        recommendations.append(
            StrategicRecommendation(
                category="architecture",
                title="Microservices Consideration",
                description="Evaluate microservices architecture for scalability as the application grows",
                priority=PRIORITY_MEDIUM,
                timeline="long-term",
                impact="medium",
            )
        )
        return recommendations

    def enhance_technologies(self, gap_analysis: Dict[str, GapAnalysisResult]) -> TechnologyCategories:
        """Copy the category lists, appending one joined ``GAP:`` entry where gaps exist."""
        enhanced = self.technologies.copy()
        for category in CATEGORIES:
            analysis = gap_analysis.get(category)
            if analysis is not None and analysis.identified_gaps:
                enhanced.get(category).append(f"{GAP_PREFIX}{', '.join(analysis.recommendations)}")
        return enhanced


__all__ = ["GAP_PREFIX", "GapAnalysisEngine", "graded_priority", "recommend"]
