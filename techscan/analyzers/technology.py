"""Technology analyzer: turns explored files into a categorized tech stack."""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import Dict, List, Mapping, Optional

from .constants import (
    CODE_FILE_TYPES,
    CONFIG_FILES,
    CONFIG_FRAMEWORK_FALLBACKS,
    CONTENT_PREVIEW_CHARS,
    DEV_TOOLS,
    FRAMEWORK_MARKERS,
    LANGUAGE_BY_EXTENSION,
    LOCKFILES,
    PYTHON_FRAMEWORK_MARKERS,
)
from .manifests import MANIFEST_PARSERS
from ..logging import get_logger
from ..models import (
    ConfigurationInfo,
    ExplorationResult,
    StructuredTechStack,
    TechnologyCategories,
)

_RANGE_PREFIX = re.compile(r"^[\^~]")

ANALYSIS_METHOD = "Agent-based analysis"


def strip_range_prefix(version: str) -> str:
    """Drop a single leading ``^`` or ``~`` from a manifest version."""
    return _RANGE_PREFIX.sub("", version, count=1)


def versioned(label: str, version: Optional[str]) -> str:
    """Render a ``<Name>-<version>`` tag, or the bare name without a version."""
    if not version:
        return label
    return f"{label}-{strip_range_prefix(version)}"


class TechnologyAnalyzer:
    """Builds a ``StructuredTechStack`` from already-fetched repository files.

    Performs no network I/O; every detection is derived from
    ``exploration.files``.
    """

    def __init__(self, exploration: ExplorationResult) -> None:
        self.exploration = exploration
        self.logger = get_logger("analyzer")

    def analyze(self) -> StructuredTechStack:
        info = self.exploration.repository_info
        self.logger.info("Analyzing technologies for %s", info.name)

        dependencies = self.extract_dependencies()
        configurations = self.analyze_configurations()
        frameworks = self.detect_frameworks(dependencies, configurations)
        technologies = self.categorize_technologies(dependencies)

        stack = StructuredTechStack(
            repository_info=info,
            technologies=technologies,
            frameworks=frameworks,
            languages=self.detect_languages(),
            package_managers=self.detect_package_managers(),
            development_tools=self.detect_development_tools(dependencies),
            dependencies=dependencies,
            configurations=configurations,
            infrastructure=self.analyze_infrastructure(),
            database=self.analyze_database(dependencies),
            ai_integrations=self.detect_ai_integrations(dependencies),
            analysis_metadata={
                "files_analyzed": len(self.exploration.files),
                "total_files_scanned": self.exploration.total_files_scanned,
                "dependencies_count": len(dependencies),
                "analysis_timestamp": datetime.now(UTC).isoformat(),
                "method": ANALYSIS_METHOD,
            },
        )
        self.logger.info(
            "Categorized %d dependencies across %d technology entries",
            len(dependencies),
            len(technologies.flatten()),
        )
        return stack

    def extract_dependencies(self) -> Dict[str, str]:
        """Merge every known manifest into one map; later manifests overwrite earlier names."""
        dependencies: Dict[str, str] = {}
        for filename, parser in MANIFEST_PARSERS:
            record = self.exploration.file(filename)
            if record is None:
                continue
            try:
                parsed = parser(record.content)
            except Exception as exc:
                self.logger.warning("Failed to parse %s: %s", filename, exc)
                continue
            self.logger.debug("Parsed %d dependencies from %s", len(parsed), filename)
            dependencies.update(parsed)
        return dependencies

    def analyze_configurations(self) -> Dict[str, ConfigurationInfo]:
        configurations: Dict[str, ConfigurationInfo] = {}
        for filename in CONFIG_FILES:
            record = self.exploration.file(filename)
            if record is None:
                continue
            configurations[filename] = ConfigurationInfo(
                exists=True,
                size=record.size,
                content_preview=record.content[:CONTENT_PREVIEW_CHARS],
            )
        return configurations

    def detect_frameworks(
        self,
        dependencies: Mapping[str, str],
        configurations: Mapping[str, ConfigurationInfo],
    ) -> List[str]:
        frameworks = [label for dep, label in FRAMEWORK_MARKERS if dependencies.get(dep)]

        lowered = {name.lower() for name in dependencies}
        for dep, label in PYTHON_FRAMEWORK_MARKERS:
            if dep in lowered and label not in frameworks:
                frameworks.append(label)

        for filenames, label in CONFIG_FRAMEWORK_FALLBACKS:
            if any(name in configurations for name in filenames) and label not in frameworks:
                frameworks.append(label)
        return frameworks

    def categorize_technologies(self, dependencies: Mapping[str, str]) -> TechnologyCategories:
        """Fill the eight category buckets in fixed rule order."""
        deps = dependencies
        tech = TechnologyCategories()

        def add(bucket: List[str], dep: str, label: str) -> None:
            version = deps.get(dep)
            if version:
                bucket.append(versioned(label, version))

        add(tech.frontend, "next", "Next.js")
        add(tech.frontend, "react", "React")
        add(tech.frontend, "vue", "Vue.js")
        add(tech.frontend, "tailwindcss", "Tailwind-CSS")
        add(tech.frontend, "@headlessui/react", "Headless-UI")
        add(tech.frontend, "framer-motion", "Framer-Motion")
        add(tech.frontend, "lucide-react", "Lucide-React")

        add(tech.backend, "@supabase/supabase-js", "Supabase")
        add(tech.backend, "express", "Express")
        add(tech.backend, "fastify", "Fastify")
        if deps.get("next") and not deps.get("express"):
            tech.backend.append("Next.js-API-Routes")

        if deps.get("@supabase/supabase-js"):
            tech.database.extend(["PostgreSQL", "Supabase"])
        add(tech.database, "prisma", "Prisma")
        add(tech.database, "pg", "PostgreSQL")

        if self.exploration.has_file("vercel.json") or deps.get("next"):
            tech.infrastructure.append("Vercel")
        if self.exploration.has_file("Dockerfile"):
            tech.infrastructure.append("Docker")
        if self.exploration.has_file(".github/workflows/deploy.yml"):
            tech.infrastructure.append("GitHub-Actions")

        add(tech.ai, "openai", "OpenAI")
        add(tech.ai, "@anthropic-ai/sdk", "Anthropic")
        add(tech.ai, "langchain", "LangChain")

        add(tech.development, "typescript", "TypeScript")
        add(tech.development, "eslint", "ESLint")
        add(tech.development, "prettier", "Prettier")
        add(tech.development, "jest", "Jest")

        if deps.get("@supabase/supabase-js"):
            tech.platforms.append("Supabase-Platform")
        if deps.get("stripe"):
            tech.platforms.append("Stripe-Platform")

        if deps.get("@supabase/auth-helpers-nextjs"):
            tech.integrations.append("Supabase-Auth")
        if deps.get("@vercel/analytics"):
            tech.integrations.append("Vercel-Analytics")

        return tech

    def analyze_infrastructure(self) -> Dict[str, List[str]]:
        infrastructure: Dict[str, List[str]] = {
            "deployment": [],
            "containerization": [],
            "ci_cd": [],
            "monitoring": [],
        }
        if self.exploration.has_file("vercel.json"):
            infrastructure["deployment"].append("Vercel")
        if self.exploration.has_file("netlify.toml"):
            infrastructure["deployment"].append("Netlify")
        if self.exploration.has_file("Dockerfile"):
            infrastructure["containerization"].append("Docker")
        if self.exploration.has_file("docker-compose.yml"):
            infrastructure["containerization"].append("Docker Compose")
        if any(record.path.startswith(".github/workflows/") for record in self.exploration.files):
            infrastructure["ci_cd"].append("GitHub Actions")
        return infrastructure

    def analyze_database(self, dependencies: Mapping[str, str]) -> Dict[str, List[str]]:
        database: Dict[str, List[str]] = {"primary": [], "orm": [], "migrations": []}

        if dependencies.get("@supabase/supabase-js"):
            database["primary"].extend(["PostgreSQL", "Supabase"])
        if dependencies.get("pg"):
            database["primary"].append("PostgreSQL")
        if dependencies.get("mysql2"):
            database["primary"].append("MySQL")
        if dependencies.get("mongodb"):
            database["primary"].append("MongoDB")

        for dep, label in (("prisma", "Prisma"), ("sequelize", "Sequelize"), ("typeorm", "TypeORM")):
            if dependencies.get(dep):
                database["orm"].append(label)

        paths = [record.path for record in self.exploration.files]
        if any("supabase/migrations" in path for path in paths):
            database["migrations"].append("Supabase Migrations")
        if any("prisma/migrations" in path for path in paths):
            database["migrations"].append("Prisma Migrations")
        return database

    def detect_ai_integrations(self, dependencies: Mapping[str, str]) -> Dict[str, List[str]]:
        ai: Dict[str, List[str]] = {"apis": [], "frameworks": [], "models": [], "integrations": []}

        for dep, label in (
            ("openai", "OpenAI"),
            ("@anthropic-ai/sdk", "Anthropic"),
            ("@google/generative-ai", "Google AI"),
        ):
            if dependencies.get(dep):
                ai["apis"].append(label)
        for dep, label in (("langchain", "LangChain"), ("@tensorflow/tfjs", "TensorFlow.js")):
            if dependencies.get(dep):
                ai["frameworks"].append(label)

        for record in self.exploration.files:
            if record.type not in CODE_FILE_TYPES:
                continue
            content = record.content
            if ("openai" in content or "OpenAI" in content) and "OpenAI Integration" not in ai["integrations"]:
                ai["integrations"].append("OpenAI Integration")
            if ("anthropic" in content or "claude" in content) and "Anthropic Integration" not in ai["integrations"]:
                ai["integrations"].append("Anthropic Integration")
        return ai

    def detect_languages(self) -> List[str]:
        """Languages of the fetched files only, in order of first appearance."""
        languages: List[str] = []
        for record in self.exploration.files:
            extension = record.path.rsplit(".", 1)[-1].lower() if "." in record.path else ""
            language = LANGUAGE_BY_EXTENSION.get(extension)
            if language and language not in languages:
                languages.append(language)
        return languages

    def detect_package_managers(self) -> List[str]:
        return [manager for lockfile, manager in LOCKFILES if self.exploration.has_file(lockfile)]

    def detect_development_tools(self, dependencies: Mapping[str, str]) -> List[str]:
        tools: List[str] = []
        for dep, tool in DEV_TOOLS:
            scoped = f"@{dep}/"
            if (
                dependencies.get(dep)
                or dependencies.get(f"@{dep}")
                or any(name.startswith(scoped) for name in dependencies)
            ):
                tools.append(tool)
        return tools


__all__ = ["ANALYSIS_METHOD", "TechnologyAnalyzer", "strip_range_prefix", "versioned"]
