"""Fixed detection tables used by the technology analyzer."""

from __future__ import annotations

CONFIG_FILES: tuple[str, ...] = (
    "next.config.js",
    "next.config.mjs",
    "nuxt.config.js",
    "vue.config.js",
    "angular.json",
    "svelte.config.js",
    "vite.config.js",
    "webpack.config.js",
    "tailwind.config.js",
    "postcss.config.js",
    "tsconfig.json",
    "jsconfig.json",
    "babel.config.js",
    ".eslintrc.js",
    ".eslintrc.json",
    "prettier.config.js",
    "jest.config.js",
    "vitest.config.js",
    "cypress.config.js",
)

CONTENT_PREVIEW_CHARS = 200

# (dependency name, framework label), checked in order.
FRAMEWORK_MARKERS: tuple[tuple[str, str], ...] = (
    # frontend
    ("next", "Next.js"),
    ("react", "React"),
    ("vue", "Vue.js"),
    ("angular", "Angular"),
    ("svelte", "Svelte"),
    # backend
    ("express", "Express"),
    ("fastify", "Fastify"),
    ("@nestjs/core", "NestJS"),
    ("koa", "Koa"),
    # css
    ("tailwindcss", "Tailwind CSS"),
    ("bootstrap", "Bootstrap"),
    ("@mui/material", "Material-UI"),
    # testing
    ("jest", "Jest"),
    ("vitest", "Vitest"),
    ("cypress", "Cypress"),
    ("playwright", "Playwright"),
    # build
    ("webpack", "Webpack"),
    ("vite", "Vite"),
    ("rollup", "Rollup"),
    # orm
    ("prisma", "Prisma"),
    ("sequelize", "Sequelize"),
    ("typeorm", "TypeORM"),
)

# Matched case-insensitively against requirements/pyproject names.
PYTHON_FRAMEWORK_MARKERS: tuple[tuple[str, str], ...] = (
    ("django", "Django"),
    ("flask", "Flask"),
    ("fastapi", "FastAPI"),
)

# (configuration files, framework label) fallbacks when no dependency marker fired.
CONFIG_FRAMEWORK_FALLBACKS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("next.config.js", "next.config.mjs"), "Next.js"),
    (("tailwind.config.js",), "Tailwind CSS"),
)

LOCKFILES: tuple[tuple[str, str], ...] = (
    ("package-lock.json", "npm"),
    ("yarn.lock", "yarn"),
    ("pnpm-lock.yaml", "pnpm"),
    ("requirements.txt", "pip"),
    ("Gemfile.lock", "bundler"),
    ("composer.lock", "composer"),
    ("go.sum", "go modules"),
    ("Cargo.lock", "cargo"),
)

DEV_TOOLS: tuple[tuple[str, str], ...] = (
    ("eslint", "ESLint"),
    ("prettier", "Prettier"),
    ("jest", "Jest"),
    ("cypress", "Cypress"),
    ("webpack", "Webpack"),
    ("vite", "Vite"),
    ("rollup", "Rollup"),
    ("babel", "Babel"),
    ("typescript", "TypeScript"),
    ("nodemon", "Nodemon"),
    ("concurrently", "Concurrently"),
)

LANGUAGE_BY_EXTENSION = {
    "js": "JavaScript",
    "jsx": "JavaScript",
    "mjs": "JavaScript",
    "ts": "TypeScript",
    "tsx": "TypeScript",
    "py": "Python",
    "rb": "Ruby",
    "php": "PHP",
    "go": "Go",
    "rs": "Rust",
    "java": "Java",
    "cs": "C#",
    "cpp": "C++",
    "cc": "C++",
}

CODE_FILE_TYPES = frozenset({"javascript", "typescript"})

__all__ = [
    "CODE_FILE_TYPES",
    "CONFIG_FILES",
    "CONFIG_FRAMEWORK_FALLBACKS",
    "CONTENT_PREVIEW_CHARS",
    "DEV_TOOLS",
    "FRAMEWORK_MARKERS",
    "LANGUAGE_BY_EXTENSION",
    "LOCKFILES",
    "PYTHON_FRAMEWORK_MARKERS",
]
