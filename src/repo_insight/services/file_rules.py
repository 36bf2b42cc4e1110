"""File name rules: decide which files to fetch and how to file them.

Every rule is a case-insensitive substring match against the file *name*
(not the path).
"""

from __future__ import annotations

# Files whose bodies carry stack signals; only these are downloaded.
IMPORTANT_FILE_PATTERNS: tuple[str, ...] = (
    "package.json",
    "tsconfig.json",
    "vite.config",
    "webpack.config",
    "readme.md",
    "readme.txt",
    ".env.example",
    "dockerfile",
    "docker-compose",
    "makefile",
    "cargo.toml",
    "go.mod",
    "requirements.txt",
    "pyproject.toml",
    "pom.xml",
    "build.gradle",
)

CONFIG_PATTERNS: tuple[str, ...] = (
    "tsconfig",
    "vite.config",
    "webpack.config",
    "rollup.config",
    "jest.config",
    "cypress.config",
    "tailwind.config",
    "next.config",
    "nuxt.config",
    ".eslintrc",
    ".prettierrc",
    "babel.config",
)

README_PATTERN = "readme"
MANIFEST_PATTERN = "package.json"


def _matches_any(name: str, patterns: tuple[str, ...]) -> bool:
    lower = name.lower()
    return any(pattern in lower for pattern in patterns)


def should_fetch_content(name: str) -> bool:
    """Return *True* if the file body is worth downloading."""
    return _matches_any(name, IMPORTANT_FILE_PATTERNS)


def is_config_file(name: str) -> bool:
    return _matches_any(name, CONFIG_PATTERNS)


def is_readme(name: str) -> bool:
    return README_PATTERN in name.lower()


def is_manifest(name: str) -> bool:
    return MANIFEST_PATTERN in name.lower()


def file_extension(name: str) -> str | None:
    """Lowercase text after the last ``.``, or *None* when there is no dot."""
    _, dot, ext = name.rpartition(".")
    if not dot or not ext:
        return None
    return ext.lower()
