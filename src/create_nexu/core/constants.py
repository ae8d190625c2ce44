"""Shared constants describing the Nexu template layout."""

from __future__ import annotations

REPO_URL = "heccath/nexu"
REPO_BRANCH = "main"

MANIFEST_FILE = "package.json"
PROJECT_CONFIG_FILE = ".nexu.yaml"
TEMPLATE_ROOT_ENV = "NEXU_TEMPLATE_ROOT"
DEFAULT_TEMPLATE = "default"

# Root-level configuration files compared one by one.
CONFIG_FILES: tuple[str, ...] = (
    ".eslintrc.js",
    ".eslintignore",
    ".prettierrc",
    ".prettierignore",
    "tsconfig.json",
    "turbo.json",
    "vitest.config.ts",
    "commitlint.config.js",
)

SHARED_PACKAGES: tuple[str, ...] = (
    "cache",
    "config",
    "constants",
    "logger",
    "result",
    "types",
    "ui",
    "utils",
)

SERVICES: tuple[str, ...] = (
    "postgres",
    "redis",
    "rabbitmq",
    "kafka",
    "prometheus",
    "grafana",
    "minio",
    "elasticsearch",
)

# Never reported as deleted: the template intentionally never ships these.
EXCLUDE_FROM_DELETION: frozenset[str] = frozenset(
    {
        "node_modules",
        ".git",
        ".turbo",
        "dist",
        "build",
        ".next",
        "coverage",
        ".husky/_",
        ".DS_Store",
        "pnpm-lock.yaml",
        "yarn.lock",
        "package-lock.json",
    }
)

__all__ = [
    "CONFIG_FILES",
    "DEFAULT_TEMPLATE",
    "EXCLUDE_FROM_DELETION",
    "MANIFEST_FILE",
    "PROJECT_CONFIG_FILE",
    "REPO_BRANCH",
    "REPO_URL",
    "SERVICES",
    "SHARED_PACKAGES",
    "TEMPLATE_ROOT_ENV",
]
