"""Exception types shared by the create-nexu core and CLI."""

from __future__ import annotations

from pathlib import Path


class NexuError(RuntimeError):
    """Base error carrying optional remediation text for the user."""

    def __init__(self, message: str, remediation: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.remediation = remediation


class NotANexuProjectError(NexuError):
    """Raised when a command runs outside a recognised project root."""

    def __init__(self, path: Path) -> None:
        super().__init__(
            f"{path} does not appear to be a Nexu project.",
            remediation="Run this command from the project root.",
        )
        self.path = path


class TemplateNotFoundError(NexuError):
    """Raised when the bundled (or overridden) template cannot be located."""

    def __init__(self, message: str = "Template directory not found.") -> None:
        super().__init__(message, remediation="Please reinstall the package.")


class RemoteTemplateError(NexuError):
    """Raised when the upstream template cannot be downloaded or extracted."""


class ConfigError(NexuError):
    """Raised when .nexu.yaml holds invalid values."""


class ComparisonError(NexuError):
    """Raised when a tree walk hits an unreadable file or directory."""

    def __init__(self, category: str, path: Path, reason: str) -> None:
        super().__init__(f"Cannot compare {path}: {reason}")
        self.category = category
        self.path = path
        self.reason = reason


class ManifestError(NexuError):
    """Raised when a package.json cannot be read, parsed or written."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Invalid manifest {path}: {reason}")
        self.path = path
        self.reason = reason


__all__ = [
    "ComparisonError",
    "ConfigError",
    "ManifestError",
    "NexuError",
    "NotANexuProjectError",
    "RemoteTemplateError",
    "TemplateNotFoundError",
]
