"""Core collaborators: constants, project detection, package managers, config."""

from .constants import (
    CONFIG_FILES,
    EXCLUDE_FROM_DELETION,
    MANIFEST_FILE,
    SERVICES,
    SHARED_PACKAGES,
)
from .package_manager import detect_package_manager, get_install_command, get_run_command, run_install
from .project import is_nexu_project, locate_template_root, require_project

__all__ = [
    "CONFIG_FILES",
    "EXCLUDE_FROM_DELETION",
    "MANIFEST_FILE",
    "SERVICES",
    "SHARED_PACKAGES",
    "detect_package_manager",
    "get_install_command",
    "get_run_command",
    "is_nexu_project",
    "locate_template_root",
    "require_project",
    "run_install",
]
