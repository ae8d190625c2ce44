"""Command-line layer for create-nexu."""

from .helpers import console, show_banner
from .prompts import ConsolePromptProvider
from .ui import SelectionCancelled, StepTracker, multi_select_with_arrows, select_with_arrows

__all__ = [
    "ConsolePromptProvider",
    "SelectionCancelled",
    "StepTracker",
    "console",
    "multi_select_with_arrows",
    "select_with_arrows",
    "show_banner",
]
