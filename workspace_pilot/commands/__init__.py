from __future__ import annotations

from .default_commands import build_default_registry
from .operations import OPERATIONS, RUN_WORKSPACE
from .registry import CommandDescriptor, CommandRegistry
from .resolver import FUZZY_THRESHOLD, match_command, parse_pointer_command, parse_workspace_command
from .similarity import levenshtein, similarity


__all__ = [
    "FUZZY_THRESHOLD",
    "OPERATIONS",
    "RUN_WORKSPACE",
    "CommandDescriptor",
    "CommandRegistry",
    "build_default_registry",
    "levenshtein",
    "match_command",
    "parse_pointer_command",
    "parse_workspace_command",
    "similarity",
]
