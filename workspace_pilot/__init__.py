"""Desktop workspace automation: layouts and free-text commands driven
through a chain of OS automation backends."""

from __future__ import annotations

from .config import PilotOptions
from .errors import DriverFailure, InvalidLayout, MalformedCommand, NotFound, UnsupportedAction, WorkspaceError
from .executor import RunResult, RunState, WorkspaceExecutor
from .service import WorkspacePilot


__version__ = "0.1.0"

__all__ = [
    "DriverFailure",
    "InvalidLayout",
    "MalformedCommand",
    "NotFound",
    "PilotOptions",
    "RunResult",
    "RunState",
    "UnsupportedAction",
    "WorkspaceError",
    "WorkspaceExecutor",
    "WorkspacePilot",
]
