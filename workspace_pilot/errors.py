from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass
class WorkspaceError(Exception):
    """Base class for expected, reportable failures.

    Pre-run errors (NotFound, InvalidLayout) end a workspace run; per-action
    errors (DriverFailure, UnsupportedAction) are logged and the run goes on.
    """

    message: str = ""
    details: Optional[Mapping[str, Any]] = None

    code = "error"

    def __str__(self) -> str:  # pragma: no cover
        return self.message or self.code


class NotFound(WorkspaceError):
    """A layout (or app) could not be located in any store."""

    code = "not_found"


class InvalidLayout(WorkspaceError):
    """A layout record violates the schema."""

    code = "invalid_layout"


class DriverFailure(WorkspaceError):
    """A capability call failed on every backend tier."""

    code = "driver_failure"


class UnsupportedAction(WorkspaceError):
    """An action tag the executor has no handler for."""

    code = "unsupported_action"


class MalformedCommand(WorkspaceError):
    """A free-text command request that cannot be interpreted at all."""

    code = "malformed_command"
