from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from .commands import (
    OPERATIONS,
    RUN_WORKSPACE,
    CommandDescriptor,
    CommandRegistry,
    build_default_registry,
    match_command,
    parse_pointer_command,
    parse_workspace_command,
)
from .config import PilotOptions
from .drivers import build_default_chain
from .drivers.base import AutomationBackend
from .errors import DriverFailure, InvalidLayout, MalformedCommand, UnsupportedAction, WorkspaceError
from .executor import WorkspaceExecutor
from .jsonlog import JsonActionLogger
from .layouts import DEFAULT_LAYOUTS, JsonLayoutStore, LayoutResolver, LocalLayoutDir, normalize_layout


logger = logging.getLogger("workspace_pilot.service")

NOT_UNDERSTOOD = "Sorry, I couldn't understand that command"


class WorkspacePilot:
    """The operations exposed to callers (CLI, scripts, other front ends)."""

    def __init__(
        self,
        backend: AutomationBackend,
        resolver: LayoutResolver,
        registry: Optional[CommandRegistry] = None,
        *,
        default_browser: str = "Google Chrome",
        message_app: str = "WhatsApp",
        verbose: bool = False,
        action_log: Optional[JsonActionLogger] = None,
    ) -> None:
        self.backend = backend
        self.resolver = resolver
        self.registry = registry if registry is not None else build_default_registry()
        self.action_log = action_log
        self.executor = WorkspaceExecutor(
            backend,
            resolver,
            default_browser=default_browser,
            message_app=message_app,
            verbose=verbose,
            action_log=action_log,
        )

    @classmethod
    def from_options(
        cls,
        options: PilotOptions,
        *,
        dry_run: bool = True,
        verbose: bool = False,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> "WorkspacePilot":
        store = JsonLayoutStore(options.user_store, DEFAULT_LAYOUTS if options.seed_defaults else None)
        resolver = LayoutResolver(store, LocalLayoutDir(options.layouts_dir))
        return cls(
            build_default_chain(options, dry_run=dry_run, sleep=sleep),
            resolver,
            default_browser=options.default_browser,
            message_app=options.message_app,
            verbose=verbose,
            action_log=JsonActionLogger(options.action_log),
        )

    # --- Layouts --------------------------------------------------------
    def execute(self, layout_id: str) -> Dict[str, Any]:
        return self.executor.execute(layout_id).to_dict()

    def list(self) -> List[Dict[str, Any]]:
        """Layouts from the user store, then local files not already listed."""
        out: List[Dict[str, Any]] = []
        seen = set()
        for layout_id, data in self.resolver.user_store.get_all().items():
            if not isinstance(data, dict):
                continue
            actions = data.get("actions")
            out.append(
                {
                    "id": layout_id,
                    "name": data.get("name") or layout_id,
                    "description": data.get("description") or "",
                    "actionCount": len(actions) if isinstance(actions, list) else 0,
                    "source": "user",
                }
            )
            seen.add(str(layout_id).lower())
        for entry in self.resolver.list_local():
            if entry["id"].lower() in seen:
                continue
            out.append(entry)
        return out

    def save(self, layout_id: str, raw: Mapping[str, Any]) -> Dict[str, Any]:
        """Validate and store a layout in the user store under `layout_id`."""
        if not layout_id or not str(layout_id).strip():
            return {"success": False, "error": "Layout id is required"}
        try:
            layout = normalize_layout(raw, layout_id)
        except InvalidLayout as exc:
            return {"success": False, "error": str(exc)}
        self.resolver.user_store.put(str(layout_id).strip(), layout.to_dict())
        logger.info("layout saved", extra={"layout_id": layout_id, "count": len(layout.actions)})
        return {"success": True, "message": f"Layout '{layout.name}' saved"}

    def test_action(self, raw: Mapping[str, Any]) -> Dict[str, Any]:
        """Run one action on its own."""
        try:
            report = self.executor.execute_action(raw)
        except InvalidLayout as exc:
            return {"success": False, "error": str(exc)}
        if report.ok:
            return {"success": True, "message": f"Executed {report.type}: {report.description}"}
        return {"success": False, "error": report.error or "Action failed"}

    # --- Free-text commands ----------------------------------------------
    def resolve_command(self, phrase: str) -> Optional[CommandDescriptor]:
        return (
            parse_pointer_command(phrase)
            or parse_workspace_command(phrase)
            or match_command(phrase, self.registry)
        )

    def invoke(self, descriptor: CommandDescriptor, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        merged: Dict[str, Any] = {**descriptor.params, **(params or {})}
        try:
            if descriptor.is_routine():
                if descriptor.action(self.backend) is False:
                    raise DriverFailure(f"Could not {descriptor.description.lower() or 'run command'}")
                message = descriptor.description or "Command executed"
            elif descriptor.action == RUN_WORKSPACE:
                layout_id = merged.get("layout") or merged.get("layout_id")
                if not layout_id:
                    raise MalformedCommand("runWorkspace needs a layout id")
                result = self.execute(str(layout_id))
                if "message" not in result:
                    result["message"] = result.pop("error", "Workspace run failed")
                return result
            else:
                operation = OPERATIONS.get(str(descriptor.action))
                if operation is None:
                    raise UnsupportedAction(f"Unknown operation: {descriptor.action}")
                message = operation(self.backend, merged)
        except WorkspaceError as exc:
            logger.warning("command failed", extra={"command": descriptor.description, "code": exc.code, "error": str(exc)})
            self._event("command", command=descriptor.description, ok=False, error=str(exc))
            return {"success": False, "message": str(exc)}
        self._event("command", command=descriptor.description, ok=True)
        return {"success": True, "message": message}

    def run_command(self, phrase: str) -> Dict[str, Any]:
        """Resolve a phrase and invoke it; unmatched phrases are not an error."""
        if not str(phrase or "").strip():
            raise MalformedCommand("Command text is empty")
        descriptor = self.resolve_command(phrase)
        if descriptor is None:
            logger.info("command not understood", extra={"phrase": phrase})
            return {"success": False, "understood": False, "message": NOT_UNDERSTOOD}
        result = self.invoke(descriptor)
        result["understood"] = True
        result["command"] = descriptor.description
        return result

    def _event(self, event: str, **data: Any) -> None:
        if self.action_log is not None:
            self.action_log.log(event, **data)
