from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .apps import canonical_app_name
from .drivers.base import AutomationBackend
from .drivers.keys import normalize_keys
from .errors import DriverFailure, InvalidLayout, NotFound, UnsupportedAction, WorkspaceError
from .jsonlog import JsonActionLogger
from .layouts.model import Action, ActionType, Layout
from .layouts.normalizer import normalize_action, normalize_layout
from .layouts.resolver import LayoutResolver


logger = logging.getLogger("workspace_pilot.executor")

_URL_PREFIXES = ("mailto:", "about:", "file:", "data:", "javascript:")


class RunState(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    VALIDATING = "validating"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ExecutionContext:
    """Per-run scratch state shared between consecutive actions."""

    last_activated_app: Optional[str] = None


@dataclass
class ActionReport:
    index: int
    type: str
    description: str
    ok: bool
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "index": self.index,
            "type": self.type,
            "description": self.description,
            "ok": self.ok,
        }
        if self.error:
            out["error"] = self.error
        return out


@dataclass
class RunResult:
    success: bool
    state: RunState
    layout_id: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    actions: List[ActionReport] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"success": self.success}
        if self.success:
            out["message"] = self.message or ""
        else:
            out["error"] = self.error or ""
        if self.actions:
            out["actions"] = [a.to_dict() for a in self.actions]
        return out


def with_scheme(url: str) -> str:
    url = url.strip()
    if "://" in url or url.lower().startswith(_URL_PREFIXES):
        return url
    return "https://" + url


class WorkspaceExecutor:
    """Runs a layout's actions, in order, against an automation backend.

    IDLE -> RESOLVING -> VALIDATING -> RUNNING -> COMPLETED | FAILED

    Only resolve/validate errors end in FAILED. Once RUNNING, each action is
    isolated: a failure is logged and reported, and the next action runs.
    """

    def __init__(
        self,
        backend: AutomationBackend,
        resolver: Optional[LayoutResolver] = None,
        *,
        default_browser: str = "Google Chrome",
        message_app: str = "WhatsApp",
        verbose: bool = False,
        action_log: Optional[JsonActionLogger] = None,
    ) -> None:
        self.backend = backend
        self.resolver = resolver
        self.default_browser = default_browser
        self.message_app = message_app
        self.verbose = verbose
        self.action_log = action_log
        self.state = RunState.IDLE
        self._handlers: Dict[ActionType, Callable[[Action, ExecutionContext], None]] = {
            ActionType.OPEN_APP: self._open_app,
            ActionType.OPEN_URL: self._open_urls,
            ActionType.OPEN_MULTIPLE_URLS: self._open_urls,
            ActionType.KEYBOARD_SHORTCUT: self._keyboard_shortcut,
            ActionType.MOUSE_MOVE: self._pointer,
            ActionType.MOUSE_CLICK: self._pointer,
            ActionType.TYPE_TEXT: self._type_text,
            ActionType.SEND_MESSAGE: self._send_message,
        }

    # --- Run lifecycle --------------------------------------------------
    def _enter(self, state: RunState, layout_id: Optional[str]) -> None:
        logger.debug("run state", extra={"layout_id": layout_id, "from_state": self.state.value, "to_state": state.value})
        self.state = state

    def _event(self, event: str, **data: Any) -> None:
        if self.action_log is not None:
            self.action_log.log(event, **data)

    def _fail(self, exc: WorkspaceError, layout_id: Optional[str]) -> RunResult:
        self._enter(RunState.FAILED, layout_id)
        logger.error("workspace run failed", extra={"layout_id": layout_id, "code": exc.code, "error": str(exc)})
        self._event("run_failed", layout_id=layout_id, code=exc.code, error=str(exc), ok=False)
        return RunResult(
            success=False,
            state=RunState.FAILED,
            layout_id=layout_id,
            error=str(exc),
            error_code=exc.code,
        )

    def execute(self, layout_id: str) -> RunResult:
        """Resolve a layout by id and run it."""
        self._enter(RunState.RESOLVING, layout_id)
        if self.resolver is None:
            return self._fail(NotFound("No layout stores configured"), layout_id)
        try:
            raw, source = self.resolver.resolve(layout_id)
        except NotFound as exc:
            return self._fail(exc, layout_id)
        self._event("layout_resolved", layout_id=layout_id, source=source)
        return self._run(raw, layout_id)

    def execute_layout(
        self,
        layout: Union[Layout, Mapping[str, Any]],
        layout_id: Optional[str] = None,
    ) -> RunResult:
        """Run an already loaded layout, skipping resolution."""
        return self._run(layout, layout_id)

    def _run(self, raw: Union[Layout, Mapping[str, Any]], layout_id: Optional[str]) -> RunResult:
        self._enter(RunState.VALIDATING, layout_id)
        try:
            layout = normalize_layout(raw, layout_id)
        except InvalidLayout as exc:
            return self._fail(exc, layout_id)

        self._enter(RunState.RUNNING, layout_id)
        logger.info("workspace run started", extra={"layout_id": layout_id, "layout_name": layout.name, "count": len(layout.actions)})
        self._event("run_started", layout_id=layout_id, layout_name=layout.name, count=len(layout.actions))

        ctx = ExecutionContext()
        reports: List[ActionReport] = []
        for index, action in enumerate(layout.actions):
            if index:
                self.backend.pause("between_actions")
            reports.append(self._run_action(index, action, ctx))

        self._enter(RunState.COMPLETED, layout_id)
        failed = sum(1 for r in reports if not r.ok)
        logger.info("workspace run completed", extra={"layout_id": layout_id, "count": len(reports), "failed": failed})
        recent = self.action_log.recent_failures("action") if self.action_log is not None else 0
        self._event("run_completed", layout_id=layout_id, count=len(reports), failed=failed, recent_action_failures=recent)
        return RunResult(
            success=True,
            state=RunState.COMPLETED,
            layout_id=layout_id,
            message=f"Workspace '{layout.name}' started",
            actions=reports if self.verbose else [],
        )

    def execute_action(self, raw: Union[Action, Mapping[str, Any]]) -> ActionReport:
        """Run a single action in a fresh context. Invalid input raises InvalidLayout."""
        action = raw if isinstance(raw, Action) else normalize_action(raw, 0)
        return self._run_action(0, action, ExecutionContext())

    def _run_action(self, index: int, action: Action, ctx: ExecutionContext) -> ActionReport:
        logger.info(
            "action %d: %s", index + 1, action.description,
            extra={"index": index, "action_type": action.type.value},
        )
        error: Optional[str] = None
        try:
            handler = self._handlers.get(action.type)
            if handler is None:
                raise UnsupportedAction(f"Unsupported action type: {action.raw_type or action.type.value}")
            handler(action, ctx)
        except WorkspaceError as exc:
            error = str(exc)
            logger.warning(
                "action failed",
                extra={"index": index, "action_type": action.type.value, "code": exc.code, "error": error},
            )
        except Exception as exc:
            error = str(exc) or exc.__class__.__name__
            logger.exception("action crashed", extra={"index": index, "action_type": action.type.value})
        ok = error is None
        self._event("action", index=index, action_type=action.type.value, description=action.description, ok=ok, error=error)
        return ActionReport(index=index, type=action.type.value, description=action.description, ok=ok, error=error)

    # --- Action handlers ------------------------------------------------
    def _activate_or_warn(self, app: str) -> None:
        if not self.backend.activate_app(app):
            logger.warning("could not activate target app", extra={"app": app})

    def _open_app(self, action: Action, ctx: ExecutionContext) -> None:
        app = canonical_app_name(action.app or "")
        if action.profile:
            # New window in the requested browser profile.
            ok = self.backend.open_url("", app, profile=action.profile)
            ok = ok or self.backend.activate_app(app)
        else:
            ok = self.backend.activate_app(app)
        if not ok and not self.backend.new_window(app):
            raise DriverFailure(f"Could not open {app}")
        ctx.last_activated_app = app

    def _open_urls(self, action: Action, ctx: ExecutionContext) -> None:
        if action.browser:
            browser = canonical_app_name(action.browser)
        else:
            browser = ctx.last_activated_app or self.default_browser
        urls = (action.url,) if action.type is ActionType.OPEN_URL else action.urls
        extra = {"profile": action.profile} if action.profile else {}

        failed: List[str] = []
        for i, url in enumerate(urls):
            if i:
                self.backend.pause("between_urls")
            target = with_scheme(url)
            if not self.backend.open_url(target, browser, **extra):
                failed.append(target)
        if len(failed) < len(urls):
            ctx.last_activated_app = browser
        if failed:
            raise DriverFailure(f"Could not open {', '.join(failed)} in {browser}", details={"urls": failed})

    def _keyboard_shortcut(self, action: Action, ctx: ExecutionContext) -> None:
        target = canonical_app_name(action.app) if action.app else ctx.last_activated_app
        sequence = normalize_keys(action.keys)
        if not self.backend.press_keys(sequence, target):
            raise DriverFailure(f"Could not press {'+'.join(sequence)}")

    def _pointer(self, action: Action, ctx: ExecutionContext) -> None:
        target = canonical_app_name(action.app) if action.app else ctx.last_activated_app
        if target:
            self._activate_or_warn(target)
        if not self.backend.move_mouse(action.x, action.y):
            raise DriverFailure(f"Could not move the pointer to ({action.x}, {action.y})")
        if action.type is ActionType.MOUSE_CLICK or action.click:
            if not self.backend.click(action.button):
                raise DriverFailure(f"Could not click at ({action.x}, {action.y})")
        if action.text:
            if not self.backend.type_text(action.text):
                raise DriverFailure("Could not type text after click")

    def _type_text(self, action: Action, ctx: ExecutionContext) -> None:
        if action.app:
            app = canonical_app_name(action.app)
            self._activate_or_warn(app)
            ctx.last_activated_app = app
        if not self.backend.type_text(action.text or ""):
            raise DriverFailure("Could not type text")

    def _send_message(self, action: Action, ctx: ExecutionContext) -> None:
        app = canonical_app_name(action.app or self.message_app)
        if not self.backend.activate_app(app):
            raise DriverFailure(f"Could not activate {app}")
        ctx.last_activated_app = app

        steps = (
            ("open search", lambda: self.backend.press_keys(["command", "f"])),
            ("type contact", lambda: self.backend.type_text(action.contact or "")),
            ("select contact", lambda: self.backend.press_keys(["return"])),
            ("type message", lambda: self.backend.type_text(action.message or "")),
            ("send message", lambda: self.backend.press_keys(["return"])),
        )
        for i, (label, step) in enumerate(steps):
            if i:
                self.backend.pause("message_step")
            if not step():
                raise DriverFailure(f"Could not {label} in {app}")
