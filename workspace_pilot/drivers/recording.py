from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple

from .base import CAPABILITIES, EXTRA_CAPABILITIES, Driver


logger = logging.getLogger("workspace_pilot.drivers.dry_run")


class DryRunDriver(Driver):
    """Performs nothing; records every call. Used when not running live."""

    name = "dry_run"
    capabilities = frozenset(CAPABILITIES + EXTRA_CAPABILITIES) - {"pointer_position"}

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []

    def is_available(self) -> bool:
        return True

    def _record(self, capability: str, *args: Any) -> bool:
        self.calls.append((capability, args))
        logger.info("dry-run %s%r", capability, args)
        return True

    def activate_app(self, name: str) -> bool:
        return self._record("activate_app", name)

    def new_window(self, name: str) -> bool:
        return self._record("new_window", name)

    def move_mouse(self, x: int, y: int) -> bool:
        return self._record("move_mouse", x, y)

    def click(self, button: str = "left") -> bool:
        return self._record("click", button)

    def press_keys(self, sequence: Sequence[str], target_app: Optional[str] = None) -> bool:
        return self._record("press_keys", list(sequence), target_app)

    def type_text(self, text: str) -> bool:
        return self._record("type_text", text)

    def open_url(self, url: str, browser: Optional[str] = None, profile: Optional[str] = None) -> bool:
        return self._record("open_url", url, browser, profile)

    def run_script(self, source: str) -> bool:
        return self._record("run_script", source)

    def capture_screen(self, path: str) -> bool:
        return self._record("capture_screen", path)
