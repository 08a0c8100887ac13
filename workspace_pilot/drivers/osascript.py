from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from typing import Optional, Sequence, Tuple

from ..errors import DriverFailure
from .base import Driver
from .keys import escape_applescript, keystroke_statement


logger = logging.getLogger("workspace_pilot.drivers.osascript")


class AppleScriptDriver(Driver):
    """OS scripting bridge: synthesizes one AppleScript per capability call."""

    name = "osascript"
    capabilities = frozenset(
        {
            "activate_app",
            "new_window",
            "move_mouse",
            "click",
            "press_keys",
            "type_text",
            "open_url",
            "pointer_position",
            "run_script",
        }
    )

    def __init__(self, timeout_s: Optional[float] = None) -> None:
        self.timeout_s = timeout_s

    def is_available(self) -> bool:
        return sys.platform == "darwin" and shutil.which("osascript") is not None

    def _run(self, script: str) -> str:
        logger.debug("osascript", extra={"script": script})
        result = subprocess.run(
            ["osascript", "-e", script],
            capture_output=True,
            text=True,
            timeout=self.timeout_s,
        )
        if result.returncode != 0:
            raise DriverFailure(
                f"osascript exited with {result.returncode}",
                details={"stderr": (result.stderr or "").strip()},
            )
        return (result.stdout or "").strip()

    def activate_app(self, name: str) -> bool:
        self._run(f'tell application "{escape_applescript(name)}" to activate')
        return True

    def new_window(self, name: str) -> bool:
        app = escape_applescript(name)
        self._run(
            "\n".join(
                [
                    f'tell application "{app}"',
                    "  activate",
                    "  try",
                    "    make new document",
                    "  on error",
                    "    try",
                    "      make new window",
                    "    on error",
                    "      activate",
                    "    end try",
                    "  end try",
                    "end tell",
                ]
            )
        )
        return True

    def move_mouse(self, x: int, y: int) -> bool:
        self._run(
            "\n".join(
                [
                    'tell application "System Events"',
                    f"  set the position of the mouse to {{{int(x)}, {int(y)}}}",
                    "end tell",
                ]
            )
        )
        return True

    def click(self, button: str = "left") -> bool:
        if button != "left":
            raise DriverFailure(f"osascript cannot send a {button} click")
        self._run('tell application "System Events" to click at the position of the mouse')
        return True

    def press_keys(self, sequence: Sequence[str], target_app: Optional[str] = None) -> bool:
        try:
            statement = keystroke_statement(sequence)
        except ValueError as exc:
            raise DriverFailure(str(exc)) from exc
        if target_app:
            script = "\n".join(
                [
                    f'tell application "{escape_applescript(target_app)}"',
                    "  activate",
                    "  delay 0.5",
                    '  tell application "System Events"',
                    f"    {statement}",
                    "  end tell",
                    "end tell",
                ]
            )
        else:
            script = "\n".join(['tell application "System Events"', f"  {statement}", "end tell"])
        self._run(script)
        return True

    def type_text(self, text: str) -> bool:
        self._run(f'tell application "System Events" to keystroke "{escape_applescript(text)}"')
        return True

    def open_url(self, url: str, browser: Optional[str] = None, profile: Optional[str] = None) -> bool:
        if profile:
            # AppleScript cannot pick a browser profile; leave it to process spawn.
            raise DriverFailure("osascript cannot select a browser profile")
        if not url:
            raise DriverFailure("no url to open")
        location = escape_applescript(url)
        if browser:
            script = "\n".join(
                [
                    f'tell application "{escape_applescript(browser)}"',
                    "  activate",
                    f'  open location "{location}"',
                    "end tell",
                ]
            )
        else:
            script = f'open location "{location}"'
        self._run(script)
        return True

    def pointer_position(self) -> Optional[Tuple[int, int]]:
        out = self._run('tell application "System Events" to return position of mouse')
        parts = [p.strip() for p in out.split(",")]
        if len(parts) != 2:
            return None
        try:
            return int(float(parts[0])), int(float(parts[1]))
        except ValueError:
            return None

    def run_script(self, source: str) -> bool:
        self._run(source)
        return True
