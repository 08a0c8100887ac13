from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from typing import List, Optional

from ..apps import is_chromium
from ..errors import DriverFailure
from .base import Driver


logger = logging.getLogger("workspace_pilot.drivers.spawn")

_WARP_SCRIPT = "import Quartz; Quartz.CGWarpMouseCursorPosition(({x}, {y}))"

_CLICK_SCRIPT = """\
import Quartz
pos = Quartz.CGEventGetLocation(Quartz.CGEventCreate(None))
for kind in (Quartz.{down}, Quartz.{up}):
    ev = Quartz.CGEventCreateMouseEvent(None, kind, pos, Quartz.{button})
    Quartz.CGEventPost(Quartz.kCGHIDEventTap, ev)
"""

_CLICK_EVENTS = {
    "left": ("kCGEventLeftMouseDown", "kCGEventLeftMouseUp", "kCGMouseButtonLeft"),
    "right": ("kCGEventRightMouseDown", "kCGEventRightMouseUp", "kCGMouseButtonRight"),
}


class ProcessSpawnDriver(Driver):
    """Process-spawn fallback.

    Apps and URLs go through the generic `open` command; pointer warps and
    clicks run a short Quartz script in a secondary Python interpreter.
    """

    name = "spawn"
    capabilities = frozenset(
        {"activate_app", "new_window", "open_url", "move_mouse", "click", "capture_screen"}
    )

    def __init__(self, quartz_python: str = "/usr/bin/python3", timeout_s: Optional[float] = None) -> None:
        self.quartz_python = quartz_python
        self.timeout_s = timeout_s

    def is_available(self) -> bool:
        return sys.platform == "darwin" and shutil.which("open") is not None

    def _spawn(self, argv: List[str]) -> None:
        logger.debug("spawn", extra={"argv": argv})
        result = subprocess.run(argv, capture_output=True, text=True, timeout=self.timeout_s)
        if result.returncode != 0:
            raise DriverFailure(
                f"{argv[0]} exited with {result.returncode}",
                details={"argv": argv, "stderr": (result.stderr or "").strip()},
            )

    def activate_app(self, name: str) -> bool:
        self._spawn(["open", "-a", name])
        return True

    def new_window(self, name: str) -> bool:
        self._spawn(["open", "-n", "-a", name])
        return True

    def open_url(self, url: str, browser: Optional[str] = None, profile: Optional[str] = None) -> bool:
        if profile and browser and is_chromium(browser):
            argv = ["open", "-n", "-a", browser, "--args", f"--profile-directory={profile}"]
            if url:
                argv.append(url)
        elif browser:
            if not url:
                argv = ["open", "-a", browser]
            else:
                argv = ["open", "-a", browser, url]
        elif url:
            argv = ["open", url]
        else:
            raise DriverFailure("no url or browser to open")
        self._spawn(argv)
        return True

    def move_mouse(self, x: int, y: int) -> bool:
        self._spawn([self.quartz_python, "-c", _WARP_SCRIPT.format(x=int(x), y=int(y))])
        return True

    def click(self, button: str = "left") -> bool:
        try:
            down, up, btn = _CLICK_EVENTS[button]
        except KeyError:
            raise DriverFailure(f"unsupported mouse button: {button}") from None
        self._spawn([self.quartz_python, "-c", _CLICK_SCRIPT.format(down=down, up=up, button=btn)])
        return True

    def capture_screen(self, path: str) -> bool:
        self._spawn(["screencapture", "-x", path])
        return True
