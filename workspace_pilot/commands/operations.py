"""Named operations a command descriptor can point at.

Each operation takes the automation backend and the descriptor params and
returns a short human-readable message. Failures raise DriverFailure;
missing or bad params raise MalformedCommand.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Callable, Dict, Mapping

from ..apps import canonical_app_name
from ..drivers.base import AutomationBackend
from ..errors import DriverFailure, MalformedCommand


Operation = Callable[[AutomationBackend, Mapping[str, Any]], str]

VOLUME_STEP = 10


def _require(ok: bool, what: str) -> None:
    if not ok:
        raise DriverFailure(f"Could not {what}")


def _coords(params: Mapping[str, Any]):
    try:
        return int(params["x"]), int(params["y"])
    except (KeyError, TypeError, ValueError):
        raise MalformedCommand("Pointer commands need integer x and y") from None


def open_app(backend: AutomationBackend, params: Mapping[str, Any]) -> str:
    app = canonical_app_name(str(params.get("app") or params.get("appName") or ""))
    if not app:
        raise MalformedCommand("openApp needs an app name")
    _require(backend.activate_app(app) or backend.new_window(app), f"open {app}")
    return f"Opened {app}"


def _pointer(backend: AutomationBackend, params: Mapping[str, Any], *, clicks: int, button: str) -> str:
    x, y = _coords(params)
    _require(backend.move_mouse(x, y), f"move the pointer to ({x}, {y})")
    for _ in range(clicks):
        _require(backend.click(button), f"{button}-click at ({x}, {y})")
    return f"Clicked at ({x}, {y})"


def click(backend: AutomationBackend, params: Mapping[str, Any]) -> str:
    return _pointer(backend, params, clicks=1, button="left")


def double_click(backend: AutomationBackend, params: Mapping[str, Any]) -> str:
    x, y = _coords(params)
    _pointer(backend, params, clicks=2, button="left")
    return f"Double-clicked at ({x}, {y})"


def right_click(backend: AutomationBackend, params: Mapping[str, Any]) -> str:
    x, y = _coords(params)
    _pointer(backend, params, clicks=1, button="right")
    return f"Right-clicked at ({x}, {y})"


def _appearance(backend: AutomationBackend, dark: bool) -> str:
    script = (
        'tell application "System Events" to tell appearance preferences '
        f"to set dark mode to {'true' if dark else 'false'}"
    )
    mode = "dark" if dark else "light"
    _require(backend.run_script(script), f"switch to {mode} mode")
    return f"Switched to {mode} mode"


def switch_to_dark_mode(backend: AutomationBackend, params: Mapping[str, Any]) -> str:
    return _appearance(backend, True)


def switch_to_light_mode(backend: AutomationBackend, params: Mapping[str, Any]) -> str:
    return _appearance(backend, False)


def take_screenshot(backend: AutomationBackend, params: Mapping[str, Any]) -> str:
    path = params.get("path")
    if not path:
        stamp = time.strftime("%Y%m%d-%H%M%S")
        path = str(Path.home() / "Desktop" / f"screenshot_{stamp}.png")
    _require(backend.capture_screen(str(path)), "take a screenshot")
    return f"Screenshot saved to {path}"


def mute_audio(backend: AutomationBackend, params: Mapping[str, Any]) -> str:
    _require(backend.run_script("set volume with output muted"), "mute audio")
    return "Audio muted"


def unmute_audio(backend: AutomationBackend, params: Mapping[str, Any]) -> str:
    _require(backend.run_script("set volume without output muted"), "unmute audio")
    return "Audio unmuted"


def _volume(backend: AutomationBackend, params: Mapping[str, Any], sign: int) -> str:
    try:
        step = int(params.get("step", VOLUME_STEP))
    except (TypeError, ValueError):
        step = VOLUME_STEP
    script = (
        "set volume output volume "
        f"((output volume of (get volume settings)) {'+' if sign > 0 else '-'} {abs(step)})"
    )
    direction = "up" if sign > 0 else "down"
    _require(backend.run_script(script), f"turn the volume {direction}")
    return f"Volume {direction}"


def volume_up(backend: AutomationBackend, params: Mapping[str, Any]) -> str:
    return _volume(backend, params, 1)


def volume_down(backend: AutomationBackend, params: Mapping[str, Any]) -> str:
    return _volume(backend, params, -1)


# runWorkspace needs the layout resolver and is dispatched by the service.
OPERATIONS: Dict[str, Operation] = {
    "openApp": open_app,
    "click": click,
    "doubleClick": double_click,
    "rightClick": right_click,
    "switchToDarkMode": switch_to_dark_mode,
    "switchToLightMode": switch_to_light_mode,
    "takeScreenshot": take_screenshot,
    "muteAudio": mute_audio,
    "unmuteAudio": unmute_audio,
    "volumeUp": volume_up,
    "volumeDown": volume_down,
}

RUN_WORKSPACE = "runWorkspace"
