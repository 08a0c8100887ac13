from __future__ import annotations

from typing import Sequence

from ..drivers.base import AutomationBackend
from .registry import CommandRegistry, Routine


def _keys(*keys: str) -> Routine:
    def run(backend: AutomationBackend) -> bool:
        return backend.press_keys(list(keys))

    return run


def _spotlight(query: str, then: Sequence[str] = ()) -> Routine:
    """Open Spotlight, launch `query`, then type each extra entry + return."""

    def run(backend: AutomationBackend) -> bool:
        ok = backend.press_keys(["command", "space"])
        ok = backend.type_text(query) and ok
        ok = backend.press_keys(["return"]) and ok
        for entry in then:
            backend.pause("message_step")
            ok = backend.type_text(entry) and ok
            ok = backend.press_keys(["return"]) and ok
        return ok

    return run


def _music(verb: str) -> Routine:
    def run(backend: AutomationBackend) -> bool:
        return backend.run_script(f'tell application "Music" to {verb}')

    return run


def build_default_registry() -> CommandRegistry:
    reg = CommandRegistry()

    # Pointer shortcuts (1920x1080 reference screen)
    reg.register(("click center", "click middle", "click in middle"), "click", "Click the screen center", {"x": 960, "y": 540})
    reg.register(("click top left", "click upper left"), "click", "Click the top-left corner", {"x": 100, "y": 100})
    reg.register(("click top right", "click upper right"), "click", "Click the top-right corner", {"x": 1820, "y": 100})
    reg.register(("click bottom left", "click lower left"), "click", "Click the bottom-left corner", {"x": 100, "y": 980})
    reg.register(("click bottom right", "click lower right"), "click", "Click the bottom-right corner", {"x": 1820, "y": 980})

    # System appearance
    reg.register(("switch to dark mode", "dark mode", "enable dark mode", "dark mode on"), "switchToDarkMode", "Switch to dark mode")
    reg.register(("switch to light mode", "light mode", "enable light mode", "light mode on"), "switchToLightMode", "Switch to light mode")

    # Productivity timers
    reg.register(("start pomodoro", "pomodoro timer", "focus timer"), _spotlight("Timer", ["25"]), "Start a 25-minute Pomodoro timer")
    reg.register(("take a break", "start break", "break timer"), _spotlight("Timer", ["5"]), "Start a 5-minute break timer")

    # Screenshots; the area variant goes first so "screenshot" does not shadow it
    reg.register(("screenshot area", "area screenshot", "select screenshot"), _keys("shift", "command", "4"), "Take a screenshot of a selected area")
    reg.register(
        ("screenshot", "take screenshot", "take a screenshot", "capture screen", "full screenshot", "capture full screen"),
        "takeScreenshot",
        "Save a screenshot of the entire screen to the Desktop",
    )

    # Applications
    reg.register(("open notes", "show notes", "start notes"), _spotlight("Notes"), "Open Notes app")
    reg.register(("open calendar", "show calendar", "check calendar"), _spotlight("Calendar"), "Open Calendar app")
    reg.register(("open reminders", "show reminders", "check reminders"), _spotlight("Reminders"), "Open Reminders app")
    reg.register(("open chrome", "launch chrome", "start chrome"), "openApp", "Open Google Chrome", {"app": "Google Chrome"})
    reg.register(("open vscode", "launch vscode", "start vscode"), "openApp", "Open Visual Studio Code", {"app": "Visual Studio Code"})

    # System actions
    reg.register(("lock screen", "lock computer"), _keys("control", "command", "q"), "Lock the screen")
    reg.register(("show desktop", "hide windows"), _keys("f11"), "Show desktop")

    # Music
    reg.register(("play music", "start music"), _music("play"), "Play music")
    reg.register(("pause music", "stop music"), _music("pause"), "Pause music")
    reg.register(("next song", "next track"), _music("next track"), "Play next track")
    reg.register(("previous song", "previous track"), _music("previous track"), "Play previous track")

    # Volume; unmute precedes mute because "mute" is a substring of it
    reg.register(("volume up", "increase volume", "louder"), "volumeUp", "Increase volume")
    reg.register(("volume down", "decrease volume", "quieter"), "volumeDown", "Decrease volume")
    reg.register(("unmute", "unmute audio", "unmute sound"), "unmuteAudio", "Unmute audio")
    reg.register(("mute", "mute audio", "mute sound"), "muteAudio", "Mute audio")

    return reg
