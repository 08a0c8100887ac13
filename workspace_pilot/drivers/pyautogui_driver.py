from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

from .base import Driver
from .keys import split_keys


_PYAUTOGUI_KEYS = {
    "command": "command",
    "option": "option",
    "control": "ctrl",
    "shift": "shift",
    "return": "enter",
}


def _get_pyautogui() -> Optional[Any]:
    """Import pyautogui lazily; it fails at import time without a display."""
    try:
        import pyautogui  # type: ignore
        pyautogui.FAILSAFE = True
        return pyautogui
    except Exception:
        return None


class PyAutoGuiDriver(Driver):
    """Structured automation API tier (pointer, keyboard, screenshots)."""

    name = "pyautogui"
    capabilities = frozenset(
        {"move_mouse", "click", "press_keys", "type_text", "pointer_position", "capture_screen"}
    )

    def __init__(self, mouse_speed: float = 0.0, type_interval: float = 0.01) -> None:
        self.mouse_speed = mouse_speed
        self.type_interval = type_interval

    def is_available(self) -> bool:
        return _get_pyautogui() is not None

    def _api(self) -> Any:
        api = _get_pyautogui()
        if api is None:
            raise RuntimeError("pyautogui is not available")
        return api

    def move_mouse(self, x: int, y: int) -> bool:
        self._api().moveTo(int(x), int(y), duration=self.mouse_speed)
        return True

    def click(self, button: str = "left") -> bool:
        self._api().click(button=button)
        return True

    def press_keys(self, sequence: Sequence[str], target_app: Optional[str] = None) -> bool:
        modifiers, regular = split_keys(sequence)
        keys = [_PYAUTOGUI_KEYS.get(k, k) for k in modifiers + regular]
        if not keys:
            return False
        api = self._api()
        # Unknown key names are skipped silently by pyautogui; let a later tier try.
        if not all(api.isValidKey(k) for k in keys):
            return False
        if len(keys) == 1:
            api.press(keys[0])
        else:
            api.hotkey(*keys)
        return True

    def type_text(self, text: str) -> bool:
        # write() drops characters outside its ASCII key map
        if not text.isascii():
            return False
        self._api().write(text, interval=self.type_interval)
        return True

    def pointer_position(self) -> Optional[Tuple[int, int]]:
        pos = self._api().position()
        return int(pos[0]), int(pos[1])

    def capture_screen(self, path: str) -> bool:
        self._api().screenshot(path)
        return True
