from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

from .base import Driver
from .keys import split_keys


_PYNPUT_NAMES = {
    "command": "cmd",
    "option": "alt",
    "control": "ctrl",
    "shift": "shift",
    "return": "enter",
    "escape": "esc",
}


def _get_pynput() -> Tuple[Optional[Any], Optional[Any]]:
    """Import pynput lazily and return (KeyboardControllerClass, KeyModule)."""
    try:
        from pynput.keyboard import Controller as KeyboardController, Key as KeyModule  # type: ignore
        return KeyboardController, KeyModule
    except Exception:
        return None, None


class ScriptedKeysDriver(Driver):
    """Last resort: hold modifiers, tap each key, release in reverse order."""

    name = "pynput"
    capabilities = frozenset({"press_keys", "type_text"})

    def is_available(self) -> bool:
        kb_cls, _key_mod = _get_pynput()
        return kb_cls is not None

    def _controller(self) -> Tuple[Any, Any]:
        kb_cls, key_mod = _get_pynput()
        if kb_cls is None or key_mod is None:
            raise RuntimeError("No keyboard backend available (install pynput)")
        return kb_cls(), key_mod

    @staticmethod
    def _resolve(key: str, key_mod: Any) -> Any:
        name = _PYNPUT_NAMES.get(key, key)
        special = getattr(key_mod, name, None)
        if special is not None:
            return special
        if len(key) == 1:
            return key
        raise ValueError(f"unknown key: {key}")

    def press_keys(self, sequence: Sequence[str], target_app: Optional[str] = None) -> bool:
        kb, key_mod = self._controller()
        modifiers, regular = split_keys(sequence)
        if not modifiers and not regular:
            return False
        held = [self._resolve(m, key_mod) for m in modifiers]
        taps = [self._resolve(k, key_mod) for k in regular]
        for mod in held:
            kb.press(mod)
        try:
            for key in taps:
                kb.press(key)
                kb.release(key)
        finally:
            for mod in reversed(held):
                kb.release(mod)
        return True

    def type_text(self, text: str) -> bool:
        kb, _key_mod = self._controller()
        kb.type(text)
        return True
