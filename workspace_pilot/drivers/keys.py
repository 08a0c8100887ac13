"""Key-name normalization and AppleScript keystroke synthesis."""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple


MODIFIERS: Tuple[str, ...] = ("command", "option", "control", "shift")

_ALIASES: Dict[str, str] = {
    "cmd": "command",
    "command": "command",
    "meta": "command",
    "opt": "option",
    "option": "option",
    "alt": "option",
    "ctrl": "control",
    "control": "control",
    "shift": "shift",
    "space": "space",
    "spacebar": "space",
    "enter": "return",
    "esc": "escape",
}

# macOS virtual key codes for keys that have no literal character.
KEY_CODES: Dict[str, int] = {
    "return": 36,
    "tab": 48,
    "space": 49,
    "delete": 51,
    "backspace": 51,
    "escape": 53,
    "left": 123,
    "right": 124,
    "down": 125,
    "up": 126,
    "f1": 122,
    "f2": 120,
    "f3": 99,
    "f4": 118,
    "f5": 96,
    "f6": 97,
    "f7": 98,
    "f8": 100,
    "f9": 101,
    "f10": 109,
    "f11": 103,
    "f12": 111,
}

# Substituted when a combination has modifiers only (e.g. command+tab style).
MODIFIER_ONLY_KEY_CODE = 48


def normalize_key(key: str) -> str:
    k = str(key).strip().lower()
    return _ALIASES.get(k, k)


def normalize_keys(sequence: Iterable[str]) -> List[str]:
    return [normalize_key(k) for k in sequence if str(k).strip()]


def split_keys(sequence: Iterable[str]) -> Tuple[List[str], List[str]]:
    """Partition a normalized sequence into (modifiers, regular keys)."""

    modifiers: List[str] = []
    regular: List[str] = []
    for key in normalize_keys(sequence):
        if key in MODIFIERS:
            if key not in modifiers:
                modifiers.append(key)
        else:
            regular.append(key)
    return modifiers, regular


def escape_applescript(text: str) -> str:
    return str(text).replace("\\", "\\\\").replace('"', '\\"')


def keystroke_statement(sequence: Iterable[str]) -> str:
    """Build one System Events statement for a key combination.

    Regular keys are concatenated into a single literal keystroke with every
    modifier applied. A lone named key (return, tab, arrows, ...) is sent by
    key code. Modifiers without any regular key fall back to a key code.
    """

    modifiers, regular = split_keys(sequence)
    using = ""
    if modifiers:
        using = " using {" + ", ".join(f"{m} down" for m in modifiers) + "}"

    if len(regular) == 1 and regular[0] in KEY_CODES:
        return f"key code {KEY_CODES[regular[0]]}{using}"
    if regular:
        return f'keystroke "{escape_applescript("".join(regular))}"{using}'
    if modifiers:
        return f"key code {MODIFIER_ONLY_KEY_CODE}{using}"
    raise ValueError("empty key sequence")
