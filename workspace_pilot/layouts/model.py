from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class ActionType(str, Enum):
    OPEN_APP = "openApp"
    OPEN_URL = "openUrl"
    OPEN_MULTIPLE_URLS = "openMultipleUrls"
    KEYBOARD_SHORTCUT = "keyboardShortcut"
    MOUSE_MOVE = "mouseMove"
    MOUSE_CLICK = "mouseClick"
    TYPE_TEXT = "typeText"
    SEND_MESSAGE = "sendMessage"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class Action:
    """Canonical action. Only the fields belonging to `type` are populated."""

    type: ActionType
    description: str
    app: Optional[str] = None
    url: Optional[str] = None
    urls: Tuple[str, ...] = ()
    x: Optional[int] = None
    y: Optional[int] = None
    click: bool = False
    button: str = "left"
    keys: Tuple[str, ...] = ()
    contact: Optional[str] = None
    message: Optional[str] = None
    browser: Optional[str] = None
    profile: Optional[str] = None
    text: Optional[str] = None
    raw_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the stored (camelCase) record shape."""
        out: Dict[str, Any] = {"type": self.type.value, "description": self.description}
        if self.app is not None:
            out["app"] = self.app
        if self.url is not None:
            out["url"] = self.url
        if self.urls:
            out["urls"] = list(self.urls)
        if self.x is not None:
            out["x"] = self.x
        if self.y is not None:
            out["y"] = self.y
        if self.click:
            out["click"] = True
        if self.button != "left":
            out["button"] = self.button
        if self.keys:
            out["keySequence"] = list(self.keys)
        if self.contact is not None:
            out["contactName"] = self.contact
        if self.message is not None:
            out["message"] = self.message
        if self.browser is not None:
            out["browser"] = self.browser
        if self.profile is not None:
            out["browserProfile"] = self.profile
        if self.text is not None:
            out["text"] = self.text
        if self.raw_type is not None:
            out["rawType"] = self.raw_type
        return out


@dataclass(frozen=True)
class Layout:
    name: str
    description: str
    actions: Tuple[Action, ...] = field(default_factory=tuple)
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "actions": [a.to_dict() for a in self.actions],
        }
