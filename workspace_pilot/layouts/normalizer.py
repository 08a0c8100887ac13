"""Validation and canonicalization of stored layout records.

Stored layouts come in two shapes: the current one with an explicit `type`
tag, and a legacy one where the kind of action is implied by which fields are
present (`openApp`, `url`, `x`/`y` + `click`, ...). Both end up as a
`Layout` of typed `Action`s; nothing downstream looks at raw fields again.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..apps import is_browser
from ..errors import InvalidLayout
from .model import Action, ActionType, Layout


_TYPE_TAGS: Dict[str, ActionType] = {t.value.lower(): t for t in ActionType}
_TYPE_TAGS.update(
    {
        "sendwhatsappmessage": ActionType.SEND_MESSAGE,
        "whatsappmessage": ActionType.SEND_MESSAGE,
    }
)

_BUTTONS = ("left", "right", "middle")


def _text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list, tuple, bool)):
        return None
    s = str(value).strip()
    return s or None


def _has(raw: Mapping[str, Any], *keys: str) -> bool:
    return any(raw.get(k) not in (None, "", [], ()) for k in keys)


def _key_list(raw: Mapping[str, Any]) -> Tuple[str, ...]:
    value = raw.get("keySequence", raw.get("keys"))
    if isinstance(value, str):
        value = value.split("+")
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(k).strip() for k in value if str(k).strip())


def _url_list(raw: Mapping[str, Any]) -> Tuple[str, ...]:
    value = raw.get("urls")
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(u for u in (_text(v) for v in value) if u)


def _profile(raw: Mapping[str, Any]) -> Optional[str]:
    for key in ("browserProfile", "chromeProfile", "profile"):
        value = _text(raw.get(key))
        if value:
            return value
    return None


def _coordinate(value: Any, axis: str, index: int) -> int:
    if isinstance(value, bool):
        raise InvalidLayout(f"Action {index + 1}: invalid {axis} coordinate {value!r}")
    try:
        if isinstance(value, (int, float)):
            return int(value)
        return int(float(str(value).strip()))
    except (TypeError, ValueError):
        raise InvalidLayout(f"Action {index + 1}: invalid {axis} coordinate {value!r}") from None


def infer_type(raw: Mapping[str, Any]) -> ActionType:
    """Guess the tag of a legacy record. First matching predicate wins."""

    if _has(raw, "openApp"):
        return ActionType.OPEN_APP
    if _has(raw, "url"):
        return ActionType.OPEN_URL
    has_coords = raw.get("x") is not None and raw.get("y") is not None
    if has_coords and bool(raw.get("click")):
        return ActionType.MOUSE_CLICK
    if has_coords:
        return ActionType.MOUSE_MOVE
    if _has(raw, "contactName", "contact") and _has(raw, "message"):
        return ActionType.SEND_MESSAGE
    if _has(raw, "keySequence", "keys"):
        return ActionType.KEYBOARD_SHORTCUT
    if _has(raw, "urls"):
        return ActionType.OPEN_MULTIPLE_URLS
    if _has(raw, "text"):
        return ActionType.TYPE_TEXT
    return ActionType.UNSUPPORTED


def normalize_action(raw: Mapping[str, Any], index: int) -> Action:
    if not isinstance(raw, Mapping):
        raise InvalidLayout(f"Action {index + 1} must be an object")

    description = _text(raw.get("description")) or f"Action {index + 1}"
    raw_type = raw.get("type")
    raw_tag: Optional[str] = None
    if raw_type in (None, ""):
        kind = infer_type(raw)
    else:
        raw_tag = str(raw_type).strip()
        kind = _TYPE_TAGS.get(raw_tag.lower(), ActionType.UNSUPPORTED)

    def fail(msg: str) -> InvalidLayout:
        return InvalidLayout(f"Action {index + 1} ({kind.value}): {msg}", details={"index": index})

    if kind is ActionType.OPEN_APP:
        app = _text(raw.get("app")) or _text(raw.get("openApp"))
        if not app:
            raise fail("missing app name")
        return Action(kind, description, app=app, profile=_profile(raw) if is_browser(app) else None)

    if kind in (ActionType.OPEN_URL, ActionType.OPEN_MULTIPLE_URLS):
        browser = _text(raw.get("browser"))
        profile = _profile(raw) if (browser is None or is_browser(browser)) else None
        if kind is ActionType.OPEN_URL:
            url = _text(raw.get("url"))
            if not url:
                raise fail("missing url")
            return Action(kind, description, url=url, browser=browser, profile=profile)
        urls = _url_list(raw)
        if not urls:
            raise fail("no urls")
        return Action(kind, description, urls=urls, browser=browser, profile=profile)

    if kind is ActionType.KEYBOARD_SHORTCUT:
        keys = _key_list(raw)
        if not keys:
            raise fail("empty key sequence")
        return Action(kind, description, keys=keys, app=_text(raw.get("app")))

    if kind in (ActionType.MOUSE_MOVE, ActionType.MOUSE_CLICK):
        if raw.get("x") is None or raw.get("y") is None:
            raise fail("missing coordinates")
        button = (_text(raw.get("button")) or "left").lower()
        return Action(
            kind,
            description,
            x=_coordinate(raw.get("x"), "x", index),
            y=_coordinate(raw.get("y"), "y", index),
            click=kind is ActionType.MOUSE_CLICK or bool(raw.get("click")),
            button=button if button in _BUTTONS else "left",
            app=_text(raw.get("app")),
            text=_text(raw.get("text")),
        )

    if kind is ActionType.SEND_MESSAGE:
        contact = _text(raw.get("contactName")) or _text(raw.get("contact"))
        message = _text(raw.get("message"))
        if not contact or not message:
            raise fail("contact and message are required")
        return Action(kind, description, contact=contact, message=message, app=_text(raw.get("app")))

    if kind is ActionType.TYPE_TEXT:
        text = raw.get("text")
        if not isinstance(text, str) or not text:
            raise fail("missing text")
        return Action(kind, description, text=text, app=_text(raw.get("app")))

    # Unsupported keeps whatever tag it arrived with, for the log line.
    if kind is ActionType.UNSUPPORTED and raw_tag and raw_tag.lower() == ActionType.UNSUPPORTED.value.lower():
        raw_tag = _text(raw.get("rawType"))
    return Action(ActionType.UNSUPPORTED, description, raw_type=raw_tag)


def normalize_layout(
    layout: Union[Layout, Mapping[str, Any], None],
    layout_id: Optional[str] = None,
) -> Layout:
    """Validate a layout record and return its canonical form.

    Raises InvalidLayout on schema violations. Normalizing an already
    canonical layout returns an equal layout.
    """

    if isinstance(layout, Layout):
        return normalize_layout(layout.to_dict(), layout_id if layout_id is not None else layout.id)
    if not isinstance(layout, Mapping):
        raise InvalidLayout("Layout is empty or null")

    name = _text(layout.get("name"))
    if not name:
        raise InvalidLayout("Layout must have a name")
    description = _text(layout.get("description")) or name

    raw_actions = layout.get("actions")
    if not isinstance(raw_actions, (list, tuple)) or not raw_actions:
        raise InvalidLayout("Layout must have at least one action")

    actions: List[Action] = [normalize_action(raw, i) for i, raw in enumerate(raw_actions)]
    return Layout(
        name=name,
        description=description,
        actions=tuple(actions),
        id=layout_id if layout_id is not None else _text(layout.get("id")),
    )


def normalize_actions(raw_actions: Sequence[Mapping[str, Any]]) -> Tuple[Action, ...]:
    return tuple(normalize_action(raw, i) for i, raw in enumerate(raw_actions))
