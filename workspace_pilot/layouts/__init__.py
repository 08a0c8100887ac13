from __future__ import annotations

from .defaults import DEFAULT_LAYOUTS
from .model import Action, ActionType, Layout
from .normalizer import infer_type, normalize_action, normalize_layout
from .resolver import LayoutResolver
from .store import JsonLayoutStore, LocalLayoutDir, sanitize_name


__all__ = [
    "DEFAULT_LAYOUTS",
    "Action",
    "ActionType",
    "JsonLayoutStore",
    "Layout",
    "LayoutResolver",
    "LocalLayoutDir",
    "infer_type",
    "normalize_action",
    "normalize_layout",
    "sanitize_name",
]
