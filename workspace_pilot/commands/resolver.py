from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from .registry import CommandDescriptor
from .similarity import similarity


logger = logging.getLogger("workspace_pilot.commands")

FUZZY_THRESHOLD = 0.70

_POINTER_RE = re.compile(
    r"^(click|double[- ]?click|right[- ]?click) at \(?\s*(\d+)\s*[, ]\s*(\d+)\s*\)?$",
    re.IGNORECASE,
)
_POINTER_OPS = {"click": "click", "doubleclick": "doubleClick", "rightclick": "rightClick"}


def match_command(text: str, descriptors: Iterable[CommandDescriptor]) -> Optional[CommandDescriptor]:
    """Map a phrase to a descriptor: exact, then substring, then fuzzy."""

    normalized = str(text or "").strip().lower()
    if not normalized:
        return None
    table = list(descriptors)

    for descriptor in table:
        if normalized in descriptor.triggers:
            logger.debug("exact command match", extra={"phrase": normalized})
            return descriptor

    for descriptor in table:
        if any(trigger in normalized for trigger in descriptor.triggers):
            logger.debug("substring command match", extra={"phrase": normalized})
            return descriptor

    best: Optional[CommandDescriptor] = None
    best_score = 0.0
    for descriptor in table:
        for trigger in descriptor.triggers:
            score = similarity(normalized, trigger)
            # strict '>' keeps the earlier candidate on ties
            if score > best_score:
                best_score = score
                best = descriptor
    if best is not None and best_score > FUZZY_THRESHOLD:
        logger.debug("fuzzy command match", extra={"phrase": normalized, "score": round(best_score, 3)})
        return best
    return None


def parse_pointer_command(text: str) -> Optional[CommandDescriptor]:
    """Recognise 'click at (x, y)' style phrases as ad-hoc pointer commands."""

    m = _POINTER_RE.match(str(text or "").strip())
    if not m:
        return None
    verb = re.sub(r"[- ]", "", m.group(1).lower())
    x, y = int(m.group(2)), int(m.group(3))
    op = _POINTER_OPS[verb]
    return CommandDescriptor(
        triggers=(m.group(0).lower(),),
        action=op,
        description=f"{op} at ({x}, {y})",
        params={"x": x, "y": y},
    )


_WORKSPACE_RE = re.compile(r"^(?:start|run|launch|open) (?:workspace|layout) (.+)$", re.IGNORECASE)


def parse_workspace_command(text: str) -> Optional[CommandDescriptor]:
    """Recognise 'start workspace <id>' style phrases."""

    m = _WORKSPACE_RE.match(str(text or "").strip())
    if not m:
        return None
    layout_id = m.group(1).strip().strip("\"'")
    if not layout_id:
        return None
    return CommandDescriptor(
        triggers=(m.group(0).lower(),),
        action="runWorkspace",
        description=f"Start workspace {layout_id}",
        params={"layout": layout_id},
    )
