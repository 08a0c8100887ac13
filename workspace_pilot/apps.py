from __future__ import annotations

from typing import Dict, Optional


APP_ALIASES: Dict[str, str] = {
    "chrome": "Google Chrome",
    "google chrome": "Google Chrome",
    "safari": "Safari",
    "firefox": "Firefox",
    "brave": "Brave Browser",
    "edge": "Microsoft Edge",
    "arc": "Arc",
    "vscode": "Visual Studio Code",
    "vs code": "Visual Studio Code",
    "code": "Visual Studio Code",
    "terminal": "Terminal",
    "iterm": "iTerm",
    "finder": "Finder",
    "slack": "Slack",
    "whatsapp": "WhatsApp",
    "spotify": "Spotify",
    "notes": "Notes",
    "calendar": "Calendar",
    "reminders": "Reminders",
}

BROWSERS = frozenset(
    {"Google Chrome", "Safari", "Firefox", "Brave Browser", "Microsoft Edge", "Arc"}
)


def canonical_app_name(name: str) -> str:
    """Map common short names to full application names; unknown names pass through."""

    cleaned = str(name or "").strip()
    return APP_ALIASES.get(cleaned.lower(), cleaned)


def is_browser(name: Optional[str]) -> bool:
    if not name:
        return False
    return canonical_app_name(name) in BROWSERS


def is_chromium(name: Optional[str]) -> bool:
    """Browsers that accept --profile-directory."""

    return bool(name) and canonical_app_name(name or "") in {"Google Chrome", "Brave Browser", "Microsoft Edge"}
