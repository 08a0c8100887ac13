from __future__ import annotations

from typing import Any, Dict


# Seeded into the user store the first time it is opened.
DEFAULT_LAYOUTS: Dict[str, Dict[str, Any]] = {
    "dev": {
        "name": "Development Mode",
        "description": "Setup for development with code editor and terminal",
        "actions": [
            {"description": "Open Visual Studio Code", "openApp": "Visual Studio Code"},
            {"description": "Focus the editor", "x": 400, "y": 300, "click": True},
            {"description": "Open Terminal", "openApp": "Terminal"},
            {"description": "Focus the terminal", "x": 400, "y": 600, "click": True},
        ],
    },
    "research": {
        "name": "Research Mode",
        "description": "Browser setup for research",
        "actions": [
            {"description": "Open Google Chrome", "openApp": "Google Chrome"},
            {
                "description": "Open GitHub",
                "type": "openUrl",
                "url": "https://github.com",
            },
        ],
    },
    "meeting": {
        "name": "Meeting Mode",
        "description": "Setup for video meetings",
        "actions": [
            {"description": "Open Google Chrome", "openApp": "Google Chrome"},
            {"description": "Open Google Meet", "url": "https://meet.google.com"},
            {"description": "Open Notes app for meeting notes", "openApp": "Notes"},
        ],
    },
}
