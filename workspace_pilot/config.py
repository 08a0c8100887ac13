from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional


CONFIG_FILENAME = "workspace.json"

DEFAULT_SETTLE_DELAYS: Dict[str, float] = {
    "activate_app": 1.0,
    "new_window": 1.0,
    "move_mouse": 0.3,
    "click": 0.5,
    "press_keys": 0.5,
    "type_text": 0.2,
    "open_url": 2.0,
}

DEFAULT_PAUSES: Dict[str, float] = {
    "between_urls": 2.0,
    "message_step": 1.0,
    "between_actions": 1.0,
}


def _default_home() -> Path:
    env = os.environ.get("WORKSPACE_PILOT_HOME")
    if env:
        return Path(env).expanduser()
    return Path.home() / ".workspace_pilot"


@dataclass
class PilotOptions:
    """Runtime settings, read from config/workspace.json when present."""

    user_store: Path = field(default_factory=lambda: _default_home() / "workspace-layouts.json")
    layouts_dir: Path = field(default_factory=lambda: Path("layouts"))
    default_browser: str = "Google Chrome"
    message_app: str = "WhatsApp"
    settle_delays: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_SETTLE_DELAYS))
    pauses: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_PAUSES))
    quartz_python: str = "/usr/bin/python3"
    action_log: Path = field(default_factory=lambda: Path("logs") / "actions.jsonl")
    lease_file: Path = field(default_factory=lambda: Path("config") / "run_lease.json")
    lease_stale_after_s: float = 600.0
    seed_defaults: bool = True

    @classmethod
    def load(cls, root: Optional[Path] = None) -> "PilotOptions":
        base = Path(root) if root is not None else Path.cwd()
        cfg_path = base / "config" / CONFIG_FILENAME
        data: Dict[str, Any] = {}
        try:
            if cfg_path.is_file():
                data = json.loads(cfg_path.read_text(encoding="utf-8")) or {}
        except Exception:
            data = {}
        if not isinstance(data, dict):
            data = {}

        opts = cls()
        if data.get("user_store"):
            opts.user_store = Path(str(data["user_store"])).expanduser()
        layouts_env = os.environ.get("WORKSPACE_PILOT_LAYOUTS")
        if layouts_env:
            opts.layouts_dir = Path(layouts_env).expanduser()
        elif data.get("layouts_dir"):
            opts.layouts_dir = Path(str(data["layouts_dir"])).expanduser()
        opts.default_browser = str(data.get("default_browser") or opts.default_browser)
        opts.message_app = str(data.get("message_app") or opts.message_app)
        opts.settle_delays.update(_float_map(data.get("settle_delays")))
        opts.pauses.update(_float_map(data.get("pauses")))
        opts.quartz_python = str(data.get("quartz_python") or opts.quartz_python)
        if data.get("action_log"):
            opts.action_log = Path(str(data["action_log"]))
        if data.get("lease_file"):
            opts.lease_file = Path(str(data["lease_file"]))
        try:
            opts.lease_stale_after_s = float(data.get("lease_stale_after_s", opts.lease_stale_after_s))
        except (TypeError, ValueError):
            pass
        opts.seed_defaults = bool(data.get("seed_defaults", opts.seed_defaults))

        # Relative paths are anchored at the project root, not the CWD.
        if not opts.user_store.is_absolute():
            opts.user_store = base / opts.user_store
        if not opts.layouts_dir.is_absolute():
            opts.layouts_dir = base / opts.layouts_dir
        if not opts.action_log.is_absolute():
            opts.action_log = base / opts.action_log
        if not opts.lease_file.is_absolute():
            opts.lease_file = base / opts.lease_file
        return opts


def _float_map(raw: Any) -> Dict[str, float]:
    out: Dict[str, float] = {}
    if not isinstance(raw, dict):
        return out
    for key, val in raw.items():
        try:
            out[str(key)] = max(0.0, float(val))
        except (TypeError, ValueError):
            continue
    return out
