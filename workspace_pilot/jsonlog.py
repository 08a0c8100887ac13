from __future__ import annotations

import json
import threading
import time
from collections import deque
from pathlib import Path
from typing import Any, Deque, Dict


def _now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime()) + f".{int((time.time() % 1) * 1000):03d}Z"


class JsonActionLogger:
    """Append-only JSON-lines log of run and action events.

    Events recorded with ``ok=False`` are also counted per event name over a
    sliding window, so a run summary can say how many actions have failed
    recently across runs sharing this logger.
    """

    def __init__(self, file_path: Path, failure_window_s: float = 300.0):
        self.file_path = file_path
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._failure_window_s = failure_window_s
        self._failures: Dict[str, Deque[float]] = {}

    def log(self, event: str, **data: Any) -> None:
        rec: Dict[str, Any] = {"ts": _now_iso(), "event": event, **data}
        line = json.dumps(rec, ensure_ascii=False, separators=(",", ":"), default=str)
        with self._lock:
            try:
                with open(self.file_path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
            except OSError:
                # Best-effort logging; do not raise
                pass
            if data.get("ok") is False:
                self._failures.setdefault(event, deque()).append(time.time())

    def recent_failures(self, event: str) -> int:
        """Failed `event` records inside the sliding window."""
        with self._lock:
            stamps = self._failures.get(event)
            if not stamps:
                return 0
            cutoff = time.time() - self._failure_window_s
            while stamps and stamps[0] < cutoff:
                stamps.popleft()
            return len(stamps)
