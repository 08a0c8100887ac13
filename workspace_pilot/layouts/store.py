from __future__ import annotations

import copy
import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple


logger = logging.getLogger("workspace_pilot.layouts.store")


def sanitize_name(name: str) -> str:
    """Filesystem-safe stem: every non-alphanumeric character becomes `_`."""
    return re.sub(r"[^a-z0-9]", "_", str(name), flags=re.IGNORECASE).lower()


def _atomic_write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


class JsonLayoutStore:
    """User-global layout store: one JSON object keyed by layout id.

    The file is created on first access, seeded with `defaults`.
    """

    def __init__(self, path: Path, defaults: Optional[Mapping[str, Any]] = None) -> None:
        self.path = Path(path)
        self.defaults: Dict[str, Any] = dict(defaults or {})

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            seeded = copy.deepcopy(self.defaults)
            try:
                _atomic_write_json(self.path, seeded)
                logger.info("created layout store", extra={"path": str(self.path), "seeded": sorted(seeded)})
            except OSError as exc:
                logger.warning("could not create layout store", extra={"path": str(self.path), "error": str(exc)})
            return seeded
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("unreadable layout store", extra={"path": str(self.path), "error": str(exc)})
            return {}
        if not isinstance(data, dict):
            logger.error("layout store is not an object", extra={"path": str(self.path)})
            return {}
        return data

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        value = self._load().get(key)
        return copy.deepcopy(value) if value is not None else None

    def get_all(self) -> Dict[str, Any]:
        return copy.deepcopy(self._load())

    def put(self, key: str, value: Mapping[str, Any]) -> None:
        data = self._load()
        data[key] = copy.deepcopy(dict(value))
        _atomic_write_json(self.path, data)


class LocalLayoutDir:
    """Project-local store: one `<name>.json` file per layout."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, stem: str) -> Path:
        return self.directory / f"{stem}.json"

    def files(self) -> List[Path]:
        if not self.directory.is_dir():
            return []
        return sorted(p for p in self.directory.iterdir() if p.is_file() and p.suffix.lower() == ".json")

    def read(self, path: Path) -> Optional[Dict[str, Any]]:
        """Parsed file content, or None (logged) when it is not a JSON object."""
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("skipping unreadable layout file", extra={"path": str(path), "error": str(exc)})
            return None
        if not isinstance(data, dict):
            logger.warning("skipping layout file without an object", extra={"path": str(path)})
            return None
        return data

    def entries(self) -> Iterator[Tuple[Path, Dict[str, Any]]]:
        for path in self.files():
            data = self.read(path)
            if data is not None:
                yield path, data

    def write(self, stem: str, layout: Mapping[str, Any]) -> Path:
        path = self.path_for(stem)
        _atomic_write_json(path, dict(layout))
        return path

    def remove(self, path: Path) -> None:
        path.unlink()
