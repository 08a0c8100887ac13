from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..errors import InvalidLayout, NotFound
from .store import JsonLayoutStore, LocalLayoutDir, sanitize_name


logger = logging.getLogger("workspace_pilot.layouts")


class LayoutResolver:
    """Finds a layout by id across the user store and the local layouts dir.

    Lookup order, first hit wins:

    1. exact id in the user store
    2. case-insensitive id in the user store
    3. `<id>.json` in the local dir
    4. case-insensitive filename in the local dir
    5. embedded `name` of any local file, exact then case-insensitive

    A successful lookup leaves a sanitized-name copy in the local dir.
    """

    def __init__(self, user_store: JsonLayoutStore, local: LocalLayoutDir) -> None:
        self.user_store = user_store
        self.local = local

    def resolve(self, layout_id: str) -> Tuple[Dict[str, Any], str]:
        if not layout_id or not str(layout_id).strip():
            raise NotFound("Layout id is empty")
        layout_id = str(layout_id).strip()

        found = self._lookup(layout_id)
        if found is None:
            raise NotFound(f"Layout '{layout_id}' not found", details={"layout_id": layout_id})
        data, source = found
        logger.info("layout resolved", extra={"layout_id": layout_id, "source": source})
        self._backup(layout_id, data)
        return data, source

    def _lookup(self, layout_id: str) -> Optional[Tuple[Dict[str, Any], str]]:
        wanted = layout_id.lower()

        layouts = self.user_store.get_all()
        if isinstance(layouts.get(layout_id), dict):
            return layouts[layout_id], "user"
        for key, value in layouts.items():
            if str(key).lower() == wanted and isinstance(value, dict):
                return value, "user:case-insensitive"

        exact = self.local.path_for(layout_id)
        if exact.is_file():
            data = self.local.read(exact)
            if data is not None:
                return data, f"local:{exact.name}"

        for path in self.local.files():
            if path.stem.lower() == wanted:
                data = self.local.read(path)
                if data is not None:
                    return data, f"local:{path.name}"

        entries = list(self.local.entries())
        for path, data in entries:
            if data.get("name") == layout_id:
                return data, f"local-name:{path.name}"
        for path, data in entries:
            if str(data.get("name") or "").lower() == wanted:
                return data, f"local-name:{path.name}"
        return None

    def _backup(self, layout_id: str, data: Mapping[str, Any]) -> None:
        stem = sanitize_name(layout_id)
        if not stem:
            return
        try:
            if self.local.path_for(stem).exists():
                return
            path = self.local.write(stem, data)
            logger.debug("layout backed up", extra={"layout_id": layout_id, "path": str(path)})
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("layout backup failed", extra={"layout_id": layout_id, "error": str(exc)})

    # --- Local store helpers -------------------------------------------
    def list_local(self) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for path, data in self.local.entries():
            actions = data.get("actions")
            out.append(
                {
                    "id": path.stem,
                    "name": data.get("name") or path.stem,
                    "description": data.get("description") or "",
                    "actionCount": len(actions) if isinstance(actions, list) else 0,
                    "source": "local",
                }
            )
        return out

    def save_local(self, layout: Mapping[str, Any]) -> str:
        name = str(layout.get("name") or "").strip()
        if not name:
            raise InvalidLayout("Layout must have a name")
        stem = sanitize_name(name)
        self.local.write(stem, layout)
        logger.info("layout saved locally", extra={"layout_name": name, "file": f"{stem}.json"})
        return stem

    def delete_local(self, name: str) -> bool:
        """Remove the local file whose embedded name matches; False if none does."""
        for path, data in self.local.entries():
            if data.get("name") == name:
                self.local.remove(path)
                logger.info("layout deleted", extra={"layout_name": name, "file": path.name})
                return True
        return False
