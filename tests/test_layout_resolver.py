from __future__ import annotations

import json
from pathlib import Path

import pytest

from workspace_pilot.errors import InvalidLayout, NotFound
from workspace_pilot.layouts import DEFAULT_LAYOUTS, JsonLayoutStore, LayoutResolver, LocalLayoutDir, sanitize_name


def _layout(name: str, app: str = "Notes") -> dict:
    return {"name": name, "description": name, "actions": [{"openApp": app}]}


def _write(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")


def test_store_created_on_first_access_with_defaults(tmp_path: Path) -> None:
    path = tmp_path / "home" / "layouts.json"
    store = JsonLayoutStore(path, DEFAULT_LAYOUTS)
    assert store.get("meeting")["name"] == "Meeting Mode"
    assert path.exists()
    assert set(json.loads(path.read_text(encoding="utf-8"))) == {"dev", "research", "meeting"}


def test_store_put_and_get_roundtrip(tmp_path: Path) -> None:
    store = JsonLayoutStore(tmp_path / "s.json")
    store.put("focus", _layout("Focus"))
    assert JsonLayoutStore(tmp_path / "s.json").get("focus") == _layout("Focus")
    assert store.get("missing") is None


def test_store_returns_copies(tmp_path: Path) -> None:
    store = JsonLayoutStore(tmp_path / "s.json", {"a": _layout("A")})
    got = store.get("a")
    got["name"] = "changed"
    assert store.get("a")["name"] == "A"


def test_corrupt_store_reads_empty(tmp_path: Path) -> None:
    path = tmp_path / "s.json"
    _write(path, "{not json")
    assert JsonLayoutStore(path).get_all() == {}


def test_user_store_beats_local(resolver: LayoutResolver, stores) -> None:
    user, local = stores
    user.put("focus", _layout("User Focus"))
    _write(local.path_for("focus"), _layout("Local Focus"))
    data, source = resolver.resolve("focus")
    assert data["name"] == "User Focus"
    assert source == "user"


def test_user_store_case_insensitive(resolver: LayoutResolver, stores) -> None:
    user, _ = stores
    user.put("Focus", _layout("Focus"))
    data, source = resolver.resolve("FOCUS")
    assert data["name"] == "Focus"
    assert source == "user:case-insensitive"


def test_local_exact_filename(resolver: LayoutResolver, stores) -> None:
    _, local = stores
    _write(local.path_for("deep_work"), _layout("Deep"))
    data, source = resolver.resolve("deep_work")
    assert data["name"] == "Deep"
    assert source == "local:deep_work.json"


def test_local_case_insensitive_filename(resolver: LayoutResolver, stores) -> None:
    _, local = stores
    _write(local.path_for("writing"), _layout("Write"))
    data, _source = resolver.resolve("Writing")
    assert data["name"] == "Write"


def test_local_embedded_name_exact_before_case_insensitive(resolver: LayoutResolver, stores) -> None:
    _, local = stores
    _write(local.path_for("a_first"), _layout("focus mode", app="A"))
    _write(local.path_for("b_second"), _layout("Focus Mode", app="B"))
    data, source = resolver.resolve("Focus Mode")
    assert data["actions"][0]["openApp"] == "B"
    assert source == "local-name:b_second.json"


def test_invalid_local_files_are_skipped(resolver: LayoutResolver, stores) -> None:
    _, local = stores
    _write(local.path_for("broken"), "{{{")
    _write(local.path_for("listy"), [1, 2])
    _write(local.path_for("good"), _layout("Target"))
    data, _ = resolver.resolve("Target")
    assert data["name"] == "Target"


def test_not_found_names_the_id(resolver: LayoutResolver) -> None:
    with pytest.raises(NotFound) as info:
        resolver.resolve("ghost")
    assert "ghost" in str(info.value)


def test_backup_written_with_sanitized_name(resolver: LayoutResolver, stores) -> None:
    user, local = stores
    user.put("My Layout!", _layout("Mine"))
    resolver.resolve("My Layout!")
    backup = local.path_for("my_layout_")
    assert json.loads(backup.read_text(encoding="utf-8"))["name"] == "Mine"


def test_backup_does_not_overwrite(resolver: LayoutResolver, stores) -> None:
    user, local = stores
    _write(local.path_for("focus"), _layout("Old"))
    user.put("focus", _layout("New"))
    resolver.resolve("focus")
    assert json.loads(local.path_for("focus").read_text(encoding="utf-8"))["name"] == "Old"


def test_backup_failure_is_not_fatal(tmp_path: Path) -> None:
    blocker = tmp_path / "layouts"
    blocker.write_text("a file, not a dir", encoding="utf-8")
    store = JsonLayoutStore(tmp_path / "s.json", {"focus": _layout("Focus")})
    resolver = LayoutResolver(store, LocalLayoutDir(blocker))
    data, _ = resolver.resolve("focus")
    assert data["name"] == "Focus"


def test_local_helpers(resolver: LayoutResolver, stores) -> None:
    _, local = stores
    stem = resolver.save_local(_layout("Deep Work"))
    assert stem == "deep_work"
    assert [e["name"] for e in resolver.list_local()] == ["Deep Work"]
    assert resolver.list_local()[0]["actionCount"] == 1
    assert resolver.delete_local("Nope") is False
    assert resolver.delete_local("Deep Work") is True
    assert resolver.list_local() == []


def test_save_local_requires_name(resolver: LayoutResolver) -> None:
    with pytest.raises(InvalidLayout):
        resolver.save_local({"actions": []})


def test_sanitize_name() -> None:
    assert sanitize_name("Meeting Mode") == "meeting_mode"
    assert sanitize_name("a/b.c") == "a_b_c"
