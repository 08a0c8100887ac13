from __future__ import annotations

import json
import time
from pathlib import Path

import pytest

from workspace_pilot import cli
from workspace_pilot.config import DEFAULT_SETTLE_DELAYS, PilotOptions
from workspace_pilot.run_lease import acquire_lease, is_lease_stale, read_lease, release_lease


def _write_config(root: Path, data: dict) -> None:
    p = root / "config" / "workspace.json"
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(data, indent=2), encoding="utf-8")


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    h = tmp_path / "home"
    monkeypatch.setenv("WORKSPACE_PILOT_HOME", str(h))
    monkeypatch.delenv("WORKSPACE_PILOT_LAYOUTS", raising=False)
    return h


def test_options_defaults_without_config(tmp_path: Path, home: Path) -> None:
    opts = PilotOptions.load(tmp_path)
    assert opts.user_store == home / "workspace-layouts.json"
    assert opts.layouts_dir == tmp_path / "layouts"
    assert opts.settle_delays == DEFAULT_SETTLE_DELAYS
    assert opts.default_browser == "Google Chrome"


def test_options_from_config(tmp_path: Path, home: Path) -> None:
    _write_config(
        tmp_path,
        {
            "default_browser": "Safari",
            "settle_delays": {"open_url": 0.5, "click": "bad"},
            "pauses": {"between_urls": -3},
            "layouts_dir": "my_layouts",
        },
    )
    opts = PilotOptions.load(tmp_path)
    assert opts.default_browser == "Safari"
    assert opts.settle_delays["open_url"] == 0.5
    assert opts.settle_delays["click"] == DEFAULT_SETTLE_DELAYS["click"]
    assert opts.pauses["between_urls"] == 0.0
    assert opts.layouts_dir == tmp_path / "my_layouts"


def test_relative_user_store_is_anchored_at_root(tmp_path: Path, home: Path) -> None:
    _write_config(tmp_path, {"user_store": "data/layouts.json"})
    assert PilotOptions.load(tmp_path).user_store == tmp_path / "data" / "layouts.json"


def test_options_corrupt_config(tmp_path: Path, home: Path) -> None:
    p = tmp_path / "config" / "workspace.json"
    p.parent.mkdir(parents=True)
    p.write_text("{oops", encoding="utf-8")
    assert PilotOptions.load(tmp_path).default_browser == "Google Chrome"


def test_layouts_env_override(tmp_path: Path, home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WORKSPACE_PILOT_LAYOUTS", str(tmp_path / "elsewhere"))
    assert PilotOptions.load(tmp_path).layouts_dir == tmp_path / "elsewhere"


def test_lease_blocks_other_owner_until_stale(tmp_path: Path) -> None:
    path = tmp_path / "config" / "run_lease.json"
    assert acquire_lease(path, "a", 600.0, "dev") is True
    assert acquire_lease(path, "b", 600.0) is False
    assert acquire_lease(path, "a", 600.0) is True

    path.write_text(json.dumps({"owner": "a", "ts": time.time() - 1000}), encoding="utf-8")
    assert is_lease_stale(read_lease(path), 600.0) is True
    assert acquire_lease(path, "b", 600.0) is True


def test_lease_release(tmp_path: Path) -> None:
    path = tmp_path / "lease.json"
    acquire_lease(path, "a", 600.0)
    release_lease(path, "b")
    assert read_lease(path)["owner"] == "a"
    release_lease(path, "a")
    assert not path.exists()
    assert acquire_lease(path, "b", 600.0) is True


def test_lease_second_claim_loses_to_published_record(tmp_path: Path) -> None:
    path = tmp_path / "lease.json"
    assert acquire_lease(path, "first", 600.0, "dev") is True
    assert acquire_lease(path, "second", 600.0, "dev") is False
    assert read_lease(path)["owner"] == "first"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["lease.json"]


def test_lease_takes_over_released_marker(tmp_path: Path) -> None:
    path = tmp_path / "lease.json"
    path.write_text(json.dumps({"owner": "", "ts": time.time()}), encoding="utf-8")
    assert acquire_lease(path, "b", 600.0) is True
    assert read_lease(path)["owner"] == "b"


def test_cli_live_reports_unwritable_lease(tmp_path: Path, home: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
    def _denied(*args, **kwargs):
        raise PermissionError("read-only")

    monkeypatch.setattr(cli, "acquire_lease", _denied)
    assert cli.main(["--root", str(tmp_path), "--live", "run", "meeting"]) == 2
    assert "run lease" in capsys.readouterr().out


def test_cli_run_dry(tmp_path: Path, home: Path, capsys: pytest.CaptureFixture) -> None:
    code = cli.main(["--root", str(tmp_path), "run", "meeting"])
    assert code == 0
    out = capsys.readouterr().out
    assert "Meeting Mode" in out


def test_cli_run_unknown_layout(tmp_path: Path, home: Path) -> None:
    assert cli.main(["--root", str(tmp_path), "run", "ghost"]) == 2


def test_cli_command_not_understood(tmp_path: Path, home: Path, capsys: pytest.CaptureFixture) -> None:
    assert cli.main(["--root", str(tmp_path), "command", "qwertyuiop", "zxcv"]) == 2
    assert "understand" in capsys.readouterr().out


def test_cli_save_and_list(tmp_path: Path, home: Path, capsys: pytest.CaptureFixture) -> None:
    src = tmp_path / "focus.json"
    src.write_text(json.dumps({"name": "Focus", "actions": [{"openApp": "Notes"}]}), encoding="utf-8")
    assert cli.main(["--root", str(tmp_path), "save", "focus", str(src)]) == 0
    assert cli.main(["--root", str(tmp_path), "list"]) == 0
    assert "Focus" in capsys.readouterr().out


def test_cli_test_action_inline(tmp_path: Path, home: Path) -> None:
    assert cli.main(["--root", str(tmp_path), "test-action", '{"x": 1, "y": 2, "click": true}']) == 0
