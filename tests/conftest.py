from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Set, Tuple

import pytest

from workspace_pilot.drivers.base import AutomationBackend
from workspace_pilot.layouts import JsonLayoutStore, LayoutResolver, LocalLayoutDir


class FakeBackend(AutomationBackend):
    """Records capability calls; capabilities listed in `failing` return False."""

    def __init__(self, failing: Optional[Set[str]] = None, fail_when: Optional[Callable[[str, Tuple[Any, ...]], bool]] = None) -> None:
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        self.pauses: List[str] = []
        self.failing = set(failing or ())
        self.fail_when = fail_when

    def _do(self, capability: str, *args: Any) -> bool:
        self.calls.append((capability, args))
        if capability in self.failing:
            return False
        if self.fail_when is not None and self.fail_when(capability, args):
            return False
        return True

    def activate_app(self, name: str) -> bool:
        return self._do("activate_app", name)

    def new_window(self, name: str) -> bool:
        return self._do("new_window", name)

    def move_mouse(self, x: int, y: int) -> bool:
        return self._do("move_mouse", x, y)

    def click(self, button: str = "left") -> bool:
        return self._do("click", button)

    def press_keys(self, sequence: Sequence[str], target_app: Optional[str] = None) -> bool:
        return self._do("press_keys", list(sequence), target_app)

    def type_text(self, text: str) -> bool:
        return self._do("type_text", text)

    def open_url(self, url: str, browser: Optional[str] = None, profile: Optional[str] = None) -> bool:
        return self._do("open_url", url, browser, profile)

    def run_script(self, source: str) -> bool:
        return self._do("run_script", source)

    def capture_screen(self, path: str) -> bool:
        return self._do("capture_screen", path)

    def pause(self, kind: str) -> None:
        self.pauses.append(kind)

    def names(self) -> List[str]:
        return [c for c, _ in self.calls]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def stores(tmp_path: Path):
    user = JsonLayoutStore(tmp_path / "home" / "workspace-layouts.json")
    local = LocalLayoutDir(tmp_path / "layouts")
    return user, local


@pytest.fixture
def resolver(stores) -> LayoutResolver:
    user, local = stores
    return LayoutResolver(user, local)
