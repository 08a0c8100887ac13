from __future__ import annotations

from typing import Any, List, Optional, Tuple

import pytest

from workspace_pilot.drivers import DriverChain, DryRunDriver, build_default_chain
from workspace_pilot.drivers.base import Driver
from workspace_pilot.errors import DriverFailure


class FakeDriver(Driver):
    def __init__(self, name: str, caps, *, available: bool = True, result: Any = True, raises: bool = False) -> None:
        self.name = name
        self.capabilities = frozenset(caps)
        self.available = available
        self.result = result
        self.raises = raises
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        self.probes = 0

    def is_available(self) -> bool:
        self.probes += 1
        return self.available

    def _do(self, cap: str, *args: Any) -> Any:
        self.calls.append((cap, args))
        if self.raises:
            raise DriverFailure(f"{self.name} broke")
        return self.result

    def activate_app(self, name: str) -> bool:
        return self._do("activate_app", name)

    def move_mouse(self, x: int, y: int) -> bool:
        return self._do("move_mouse", x, y)

    def press_keys(self, sequence, target_app: Optional[str] = None) -> bool:
        return self._do("press_keys", list(sequence), target_app)

    def open_url(self, url: str, browser: Optional[str] = None, profile: Optional[str] = None) -> bool:
        return self._do("open_url", url, browser, profile)

    def pointer_position(self) -> Optional[Tuple[int, int]]:
        self.calls.append(("pointer_position", ()))
        return (10, 20)


def _chain(*drivers: Driver, **kw) -> Tuple[DriverChain, List[float]]:
    slept: List[float] = []
    chain = DriverChain(list(drivers), sleep=slept.append, **kw)
    return chain, slept


def test_first_available_tier_wins() -> None:
    a = FakeDriver("a", {"activate_app"})
    b = FakeDriver("b", {"activate_app"})
    chain, _ = _chain(a, b)
    assert chain.activate_app("Notes") is True
    assert a.calls == [("activate_app", ("Notes",))]
    assert b.calls == []


def test_exception_and_false_fall_through() -> None:
    a = FakeDriver("a", {"activate_app"}, raises=True)
    b = FakeDriver("b", {"activate_app"}, result=False)
    c = FakeDriver("c", {"activate_app"})
    chain, _ = _chain(a, b, c)
    assert chain.activate_app("Notes") is True
    assert len(a.calls) == 1 and len(b.calls) == 1 and len(c.calls) == 1


def test_unavailable_and_incapable_tiers_are_skipped() -> None:
    a = FakeDriver("a", {"activate_app"}, available=False)
    b = FakeDriver("b", {"move_mouse"})
    c = FakeDriver("c", {"activate_app"})
    chain, _ = _chain(a, b, c)
    assert chain.activate_app("Notes") is True
    assert a.calls == [] and b.calls == []
    assert c.calls == [("activate_app", ("Notes",))]


def test_availability_probed_on_every_call() -> None:
    a = FakeDriver("a", {"activate_app"})
    chain, _ = _chain(a)
    chain.activate_app("A")
    chain.activate_app("B")
    assert a.probes == 2


def test_all_tiers_failing_returns_false() -> None:
    a = FakeDriver("a", {"activate_app"}, raises=True)
    b = FakeDriver("b", {"activate_app"}, result=False)
    chain, slept = _chain(a, b, settle_delays={"activate_app": 1.0})
    assert chain.activate_app("Notes") is False
    assert slept == []


def test_no_tier_supporting_capability_returns_false() -> None:
    chain, _ = _chain(FakeDriver("a", {"move_mouse"}))
    assert chain.type_text("hi") is False


def test_settle_delay_after_success() -> None:
    a = FakeDriver("a", {"activate_app", "open_url"})
    chain, slept = _chain(a, settle_delays={"activate_app": 1.0, "open_url": 2.0})
    chain.activate_app("Notes")
    chain.open_url("https://x", "Safari")
    assert slept == [1.0, 2.0]


def test_named_pause() -> None:
    chain, slept = _chain(FakeDriver("a", set()), pauses={"between_urls": 2.0})
    chain.pause("between_urls")
    chain.pause("unknown")
    assert slept == [2.0]


def test_move_mouse_reads_back_pointer() -> None:
    a = FakeDriver("a", {"move_mouse", "pointer_position"})
    chain, _ = _chain(a)
    assert chain.move_mouse(5, 6) is True
    assert ("pointer_position", ()) in a.calls


def test_press_keys_activates_target_first() -> None:
    a = FakeDriver("a", {"activate_app", "press_keys"})
    chain, _ = _chain(a)
    assert chain.press_keys(["command", "t"], "Google Chrome") is True
    assert a.calls == [
        ("activate_app", ("Google Chrome",)),
        ("press_keys", (["command", "t"], "Google Chrome")),
    ]


def test_press_keys_goes_on_when_activation_fails() -> None:
    a = FakeDriver("a", {"press_keys"})
    chain, _ = _chain(a)
    assert chain.press_keys(["return"], "Nowhere") is True


def test_dry_run_chain_records_calls() -> None:
    chain = build_default_chain(dry_run=True)
    assert chain.open_url("https://meet.google.com", "Google Chrome") is True
    recorder = chain.drivers[0]
    assert isinstance(recorder, DryRunDriver)
    assert recorder.calls == [("open_url", ("https://meet.google.com", "Google Chrome", None))]


def test_live_chain_tier_order() -> None:
    chain = build_default_chain(dry_run=False, sleep=lambda s: None)
    assert [d.name for d in chain.drivers] == ["pyautogui", "osascript", "spawn", "pynput"]
