from __future__ import annotations

from abc import ABC, abstractmethod
from typing import FrozenSet, Optional, Sequence, Tuple

from ..errors import DriverFailure


# Capabilities every backend exposes to the executor.
CAPABILITIES: Tuple[str, ...] = (
    "activate_app",
    "new_window",
    "move_mouse",
    "click",
    "press_keys",
    "type_text",
    "open_url",
)

# Optional capabilities: diagnostics and system commands.
EXTRA_CAPABILITIES: Tuple[str, ...] = ("pointer_position", "run_script", "capture_screen")


class Driver(ABC):
    """One automation tier.

    Contract:
    - is_available() is probed before every call; no handle is assumed valid
      between calls.
    - A driver lists what it implements in `capabilities`; the chain never
      calls anything outside that set.
    - Capability methods return True on success. They may return False or
      raise; the chain treats both as "try the next tier".
    """

    name: str = "driver"
    capabilities: FrozenSet[str] = frozenset()

    @abstractmethod
    def is_available(self) -> bool:
        raise NotImplementedError

    def supports(self, capability: str) -> bool:
        return capability in self.capabilities and self.is_available()

    def _unsupported(self, capability: str) -> DriverFailure:
        return DriverFailure(f"{self.name} does not implement {capability}")

    def activate_app(self, name: str) -> bool:
        raise self._unsupported("activate_app")

    def new_window(self, name: str) -> bool:
        raise self._unsupported("new_window")

    def move_mouse(self, x: int, y: int) -> bool:
        raise self._unsupported("move_mouse")

    def click(self, button: str = "left") -> bool:
        raise self._unsupported("click")

    def press_keys(self, sequence: Sequence[str], target_app: Optional[str] = None) -> bool:
        raise self._unsupported("press_keys")

    def type_text(self, text: str) -> bool:
        raise self._unsupported("type_text")

    def open_url(self, url: str, browser: Optional[str] = None, profile: Optional[str] = None) -> bool:
        raise self._unsupported("open_url")

    def pointer_position(self) -> Optional[Tuple[int, int]]:
        raise self._unsupported("pointer_position")

    def run_script(self, source: str) -> bool:
        raise self._unsupported("run_script")

    def capture_screen(self, path: str) -> bool:
        raise self._unsupported("capture_screen")


class AutomationBackend(ABC):
    """What the executor and command operations talk to.

    Every capability returns a bool and never raises. `pause` is the only
    way callers wait; implementations decide how long each named pause is.
    """

    @abstractmethod
    def activate_app(self, name: str) -> bool: ...

    @abstractmethod
    def new_window(self, name: str) -> bool: ...

    @abstractmethod
    def move_mouse(self, x: int, y: int) -> bool: ...

    @abstractmethod
    def click(self, button: str = "left") -> bool: ...

    @abstractmethod
    def press_keys(self, sequence: Sequence[str], target_app: Optional[str] = None) -> bool: ...

    @abstractmethod
    def type_text(self, text: str) -> bool: ...

    @abstractmethod
    def open_url(self, url: str, browser: Optional[str] = None, profile: Optional[str] = None) -> bool: ...

    def run_script(self, source: str) -> bool:
        return False

    def capture_screen(self, path: str) -> bool:
        return False

    def pause(self, kind: str) -> None:
        return None
