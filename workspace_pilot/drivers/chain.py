from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .base import AutomationBackend, Driver


logger = logging.getLogger("workspace_pilot.drivers")

# Calls that change OS state and need time to take effect.
STATE_CHANGING = frozenset({"activate_app", "new_window", "move_mouse", "click", "press_keys", "type_text", "open_url"})


class DriverChain(AutomationBackend):
    """Ordered driver tiers behind a single capability interface.

    Each capability call walks the tiers in priority order and stops at the
    first one that reports success. Exceptions never leave the chain.
    """

    def __init__(
        self,
        drivers: Sequence[Driver],
        *,
        settle_delays: Optional[Mapping[str, float]] = None,
        pauses: Optional[Mapping[str, float]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.drivers: List[Driver] = list(drivers)
        self.settle_delays: Dict[str, float] = dict(settle_delays or {})
        self.pauses: Dict[str, float] = dict(pauses or {})
        self._sleep = sleep

    def attempt(self, capability: str, *args: Any, **kwargs: Any) -> bool:
        tried: List[str] = []
        for driver in self.drivers:
            try:
                if not driver.supports(capability):
                    continue
            except Exception:
                logger.exception("driver probe failed", extra={"driver": driver.name, "capability": capability})
                continue
            tried.append(driver.name)
            try:
                ok = getattr(driver, capability)(*args, **kwargs)
            except Exception as exc:
                logger.warning(
                    "driver tier failed",
                    extra={"driver": driver.name, "capability": capability, "error": str(exc)},
                )
                continue
            if ok is False:
                logger.warning("driver tier reported failure", extra={"driver": driver.name, "capability": capability})
                continue
            logger.debug("capability ok", extra={"driver": driver.name, "capability": capability})
            if capability in STATE_CHANGING:
                self.settle(capability)
            return True
        logger.error("all driver tiers failed", extra={"capability": capability, "tried": tried})
        return False

    def query(self, capability: str, *args: Any, **kwargs: Any) -> Any:
        """Like attempt() but returns the first tier's value; None when no tier answers."""
        for driver in self.drivers:
            try:
                if not driver.supports(capability):
                    continue
                value = getattr(driver, capability)(*args, **kwargs)
            except Exception as exc:
                logger.debug("query tier failed", extra={"driver": driver.name, "capability": capability, "error": str(exc)})
                continue
            if value is not None:
                return value
        return None

    def settle(self, capability: str) -> None:
        delay = float(self.settle_delays.get(capability, 0.0) or 0.0)
        if delay > 0:
            self._sleep(delay)

    def pause(self, kind: str) -> None:
        delay = float(self.pauses.get(kind, 0.0) or 0.0)
        if delay > 0:
            self._sleep(delay)

    # --- Capabilities ---------------------------------------------------
    def activate_app(self, name: str) -> bool:
        return self.attempt("activate_app", name)

    def new_window(self, name: str) -> bool:
        return self.attempt("new_window", name)

    def move_mouse(self, x: int, y: int) -> bool:
        ok = self.attempt("move_mouse", int(x), int(y))
        if ok:
            # Diagnostic only; never decides success.
            position = self.pointer_position()
            if position is not None:
                logger.debug("pointer read-back", extra={"target": (int(x), int(y)), "position": position})
        return ok

    def click(self, button: str = "left") -> bool:
        return self.attempt("click", button)

    def press_keys(self, sequence: Sequence[str], target_app: Optional[str] = None) -> bool:
        if target_app and not self.activate_app(target_app):
            logger.warning("could not activate target before keys", extra={"target_app": target_app})
        return self.attempt("press_keys", list(sequence), target_app)

    def type_text(self, text: str) -> bool:
        return self.attempt("type_text", text)

    def open_url(self, url: str, browser: Optional[str] = None, profile: Optional[str] = None) -> bool:
        return self.attempt("open_url", url, browser, profile)

    def pointer_position(self) -> Optional[Tuple[int, int]]:
        return self.query("pointer_position")

    def run_script(self, source: str) -> bool:
        return self.attempt("run_script", source)

    def capture_screen(self, path: str) -> bool:
        return self.attempt("capture_screen", path)
