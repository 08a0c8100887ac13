from __future__ import annotations

from typing import Callable, Optional

from ..config import PilotOptions
from .base import CAPABILITIES, AutomationBackend, Driver
from .chain import DriverChain
from .osascript import AppleScriptDriver
from .pyautogui_driver import PyAutoGuiDriver
from .pynput_keys import ScriptedKeysDriver
from .recording import DryRunDriver
from .spawn import ProcessSpawnDriver


def build_default_chain(
    options: Optional[PilotOptions] = None,
    *,
    dry_run: bool = True,
    sleep: Optional[Callable[[float], None]] = None,
) -> DriverChain:
    """Default tiers in priority order; dry-run replaces them with a recorder."""

    opts = options or PilotOptions()
    if dry_run:
        # Nothing happens on screen, so there is nothing to wait for.
        drivers = [DryRunDriver()]
        kwargs = {"settle_delays": {}, "pauses": {}}
    else:
        drivers = [
            PyAutoGuiDriver(),
            AppleScriptDriver(),
            ProcessSpawnDriver(quartz_python=opts.quartz_python),
            ScriptedKeysDriver(),
        ]
        kwargs = {"settle_delays": opts.settle_delays, "pauses": opts.pauses}
    if sleep is not None:
        kwargs["sleep"] = sleep
    return DriverChain(drivers, **kwargs)


__all__ = [
    "CAPABILITIES",
    "AppleScriptDriver",
    "AutomationBackend",
    "Driver",
    "DriverChain",
    "DryRunDriver",
    "ProcessSpawnDriver",
    "PyAutoGuiDriver",
    "ScriptedKeysDriver",
    "build_default_chain",
]
