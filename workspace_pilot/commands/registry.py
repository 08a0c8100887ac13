from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Mapping, Tuple, Union


Routine = Callable[[Any], Any]


@dataclass(frozen=True)
class CommandDescriptor:
    """A free-text command: trigger phrases plus what to do.

    `action` is either the name of a registered operation (see
    `operations.OPERATIONS`) or an inline routine that receives the
    automation backend.
    """

    triggers: Tuple[str, ...]
    action: Union[str, Routine]
    description: str = ""
    params: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def is_routine(self) -> bool:
        return callable(self.action)


@dataclass
class CommandRegistry:
    """Ordered command table.

    Registration order matters: exact and substring matching return the
    first descriptor that qualifies.
    """

    _descriptors: List[CommandDescriptor]

    def __init__(self) -> None:
        self._descriptors = []

    def register(
        self,
        triggers: Union[str, Tuple[str, ...], List[str]],
        action: Union[str, Routine],
        description: str = "",
        params: Mapping[str, Any] | None = None,
    ) -> CommandDescriptor:
        if isinstance(triggers, str):
            triggers = (triggers,)
        cleaned = tuple(t.strip().lower() for t in triggers if t and t.strip())
        if not cleaned:
            raise ValueError("triggers must be non-empty")
        if not action:
            raise ValueError("action must be an operation name or a callable")
        descriptor = CommandDescriptor(
            triggers=cleaned,
            action=action,
            description=description,
            params=dict(params or {}),
        )
        self._descriptors.append(descriptor)
        return descriptor

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)
