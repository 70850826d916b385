from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional


class Family(Enum):
    """Execution strategy of a parser backend."""
    INTERPRETED = "interpreted"
    ACCELERATED_NATIVE = "accelerated-native"
    ACCELERATED_PORTABLE = "accelerated-portable"

    @property
    def group(self) -> str:
        """Comparison tier: ``interpreted`` or ``accelerated``."""
        return "interpreted" if self is Family.INTERPRETED else "accelerated"


INTERPRETED_GROUP = "interpreted"
ACCELERATED_GROUP = "accelerated"


@dataclass(frozen=True)
class Backend:
    """An available parser backend. Immutable once resolved."""
    name: str
    family: Family
    parse: Callable[[str], Any] = field(repr=False, compare=False)
    label: str = ""

    def __post_init__(self):
        if not self.label:
            object.__setattr__(self, "label", self.name)

    @property
    def group(self) -> str:
        return self.family.group


@dataclass(frozen=True)
class BackendStatus:
    """Outcome of probing one registered candidate."""
    name: str
    family: Family
    backend: Optional[Backend] = None
    reason: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.backend is not None

    @classmethod
    def ok(cls, backend: Backend) -> "BackendStatus":
        return cls(name=backend.name, family=backend.family, backend=backend)

    @classmethod
    def unavailable(cls, name: str, family: Family, reason: str) -> "BackendStatus":
        return cls(name=name, family=family, reason=reason)
