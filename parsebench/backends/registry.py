"""
Backend Registry

Records candidate parser backends and resolves, once, which of them are
usable in this process. A candidate whose probe raises or reports failure is
left out of the resolved set; the run continues with fewer columns.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from .models import Backend, BackendStatus, Family

logger = logging.getLogger(__name__)

Probe = Callable[[], Any]
Factory = Callable[[], Callable[[str], Any]]


@dataclass(frozen=True)
class _Candidate:
    name: str
    family: Family
    probe: Probe
    factory: Factory
    label: str


class BackendRegistry:
    """
    Ordered collection of candidate backends.

    Probing happens lazily on the first ``resolve_all()`` call and is cached,
    so every probe and factory runs at most once per registry.
    """

    def __init__(self):
        self._candidates: List[_Candidate] = []
        self._statuses: Optional[Tuple[BackendStatus, ...]] = None

    def register(
        self,
        name: str,
        family: Family,
        probe: Probe,
        factory: Factory,
        label: Optional[str] = None,
    ) -> None:
        """Record a candidate backend. Registration order is column order."""
        if self._statuses is not None:
            raise RuntimeError("Cannot register backends after the registry has been resolved")
        if any(c.name == name for c in self._candidates):
            raise ValueError(f"Backend {name!r} is already registered")
        self._candidates.append(_Candidate(name, family, probe, factory, label or name))

    @property
    def names(self) -> List[str]:
        return [c.name for c in self._candidates]

    def _resolve_one(self, candidate: _Candidate) -> BackendStatus:
        try:
            if not candidate.probe():
                return BackendStatus.unavailable(candidate.name, candidate.family, "probe reported failure")
            parse = candidate.factory()
        except Exception as e:
            return BackendStatus.unavailable(candidate.name, candidate.family, f"{type(e).__name__}: {e}")

        return BackendStatus.ok(Backend(
            name=candidate.name,
            family=candidate.family,
            parse=parse,
            label=candidate.label,
        ))

    def statuses(self) -> Tuple[BackendStatus, ...]:
        """Probe every candidate (first call only) and return the tagged results."""
        if self._statuses is None:
            results = []
            for candidate in self._candidates:
                status = self._resolve_one(candidate)
                if status.available:
                    logger.debug(f"Backend {candidate.name} available ({candidate.family.value})")
                else:
                    logger.warning(f"Backend {candidate.name} unavailable: {status.reason}")
                results.append(status)
            self._statuses = tuple(results)
        return self._statuses

    def resolve_all(self) -> Tuple[Backend, ...]:
        """Available backends in registration order."""
        return tuple(s.backend for s in self.statuses() if s.backend is not None)
