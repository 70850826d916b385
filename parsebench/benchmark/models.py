from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any

from ..backends.models import Family


@dataclass(frozen=True)
class Mode:
    """How a backend call is timed: once, or as a loop of ``iterations`` calls."""
    iterations: Optional[int] = None

    def __post_init__(self):
        if self.iterations is not None and (isinstance(self.iterations, bool) or self.iterations < 1):
            raise ValueError(f"Iteration count must be a positive integer, got {self.iterations!r}")

    @property
    def single_shot(self) -> bool:
        return self.iterations is None

    @property
    def label(self) -> str:
        return "Single Parse" if self.iterations is None else f"{self.iterations} Iterations"


@dataclass(frozen=True)
class SampleDocument:
    """A sample payload, loaded once; ``name`` is the report row label."""
    name: str
    text: str = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.text.encode("utf-8"))


@dataclass(frozen=True)
class Measurement:
    """One timed execution for a (document, mode, backend) combination."""
    backend: str
    family: Family
    mode: Mode
    duration_ms: float = 0.0
    failed: bool = False
    error: Optional[str] = None

    @property
    def group(self) -> str:
        return self.family.group

    @classmethod
    def failure(cls, backend: str, family: Family, mode: Mode, error: str) -> "Measurement":
        """Sentinel for a backend that raised during this measurement."""
        return cls(backend=backend, family=family, mode=mode, duration_ms=0.0, failed=True, error=error)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "backend": self.backend,
            "family": self.family.value,
            "iterations": self.mode.iterations,
            "duration_ms": self.duration_ms,
            "failed": self.failed,
            "error": self.error,
        }


@dataclass(frozen=True)
class Headline:
    """
    The row's summary finding.

    ``delta`` describes ``backend`` relative to the reference: positive means
    ``backend`` is faster. ``None`` marks a comparison with a zero divisor:
    ``backend`` measured no time while the reference did.
    """
    backend: Optional[str]
    delta: Optional[float]
    reference: Optional[str] = None


@dataclass(frozen=True)
class ComparisonResult:
    """Ranking of one (document, mode) row."""
    measurements: List[Measurement]
    fastest: Optional[Measurement]
    percent_deltas: Dict[str, Optional[float]]
    headline: Headline
    group_winners: Dict[str, Measurement] = field(default_factory=dict)
    group_delta: Optional[float] = None
    degenerate: bool = False

    @property
    def grouped(self) -> bool:
        """True when both the interpreted and accelerated tiers took part."""
        return len(self.group_winners) > 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "measurements": [m.to_dict() for m in self.measurements],
            "fastest": self.fastest.backend if self.fastest else None,
            "percent_deltas": dict(self.percent_deltas),
            "group_winners": {g: m.backend for g, m in self.group_winners.items()},
            "group_delta": self.group_delta,
            "headline": asdict(self.headline),
            "degenerate": self.degenerate,
        }


@dataclass
class RowRecord:
    """A rendered row kept for the optional JSON export."""
    document: str
    mode: str
    result: ComparisonResult

    def to_dict(self) -> Dict[str, Any]:
        return {"document": self.document, "mode": self.mode, **self.result.to_dict()}


@dataclass
class RunSummary:
    """Everything emitted during one harness invocation."""
    timestamp: str
    backends: List[str] = field(default_factory=list)
    rows: List[RowRecord] = field(default_factory=list)
    skipped_documents: List[str] = field(default_factory=list)
    duration: float = 0.0

    @property
    def failed_measurements(self) -> int:
        return sum(1 for r in self.rows for m in r.result.measurements if m.failed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "duration": self.duration,
            "backends": self.backends,
            "skipped_documents": self.skipped_documents,
            "rows": [r.to_dict() for r in self.rows],
        }
