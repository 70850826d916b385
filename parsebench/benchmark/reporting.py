import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Sequence

from ..backends.models import ACCELERATED_GROUP, INTERPRETED_GROUP, Backend
from .models import ComparisonResult, RunSummary

FILE_WIDTH = 25
OPERATION_WIDTH = 15
NUMBER_WIDTH = 8
TIME_WIDTH = 13
DIFF_WIDTH = 32

FAILED_CELL = "FAILED"
HEADLINE_MODES = ("group", "best")

# widest finite percentage we size for; wider values are clipped in pipe style
_PERCENT = "-99999.9%"


def _fit(text: str, width: int) -> str:
    """Left-align ``text`` in exactly ``width`` characters."""
    return text[:width].ljust(width)


@dataclass(frozen=True)
class TableLayout:
    """
    Column set for one invocation, fixed once the registry is resolved.

    ``headline`` selects the last column: ``group`` gives one finding per row
    (accelerated vs interpreted, or fastest vs reference), ``best`` names the
    fastest backend and lists every other backend's signed delta.
    """
    backends: Sequence[str]
    labels: Dict[str, str]
    grouped: bool
    reference: str
    headline: str = "group"

    def __post_init__(self):
        if self.headline not in HEADLINE_MODES:
            raise ValueError(f"Unknown headline mode {self.headline!r} (expected one of {', '.join(HEADLINE_MODES)})")

    @classmethod
    def from_backends(cls, backends: Sequence[Backend], headline: str = "group") -> "TableLayout":
        if not backends:
            raise ValueError("Cannot lay out a report without any backends")
        groups = {b.group for b in backends}
        return cls(
            backends=tuple(b.name for b in backends),
            labels={b.name: b.label for b in backends},
            grouped={INTERPRETED_GROUP, ACCELERATED_GROUP} <= groups,
            reference=backends[0].name,
            headline=headline,
        )

    @property
    def difference_title(self) -> str:
        if self.headline == "best":
            return "Difference vs fastest"
        if self.grouped:
            return "Difference vs best interpreted"
        return f"Difference vs {self.labels[self.reference]}"

    @property
    def difference_width(self) -> int:
        """Width of the last column in ``pipe`` style."""
        labels = [self.labels[name] for name in self.backends]
        longest = max(len(label) for label in labels)
        if self.headline == "best":
            others = sum(len(label) + len(f" {_PERCENT}, ") for label in labels) - longest
            needed = len("Best: ()") + longest + others
        else:
            needed = longest + max(len(f"{_PERCENT} slower ()"), len(" fastest (0.000 ms)"))
        return max(DIFF_WIDTH, len(self.difference_title), needed)


def headline_text(result: ComparisonResult, labels: Dict[str, str]) -> str:
    """Free-text finding for the last column, e.g. ``66.7% faster (orjson)``."""
    if result.fastest is None:
        return "all backends failed"
    if result.degenerate:
        return "no measurable difference"

    headline = result.headline
    name = labels.get(headline.backend, headline.backend)
    if headline.delta is None:
        return f"{name} fastest (0.000 ms)"
    if headline.backend == headline.reference:
        return f"{name} fastest"

    direction = "faster" if headline.delta >= 0 else "slower"
    return f"{abs(headline.delta):.1f}% {direction} ({name})"


def best_text(result: ComparisonResult, labels: Dict[str, str], order: Sequence[str]) -> str:
    """
    Per-backend finding, e.g. ``Best: orjson (json -80.0%, ujson -12.5%)``.

    Deltas are ``percent_deltas`` in column order: negative means slower than
    the fastest backend.
    """
    if result.fastest is None:
        return "all backends failed"
    if result.degenerate:
        return "no measurable difference"

    measurements = {m.backend: m for m in result.measurements}
    parts = []
    for name in order:
        if name == result.fastest.backend:
            continue
        label = labels.get(name, name)
        measurement = measurements.get(name)
        delta = result.percent_deltas.get(name)
        if measurement is None or measurement.failed:
            parts.append(f"{label} {FAILED_CELL}")
        elif delta is None:
            parts.append(f"{label} n/a")
        else:
            parts.append(f"{label} {delta:+.1f}%")

    best = f"Best: {labels.get(result.fastest.backend, result.fastest.backend)}"
    return f"{best} ({', '.join(parts)})" if parts else best


class TableRenderer:
    """
    Renders the fixed-width comparison table.

    ``plain`` mirrors the space-separated console table; ``pipe`` wraps every
    cell in ``|`` delimiters.
    """

    def __init__(self, layout: TableLayout, style: str = "plain"):
        if style not in ("plain", "pipe"):
            raise ValueError(f"Unknown table style {style!r}")
        self.layout = layout
        self.style = style

    def _cell(self, result: ComparisonResult, backend: str) -> str:
        measurement = next((m for m in result.measurements if m.backend == backend), None)
        if measurement is None or measurement.failed:
            value = FAILED_CELL
        else:
            value = f"{measurement.duration_ms:.3f}"
        if self.style == "pipe":
            return value.rjust(TIME_WIDTH)
        return value.rjust(NUMBER_WIDTH).ljust(TIME_WIDTH)

    def summary(self, result: ComparisonResult) -> str:
        """Text of the last column for one row."""
        labels = self.layout.labels
        if self.layout.headline == "best":
            return best_text(result, labels, self.layout.backends)

        if self.layout.grouped and result.fastest is not None and not result.degenerate and not result.grouped:
            present = {m.group for m in result.measurements if not m.failed}
            missing = INTERPRETED_GROUP if INTERPRETED_GROUP not in present else ACCELERATED_GROUP
            return f"no {missing} result"
        return headline_text(result, labels)

    def render_header(self) -> str:
        labels = [self.layout.labels[name] for name in self.layout.backends]
        title = self.layout.difference_title
        if self.style == "pipe":
            cells = [_fit("File", FILE_WIDTH), _fit("Operation", OPERATION_WIDTH)]
            cells += [_fit(label, TIME_WIDTH) for label in labels]
            cells.append(_fit(title, self.layout.difference_width))
            return "|" + "|".join(cells) + "|"

        header = f"{_fit('File', FILE_WIDTH)} {_fit('Operation', OPERATION_WIDTH)} "
        header += "".join(f"{_fit(label, TIME_WIDTH)} " for label in labels)
        return header + title

    def render_separator(self) -> str:
        if self.style == "pipe":
            widths = [FILE_WIDTH, OPERATION_WIDTH] + [TIME_WIDTH] * len(self.layout.backends)
            widths.append(self.layout.difference_width)
            return "|" + "|".join("-" * w for w in widths) + "|"
        return "-" * len(self.render_header())

    def render_row(self, document: str, mode: str, result: ComparisonResult) -> str:
        cells = [self._cell(result, name) for name in self.layout.backends]
        text = self.summary(result)
        if self.style == "pipe":
            parts = [_fit(document, FILE_WIDTH), _fit(mode, OPERATION_WIDTH)] + cells
            parts.append(_fit(text, self.layout.difference_width))
            return "|" + "|".join(parts) + "|"

        row = f"{_fit(document, FILE_WIDTH)} {_fit(mode, OPERATION_WIDTH)} "
        row += "".join(f"{cell} " for cell in cells)
        return row + text


class ReportGenerator:
    """Writes the machine-readable export of one run."""

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)

    def save_json(self, summary: RunSummary) -> Path:
        """Save the run's rows to JSON."""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.output_path, "w") as f:
            json.dump(summary.to_dict(), f, indent=2)
        return self.output_path

