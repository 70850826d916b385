"""
Comparator

Ranks the measurements of one (document, mode) row.

Sign convention: every delta is reported from the point of view of the
backend it names. A positive delta means that backend is faster than the
reference it is compared against, a negative delta means slower.

* ``percent_deltas[name] = (fastest - this) / fastest * 100``: zero for the
  fastest backend, negative for everything slower than it.
* With both tiers present the headline names the accelerated winner and uses
  ``(interpreted_best - accelerated_best) / interpreted_best * 100``.
* With one tier the headline names the fastest backend and uses
  ``(reference - fastest) / fastest * 100``, the reference being the
  first-registered backend.

Ties are broken by sequence order: the earliest measurement wins.

A row is ``degenerate`` only when every successful measurement is zero. A
zero-duration fastest against nonzero others has no finite delta; its
headline names that backend with ``delta=None``.
"""

from typing import Dict, Iterable, List, Optional

from ..backends.models import ACCELERATED_GROUP, INTERPRETED_GROUP
from .models import ComparisonResult, Headline, Measurement


def _fastest(measurements: Iterable[Measurement]) -> Optional[Measurement]:
    best = None
    for m in measurements:
        if best is None or m.duration_ms < best.duration_ms:
            best = m
    return best


def percent_delta(fastest_ms: float, this_ms: float) -> Optional[float]:
    """``(fastest - this) / fastest * 100``; ``None`` when undefined."""
    if fastest_ms == 0:
        return 0.0 if this_ms == 0 else None
    return (fastest_ms - this_ms) / fastest_ms * 100


def relative_delta(base_ms: float, other_ms: float) -> Optional[float]:
    """``(base - other) / base * 100``; positive when ``other`` is faster."""
    if base_ms == 0:
        return 0.0 if other_ms == 0 else None
    return (base_ms - other_ms) / base_ms * 100


def group_winners(measurements: Iterable[Measurement]) -> Dict[str, Measurement]:
    """Fastest successful measurement per comparison tier, in tier order."""
    winners: Dict[str, Measurement] = {}
    for group in (INTERPRETED_GROUP, ACCELERATED_GROUP):
        best = _fastest(m for m in measurements if m.group == group)
        if best is not None:
            winners[group] = best
    return winners


def rank(measurements: Iterable[Measurement], reference: Optional[str] = None) -> ComparisonResult:
    """
    Rank one row of measurements.

    Args:
        measurements: Measurements in backend registration order. Failed
            sentinels are kept in the result but never ranked.
        reference: Backend the single-tier headline compares against;
            defaults to the first successful measurement.
    """
    measurements: List[Measurement] = list(measurements)
    successful = [m for m in measurements if not m.failed]

    fastest = _fastest(successful)
    if fastest is None:
        return ComparisonResult(
            measurements=measurements,
            fastest=None,
            percent_deltas={m.backend: None for m in measurements},
            headline=Headline(backend=None, delta=None),
            degenerate=True,
        )

    deltas: Dict[str, Optional[float]] = {
        m.backend: None if m.failed else percent_delta(fastest.duration_ms, m.duration_ms)
        for m in measurements
    }

    winners = group_winners(successful)
    if len(winners) < 2:
        winners = {}

    if all(m.duration_ms == 0 for m in successful):
        return ComparisonResult(
            measurements=measurements,
            fastest=fastest,
            percent_deltas=deltas,
            headline=Headline(backend=None, delta=None),
            group_winners=winners,
            degenerate=True,
        )

    group_delta = None
    if winners:
        interpreted = winners[INTERPRETED_GROUP]
        accelerated = winners[ACCELERATED_GROUP]
        group_delta = relative_delta(interpreted.duration_ms, accelerated.duration_ms)
        if group_delta is None:
            # interpreted winner measured zero time against a nonzero accelerated one
            headline = Headline(backend=fastest.backend, delta=None, reference=interpreted.backend)
        else:
            headline = Headline(backend=accelerated.backend, delta=group_delta, reference=interpreted.backend)
    else:
        ref = next((m for m in successful if m.backend == reference), successful[0])
        if ref is fastest:
            headline = Headline(backend=fastest.backend, delta=0.0, reference=ref.backend)
        else:
            behind = percent_delta(fastest.duration_ms, ref.duration_ms)
            headline = Headline(
                backend=fastest.backend,
                delta=None if behind is None else -behind,
                reference=ref.backend,
            )

    return ComparisonResult(
        measurements=measurements,
        fastest=fastest,
        percent_deltas=deltas,
        headline=headline,
        group_winners=winners,
        group_delta=group_delta,
    )
