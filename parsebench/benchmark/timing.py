"""
Timing Engine

Brackets a call (or a loop of calls) with two monotonic clock reads and
returns the elapsed time in fractional milliseconds. There is no warm-up and
no per-iteration bracketing; exceptions from ``fn`` propagate immediately.
"""

import time
from typing import Any, Callable

Clock = Callable[[], int]

NS_PER_MS = 1_000_000


def time_once(fn: Callable[[], Any], clock: Clock = time.perf_counter_ns) -> float:
    """Call ``fn`` exactly once and return the elapsed milliseconds."""
    start = clock()
    fn()
    end = clock()
    return (end - start) / NS_PER_MS


def time_iterated(fn: Callable[[], Any], count: int, clock: Clock = time.perf_counter_ns) -> float:
    """Call ``fn`` ``count`` times inside one bracket and return the total milliseconds."""
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise ValueError(f"count must be a positive integer, got {count!r}")

    start = clock()
    for _ in range(count):
        fn()
    end = clock()
    return (end - start) / NS_PER_MS
