import sys
import time
import logging
import traceback
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, TextIO

from ..backends.models import Backend
from .comparator import rank
from .documents import load_documents
from .models import Measurement, Mode, RowRecord, RunSummary, SampleDocument
from .reporting import TableLayout, TableRenderer
from .timing import Clock, time_iterated, time_once


class BenchmarkRunner:
    """
    Times every resolved backend against every (document, mode) pair.

    Execution is strictly sequential: one backend call (or loop) is measured
    completely before the next starts. Each row is written to ``stream`` as
    soon as it is ranked, so partial progress survives a later failure.
    """

    def __init__(
        self,
        backends: Sequence[Backend],
        stream: Optional[TextIO] = None,
        style: str = "plain",
        clock: Clock = time.perf_counter_ns,
        verbose: bool = False,
        headline: str = "group",
    ):
        if not backends:
            raise ValueError("At least one backend is required")

        self.backends = tuple(backends)
        self.layout = TableLayout.from_backends(self.backends, headline=headline)
        self.renderer = TableRenderer(self.layout, style=style)
        self.stream = stream if stream is not None else sys.stdout
        self.clock = clock
        self.verbose = verbose
        self.logger = logging.getLogger("Benchmark")

    def _emit(self, line: str) -> None:
        self.stream.write(line + "\n")
        self.stream.flush()

    def measure(self, backend: Backend, document: SampleDocument, mode: Mode) -> Measurement:
        """Time one backend; a raised error becomes a failed sentinel."""
        text = document.text
        parse = backend.parse

        def call():
            return parse(text)

        try:
            if mode.single_shot:
                duration = time_once(call, clock=self.clock)
            else:
                duration = time_iterated(call, mode.iterations, clock=self.clock)
        except Exception as e:
            self.logger.error(f"{backend.name} failed on {document.name} ({mode.label}): {e}")
            if self.verbose:
                traceback.print_exc()
            return Measurement.failure(backend.name, backend.family, mode, f"{type(e).__name__}: {e}")

        return Measurement(backend=backend.name, family=backend.family, mode=mode, duration_ms=duration)

    def run_all(self, documents: Iterable[SampleDocument], modes: Sequence[Mode]) -> RunSummary:
        """Run every document × mode × backend and stream the table."""
        summary = RunSummary(
            timestamp=datetime.now().isoformat(),
            backends=[b.name for b in self.backends],
        )
        start = time.time()

        header = self.renderer.render_header()
        separator = self.renderer.render_separator()
        self._emit(header)
        self._emit(separator)

        for document in documents:
            for mode in modes:
                measurements = [self.measure(backend, document, mode) for backend in self.backends]
                result = rank(measurements, reference=self.layout.reference)
                self._emit(self.renderer.render_row(document.name, mode.label, result))
                summary.rows.append(RowRecord(document=document.name, mode=mode.label, result=result))
            self._emit(separator)

        summary.duration = time.time() - start
        return summary

    def run_files(self, paths: Iterable[Path], modes: Sequence[Mode]) -> RunSummary:
        """Load the sample files, skipping unreadable ones, then run them."""
        documents, skipped = load_documents(paths)
        if not documents:
            raise ValueError("No sample documents could be loaded")

        summary = self.run_all(documents, modes)
        summary.skipped_documents = skipped
        return summary


def run_all(
    documents: Iterable[SampleDocument],
    modes: Sequence[Mode],
    backends: Sequence[Backend],
    stream: Optional[TextIO] = None,
    style: str = "plain",
    headline: str = "group",
) -> RunSummary:
    """Convenience wrapper around :class:`BenchmarkRunner`."""
    return BenchmarkRunner(backends, stream=stream, style=style, headline=headline).run_all(documents, modes)


def build_modes(iteration_counts: Iterable[Optional[int]]) -> List[Mode]:
    """``None`` entries become single-shot modes, integers iterated ones."""
    return [Mode(iterations=count) for count in iteration_counts]
