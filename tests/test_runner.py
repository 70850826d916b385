import io
from unittest.mock import MagicMock

import pytest

from parsebench.backends.models import Family
from parsebench.benchmark.models import Mode, SampleDocument
from parsebench.benchmark.runner import BenchmarkRunner, build_modes, run_all

MODES = [Mode(), Mode(iterations=1000)]


def _runner(backends, clock, style="plain"):
    stream = io.StringIO()
    return BenchmarkRunner(backends, stream=stream, style=style, clock=clock), stream


class TestMeasure:
    def test_single_shot(self, stub_backend, fake_clock, documents):
        runner, _ = _runner([stub_backend("json", cost_ms=2.0)], fake_clock)
        measurement = runner.measure(runner.backends[0], documents[0], Mode())
        assert measurement.duration_ms == pytest.approx(2.0)
        assert not measurement.failed

    def test_iterated(self, stub_backend, fake_clock, documents):
        runner, _ = _runner([stub_backend("json", cost_ms=0.01)], fake_clock)
        measurement = runner.measure(runner.backends[0], documents[0], Mode(iterations=1000))
        assert measurement.duration_ms == pytest.approx(10.0)

    def test_failure_becomes_sentinel(self, stub_backend, fake_clock, documents):
        backend = stub_backend("orjson", Family.ACCELERATED_NATIVE, error=ValueError("unexpected character"))
        runner, _ = _runner([backend], fake_clock)

        measurement = runner.measure(backend, documents[0], Mode())

        assert measurement.failed
        assert measurement.duration_ms == 0.0
        assert "unexpected character" in measurement.error

    def test_document_text_is_passed_to_backend(self, fake_clock, documents):
        from parsebench.backends.models import Backend

        parse = MagicMock(return_value={})
        backend = Backend(name="mock", family=Family.INTERPRETED, parse=parse)
        runner, _ = _runner([backend], fake_clock)

        runner.measure(backend, documents[1], Mode(iterations=3))

        assert parse.call_count == 3
        parse.assert_called_with("[1, 2, 3]")


class TestRunAll:
    def test_streams_one_row_per_document_and_mode(self, stub_backend, fake_clock, documents):
        backends = [
            stub_backend("json", cost_ms=5.0),
            stub_backend("orjson", Family.ACCELERATED_NATIVE, cost_ms=1.0),
        ]
        runner, stream = _runner(backends, fake_clock)

        summary = runner.run_all(documents, MODES)

        lines = stream.getvalue().splitlines()
        header, separator = lines[0], lines[1]
        assert separator == "-" * len(header)
        rows = [line for line in lines[2:] if line != separator]
        assert len(rows) == 4
        assert rows[0].startswith("sample.json")
        assert "Single Parse" in rows[0]
        assert "1000 Iterations" in rows[1]
        assert all(row.endswith("80.0% faster (orjson)") for row in rows)
        # separator after each document's rows
        assert lines.count(separator) == 1 + len(documents)
        assert len(summary.rows) == 4
        assert summary.backends == ["json", "orjson"]

    def test_rows_are_flushed_as_they_complete(self, stub_backend, fake_clock, documents):
        stream = MagicMock()
        runner = BenchmarkRunner([stub_backend("json")], stream=stream, clock=fake_clock)

        runner.run_all(documents, [Mode()])

        # header + separator + 2 rows + 2 separators, each flushed
        assert stream.write.call_count == 6
        assert stream.flush.call_count == 6

    def test_failed_backend_does_not_abort_row(self, stub_backend, fake_clock, documents):
        backends = [
            stub_backend("json", cost_ms=4.0),
            stub_backend("ujson", Family.ACCELERATED_NATIVE, error=RuntimeError("crash")),
            stub_backend("wasm-serde", Family.ACCELERATED_PORTABLE, cost_ms=1.0),
        ]
        runner, stream = _runner(backends, fake_clock)

        summary = runner.run_all(documents[:1], [Mode()])

        row = stream.getvalue().splitlines()[2]
        assert "FAILED" in row
        assert row.endswith("75.0% faster (wasm-serde)")
        assert summary.failed_measurements == 1

    def test_idempotent_tables(self, stub_backend, fake_clock, documents):
        def table():
            backends = [
                stub_backend("A", cost_ms=5.0),
                stub_backend("B", cost_ms=3.0),
                stub_backend("C", Family.ACCELERATED_NATIVE, cost_ms=3.0),
            ]
            runner, stream = _runner(backends, fake_clock)
            runner.run_all(documents, MODES)
            return stream.getvalue()

        assert table() == table()

    def test_baseline_only_columns(self, stub_backend, fake_clock, documents):
        runner, stream = _runner([stub_backend("json", label="json")], fake_clock)
        runner.run_all(documents, MODES)

        output = stream.getvalue()
        header = output.splitlines()[0]
        assert header.split() == ["File", "Operation", "json", "Difference", "vs", "json"]
        for name in ("orjson", "ujson", "simdjson", "WASM"):
            assert name not in output

    def test_pipe_style(self, stub_backend, fake_clock, documents):
        runner, stream = _runner([stub_backend("json")], fake_clock, style="pipe")
        runner.run_all(documents[:1], [Mode()])
        lines = stream.getvalue().splitlines()
        assert all(line.startswith("|") and line.endswith("|") for line in lines)

    def test_best_headline(self, stub_backend, fake_clock, documents):
        backends = [
            stub_backend("json", cost_ms=4.0),
            stub_backend("orjson", Family.ACCELERATED_NATIVE, cost_ms=1.0),
        ]
        stream = io.StringIO()
        runner = BenchmarkRunner(backends, stream=stream, clock=fake_clock, headline="best")

        runner.run_all(documents[:1], [Mode()])

        lines = stream.getvalue().splitlines()
        assert lines[0].endswith("Difference vs fastest")
        assert lines[2].endswith("Best: orjson (json -300.0%)")

    def test_requires_backends(self):
        with pytest.raises(ValueError):
            BenchmarkRunner([])

    def test_module_level_run_all(self, stub_backend, documents):
        stream = io.StringIO()
        summary = run_all(documents, [Mode()], [stub_backend("json")], stream=stream)
        assert len(summary.rows) == 2
        assert "sample-big-array.json" in stream.getvalue()


class TestRunFiles:
    def test_missing_document_is_skipped(self, stub_backend, fake_clock, sample_files):
        runner, stream = _runner([stub_backend("json")], fake_clock)
        paths = [sample_files / "sample.json", sample_files / "missing.json", sample_files / "sample-big-array.json"]

        summary = runner.run_files(paths, [Mode()])

        assert summary.skipped_documents == ["missing.json"]
        assert [r.document for r in summary.rows] == ["sample.json", "sample-big-array.json"]
        assert "missing.json" not in stream.getvalue()

    def test_no_documents_is_fatal(self, stub_backend, fake_clock, tmp_path):
        runner, _ = _runner([stub_backend("json")], fake_clock)
        with pytest.raises(ValueError, match="No sample documents"):
            runner.run_files([tmp_path / "nope.json"], [Mode()])


class TestBuildModes:
    def test_build_modes(self):
        modes = build_modes([None, 1000, 5])
        assert [m.label for m in modes] == ["Single Parse", "1000 Iterations", "5 Iterations"]
        assert modes[0].single_shot

    def test_invalid_iterations(self):
        with pytest.raises(ValueError):
            build_modes([0])

    def test_document_size(self):
        assert SampleDocument(name="x.json", text="☃").size == 3
