#!/usr/bin/env python3
"""
JSON Parser Benchmark

Compares parse throughput of every available backend (stdlib json,
native-accelerated libraries and the WebAssembly build) across a set of
sample documents. Each document is timed once (single parse) and as a
fixed-count loop; one row per (document, mode) is streamed to stdout.

Usage:
    python bin/benchmark.py
    python bin/benchmark.py --iterations 500 --backends json,orjson,wasm-serde
    python bin/benchmark.py --config benchmarks/suite.yaml
    python bin/benchmark.py --documents samples/sample.json --style pipe --json results/run.json
    python bin/benchmark.py --headline best
    python bin/benchmark.py --list-backends
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import argparse
import logging
from typing import List, Optional

from parsebench.backends import BackendRegistry, default_registry
from parsebench.benchmark import BenchmarkRunner, ReportGenerator, build_modes
from parsebench.config import Settings, SuiteConfig, load_suite


# =============================================================================
# Terminal output helpers
# =============================================================================

class Colors:
    CYAN = "\033[96m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    GRAY = "\033[90m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


def _c(text: str, color: str) -> str:
    if not sys.stderr.isatty():
        return text
    return f"{color}{text}{Colors.RESET}"


def print_header(title: str) -> None:
    line = "=" * 60
    print(f"\n{_c(line, Colors.CYAN)}", file=sys.stderr)
    print(_c(f" {title}", Colors.CYAN + Colors.BOLD), file=sys.stderr)
    print(_c(line, Colors.CYAN), file=sys.stderr)


def print_success(msg: str) -> None:
    print(f"  {_c('✓', Colors.GREEN)} {msg}", file=sys.stderr)


def print_skipped(msg: str) -> None:
    print(f"  {_c('-', Colors.GRAY)} {msg}", file=sys.stderr)


def print_error(msg: str) -> None:
    print(f"  {_c('✗', Colors.RED)} {msg}", file=sys.stderr)


# =============================================================================
# Suite assembly
# =============================================================================

def _split(value: Optional[str]) -> List[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


def _document_path(raw: str, samples_dir: Path) -> Path:
    path = Path(raw)
    if path.is_absolute() or len(path.parts) > 1:
        return path
    return samples_dir / path


def build_suite(args: argparse.Namespace, settings: Settings) -> SuiteConfig:
    """Merge environment settings, an optional YAML suite and CLI flags."""
    if args.samples_dir:
        settings.samples_dir = Path(args.samples_dir)
    if args.iterations is not None:
        settings.iterations = args.iterations

    if args.config:
        suite = load_suite(args.config, settings)
        if args.iterations is not None:
            suite.modes = [None if m is None else args.iterations for m in suite.modes]
    else:
        suite = SuiteConfig.from_settings(settings)

    if args.documents:
        suite.documents = [_document_path(d, settings.samples_dir) for d in _split(args.documents)]
    if args.backends:
        suite.backends = _split(args.backends)
    if args.wasm:
        suite.wasm_path = Path(args.wasm)
    if args.style:
        suite.style = args.style
    if args.headline:
        suite.headline = args.headline

    # re-run validation after overrides
    return SuiteConfig(
        documents=suite.documents,
        modes=suite.modes,
        backends=suite.backends,
        wasm_path=suite.wasm_path,
        style=suite.style,
        headline=suite.headline,
    )


def print_backend_statuses(registry: BackendRegistry) -> None:
    print_header("Parser Backends")
    for status in registry.statuses():
        family = status.family.value
        if status.available:
            print_success(f"{status.name:12s} {family}")
        else:
            print_skipped(f"{status.name:12s} {family}  unavailable: {status.reason}")


# =============================================================================
# CLI
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="JSON Parsing Performance Comparison",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  %(prog)s                                         Reference samples, all backends
  %(prog)s --iterations 200 --backends json,orjson Quick two-column run
  %(prog)s --config benchmarks/suite.yaml          From YAML config
  %(prog)s --headline best                        Every backend vs the fastest
  %(prog)s --list-backends                         Show which backends resolve
""",
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--config", type=Path, metavar="FILE",
        help="YAML suite file (documents, modes, backends, wasm_path, style)",
    )
    source.add_argument(
        "--documents",
        help="Comma-separated sample files; bare names resolve under --samples-dir",
    )

    opts = parser.add_argument_group("Options")
    opts.add_argument("--samples-dir", metavar="DIR", help="Directory holding the sample documents")
    opts.add_argument("--iterations", type=int, metavar="N", help="Calls per iterated measurement (default: 1000)")
    opts.add_argument("--backends", help="Comma-separated allow-list of backends (default: all)")
    opts.add_argument("--wasm", metavar="PATH", help="Compiled WebAssembly parser module")
    opts.add_argument("--style", choices=["plain", "pipe"], help="Table style (default: plain)")
    opts.add_argument(
        "--headline", choices=["group", "best"],
        help="Last column: one finding per row (group) or every backend vs the fastest (best)",
    )
    opts.add_argument("--json", type=Path, metavar="FILE", help="Also write this run's rows as JSON")
    opts.add_argument("--list-backends", action="store_true", help="Probe backends, list them and exit")

    runtime = parser.add_argument_group("Runtime")
    runtime.add_argument("--verbose", "-v", action="store_true", help="Verbose output with debug logging")

    return parser


# =============================================================================
# Main
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        suite = build_suite(args, Settings.from_env())
        registry = default_registry(suite.wasm_path, enabled=suite.backends or None)
    except (OSError, ValueError) as e:
        print_error(f"Invalid configuration: {e}")
        return 1

    if args.list_backends:
        print_backend_statuses(registry)
        return 0

    # All probing and module initialisation completes before any timing.
    backends = registry.resolve_all()
    if not backends:
        print_error("No parser backends are available.")
        return 1

    modes = build_modes(suite.modes)
    print("\nJSON Parsing Performance Comparison\n", flush=True)

    try:
        runner = BenchmarkRunner(backends, style=suite.style, verbose=args.verbose, headline=suite.headline)
        summary = runner.run_files(suite.documents, modes)
    except ValueError as e:
        print_error(str(e))
        return 1

    for name in summary.skipped_documents:
        print_error(f"Skipped {name}: could not be read")
    if summary.failed_measurements:
        print_error(f"{summary.failed_measurements} measurement(s) failed; see the FAILED cells above")

    if args.json:
        path = ReportGenerator(args.json).save_json(summary)
        print_success(f"Results saved to {path}")

    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print(f"\n{_c('Benchmark interrupted by user.', Colors.YELLOW)}", file=sys.stderr)
        sys.exit(130)
