"""
Test Configuration and Fixtures
================================

Shared pytest fixtures for the parser benchmark harness.

Usage:
    pytest tests/                    # Run all tests
    pytest tests/ -v                 # Verbose output
    pytest tests/ -k "comparator"    # Run only comparator tests
    pytest tests/ --quick            # Skip slow tests
"""

import pytest
from pathlib import Path
from typing import Callable, Optional

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from parsebench.backends.models import Backend, Family
from parsebench.benchmark.models import SampleDocument


# =============================================================================
# Custom Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


def pytest_addoption(parser):
    """Add custom command line options"""
    parser.addoption(
        "--quick",
        action="store_true",
        default=False,
        help="Skip slow tests",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests if --quick is specified"""
    if config.getoption("--quick"):
        skip_slow = pytest.mark.skip(reason="Skipped with --quick")
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(skip_slow)


# =============================================================================
# Deterministic timing
# =============================================================================

class FakeClock:
    """Nanosecond clock that only moves when a stub backend says so."""

    def __init__(self):
        self.now = 0
        self.reads = 0

    def __call__(self) -> int:
        self.reads += 1
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += int(round(ms * 1_000_000))


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def stub_backend(fake_clock) -> Callable[..., Backend]:
    """Factory for backends whose every call costs a fixed, injected duration."""

    def make(
        name: str,
        family: Family = Family.INTERPRETED,
        cost_ms: float = 1.0,
        error: Optional[Exception] = None,
        label: str = "",
    ) -> Backend:
        def parse(text):
            if error is not None:
                raise error
            fake_clock.advance_ms(cost_ms)
            return {"parsed": len(text)}

        return Backend(name=name, family=family, parse=parse, label=label)

    return make


# =============================================================================
# Data fixtures
# =============================================================================

@pytest.fixture
def documents():
    return [
        SampleDocument(name="sample.json", text='{"a": 1}'),
        SampleDocument(name="sample-big-array.json", text="[1, 2, 3]"),
    ]


@pytest.fixture
def sample_files(tmp_path) -> Path:
    """A samples directory with the two small reference files."""
    samples = tmp_path / "samples"
    samples.mkdir()
    (samples / "sample.json").write_text('{"users": [{"id": 1}], "total": 1}')
    (samples / "sample-big-array.json").write_text("[" + ",".join(str(i) for i in range(100)) + "]")
    return samples
