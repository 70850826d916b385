"""
Application Settings

Environment configuration and YAML suite files for the benchmark harness.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

DEFAULT_DOCUMENTS = ["sample.json", "sample-big-array.json", "sample-big-object.json"]
DEFAULT_ITERATIONS = 1000
DEFAULT_WASM_PATH = "wasm/json_parser_bg.wasm"
TABLE_STYLES = ("plain", "pipe")
HEADLINE_MODES = ("group", "best")


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings from environment."""

    samples_dir: Path = Path("samples")
    wasm_path: Path = Path(DEFAULT_WASM_PATH)
    iterations: int = DEFAULT_ITERATIONS
    backends: List[str] = field(default_factory=list)  # empty means every candidate

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        iterations = os.getenv("PARSEBENCH_ITERATIONS", str(DEFAULT_ITERATIONS))
        try:
            count = int(iterations)
        except ValueError:
            raise ValueError(f"PARSEBENCH_ITERATIONS must be an integer, got {iterations!r}")

        return cls(
            samples_dir=Path(os.getenv("PARSEBENCH_SAMPLES_DIR", "samples")),
            wasm_path=Path(os.getenv("PARSEBENCH_WASM_PATH", DEFAULT_WASM_PATH)),
            iterations=count,
            backends=_split_csv(os.getenv("PARSEBENCH_BACKENDS")),
        )


@dataclass
class SuiteConfig:
    """
    One benchmark invocation: which documents, which modes, which backends.

    ``modes`` holds ``None`` for single-shot timing and a positive integer
    for an iterated loop of that many calls.
    """
    documents: List[Path] = field(default_factory=list)
    modes: List[Optional[int]] = field(default_factory=lambda: [None, DEFAULT_ITERATIONS])
    backends: List[str] = field(default_factory=list)
    wasm_path: Path = Path(DEFAULT_WASM_PATH)
    style: str = "plain"
    headline: str = "group"

    def __post_init__(self):
        for mode in self.modes:
            if mode is not None and (isinstance(mode, bool) or not isinstance(mode, int) or mode < 1):
                raise ValueError(f"Iteration count must be a positive integer, got {mode!r}")
        if self.style not in TABLE_STYLES:
            raise ValueError(f"Unknown table style {self.style!r} (expected one of {', '.join(TABLE_STYLES)})")
        if self.headline not in HEADLINE_MODES:
            raise ValueError(f"Unknown headline mode {self.headline!r} (expected one of {', '.join(HEADLINE_MODES)})")

    @classmethod
    def from_settings(cls, settings: Settings) -> "SuiteConfig":
        """Default suite: the reference samples, single-shot plus one loop."""
        return cls(
            documents=[settings.samples_dir / name for name in DEFAULT_DOCUMENTS],
            modes=[None, settings.iterations],
            backends=list(settings.backends),
            wasm_path=settings.wasm_path,
        )


def _parse_mode(raw: Any, iterations: int) -> Optional[int]:
    if raw in ("single", "single-shot", None):
        return None
    if raw in ("iterated", "loop"):
        return iterations
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    raise ValueError(f"Unrecognised mode {raw!r}: use 'single', 'iterated' or an iteration count")


def load_suite(config_path: Path, settings: Optional[Settings] = None) -> SuiteConfig:
    """
    Load a benchmark suite from a YAML file.

    Example::

        documents: [sample.json, sample-big-array.json]
        iterations: 500
        modes: [single, iterated, 50]
        backends: [json, orjson, wasm-serde]
        wasm_path: ../wasm/json_parser_bg.wasm
        style: pipe
        headline: best

    Relative paths are resolved against the YAML file's directory.
    """
    settings = settings or Settings.from_env()
    config_path = Path(config_path)

    with open(config_path) as f:
        try:
            data: Dict[str, Any] = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Suite file {config_path} must contain a mapping")

    base = config_path.parent

    def _resolve(value: Any) -> Path:
        path = Path(value)
        return path if path.is_absolute() else base / path

    iterations = data.get("iterations", settings.iterations)
    if isinstance(iterations, bool) or not isinstance(iterations, int):
        raise ValueError(f"iterations must be an integer, got {iterations!r}")

    raw_modes = data.get("modes", ["single", "iterated"])
    modes = [_parse_mode(m, iterations) for m in raw_modes]

    documents = [_resolve(d) for d in data.get("documents", [])]
    if not documents:
        documents = [settings.samples_dir / name for name in DEFAULT_DOCUMENTS]

    backends = data.get("backends") or list(settings.backends)
    if isinstance(backends, str):
        backends = _split_csv(backends)

    wasm_path = _resolve(data["wasm_path"]) if data.get("wasm_path") else settings.wasm_path

    return SuiteConfig(
        documents=documents,
        modes=modes,
        backends=[str(b) for b in backends],
        wasm_path=wasm_path,
        style=data.get("style", "plain"),
        headline=data.get("headline", "group"),
    )
