"""
Backend Adapters

Wraps each concrete JSON library behind a ``parse(text)`` callable plus a
probe, and registers the built-in candidates in their fixed column order:

    json, json-pure            interpreted
    orjson, ujson, simdjson    accelerated-native
    wasm-serde, wasm-simd      accelerated-portable

Optional libraries are imported inside their probes so a missing package only
removes that backend's column.
"""

import importlib
import json
import json.decoder
import json.scanner
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Union

from .models import Family
from .registry import BackendRegistry
from .wasm import SERDE_EXPORT, SIMD_EXPORT, WasmLoader

SMOKE_DOCUMENT = '{"test":"value"}'


def _smoke(parse: Callable[[str], Any]) -> bool:
    """Trivial sanity check: the backend parses a one-key object."""
    result = parse(SMOKE_DOCUMENT)
    return result is not None


# =============================================================================
# Interpreted
# =============================================================================

def stdlib_parser() -> Callable[[str], Any]:
    return json.loads


def pure_python_parser() -> Callable[[str], Any]:
    """``json`` decoding with the C scanner swapped for the Python one."""
    decoder = json.JSONDecoder()
    decoder.parse_string = json.decoder.py_scanstring
    decoder.scan_once = json.scanner.py_make_scanner(decoder)
    return decoder.decode


# =============================================================================
# Native accelerated
# =============================================================================

def _module_parser(module_name: str, attr: str = "loads") -> Callable[[], Callable[[str], Any]]:
    def factory() -> Callable[[str], Any]:
        module = importlib.import_module(module_name)
        return getattr(module, attr)
    return factory


def _module_probe(module_name: str, attr: str = "loads") -> Callable[[], bool]:
    def probe() -> bool:
        return _smoke(_module_parser(module_name, attr)())
    return probe


# =============================================================================
# Portable (WebAssembly)
# =============================================================================

class _WasmBackends:
    """Probe/factory pair per export, sharing one loader."""

    def __init__(self, path: Union[str, Path]):
        self._loader = WasmLoader(path)

    def _module(self):
        return self._loader.get()

    def factory(self, export: str) -> Callable[[], Callable[[str], Any]]:
        def make() -> Callable[[str], Any]:
            return self._module().parser(export)
        return make

    def probe(self, export: str) -> Callable[[], bool]:
        def check() -> bool:
            return _smoke(self._module().parser(export))
        return check


# =============================================================================
# Registry
# =============================================================================

def default_registry(
    wasm_path: Union[str, Path],
    enabled: Optional[Iterable[str]] = None,
) -> BackendRegistry:
    """
    Build the registry of built-in candidates.

    Args:
        wasm_path: Location of the compiled WebAssembly parser module.
        enabled: Optional allow-list of backend names; unknown names raise.
    """
    wasm = _WasmBackends(wasm_path)
    candidates = [
        ("json", Family.INTERPRETED, lambda: _smoke(stdlib_parser()), stdlib_parser, "json"),
        ("json-pure", Family.INTERPRETED, lambda: _smoke(pure_python_parser()), pure_python_parser, "json (py)"),
        ("orjson", Family.ACCELERATED_NATIVE, _module_probe("orjson"), _module_parser("orjson"), "orjson"),
        ("ujson", Family.ACCELERATED_NATIVE, _module_probe("ujson"), _module_parser("ujson"), "ujson"),
        ("simdjson", Family.ACCELERATED_NATIVE, _module_probe("simdjson"), _module_parser("simdjson"), "simdjson"),
        ("wasm-serde", Family.ACCELERATED_PORTABLE, wasm.probe(SERDE_EXPORT), wasm.factory(SERDE_EXPORT), "WASM Serde"),
        ("wasm-simd", Family.ACCELERATED_PORTABLE, wasm.probe(SIMD_EXPORT), wasm.factory(SIMD_EXPORT), "WASM SIMD"),
    ]

    allowed = list(enabled) if enabled else None
    if allowed is not None:
        known = {c[0] for c in candidates}
        unknown = [name for name in allowed if name not in known]
        if unknown:
            raise ValueError(f"Unknown backend(s): {', '.join(unknown)} (known: {', '.join(sorted(known))})")

    registry = BackendRegistry()
    for name, family, probe, factory, label in candidates:
        if allowed is not None and name not in allowed:
            continue
        registry.register(name, family, probe, factory, label=label)
    return registry
