"""
WebAssembly Parser Module

Loads a wasm-bindgen build of the serde_json parser through ``wasmtime`` and
exposes its exported ``&str -> String`` functions as plain Python callables.

The module is expected to export ``memory``, ``__wbindgen_malloc``,
``__wbindgen_free``, ``__wbindgen_add_to_stack_pointer`` and one function per
parser variant. A parse error is reported by the module as a returned string
starting with ``Invalid JSON:``.
"""

import logging
import struct
from pathlib import Path
from typing import Callable, Optional, Union

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Invalid JSON:"
SERDE_EXPORT = "wasm_parse_json_serde"
SIMD_EXPORT = "wasm_parse_json_simd"


class WasmParseError(ValueError):
    """The WebAssembly parser rejected its input."""


class WasmJsonModule:
    """One compiled and instantiated parser module."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        if not self.path.exists():
            raise FileNotFoundError(f"WASM file not found at {self.path}")

        from wasmtime import Engine, Instance, Module, Store

        # Compilation and instantiation happen here, outside any timed region.
        self.engine = Engine()
        self.store = Store(self.engine)
        module = Module.from_file(self.engine, str(self.path))
        self.instance = Instance(self.store, module, [])
        self._exports = self.instance.exports(self.store)

        self.memory = self._export("memory")
        self._malloc = self._export("__wbindgen_malloc")
        self._free = self._export("__wbindgen_free")
        self._stack = self._export("__wbindgen_add_to_stack_pointer")
        self._malloc_takes_align = len(self._malloc.type(self.store).params) > 1
        self._free_takes_align = len(self._free.type(self.store).params) > 2

        logger.debug(f"Loaded WASM module {self.path}")

    def _export(self, name: str):
        try:
            return self._exports[name]
        except KeyError:
            raise RuntimeError(f"WASM module {self.path.name} does not export {name!r}") from None

    def _pass_string(self, text: str) -> tuple:
        data = text.encode("utf-8")
        size = len(data)
        args = (size, 1) if self._malloc_takes_align else (size,)
        ptr = self._malloc(self.store, *args)
        if size:
            self.memory.write(self.store, data, ptr)
        return ptr, size

    def _release(self, ptr: int, size: int) -> None:
        args = (ptr, size, 1) if self._free_takes_align else (ptr, size)
        self._free(self.store, *args)

    def call(self, export: str, text: str) -> str:
        """Invoke a ``&str -> String`` export and return the decoded result."""
        func = self._export(export)
        ptr, size = self._pass_string(text)

        retptr = self._stack(self.store, -16)
        try:
            func(self.store, retptr, ptr, size)
            raw = self.memory.read(self.store, retptr, retptr + 8)
            out_ptr, out_len = struct.unpack("<ii", bytes(raw))
            result = bytes(self.memory.read(self.store, out_ptr, out_ptr + out_len)).decode("utf-8")
        finally:
            self._stack(self.store, 16)

        self._release(out_ptr, out_len)
        return result

    def parser(self, export: str) -> Callable[[str], str]:
        """Return a ``parse(text)`` callable bound to one export."""
        self._export(export)

        def parse(text: str) -> str:
            result = self.call(export, text)
            if result.startswith(ERROR_PREFIX):
                raise WasmParseError(result)
            return result

        return parse


class WasmLoader:
    """
    Loads the shared module on first use and remembers the outcome.

    Several backends (serde and SIMD variants) share one instance; a failed
    load is cached too so the module is compiled at most once per process.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._module: Optional[WasmJsonModule] = None
        self._error: Optional[Exception] = None

    def get(self) -> WasmJsonModule:
        if self._error is not None:
            raise self._error
        if self._module is None:
            try:
                self._module = WasmJsonModule(self.path)
            except Exception as e:
                self._error = e
                raise
        return self._module
