"""
parsebench

Throughput comparison harness for interchangeable JSON parser backends
(interpreted, native-accelerated and WebAssembly-sandboxed).
"""

__version__ = "0.3.0"
