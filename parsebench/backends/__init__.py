"""
Backends Package

Parser backends, their availability probes and the registry that resolves
them once per process.
"""

from .models import Backend, BackendStatus, Family
from .registry import BackendRegistry
from .adapters import default_registry

__all__ = [
    "Backend",
    "BackendStatus",
    "Family",
    "BackendRegistry",
    "default_registry",
]
