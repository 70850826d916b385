"""
Configuration Package

Environment settings and YAML suite loading.
"""

from .settings import Settings, SuiteConfig, load_suite

__all__ = ["Settings", "SuiteConfig", "load_suite"]
