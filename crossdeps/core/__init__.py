"""
Core functionality for crossdeps.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    CrossDepsError,
    InvalidTripleError,
    RegistryError,
    ConfigError,
    ResolutionError,
    UnsupportedTarget,
    UnresolvedDependency,
    ConflictingOverride,
    MultipleTargetsError,
)

__all__ = [
    "CrossDepsError",
    "InvalidTripleError",
    "RegistryError",
    "ConfigError",
    "ResolutionError",
    "UnsupportedTarget",
    "UnresolvedDependency",
    "ConflictingOverride",
    "MultipleTargetsError",
]
