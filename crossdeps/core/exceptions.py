"""
Centralized exception hierarchy for crossdeps.

This module defines all custom exceptions used across the codebase
to provide clear exception semantics.
"""

from typing import Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class CrossDepsError(Exception):
    """Base exception for all crossdeps errors."""

    pass


class InvalidTripleError(CrossDepsError, ValueError):
    """Raised when a target triple string cannot be parsed."""

    def __init__(self, text: str, reason: str = ""):
        self.text = text
        msg = f"Invalid target triple: {text!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


# ============================================================================
# Configuration Exceptions
# ============================================================================


class RegistryError(CrossDepsError):
    """Raised when a registry document is malformed or cannot be loaded."""

    pass


class ConfigError(CrossDepsError):
    """Raised when the project configuration file is invalid."""

    pass


# ============================================================================
# Resolution Exceptions
# ============================================================================


class ResolutionError(CrossDepsError):
    """Base exception for failures while resolving a target environment."""

    pass


class UnsupportedTarget(ResolutionError):
    """Raised when the requested triple is not present in the registry."""

    def __init__(self, target: str, supported: Sequence[str] = ()):
        self.target = target
        self.supported = tuple(supported)
        msg = f"Unsupported target: {target}"
        if self.supported:
            msg += f". Supported targets: {', '.join(self.supported)}"
        super().__init__(msg)


class UnresolvedDependency(ResolutionError):
    """Raised when a requested library has no package mapping for the target."""

    def __init__(self, name: str, target: str = ""):
        self.name = name
        self.target = target
        msg = f"Unresolved dependency: {name}"
        if target:
            msg += f" (no package mapping for target {target})"
        super().__init__(msg)


class ConflictingOverride(ResolutionError):
    """Raised when one environment variable is declared with different values."""

    def __init__(self, name: str, values: Sequence[str] = (), target: str = ""):
        self.name = name
        self.values = tuple(values)
        self.target = target
        msg = f"Conflicting environment override: {name}"
        if target:
            msg += f" for target {target}"
        if self.values:
            msg += " (" + " vs ".join(repr(v) for v in self.values) + ")"
        super().__init__(msg)


class MultipleTargetsError(ResolutionError):
    """Raised when several targets are requested but the registry allows one."""

    def __init__(self, targets: Sequence[str]):
        self.targets = tuple(targets)
        super().__init__(
            "Registry allows a single target per environment, "
            f"got {len(self.targets)}: "
            f"{', '.join(self.targets)}"
        )
