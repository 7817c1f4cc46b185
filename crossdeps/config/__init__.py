"""Configuration module for crossdeps.

This module provides YAML parsing, layering and validation of the registry
of supported cross-compilation targets.
"""

from crossdeps.config.registry import (
    EnvironmentOverride,
    PackageMapping,
    TargetConfig,
    Registry,
    parse_registry,
    merge_registries,
    load_registry,
    load_registry_file,
    builtin_registry_path,
)
from crossdeps.config.validation import (
    ValidationIssue,
    ValidationResult,
    RegistryValidator,
    format_validation_results,
)

__all__ = [
    "EnvironmentOverride",
    "PackageMapping",
    "TargetConfig",
    "Registry",
    "parse_registry",
    "merge_registries",
    "load_registry",
    "load_registry_file",
    "builtin_registry_path",
    "ValidationIssue",
    "ValidationResult",
    "RegistryValidator",
    "format_validation_results",
]
