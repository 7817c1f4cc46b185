"""
Shared utilities for CLI commands.

Provides common functionality used across multiple CLI commands to
eliminate duplication and ensure consistent behavior.
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from crossdeps.config.registry import Registry, load_registry
from crossdeps.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "crossdeps.yaml"
TARGET_ENV_VAR = "CROSSDEPS_TARGET"


# ============================================================================
# Configuration Management
# ============================================================================


@dataclass
class ProjectConfig:
    """Defaults read from a project's crossdeps.yaml."""

    targets: List[str] = field(default_factory=list)
    dependencies: Optional[List[str]] = None
    registries: List[Path] = field(default_factory=list)
    builtin_registry: bool = True
    path: Optional[Path] = None


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        FileNotFoundError: If required=True and file doesn't exist
        ValueError: If YAML parsing fails

    Example:
        >>> config = load_yaml_config(Path("crossdeps.yaml"))
        >>> config.get("target")
    """
    if not config_file.exists():
        if required:
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
        return config or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML: {e}")
        raise ValueError(f"Invalid YAML in {config_file}: {e}")


def load_project_config(
    config_file: Optional[Path], project_root: Optional[Path] = None
) -> ProjectConfig:
    """
    Load the project configuration.

    An explicitly given file must exist; otherwise ./crossdeps.yaml in the
    project root is used when present. Registry paths are taken relative to
    the configuration file's directory.

    Raises:
        ConfigError: If the file is missing (when explicit) or invalid
    """
    required = config_file is not None
    if config_file is None:
        config_file = resolve_project_root(project_root) / DEFAULT_CONFIG_NAME

    try:
        data = load_yaml_config(config_file, required=required)
    except (FileNotFoundError, ValueError) as e:
        raise ConfigError(str(e)) from e

    if not data:
        return ProjectConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"{config_file}: configuration must be a mapping")

    if "target" in data and "targets" in data:
        raise ConfigError(f"{config_file}: use either 'target' or 'targets', not both")

    targets = data.get("targets", [data["target"]] if "target" in data else [])
    if not isinstance(targets, list) or not all(isinstance(t, str) for t in targets):
        raise ConfigError(f"{config_file}: targets must be a list of triples")

    dependencies = data.get("dependencies")
    if dependencies is not None:
        if not isinstance(dependencies, list) or not all(
            isinstance(d, str) for d in dependencies
        ):
            raise ConfigError(f"{config_file}: dependencies must be a list of names")

    registries = data.get("registries", [])
    if not isinstance(registries, list) or not all(
        isinstance(r, str) for r in registries
    ):
        raise ConfigError(f"{config_file}: registries must be a list of paths")

    builtin_registry = data.get("builtin_registry", True)
    if not isinstance(builtin_registry, bool):
        raise ConfigError(f"{config_file}: builtin_registry must be true or false")

    base = config_file.parent
    return ProjectConfig(
        targets=targets,
        dependencies=dependencies,
        registries=[_relative_to(base, Path(r)) for r in registries],
        builtin_registry=builtin_registry,
        path=config_file,
    )


def _relative_to(base: Path, path: Path) -> Path:
    path = path.expanduser()
    return path if path.is_absolute() else base / path


def load_command_context(args) -> Tuple[ProjectConfig, Registry]:
    """
    Load project configuration and the layered registry for a command.

    Registry layering order: built-in (unless disabled by --no-builtin or
    ``builtin_registry: false``), then the config file's registries, then
    --registry options.

    Raises:
        ConfigError: If the project configuration is invalid
        RegistryError: If any registry is invalid
    """
    config = load_project_config(
        getattr(args, "config", None), getattr(args, "project_root", None)
    )

    paths = list(config.registries) + list(getattr(args, "registry", None) or [])
    include_builtin = config.builtin_registry and not getattr(args, "no_builtin", False)

    registry = load_registry(paths, include_builtin=include_builtin)
    logger.debug(
        f"Registry layers: {', '.join(registry.sources)}; "
        f"{len(registry.targets)} target(s)"
    )
    return config, registry


# ============================================================================
# Argument Helpers
# ============================================================================


def split_list_arguments(values: Optional[List[str]]) -> List[str]:
    """
    Flatten repeated, comma-separated option values.

    Example:
        >>> split_list_arguments(["ssl,dbus", "audio", " ,ssl"])
        ['ssl', 'dbus', 'audio', 'ssl']
    """
    items = []
    for value in values or []:
        items.extend(part.strip() for part in value.split(",") if part.strip())
    return items


def select_targets(
    cli_targets: Optional[List[str]], config: ProjectConfig
) -> List[str]:
    """
    Pick the targets to resolve.

    Precedence order:
    1. CLI argument (--target, repeatable)
    2. Environment variable (CROSSDEPS_TARGET, comma-separated)
    3. Project configuration file
    """
    targets = split_list_arguments(cli_targets)
    if targets:
        return targets

    env_target = os.environ.get(TARGET_ENV_VAR)
    if env_target:
        logger.debug(f"Using target from {TARGET_ENV_VAR}: {env_target}")
        return split_list_arguments([env_target])

    return list(config.targets)


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def print_warning(message: str):
    """Print warning message to stderr."""
    print(f"WARNING: {message}", file=sys.stderr)


def safe_print(message: str, file=None):
    """
    Print message with safe encoding handling for limited consoles.

    Falls back to ASCII-safe characters if Unicode symbols can't be encoded.

    Args:
        message: Message to print
        file: Output file (default: stdout)
    """
    try:
        print(message, file=file)
    except UnicodeEncodeError:
        safe_message = (
            message.replace("⚠️", "WARNING:")
            .replace("✓", "[OK]")
            .replace("❌", "[ERROR]")
            .replace("ℹ️", "[INFO]")
            .replace("→", "->")
        )
        print(safe_message, file=file)


# ============================================================================
# Path Utilities
# ============================================================================


def resolve_project_root(path: Optional[Path] = None) -> Path:
    """
    Resolve project root directory.

    Args:
        path: Optional path (defaults to current directory)

    Returns:
        Resolved absolute path
    """
    if path is None:
        path = Path.cwd()
    return Path(path).resolve()
