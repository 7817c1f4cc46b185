"""YAML registry parser for crossdeps.

This module provides the data model for the registry of supported targets,
parsing and validation of registry documents, layering of several registries
and loading of the built-in registry shipped with the package.
"""

import logging
import re
import string
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import yaml

from crossdeps.core.exceptions import InvalidTripleError, RegistryError
from crossdeps.cross.targets import TargetTriple, as_triple

logger = logging.getLogger(__name__)

SUPPORTED_VERSION = 1

# Placeholders usable in environment override names and values.
TEMPLATE_FIELDS = frozenset(
    ["triple", "env_key", "arch", "os", "abi", "multiarch", "gnu_triplet"]
)

VAR_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class EnvironmentOverride:
    """A single environment variable declaration."""

    name: str
    value: str

    def render(self, context: Dict[str, str]) -> "EnvironmentOverride":
        """Substitute template placeholders in name and value."""
        return EnvironmentOverride(
            name=self.name.format(**context), value=self.value.format(**context)
        )


@dataclass(frozen=True)
class PackageMapping:
    """Concrete packages providing one logical library for one target."""

    library: str
    packages: Tuple[str, ...]

    def qualified(self, multiarch: str) -> Tuple[str, ...]:
        """
        Return package names tagged with the multi-arch qualifier.

        Names that already carry a qualifier (``foo:all``) are kept as-is.
        """
        return tuple(
            pkg if ":" in pkg else f"{pkg}:{multiarch}" for pkg in self.packages
        )


@dataclass(frozen=True)
class TargetConfig:
    """One supported target and its declarations."""

    triple: TargetTriple
    multiarch: str  # host package-manager architecture, e.g. 'armhf'
    gnu_triplet: Optional[str] = None  # e.g. 'arm-linux-gnueabihf'
    libraries: Tuple[PackageMapping, ...] = ()
    environment: Tuple[EnvironmentOverride, ...] = ()
    description: str = ""

    @property
    def effective_gnu_triplet(self) -> str:
        return self.gnu_triplet or self.triple.short

    @property
    def library_names(self) -> Tuple[str, ...]:
        return tuple(sorted(m.library for m in self.libraries))

    def mapping_for(self, library: str) -> Optional[PackageMapping]:
        """Look up the package mapping for a library, or None."""
        for mapping in self.libraries:
            if mapping.library == library:
                return mapping
        return None

    def template_context(self) -> Dict[str, str]:
        """Values available to environment override placeholders."""
        return {
            "triple": self.triple.canonical,
            "env_key": self.triple.env_key,
            "arch": self.triple.arch,
            "os": self.triple.os,
            "abi": self.triple.abi,
            "multiarch": self.multiarch,
            "gnu_triplet": self.effective_gnu_triplet,
        }


@dataclass(frozen=True)
class Registry:
    """Complete set of supported targets."""

    targets: Tuple[TargetConfig, ...] = ()
    environment: Tuple[EnvironmentOverride, ...] = ()
    multi_target: bool = False
    version: int = SUPPORTED_VERSION
    sources: Tuple[str, ...] = field(default=(), compare=False)

    @property
    def supported(self) -> Tuple[TargetTriple, ...]:
        return tuple(t.triple for t in self.targets)

    def get_target(
        self, triple: Union[TargetTriple, str]
    ) -> Optional[TargetConfig]:
        """Return the TargetConfig for a triple, or None if unsupported."""
        triple = as_triple(triple)
        for target in self.targets:
            if target.triple == triple:
                return target
        return None


# ============================================================================
# Parsing
# ============================================================================


def parse_registry(data: Any, source: str = "<memory>") -> Registry:
    """
    Parse and validate a registry document.

    Args:
        data: Decoded YAML document
        source: Description of where the document came from (for messages)

    Returns:
        Parsed registry

    Raises:
        RegistryError: If the document is invalid
    """
    if data is None:
        raise RegistryError(f"{source}: registry document is empty")

    if not isinstance(data, dict):
        raise RegistryError(f"{source}: registry document must be a mapping")

    if "version" not in data:
        raise RegistryError(f"{source}: missing required field: version")

    if data["version"] != SUPPORTED_VERSION:
        raise RegistryError(
            f"{source}: unsupported version: {data['version']} "
            f"(expected {SUPPORTED_VERSION})"
        )

    multi_target = data.get("multi_target", False)
    if not isinstance(multi_target, bool):
        raise RegistryError(f"{source}: multi_target must be true or false")

    environment = _parse_environment(
        data.get("environment", []), f"{source}: environment"
    )

    if "targets" not in data:
        raise RegistryError(f"{source}: missing required field: targets")

    targets_data = data["targets"]
    if not isinstance(targets_data, list):
        raise RegistryError(f"{source}: targets must be a list")

    targets: List[TargetConfig] = []
    seen = set()
    for index, target_data in enumerate(targets_data):
        target = _parse_target(target_data, f"{source}: targets[{index}]")

        if target.triple in seen:
            raise RegistryError(f"{source}: duplicate target: {target.triple}")

        seen.add(target.triple)
        targets.append(target)

    return Registry(
        targets=tuple(targets),
        environment=environment,
        multi_target=multi_target,
        version=data["version"],
        sources=(source,),
    )


def _parse_target(data: Any, where: str) -> TargetConfig:
    """Parse one entry of the targets list."""
    if not isinstance(data, dict):
        raise RegistryError(f"{where}: target must be a mapping")

    for field_name in ("triple", "multiarch"):
        if field_name not in data:
            raise RegistryError(f"{where}: target missing required field: {field_name}")

    try:
        triple = TargetTriple.parse(data["triple"])
    except InvalidTripleError as e:
        raise RegistryError(f"{where}: {e}") from e

    where = f"{where} ({triple})"

    multiarch = data["multiarch"]
    if not _is_token(multiarch):
        raise RegistryError(f"{where}: multiarch must be a non-empty word")

    gnu_triplet = data.get("gnu_triplet")
    if gnu_triplet is not None and not _is_token(gnu_triplet):
        raise RegistryError(f"{where}: gnu_triplet must be a non-empty word")

    description = data.get("description", "")
    if not isinstance(description, str):
        raise RegistryError(f"{where}: description must be a string")

    return TargetConfig(
        triple=triple,
        multiarch=multiarch,
        gnu_triplet=gnu_triplet,
        libraries=_parse_libraries(data.get("libraries", {}), f"{where}: libraries"),
        environment=_parse_environment(
            data.get("environment", []), f"{where}: environment"
        ),
        description=description,
    )


def _parse_libraries(data: Any, where: str) -> Tuple[PackageMapping, ...]:
    """Parse the library -> packages mapping of a target."""
    if data is None:
        return ()

    if not isinstance(data, dict):
        raise RegistryError(f"{where}: must be a mapping of library to packages")

    mappings = []
    seen = set()
    for library, packages in data.items():
        if not isinstance(library, str) or not library.strip():
            raise RegistryError(f"{where}: library names must be non-empty strings")

        if library.strip() in seen:
            raise RegistryError(f"{where}: duplicate library: {library.strip()}")
        seen.add(library.strip())

        if isinstance(packages, str):
            packages = [packages]

        if not isinstance(packages, list) or not packages:
            raise RegistryError(
                f"{where}.{library}: expected a package name or a non-empty list"
            )

        for pkg in packages:
            if not _is_token(pkg):
                raise RegistryError(f"{where}.{library}: invalid package name: {pkg!r}")

        mappings.append(
            PackageMapping(library=library.strip(), packages=tuple(packages))
        )

    return tuple(sorted(mappings, key=lambda m: m.library))


def _parse_environment(data: Any, where: str) -> Tuple[EnvironmentOverride, ...]:
    """Parse a list of ``{name, value}`` environment declarations."""
    if data is None:
        return ()

    if not isinstance(data, list):
        raise RegistryError(f"{where}: must be a list of {{name, value}} entries")

    overrides = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict) or "name" not in entry or "value" not in entry:
            raise RegistryError(f"{where}[{index}]: entry must have 'name' and 'value'")

        name, value = entry["name"], entry["value"]

        if not isinstance(name, str) or not name:
            raise RegistryError(f"{where}[{index}]: name must be a non-empty string")

        # bool is an int subclass; an unquoted yes/no is almost always a mistake
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            raise RegistryError(
                f"{where}[{index}] ({name}): value must be a string (quote it in YAML)"
            )

        value = str(value)
        _check_placeholders(name, f"{where}[{index}].name")
        _check_placeholders(value, f"{where}[{index}].value")
        overrides.append(EnvironmentOverride(name=name, value=value))

    return tuple(overrides)


def _check_placeholders(text: str, where: str):
    """Reject unknown or malformed ``{...}`` placeholders."""
    try:
        fields = [f for _, f, _, _ in string.Formatter().parse(text) if f is not None]
    except ValueError as e:
        raise RegistryError(f"{where}: malformed template {text!r}: {e}") from e

    for name in fields:
        if name not in TEMPLATE_FIELDS:
            raise RegistryError(
                f"{where}: unknown placeholder {{{name}}} in {text!r} "
                f"(expected one of {', '.join(sorted(TEMPLATE_FIELDS))})"
            )


def _is_token(value: Any) -> bool:
    if not isinstance(value, str) or not value:
        return False
    return not any(c.isspace() for c in value)


# ============================================================================
# Layering
# ============================================================================


def merge_registries(registries: Sequence[Registry]) -> Registry:
    """
    Layer several registries, later ones extending earlier ones.

    Targets only present in one layer are taken as-is. For a target present
    in several layers, libraries are unioned and environment declarations are
    concatenated so that conflicting values surface at resolution time.

    Raises:
        RegistryError: If layers disagree on a target's multiarch qualifier or
            map the same library to different packages
    """
    if not registries:
        return Registry()

    merged: Dict[TargetTriple, TargetConfig] = {}
    order: List[TargetTriple] = []
    environment: List[EnvironmentOverride] = []
    sources: List[str] = []
    multi_target = False

    for registry in registries:
        environment.extend(registry.environment)
        sources.extend(registry.sources)
        multi_target = multi_target or registry.multi_target

        for target in registry.targets:
            if target.triple not in merged:
                merged[target.triple] = target
                order.append(target.triple)
                continue

            merged[target.triple] = _merge_target(merged[target.triple], target)

    logger.debug(f"Merged {len(registries)} registries into {len(order)} targets")

    return Registry(
        targets=tuple(merged[t] for t in order),
        environment=tuple(environment),
        multi_target=multi_target,
        sources=tuple(sources),
    )


def _merge_target(base: TargetConfig, layer: TargetConfig) -> TargetConfig:
    if base.multiarch != layer.multiarch:
        raise RegistryError(
            f"Conflicting multiarch for {base.triple}: "
            f"{base.multiarch} vs {layer.multiarch}"
        )

    if base.gnu_triplet and layer.gnu_triplet and base.gnu_triplet != layer.gnu_triplet:
        raise RegistryError(
            f"Conflicting gnu_triplet for {base.triple}: "
            f"{base.gnu_triplet} vs {layer.gnu_triplet}"
        )

    libraries = {m.library: m for m in base.libraries}
    for mapping in layer.libraries:
        existing = libraries.get(mapping.library)
        if existing is not None and existing.packages != mapping.packages:
            raise RegistryError(
                f"Conflicting package mapping for {mapping.library} on {base.triple}: "
                f"{list(existing.packages)} vs {list(mapping.packages)}"
            )
        libraries[mapping.library] = mapping

    return replace(
        base,
        gnu_triplet=base.gnu_triplet or layer.gnu_triplet,
        libraries=tuple(sorted(libraries.values(), key=lambda m: m.library)),
        environment=base.environment + layer.environment,
        description=base.description or layer.description,
    )


# ============================================================================
# Loading
# ============================================================================


def builtin_registry_path() -> Path:
    """Path to the registry shipped with the package."""
    # Path relative to this module: ../data/registry.yaml
    return Path(__file__).parent.parent / "data" / "registry.yaml"


def load_registry_file(path: Path) -> Registry:
    """
    Load a registry from a YAML file.

    Raises:
        RegistryError: If the file is missing, not valid YAML or invalid
    """
    path = Path(path)
    if not path.exists():
        raise RegistryError(f"Registry file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RegistryError(f"Invalid YAML syntax in {path}: {e}") from e

    registry = parse_registry(data, source=str(path))
    logger.debug(f"Loaded {len(registry.targets)} targets from {path}")
    return registry


def load_registry(
    paths: Optional[Iterable[Path]] = None, include_builtin: bool = True
) -> Registry:
    """
    Load and layer registry files.

    Args:
        paths: Registry files in layering order
        include_builtin: Put the built-in registry underneath the given files

    Returns:
        Merged registry

    Raises:
        RegistryError: If no registry is selected or any file is invalid

    Example:
        >>> registry = load_registry([Path("registry.yaml")], include_builtin=False)
    """
    paths = [Path(p) for p in (paths or [])]
    if include_builtin:
        paths.insert(0, builtin_registry_path())

    if not paths:
        raise RegistryError(
            "No registry selected: built-in registry disabled and no files given"
        )

    return merge_registries([load_registry_file(p) for p in paths])
