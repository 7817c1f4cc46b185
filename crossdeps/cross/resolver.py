"""
Target environment resolution.

Turns a target triple and a set of logical library names into the
multi-arch qualified package list and the environment a cross build needs.
Resolution is a pure computation over an explicit Registry: it performs no
I/O and keeps no state between calls.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple, Union

from crossdeps.config.registry import (
    VAR_NAME_PATTERN,
    EnvironmentOverride,
    Registry,
    TargetConfig,
)
from crossdeps.core.exceptions import (
    ConflictingOverride,
    InvalidTripleError,
    MultipleTargetsError,
    RegistryError,
    UnresolvedDependency,
    UnsupportedTarget,
)
from crossdeps.cross.targets import TargetTriple

logger = logging.getLogger(__name__)

TargetLike = Union[TargetTriple, str]


@dataclass(frozen=True)
class ResolvedEnvironment:
    """
    Result of resolving one target.

    Attributes:
        target: The resolved target triple
        multiarch: Foreign architecture the package manager must enable
            before installing (e.g. 'armhf')
        packages: Qualified package names, sorted lexicographically
        environment: Variables to export into the build, sorted by name
    """

    target: TargetTriple
    multiarch: str
    packages: Tuple[str, ...]
    environment: Dict[str, str] = field(default_factory=dict, hash=False)

    def to_dict(self) -> dict:
        return {
            "target": self.target.canonical,
            "multiarch": self.multiarch,
            "packages": list(self.packages),
            "environment": dict(self.environment),
        }


def resolve(
    target: TargetLike, dependencies: Iterable[str], registry: Registry
) -> ResolvedEnvironment:
    """
    Resolve the install list and environment for one target.

    Args:
        target: Target triple (or its textual form)
        dependencies: Logical library names; duplicates and order are ignored
        registry: Registry of supported targets

    Returns:
        ResolvedEnvironment for the target

    Raises:
        UnsupportedTarget: If the target is not in the registry
        UnresolvedDependency: If a library has no mapping for the target. The
            lexicographically first missing library is reported.
        ConflictingOverride: If an environment variable is declared twice
            with different values
        RegistryError: If an environment override does not expand to a valid
            variable name
        ValueError: If a dependency name is blank

    Example:
        >>> env = resolve("armv7-linux-gnueabihf", {"ssl", "dbus"}, registry)
        >>> env.packages
        ('libdbus-1-dev:armhf', 'libssl-dev:armhf')
    """
    triple = _coerce_target(target)
    config = registry.get_target(triple)
    if config is None:
        raise UnsupportedTarget(
            triple.canonical, [t.canonical for t in registry.supported]
        )

    names = _normalize_dependencies(dependencies)
    logger.debug(f"Resolving {triple} for dependencies: {', '.join(names) or '(none)'}")

    missing = [name for name in names if config.mapping_for(name) is None]
    if missing:
        raise UnresolvedDependency(missing[0], triple.canonical)

    collected = set()
    for name in names:
        collected.update(config.mapping_for(name).qualified(config.multiarch))

    packages = tuple(sorted(collected))
    environment = _collect_environment(
        registry.environment + config.environment, config
    )

    logger.debug(
        f"Resolved {triple}: {len(packages)} package(s), "
        f"{len(environment)} environment variable(s)"
    )

    return ResolvedEnvironment(
        target=triple,
        multiarch=config.multiarch,
        packages=packages,
        environment=environment,
    )


def resolve_all(
    targets: Sequence[TargetLike], dependencies: Iterable[str], registry: Registry
) -> List[ResolvedEnvironment]:
    """
    Resolve several targets independently.

    Targets are resolved in the order given; repeated targets collapse onto
    their first occurrence.

    Raises:
        MultipleTargetsError: If more than one distinct target is requested
            and the registry does not allow multi-target environments
        ResolutionError: Any failure from resolve()
    """
    triples: List[TargetTriple] = []
    for target in targets:
        triple = _coerce_target(target)
        if triple not in triples:
            triples.append(triple)

    if len(triples) > 1 and not registry.multi_target:
        raise MultipleTargetsError([t.canonical for t in triples])

    names = _normalize_dependencies(dependencies)
    return [resolve(triple, names, registry) for triple in triples]


def _coerce_target(target: TargetLike) -> TargetTriple:
    if isinstance(target, TargetTriple):
        return target

    try:
        return TargetTriple.parse(target)
    except InvalidTripleError as e:
        # A name that cannot be parsed cannot be registered either
        raise UnsupportedTarget(str(target)) from e


def _normalize_dependencies(dependencies: Iterable[str]) -> List[str]:
    if isinstance(dependencies, str):
        raise TypeError("dependencies must be a collection of names, not a string")

    names = set()
    for name in dependencies:
        if not isinstance(name, str):
            raise TypeError(f"dependency names must be strings, got {name!r}")
        if not name.strip():
            raise ValueError("dependency names must be non-empty")
        names.add(name.strip())

    return sorted(names)


def _collect_environment(
    overrides: Tuple[EnvironmentOverride, ...], config: TargetConfig
) -> Dict[str, str]:
    context = config.template_context()
    environment: Dict[str, str] = {}

    for override in overrides:
        try:
            rendered = override.render(context)
        except (KeyError, IndexError, ValueError) as e:
            raise RegistryError(
                f"Cannot expand environment override {override.name!r} "
                f"for {config.triple}: {e}"
            ) from e

        if not VAR_NAME_PATTERN.match(rendered.name):
            raise RegistryError(
                f"Invalid environment variable name {rendered.name!r} "
                f"for {config.triple}"
            )

        existing = environment.get(rendered.name)
        if existing is not None and existing != rendered.value:
            raise ConflictingOverride(
                rendered.name, (existing, rendered.value), config.triple.canonical
            )

        environment[rendered.name] = rendered.value

    return dict(sorted(environment.items()))
