"""
Cross-compilation target triples.

This module provides the immutable value type that identifies a
cross-compilation target, along with parsing and the normalized forms used
to name per-target environment variables.
"""

from dataclasses import dataclass
from typing import Union

from crossdeps.core.exceptions import InvalidTripleError

DEFAULT_VENDOR = "unknown"


@dataclass(frozen=True)
class TargetTriple:
    """
    Cross-compilation target triple.

    Two triples are equal iff architecture, OS and ABI all match exactly. The
    vendor component of the textual form carries no meaning here and is not
    stored.

    Attributes:
        arch: Target CPU architecture (e.g., 'armv7', 'aarch64', 'x86_64')
        os: Target operating system (e.g., 'linux')
        abi: ABI / libc variant (e.g., 'gnueabihf', 'gnu', 'musl')
    """

    arch: str
    os: str
    abi: str

    def __post_init__(self):
        for field_name in ("arch", "os", "abi"):
            value = getattr(self, field_name)
            if (
                not isinstance(value, str)
                or not value
                or "-" in value
                or value != value.strip()
            ):
                raise InvalidTripleError(
                    f"{self.arch}-{self.os}-{self.abi}",
                    f"bad {field_name} component {value!r}",
                )

    @classmethod
    def parse(cls, text: str) -> "TargetTriple":
        """
        Parse a textual triple.

        Accepts ``arch-os-abi`` and ``arch-vendor-os-abi``; the vendor is
        dropped.

        Args:
            text: Triple string (e.g., 'armv7-unknown-linux-gnueabihf')

        Returns:
            Parsed TargetTriple

        Raises:
            InvalidTripleError: If the text does not have 3 or 4 components

        Example:
            >>> TargetTriple.parse("armv7-linux-gnueabihf")
            TargetTriple(arch='armv7', os='linux', abi='gnueabihf')
            >>> TargetTriple.parse("armv7-unknown-linux-gnueabihf").env_key
            'armv7_unknown_linux_gnueabihf'
        """
        if not isinstance(text, str):
            raise InvalidTripleError(repr(text), "expected a string")

        parts = text.strip().split("-")
        if any(not part for part in parts):
            raise InvalidTripleError(text, "empty component")

        if len(parts) == 3:
            arch, os_name, abi = parts
        elif len(parts) == 4:
            arch, _vendor, os_name, abi = parts
        else:
            raise InvalidTripleError(
                text, "expected arch-os-abi or arch-vendor-os-abi"
            )

        return cls(arch=arch, os=os_name, abi=abi)

    @property
    def canonical(self) -> str:
        """Canonical four-component form, e.g. 'armv7-unknown-linux-gnueabihf'."""
        return f"{self.arch}-{DEFAULT_VENDOR}-{self.os}-{self.abi}"

    @property
    def short(self) -> str:
        """Three-component form without vendor, e.g. 'armv7-linux-gnueabihf'."""
        return f"{self.arch}-{self.os}-{self.abi}"

    @property
    def env_key(self) -> str:
        """Canonical form usable inside an environment variable name."""
        return self.canonical.replace("-", "_")

    def __str__(self) -> str:
        return self.canonical


def as_triple(target: Union[TargetTriple, str]) -> TargetTriple:
    """Coerce a triple string or TargetTriple to a TargetTriple."""
    if isinstance(target, TargetTriple):
        return target
    return TargetTriple.parse(target)
