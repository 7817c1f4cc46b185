"""
Rendering of resolved target environments.

Formats ResolvedEnvironment results for the external collaborators that
consume them: a human-readable report, JSON for tooling, and a POSIX shell
snippet for image build steps.
"""

import json
import shlex
from typing import Callable, Dict, Sequence

from crossdeps.config.registry import VAR_NAME_PATTERN
from crossdeps.cross.resolver import ResolvedEnvironment


def format_text(results: Sequence[ResolvedEnvironment]) -> str:
    """
    Format results as two sections per target: install list and environment.

    Example:
        >>> print(format_text([env]))
        Target: armv7-unknown-linux-gnueabihf (multiarch: armhf)
        <BLANKLINE>
        Install packages:
          libssl-dev:armhf
        <BLANKLINE>
        Environment:
          PKG_CONFIG_LIBDIR_armv7_unknown_linux_gnueabihf=/usr/lib/arm-linux-gnueabihf/pkgconfig
    """
    blocks = []

    for result in results:
        lines = [f"Target: {result.target} (multiarch: {result.multiarch})", ""]

        lines.append("Install packages:")
        if result.packages:
            lines.extend(f"  {pkg}" for pkg in result.packages)
        else:
            lines.append("  (none)")

        lines.append("")
        lines.append("Environment:")
        if result.environment:
            lines.extend(f"  {k}={v}" for k, v in result.environment.items())
        else:
            lines.append("  (none)")

        blocks.append("\n".join(lines))

    return "\n\n".join(blocks)


def format_json(results: Sequence[ResolvedEnvironment]) -> str:
    """Format results as a JSON document with a 'targets' list."""
    return json.dumps({"targets": [r.to_dict() for r in results]}, indent=2)


def format_shell(results: Sequence[ResolvedEnvironment]) -> str:
    """
    Format results as a POSIX shell snippet for a Debian-based image.

    Enables the foreign architecture, installs the packages and exports the
    environment.
    """
    blocks = []

    for result in results:
        lines = [
            f"# {result.target}",
            f"dpkg --add-architecture {shlex.quote(result.multiarch)}",
        ]

        if result.packages:
            lines.append("apt-get update")
            lines.append(
                "apt-get install --assume-yes "
                + " ".join(shlex.quote(pkg) for pkg in result.packages)
            )

        for name, value in result.environment.items():
            if not VAR_NAME_PATTERN.match(name):
                raise ValueError(f"Cannot export invalid variable name: {name!r}")
            lines.append(f"export {name}={shlex.quote(value)}")

        blocks.append("\n".join(lines))

    return "\n\n".join(blocks)


FORMATTERS: Dict[str, Callable[[Sequence[ResolvedEnvironment]], str]] = {
    "text": format_text,
    "json": format_json,
    "shell": format_shell,
}


def render(results: Sequence[ResolvedEnvironment], output_format: str = "text") -> str:
    """
    Render results in the named format.

    Raises:
        ValueError: If the format is unknown
    """
    if output_format not in FORMATTERS:
        raise ValueError(
            f"Unknown output format: {output_format}. "
            f"Supported formats: {', '.join(FORMATTERS)}"
        )

    return FORMATTERS[output_format](results)
