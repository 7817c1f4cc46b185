"""
Targets command implementation.

Lists the targets known to the registry.
"""

import logging

from crossdeps.cli.utils import load_command_context, print_error
from crossdeps.core.exceptions import CrossDepsError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the targets command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    try:
        _, registry = load_command_context(args)
    except CrossDepsError as e:
        print_error(str(e))
        return 1

    if not registry.targets:
        print("No targets registered")
        return 0

    width = max(len(t.triple.canonical) for t in registry.targets)

    for target in sorted(registry.targets, key=lambda t: t.triple.canonical):
        line = f"{target.triple.canonical:<{width}}  {target.multiarch:<8}"
        if target.description:
            line += f"  {target.description}"
        print(line.rstrip())

        if args.libraries:
            libraries = ", ".join(target.library_names) or "(none)"
            print(f"  libraries: {libraries}")

    if registry.multi_target:
        print()
        print("Multiple targets per environment: allowed")

    return 0
