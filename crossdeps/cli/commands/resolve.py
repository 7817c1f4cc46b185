"""
Resolve command implementation.

Resolves the package install list and build environment for one or more
targets and prints them in the requested format.
"""

import logging

from crossdeps.cli.utils import (
    load_command_context,
    print_error,
    print_warning,
    select_targets,
    split_list_arguments,
)
from crossdeps.core.exceptions import CrossDepsError
from crossdeps.cross.render import render
from crossdeps.cross.resolver import resolve_all

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve command.

    Args:
        args: Parsed command-line arguments with:
            - target: Target triples (repeatable)
            - deps: Comma-separated library names (repeatable)
            - output_format: text, json or shell

    Returns:
        Exit code (0 for success, 1 for any resolution or configuration error)
    """
    try:
        config, registry = load_command_context(args)

        targets = select_targets(args.target, config)
        if not targets:
            print_error(
                "No target specified",
                "Use --target, set CROSSDEPS_TARGET or add 'target' to crossdeps.yaml",
            )
            return 1

        if args.deps is not None:
            dependencies = split_list_arguments(args.deps)
        else:
            dependencies = split_list_arguments(config.dependencies)

        if not dependencies:
            print_warning("No dependencies given; resolving environment only")

        results = resolve_all(targets, dependencies, registry)
        output = render(results, args.output_format)
    except CrossDepsError as e:
        logger.debug(f"Resolution failed: {type(e).__name__}")
        print_error(str(e))
        return 1

    print(output)
    return 0
