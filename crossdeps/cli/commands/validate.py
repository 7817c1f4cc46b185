"""
Validate command implementation.

Runs static registry validation and reports issues.
"""

import logging

from crossdeps.cli.utils import load_command_context, print_error, safe_print
from crossdeps.config.validation import RegistryValidator, format_validation_results
from crossdeps.core.exceptions import CrossDepsError

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the validate command.

    Returns:
        Exit code (0 when the registry has no errors, 1 otherwise)
    """
    try:
        _, registry = load_command_context(args)
    except CrossDepsError as e:
        print_error(str(e))
        return 1

    result = RegistryValidator().validate(registry)
    logger.debug(f"Validation produced {len(result.issues)} issue(s)")

    safe_print(format_validation_results(result))
    return 0 if result.valid else 1
