"""Registry validation module for crossdeps.

This module provides static validation of a parsed registry, reporting
problems that would otherwise only surface when a particular target is
resolved, together with suggestions on how to fix them.
"""

from dataclasses import dataclass
from typing import Dict, List

from crossdeps.config.registry import VAR_NAME_PATTERN, Registry, TargetConfig


@dataclass
class ValidationIssue:
    """A single validation issue."""

    level: str  # 'error', 'warning', 'info'
    field: str  # Registry location, e.g. 'targets.armv7-unknown-linux-gnueabihf'
    message: str  # Human-readable message
    suggestion: str  # How to fix it


@dataclass
class ValidationResult:
    """Result of registry validation."""

    valid: bool
    issues: List[ValidationIssue]


class RegistryValidator:
    """Validates a crossdeps registry."""

    def __init__(self):
        self.issues: List[ValidationIssue] = []

    def validate(self, registry: Registry) -> ValidationResult:
        """
        Perform comprehensive validation.

        Args:
            registry: Parsed registry to validate

        Returns:
            ValidationResult with any issues found
        """
        self.issues = []

        if not registry.targets:
            self._add_warning(
                "targets",
                "Registry declares no targets",
                "Add at least one entry to the targets list",
            )

        for target in registry.targets:
            self._validate_libraries(target)
            self._validate_environment(registry, target)
            self._validate_gnu_triplet(target)

        has_errors = any(issue.level == "error" for issue in self.issues)

        return ValidationResult(valid=not has_errors, issues=self.issues)

    def _validate_libraries(self, target: TargetConfig):
        """Validate library mappings of one target."""
        where = f"targets.{target.triple}"

        if not target.libraries:
            self._add_warning(
                f"{where}.libraries",
                "Target has no library mappings",
                "Every non-empty dependency set will fail to resolve; add libraries",
            )

        for mapping in target.libraries:
            seen = set()
            for pkg in mapping.packages:
                if pkg in seen:
                    self._add_warning(
                        f"{where}.libraries.{mapping.library}",
                        f"Package listed more than once: {pkg}",
                        "Remove the duplicate entry",
                    )
                seen.add(pkg)

    def _validate_environment(self, registry: Registry, target: TargetConfig):
        """Expand environment overrides and check names and conflicts."""
        where = f"targets.{target.triple}.environment"
        context = target.template_context()
        values: Dict[str, str] = {}

        for override in registry.environment + target.environment:
            try:
                rendered = override.render(context)
            except (KeyError, IndexError, ValueError) as e:
                self._add_error(
                    where,
                    f"Cannot expand {override.name!r}: {e}",
                    "Use only the documented placeholders",
                )
                continue

            if not VAR_NAME_PATTERN.match(rendered.name):
                self._add_error(
                    f"{where}.{rendered.name}",
                    f"Invalid environment variable name: {rendered.name!r}",
                    "Use letters, digits and underscores, not starting with a digit",
                )

            existing = values.get(rendered.name)
            if existing is not None and existing != rendered.value:
                self._add_error(
                    f"{where}.{rendered.name}",
                    f"Conflicting values: {existing!r} vs {rendered.value!r}",
                    "Keep a single declaration per variable",
                )
            values[rendered.name] = rendered.value

    def _validate_gnu_triplet(self, target: TargetConfig):
        if target.gnu_triplet is None:
            self._add_info(
                f"targets.{target.triple}.gnu_triplet",
                f"gnu_triplet not set, using {target.effective_gnu_triplet}",
                "Set gnu_triplet to the multiarch library directory name "
                "(e.g., arm-linux-gnueabihf)",
            )

    def _add_error(self, field: str, message: str, suggestion: str):
        """Add error issue."""
        self.issues.append(
            ValidationIssue(
                level="error", field=field, message=message, suggestion=suggestion
            )
        )

    def _add_warning(self, field: str, message: str, suggestion: str):
        """Add warning issue."""
        self.issues.append(
            ValidationIssue(
                level="warning", field=field, message=message, suggestion=suggestion
            )
        )

    def _add_info(self, field: str, message: str, suggestion: str):
        """Add info issue."""
        self.issues.append(
            ValidationIssue(
                level="info", field=field, message=message, suggestion=suggestion
            )
        )


def format_validation_results(result: ValidationResult) -> str:
    """
    Format validation results for display.

    Args:
        result: Validation result to format

    Returns:
        Formatted string for display
    """
    if result.valid and not result.issues:
        return "✓ Registry is valid"

    lines = []

    errors = [i for i in result.issues if i.level == "error"]
    warnings = [i for i in result.issues if i.level == "warning"]
    infos = [i for i in result.issues if i.level == "info"]

    for title, issues in (
        ("❌ Errors:", errors),
        ("⚠️  Warnings:", warnings),
        ("ℹ️  Info:", infos),
    ):
        if not issues:
            continue
        lines.append(title)
        for issue in issues:
            lines.append(f"  {issue.field}: {issue.message}")
            lines.append(f"    → {issue.suggestion}")
        lines.append("")

    return "\n".join(lines).rstrip()
