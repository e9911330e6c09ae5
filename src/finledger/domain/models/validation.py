"""Domain models for validation outcomes."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ValidationViolation:
    """Single rule violation reported by the validator.

    Attributes:
        field: Name of the offending candidate field.
        message: Human-readable explanation.
        code: Machine-readable reason (required, invalid, not_found, ...).
    """

    field: str
    message: str
    code: str = "invalid"


@dataclass(frozen=True)
class ValidationResult:
    """Ordered list of violations with a validity flag."""

    violations: list[ValidationViolation] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Return True when no violation was found."""
        return not self.violations

    def messages(self) -> list[str]:
        """Return the violation messages in report order."""
        return [violation.message for violation in self.violations]


def get_error_message(violations: list[ValidationViolation]) -> str:
    """Collapse violations into a single display message.

    Args:
        violations: Violations in report order.

    Returns:
        str: Empty string, the lone message, or a "Multiple errors" line.
    """
    if not violations:
        return ""
    if len(violations) == 1:
        return violations[0].message
    joined = ", ".join(violation.message for violation in violations)
    return f"Multiple errors: {joined}"


__all__ = ["ValidationViolation", "ValidationResult", "get_error_message"]
