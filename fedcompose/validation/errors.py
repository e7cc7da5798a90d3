"""Fault and result data structures for composition validation.

This module defines the records emitted by the composition checks: faults
for detected inconsistencies, warnings for non-fatal diagnostics, and the
result object that accumulates both over a composition run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FaultCode(str, Enum):
    """Error codes reported by the enum consistency checks."""

    ENUM_MISMATCH = "ENUM_MISMATCH"
    ENUM_MISMATCH_TYPE = "ENUM_MISMATCH_TYPE"


MALFORMED_DEFINITION = "MALFORMED_DEFINITION"


@dataclass(frozen=True)
class CompositionFault:
    """Represents one detected composition inconsistency.

    ``impacted_services`` maps each affected service to the schema
    coordinates (``Type`` or ``Type.VALUE``) tooling should annotate.
    ``service_groups`` holds the service partitions the message was built
    from. Faults hash by value so they can be collected into sets.
    """

    code: str
    type_name: str
    message: str
    impacted_services: dict[str, tuple[str, ...]] = field(default_factory=dict)
    service_groups: tuple[tuple[str, ...], ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.code, FaultCode):
            object.__setattr__(self, "code", self.code.value)

    def __hash__(self) -> int:
        return hash(
            (
                self.code,
                self.type_name,
                self.message,
                tuple(sorted(self.impacted_services.items())),
                self.service_groups,
            )
        )

    def __str__(self) -> str:
        """Return a formatted string representation of the fault."""
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON/YAML output."""
        return {
            "code": self.code,
            "type": self.type_name,
            "message": self.message,
            "impacted_services": {
                service: list(coordinates)
                for service, coordinates in self.impacted_services.items()
            },
            "service_groups": [list(group) for group in self.service_groups],
        }


@dataclass(frozen=True)
class CompositionWarning:
    """Represents a non-fatal composition diagnostic."""

    code: str
    message: str
    type_name: str | None = None
    service_name: str | None = None
    source: str | None = None

    def __str__(self) -> str:
        """Return a formatted string representation of the warning."""
        parts = [f"{self.code}: {self.message}"]

        if self.source:
            parts.append(f"(source: {self.source})")

        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON/YAML output."""
        output: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.type_name:
            output["type"] = self.type_name
        if self.service_name:
            output["service"] = self.service_name
        if self.source:
            output["source"] = self.source
        return output


@dataclass
class CompositionResult:
    """Complete result of one composition run."""

    is_valid: bool
    errors: list[CompositionFault]
    warnings: list[CompositionWarning]
    type_count: int = 0
    fragment_count: int = 0

    @property
    def error_count(self) -> int:
        """Number of composition faults."""
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        """Number of composition warnings."""
        return len(self.warnings)

    def add_error(self, error: CompositionFault) -> None:
        """Add a fault to the result."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: CompositionWarning) -> None:
        """Add a warning to the result."""
        self.warnings.append(warning)

    def extend_errors(self, errors: list[CompositionFault]) -> None:
        """Add multiple faults to the result."""
        self.errors.extend(errors)
        if errors:
            self.is_valid = False

    def extend_warnings(self, warnings: list[CompositionWarning]) -> None:
        """Add multiple warnings to the result."""
        self.warnings.extend(warnings)

    def errors_for(self, type_name: str) -> list[CompositionFault]:
        """Faults reported for one type name."""
        return [error for error in self.errors if error.type_name == type_name]

    def impacted_services(self) -> list[str]:
        """All services named by any fault, in first-reported order."""
        services: list[str] = []
        for error in self.errors:
            for service in error.impacted_services:
                if service not in services:
                    services.append(service)
        return services

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON/YAML output."""
        return {
            "status": "valid" if self.is_valid else "invalid",
            "type_count": self.type_count,
            "fragment_count": self.fragment_count,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "errors": [error.to_dict() for error in self.errors],
            "warnings": [warning.to_dict() for warning in self.warnings],
        }

    def __str__(self) -> str:
        """Return a formatted string representation of the result."""
        if self.is_valid:
            status = (
                f"✅ Valid ({self.warning_count} warnings)"
                if self.warnings
                else "✅ Valid"
            )
        else:
            status = (
                f"❌ Invalid ({self.error_count} errors, {self.warning_count} warnings)"
            )

        lines = [status]

        if self.errors:
            lines.append("\nErrors:")
            for error in self.errors:
                lines.append(f"  - {error}")

        if self.warnings:
            lines.append("\nWarnings:")
            for warning in self.warnings:
                lines.append(f"  - {warning}")

        return "\n".join(lines)
