"""Enum consistency rules for composed subgraph schemas.

Every type name contributed by more than one subgraph must agree on being an
enum, and enums must declare the same value set everywhere. This module
implements both checks:

- ``EnumConsistencyChecker`` compares the value sets of all-enum groups
  using an order-independent signature and reports ``ENUM_MISMATCH``.
- ``KindConflictReporter`` reports ``ENUM_MISMATCH_TYPE`` for groups where
  the type is an enum in some subgraphs and not in others.

``MatchingEnumsRule`` classifies each group and routes it to the right check.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from ..core import DefinitionGroup, TypeDefinitionFragment
from .classifier import KindClassification, classify_group
from .errors import CompositionFault, FaultCode

# Enum value names cannot contain a comma
SIGNATURE_SEPARATOR = ","


def enum_signature(values: Iterable[str]) -> str:
    """Canonical, order-independent key for an enum value set."""
    return SIGNATURE_SEPARATOR.join(sorted(values))


def service_and_type_prefix(service_name: str, type_name: str) -> str:
    """Message prefix locating a fault in a service."""
    return f"[{service_name}] {type_name} -> "


@dataclass(frozen=True)
class SignatureGroup:
    """Services that declare an identical enum value set."""

    signature: str
    values: frozenset[str]
    services: tuple[str, ...]


def build_signature_groups(
    fragments: Iterable[TypeDefinitionFragment],
) -> list[SignatureGroup]:
    """Partition well-formed enum fragments by value-set signature.

    Fragments without a service name or value list are skipped. Groups are
    returned in the order their signature was first seen.
    """
    services_by_signature: dict[str, list[str]] = {}
    values_by_signature: dict[str, frozenset[str]] = {}

    for fragment in fragments:
        if not fragment.service_name or fragment.enum_values is None:
            continue
        signature = enum_signature(fragment.enum_values)
        services_by_signature.setdefault(signature, []).append(fragment.service_name)
        values_by_signature.setdefault(signature, frozenset(fragment.enum_values))

    return [
        SignatureGroup(
            signature=signature,
            values=values_by_signature[signature],
            services=tuple(services),
        )
        for signature, services in services_by_signature.items()
    ]


class CompositionRule(Protocol):
    """A check evaluated once per definition group."""

    name: str

    def check_group(self, group: DefinitionGroup) -> list[CompositionFault]:
        """Return the faults found in one group."""
        ...


class EnumConsistencyChecker:
    """Checks that all-enum groups declare the same values everywhere."""

    def check(self, group: DefinitionGroup) -> CompositionFault | None:
        """Compare value sets across the group's fragments.

        Args:
            group: A group whose fragments are all enum definitions

        Returns:
            An ``ENUM_MISMATCH`` fault when more than one distinct value set
            exists, otherwise None
        """
        signature_groups = build_signature_groups(group.fragments)
        if len(signature_groups) <= 1:
            return None

        listed = ", ".join(
            f"[{', '.join(sg.services)}]" for sg in signature_groups
        )
        message = (
            f"The `{group.type_name}` enum does not have identical values in all "
            f"services. Groups of services with identical values are: {listed}"
        )

        return CompositionFault(
            code=FaultCode.ENUM_MISMATCH,
            type_name=group.type_name,
            message=message,
            impacted_services=self._impacted_services(group.type_name, signature_groups),
            service_groups=tuple(sg.services for sg in signature_groups),
        )

    @staticmethod
    def _impacted_services(
        type_name: str, signature_groups: list[SignatureGroup]
    ) -> dict[str, tuple[str, ...]]:
        """Map each service to the values it declares that others lack.

        A service whose values are all shared is pointed at the type itself.
        """
        shared = frozenset.intersection(*(sg.values for sg in signature_groups))

        impacted: dict[str, tuple[str, ...]] = {}
        for sg in signature_groups:
            divergent = sorted(sg.values - shared)
            coordinates = tuple(f"{type_name}.{value}" for value in divergent) or (
                type_name,
            )
            for service in sg.services:
                existing = impacted.get(service, ())
                impacted[service] = existing + tuple(
                    c for c in coordinates if c not in existing
                )
        return impacted


class KindConflictReporter:
    """Reports types that are enums in some services but not in others."""

    def report(self, group: DefinitionGroup) -> CompositionFault:
        """Build the ``ENUM_MISMATCH_TYPE`` fault for a mixed-kind group."""
        services_with_enum = [
            f.service_name for f in group.fragments if f.is_enum and f.service_name
        ]
        services_without_enum = [
            f.service_name
            for f in group.fragments
            if not f.is_enum and f.service_name
        ]

        # All enum-side fragments may lack a service name
        prefix = (
            service_and_type_prefix(services_with_enum[0], group.type_name)
            if services_with_enum
            else ""
        )
        message = (
            f"{prefix}{group.type_name} is an enum in "
            f"[{', '.join(services_with_enum)}], "
            f"but not in [{', '.join(services_without_enum)}]"
        )

        impacted: dict[str, tuple[str, ...]] = {}
        for service in services_with_enum + services_without_enum:
            impacted.setdefault(service, (group.type_name,))

        return CompositionFault(
            code=FaultCode.ENUM_MISMATCH_TYPE,
            type_name=group.type_name,
            message=message,
            impacted_services=impacted,
            service_groups=(tuple(services_with_enum), tuple(services_without_enum)),
        )


class MatchingEnumsRule:
    """Routes each definition group to the enum check matching its kinds."""

    name = "matching_enums"

    def __init__(self) -> None:
        self.consistency_checker = EnumConsistencyChecker()
        self.conflict_reporter = KindConflictReporter()

    def check_group(self, group: DefinitionGroup) -> list[CompositionFault]:
        """Return the enum faults for one type name."""
        classification = classify_group(group)

        if classification == KindClassification.ALL_ENUM:
            fault = self.consistency_checker.check(group)
            return [fault] if fault else []
        if classification == KindClassification.MIXED_KIND:
            return [self.conflict_reporter.report(group)]
        return []
