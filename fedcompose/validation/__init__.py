"""Enum consistency validation for composed subgraph schemas.

This package groups type definitions by name, classifies each group by
kind, and reports value-set and kind mismatches between subgraphs.
"""

from .classifier import KindClassification, classify_group
from .engine import CompositionValidator
from .errors import (
    MALFORMED_DEFINITION,
    CompositionFault,
    CompositionResult,
    CompositionWarning,
    FaultCode,
)
from .grouping import group_definitions_by_name
from .rules import (
    CompositionRule,
    EnumConsistencyChecker,
    KindConflictReporter,
    MatchingEnumsRule,
    SignatureGroup,
    build_signature_groups,
    enum_signature,
)

__all__ = [
    "MALFORMED_DEFINITION",
    "CompositionFault",
    "CompositionResult",
    "CompositionRule",
    "CompositionValidator",
    "CompositionWarning",
    "EnumConsistencyChecker",
    "FaultCode",
    "KindClassification",
    "KindConflictReporter",
    "MatchingEnumsRule",
    "SignatureGroup",
    "build_signature_groups",
    "classify_group",
    "enum_signature",
    "group_definitions_by_name",
]
