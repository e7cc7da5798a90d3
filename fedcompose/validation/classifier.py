"""Kind classification of definition groups."""

from enum import Enum

from ..core import DefinitionGroup


class KindClassification(str, Enum):
    """How the fragments of one type name split between enum and non-enum."""

    ALL_ENUM = "all_enum"
    MIXED_KIND = "mixed_kind"
    NONE_ENUM = "none_enum"


def classify_group(group: DefinitionGroup) -> KindClassification:
    """Classify a group as all-enum, mixed, or enum-free.

    An empty group has no enum fragments and classifies as ``NONE_ENUM``.
    """
    enum_count = sum(1 for fragment in group.fragments if fragment.is_enum)

    if enum_count == 0:
        return KindClassification.NONE_ENUM
    if enum_count == len(group.fragments):
        return KindClassification.ALL_ENUM
    return KindClassification.MIXED_KIND
