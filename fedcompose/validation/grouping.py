"""Grouping of type definitions by name."""

from collections.abc import Iterable

from ..core import DefinitionGroup, TypeDefinitionFragment


def group_definitions_by_name(
    fragments: Iterable[TypeDefinitionFragment],
) -> dict[str, DefinitionGroup]:
    """Partition fragments into one group per type name.

    Names keep their first-seen order and fragments keep their original
    relative order within each group. Every fragment lands in exactly one
    group.
    """
    by_name: dict[str, list[TypeDefinitionFragment]] = {}
    for fragment in fragments:
        by_name.setdefault(fragment.type_name, []).append(fragment)

    return {
        name: DefinitionGroup(type_name=name, fragments=tuple(members))
        for name, members in by_name.items()
    }
