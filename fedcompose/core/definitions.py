"""Core data structures for subgraph type definitions.

This module defines the records handed to the composition validator: one
``TypeDefinitionFragment`` per type definition contributed by a subgraph, and
the transient ``DefinitionGroup`` that collects every fragment sharing a type
name during a composition run.
"""

from dataclasses import dataclass
from enum import Enum


class DefinitionKind(str, Enum):
    """Kind discriminator for a contributed type definition."""

    ENUM = "enum"
    OTHER = "other"


@dataclass(frozen=True)
class TypeDefinitionFragment:
    """A single type definition as declared by one subgraph.

    ``service_name`` may be missing for malformed input, and ``enum_values``
    is only meaningful when ``kind`` is ``DefinitionKind.ENUM``.
    """

    type_name: str
    service_name: str | None
    kind: DefinitionKind
    enum_values: tuple[str, ...] | None = None
    source: str | None = None

    def __post_init__(self) -> None:
        if not self.type_name:
            raise ValueError("type_name must be a non-empty string")
        if self.enum_values is not None and not isinstance(self.enum_values, tuple):
            object.__setattr__(self, "enum_values", tuple(self.enum_values))

    @property
    def is_enum(self) -> bool:
        """Whether this fragment declares an enum type."""
        return self.kind == DefinitionKind.ENUM

    @property
    def is_well_formed(self) -> bool:
        """Whether the fragment carries everything the consistency checks need."""
        if not self.service_name:
            return False
        if self.is_enum and self.enum_values is None:
            return False
        return True

    @classmethod
    def enum(
        cls,
        type_name: str,
        service_name: str | None,
        values: list[str] | tuple[str, ...] | None,
        source: str | None = None,
    ) -> "TypeDefinitionFragment":
        """Build an enum fragment."""
        return cls(
            type_name=type_name,
            service_name=service_name,
            kind=DefinitionKind.ENUM,
            enum_values=tuple(values) if values is not None else None,
            source=source,
        )

    @classmethod
    def other(
        cls, type_name: str, service_name: str | None, source: str | None = None
    ) -> "TypeDefinitionFragment":
        """Build a non-enum fragment (object, interface, input, ...)."""
        return cls(
            type_name=type_name,
            service_name=service_name,
            kind=DefinitionKind.OTHER,
            source=source,
        )


@dataclass(frozen=True)
class DefinitionGroup:
    """All fragments sharing one type name, in their original relative order."""

    type_name: str
    fragments: tuple[TypeDefinitionFragment, ...]

    def __len__(self) -> int:
        return len(self.fragments)

    @property
    def service_names(self) -> list[str]:
        """Service names of the fragments that carry one."""
        return [f.service_name for f in self.fragments if f.service_name]
