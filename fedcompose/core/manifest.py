"""Pydantic models for subgraph manifest files.

A manifest holds one subgraph's already-parsed type definitions. These models
validate the document shape before it is turned into
``TypeDefinitionFragment`` records.
"""

from enum import Enum
import re

from pydantic import BaseModel, Field, field_validator

from .definitions import DefinitionKind, TypeDefinitionFragment

# GraphQL name grammar; excludes the "," used to join enum signatures
NAME_PATTERN = re.compile(r"[_A-Za-z][_0-9A-Za-z]*")


class TypeKind(str, Enum):
    """Type definition kinds accepted in a manifest."""

    ENUM = "enum"
    OBJECT = "object"
    INTERFACE = "interface"
    INPUT = "input"
    SCALAR = "scalar"
    UNION = "union"


class TypeEntry(BaseModel):
    """One type definition within a manifest."""

    name: str = Field(min_length=1, description="Type name")
    kind: TypeKind = Field(description="Definition kind")
    values: list[str] | None = Field(
        default=None, description="Enum value names (enum kind only)"
    )

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not NAME_PATTERN.fullmatch(value):
            raise ValueError(f"'{value}' is not a valid type name")
        return value

    @field_validator("values")
    @classmethod
    def _check_values(cls, values: list[str] | None) -> list[str] | None:
        if values is None:
            return values
        for value in values:
            if not NAME_PATTERN.fullmatch(value):
                raise ValueError(f"'{value}' is not a valid enum value name")
        return values


class SubgraphManifest(BaseModel):
    """A subgraph's type definitions."""

    service: str | None = Field(
        default=None, description="Name of the contributing subgraph"
    )
    types: list[TypeEntry] = Field(default_factory=list)

    def to_fragments(self, source: str | None = None) -> list[TypeDefinitionFragment]:
        """Convert manifest entries into fragments, in declaration order."""
        fragments = []
        for entry in self.types:
            if entry.kind == TypeKind.ENUM:
                fragments.append(
                    TypeDefinitionFragment(
                        type_name=entry.name,
                        service_name=self.service,
                        kind=DefinitionKind.ENUM,
                        enum_values=(
                            tuple(entry.values) if entry.values is not None else None
                        ),
                        source=source,
                    )
                )
            else:
                fragments.append(
                    TypeDefinitionFragment.other(entry.name, self.service, source)
                )
        return fragments
