"""
Field tree consumed by the query executor.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class FieldRequest:
    """A requested field, its arguments and its requested sub-fields.

    A field with no selections is a leaf. ``alias`` renames the key the value
    is attached under in the response; by default the field name is used.
    """

    name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)
    selections: tuple["FieldRequest", ...] = ()
    alias: str | None = None

    @property
    def response_key(self) -> str:
        return self.alias or self.name

    @property
    def is_leaf(self) -> bool:
        return not self.selections


def field_tree(
    name: str, /, *selections: "FieldRequest | str", alias: str | None = None, **arguments: Any
) -> FieldRequest:
    """Build a FieldRequest; plain strings become leaf fields.

    Example:
        field_tree("book", "name", field_tree("author", "name"), id="3")
    """
    children = tuple(
        FieldRequest(name=child) if isinstance(child, str) else child for child in selections
    )
    return FieldRequest(name=name, arguments=arguments, selections=children, alias=alias)
