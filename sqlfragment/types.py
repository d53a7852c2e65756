"""Core types used throughout sqlfragment."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple, Union

from msgspec import UNSET, UnsetType
from typing_extensions import TypeAlias

if TYPE_CHECKING:
    from sqlfragment.fragment import Fragment

__all__ = (
    "UNSET",
    "FlattenedQuery",
    "LeafValue",
    "Number",
    "ParameterStyle",
    "ParameterValue",
    "TokenInfo",
    "UnsetType",
)

Number: TypeAlias = Union[int, float, Decimal]
LeafValue: TypeAlias = Union[
    str,
    list[str],
    tuple[str, ...],
    Number,
    list[Number],
    tuple[Number, ...],
    bool,
    bytes,
    bytearray,
    memoryview,
    None,
    UnsetType,
]
"""Any parameter value a flattened query may hand to a driver."""
ParameterValue: TypeAlias = Union[LeafValue, "Fragment"]
"""Any parameter value a fragment accepts."""


class ParameterStyle(str, Enum):
    """Positional placeholder styles a flattened query can be rendered in."""

    NUMERIC = "numeric"
    POSITIONAL_COLON = "positional_colon"
    QMARK = "qmark"
    POSITIONAL_PYFORMAT = "pyformat_positional"

    def __str__(self) -> str:
        """String representation for better error messages.

        Returns:
            The enum value as a string.
        """
        return self.value


class TokenInfo:
    """Immutable information about one ``$N`` token occurrence."""

    __slots__ = ("number", "ordinal", "placeholder_text", "position")

    def __init__(self, number: int, position: int, ordinal: int, placeholder_text: str) -> None:
        self.number = number
        self.position = position
        self.ordinal = ordinal
        self.placeholder_text = placeholder_text

    @property
    def end(self) -> int:
        return self.position + len(self.placeholder_text)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return self.number == other.number and self.position == other.position

    def __hash__(self) -> int:
        return hash((self.number, self.position))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(number={self.number!r}, ordinal={self.ordinal!r}, placeholder_text={self.placeholder_text!r}, position={self.position!r})"


class FlattenedQuery(NamedTuple):
    """A single SQL string with its ordered driver parameters."""

    sql: str
    params: tuple[LeafValue, ...]

    def to_style(self, style: ParameterStyle) -> FlattenedQuery:
        """Render this query with another positional placeholder style.

        Args:
            style: The placeholder style the target driver expects.

        Returns:
            A new query; ``self`` is returned unchanged for ``NUMERIC``.
        """
        from sqlfragment.converter import convert_placeholders

        return convert_placeholders(self, style)
