"""The composable SQL fragment."""

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, NoReturn, Optional

from sqlfragment.guards import check_parameters
from sqlfragment.tokens import TOKEN_PATTERN

if TYPE_CHECKING:
    from sqlfragment.config import FlattenConfig
    from sqlfragment.types import FlattenedQuery, ParameterValue

__all__ = ("Fragment",)


class Fragment:
    """Immutable SQL text with ``$N`` tokens and the parameters they reference.

    A parameter may itself be a :class:`Fragment`; flattening splices the nested
    fragment's SQL into its parent at every matching token and renumbers all
    tokens so the result can go straight to a ``$N`` style driver.

    Example:
        >>> condition = Fragment("state = $1 AND type = $2", ["California", "Post Office"])
        >>> query = Fragment("SELECT * FROM locations WHERE $1 AND is_deleted = $2", [condition, False])
        >>> query.flatten()
        FlattenedQuery(sql='SELECT * FROM locations WHERE state = $1 AND type = $2 AND is_deleted = $3', params=('California', 'Post Office', False))
    """

    __slots__ = ("_params", "_sql")

    _sql: str
    _params: "tuple[ParameterValue, ...]"

    def __init__(self, sql: str, params: "Sequence[ParameterValue]" = ()) -> None:
        """Create a fragment.

        Only parameter types are checked here. Token consistency is checked when
        the fragment is flattened.

        Args:
            sql: SQL text containing ``$1``..``$N`` tokens
            params: Values for the tokens, in token order

        Raises:
            TypeError: If ``sql`` is not a string.
            UnsupportedParameterTypeError: If a parameter value has an unsupported type.
        """
        if not isinstance(sql, str):
            msg = f"Fragment SQL must be a string, got {type(sql).__name__!r}"
            raise TypeError(msg)
        object.__setattr__(self, "_sql", sql)
        object.__setattr__(self, "_params", check_parameters(params))

    @property
    def sql(self) -> str:
        return self._sql

    @property
    def params(self) -> "tuple[ParameterValue, ...]":
        return self._params

    def flatten(self, config: "Optional[FlattenConfig]" = None) -> "FlattenedQuery":
        """Collapse this fragment tree into one SQL string and one parameter tuple.

        Args:
            config: Optional flattening configuration

        Returns:
            The flattened query
        """
        from sqlfragment.flatten import flatten

        return flatten(self, config)

    @classmethod
    def empty(cls) -> "Fragment":
        """Return a fragment with no SQL and no parameters."""
        return cls("")

    @classmethod
    def join(cls, parts: "Iterable[ParameterValue]", separator: str = ", ") -> "Fragment":
        """Join fragments or values with a literal separator.

        Args:
            parts: Fragments and/or plain values; plain values become placeholders
            separator: SQL text placed between consecutive parts

        Raises:
            ValueError: If the separator contains a ``$N`` token.

        Returns:
            A fragment referencing each part once, in order
        """
        if TOKEN_PATTERN.search(separator):
            msg = f"Join separator must not contain placeholder tokens: {separator!r}"
            raise ValueError(msg)
        params = list(parts)
        return cls(separator.join(f"${position}" for position in range(1, len(params) + 1)), params)

    def __setattr__(self, name: str, value: Any) -> NoReturn:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    def __delattr__(self, name: str) -> NoReturn:
        msg = f"{type(self).__name__} is immutable"
        raise AttributeError(msg)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fragment):
            return NotImplemented
        return self._sql == other._sql and self._params == other._params

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sql={self._sql!r}, params={list(self._params)!r})"
