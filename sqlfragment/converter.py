"""Placeholder style conversion for flattened queries.

Flattening always produces ``$N`` placeholders. Drivers that bind parameters
by occurrence (``?`` or ``%s``) need one value per placeholder, so a repeated
``$N`` duplicates its value in the converted parameters.
"""

from typing import TYPE_CHECKING, Union

from sqlfragment.exceptions import ParameterStyleMismatchError
from sqlfragment.tokens import TOKEN_PATTERN, validate_tokens
from sqlfragment.types import FlattenedQuery, ParameterStyle

if TYPE_CHECKING:
    from sqlfragment.types import LeafValue

__all__ = ("convert_placeholders",)

_OCCURRENCE_PLACEHOLDERS = {ParameterStyle.QMARK: "?", ParameterStyle.POSITIONAL_PYFORMAT: "%s"}


def _resolve_style(style: Union[ParameterStyle, str]) -> ParameterStyle:
    try:
        return ParameterStyle(style)
    except ValueError:
        supported = ", ".join(s.value for s in ParameterStyle)
        msg = f"Cannot render a flattened query with parameter style {style!r}; supported styles: {supported}"
        raise ParameterStyleMismatchError(msg) from None


def convert_placeholders(query: FlattenedQuery, style: Union[ParameterStyle, str]) -> FlattenedQuery:
    """Render a flattened query with another positional placeholder style.

    Args:
        query: A query with ``$N`` placeholders
        style: Target placeholder style

    Raises:
        ParameterStyleMismatchError: If ``style`` is not a positional style.
        TokenCountMismatchError: If ``query`` does not reference exactly its parameters.

    Returns:
        The converted query
    """
    target = _resolve_style(style)
    if target is ParameterStyle.NUMERIC:
        return query

    tokens = validate_tokens(query.sql, len(query.params))
    if target is ParameterStyle.POSITIONAL_COLON:
        return FlattenedQuery(TOKEN_PATTERN.sub(r":\g<number>", query.sql), query.params)

    placeholder = _OCCURRENCE_PLACEHOLDERS[target]
    escape_percent = target is ParameterStyle.POSITIONAL_PYFORMAT
    parts: list[str] = []
    params: list[LeafValue] = []
    cursor = 0
    for token in tokens:
        literal = query.sql[cursor : token.position]
        parts.append(literal.replace("%", "%%") if escape_percent else literal)
        parts.append(placeholder)
        params.append(query.params[token.number - 1])
        cursor = token.end
    tail = query.sql[cursor:]
    parts.append(tail.replace("%", "%%") if escape_percent else tail)
    return FlattenedQuery("".join(parts), tuple(params))
