"""Recursive fragment flattening.

A fragment tree is flattened bottom-up. Each fragment's parameters are first
turned into *expansions*: a plain value expands to a single ``$1`` placeholder
holding that value, a nested fragment expands to its own flattened SQL and
parameters. The fragment's SQL is then walked left to right and every token is
replaced with the expansion it references.

Placeholder numbers are assigned per expansion, in order of first appearance,
only after the order of all expansions is known. A token that repeats reuses
the numbers of its first occurrence and contributes no further values, so one
logical reference always maps to one set of driver parameters.

A fragment without nested fragments is already flat and is returned exactly
as written, including the order of its parameters.
"""

from typing import TYPE_CHECKING, Optional

from sqlfragment.config import FlattenConfig
from sqlfragment.exceptions import AmbiguousTokenError, CyclicFragmentReferenceError, MaxDepthExceededError
from sqlfragment.guards import is_fragment
from sqlfragment.tokens import ROOT_PATH, TokenValidator, renumber_tokens
from sqlfragment.types import FlattenedQuery, ParameterStyle
from sqlfragment.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlfragment.fragment import Fragment
    from sqlfragment.types import LeafValue

__all__ = ("Flattener", "flatten")

logger = get_logger("flatten")

# (sql numbered from $1, params, height of the subtree below the fragment)
_Expansion = tuple[str, "tuple[LeafValue, ...]", int]


class Flattener:
    """Flattens fragment trees into a single :class:`~sqlfragment.types.FlattenedQuery`.

    A flattener keeps no per-call state, so one instance can be shared by any
    number of callers.
    """

    __slots__ = ("config", "validator")

    def __init__(self, config: Optional[FlattenConfig] = None, validator: Optional[TokenValidator] = None) -> None:
        self.config = config or FlattenConfig()
        self.validator = validator or TokenValidator()

    def flatten(self, root: "Fragment") -> FlattenedQuery:
        """Flatten a fragment tree.

        Args:
            root: The outermost fragment

        Raises:
            TypeError: If ``root`` is not a fragment.
            TokenCountMismatchError: If any fragment's tokens do not match its parameters.
            MalformedTokenError: If any fragment contains a token such as ``$01``.
            CyclicFragmentReferenceError: If a fragment contains itself.
            MaxDepthExceededError: If nesting is deeper than ``config.max_depth``.
            AmbiguousTokenError: If a literal ``$`` would run into a nested fragment's leading digits.

        Returns:
            The flattened SQL and its parameters
        """
        if not is_fragment(root):
            msg = f"Expected a Fragment, got {type(root).__name__!r}"
            raise TypeError(msg)

        memo: dict[int, _Expansion] = {}
        sql, params, height = self._flatten_node(root, ROOT_PATH, 0, set(), memo)
        result = FlattenedQuery(sql, params)
        logger.debug(
            "Flattened fragment tree",
            extra={"extra_fields": {"fragments": len(memo), "depth": height, "parameters": len(params)}},
        )
        if self.config.output_style is not ParameterStyle.NUMERIC:
            return result.to_style(self.config.output_style)
        return result

    def _flatten_node(
        self, fragment: "Fragment", path: str, depth: int, on_stack: set[int], memo: dict[int, _Expansion]
    ) -> _Expansion:
        key = id(fragment)
        if key in on_stack:
            raise CyclicFragmentReferenceError(path)
        if depth > self.config.max_depth:
            raise MaxDepthExceededError(path, self.config.max_depth)
        if key in memo:
            cached = memo[key]
            if depth + cached[2] > self.config.max_depth:
                raise MaxDepthExceededError(path, self.config.max_depth)
            return cached

        sql = fragment.sql
        tokens = self.validator.validate_tokens(sql, len(fragment.params), path)
        if not any(is_fragment(value) for value in fragment.params):
            # Already flat: keep the author's own numbering.
            memo[key] = (sql, fragment.params, 0)
            return memo[key]

        expansions: list[_Expansion] = []
        on_stack.add(key)
        try:
            for position, value in enumerate(fragment.params, start=1):
                if is_fragment(value):
                    expansions.append(self._flatten_node(value, f"{path}.${position}", depth + 1, on_stack, memo))
                else:
                    expansions.append(("$1", (value,), -1))
        finally:
            on_stack.discard(key)

        # Fix the numbering of every expansion before writing any SQL.
        offsets: dict[int, int] = {}
        params: list[LeafValue] = []
        for token in tokens:
            if token.number not in offsets:
                offsets[token.number] = len(params)
                params.extend(expansions[token.number - 1][1])

        rendered = {number: renumber_tokens(expansions[number - 1][0], offset) for number, offset in offsets.items()}
        parts: list[str] = []
        cursor = 0
        ends_with_dollar = False
        for token in tokens:
            literal = sql[cursor : token.position]
            expansion = rendered[token.number]
            if literal:
                ends_with_dollar = literal.endswith("$")
            if ends_with_dollar and expansion and expansion[0] in "0123456789":
                raise AmbiguousTokenError(path, token.placeholder_text, token.position)
            if expansion:
                ends_with_dollar = expansion.endswith("$")
            parts.append(literal)
            parts.append(expansion)
            cursor = token.end
        parts.append(sql[cursor:])

        height = 1 + max((expansion[2] for expansion in expansions), default=-1)
        result: _Expansion = ("".join(parts), tuple(params), height)
        memo[key] = result
        return result


_default_flattener = Flattener()


def flatten(root: "Fragment", config: Optional[FlattenConfig] = None) -> FlattenedQuery:
    """Flatten a fragment tree into one SQL string and one parameter tuple.

    Args:
        root: The outermost fragment
        config: Optional flattening configuration

    Returns:
        The flattened query
    """
    if config is None:
        return _default_flattener.flatten(root)
    return Flattener(config, _default_flattener.validator).flatten(root)
