"""Placeholder token extraction and validation.

Tokens are ``$`` followed by the longest run of ASCII decimal digits, so ``$10``
is always token 10 and never token 1 followed by a literal ``0``. A ``$`` that
is not followed by a digit is ordinary SQL text.
"""

import re
from functools import lru_cache
from typing import TYPE_CHECKING, Final

from sqlfragment.exceptions import MalformedTokenError, TokenCountMismatchError
from sqlfragment.types import TokenInfo

if TYPE_CHECKING:
    from functools import _CacheInfo

__all__ = (
    "DEFAULT_CACHE_SIZE",
    "MAX_TOKEN_DIGITS",
    "TOKEN_PATTERN",
    "TokenValidator",
    "extract_tokens",
    "renumber_tokens",
    "validate_tokens",
)

TOKEN_PATTERN: Final = re.compile(r"\$(?P<number>[0-9]+)")
"""Greedy ``$N`` token pattern."""

MAX_TOKEN_DIGITS: Final[int] = 18
"""Longest digit run accepted as a token; anything longer cannot index a parameter."""

DEFAULT_CACHE_SIZE: Final[int] = 1024

ROOT_PATH: Final = "root"


def _scan_tokens(sql: str) -> tuple[TokenInfo, ...]:
    tokens: list[TokenInfo] = []
    for ordinal, match in enumerate(TOKEN_PATTERN.finditer(sql)):
        digits = match.group("number")
        if (len(digits) > 1 and digits[0] == "0") or len(digits) > MAX_TOKEN_DIGITS:
            raise MalformedTokenError(ROOT_PATH, match.group(0), match.start())
        tokens.append(
            TokenInfo(number=int(digits), position=match.start(), ordinal=ordinal, placeholder_text=match.group(0))
        )
    return tuple(tokens)


class TokenValidator:
    """Extracts ``$N`` tokens and checks them against a parameter count."""

    __slots__ = ("_scan",)

    def __init__(self, cache_size: int = DEFAULT_CACHE_SIZE) -> None:
        """Initialize validator with a bounded extraction cache.

        Args:
            cache_size: Number of distinct SQL texts whose tokens are kept
        """
        self._scan = lru_cache(maxsize=cache_size)(_scan_tokens)

    def extract_tokens(self, sql: str, path: str = ROOT_PATH) -> tuple[TokenInfo, ...]:
        """Extract every token occurrence from SQL text.

        Args:
            sql: SQL text to scan
            path: Location of the owning fragment, used in error messages

        Raises:
            MalformedTokenError: If a digit run carries a leading zero or is too long to be a parameter index.

        Returns:
            Token occurrences, sorted by position
        """
        try:
            return self._scan(sql)
        except MalformedTokenError as exc:
            raise MalformedTokenError(path, exc.token, exc.position) from None

    def validate_tokens(self, sql: str, parameter_count: int, path: str = ROOT_PATH) -> tuple[TokenInfo, ...]:
        """Check that the distinct tokens in ``sql`` are exactly ``{1..parameter_count}``.

        Args:
            sql: SQL text to check
            parameter_count: Number of parameters the owning fragment holds
            path: Location of the owning fragment, used in error messages

        Raises:
            TokenCountMismatchError: If a parameter is never referenced or a token has no parameter.

        Returns:
            Token occurrences, sorted by position
        """
        tokens = self.extract_tokens(sql, path)
        referenced = {token.number for token in tokens}
        expected = set(range(1, parameter_count + 1))
        if referenced != expected:
            raise TokenCountMismatchError(
                path,
                parameter_count,
                missing_tokens=tuple(sorted(expected - referenced)),
                extra_tokens=tuple(sorted(referenced - expected)),
            )
        return tokens

    def cache_info(self) -> "_CacheInfo":
        """Return hit, miss and size counters of the extraction cache."""
        return self._scan.cache_info()

    def clear_cache(self) -> None:
        self._scan.cache_clear()


_default_validator = TokenValidator()


def extract_tokens(sql: str, path: str = ROOT_PATH) -> tuple[TokenInfo, ...]:
    """Extract token occurrences using the shared validator."""
    return _default_validator.extract_tokens(sql, path)


def validate_tokens(sql: str, parameter_count: int, path: str = ROOT_PATH) -> tuple[TokenInfo, ...]:
    """Validate tokens using the shared validator."""
    return _default_validator.validate_tokens(sql, parameter_count, path)


def renumber_tokens(sql: str, offset: int) -> str:
    """Shift every token in already-validated SQL text by ``offset``."""
    if not offset:
        return sql
    return TOKEN_PATTERN.sub(lambda match: f"${int(match.group('number')) + offset}", sql)
