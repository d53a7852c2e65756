from __future__ import annotations

from typing import Any

__all__ = (
    "AmbiguousTokenError",
    "CyclicFragmentReferenceError",
    "MalformedTokenError",
    "MaxDepthExceededError",
    "ParameterStyleMismatchError",
    "SQLFragmentError",
    "TokenCountMismatchError",
    "UnsupportedParameterTypeError",
)


class SQLFragmentError(Exception):
    """Base exception class from which all sqlfragment exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLFragmentError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class UnsupportedParameterTypeError(SQLFragmentError, TypeError):
    """Raised when a fragment is constructed with a parameter value of an unsupported type."""

    def __init__(self, position: int, type_name: str, message: str | None = None) -> None:
        self.position = position
        self.type_name = type_name
        if message is None:
            message = f"Unsupported parameter type {type_name!r} at position ${position}"
        super().__init__(message)


class TokenCountMismatchError(SQLFragmentError):
    """Raised when the tokens of a fragment do not reference exactly its parameters."""

    def __init__(
        self,
        path: str,
        parameter_count: int,
        missing_tokens: tuple[int, ...] = (),
        extra_tokens: tuple[int, ...] = (),
    ) -> None:
        self.path = path
        self.parameter_count = parameter_count
        self.missing_tokens = missing_tokens
        self.extra_tokens = extra_tokens
        problems = []
        if missing_tokens:
            problems.append("no token references parameter(s) " + ", ".join(f"${n}" for n in missing_tokens))
        if extra_tokens:
            problems.append("token(s) " + ", ".join(f"${n}" for n in extra_tokens) + " have no matching parameter")
        super().__init__(
            f"Token/parameter mismatch in fragment at {path} ({parameter_count} parameter(s)): " + "; ".join(problems)
        )


class MalformedTokenError(SQLFragmentError):
    """Raised for placeholder tokens that are not in canonical decimal form, e.g. ``$01``."""

    def __init__(self, path: str, token: str, position: int) -> None:
        self.path = path
        self.token = token
        self.position = position
        super().__init__(f"Malformed token {token!r} at offset {position} in fragment at {path}")


class CyclicFragmentReferenceError(SQLFragmentError):
    """Raised when a fragment (directly or transitively) contains itself."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Fragment at {path} is already being flattened higher up the tree")


class MaxDepthExceededError(SQLFragmentError):
    """Raised when fragment nesting is deeper than the configured limit."""

    def __init__(self, path: str, max_depth: int) -> None:
        self.path = path
        self.max_depth = max_depth
        super().__init__(f"Fragment nesting exceeds the maximum depth of {max_depth} at {path}")


class ParameterStyleMismatchError(SQLFragmentError):
    """Raised when a flattened query cannot be rendered in the requested parameter style."""


class AmbiguousTokenError(SQLFragmentError):
    """Raised when splicing a nested fragment would glue a literal ``$`` onto its leading digits."""

    def __init__(self, path: str, token: str, position: int) -> None:
        self.path = path
        self.token = token
        self.position = position
        super().__init__(
            f"Substituting {token!r} at offset {position} in fragment at {path} would follow a literal '$' "
            "with digits and form a new token"
        )
