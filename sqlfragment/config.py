"""Flattening configuration."""

from typing import Final, Optional

from sqlfragment.types import ParameterStyle

__all__ = ("DEFAULT_MAX_DEPTH", "FlattenConfig")

DEFAULT_MAX_DEPTH: Final[int] = 64
"""Default maximum fragment nesting depth, well inside the interpreter's recursion limit."""


class FlattenConfig:
    """Declarative configuration for fragment flattening."""

    __slots__ = ("max_depth", "output_style")

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH, output_style: Optional[ParameterStyle] = None) -> None:
        """Initialize flattening configuration.

        Args:
            max_depth: Deepest allowed nesting; the root fragment is depth 0
            output_style: Placeholder style of the flattened SQL, ``$N`` when not given
        """
        if max_depth < 0:
            msg = f"max_depth must be zero or greater, got {max_depth}"
            raise ValueError(msg)
        self.max_depth = max_depth
        self.output_style = output_style or ParameterStyle.NUMERIC

    def __repr__(self) -> str:
        return f"{type(self).__name__}(max_depth={self.max_depth!r}, output_style={self.output_style!r})"
