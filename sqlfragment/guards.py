"""Type guard functions for fragment parameter values.

These checks run when a fragment is constructed so that an unsupported value
fails where it was written rather than later, during flattening.
"""

from collections.abc import Sequence
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from msgspec import UnsetType

from sqlfragment.exceptions import UnsupportedParameterTypeError

if TYPE_CHECKING:
    from typing_extensions import TypeGuard

    from sqlfragment.fragment import Fragment
    from sqlfragment.types import LeafValue, ParameterValue

__all__ = (
    "check_parameter",
    "check_parameters",
    "freeze_parameter",
    "is_binary",
    "is_fragment",
    "is_leaf_parameter",
    "is_number",
    "is_number_array",
    "is_string_array",
    "is_supported_parameter",
)

_BINARY_TYPES = (bytes, bytearray, memoryview)
_NUMBER_TYPES = (int, float, Decimal)
_ARRAY_TYPES = (list, tuple)


def is_fragment(obj: Any) -> "TypeGuard[Fragment]":
    """Check if an object is a :class:`~sqlfragment.fragment.Fragment`.

    Args:
        obj: The object to check

    Returns:
        True if the object is a Fragment, False otherwise
    """
    from sqlfragment.fragment import Fragment

    return isinstance(obj, Fragment)


def is_number(obj: Any) -> bool:
    return isinstance(obj, _NUMBER_TYPES) and not isinstance(obj, bool)


def is_binary(obj: Any) -> bool:
    return isinstance(obj, _BINARY_TYPES)


def is_string_array(obj: Any) -> bool:
    """Check for a list or tuple whose items are all strings."""
    return isinstance(obj, _ARRAY_TYPES) and all(isinstance(item, str) for item in obj)


def is_number_array(obj: Any) -> bool:
    """Check for a list or tuple whose items are all numbers.

    Booleans are not numbers here even though ``bool`` subclasses ``int``.
    """
    return isinstance(obj, _ARRAY_TYPES) and all(is_number(item) for item in obj)


def is_leaf_parameter(obj: Any) -> "TypeGuard[LeafValue]":
    """Check if a value can be handed to a driver as a single bind value."""
    return (
        obj is None
        or isinstance(obj, (str, bool, UnsetType))
        or is_number(obj)
        or is_binary(obj)
        or is_string_array(obj)
        or is_number_array(obj)
    )


def is_supported_parameter(obj: Any) -> "TypeGuard[ParameterValue]":
    """Check if a value may be used as a fragment parameter.

    Args:
        obj: The value to check

    Returns:
        True for leaf values and nested fragments, False otherwise
    """
    return is_leaf_parameter(obj) or is_fragment(obj)


def check_parameter(position: int, value: Any) -> None:
    """Raise if ``value`` is not a supported parameter.

    Args:
        position: 1-based position of the value, matching its ``$N`` token
        value: The value to check

    Raises:
        UnsupportedParameterTypeError: If the value's type is not supported.
    """
    if not is_supported_parameter(value):
        raise UnsupportedParameterTypeError(position, type(value).__name__)


def freeze_parameter(value: "ParameterValue") -> "ParameterValue":
    """Copy mutable leaf values so later changes by the caller cannot reach a fragment.

    Arrays become tuples and ``bytearray``/``memoryview`` become ``bytes``.
    """
    if isinstance(value, list):
        return tuple(value)
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    return value


def check_parameters(params: Any) -> "tuple[ParameterValue, ...]":
    """Validate a parameter sequence and freeze it and its values into a tuple.

    Raises:
        UnsupportedParameterTypeError: If ``params`` is not a sequence of supported values.
    """
    if isinstance(params, (str, *_BINARY_TYPES)) or not isinstance(params, Sequence):
        msg = f"Fragment parameters must be a list or tuple, got {type(params).__name__!r}"
        raise UnsupportedParameterTypeError(0, type(params).__name__, msg)
    for position, value in enumerate(params, start=1):
        check_parameter(position, value)
    return tuple(freeze_parameter(value) for value in params)
