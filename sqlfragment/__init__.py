"""Compose parameterized SQL from nested fragments and flatten it for ``$N`` drivers."""

from sqlfragment.config import FlattenConfig
from sqlfragment.converter import convert_placeholders
from sqlfragment.exceptions import (
    AmbiguousTokenError,
    CyclicFragmentReferenceError,
    MalformedTokenError,
    MaxDepthExceededError,
    ParameterStyleMismatchError,
    SQLFragmentError,
    TokenCountMismatchError,
    UnsupportedParameterTypeError,
)
from sqlfragment.flatten import Flattener, flatten
from sqlfragment.fragment import Fragment
from sqlfragment.types import UNSET, FlattenedQuery, ParameterStyle

__all__ = (
    "UNSET",
    "AmbiguousTokenError",
    "CyclicFragmentReferenceError",
    "FlattenConfig",
    "FlattenedQuery",
    "Flattener",
    "Fragment",
    "MalformedTokenError",
    "MaxDepthExceededError",
    "ParameterStyle",
    "ParameterStyleMismatchError",
    "SQLFragmentError",
    "TokenCountMismatchError",
    "UnsupportedParameterTypeError",
    "convert_placeholders",
    "flatten",
)
