import pytest

from sqlfragment.exceptions import (
    CyclicFragmentReferenceError,
    MalformedTokenError,
    MaxDepthExceededError,
    ParameterStyleMismatchError,
    SQLFragmentError,
    TokenCountMismatchError,
    UnsupportedParameterTypeError,
)


@pytest.mark.parametrize(
    "exc_class",
    [
        CyclicFragmentReferenceError,
        MalformedTokenError,
        MaxDepthExceededError,
        ParameterStyleMismatchError,
        TokenCountMismatchError,
        UnsupportedParameterTypeError,
    ],
)
def test_exception_hierarchy(exc_class: type) -> None:
    """Test every library exception derives from SQLFragmentError."""
    assert issubclass(exc_class, SQLFragmentError)


def test_unsupported_parameter_type_is_type_error() -> None:
    exc = UnsupportedParameterTypeError(3, "dict")
    assert isinstance(exc, TypeError)
    assert exc.position == 3
    assert exc.type_name == "dict"
    assert str(exc) == "Unsupported parameter type 'dict' at position $3"


def test_token_count_mismatch_message() -> None:
    """Test the mismatch message names missing and extra tokens and the fragment path."""
    exc = TokenCountMismatchError("root.$2", 3, missing_tokens=(2,), extra_tokens=(4, 5))

    assert exc.path == "root.$2"
    assert exc.parameter_count == 3
    assert exc.missing_tokens == (2,)
    assert exc.extra_tokens == (4, 5)
    message = str(exc)
    assert "root.$2" in message
    assert "no token references parameter(s) $2" in message
    assert "token(s) $4, $5 have no matching parameter" in message


def test_error_detail_and_repr() -> None:
    exc = SQLFragmentError("Something broke")
    assert exc.detail == "Something broke"
    assert str(exc) == "Something broke"
    assert repr(exc) == "SQLFragmentError - Something broke"
    assert repr(SQLFragmentError()) == "SQLFragmentError"


def test_positional_context_attributes() -> None:
    assert MalformedTokenError("root", "$01", 7).position == 7
    assert CyclicFragmentReferenceError("root.$1").path == "root.$1"
    exc = MaxDepthExceededError("root.$1.$1", 1)
    assert exc.max_depth == 1
    assert "maximum depth of 1" in str(exc)
