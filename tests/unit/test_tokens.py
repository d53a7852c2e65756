"""Unit tests for sqlfragment.tokens."""

import pytest

from sqlfragment.exceptions import MalformedTokenError, TokenCountMismatchError
from sqlfragment.tokens import TokenValidator, renumber_tokens
from sqlfragment.types import TokenInfo


@pytest.fixture
def validator() -> TokenValidator:
    """Create a TokenValidator instance."""
    return TokenValidator()


@pytest.mark.parametrize(
    "sql,expected_numbers",
    [
        ("SELECT 1", []),
        ("id = $1", [1]),
        ("a = $1 AND b = $2", [1, 2]),
        ("a = $2 OR b = $1 OR c = $2", [2, 1, 2]),
        ("x IN ($10, $1)", [10, 1]),
        ("$12", [12]),
        ("price$3", [3]),
        ("$$body$$ || $name || $1", [1]),
    ],
    ids=["no_tokens", "single", "two", "repeated", "greedy_two_digits", "greedy_alone", "adjacent_text", "non_tokens"],
)
def test_extract_tokens(validator: TokenValidator, sql: str, expected_numbers: list[int]) -> None:
    """Test token extraction follows the longest digit run after each dollar sign."""
    tokens = validator.extract_tokens(sql)

    assert [token.number for token in tokens] == expected_numbers
    assert [token.ordinal for token in tokens] == list(range(len(expected_numbers)))


def test_extract_tokens_positions(validator: TokenValidator) -> None:
    sql = "a = $1 AND b = $10"
    first, second = validator.extract_tokens(sql)

    assert first == TokenInfo(number=1, position=4, ordinal=0, placeholder_text="$1")
    assert second.position == sql.index("$10")
    assert second.placeholder_text == "$10"
    assert second.end == len(sql)


def test_extract_tokens_is_cached(validator: TokenValidator) -> None:
    """Test the same SQL text returns the same token tuple object."""
    sql = "a = $1"
    tokens = validator.extract_tokens(sql)

    assert isinstance(tokens, tuple)
    assert validator.extract_tokens(sql) is tokens
    validator.clear_cache()
    assert validator.extract_tokens(sql) == (TokenInfo(1, 4, 0, "$1"),)


def test_extract_tokens_cache_is_bounded() -> None:
    validator = TokenValidator(cache_size=2)
    for number in range(1, 6):
        validator.extract_tokens(f"a = ${number}")

    info = validator.cache_info()
    assert info.maxsize == 2
    assert info.currsize == 2


@pytest.mark.parametrize("digits", ["1" * 19, "1" * 5000], ids=["just_over_limit", "huge_digit_run"])
def test_overlong_token_is_malformed(validator: TokenValidator, digits: str) -> None:
    """Test a digit run too long to index a parameter is reported as a malformed token."""
    sql = f"a = $1 OR b = ${digits}"
    with pytest.raises(MalformedTokenError, match="Malformed token") as exc_info:
        validator.validate_tokens(sql, 1, path="root.$2")

    assert exc_info.value.path == "root.$2"
    assert exc_info.value.position == sql.index("$" + digits[:2])


def test_longest_accepted_token(validator: TokenValidator) -> None:
    (token,) = validator.extract_tokens("$" + "9" * 18)
    assert token.number == 999_999_999_999_999_999


@pytest.mark.parametrize("sql", ["a = $01", "a = $1 AND b = $007"], ids=["leading_zero", "late_leading_zero"])
def test_leading_zero_token_is_malformed(validator: TokenValidator, sql: str) -> None:
    with pytest.raises(MalformedTokenError, match="Malformed token") as exc_info:
        validator.extract_tokens(sql, path="root.$3")

    assert exc_info.value.path == "root.$3"
    assert exc_info.value.position == sql.index("$0")


@pytest.mark.parametrize(
    "sql,parameter_count",
    [("SELECT 1", 0), ("a = $1", 1), ("a = $1 OR b = $1", 1), ("a = $2 AND b = $1", 2), ("$1$2$3", 3)],
    ids=["empty", "single", "repeated", "out_of_order", "adjacent"],
)
def test_validate_tokens_accepts_exact_sets(validator: TokenValidator, sql: str, parameter_count: int) -> None:
    tokens = validator.validate_tokens(sql, parameter_count)
    assert {token.number for token in tokens} == set(range(1, parameter_count + 1))


@pytest.mark.parametrize(
    "sql,parameter_count,missing,extra",
    [
        ("city = $1 OR display_name = $2", 1, (), (2,)),
        ("city = $1", 2, (2,), ()),
        ("a = $1 AND b = $3", 2, (2,), (3,)),
        ("a = $1 AND b = $3", 3, (2,), ()),
        ("a = $0", 0, (), (0,)),
        ("SELECT 1", 1, (1,), ()),
    ],
    ids=["extra_token", "unreferenced_parameter", "gap_two", "gap_three", "zero_token", "no_tokens"],
)
def test_validate_tokens_rejects_mismatch(
    validator: TokenValidator, sql: str, parameter_count: int, missing: tuple[int, ...], extra: tuple[int, ...]
) -> None:
    with pytest.raises(TokenCountMismatchError) as exc_info:
        validator.validate_tokens(sql, parameter_count, path="root.$1")

    assert exc_info.value.missing_tokens == missing
    assert exc_info.value.extra_tokens == extra
    assert exc_info.value.path == "root.$1"


@pytest.mark.parametrize(
    "sql,offset,expected",
    [
        ("a = $1 AND b = $2", 0, "a = $1 AND b = $2"),
        ("a = $1 AND b = $2", 3, "a = $4 AND b = $5"),
        ("a = $9 OR b = $9", 1, "a = $10 OR b = $10"),
        ("no tokens", 5, "no tokens"),
    ],
    ids=["no_offset", "shift", "carry_digit", "nothing_to_shift"],
)
def test_renumber_tokens(sql: str, offset: int, expected: str) -> None:
    assert renumber_tokens(sql, offset) == expected
