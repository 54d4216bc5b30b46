import pytest

from redbase.filter import (
    And,
    ColumnFilter,
    Contains,
    EndsWith,
    Equal,
    FilterSet,
    GreaterThan,
    GreaterThanOrEqual,
    LessThan,
    LessThanOrEqual,
    Not,
    NotEqual,
    Or,
    Regex,
    StartsWith,
)

EMAIL = r"^[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}$"


def test_equal():
    assert Equal(b"value1").matches(b"value1") is True
    assert Equal(b"value2").matches(b"value1") is False


def test_not_equal():
    assert NotEqual(b"value2").matches(b"value1") is True
    assert NotEqual(b"value1").matches(b"value1") is False


def test_contains():
    f = Contains(b"world")
    assert f.matches(b"hello world") is True
    assert f.matches(b"goodbye world") is True
    assert f.matches(b"hello rust") is False


def test_contains_empty_and_longer_target():
    assert Contains(b"").matches(b"") is True
    assert Contains(b"abc").matches(b"ab") is False


def test_starts_and_ends_with():
    assert StartsWith(b"hel").matches(b"hello") is True
    assert StartsWith(b"llo").matches(b"hello") is False
    assert EndsWith(b"llo").matches(b"hello") is True
    assert EndsWith(b"hel").matches(b"hello") is False


@pytest.mark.parametrize(
    "value,expected", [(b"10", False), (b"20", False), (b"30", True), (b"40", True), (b"50", True)]
)
def test_greater_than_bytewise(value, expected):
    assert GreaterThan(b"20").matches(value) is expected


def test_ordering_filters_inclusive_bounds():
    assert GreaterThanOrEqual(b"20").matches(b"20") is True
    assert LessThan(b"20").matches(b"20") is False
    assert LessThanOrEqual(b"20").matches(b"20") is True
    assert LessThan(b"20").matches(b"100") is True


def test_regex_email():
    f = Regex(EMAIL)
    assert f.matches(b"user123@example.com") is True
    assert f.matches(b"user456@example.org") is True
    assert f.matches(b"not-an-email") is False


def test_regex_digits():
    assert Regex(r"^\d+$").matches(b"12345") is True


def test_regex_invalid_pattern_never_matches():
    assert Regex(r"[unclosed-bracket").matches(b"user123@example.com") is False


def test_regex_non_utf8_never_matches():
    assert Regex(r".*").matches(b"\xff\xfe") is False


def test_regex_unanchored_search():
    f = Regex(r"@example\.com$")
    assert f.matches(b"user123@example.com") is True
    assert f.matches(b"user456@example.org") is False


def test_and_or_not():
    both = And([StartsWith(b"val"), EndsWith(b"1")])
    assert both.matches(b"value1") is True
    assert both.matches(b"value2") is False
    either = Or([Equal(b"a"), Equal(b"b")])
    assert either.matches(b"b") is True
    assert either.matches(b"c") is False
    assert Not(Equal(b"a")).matches(b"a") is False
    assert Not(Equal(b"a")).matches(b"b") is True


def test_empty_and_or():
    assert And([]).matches(b"x") is True
    assert Or([]).matches(b"x") is False


def test_filter_set_add_column_filter_chains():
    fs = FilterSet()
    result = fs.add_column_filter(b"col1", Equal(b"value1")).add_column_filter(
        b"col2", Equal(b"value2")
    )
    assert result is fs
    assert fs.column_filters == [
        ColumnFilter(b"col1", Equal(b"value1")),
        ColumnFilter(b"col2", Equal(b"value2")),
    ]
    assert list(fs.filters_for(b"col1")) == [Equal(b"value1")]
    assert list(fs.filters_for(b"col3")) == []


def test_filter_set_defaults():
    fs = FilterSet()
    assert fs.timestamp_range is None
    assert fs.max_versions is None
    assert fs.timestamp_matches(0) is True


def test_filter_set_timestamp_range():
    fs = FilterSet().with_timestamp_range(100, 200)
    assert fs.timestamp_matches(100) is True
    assert fs.timestamp_matches(200) is True
    assert fs.timestamp_matches(99) is False
    assert fs.timestamp_matches(201) is False


def test_filter_set_open_ended_range():
    assert FilterSet().with_timestamp_range(None, 50).timestamp_matches(0) is True
    assert FilterSet().with_timestamp_range(50, None).timestamp_matches(10**12) is True
    assert FilterSet().with_timestamp_range(50, None).timestamp_matches(49) is False


def test_filter_set_max_versions():
    fs = FilterSet().with_max_versions(3)
    assert fs.max_versions == 3