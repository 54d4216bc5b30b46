"""Predicates over cell values and per-column filter sets for queries."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterable, Optional


class Filter(ABC):
    """A predicate applied to a raw cell value."""

    @abstractmethod
    def matches(self, value: bytes) -> bool:
        """Return True if ``value`` satisfies this filter."""


@dataclass(frozen=True)
class Equal(Filter):
    target: bytes

    def matches(self, value: bytes) -> bool:
        return bytes(value) == self.target


@dataclass(frozen=True)
class NotEqual(Filter):
    target: bytes

    def matches(self, value: bytes) -> bool:
        return bytes(value) != self.target


@dataclass(frozen=True)
class GreaterThan(Filter):
    target: bytes

    def matches(self, value: bytes) -> bool:
        return bytes(value) > self.target


@dataclass(frozen=True)
class GreaterThanOrEqual(Filter):
    target: bytes

    def matches(self, value: bytes) -> bool:
        return bytes(value) >= self.target


@dataclass(frozen=True)
class LessThan(Filter):
    target: bytes

    def matches(self, value: bytes) -> bool:
        return bytes(value) < self.target


@dataclass(frozen=True)
class LessThanOrEqual(Filter):
    target: bytes

    def matches(self, value: bytes) -> bool:
        return bytes(value) <= self.target


@dataclass(frozen=True)
class Contains(Filter):
    target: bytes

    def matches(self, value: bytes) -> bool:
        return self.target in bytes(value)


@dataclass(frozen=True)
class StartsWith(Filter):
    target: bytes

    def matches(self, value: bytes) -> bool:
        return bytes(value).startswith(self.target)


@dataclass(frozen=True)
class EndsWith(Filter):
    target: bytes

    def matches(self, value: bytes) -> bool:
        return bytes(value).endswith(self.target)


@lru_cache(maxsize=256)
def _compile(pattern: str) -> Optional[re.Pattern]:
    try:
        return re.compile(pattern)
    except re.error:
        return None


@dataclass(frozen=True)
class Regex(Filter):
    """Matches UTF-8 values in which the pattern is found.

    Values that are not valid UTF-8, and patterns that do not compile,
    never match.
    """

    pattern: str

    def matches(self, value: bytes) -> bool:
        try:
            text = bytes(value).decode("utf-8")
        except UnicodeDecodeError:
            return False
        compiled = _compile(self.pattern)
        if compiled is None:
            return False
        return compiled.search(text) is not None


@dataclass(frozen=True)
class And(Filter):
    """Matches when every contained filter matches."""

    filters: tuple[Filter, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "filters", tuple(self.filters))

    def matches(self, value: bytes) -> bool:
        return all(f.matches(value) for f in self.filters)


@dataclass(frozen=True)
class Or(Filter):
    """Matches when any contained filter matches."""

    filters: tuple[Filter, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "filters", tuple(self.filters))

    def matches(self, value: bytes) -> bool:
        return any(f.matches(value) for f in self.filters)


@dataclass(frozen=True)
class Not(Filter):
    """Negates the contained filter."""

    filter: Filter

    def matches(self, value: bytes) -> bool:
        return not self.filter.matches(value)


@dataclass(frozen=True)
class ColumnFilter:
    column: bytes
    filter: Filter


@dataclass
class FilterSet:
    """Column filters plus optional timestamp range and version limit."""

    column_filters: list[ColumnFilter] = field(default_factory=list)
    timestamp_range: Optional[tuple[Optional[int], Optional[int]]] = None
    max_versions: Optional[int] = None

    def add_column_filter(self, column: bytes, filter: Filter) -> "FilterSet":
        self.column_filters.append(ColumnFilter(bytes(column), filter))
        return self

    def with_timestamp_range(
        self, min_ts: Optional[int], max_ts: Optional[int]
    ) -> "FilterSet":
        self.timestamp_range = (min_ts, max_ts)
        return self

    def with_max_versions(self, max_versions: int) -> "FilterSet":
        self.max_versions = max_versions
        return self

    def timestamp_matches(self, timestamp: int) -> bool:
        """Return True if ``timestamp`` lies within the inclusive range, if any."""
        if self.timestamp_range is None:
            return True
        min_ts, max_ts = self.timestamp_range
        if min_ts is not None and timestamp < min_ts:
            return False
        if max_ts is not None and timestamp > max_ts:
            return False
        return True

    def filters_for(self, column: bytes) -> Iterable[Filter]:
        """Yield the filters attached to ``column``."""
        column = bytes(column)
        return (cf.filter for cf in self.column_filters if cf.column == column)