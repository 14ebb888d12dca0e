"""
Lazy, pull-based stream stages.

Stream wraps any iterable and chains stages that each return a new Stream.
Nothing is read from the source until a terminal operation (or a collector)
starts pulling, and stages only pull as far as their consumer does: take(),
first() and any_match() stop reading the source as soon as they have their
answer.

Example:
    apples = Stream(lines).filter(lambda line: line == "apple").count()

    cms = (
        Stream(records)
        .map(lambda record: record[0])
        .into(count_min_collector(512, 6, key_fn=str))
    )
"""

import itertools
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Hashable,
    Iterable,
    Iterator,
    List,
    NamedTuple,
    Optional,
    TypeVar,
)

T = TypeVar("T")
U = TypeVar("U")
K = TypeVar("K")
R = TypeVar("R")


class AggregateResult(NamedTuple):
    """Result of first()/last(); ok is False when the stream was empty."""

    value: Any
    ok: bool


class Stream(Generic[T]):
    """A lazily evaluated sequence of elements."""

    def __init__(self, source: Iterable[T]):
        self._source = source

    def __iter__(self) -> Iterator[T]:
        return iter(self._source)

    # Stages

    def filter(self, predicate: Callable[[T], bool]) -> "Stream[T]":
        """Keep the elements for which predicate returns True."""
        return Stream(_filter(self._source, predicate))

    def map(self, fn: Callable[[T], U]) -> "Stream[U]":
        """Replace every element with fn(element)."""
        return Stream(_map(self._source, fn))

    def flat_map(self, fn: Callable[[T], Iterable[U]]) -> "Stream[U]":
        """Replace every element with the elements of fn(element)."""
        return Stream(_flat_map(self._source, fn))

    def distinct(self) -> "Stream[T]":
        """Drop elements equal to one already produced. Elements must be hashable."""
        return Stream(_distinct(self._source))

    def take(self, n: int) -> "Stream[T]":
        """Produce at most the first n elements."""
        return Stream(_take(self._source, n))

    def sort(self, key: Optional[Callable[[T], Any]] = None, reverse: bool = False) -> "Stream[T]":
        """
        Sort the elements.

        This stage reads the whole upstream before producing anything. The
        sort is stable.
        """
        return Stream(_sort(self._source, key, reverse))

    # Terminal operations

    def collect(self) -> List[T]:
        """Read every element into a list."""
        return list(self._source)

    def reduce(self, fn: Callable[[R, T], R], initial: R) -> R:
        """Fold the elements into a single value, starting from initial."""
        result = initial
        for element in self._source:
            result = fn(result, element)
        return result

    def count(self) -> int:
        """Count the elements."""
        return sum(1 for _ in self._source)

    def any_match(self, predicate: Callable[[T], bool]) -> bool:
        """True if some element satisfies predicate; stops at the first one."""
        return any(predicate(element) for element in self._source)

    def all_match(self, predicate: Callable[[T], bool]) -> bool:
        """True if every element satisfies predicate; stops at the first failure."""
        return all(predicate(element) for element in self._source)

    def first(self) -> AggregateResult:
        """The first element, reading nothing past it."""
        for element in self._source:
            return AggregateResult(element, True)
        return AggregateResult(None, False)

    def last(self) -> AggregateResult:
        """The last element."""
        result = AggregateResult(None, False)
        for element in self._source:
            result = AggregateResult(element, True)
        return result

    def group_by(self, key_fn: Callable[[T], K]) -> Dict[K, List[T]]:
        """Group elements by key_fn, keeping their order within each group."""
        groups: Dict[K, List[T]] = {}
        for element in self._source:
            groups.setdefault(key_fn(element), []).append(element)
        return groups

    def into(self, collector: Callable[[Iterable[T]], R]) -> R:
        """Hand this stream to a collector, such as a StreamCollector."""
        return collector(self)


def _filter(source: Iterable[T], predicate: Callable[[T], bool]) -> Iterator[T]:
    for element in source:
        if predicate(element):
            yield element


def _map(source: Iterable[T], fn: Callable[[T], U]) -> Iterator[U]:
    for element in source:
        yield fn(element)


def _flat_map(source: Iterable[T], fn: Callable[[T], Iterable[U]]) -> Iterator[U]:
    for element in source:
        yield from fn(element)


def _distinct(source: Iterable[Hashable]) -> Iterator[Hashable]:
    seen = set()
    for element in source:
        if element in seen:
            continue
        seen.add(element)
        yield element


def _take(source: Iterable[T], n: int) -> Iterator[T]:
    if n <= 0:
        return
    # islice stops right after the nth element without pulling another
    yield from itertools.islice(source, n)


def _sort(source: Iterable[T], key: Optional[Callable[[T], Any]], reverse: bool) -> Iterator[T]:
    yield from sorted(source, key=key, reverse=reverse)
