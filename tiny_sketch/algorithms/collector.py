"""
Build a sketch by draining a stream.

A StreamCollector ties a sketch to an upstream sequence: it constructs the
sketch, pulls every element from the sequence once, in order, maps each
element to a key and adds the key to the sketch. The sequence can be any
iterable, including the lazy stages in tiny_sketch.streaming.

Construction happens before the first element is pulled, so invalid
dimensions or error bounds raise without touching the sequence. Errors that
the sequence itself runs into while producing elements are the sequence's
business; see tiny_sketch.streaming.input.Input.
"""

import enum
import logging
from typing import Any, Callable, Generic, Iterable, Optional, Tuple, TypeVar, Union

from tiny_sketch.algorithms.bloom.base import BloomFilter
from tiny_sketch.algorithms.countmin import CountMinSketch
from tiny_sketch.core.errors import NilOperandError

logger = logging.getLogger(__name__)

T = TypeVar("T")  # Type for the elements of the stream

Sketch = Union[BloomFilter, CountMinSketch]
KeyFunction = Callable[[T], Any]


class SketchKind(enum.Enum):
    """The kind of sketch a collector builds."""

    MEMBERSHIP = "membership"
    FREQUENCY = "frequency"


def _factory_for(
    kind: SketchKind,
    dimensions: Optional[Tuple[int, int]],
    error_bounds: Optional[Tuple[Union[int, float], float]],
) -> Callable[[], Sketch]:
    if (dimensions is None) == (error_bounds is None):
        raise TypeError("Exactly one of dimensions or error_bounds must be given")

    if kind is SketchKind.MEMBERSHIP:
        if dimensions is not None:
            bit_size, hash_count = dimensions
            return lambda: BloomFilter(bit_size, hash_count)
        expected_items, false_positive_rate = error_bounds
        return lambda: BloomFilter.create_from_capacity(
            expected_items, false_positive_rate
        )

    if kind is SketchKind.FREQUENCY:
        if dimensions is not None:
            width, depth = dimensions
            return lambda: CountMinSketch(width, depth)
        epsilon, delta = error_bounds
        return lambda: CountMinSketch.create_from_error_rate(epsilon, delta)

    raise ValueError(f"Unknown sketch kind: {kind!r}")


def _drain(sketch: Sketch, kind: SketchKind, sequence: Iterable[T], key_fn: KeyFunction) -> int:
    """Add every element of the sequence to the sketch and return how many there were."""
    consumed = 0
    if kind is SketchKind.MEMBERSHIP:
        for element in sequence:
            sketch.update(key_fn(element))
            consumed += 1
    else:
        for element in sequence:
            sketch.update(key_fn(element), 1)
            consumed += 1
    return consumed


class StreamCollector(Generic[T]):
    """
    Generic builder that turns a stream of elements into a finished sketch.

    Each call to collect() builds a fresh sketch, so one collector can be
    reused for several streams.

    Example:
        collector = StreamCollector.for_kind(
            SketchKind.FREQUENCY, key_fn=lambda row: row[0], dimensions=(512, 6)
        )
        cms = collector.collect(rows)
    """

    def __init__(
        self,
        kind: SketchKind,
        factory: Callable[[], Sketch],
        key_fn: KeyFunction,
    ):
        """
        Initialize a collector.

        Args:
            kind: Whether the factory builds a membership or a frequency sketch.
            factory: Zero-argument callable that constructs an empty sketch.
            key_fn: Maps a stream element to the key added to the sketch.
        """
        self._kind = kind
        self._factory = factory
        self._key_fn = key_fn

    @classmethod
    def for_kind(
        cls,
        kind: SketchKind,
        key_fn: KeyFunction,
        *,
        dimensions: Optional[Tuple[int, int]] = None,
        error_bounds: Optional[Tuple[Union[int, float], float]] = None,
    ) -> "StreamCollector[T]":
        """
        Create a collector for a sketch kind and its construction parameters.

        Args:
            kind: The kind of sketch to build.
            key_fn: Maps a stream element to the key added to the sketch.
            dimensions: (bit_size, hash_count) for membership,
                        (width, depth) for frequency.
            error_bounds: (expected_items, false_positive_rate) for membership,
                          (epsilon, delta) for frequency.

        Returns:
            A new StreamCollector. Parameters are validated when collecting.

        Raises:
            TypeError: If not exactly one of dimensions and error_bounds is given.
        """
        return cls(kind, _factory_for(kind, dimensions, error_bounds), key_fn)

    @property
    def kind(self) -> SketchKind:
        return self._kind

    def collect(self, sequence: Iterable[T]) -> Sketch:
        """
        Build a sketch from every element of a sequence.

        Args:
            sequence: The elements to add, consumed exactly once.

        Returns:
            The completed sketch.

        Raises:
            InvalidDimensionError: If the sketch dimensions are invalid.
            InvalidErrorBoundError: If the sketch error bounds are invalid.
        """
        sketch = self._factory()
        logger.debug("Collecting into %r", sketch)

        consumed = _drain(sketch, self._kind, sequence, self._key_fn)

        logger.debug("Collected %d elements into %r", consumed, sketch)
        return sketch

    __call__ = collect


def collect_into(sketch: Optional[Sketch], sequence: Iterable[T], key_fn: KeyFunction) -> Sketch:
    """
    Drain a sequence into an existing sketch.

    Args:
        sketch: The sketch to add to.
        sequence: The elements to add, consumed exactly once.
        key_fn: Maps a stream element to the key added to the sketch.

    Returns:
        The same sketch, for chaining.

    Raises:
        NilOperandError: If sketch is None. The sequence is not touched.
        TypeError: If sketch is not a BloomFilter or CountMinSketch.
    """
    if sketch is None:
        raise NilOperandError("Cannot collect into None")

    if isinstance(sketch, BloomFilter):
        kind = SketchKind.MEMBERSHIP
    elif isinstance(sketch, CountMinSketch):
        kind = SketchKind.FREQUENCY
    else:
        raise TypeError(f"Cannot collect into {sketch.__class__.__name__}")

    consumed = _drain(sketch, kind, sequence, key_fn)
    logger.debug("Collected %d elements into %r", consumed, sketch)
    return sketch


def bloom_filter_collector(
    bit_size: int, hash_count: int, key_fn: KeyFunction
) -> StreamCollector:
    """Collector that builds a BloomFilter with explicit dimensions."""
    return StreamCollector.for_kind(
        SketchKind.MEMBERSHIP, key_fn, dimensions=(bit_size, hash_count)
    )


def bloom_filter_collector_from_capacity(
    expected_items: int, false_positive_rate: float, key_fn: KeyFunction
) -> StreamCollector:
    """Collector that builds a BloomFilter sized for a capacity and false positive rate."""
    return StreamCollector.for_kind(
        SketchKind.MEMBERSHIP,
        key_fn,
        error_bounds=(expected_items, false_positive_rate),
    )


def count_min_collector(width: int, depth: int, key_fn: KeyFunction) -> StreamCollector:
    """Collector that builds a CountMinSketch with explicit dimensions."""
    return StreamCollector.for_kind(
        SketchKind.FREQUENCY, key_fn, dimensions=(width, depth)
    )


def count_min_collector_from_error_rate(
    epsilon: float, delta: float, key_fn: KeyFunction
) -> StreamCollector:
    """Collector that builds a CountMinSketch from error bounds."""
    return StreamCollector.for_kind(
        SketchKind.FREQUENCY, key_fn, error_bounds=(epsilon, delta)
    )
