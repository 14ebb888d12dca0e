"""
Count-Min Sketch implementation for TinySketch.

This module provides the implementation of Count-Min Sketch, a probabilistic
data structure used for frequency estimation in data streams with bounded
memory usage.

The Count-Min Sketch provides the following guarantees:
1. Space Complexity: O(width * depth) where width and depth are parameters
2. Update Time: O(depth)
3. Query Time: O(depth)
4. Error Bound: With probability at least 1-delta, the error is at most epsilon * N,
   where N is the sum of all frequencies and epsilon and delta are functions of width and depth.

References:
    - Cormode, G., & Muthukrishnan, S. (2005). An improved data stream summary:
      The count-min sketch and its applications. Journal of Algorithms, 55(1), 58-75.
"""

import array
import logging
import math
import sys
from typing import Any, Dict, Iterable, Tuple, TypeVar

from tiny_sketch.core.base import FrequencyEstimator
from tiny_sketch.core.errors import InvalidDimensionError, InvalidErrorBoundError
from tiny_sketch.core.hash import hash_position

logger = logging.getLogger(__name__)

T = TypeVar("T")  # Type for the items being processed

MAX_COUNTER = 2**64 - 1


class CountMinSketch(FrequencyEstimator[T]):
    """
    Count-Min Sketch for frequency estimation in data streams.

    This implementation uses a 2D array of counters, one row per hash round,
    to estimate item frequencies with a bounded memory footprint. It provides
    an estimate that is always greater than or equal to the true frequency.

    Example:
        cms = CountMinSketch.create_from_error_rate(epsilon=0.01, delta=0.01)
        cms.update("apple", count=5)
        cms.update("banana")
        cms.estimate_frequency("apple")  # >= 5
    """

    def __init__(self, width: int, depth: int):
        """
        Initialize a new Count-Min Sketch.

        Args:
            width: The number of counters per row (columns).
                  Larger values reduce the collision rate and improve accuracy.
            depth: The number of rows, one hash round each.
                  Larger values reduce the probability of a large error.

        Raises:
            InvalidDimensionError: If width or depth is less than 1.
        """
        super().__init__()

        if width <= 0:
            raise InvalidDimensionError("Width must be at least 1")
        if depth <= 0:
            raise InvalidDimensionError("Depth must be at least 1")

        self._width = width
        self._depth = depth

        # Unsigned 64-bit counters, one array per row
        self._counters = [array.array("Q", bytes(width * 8)) for _ in range(depth)]

        self._total_frequency = 0

        # Error bounds implied by the dimensions
        self._epsilon = math.e / width
        self._delta = math.exp(-depth)

        logger.debug("Created CountMinSketch: width=%d depth=%d", width, depth)

    @classmethod
    def create_from_error_rate(cls, epsilon: float, delta: float) -> "CountMinSketch[T]":
        """
        Create a Count-Min Sketch with the desired error guarantees.

        Width is ceil(e / epsilon) and depth is ceil(-ln(delta)).

        Args:
            epsilon: The error factor (errors will be less than epsilon * total_count)
            delta: The probability of exceeding the error bound

        Returns:
            A new Count-Min Sketch configured for the specified error bounds

        Raises:
            InvalidErrorBoundError: If epsilon is not positive or delta is not
                                    between 0 and 1.
        """
        if not epsilon > 0:
            raise InvalidErrorBoundError("Epsilon must be greater than 0")
        if not (0 < delta < 1):
            raise InvalidErrorBoundError("Delta must be between 0 and 1")

        width = math.ceil(math.e / epsilon)
        depth = math.ceil(-math.log(delta))

        logger.debug(
            "Derived CountMinSketch dimensions for epsilon=%g delta=%g: width=%d depth=%d",
            epsilon,
            delta,
            width,
            depth,
        )
        return cls(width, depth)

    @property
    def width(self) -> int:
        """Number of counters per row."""
        return self._width

    @property
    def depth(self) -> int:
        """Number of rows."""
        return self._depth

    @property
    def total_count(self) -> int:
        """Sum of all counts added to the sketch."""
        return self._total_frequency

    @property
    def epsilon(self) -> float:
        """Additive error factor implied by the width."""
        return self._epsilon

    @property
    def delta(self) -> float:
        """Failure probability implied by the depth."""
        return self._delta

    @property
    def dimensions(self) -> Tuple[int, int]:
        return (self._width, self._depth)

    def _hash(self, item: T, row: int) -> int:
        """
        Get the column of an item in a row.

        Args:
            item: The item to hash.
            row: The row index (0 to depth-1).

        Returns:
            The counter index for the given item and row.
        """
        return hash_position(item, row, self._width)

    def update(self, item: T, count: int = 1) -> None:
        """
        Update the sketch with a new item from the stream.

        This method adds count to one counter in each row, at the column
        chosen by that row's hash.

        Args:
            item: The item to add to the sketch.
            count: How many occurrences to add (default is 1).
                  Supports batch increments.

        Raises:
            ValueError: If count is negative or does not fit a counter.
            OverflowError: If a counter would exceed MAX_COUNTER. The sketch
                           is left unchanged.
        """
        if count < 0:
            raise ValueError("Count must be non-negative")
        if count > MAX_COUNTER:
            raise ValueError(f"Count must be at most {MAX_COUNTER}")

        if count == 0:
            return

        positions = [self._hash(item, i) for i in range(self._depth)]
        updated = [
            self._counters[i][j] + count for i, j in enumerate(positions)
        ]
        if max(updated) > MAX_COUNTER:
            raise OverflowError("Counter overflow while adding to Count-Min Sketch")

        for i, j in enumerate(positions):
            self._counters[i][j] = updated[i]

        super().update(item)
        self._total_frequency += count

    def estimate_frequency(self, item: T) -> int:
        """
        Estimate the frequency of an item in the stream.

        This method applies the same hash functions used during updates
        and returns the minimum counter value as the estimate.

        Args:
            item: The item to estimate the frequency for.

        Returns:
            The estimated frequency of the item.
            This is guaranteed to be at least the true frequency,
            and with high probability close to the true frequency.
        """
        # Every counter over-counts by the items colliding with it;
        # the smallest one is the tightest upper bound
        return min(self._counters[i][self._hash(item, i)] for i in range(self._depth))

    def estimate_frequency_error(self, item: T) -> Tuple[int, float]:
        """
        Estimate frequency with error bounds for an item.

        Args:
            item: The item to estimate the frequency for.

        Returns:
            A tuple of (estimated_frequency, max_error) where max_error is
            the maximum expected overestimation (epsilon * total_count).
        """
        return (self.estimate_frequency(item), self._epsilon * self._total_frequency)

    def get_heavy_hitters_from_candidates(
        self, candidates: Iterable[T], threshold: float
    ) -> Dict[T, int]:
        """
        Get heavy hitters from a list of candidate items.

        The sketch does not remember which items it has seen, so candidates
        have to be supplied by the caller.

        Args:
            candidates: Candidate items to check.
            threshold: The minimum frequency ratio (0.0 to 1.0) of total_count.

        Returns:
            A dictionary mapping heavy hitter items to their estimated frequencies.
        """
        return self.heavy_hitters(candidates, threshold, total=self._total_frequency)

    def merge(self, other: "CountMinSketch[T]") -> None:
        """
        Merge another Count-Min Sketch into this one.

        Every counter becomes the sum of both sketches' counters, which is
        the sketch of the combined stream. Total counts are summed.

        Args:
            other: Another Count-Min Sketch with the same width and depth.

        Raises:
            NilOperandError: If other is None.
            TypeError: If other is not a CountMinSketch.
            IncompatibleDimensionsError: If sketches have different dimensions.
            OverflowError: If a summed counter would exceed MAX_COUNTER. This
                           sketch is left unchanged.
        """
        self._check_mergeable(other)

        merged_rows = []
        for row, other_row in zip(self._counters, other._counters):
            summed = [a + b for a, b in zip(row, other_row)]
            if max(summed) > MAX_COUNTER:
                raise OverflowError("Counter overflow while merging Count-Min Sketches")
            merged_rows.append(array.array("Q", summed))

        self._counters = merged_rows
        self._total_frequency += other._total_frequency
        self._items_processed += other._items_processed

        logger.debug(
            "Merged CountMinSketch %s: total_count=%d",
            self.dimensions,
            self._total_frequency,
        )

    def clear(self) -> None:
        """Reset all counters and the total count, keeping the dimensions."""
        super().clear()
        for row in self._counters:
            for j in range(self._width):
                row[j] = 0
        self._total_frequency = 0
        logger.debug("Cleared CountMinSketch %s", self.dimensions)

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this sketch in bytes.

        Returns:
            Estimated memory usage in bytes.
        """
        size = super().estimate_size()
        size += sys.getsizeof(self._counters)
        size += sum(sys.getsizeof(row) for row in self._counters)
        return size

    def error_bounds(self) -> Dict[str, float]:
        """
        Calculate the theoretical and observed error bounds for this sketch.

        Returns:
            A dictionary with the error bounds:
            - epsilon: The error factor (errors are less than epsilon * total_count)
            - delta: The probability of exceeding the error bound
            - max_absolute_error: The maximum absolute error (epsilon * total_count)
            - observed_saturation: The proportion of counters that are non-zero
        """
        non_zero_counters = sum(1 for row in self._counters for val in row if val > 0)
        return {
            "epsilon": self._epsilon,
            "delta": self._delta,
            "max_absolute_error": self._epsilon * self._total_frequency,
            "observed_saturation": non_zero_counters / (self._width * self._depth),
        }

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the current state of the sketch.

        Returns:
            A dictionary with the sketch's dimensions, counts and error bounds.
        """
        stats = super().get_stats()
        stats.update(
            {
                "width": self._width,
                "depth": self._depth,
                "total_count": self._total_frequency,
            }
        )
        return stats

    def __repr__(self) -> str:
        return (
            f"CountMinSketch(width={self._width}, depth={self._depth}, "
            f"total_count={self._total_frequency})"
        )
