"""
Base classes and interfaces for TinySketch streaming algorithms.

This module defines the abstract base classes that the sketches implement to
provide a consistent interface across the library: updating with new items,
querying, merging in place, resetting, and reporting statistics.
"""

import abc
import sys
from typing import Any, Dict, Generic, Optional, Tuple, TypeVar

from tiny_sketch.core.errors import IncompatibleDimensionsError, NilOperandError

T = TypeVar("T")  # Type for the items being processed
R = TypeVar("R")  # Type for the result of queries


class StreamSummary(Generic[T, R], abc.ABC):
    """
    Abstract base class for all streaming data structures.

    A summary has fixed dimensions chosen at construction. It is updated one
    item at a time, queried at any point, merged with another summary of the
    same type and dimensions, and cleared back to its empty state.
    """

    def __init__(self) -> None:
        """Initialize a new stream summary."""
        self._items_processed = 0

    @abc.abstractmethod
    def update(self, item: T) -> None:
        """
        Update the summary with a new item from the stream.

        Derived classes call super().update(item) to count the operation.

        Args:
            item: The new item to process.
        """
        self._items_processed += 1

    @abc.abstractmethod
    def query(self, *args: Any, **kwargs: Any) -> R:
        """
        Query the current state of the summary.

        The parameters and return value depend on the specific algorithm.

        Returns:
            The result of the query, which depends on the specific algorithm.
        """
        pass

    @abc.abstractmethod
    def merge(self, other: "StreamSummary[T, R]") -> None:
        """
        Merge another summary of the same type into this one, in place.

        The other summary is left unchanged. If the merge fails, this summary
        is left unchanged as well.

        Args:
            other: Another stream summary of the same type and dimensions.

        Raises:
            NilOperandError: If other is None.
            TypeError: If other is not of the same type.
            IncompatibleDimensionsError: If the dimensions differ.
        """
        pass

    @property
    @abc.abstractmethod
    def dimensions(self) -> Tuple[int, ...]:
        """The fixed dimensions that two summaries must share to be merged."""
        pass

    def _check_same_type(self, other: "StreamSummary[T, R]") -> None:
        """
        Helper method to check if another summary is of the same type.

        Args:
            other: Another stream summary to check.

        Raises:
            NilOperandError: If other is None.
            TypeError: If other is not of the same type.
        """
        if other is None:
            raise NilOperandError(
                f"Cannot merge {self.__class__.__name__} with None"
            )
        if not isinstance(other, self.__class__):
            raise TypeError(f"Cannot merge with {other.__class__.__name__}")

    def _check_mergeable(self, other: "StreamSummary[T, R]") -> None:
        """
        Validate a merge operand before any state is touched.

        Args:
            other: Another stream summary.

        Raises:
            NilOperandError: If other is None.
            TypeError: If other is not of the same type.
            IncompatibleDimensionsError: If the dimensions differ.
        """
        self._check_same_type(other)
        if self.dimensions != other.dimensions:
            raise IncompatibleDimensionsError(
                f"Cannot merge {self.__class__.__name__} with different "
                f"dimensions: {self.dimensions} and {other.dimensions}"
            )

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this summary in bytes.

        Derived classes should override this method to account for their
        internal arrays.

        Returns:
            Estimated memory usage in bytes.
        """
        size = sys.getsizeof(self)
        if hasattr(self, "__dict__"):
            size += sys.getsizeof(self.__dict__)
        return size

    def clear(self) -> None:
        """
        Reset the summary to its initial empty state.

        Derived classes must override this method to clear their own data
        structures and call super().clear(). Dimensions never change.
        """
        self._items_processed = 0

    def get_stats(self) -> Dict[str, Any]:
        """
        Get detailed statistics about the current state of the summary.

        Derived classes should override this method to include their specific
        statistics while calling super().get_stats() to include base metrics.

        Returns:
            A dictionary containing various statistics about the summary state.
        """
        stats: Dict[str, Any] = {
            "type": self.__class__.__name__,
            "items_processed": self._items_processed,
            "memory_bytes": self.estimate_size(),
        }

        error_bounds = self.error_bounds()
        if error_bounds:
            stats.update(error_bounds)

        return stats

    def error_bounds(self) -> Dict[str, float]:
        """
        Get the theoretical error bounds for this summary.

        The base implementation returns an empty dictionary.

        Returns:
            A dictionary containing error bound information specific to the algorithm.
        """
        return {}

    @property
    def items_processed(self) -> int:
        """Get the total number of update operations applied to this summary."""
        return self._items_processed


class MembershipTester(StreamSummary[T, bool], abc.ABC):
    """
    Abstract base class for approximate set membership structures.

    Examples include the Bloom filter.
    """

    @abc.abstractmethod
    def contains(self, item: T) -> bool:
        """
        Test whether an item might have been added.

        Args:
            item: The item to test.

        Returns:
            False if the item was definitely never added, True if it may have been.
        """
        pass

    def query(self, item: T, *args: Any, **kwargs: Any) -> bool:
        """Convenience alias for contains()."""
        return self.contains(item)


class FrequencyEstimator(StreamSummary[T, int], abc.ABC):
    """
    Abstract base class for frequency estimation algorithms.

    Examples include Count-Min Sketch and variants.
    """

    @abc.abstractmethod
    def update(self, item: T, count: int = 1) -> None:
        """
        Add count occurrences of an item.

        Args:
            item: The item to count.
            count: Number of occurrences to add.
        """
        super().update(item)

    @abc.abstractmethod
    def estimate_frequency(self, item: T) -> int:
        """
        Estimate the frequency of an item in the stream.

        Args:
            item: The item to estimate the frequency for.

        Returns:
            The estimated frequency of the item.
        """
        pass

    def query(self, item: T, *args: Any, **kwargs: Any) -> int:
        """Convenience alias for estimate_frequency()."""
        return self.estimate_frequency(item)

    def heavy_hitters(
        self, candidates: Any, threshold: float, total: Optional[int] = None
    ) -> Dict[T, int]:
        """
        Select the candidates whose estimated frequency reaches a share of the stream.

        Args:
            candidates: Iterable of candidate items to check.
            threshold: The minimum frequency ratio (0.0 to 1.0) to include.
            total: The stream total to apply the ratio to. Defaults to the
                   number of update operations.

        Returns:
            A dictionary mapping heavy hitter items to their estimated frequencies.

        Raises:
            ValueError: If threshold is not between 0 and 1.
        """
        if not 0 <= threshold <= 1:
            raise ValueError("Threshold must be between 0 and 1")

        if total is None:
            total = self._items_processed
        min_count = threshold * total

        hitters = {}
        for item in candidates:
            freq = self.estimate_frequency(item)
            if freq >= min_count:
                hitters[item] = freq
        return hitters
