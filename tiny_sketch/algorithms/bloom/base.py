"""
Bloom Filter implementation for TinySketch.

This module provides an implementation of the Bloom Filter, a space-efficient
probabilistic data structure used for testing set membership with tunable
false positive rates and no false negatives.

The filter stores its bits in 64-bit words. Each item sets one bit per hash
round, where the bit for round r is hash64(item, r) mod bit_size.

References:
    - Bloom, B. H. (1970). Space/time trade-offs in hash coding with allowable errors.
      Communications of the ACM, 13(7), 422-426.
"""

import array
import logging
import math
import sys
from typing import Any, Dict, List, Tuple, TypeVar

from tiny_sketch.core.base import MembershipTester
from tiny_sketch.core.errors import InvalidDimensionError, InvalidErrorBoundError
from tiny_sketch.core.hash import hash_position

logger = logging.getLogger(__name__)

T = TypeVar("T")  # Type for the items being processed

WORD_BITS = 64


class BloomFilter(MembershipTester[T]):
    """
    Bloom Filter for efficient set membership testing.

    A Bloom filter is a space-efficient probabilistic data structure used to test
    whether an element is a member of a set. False positives are possible, but
    false negatives are not – in other words, a query returns either "possibly in set"
    or "definitely not in set".

    The filter counts update operations, not distinct items: adding the same
    item twice increments added_count twice.

    Example:
        # Create a filter with 1% false positive rate for 1000 items
        bloom = BloomFilter.create_from_capacity(1000, 0.01)

        # Add some items
        bloom.update("apple")
        bloom.update("banana")

        # Check for membership
        contains_apple = bloom.contains("apple")  # Returns True
        contains_orange = bloom.contains("orange")  # Almost certainly False
    """

    def __init__(self, bit_size: int, hash_count: int):
        """
        Initialize a new, empty Bloom filter with explicit dimensions.

        Args:
            bit_size: Number of bits in the filter.
            hash_count: Number of hash rounds (bits set per item).

        Raises:
            InvalidDimensionError: If bit_size or hash_count is less than 1.
        """
        super().__init__()

        if bit_size <= 0:
            raise InvalidDimensionError("Bit size must be at least 1")
        if hash_count <= 0:
            raise InvalidDimensionError("Hash count must be at least 1")

        self._bit_size = bit_size
        self._hash_count = hash_count

        # 'Q' is an unsigned 64-bit word
        num_words = (bit_size + WORD_BITS - 1) // WORD_BITS
        self._words = array.array("Q", bytes(num_words * 8))

        logger.debug(
            "Created BloomFilter: bit_size=%d hash_count=%d words=%d",
            bit_size,
            hash_count,
            num_words,
        )

    @classmethod
    def create_from_capacity(
        cls, expected_items: int, false_positive_rate: float
    ) -> "BloomFilter[T]":
        """
        Create a Bloom filter sized for a capacity and a target false positive rate.

        The bit size is m = ceil(-n * ln(p) / ln(2)^2) and the hash count is
        k = max(1, ceil((m / n) * ln(2))).

        Args:
            expected_items: Expected number of items to be added to the filter.
            false_positive_rate: Target false positive rate (strictly between 0 and 1).

        Returns:
            A new, empty BloomFilter.

        Raises:
            InvalidDimensionError: If expected_items is less than 1.
            InvalidErrorBoundError: If false_positive_rate is not between 0 and 1.
        """
        if expected_items <= 0:
            raise InvalidDimensionError("Expected number of items must be at least 1")
        if not (0 < false_positive_rate < 1):
            raise InvalidErrorBoundError("False positive rate must be between 0 and 1")

        bit_size = cls.optimal_bit_size(expected_items, false_positive_rate)
        hash_count = cls.optimal_hash_count(bit_size, expected_items)

        logger.debug(
            "Derived BloomFilter dimensions for n=%d p=%g: m=%d k=%d",
            expected_items,
            false_positive_rate,
            bit_size,
            hash_count,
        )
        return cls(bit_size, hash_count)

    @staticmethod
    def optimal_bit_size(n: int, p: float) -> int:
        """
        Calculate the optimal bit array size for the given parameters.

        Args:
            n: Expected number of items.
            p: Target false positive rate.

        Returns:
            Optimal bit array size.
        """
        # m = -(n * ln(p)) / (ln(2)^2)
        return math.ceil(-(n * math.log(p)) / (math.log(2) ** 2))

    @staticmethod
    def optimal_hash_count(m: int, n: int) -> int:
        """
        Calculate the optimal number of hash functions.

        Args:
            m: Bit array size.
            n: Expected number of items.

        Returns:
            Optimal number of hash functions.
        """
        # k = (m/n) * ln(2)
        return max(1, math.ceil((m / n) * math.log(2)))

    @property
    def bit_size(self) -> int:
        """Number of bits in the filter."""
        return self._bit_size

    @property
    def hash_count(self) -> int:
        """Number of hash rounds per item."""
        return self._hash_count

    @property
    def added_count(self) -> int:
        """Number of update operations, including repeats of the same item."""
        return self._items_processed

    @property
    def dimensions(self) -> Tuple[int, int]:
        return (self._bit_size, self._hash_count)

    def _get_bit_positions(self, item: T) -> List[int]:
        """
        Generate the bit positions for an item, one per hash round.

        Args:
            item: The item to hash.

        Returns:
            List of bit positions to set or check.
        """
        return [
            hash_position(item, round_index, self._bit_size)
            for round_index in range(self._hash_count)
        ]

    def _set_bit(self, position: int) -> None:
        word_index, offset = divmod(position, WORD_BITS)
        self._words[word_index] |= 1 << offset

    def _test_bit(self, position: int) -> bool:
        word_index, offset = divmod(position, WORD_BITS)
        return bool(self._words[word_index] & (1 << offset))

    def update(self, item: T) -> None:
        """
        Add an item to the Bloom filter.

        This method sets the bits at positions determined by the hash rounds
        for the given item.

        Args:
            item: The item to add to the filter.
        """
        super().update(item)

        for position in self._get_bit_positions(item):
            self._set_bit(position)

    def contains(self, item: T) -> bool:
        """
        Test if an item might be in the set.

        Args:
            item: The item to test.

        Returns:
            True if the item might be in the set, False if definitely not in the set.
        """
        for position in self._get_bit_positions(item):
            if not self._test_bit(position):
                return False
        return True

    def merge(self, other: "BloomFilter[T]") -> None:
        """
        Merge another Bloom filter into this one.

        The bits of this filter become the bitwise OR of both filters, which
        is exactly the filter of the union of both insertion histories. The
        added counts are summed.

        Args:
            other: Another BloomFilter with the same bit size and hash count.

        Raises:
            NilOperandError: If other is None.
            TypeError: If other is not a BloomFilter.
            IncompatibleDimensionsError: If the filters have different dimensions.
        """
        self._check_mergeable(other)

        for i, word in enumerate(other._words):
            self._words[i] |= word
        self._items_processed += other._items_processed

        logger.debug(
            "Merged BloomFilter %s: added_count=%d",
            self.dimensions,
            self._items_processed,
        )

    def count_set_bits(self) -> int:
        """Return the number of bits currently set."""
        return sum(bin(word).count("1") for word in self._words)

    def estimate_cardinality(self) -> int:
        """
        Estimate the number of distinct items in the filter.

        This is an approximation based on the fill ratio of the bit array.
        The estimate becomes less accurate as the filter becomes more saturated.

        Returns:
            Estimated number of distinct items.
        """
        set_bits = self.count_set_bits()
        if set_bits == 0:
            return 0
        if set_bits >= self._bit_size:
            # Saturated; the formula diverges
            return self._items_processed

        # n ≈ -(m / k) * ln(1 - X/m)
        m = self._bit_size
        k = self._hash_count
        return round(-(m / k) * math.log(1 - set_bits / m))

    def false_positive_probability(self) -> float:
        """
        Calculate the current theoretical false positive probability.

        Uses (1 - e^(-k*n/m))^k with n equal to the number of update
        operations.

        Returns:
            The false positive probability in [0, 1].
        """
        if self._items_processed == 0:
            return 0.0
        exponent = -self._hash_count * self._items_processed / self._bit_size
        return (1.0 - math.exp(exponent)) ** self._hash_count

    def is_empty(self) -> bool:
        """
        Check if the filter has no bits set.

        Returns:
            True if the filter is empty, False otherwise.
        """
        return not any(self._words)

    def clear(self) -> None:
        """
        Reset the filter to its initial empty state.

        This method clears all bits but keeps the same dimensions.
        """
        super().clear()
        for i in range(len(self._words)):
            self._words[i] = 0
        logger.debug("Cleared BloomFilter %s", self.dimensions)

    def estimate_size(self) -> int:
        """
        Estimate the current memory usage of this filter in bytes.

        Returns:
            Estimated memory usage in bytes.
        """
        return super().estimate_size() + sys.getsizeof(self._words)

    def error_bounds(self) -> Dict[str, float]:
        """
        Report the filter's current error characteristics.

        Returns:
            A dictionary with:
            - false_positive_rate: current theoretical false positive probability
            - fill_ratio: share of bits that are set
            - bits_per_item: bits available per update operation
        """
        bounds = {
            "false_positive_rate": self.false_positive_probability(),
            "fill_ratio": self.count_set_bits() / self._bit_size,
        }
        if self._items_processed > 0:
            bounds["bits_per_item"] = self._bit_size / self._items_processed
        return bounds

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the current state of the Bloom filter.

        Returns:
            A dictionary with the filter's dimensions, counts and error bounds.
        """
        stats = super().get_stats()
        stats.update(
            {
                "bit_size": self._bit_size,
                "hash_count": self._hash_count,
                "added_count": self._items_processed,
                "estimated_cardinality": self.estimate_cardinality(),
            }
        )
        return stats

    def __repr__(self) -> str:
        return (
            f"BloomFilter(bit_size={self._bit_size}, hash_count={self._hash_count}, "
            f"added_count={self._items_processed})"
        )
