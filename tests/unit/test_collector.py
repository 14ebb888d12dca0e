"""
Unit tests for the stream collector.
"""

import unittest

from tiny_sketch.algorithms.bloom.base import BloomFilter
from tiny_sketch.algorithms.collector import (
    SketchKind,
    StreamCollector,
    bloom_filter_collector,
    bloom_filter_collector_from_capacity,
    collect_into,
    count_min_collector,
    count_min_collector_from_error_rate,
)
from tiny_sketch.algorithms.countmin import CountMinSketch
from tiny_sketch.core.errors import (
    InvalidDimensionError,
    InvalidErrorBoundError,
    NilOperandError,
)
from tiny_sketch.streaming.pipeline import Stream


class TrackingIterable:
    """Iterable that records how many elements were pulled from it."""

    def __init__(self, items):
        self._items = list(items)
        self.pulled = 0
        self.iterations = 0

    def __iter__(self):
        self.iterations += 1
        for item in self._items:
            self.pulled += 1
            yield item


class TestStreamCollector(unittest.TestCase):
    """Test cases for StreamCollector and its helpers."""

    def test_bloom_filter_collector(self):
        """Test building a Bloom filter from a stream."""
        source = TrackingIterable(["apple", "banana", "apple", "cherry"])
        collector = bloom_filter_collector(1024, 4, key_fn=lambda item: item)

        bf = collector.collect(source)

        self.assertIsInstance(bf, BloomFilter)
        self.assertEqual(bf.dimensions, (1024, 4))
        for item in ("apple", "banana", "cherry"):
            self.assertTrue(bf.contains(item))
        # Operations are counted, not distinct items
        self.assertEqual(bf.added_count, 4)
        self.assertEqual(source.iterations, 1)
        self.assertEqual(source.pulled, 4)

    def test_bloom_filter_collector_from_capacity(self):
        """Test building a Bloom filter sized from error bounds."""
        records = [{"user": f"u{i}"} for i in range(100)]
        collector = bloom_filter_collector_from_capacity(
            100, 0.01, key_fn=lambda record: record["user"]
        )

        bf = collector(records)

        self.assertEqual(bf.dimensions, BloomFilter.create_from_capacity(100, 0.01).dimensions)
        for record in records:
            self.assertTrue(bf.contains(record["user"]))

    def test_count_min_collector(self):
        """Test building a Count-Min Sketch from a stream."""
        words = ["apple", "banana", "apple", "orange", "apple", "banana"]
        collector = count_min_collector(256, 5, key_fn=str.lower)

        cms = collector.collect(word.upper() for word in words)

        self.assertIsInstance(cms, CountMinSketch)
        self.assertEqual(cms.total_count, 6)
        self.assertGreaterEqual(cms.estimate_frequency("apple"), 3)
        self.assertGreaterEqual(cms.estimate_frequency("banana"), 2)
        self.assertGreaterEqual(cms.estimate_frequency("orange"), 1)

    def test_count_min_collector_from_error_rate(self):
        """Test building a Count-Min Sketch sized from error bounds."""
        collector = count_min_collector_from_error_rate(0.01, 0.01, key_fn=lambda n: n % 10)

        cms = collector.collect(range(1000))

        self.assertEqual(cms.dimensions, (272, 5))
        self.assertEqual(cms.total_count, 1000)
        for digit in range(10):
            self.assertGreaterEqual(cms.estimate_frequency(digit), 100)

    def test_empty_sequence(self):
        """Test that an empty stream yields an empty sketch."""
        bf = bloom_filter_collector(64, 2, key_fn=str).collect([])
        self.assertTrue(bf.is_empty())
        self.assertEqual(bf.added_count, 0)

        cms = count_min_collector(16, 2, key_fn=str).collect(iter(()))
        self.assertEqual(cms.total_count, 0)

    def test_construction_failure_leaves_sequence_untouched(self):
        """Test that invalid parameters raise before any element is pulled."""
        cases = [
            (bloom_filter_collector(0, 3, key_fn=str), InvalidDimensionError),
            (bloom_filter_collector(64, 0, key_fn=str), InvalidDimensionError),
            (bloom_filter_collector_from_capacity(0, 0.1, key_fn=str), InvalidDimensionError),
            (bloom_filter_collector_from_capacity(10, 1.0, key_fn=str), InvalidErrorBoundError),
            (count_min_collector(0, 3, key_fn=str), InvalidDimensionError),
            (count_min_collector(10, -2, key_fn=str), InvalidDimensionError),
            (count_min_collector_from_error_rate(0, 0.1, key_fn=str), InvalidErrorBoundError),
            (count_min_collector_from_error_rate(0.1, 1, key_fn=str), InvalidErrorBoundError),
        ]
        for collector, error in cases:
            source = TrackingIterable(["a", "b"])
            with self.assertRaises(error):
                collector.collect(source)
            self.assertEqual(source.iterations, 0)
            self.assertEqual(source.pulled, 0)

    def test_each_collect_builds_a_new_sketch(self):
        """Test that a collector can be reused without sharing state."""
        collector = count_min_collector(64, 3, key_fn=str)

        first = collector.collect(["a", "a"])
        second = collector.collect(["b"])

        self.assertIsNot(first, second)
        self.assertEqual(first.total_count, 2)
        self.assertEqual(second.total_count, 1)

    def test_for_kind(self):
        """Test choosing the sketch through the kind selector."""
        membership = StreamCollector.for_kind(
            SketchKind.MEMBERSHIP, key_fn=str, dimensions=(128, 3)
        )
        frequency = StreamCollector.for_kind(
            SketchKind.FREQUENCY, key_fn=str, error_bounds=(0.1, 0.1)
        )

        self.assertEqual(membership.kind, SketchKind.MEMBERSHIP)
        self.assertEqual(frequency.kind, SketchKind.FREQUENCY)
        self.assertIsInstance(membership.collect([1, 2]), BloomFilter)
        self.assertIsInstance(frequency.collect([1, 2]), CountMinSketch)

    def test_for_kind_requires_one_parameter_set(self):
        """Test that exactly one of dimensions and error bounds is accepted."""
        with self.assertRaises(TypeError):
            StreamCollector.for_kind(SketchKind.FREQUENCY, key_fn=str)
        with self.assertRaises(TypeError):
            StreamCollector.for_kind(
                SketchKind.FREQUENCY,
                key_fn=str,
                dimensions=(10, 2),
                error_bounds=(0.1, 0.1),
            )

    def test_early_terminating_upstream(self):
        """Test collecting from a stream that stops an infinite source."""

        def naturals():
            n = 0
            while True:
                yield n
                n += 1

        cms = Stream(naturals()).take(50).into(count_min_collector(128, 4, key_fn=lambda n: n % 5))

        self.assertEqual(cms.total_count, 50)
        for residue in range(5):
            self.assertGreaterEqual(cms.estimate_frequency(residue), 10)

    def test_collect_into(self):
        """Test draining into an existing sketch."""
        cms = CountMinSketch(64, 3)
        cms.update("a", 5)

        result = collect_into(cms, ["a", "b", "a"], key_fn=str)

        self.assertIs(result, cms)
        self.assertEqual(cms.total_count, 8)
        self.assertGreaterEqual(cms.estimate_frequency("a"), 7)

        bf = BloomFilter(256, 3)
        collect_into(bf, ["x", "y"], key_fn=str)
        self.assertTrue(bf.contains("x"))
        self.assertEqual(bf.added_count, 2)

    def test_collect_into_nil(self):
        """Test that collecting into None fails before touching the stream."""
        source = TrackingIterable(["a"])
        with self.assertRaises(NilOperandError):
            collect_into(None, source, key_fn=str)
        self.assertEqual(source.iterations, 0)

        with self.assertRaises(TypeError):
            collect_into(object(), source, key_fn=str)
        self.assertEqual(source.iterations, 0)


if __name__ == "__main__":
    unittest.main()
