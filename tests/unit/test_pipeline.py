"""
Unit tests for lazy stream stages.
"""

import unittest

from tiny_sketch.streaming.pipeline import AggregateResult, Stream


def counting_source(items, log):
    """Yield items, appending each one to log as it is pulled."""
    for item in items:
        log.append(item)
        yield item


class TestStreamStages(unittest.TestCase):
    """Test cases for Stream stages."""

    def test_filter_map_count(self):
        """Test a filter stage feeding a count."""
        lines = ["apple", "banana", "apple", "orange", "apple", "banana"]
        self.assertEqual(Stream(lines).filter(lambda v: v == "apple").count(), 3)
        self.assertEqual(
            Stream(lines).map(len).collect(), [5, 6, 5, 6, 5, 6]
        )

    def test_flat_map(self):
        """Test expanding each element into several."""
        result = Stream(["a b", "c", ""]).flat_map(str.split).collect()
        self.assertEqual(result, ["a", "b", "c"])

    def test_distinct_keeps_first_occurrence_order(self):
        result = Stream([3, 1, 3, 2, 1, 4]).distinct().collect()
        self.assertEqual(result, [3, 1, 2, 4])

    def test_take(self):
        """Test taking a prefix of the stream."""
        self.assertEqual(Stream(range(10)).take(3).collect(), [0, 1, 2])
        self.assertEqual(Stream(range(2)).take(5).collect(), [0, 1])
        self.assertEqual(Stream(range(10)).take(0).collect(), [])
        self.assertEqual(Stream(range(10)).take(-1).collect(), [])

    def test_take_stops_pulling(self):
        """Test that take does not read past the elements it needs."""
        log = []
        result = Stream(counting_source(range(100), log)).take(3).collect()
        self.assertEqual(result, [0, 1, 2])
        self.assertEqual(log, [0, 1, 2])

        log = []
        Stream(counting_source(range(100), log)).take(0).collect()
        self.assertEqual(log, [])

    def test_stages_are_lazy(self):
        """Test that building a chain reads nothing from the source."""
        log = []
        stream = Stream(counting_source(range(5), log)).map(lambda v: v * 2).filter(bool)
        self.assertEqual(log, [])
        self.assertEqual(stream.collect(), [2, 4, 6, 8])
        self.assertEqual(log, [0, 1, 2, 3, 4])

    def test_sort(self):
        """Test sorting, including a stable sort by key."""
        self.assertEqual(Stream([3, 1, 2]).sort().collect(), [1, 2, 3])
        self.assertEqual(Stream([3, 1, 2]).sort(reverse=True).collect(), [3, 2, 1])

        pairs = [("b", 1), ("a", 2), ("b", 0), ("a", 1)]
        self.assertEqual(
            Stream(pairs).sort(key=lambda pair: pair[0]).collect(),
            [("a", 2), ("a", 1), ("b", 1), ("b", 0)],
        )

    def test_sort_then_take(self):
        """Test that stages compose after a buffering sort."""
        result = Stream([5, 3, 9, 1, 7]).sort().take(2).collect()
        self.assertEqual(result, [1, 3])


class TestStreamTerminals(unittest.TestCase):
    """Test cases for Stream terminal operations."""

    def test_reduce(self):
        self.assertEqual(Stream(range(5)).reduce(lambda acc, v: acc + v, 0), 10)
        self.assertEqual(Stream([]).reduce(lambda acc, v: acc + v, 7), 7)

    def test_any_and_all(self):
        """Test short-circuiting predicates."""
        log = []
        self.assertTrue(
            Stream(counting_source(range(100), log)).any_match(lambda v: v == 2)
        )
        self.assertEqual(log, [0, 1, 2])

        log = []
        self.assertFalse(
            Stream(counting_source(range(100), log)).all_match(lambda v: v < 1)
        )
        self.assertEqual(log, [0, 1])

        self.assertFalse(Stream([]).any_match(bool))
        self.assertTrue(Stream([]).all_match(bool))

    def test_first_and_last(self):
        """Test first/last, including empty streams and None elements."""
        log = []
        self.assertEqual(
            Stream(counting_source([4, 5, 6], log)).first(), AggregateResult(4, True)
        )
        self.assertEqual(log, [4])

        self.assertEqual(Stream([4, 5, 6]).last(), AggregateResult(6, True))
        self.assertEqual(Stream([]).first(), AggregateResult(None, False))
        self.assertEqual(Stream([]).last(), AggregateResult(None, False))

        # A None element is still a result
        self.assertEqual(Stream([None]).first(), AggregateResult(None, True))

    def test_group_by(self):
        groups = Stream(["apple", "avocado", "banana", "blueberry", "cherry"]).group_by(
            lambda word: word[0]
        )
        self.assertEqual(
            groups,
            {
                "a": ["apple", "avocado"],
                "b": ["banana", "blueberry"],
                "c": ["cherry"],
            },
        )

    def test_into(self):
        """Test handing a stream to an arbitrary collector callable."""
        result = Stream(range(4)).map(str).into(lambda seq: "".join(seq))
        self.assertEqual(result, "0123")

    def test_iteration(self):
        self.assertEqual(list(Stream((1, 2)).map(lambda v: v + 1)), [2, 3])


if __name__ == "__main__":
    unittest.main()
