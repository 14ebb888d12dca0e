"""
Algorithm implementations for TinySketch.
"""

from tiny_sketch.algorithms.bloom import BloomFilter
from tiny_sketch.algorithms.collector import SketchKind, StreamCollector, collect_into
from tiny_sketch.algorithms.countmin import CountMinSketch

__all__ = [
    "BloomFilter",
    "CountMinSketch",
    "SketchKind",
    "StreamCollector",
    "collect_into",
]
