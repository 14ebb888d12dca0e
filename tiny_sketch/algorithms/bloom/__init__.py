"""
Bloom Filter implementation for TinySketch.

This module provides a Bloom Filter for efficient set membership testing
with bounded memory usage, no false negatives and a tunable false positive rate.
"""

from tiny_sketch.algorithms.bloom.base import BloomFilter

__all__ = [
    "BloomFilter",
]
