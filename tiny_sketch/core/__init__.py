"""
Core functionality for TinySketch.
"""

from tiny_sketch.core.base import FrequencyEstimator, MembershipTester, StreamSummary
from tiny_sketch.core.errors import (
    IncompatibleDimensionsError,
    InputError,
    InvalidDimensionError,
    InvalidErrorBoundError,
    NilOperandError,
    SketchError,
)
from tiny_sketch.core.hash import fnv1a_64, hash64, hash_position, key_to_bytes

__all__ = [
    # Base classes
    "StreamSummary",
    "MembershipTester",
    "FrequencyEstimator",
    # Errors
    "SketchError",
    "InvalidDimensionError",
    "InvalidErrorBoundError",
    "IncompatibleDimensionsError",
    "NilOperandError",
    "InputError",
    # Utility functions
    "fnv1a_64",
    "hash64",
    "hash_position",
    "key_to_bytes",
]
