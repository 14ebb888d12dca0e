"""
tiny-sketch - Approximate Membership and Frequency Sketches for Streams

tiny-sketch is a Python library for answering "have I seen X?" and "how many
times has X occurred?" over data streams too large to store exactly, using a
Bloom filter and a Count-Min Sketch with bounded, quantified error.
"""

import logging

__version__ = "0.1.0"

# Import main classes to make them available at the top level
from tiny_sketch.algorithms.bloom import BloomFilter
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
from tiny_sketch.core.base import FrequencyEstimator, MembershipTester, StreamSummary
from tiny_sketch.core.errors import (
    IncompatibleDimensionsError,
    InputError,
    InvalidDimensionError,
    InvalidErrorBoundError,
    NilOperandError,
    SketchError,
)
from tiny_sketch.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    set_level,
)
from tiny_sketch.streaming import Stream, file_csv_stream, file_line_stream

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core base classes
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
    # Algorithm implementations
    "BloomFilter",
    "CountMinSketch",
    "SketchKind",
    "StreamCollector",
    "bloom_filter_collector",
    "bloom_filter_collector_from_capacity",
    "count_min_collector",
    "count_min_collector_from_error_rate",
    "collect_into",
    # Streams
    "Stream",
    "file_line_stream",
    "file_csv_stream",
    # Logging
    "enable_console_logging",
    "disable_logging",
    "set_level",
    "configure_from_env",
]
