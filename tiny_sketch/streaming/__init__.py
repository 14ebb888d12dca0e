"""
Lazy streams that feed TinySketch collectors.

This package provides:
- pipeline: Stream, a pull-based chain of filter/map/take/... stages
- input: lazy file streams with pluggable line and CSV parsers
"""

from tiny_sketch.streaming.input import (
    CSVParser,
    FileInput,
    FileParser,
    Input,
    LineParser,
    file_csv_stream,
    file_line_stream,
    file_stream,
    parse_files,
)
from tiny_sketch.streaming.pipeline import AggregateResult, Stream

__all__ = [
    "Stream",
    "AggregateResult",
    "Input",
    "FileInput",
    "FileParser",
    "LineParser",
    "CSVParser",
    "file_stream",
    "parse_files",
    "file_line_stream",
    "file_csv_stream",
]
