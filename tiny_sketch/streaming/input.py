"""
File input for TinySketch streams.

Files are read lazily, one record at a time, so a collector can build a
sketch over inputs much larger than memory:

    source = file_line_stream(["events-1.log", "events-2.log"])
    cms = count_min_collector(512, 6, key_fn=str).collect(source)
    if source.error is not None:
        raise source.error

The front end has three layers:
- file_stream() yields FileInput handles in path order;
- a FileParser decodes one open file into records (LineParser, CSVParser,
  or any object with the same parse() method);
- parse_files() connects the two into an Input of records.

Errors do not interrupt the consumer. An Input records the first InputError
of a run on its error attribute and ends the run, so a collector simply sees
the stream end; the caller checks input.error after draining.
"""

import csv
import logging
import os
from dataclasses import dataclass
from typing import (
    Callable,
    Generic,
    Iterable,
    Iterator,
    List,
    Optional,
    Protocol,
    TextIO,
    TypeVar,
)

from tiny_sketch.core.errors import InputError

logger = logging.getLogger(__name__)

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

# Exceptions a parser may raise for unreadable or malformed input
PARSE_ERRORS = (OSError, ValueError, csv.Error)


class Input(Generic[T]):
    """
    A re-iterable lazy sequence that reports its production errors separately.

    Every iteration is a new run of the underlying producer. The error
    attribute is reset when a run starts and holds the first InputError the
    run hit, or None.
    """

    def __init__(self, produce: Callable[[], Iterator[T]]):
        """
        Args:
            produce: Zero-argument callable returning a fresh iterator per run.
                     It signals failure by raising InputError.
        """
        self._produce = produce
        self.error: Optional[InputError] = None

    def __iter__(self) -> Iterator[T]:
        self.error = None
        try:
            yield from self._produce()
        except InputError as exc:
            logger.warning("Input stopped: %s", exc)
            self.error = exc


@dataclass(frozen=True)
class FileInput:
    """A file that has not been opened yet."""

    path: str

    def open(self, newline: Optional[str] = "") -> TextIO:
        """Open the file as UTF-8 text without translating line endings."""
        return open(self.path, "r", encoding="utf-8", newline=newline)


class FileParser(Protocol[T_co]):
    """
    Decodes an open file into records.

    parse() is a generator; the caller may stop iterating at any point.
    Malformed input is reported by raising one of PARSE_ERRORS.
    newline is passed to open() for this parser's files.
    """

    newline: Optional[str]

    def parse(self, path: str, reader: TextIO) -> Iterator[T_co]:
        ...


class LineParser:
    """Yields each line of a text file without its line ending."""

    # Split on "\n" only; a trailing "\r" is trimmed below
    newline = "\n"

    def parse(self, path: str, reader: TextIO) -> Iterator[str]:
        for line in reader:
            yield _trim_line_ending(line)


@dataclass(frozen=True)
class CSVParser:
    """
    Yields each record of a CSV file as a list of strings.

    Args:
        delimiter: Field separator.
        comment: Records whose first line starts with this character are skipped.
        skip_initial_space: Ignore whitespace right after a delimiter.
        fields_per_record: Required number of fields per record. 0 means
            every record must match the first one; a negative value turns
            the check off.
        strict: Raise on malformed quoting. False reads it leniently.
    """

    delimiter: str = ","
    comment: Optional[str] = None
    skip_initial_space: bool = False
    fields_per_record: int = 0
    strict: bool = True

    newline = ""

    def parse(self, path: str, reader: TextIO) -> Iterator[List[str]]:
        at_record_start = True

        def lines() -> Iterator[str]:
            nonlocal at_record_start
            for line in reader:
                # Only the first line of a record can be a comment
                if at_record_start and self.comment and line.startswith(self.comment):
                    continue
                at_record_start = False
                yield line

        rows = csv.reader(
            lines(),
            delimiter=self.delimiter,
            skipinitialspace=self.skip_initial_space,
            strict=self.strict,
        )

        expected = self.fields_per_record if self.fields_per_record > 0 else None
        for record in rows:
            at_record_start = True
            if not record:
                continue
            if self.fields_per_record >= 0:
                if expected is None:
                    expected = len(record)
                elif len(record) != expected:
                    raise ValueError(
                        f"record on line {rows.line_num}: wrong number of fields "
                        f"(expected {expected}, got {len(record)})"
                    )
            yield record


def _trim_line_ending(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def file_stream(paths: Iterable[str]) -> Input[FileInput]:
    """
    Create a lazy stream of files in path order.

    Each path is checked for existence right before it is yielded; a missing
    path ends the run with an InputError("stat", ...).
    """
    paths = list(paths)

    def produce() -> Iterator[FileInput]:
        for path in paths:
            try:
                os.stat(path)
            except OSError as exc:
                raise InputError("stat", path, exc) from exc
            yield FileInput(path)

    return Input(produce)


def _parse_file(file_input: FileInput, parser: FileParser[T]) -> Iterator[T]:
    newline = getattr(parser, "newline", "")
    try:
        reader = file_input.open(newline=newline)
    except OSError as exc:
        raise InputError("open", file_input.path, exc) from exc

    error: Optional[InputError] = None
    try:
        yield from parser.parse(file_input.path, reader)
    except PARSE_ERRORS as exc:
        error = InputError("parse", file_input.path, exc)
    finally:
        try:
            reader.close()
        except OSError as exc:
            if error is None:
                error = InputError("close", file_input.path, exc)

    if error is not None:
        raise error from error.cause


def parse_files(files: Input[FileInput], parser: FileParser[T]) -> Input[T]:
    """
    Connect a file stream to a parser.

    Files are opened one at a time and closed once parsed, when parsing
    fails, or when the consumer stops early. The first error from the file
    stream or from opening, parsing or closing a file ends the run.
    """

    def produce() -> Iterator[T]:
        for file_input in files:
            yield from _parse_file(file_input, parser)
        if files.error is not None:
            raise files.error

    return Input(produce)


def file_line_stream(paths: Iterable[str]) -> Input[str]:
    """Stream the lines of several text files, in order."""
    return parse_files(file_stream(paths), LineParser())


def file_csv_stream(
    paths: Iterable[str], parser: Optional[CSVParser] = None
) -> Input[List[str]]:
    """Stream the records of several CSV files, in order."""
    return parse_files(file_stream(paths), parser or CSVParser())
