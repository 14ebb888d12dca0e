"""
Exception types raised by TinySketch.

Argument problems derive from the built-in ValueError / TypeError so callers
that already catch those keep working.
"""


class SketchError(Exception):
    """Base class for all TinySketch errors."""


class InvalidDimensionError(SketchError, ValueError):
    """A size, width, depth, hash count or item count was not positive."""


class InvalidErrorBoundError(SketchError, ValueError):
    """A false positive rate, epsilon or delta was outside its open interval."""


class IncompatibleDimensionsError(SketchError, ValueError):
    """Two summaries with different dimensions were merged."""


class NilOperandError(SketchError, TypeError):
    """A merge or collect operation was given None instead of a summary."""


class InputError(SketchError):
    """
    A file could not be found, opened, parsed or closed while producing input.

    Input sequences record this error instead of raising it; see
    tiny_sketch.streaming.input.Input.
    """

    def __init__(self, operation: str, path: str, cause: BaseException):
        super().__init__(f"{operation} {path}: {cause}")
        self.operation = operation
        self.path = path
        self.cause = cause
