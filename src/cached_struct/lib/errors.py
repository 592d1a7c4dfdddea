"""Error types for cached-struct.

Errors are frozen dataclasses returned inside Err - handle operations do
not raise for I/O or decoding problems. Pattern match on them, or turn
them into text with format_error().

The one exception is TeardownError: persistence at the end of a `with`
block has no caller to hand a Result to.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class FileIOError:
    """Backing file could not be stat'ed, read, or written.

    A missing file is not an error when checking staleness.
    """

    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class DecodeError:
    """Backing file exists but its contents are not a valid value."""

    path: Path
    reason: str


type LoadError = FileIOError | DecodeError


def format_error(error: object) -> str:
    """Format an error value for display."""
    match error:
        case FileIOError(path, reason):
            return f"I/O error on cache file '{path}': {reason}"

        case DecodeError(path, reason):
            return f"Cache file '{path}' could not be decoded: {reason}"

        case _:
            return str(error)


class TeardownError(RuntimeError):
    """Persisting a cache handle at scope end failed."""

    def __init__(self, error: FileIOError) -> None:
        super().__init__(f"Failed to persist cache on teardown: {format_error(error)}")
        self.error = error
