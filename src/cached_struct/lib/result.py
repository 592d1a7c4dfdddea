"""Result type for cache operations.

Every fallible operation on a cache handle returns a Result instead of
raising. Use pattern matching to handle results:

    match cached.get():
        case Ok(accounts):
            ...
        case Err(DecodeError(path, reason)):
            ...
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success case containing a value."""

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Error case containing an error."""

    error: E


type Result[T, E] = Ok[T] | Err[E]


def unwrap(result: Result[T, E]) -> T:
    """Extract the value from Ok, or raise ValueError if Err.

    Meant for scripts and tests; library code matches on the result.
    """
    match result:
        case Ok(value):
            return value
        case Err(error):
            raise ValueError(f"Called unwrap on Err: {error}")
