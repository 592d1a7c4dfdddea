"""Codec capability for cached values.

A value stored in a Cached handle serializes itself, the same way a model
exposes to_json()/from_json(). The byte format is entirely up to the type.
"""

from typing import Protocol, Self, runtime_checkable


@runtime_checkable
class Cache(Protocol):
    """A value that can be written to and read back from a cache file."""

    def encode(self) -> bytes:
        """Serialize the value. Must depend only on the value."""
        ...

    @classmethod
    def decode(cls, data: bytes) -> Self:
        """Rebuild a value from bytes produced by encode().

        Raise ValueError (or the TypeError/KeyError a wrongly shaped payload
        naturally produces) for input encode() could not have produced; never
        fall back to a default or partially populated value.
        """
        ...
