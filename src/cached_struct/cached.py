"""File-backed value cache.

A Cached handle keeps one value in memory and one file on disk in step:

1. Before every read or mutation, the file's mtime is compared with the
   mtime of the version currently in memory. A strictly newer file is
   decoded and replaces the value; a missing file leaves the value alone.
2. Every mutation goes through apply_mut(), which persists right after.
3. Persisting writes the file atomically, then records the mtime of the
   written file so the handle doesn't reload its own write.
4. Leaving a `with` block persists one last time (the teardown).

Usage:

    match Cached.create("accounts.txt", Accounts):
        case Ok(accounts):
            with accounts:
                accounts.apply_mut(lambda a: a.deposit("test", -40))
        case Err(error):
            print(format_error(error))
"""

import logging
import os
from collections.abc import Callable
from enum import StrEnum
from pathlib import Path
from types import TracebackType
from typing import Generic, Self, TypeVar

from cached_struct.codec import Cache
from cached_struct.lib.errors import (
    DecodeError,
    FileIOError,
    LoadError,
    TeardownError,
    format_error,
)
from cached_struct.lib.result import Err, Ok, Result
from cached_struct.lib.storage import file

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Cache)
R = TypeVar("R")

# Lower than any st_mtime_ns, so the first check loads an existing file.
NEVER_LOADED = -(2**63)


class TeardownPolicy(StrEnum):
    """What a failed persist at the end of a `with` block does.

    Only applies to `with` blocks. A handle left for the garbage collector
    always logs, since a finalizer cannot raise.
    """

    RAISE = "raise"
    LOG = "log"


class Cached(Generic[T]):
    """A value of type T mirrored to a single file.

    Not thread-safe, and nothing stops another process from writing the
    same file: the last writer wins.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        value: T,
        teardown: TeardownPolicy = TeardownPolicy.RAISE,
    ) -> None:
        """Wrap value without touching the file. Prefer Cached.create()."""
        if not isinstance(value, Cache):
            raise TypeError(f"{type(value).__name__} does not implement encode()/decode()")

        self.teardown = TeardownPolicy(teardown)
        self._path = Path(path)
        self._value = value
        self._decode = type(value).decode
        self._last_modified = NEVER_LOADED
        self._released = False

    @classmethod
    def create(
        cls,
        path: str | os.PathLike[str],
        default_factory: Callable[[], T],
        *,
        teardown: TeardownPolicy = TeardownPolicy.RAISE,
    ) -> Result[Self, LoadError]:
        """Create a handle and load the file if it exists.

        default_factory provides the value used while the file is absent;
        passing the value class itself works for default-constructible types.
        """
        handle = cls(path, default_factory(), teardown)
        try:
            loaded = handle.refresh()
        except BaseException:
            handle._released = True
            raise

        match loaded:
            case Err() as e:
                # Never persist the default over a file we failed to load.
                handle._released = True
                return e
            case Ok():
                return Ok(handle)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def last_modified(self) -> int:
        """mtime (ns) of the file version held in memory."""
        return self._last_modified

    @property
    def released(self) -> bool:
        return self._released

    def refresh(self) -> Result[None, LoadError]:
        """Reload the value if the file changed since it was last seen.

        On failure the current value and last_modified are kept.
        """
        self._ensure_open()

        match file.modified_ns(self._path):
            case Err() as e:
                return e
            case Ok(None):
                return Ok(None)
            case Ok(mtime) if mtime <= self._last_modified:
                return Ok(None)
            case Ok(mtime):
                pass

        match file.read_bytes(self._path):
            case Err() as e:
                return e
            case Ok(data):
                pass

        try:
            value = self._decode(data)
        except (ValueError, TypeError, KeyError) as e:
            return Err(DecodeError(self._path, str(e) or type(e).__name__))

        self._value = value
        self._last_modified = mtime
        logger.debug("Loaded %s (mtime %d)", self._path, mtime)
        return Ok(None)

    def get(self) -> Result[T, LoadError]:
        """Return the current value, reloading it first if stale.

        The value is the handle's own object, not a copy: change it through
        apply_mut() so the change gets persisted.
        """
        match self.refresh():
            case Err() as e:
                return e
            case Ok():
                return Ok(self._value)

    def save(self) -> Result[None, FileIOError]:
        """Write the value to the file and remember the file's new mtime."""
        self._ensure_open()

        match file.replace_bytes(self._path, self._value.encode()):
            case Err() as e:
                return e
            case Ok(mtime):
                self._last_modified = mtime
                logger.debug("Saved %s (mtime %d)", self._path, mtime)
                return Ok(None)

    def apply_mut(self, fn: Callable[[T], R]) -> Result[R, LoadError]:
        """Refresh, apply fn to the value in place, then save.

        Returns whatever fn returns. If saving fails, the change stays in
        memory but is not on disk; call save() again to retry.
        """
        match self.refresh():
            case Err() as e:
                return e
            case Ok():
                pass

        ret = fn(self._value)

        match self.save():
            case Err(error) as e:
                logger.warning(
                    "Change to %s kept in memory only: %s", self._path, format_error(error)
                )
                return e
            case Ok():
                return Ok(ret)

    def close(self) -> Result[None, FileIOError]:
        """Save and release the handle. On failure the handle stays open."""
        match self.save():
            case Err() as e:
                return e
            case Ok():
                self._released = True
                return Ok(None)

    def into_value(self) -> T:
        """Release the handle without saving and return the value."""
        self._ensure_open()
        self._released = True
        return self._value

    def __enter__(self) -> Self:
        self._ensure_open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        # Persist even when the block raised.
        if not self._released:
            self._finish(self.teardown)

    def __del__(self) -> None:
        # Handles that were never closed still get one save, but a finalizer
        # can't raise, so failures are only logged.
        if not getattr(self, "_released", True):
            self._finish(TeardownPolicy.LOG)

    def __repr__(self) -> str:
        state = "released" if self._released else "open"
        return f"Cached({str(self._path)!r}, {state})"

    def _finish(self, policy: TeardownPolicy) -> None:
        result = self.save()
        self._released = True
        match result:
            case Ok():
                return
            case Err(error) if policy is TeardownPolicy.RAISE:
                raise TeardownError(error)
            case Err(error):
                logger.error(
                    "Failed to persist %s on teardown: %s", self._path, format_error(error)
                )

    def _ensure_open(self) -> None:
        if self._released:
            raise ValueError(f"Cache handle for {self._path} has been released")

