"""cached-struct - a value kept in sync with a file, reloaded only when the file changes."""

from cached_struct.cached import NEVER_LOADED, Cached, TeardownPolicy
from cached_struct.codec import Cache
from cached_struct.lib.errors import DecodeError, FileIOError, TeardownError, format_error
from cached_struct.lib.result import Err, Ok, Result, unwrap

__version__ = "0.1.0"

__all__ = [
    # handle
    "Cached",
    "TeardownPolicy",
    "NEVER_LOADED",
    # codec
    "Cache",
    # errors
    "FileIOError",
    "DecodeError",
    "TeardownError",
    "format_error",
    # result
    "Ok",
    "Err",
    "Result",
    "unwrap",
]
