"""Local file storage backing a cache handle.

Modification times are nanosecond integers (st_mtime_ns).
"""

import os
import shutil
import tempfile
from pathlib import Path

from cached_struct.lib.errors import FileIOError
from cached_struct.lib.result import Err, Ok, Result

# Mode for newly created cache files; replacements keep the existing mode.
DEFAULT_MODE = 0o644


def modified_ns(path: Path) -> Result[int | None, FileIOError]:
    """Modification time of path, or Ok(None) if it doesn't exist."""
    try:
        return Ok(path.stat().st_mtime_ns)
    except FileNotFoundError:
        return Ok(None)
    except OSError as e:
        return Err(FileIOError(path, str(e)))


def read_bytes(path: Path) -> Result[bytes, FileIOError]:
    """Read the whole file."""
    try:
        return Ok(path.read_bytes())
    except OSError as e:
        return Err(FileIOError(path, str(e)))


def replace_bytes(path: Path, data: bytes) -> Result[int, FileIOError]:
    """Atomically replace path with data, creating parent dirs if needed.

    Writes a temporary sibling file and renames it over path, so readers
    see either the old or the new contents. Returns the modification time
    of the written file.
    """
    tmp: Path | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        tmp = Path(tmp_name)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        if path.exists():
            shutil.copymode(path, tmp)
        else:
            tmp.chmod(DEFAULT_MODE)

        os.replace(tmp, path)
        tmp = None
        return Ok(path.stat().st_mtime_ns)
    except OSError as e:
        return Err(FileIOError(path, str(e)))
    finally:
        if tmp is not None:
            tmp.unlink(missing_ok=True)
