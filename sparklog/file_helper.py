"""File access for file sinks: opening with retries, writing, sizing and name splitting."""

from __future__ import annotations

import os
import time
from typing import BinaryIO, Optional, Union

from sparklog.message import LogError

_OPEN_TRIES = 5
_OPEN_INTERVAL_SECONDS = 0.010

PathLike = Union[str, "os.PathLike[str]"]


def split_by_extension(fname: str) -> tuple[str, str]:
    """Split a file name into its path without extension and its extension.

    ``"mylog.txt"`` gives ``("mylog", ".txt")``; a leading dot of a hidden
    file is not taken for an extension, and neither is a trailing dot.
    """
    ext_index = fname.rfind(".")
    if ext_index <= 0 or ext_index == len(fname) - 1:
        return fname, ""
    separators = {"/", os.sep}
    folder_index = max(fname.rfind(sep) for sep in separators)
    if folder_index >= 0 and folder_index >= ext_index - 1:
        return fname, ""
    return fname[:ext_index], fname[ext_index:]


class FileHelper:
    """Owns one open log file.

    Opening is retried a few times with a short delay; failures raise
    :class:`LogError`.
    """

    def __init__(self) -> None:
        self._file: Optional[BinaryIO] = None
        self._filename = ""

    def __enter__(self) -> "FileHelper":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def open(self, fname: PathLike, truncate: bool = False) -> None:
        """Open ``fname`` for appending (or truncated), creating its directory if needed."""
        self.close()
        self._filename = os.fspath(fname)
        mode = "wb" if truncate else "ab"
        last_error: Optional[OSError] = None
        for attempt in range(_OPEN_TRIES):
            try:
                folder = os.path.dirname(self._filename)
                if folder:
                    os.makedirs(folder, exist_ok=True)
                self._file = open(self._filename, mode)
                return
            except OSError as exc:
                last_error = exc
                if attempt + 1 < _OPEN_TRIES:
                    time.sleep(_OPEN_INTERVAL_SECONDS)
        raise LogError(f"Failed opening file {self._filename} for writing: {last_error}") from last_error

    def reopen(self, truncate: bool) -> None:
        """Open the last opened file again."""
        if not self._filename:
            raise LogError("Failed re opening file - was not opened before")
        self.open(self._filename, truncate)

    def flush(self) -> None:
        if self._file is not None:
            self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            try:
                self._file.close()
            finally:
                self._file = None

    def write(self, data: Union[str, bytes]) -> None:
        """Write text (encoded as UTF-8) or bytes to the file."""
        if self._file is None:
            raise LogError(f"Failed writing to file {self._filename}: file is not open")
        payload = data.encode("utf-8") if isinstance(data, str) else data
        try:
            self._file.write(payload)
        except OSError as exc:
            raise LogError(f"Failed writing to file {self._filename}: {exc}") from exc

    def size(self) -> int:
        """Size of the open file in bytes, including anything not yet flushed."""
        if self._file is None:
            raise LogError(f"Cannot use size() on closed file {self._filename}")
        try:
            self._file.flush()
            return os.fstat(self._file.fileno()).st_size
        except OSError as exc:
            raise LogError(f"Failed getting file size of {self._filename}: {exc}") from exc

    def filename(self) -> str:
        return self._filename