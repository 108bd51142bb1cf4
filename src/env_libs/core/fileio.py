# Copyright 2025 Canonical Ltd.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Read and write whole files with logging enabled."""

__all__ = ["read_bytes", "read_text", "write_bytes", "write_text"]

import fcntl
import logging
import os
from os import PathLike

_logger = logging.getLogger(__name__)


def read_bytes(path: str | PathLike, /) -> bytes:
    """Read the raw contents of a file.

    Raises:
        OSError: Raised if the file cannot be opened or read.
    """
    _logger.debug("reading file '%s'", path)
    with open(path, "rb") as fin:
        return fin.read()


def read_text(path: str | PathLike, /) -> str:
    """Read a UTF-8 file without translating line terminators.

    Bytes that are not valid UTF-8 are kept as surrogate escapes, so they are
    written back unchanged by `write_text`.

    Raises:
        OSError: Raised if the file cannot be opened or read.
    """
    return read_bytes(path).decode("utf-8", errors="surrogateescape")


def write_bytes(path: str | PathLike, data: bytes, /, mode: int = 0o644) -> None:
    """Replace the contents of a file while holding an exclusive advisory lock.

    The file is created with permissions `mode` if it does not exist. It is
    only truncated once the lock is held, so concurrent writers never
    interleave partial contents.

    Raises:
        OSError: Raised if the file cannot be opened, locked, or written.
    """
    _logger.debug("writing %s bytes to file '%s'", len(data), path)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT, mode)
    with open(fd, "wb") as fout:
        fcntl.flock(fout, fcntl.LOCK_EX)
        try:
            fout.truncate(0)
            fout.write(data)
            fout.flush()
            os.fsync(fout.fileno())
        finally:
            fcntl.flock(fout, fcntl.LOCK_UN)


def write_text(path: str | PathLike, text: str, /) -> None:
    """Replace the contents of a file with UTF-8 text while holding an exclusive lock.

    Raises:
        OSError: Raised if the file cannot be opened, locked, or written.
    """
    write_bytes(path, text.encode("utf-8", errors="surrogateescape"))
