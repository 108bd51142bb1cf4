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

"""Manage environment variables and environment files.

`EnvManager` edits `.env`-style files in place. Comments, blank lines, and the
order of keys are preserved, and every change is written back to disk in a
single write that holds an exclusive lock on the file.

### Example Usage

```python3
from env_libs import EnvManager

env = EnvManager()
env.create_file("/etc/default/app", {"APP_NAME": "My App", "DEBUG": False})
env.set({"DEBUG": True, "APP_URL": "http://localhost"})
env.get(["APP_NAME", "DEBUG"])  # {"APP_NAME": "My App", "DEBUG": "true"}

backup = env.backup()
env.delete("APP_URL")
env.restore(backup)
```
"""

__all__ = [
    "BACKUP_TIMESTAMP_FORMAT",
    "DEFAULT_BACKUP_SUFFIX",
    "DEFAULT_ENV_FILE",
    "EnvManager",
]

import logging
import os
from collections.abc import Iterable, Mapping
from datetime import datetime
from os import PathLike
from pathlib import Path
from typing import Any

import dotenv

from .codec import encode
from .core import read_bytes, read_text, write_bytes, write_text
from .document import EnvDocument, parse_all
from .errors import (
    AlreadyExistsError,
    DirectoryCreateError,
    EnvFileNotFoundError,
    IoFailureError,
    ProtectedDeleteError,
    RenameCollisionError,
)
from .utils import plog, unique

DEFAULT_ENV_FILE = ".env"
DEFAULT_BACKUP_SUFFIX = ".bak"
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

_logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now().strftime(BACKUP_TIMESTAMP_FORMAT)


class EnvManager:
    """Manage environment variables in an environment file.

    Args:
        path: Environment file to bind to. If not set, a file must be bound
            with `bind` or `create_file` before any other operation.

    Raises:
        EnvFileNotFoundError: Raised if `path` is set but does not exist.

    Notes:
        - Keys are case-sensitive and are not validated.
        - If a key is assigned more than once, `get` and `has` see the first
          assignment, `all` returns the last one, and `set` rewrites all of them.
        - The lock is only held while writing. Changes made by another process
          between a read and the following write are overwritten.
    """

    def __init__(self, path: str | PathLike | None = None) -> None:
        self._path: Path | None = None
        if path is not None:
            self.bind(path)

    @classmethod
    def discover(cls, filename: str = DEFAULT_ENV_FILE) -> "EnvManager":
        """Bind to the nearest environment file found from the current working directory.

        Parent directories are searched until a file named `filename` is found.

        Raises:
            EnvFileNotFoundError: Raised if no matching file is found.
        """
        path = dotenv.find_dotenv(filename, usecwd=True)
        if not path:
            _logger.error("no '%s' file found in '%s' or its parents", filename, os.getcwd())
            raise EnvFileNotFoundError(filename)

        return cls(path)

    @property
    def path(self) -> Path | None:
        """Get path to the bound environment file."""
        return self._path

    def bind(self, path: str | PathLike, /) -> None:
        """Bind to an existing environment file.

        Raises:
            EnvFileNotFoundError: Raised if `path` does not exist.
        """
        if not os.path.isfile(path):
            raise EnvFileNotFoundError(path)

        _logger.debug("binding to env file '%s'", path)
        self._path = Path(path)

    def _require_path(self) -> Path:
        if self._path is None:
            raise EnvFileNotFoundError()

        if not self._path.is_file():
            raise EnvFileNotFoundError(self._path)

        return self._path

    def _load(self) -> EnvDocument:
        path = self._require_path()
        try:
            return EnvDocument.parse(read_text(path))
        except OSError as e:
            _logger.error("failed to read env file '%s'. reason: %s", path, e)
            raise EnvFileNotFoundError(path) from e

    def _dump(self, doc: EnvDocument) -> None:
        path = self._require_path()
        try:
            write_text(path, doc.dumps())
        except OSError as e:
            _logger.error("failed to write env file '%s'. reason: %s", path, e)
            raise IoFailureError(f"cannot write env file '{path}'. reason: {e}") from e

    def all(self) -> dict[str, str]:
        """Get all environment variables in the environment file."""
        return self._load().to_dict()

    def get(self, keys: str | Iterable[str], /) -> dict[str, str]:
        """Get values of environment variables in the environment file.

        Args:
            keys: Key name, or sequence of key names, to look up.

        Returns:
            Mapping of each requested key to its value. Keys that are not set
            map to an empty string.
        """
        doc = self._load()
        return {key: doc.get(key) for key in unique(keys)}

    def has(self, key: str, /) -> bool:
        """Check if an environment variable is set in the environment file.

        Commented-out assignments such as `# KEY=value` do not count.
        """
        return self._load().has(key)

    def set(self, config: Mapping[str, Any], /) -> None:
        """Set environment variables in the environment file."""
        doc = self._load()
        for key, value in config.items():
            doc.upsert(key, encode(value))

        _logger.debug("setting variables in env file '%s':\n%s", self._path, plog(config))
        self._dump(doc)

    def set_if_missing(self, config: Mapping[str, Any], /) -> None:
        """Set environment variables that are not set or are set to an empty value."""
        doc = self._load()
        missing = {key: value for key, value in config.items() if doc.get(key) == ""}
        for key, value in missing.items():
            doc.upsert(key, encode(value))

        _logger.debug("setting missing variables in env file '%s':\n%s", self._path, plog(missing))
        self._dump(doc)

    def rename(self, old: str, new: str, /, overwrite: bool = False) -> None:
        """Rename an environment variable.

        The renamed variable is moved to the end of the environment file.
        Nothing is changed if `old` and `new` are the same, or if `old` is not
        set or is empty.

        Args:
            old: Current key name.
            new: New key name.
            overwrite: If set to `True`, replace the value of `new` if it is already set.

        Raises:
            RenameCollisionError: Raised if `new` is already set and `overwrite` is `False`.
        """
        if old == new:
            return

        doc = self._load()
        value = doc.get(old)
        if value == "":
            _logger.debug(
                "variable '%s' is not set in env file '%s'. skipping rename", old, self._path
            )
            return

        if doc.has(new) and not overwrite:
            _logger.warning(
                "refusing to rename '%s' to '%s' in env file '%s'. '%s' is already set",
                old,
                new,
                self._path,
                new,
            )
            raise RenameCollisionError(
                f"cannot rename '{old}' to '{new}'. variable '{new}' already exists"
            )

        doc.delete(old)
        doc.upsert(new, encode(value))
        _logger.debug("renaming variable '%s' to '%s' in env file '%s'", old, new, self._path)
        self._dump(doc)

    def delete(self, keys: str | Iterable[str], /) -> None:
        """Unset environment variables in the environment file.

        Keys that are not set are ignored. Runs of more than one blank line left
        behind are collapsed into a single blank line.
        """
        doc = self._load()
        for key in unique(keys):
            if not doc.delete(key):
                _logger.debug("variable '%s' is not set in env file '%s'", key, self._path)

        doc.squeeze_blank_lines()
        self._dump(doc)

    def create_file(
        self,
        path: str | PathLike,
        /,
        content: str | Mapping[str, Any] | None = None,
        overwrite: bool = False,
        bind: bool = True,
    ) -> Path:
        """Create a new environment file.

        Args:
            path: Path of the file to create. Missing parent directories are created.
            content: Initial content. Either raw text, which is written as-is
                with a trailing newline added if missing, or a mapping of
                environment variables, which are written one per line.
            overwrite: If set to `True`, replace the file if it already exists.
            bind: If set to `True`, bind to the new file.

        Raises:
            DirectoryCreateError: Raised if the parent directory cannot be created.
            AlreadyExistsError: Raised if the file exists and `overwrite` is `False`.
            IoFailureError: Raised if the file cannot be written.
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            _logger.error("failed to create directory '%s'. reason: %s", path.parent, e)
            raise DirectoryCreateError(
                f"cannot create directory '{path.parent}'. reason: {e}"
            ) from e

        if path.exists() and not overwrite:
            _logger.warning("refusing to replace existing env file '%s' without overwrite", path)
            raise AlreadyExistsError(f"env file '{path}' already exists")

        if content is None:
            text = ""
        elif isinstance(content, str):
            text = content if not content or content.endswith(("\n", "\r")) else content + "\n"
        else:
            text = "".join(f"{key}={encode(value)}\n" for key, value in content.items())

        _logger.debug("creating env file '%s'", path)
        try:
            write_text(path, text)
        except OSError as e:
            _logger.error("failed to write env file '%s'. reason: %s", path, e)
            raise IoFailureError(f"cannot write env file '{path}'. reason: {e}") from e

        if bind:
            self._path = path

        return path

    def delete_file(self, force: bool = False, main_path: str | PathLike | None = None) -> None:
        """Delete the bound environment file.

        Args:
            force: If set to `True`, delete the file even if it is the main environment file.
            main_path: Path of the main environment file to protect from deletion.

        Raises:
            ProtectedDeleteError: Raised if the bound file is `main_path` and `force` is `False`.
            IoFailureError: Raised if the file cannot be deleted.
        """
        path = self._require_path()
        if (
            main_path is not None
            and not force
            and os.path.realpath(main_path) == os.path.realpath(path)
        ):
            _logger.warning("refusing to delete main env file '%s' without force", path)
            raise ProtectedDeleteError(
                f"cannot delete main env file '{path}'. set `force` to delete it anyway"
            )

        _logger.debug("deleting env file '%s'", path)
        try:
            path.unlink()
        except OSError as e:
            _logger.error("failed to delete env file '%s'. reason: %s", path, e)
            raise IoFailureError(f"cannot delete env file '{path}'. reason: {e}") from e

    def backup(self, suffix: str = DEFAULT_BACKUP_SUFFIX) -> Path:
        """Copy the bound environment file to a timestamped backup file.

        The backup is written next to the bound file as
        `<path><suffix>.<YYYYMMDD_HHMMSS>`, with the same permissions as the bound file.

        Raises:
            IoFailureError: Raised if the backup cannot be written.

        Returns:
            Path of the backup file.
        """
        path = self._require_path()
        target = Path(f"{path}{suffix}.{_timestamp()}")
        _logger.debug("backing up env file '%s' to '%s'", path, target)
        try:
            write_bytes(target, read_bytes(path), mode=path.stat().st_mode & 0o777)
        except OSError as e:
            _logger.error("failed to back up env file '%s'. reason: %s", path, e)
            raise IoFailureError(
                f"cannot back up env file '{path}' to '{target}'. reason: {e}"
            ) from e

        return target

    def restore(self, backup_path: str | PathLike, /, bind: bool = False) -> None:
        """Replace the contents of the bound environment file with a backup.

        Args:
            backup_path: Path of the backup file to restore from.
            bind: If set to `True`, bind to the backup file after restoring.

        Raises:
            EnvFileNotFoundError: Raised if no environment file is bound.
            IoFailureError:
                Raised if the backup cannot be read or the bound file cannot be written.
        """
        if self._path is None:
            raise EnvFileNotFoundError()

        try:
            data = read_bytes(backup_path)
        except OSError as e:
            _logger.error("failed to read backup file '%s'. reason: %s", backup_path, e)
            raise IoFailureError(f"cannot read backup file '{backup_path}'. reason: {e}") from e

        _logger.debug("restoring env file '%s' from '%s'", self._path, backup_path)
        try:
            write_bytes(self._path, data)
        except OSError as e:
            _logger.error("failed to write env file '%s'. reason: %s", self._path, e)
            raise IoFailureError(f"cannot write env file '{self._path}'. reason: {e}") from e

        if bind:
            self._path = Path(backup_path)

    def merge_from_path(
        self,
        path: str | PathLike,
        /,
        only: Iterable[str] = (),
        exclude: Iterable[str] = (),
    ) -> None:
        """Set environment variables from another environment file.

        Args:
            path: Environment file to merge variables from.
            only: If not empty, only merge these keys.
            exclude: Keys to never merge. Applied after `only`.

        Raises:
            IoFailureError: Raised if `path` cannot be read.
        """
        try:
            config = parse_all(read_text(path))
        except OSError as e:
            _logger.error("failed to read env file '%s'. reason: %s", path, e)
            raise IoFailureError(f"cannot read env file '{path}'. reason: {e}") from e

        if only := unique(only):
            config = {key: value for key, value in config.items() if key in only}

        for key in unique(exclude):
            config.pop(key, None)

        _logger.debug("merging variables from env file '%s' into '%s'", path, self._path)
        self.set(config)
