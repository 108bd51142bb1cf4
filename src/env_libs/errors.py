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

"""Common errors raised by functions and methods in the `env_libs` package."""

__all__ = [
    "AlreadyExistsError",
    "DirectoryCreateError",
    "EnvFileNotFoundError",
    "Error",
    "IoFailureError",
    "OperationRefusedError",
    "ProtectedDeleteError",
    "RenameCollisionError",
]

from os import PathLike


class Error(Exception):
    """Base error used to compose other errors."""

    @property
    def message(self) -> str:
        """Return message passed as first argument to error."""
        return self.args[0]


class EnvFileNotFoundError(Error):
    """Error raised if no environment file is bound, or the file does not exist.

    Args:
        path: Path of the missing environment file. `None` if no file is bound.
    """

    def __init__(self, path: str | PathLike | None = None) -> None:
        self.path = path
        if path is None:
            super().__init__("no env file is bound")
        else:
            super().__init__(f"env file '{path}' not found")


class OperationRefusedError(Error):
    """Error raised if an operation on an environment file is refused or fails."""


class AlreadyExistsError(OperationRefusedError):
    """Error raised if a file is created over an existing file without `overwrite`."""


class RenameCollisionError(OperationRefusedError):
    """Error raised if a key is renamed onto an existing key without `overwrite`."""


class ProtectedDeleteError(OperationRefusedError):
    """Error raised if the protected main environment file is deleted without `force`."""


class IoFailureError(OperationRefusedError):
    """Error raised if reading, writing, copying, or deleting a file fails."""


class DirectoryCreateError(OperationRefusedError):
    """Error raised if the parent directory of a new file cannot be created."""
