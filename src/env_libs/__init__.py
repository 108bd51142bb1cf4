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

"""Libraries for safely editing `.env`-style environment files."""

__all__ = [
    # From `codec.py`
    "decode",
    "encode",
    # From `document.py`
    "EnvDocument",
    "parse_all",
    # From `errors.py`
    "AlreadyExistsError",
    "DirectoryCreateError",
    "EnvFileNotFoundError",
    "Error",
    "IoFailureError",
    "OperationRefusedError",
    "ProtectedDeleteError",
    "RenameCollisionError",
    # From `manager.py`
    "EnvManager",
]

from env_libs.codec import decode, encode
from env_libs.document import EnvDocument, parse_all
from env_libs.errors import (
    AlreadyExistsError,
    DirectoryCreateError,
    EnvFileNotFoundError,
    Error,
    IoFailureError,
    OperationRefusedError,
    ProtectedDeleteError,
    RenameCollisionError,
)
from env_libs.manager import EnvManager
