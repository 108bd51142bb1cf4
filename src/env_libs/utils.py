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

"""Utilities for streamlining common operations on environment files."""

__all__ = ["plog", "unique"]

import pprint
from collections.abc import Iterable


def plog(o: object) -> str:
    """Prettify built-in Python objects for log output."""
    return pprint.pformat(o, indent=4, sort_dicts=False)


def unique(keys: str | Iterable[str], /) -> list[str]:
    """Normalize key names into a list without duplicates.

    Args:
        keys: A single key name, or an iterable of key names. Order of first
            appearance is preserved.
    """
    if isinstance(keys, str):
        return [keys]

    return list(dict.fromkeys(keys))
