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

"""Encode and decode values stored in environment files.

Values are always stored on a single line. Real newlines are written as the
two-character escape sequence `\\n`, and values that would otherwise be
mangled by a `KEY=VALUE` parser are wrapped in double quotes:

```python3
from env_libs.codec import decode, encode

encode("hello world")  # '"hello world"'
encode(True)  # 'true'
encode({"a": 1, "b": 2})  # '{"a":1,"b":2}'
decode('"hello world"')  # 'hello world'
```

Notes:
    - Decoding does not reverse JSON encoding. Structured values decode back to
      their compact JSON text.
"""

__all__ = ["decode", "encode"]

import json
import re
from collections.abc import Mapping
from typing import Any

_NEEDS_QUOTES = re.compile(r"[\s#=]")
_NEWLINES = re.compile(r"\r\n|\r|\n")
_QUOTES = ('"', "'")


def encode(value: Any, /) -> str:
    """Encode a value into its single-line stored form.

    Args:
        value: Value to encode. `None` is stored as an empty string, booleans as
            `true` or `false`, mappings and lists as compact JSON, and anything
            else as its string representation.
    """
    if value is None:
        return ""

    if isinstance(value, bool):
        return "true" if value else "false"

    if isinstance(value, Mapping | list | tuple):
        value = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    elif not isinstance(value, str):
        value = str(value)

    escaped = _NEWLINES.sub(r"\\n", value)
    if (
        _NEEDS_QUOTES.search(escaped)
        or value != value.strip()
        or escaped.startswith(_QUOTES)
    ):
        return '"' + escaped.replace('"', '\\"') + '"'

    return escaped


def decode(raw: str, /) -> str:
    """Decode a raw stored value.

    Surrounding whitespace is trimmed. If the value is wrapped in a matching
    pair of single or double quotes, the quotes are removed and escaped quotes
    inside are unescaped. The `\\n` escape sequence is always turned back into
    a real newline.
    """
    value = raw.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        value = value[1:-1].replace('\\"', '"').replace("\\'", "'")

    return value.replace("\\n", "\n")
