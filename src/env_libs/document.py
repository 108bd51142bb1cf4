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

"""Line-oriented model of an environment file.

An environment file is parsed once into an ordered list of typed lines. Every
line keeps its raw text and its own line terminator, so a document that is not
modified is serialized back byte for byte. Mutations only touch the lines of
the key being changed.

### Example Usage

```python3
from env_libs.document import EnvDocument

doc = EnvDocument.parse("# comment\\nAPP_NAME=foo\\n")
doc.upsert("APP_NAME", "bar")
doc.upsert("APP_ENV", "testing")
doc.dumps()  # '# comment\\nAPP_NAME=bar\\nAPP_ENV=testing'
```
"""

__all__ = ["Assignment", "Blank", "Comment", "EnvDocument", "Line", "parse_all"]

import re
from collections.abc import Iterator
from dataclasses import dataclass

from .codec import decode

_NEWLINE = re.compile(r"\r\n|\r|\n")


@dataclass
class Line:
    """Line that is preserved verbatim and ignored by every operation."""

    raw: str
    eol: str = ""

    def __str__(self) -> str:
        return self.raw + self.eol


@dataclass
class Blank(Line):
    """Empty or whitespace-only line."""


@dataclass
class Comment(Line):
    """Line whose first non-whitespace character is `#`."""


@dataclass
class Assignment(Line):
    """`KEY=VALUE` line.

    `raw` is always `prefix + "=" + value`, where `prefix` is the text before
    the first `=` and `value` is the undecoded text after it.
    """

    prefix: str = ""
    value: str = ""

    @property
    def key(self) -> str:
        """Get the trimmed key name."""
        return self.prefix.strip()

    def anchored(self, key: str) -> bool:
        """Check if the line assigns `key` with no space between the key and `=`."""
        return self.prefix.lstrip() == key

    def replace(self, value: str) -> None:
        """Replace the value portion of the line."""
        self.value = value
        self.raw = f"{self.prefix}={value}"


def _classify(raw: str, eol: str) -> Line:
    stripped = raw.strip()
    if not stripped:
        return Blank(raw, eol)

    if stripped.startswith("#"):
        return Comment(raw, eol)

    prefix, sep, value = raw.partition("=")
    if not sep or not prefix.strip():
        return Line(raw, eol)

    return Assignment(raw, eol, prefix=prefix, value=value)


class EnvDocument:
    """Ordered sequence of lines parsed from an environment file."""

    def __init__(self, lines: list[Line] | None = None) -> None:
        self._lines = lines if lines is not None else []

    @classmethod
    def parse(cls, text: str, /) -> "EnvDocument":
        """Parse text into a document, splitting on any newline convention."""
        lines = []
        pos = 0
        for match in _NEWLINE.finditer(text):
            lines.append(_classify(text[pos : match.start()], match.group()))
            pos = match.end()

        if pos < len(text):
            lines.append(_classify(text[pos:], ""))

        return cls(lines)

    def dumps(self) -> str:
        """Serialize the document back to text."""
        return "".join(str(line) for line in self._lines)

    def __iter__(self) -> Iterator[Line]:
        return iter(self._lines)

    @property
    def newline(self) -> str:
        """Get the first line terminator used in the document, or `\\n` if there is none."""
        return next((line.eol for line in self._lines if line.eol), "\n")

    def _matches(self, key: str) -> Iterator[Assignment]:
        return (
            line
            for line in self._lines
            if isinstance(line, Assignment) and line.anchored(key)
        )

    def find(self, key: str, /) -> str | None:
        """Get the raw value of the first line assigning `key`, or `None` if there is none."""
        line = next(self._matches(key), None)
        return line.value if line is not None else None

    def has(self, key: str, /) -> bool:
        """Check if a line assigning `key` exists."""
        return next(self._matches(key), None) is not None

    def get(self, key: str, /) -> str:
        """Get the decoded value of `key`. Missing keys decode to an empty string."""
        return decode(self.find(key) or "")

    def upsert(self, key: str, encoded: str, /) -> None:
        """Set the raw value of `key`, appending a new line if `key` is not assigned.

        Args:
            key: Key to set.
            encoded: Value already encoded with `env_libs.codec.encode`.
        """
        matched = False
        for line in self._matches(key):
            line.replace(encoded)
            matched = True

        if matched:
            return

        if self._lines and not self._lines[-1].eol:
            self._lines[-1].eol = self.newline

        self._lines.append(Assignment(f"{key}={encoded}", prefix=key, value=encoded))

    def delete(self, key: str, /) -> bool:
        """Remove every line assigning `key`. Return `True` if a line was removed."""
        kept = [
            line
            for line in self._lines
            if not (isinstance(line, Assignment) and line.anchored(key))
        ]
        removed = len(kept) != len(self._lines)
        self._lines = kept
        return removed

    def squeeze_blank_lines(self) -> None:
        """Collapse every run of three or more consecutive line breaks down to two."""
        squeezed = []
        breaks = 0
        for line in self._lines:
            if not line.raw and line.eol:
                breaks += 1
                if breaks > 2:
                    continue
            else:
                breaks = 1 if line.eol else 0

            squeezed.append(line)

        self._lines = squeezed

    def items(self) -> Iterator[tuple[str, str]]:
        """Iterate over `(key, decoded value)` pairs in document order."""
        for line in self._lines:
            if isinstance(line, Assignment):
                yield line.key, decode(line.value)

    def to_dict(self) -> dict[str, str]:
        """Get all assignments as a mapping. Later duplicate keys win."""
        return dict(self.items())


def parse_all(text: str, /) -> dict[str, str]:
    """Parse all `KEY=VALUE` assignments in text into a mapping of decoded values."""
    return EnvDocument.parse(text).to_dict()
