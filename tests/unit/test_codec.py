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

"""Unit tests for the `codec` library."""

import pytest

from env_libs.codec import decode, encode


@pytest.mark.parametrize(
    "value,expected",
    (
        pytest.param(None, "", id="none"),
        pytest.param(True, "true", id="true"),
        pytest.param(False, "false", id="false"),
        pytest.param({"a": 1, "b": 2}, '{"a":1,"b":2}', id="mapping"),
        pytest.param(["x", "y"], '["x","y"]', id="list"),
        pytest.param(8080, "8080", id="int"),
        pytest.param("localhost", "localhost", id="plain string"),
        pytest.param("", "", id="empty string"),
        pytest.param("hello world", '"hello world"', id="whitespace"),
        pytest.param("abc#def", '"abc#def"', id="hash"),
        pytest.param("x=y", '"x=y"', id="equals"),
        pytest.param("  padded  ", '"  padded  "', id="padding"),
        pytest.param('say "hi"', '"say \\"hi\\""', id="escaped quotes"),
        pytest.param("l1\nl2\nl3", "l1\\nl2\\nl3", id="newlines"),
        pytest.param("l1\r\nl2", "l1\\nl2", id="crlf"),
        pytest.param("'quoted'", "\"'quoted'\"", id="leading quote"),
    ),
)
def test_encode(value, expected) -> None:
    """Test the `encode` function."""
    assert encode(value) == expected


@pytest.mark.parametrize(
    "raw,expected",
    (
        pytest.param("", "", id="empty"),
        pytest.param("  plain  ", "plain", id="trimmed"),
        pytest.param('"hello world"', "hello world", id="double quotes"),
        pytest.param("'hello world'", "hello world", id="single quotes"),
        pytest.param('"say \\"hi\\""', 'say "hi"', id="escaped double quotes"),
        pytest.param("'it\\'s'", "it's", id="escaped single quote"),
        pytest.param('"mismatched\'', '"mismatched\'', id="mismatched quotes"),
        pytest.param('"', '"', id="lone quote"),
        pytest.param("l1\\nl2", "l1\nl2", id="unquoted newline"),
        pytest.param('"l1\\nl2"', "l1\nl2", id="quoted newline"),
        pytest.param('a"b', 'a"b', id="inner quote"),
    ),
)
def test_decode(raw, expected) -> None:
    """Test the `decode` function."""
    assert decode(raw) == expected


@pytest.mark.parametrize(
    "value",
    (
        "localhost:6817",
        "hello world",
        "a#b",
        "a=b",
        "  pad  ",
        "l1\nl2\nl3",
        "trailing newline\n",
        'say "hi"',
        '"already quoted"',
        "",
    ),
)
def test_round_trip(value) -> None:
    """Test that decoding an encoded string returns the original string."""
    assert decode(encode(value)) == value


def test_round_trip_structured() -> None:
    """Test that structured values decode back to JSON text, not the original structure."""
    assert decode(encode({"name": "a b"})) == '{"name":"a b"}'
