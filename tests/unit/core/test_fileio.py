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

"""Unit tests for the `fileio` core library."""

import fcntl
import threading
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from env_libs.core import read_bytes, read_text, write_bytes, write_text


class TestFileIO:
    """Test reading and writing whole files."""

    @pytest.fixture
    def env_file(self, tmp_path: Path) -> Path:
        """Create a real environment file."""
        path = tmp_path / ".env"
        path.write_bytes(b"A=1\r\nB=2\r\n")
        return path

    def test_read_text(self, env_file: Path) -> None:
        """Test that line terminators are not translated when reading."""
        assert read_text(env_file) == "A=1\r\nB=2\r\n"
        assert read_bytes(env_file) == b"A=1\r\nB=2\r\n"

    def test_read_missing(self, tmp_path: Path) -> None:
        """Test that reading a missing file raises `OSError`."""
        with pytest.raises(OSError):
            read_text(tmp_path / "missing")

    def test_write_text(self, env_file: Path) -> None:
        """Test that writing replaces the whole file."""
        write_text(env_file, "C=3\n")
        assert env_file.read_bytes() == b"C=3\n"

    def test_write_creates_file(self, tmp_path: Path) -> None:
        """Test that writing creates a missing file."""
        write_bytes(tmp_path / "new.env", b"A=1\n")
        assert (tmp_path / "new.env").read_bytes() == b"A=1\n"

        write_bytes(tmp_path / "secret.env", b"A=1\n", mode=0o600)
        assert (tmp_path / "secret.env").stat().st_mode & 0o777 == 0o600

    def test_invalid_utf8(self, tmp_path: Path) -> None:
        """Test that bytes that are not valid UTF-8 survive a text round trip."""
        (tmp_path / ".env").write_bytes(b"A=\xff\n")
        text = read_text(tmp_path / ".env")
        assert text == "A=\udcff\n"

        write_text(tmp_path / ".env", text + "B=2\n")
        assert (tmp_path / ".env").read_bytes() == b"A=\xff\nB=2\n"

    def test_write_locks_file(self, env_file: Path, mocker: MockerFixture) -> None:
        """Test that an exclusive lock is held while writing."""
        flock = mocker.spy(fcntl, "flock")
        write_text(env_file, "C=3\n")
        assert [call.args[1] for call in flock.call_args_list] == [fcntl.LOCK_EX, fcntl.LOCK_UN]

    def test_write_waits_for_lock(self, env_file: Path) -> None:
        """Test that a write waits until another holder releases its lock."""
        with open(env_file, "rb") as holder:
            fcntl.flock(holder, fcntl.LOCK_EX)
            writer = threading.Thread(target=write_text, args=(env_file, "C=3\n"))
            writer.start()
            writer.join(timeout=0.2)
            assert writer.is_alive()
            assert env_file.read_bytes() == b"A=1\r\nB=2\r\n"
            fcntl.flock(holder, fcntl.LOCK_UN)

        writer.join(timeout=5)
        assert not writer.is_alive()
        assert env_file.read_bytes() == b"C=3\n"
