# Copyright (c) 2017-2019, Stefan Grönke
# Copyright (c) 2014-2018, iocage
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted providing that the following conditions
# are met:
# 1. Redistributions of source code must retain the above copyright
#    notice, this list of conditions and the following disclaimer.
# 2. Redistributions in binary form must reproduce the above copyright
#    notice, this list of conditions and the following disclaimer in the
#    documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE AUTHOR ``AS IS'' AND ANY EXPRESS OR
# IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED
# WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED.  IN NO EVENT SHALL THE AUTHOR BE LIABLE FOR ANY
# DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL
# DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS
# OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION)
# HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT,
# STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING
# IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.
"""Unit tests of the process gateway and parsing helpers."""
import typing
import os

import pytest

import libjmgr.errors
import libjmgr.helpers


class TestExec(object):
    """Run commands and capture their output."""

    def test_returns_stripped_output_and_returncode(self) -> None:
        stdout, stderr, returncode = libjmgr.helpers.exec(
            ["sh", "-c", "echo hello; echo world >&2"]
        )
        assert stdout == "hello"
        assert stderr == "world"
        assert returncode == 0

    def test_failure_carries_stderr(self) -> None:
        with pytest.raises(libjmgr.errors.CommandFailure) as e:
            libjmgr.helpers.exec(["sh", "-c", "echo broken >&2; exit 3"])
        assert e.value.returncode == 3
        assert e.value.stderr == "broken"
        assert isinstance(e.value, libjmgr.errors.ExecutionError)

    def test_ignored_failure_returns_returncode(self) -> None:
        _, _, returncode = libjmgr.helpers.exec(
            ["sh", "-c", "exit 2"],
            ignore_error=True
        )
        assert returncode == 2


class TestExecPiped(object):
    """Pipe one process into another."""

    def test_silent_receiver_succeeds(self) -> None:
        libjmgr.helpers.exec_piped(
            ["sh", "-c", "echo payload"],
            ["sh", "-c", "cat > /dev/null"]
        )

    def test_large_stream_does_not_block(self) -> None:
        libjmgr.helpers.exec_piped(
            ["sh", "-c", "i=0; while [ $i -lt 20000 ]; do "
             "echo 0123456789abcdef0123456789abcdef; i=$((i+1)); done"],
            ["sh", "-c", "cat > /dev/null"]
        )

    def test_receiver_output_is_reported_despite_success(self) -> None:
        with pytest.raises(libjmgr.errors.ReceiverReport) as e:
            libjmgr.helpers.exec_piped(
                ["sh", "-c", "echo payload"],
                ["sh", "-c", "cat > /dev/null; echo 'partially received'"]
            )
        assert e.value.report == "partially received"
        assert isinstance(e.value, libjmgr.errors.PartialStateError)

    def test_sender_failure_is_raised(self) -> None:
        with pytest.raises(libjmgr.errors.CommandFailure) as e:
            libjmgr.helpers.exec_piped(
                ["sh", "-c", "echo 'cannot send' >&2; exit 1"],
                ["sh", "-c", "cat > /dev/null"]
            )
        assert e.value.command[0] == "sh"
        assert e.value.returncode == 1
        assert e.value.stderr == "cannot send"

    def test_receiver_failure_is_raised(self) -> None:
        with pytest.raises(libjmgr.errors.CommandFailure) as e:
            libjmgr.helpers.exec_piped(
                ["sh", "-c", "echo payload"],
                ["sh", "-c", "cat > /dev/null; echo 'no space' >&2; exit 4"]
            )
        assert e.value.returncode == 4
        assert e.value.stderr == "no space"

    def test_early_receiver_failure_is_raised_over_sender(self) -> None:
        with pytest.raises(libjmgr.errors.CommandFailure) as e:
            libjmgr.helpers.exec_piped(
                ["sh", "-c", "yes | head -c 5000000"],
                ["sh", "-c", "echo 'destination exists' >&2; exit 3"]
            )
        assert e.value.command[-1].startswith("echo 'destination exists'")
        assert e.value.returncode == 3
        assert e.value.stderr.startswith("destination exists")
        assert "yes | head -c 5000000 exited with" in e.value.stderr


class TestHelpers(object):
    """Parse and validate values."""

    @pytest.mark.parametrize("name", ["web", "testJ99", "db.child", "a-b_c"])
    def test_valid_names(self, name: str) -> None:
        assert libjmgr.helpers.validate_name(name) is True

    @pytest.mark.parametrize("name", ["", "-web", "we b", "web/1", "x" * 64])
    def test_invalid_names(self, name: str) -> None:
        assert libjmgr.helpers.validate_name(name) is False

    def test_split_words(self) -> None:
        assert libjmgr.helpers.split_words(" web  db\n") == ["web", "db"]
        assert libjmgr.helpers.split_words(None) == []

    def test_placeholders_are_none(self) -> None:
        assert libjmgr.helpers.is_none("-") is True
        assert libjmgr.helpers.is_none("none") is True
        assert libjmgr.helpers.is_none("zroot/jails@a") is False

    def test_parse_int(self) -> None:
        assert libjmgr.helpers.parse_int(" 2\n") == 2
        with pytest.raises(TypeError):
            libjmgr.helpers.parse_int("two")

    def test_to_string(self) -> None:
        assert libjmgr.helpers.to_string(True) == "yes"
        assert libjmgr.helpers.to_string(None) == "-"
        assert libjmgr.helpers.to_string("") == "-"
        assert libjmgr.helpers.to_string(["a", None, "b"]) == "a,b"

    def test_to_json_stringifies_values(self) -> None:
        output = libjmgr.helpers.to_json(dict(boot=False, jid=None))
        assert '"boot": "no"' in output
        assert '"jid": "none"' in output


class TestMakedirsSafe(object):
    """Create directories below trusted paths only."""

    def test_creates_nested_directories(self, tmp_path: typing.Any) -> None:
        target = str(tmp_path / "jails" / "web")
        libjmgr.helpers.makedirs_safe(target)
        assert os.path.isdir(target) is True

    def test_symlinked_parent_is_rejected(self, tmp_path: typing.Any) -> None:
        os.makedirs(str(tmp_path / "real"))
        os.symlink(str(tmp_path / "real"), str(tmp_path / "link"))
        with pytest.raises(libjmgr.errors.SecurityViolation):
            libjmgr.helpers.makedirs_safe(str(tmp_path / "link" / "web"))
        assert os.path.exists(str(tmp_path / "real" / "web")) is False
