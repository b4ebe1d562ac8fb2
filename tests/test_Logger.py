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
"""Unit tests of the jmgr Logger."""
import typing

import pytest

import libjmgr.errors
import libjmgr.Logger


class TestLogger(object):
    """Print log entries by level."""

    def test_default_print_level(self, monkeypatch: typing.Any) -> None:
        """Test if info is printed by default."""
        monkeypatch.delenv("JMGR_LOG_LEVEL", raising=False)
        assert libjmgr.Logger.Logger().print_level == "info"

    def test_print_level_from_environment(
        self,
        monkeypatch: typing.Any
    ) -> None:
        monkeypatch.setenv("JMGR_LOG_LEVEL", "spam")
        assert libjmgr.Logger.Logger().print_level == "spam"

    def test_filters_by_level(self, capsys: typing.Any) -> None:
        logger = libjmgr.Logger.Logger(print_level="warn")
        logger.verbose("hidden")
        logger.warn("shown")
        logger.error("failed")
        logger.screen("always")

        captured = capsys.readouterr()
        assert "hidden" not in captured.out
        assert "shown" in captured.out
        assert "always" in captured.out
        assert "failed" in captured.err
        assert len(logger.history) == 3

    def test_indent(self, capsys: typing.Any) -> None:
        logger = libjmgr.Logger.Logger()
        logger.info("first\nsecond", indent=2)
        assert capsys.readouterr().out == "    first\n    second\n"

    def test_invalid_level(self) -> None:
        logger = libjmgr.Logger.Logger()
        with pytest.raises(libjmgr.errors.InvalidLogLevel):
            logger.print_level = "chatty"

    def test_only_screen_entries_are_redrawn(self) -> None:
        logger = libjmgr.Logger.Logger()
        log_entry = logger.info("not redrawable")
        with pytest.raises(libjmgr.errors.CannotRedrawLine):
            log_entry.edit("changed")

    def test_redraw(self, capsys: typing.Any) -> None:
        logger = libjmgr.Logger.Logger()
        log_entry = logger.screen("[-] JailLaunch@web: ...")
        log_entry.edit("[+] JailLaunch@web: OK")
        output = capsys.readouterr().out
        assert output.endswith("[+] JailLaunch@web: OK\033[K\n\r")
