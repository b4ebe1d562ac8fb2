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
"""Unit tests of jmgr events."""
import pytest

import libjmgr.errors
import libjmgr.events


class NamedThing:
    """Anything with a name, like a jail or a release."""

    def __init__(self, name: str) -> None:
        self.name = name


class TestEvents(object):
    """Track the state of operations."""

    def test_lifecycle(self) -> None:
        event = libjmgr.events.JailLaunch(jail=NamedThing("web"))
        assert event.type == "JailLaunch"
        assert event.identifier == "web"
        assert event.get_state_string() == "pending"

        event.begin()
        assert event.pending is True
        assert event.duration is None

        event.end()
        assert event.done is True
        assert event.duration is not None
        assert event.get_state_string(done="OK") == "OK"

    def test_nesting(self) -> None:
        outer = libjmgr.events.JailDestroy(jail=NamedThing("web"))
        inner = libjmgr.events.JailStop(
            jail=NamedThing("web"),
            scope=outer.scope
        )

        outer.begin()
        inner.begin()
        assert outer.parent_count == 0
        assert inner.parent_count == 1

        inner.skip(message="not running")
        assert inner.skipped is True
        assert inner.message == "not running"
        outer.end()
        assert outer.scope.pending_count == 0
        assert list(outer.scope) == [outer, inner]

    def test_failure(self) -> None:
        event = libjmgr.events.SnapshotDestroy("zroot/jails/web@a")
        error = RuntimeError("busy")
        event.begin()
        event.fail(error)
        assert event.failed is True
        assert event.error is error
        assert event.get_state_string(error="FAILED") == "FAILED"

    def test_finished_event_cannot_begin(self) -> None:
        event = libjmgr.events.JailStop(jail=NamedThing("web"))
        event.begin()
        event.end()
        with pytest.raises(libjmgr.errors.EventAlreadyFinished):
            event.begin()
