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
"""
jmgr events.

Jail operations are generators that yield events. An event is yielded once
when it begins and once more when it ends, is skipped or failed. Events
that begin while others of the same scope are pending are nested below
them, which the CLI renders as indentation.
"""
import typing
import time

import libjmgr.errors

EVENT_STATES = (
    "new",
    "pending",
    "done",
    "skipped",
    "failed"
)


class Scope(list):
    """The events of one top-level operation."""

    pending_count: int

    def __init__(self) -> None:
        super().__init__([])
        self.pending_count = 0


class JmgrEvent:
    """An observable step of a jmgr operation."""

    identifier: typing.Optional[str] = None
    message: typing.Optional[str]
    state: str
    error: typing.Optional[BaseException]
    parent_count: int
    started_at: typing.Optional[float]
    stopped_at: typing.Optional[float]

    def __init__(
        self,
        message: typing.Optional[str]=None,
        scope: typing.Optional[Scope]=None
    ) -> None:
        self.scope = Scope() if (scope is None) else scope
        self.scope.append(self)
        self.message = message
        self.state = "new"
        self.error = None
        self.started_at = None
        self.stopped_at = None
        self.parent_count = self.scope.pending_count

    @property
    def type(self) -> str:
        """Return the event type, which is the name of its class."""
        return type(self).__name__

    @property
    def pending(self) -> bool:
        """Return True if the event began and did not finish yet."""
        return self.state == "pending"

    @property
    def done(self) -> bool:
        """Return True if the event finished successfully."""
        return self.state == "done"

    @property
    def skipped(self) -> bool:
        """Return True if the event had nothing to do."""
        return self.state == "skipped"

    @property
    def failed(self) -> bool:
        """Return True if the event finished with an error."""
        return self.state == "failed"

    @property
    def duration(self) -> typing.Optional[float]:
        """Return the seconds between begin and end of the event."""
        if (self.started_at is None) or (self.stopped_at is None):
            return None
        return self.stopped_at - self.started_at

    def get_state_string(
        self,
        error: str="failed",
        skipped: str="skipped",
        done: str="done",
        pending: str="pending"
    ) -> str:
        """Return a human readable label of the event state."""
        labels = dict(failed=error, skipped=skipped, done=done)
        return labels.get(self.state, pending)

    def begin(self, message: typing.Optional[str]=None) -> 'JmgrEvent':
        """Begin the event below the pending events of its scope."""
        if self.state != "new":
            raise libjmgr.errors.EventAlreadyFinished(event=self)
        self.message = message
        self.state = "pending"
        self.started_at = time.monotonic()
        self.parent_count = self.scope.pending_count
        self.scope.pending_count += 1
        return self

    def step(self, message: typing.Optional[str]=None) -> 'JmgrEvent':
        """Report progress of a pending event."""
        self.message = message
        return self

    def end(self, message: typing.Optional[str]=None) -> 'JmgrEvent':
        """Finish the event successfully."""
        return self._finish("done", message)

    def skip(self, message: typing.Optional[str]=None) -> 'JmgrEvent':
        """Finish the event without doing anything."""
        return self._finish("skipped", message)

    def fail(
        self,
        exception: typing.Optional[BaseException]=None,
        message: typing.Optional[str]=None
    ) -> 'JmgrEvent':
        """Finish the event with an error."""
        self.error = exception
        return self._finish("failed", message)

    def _finish(
        self,
        state: str,
        message: typing.Optional[str]
    ) -> 'JmgrEvent':
        if self.state == "pending":
            self.stopped_at = time.monotonic()
            self.scope.pending_count -= 1
        self.state = state
        self.message = message
        self.parent_count = self.scope.pending_count
        return self


# Jail


class JailEvent(JmgrEvent):
    """Any event related to a jail."""

    jail: 'libjmgr.Jail.JailGenerator'
    identifier: typing.Optional[str]

    def __init__(
        self,
        jail: 'libjmgr.Jail.JailGenerator',
        message: typing.Optional[str]=None,
        scope: typing.Optional[Scope]=None
    ) -> None:

        try:
            self.identifier = jail.name
        except AttributeError:
            self.identifier = None
        self.jail = jail
        JmgrEvent.__init__(self, message=message, scope=scope)


class JailLaunch(JailEvent):
    """Create the jail(8) from its declaration."""

    pass


class JailStop(JailEvent):
    """Remove the jail(8)."""

    pass


class JailRestart(JailEvent):
    """Remove and create the jail(8) in one go."""

    pass


class JailSnapshot(JailEvent):
    """Take a snapshot of the jails volume."""

    pass


class JailRollback(JailEvent):
    """Roll a jails volume back to its latest snapshot."""

    pass


class JailDestroy(JailEvent):
    """Destroy a jail with its storage and declaration."""

    pass


class JailStorageDestroy(JailDestroy):
    """Destroy the volume or directory tree of a jail."""

    pass


class JailConfigRemove(JailDestroy):
    """Remove the declaration file of a jail."""

    pass


class JailProvision(JailEvent):
    """Provision storage for a new jail."""

    pass


class JailConfigWrite(JailEvent):
    """Render and write the declaration file of a new jail."""

    pass


class JailClone(JailEvent):
    """Copy the storage of an existing jail to a new one."""

    pass


class JailHookPostInstall(JailEvent):
    """Run the post-install hook of a new jail."""

    stdout: typing.Optional[str]

    def __init__(
        self,
        jail: 'libjmgr.Jail.JailGenerator',
        message: typing.Optional[str]=None,
        scope: typing.Optional[Scope]=None
    ) -> None:

        self.stdout = None
        super().__init__(
            jail=jail,
            message=message,
            scope=scope
        )

    def end(
        self,
        message: typing.Optional[str]=None,
        stdout: typing.Optional[str]=""
    ) -> 'JmgrEvent':
        """Successfully finish an event."""
        self.stdout = stdout
        return super().end(message)


class JailBootEnable(JailEvent):
    """Add a jail to the boot list."""

    pass


class JailBootDisable(JailEvent):
    """Remove a jail from the boot list."""

    pass


class JailUpdate(JailEvent):
    """Update a jail."""

    pass


class JailPatchUpdate(JailUpdate):
    """Fetch and install patches of the jails release."""

    pass


class JailReleaseUpgrade(JailUpdate):
    """Upgrade a jail to another release."""

    pass


class JailPackageUpdate(JailUpdate):
    """Update and upgrade the packages of a jail."""

    pass


# Release


class ReleaseEvent(JmgrEvent):
    """Event related to a release."""

    release: 'libjmgr.Release.Release'

    def __init__(
        self,
        release: 'libjmgr.Release.Release',
        message: typing.Optional[str]=None,
        scope: typing.Optional[Scope]=None
    ) -> None:

        self.identifier = release.name
        self.release = release
        JmgrEvent.__init__(self, message=message, scope=scope)


class ReleaseDownload(ReleaseEvent):
    """Download the base archive of a release."""

    pass


class ReleaseExtraction(ReleaseEvent):
    """Extract the base archive of a release."""

    pass


# ZFS


class SnapshotDestroy(JmgrEvent):
    """Destroy a single ZFS snapshot."""

    def __init__(
        self,
        snapshot_name: str,
        message: typing.Optional[str]=None,
        scope: typing.Optional[Scope]=None
    ) -> None:

        self.identifier = snapshot_name
        JmgrEvent.__init__(self, message=message, scope=scope)
