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
A Jail is a FreeBSD jail declared in a jail.conf(5) file.

Jails are declared either in their own file in /etc/jail.conf.d or in the
legacy /etc/jail.conf singleton file. The root filesystem of a jail is a ZFS
dataset or a plain directory.

The runtime state of a jail is managed by jail(8). A Jail with a JID of 0 is
stopped, any other JID means it is running. All state transitions are
generators yielding events, the synchronous Jail class wraps them into lists.

Jails named `<parent>.<child>` that run inside another jail are children.
They are managed via their parent and every transition rejects them.
"""
import typing
import os
import re
import time

import libjmgr.errors
import libjmgr.events
import libjmgr.helpers
import libjmgr.helpers_object
import libjmgr.JailState
import libjmgr.Storage
import libjmgr.Config.Jail.File.JailConf

JAIL_BIN = "/usr/sbin/jail"
JEXEC_BIN = "/usr/sbin/jexec"
FREEBSD_UPDATE_BIN = "/usr/sbin/freebsd-update"
PKG_BIN = "/usr/sbin/pkg"

UNDETERMINED_PARENT = "(undetermined)"

_patch_level_pattern = re.compile(r"-p\d+$")

STOP_SETTLE_SECONDS = 0.5
RESTART_SETTLE_SECONDS = 0.2


def _set_hostname(jail: 'JailGenerator', value: str) -> None:
    jail.hostname = value


def _set_path(jail: 'JailGenerator', value: str) -> None:
    jail.path = value


def _set_ip4(jail: 'JailGenerator', value: str) -> None:
    jail.ip4 = value


def _set_ip4_inherit(jail: 'JailGenerator', value: str) -> None:
    jail.ip4_inherit = value


# declaration fields and their setters in the order they are applied
DECLARATION_FIELD_SETTERS: typing.List[typing.Tuple[
    str,
    typing.Callable[['JailGenerator', str], None]
]] = [
    ("hostname", _set_hostname),
    ("path", _set_path),
    ("ip4_addr", _set_ip4),
    ("ip4", _set_ip4_inherit)
]


class JailGenerator:
    """Jail with state transitions that yield events."""

    name: str
    hostname: str
    jid: int
    cpuset_id: int
    path: str
    config_path: str
    dataset_name: str
    interface: str
    ip4: str
    ip4_addrs: typing.List[str]
    ip6_addrs: typing.List[str]
    ip4_inherit: str
    os_version: str
    start_on_boot: str
    parent_name: str
    is_parent: bool
    snapshots: typing.List[str]

    def __init__(
        self,
        name: str,
        host: typing.Optional['libjmgr.Host.HostGenerator']=None,
        zfs: typing.Optional['libjmgr.ZFS.ZFS']=None,
        prompts: typing.Optional['libjmgr.Prompts.Prompts']=None,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        """
        Initialize a Jail.

        Args:

            name (string):
                Unique name of the jail.

            host (libjmgr.Host): (optional)
                Inherit an existing Host instance from ancestor classes

            zfs (libjmgr.ZFS): (optional)
                Inherit an existing ZFS instance from ancestor classes

            prompts (libjmgr.Prompts): (optional)
                Confirmation prompts used when an operation is not forced

            logger (libjmgr.Logger): (optional)
                Inherit an existing Logger instance from ancestor classes
        """
        self.logger = libjmgr.helpers_object.init_logger(self, logger)
        self.zfs = libjmgr.helpers_object.init_zfs(self, zfs)
        self.host = libjmgr.helpers_object.init_host(self, host)
        self.prompts = libjmgr.helpers_object.init_prompts(self, prompts)

        self.name = name
        self.hostname = ""
        self.jid = 0
        self.cpuset_id = 0
        self.path = ""
        self.config_path = ""
        self.dataset_name = ""
        self.interface = ""
        self.ip4 = ""
        self.ip4_addrs = []
        self.ip6_addrs = []
        self.ip4_inherit = ""
        self.os_version = ""
        self.start_on_boot = "No"
        self.parent_name = ""
        self.is_parent = False
        self.snapshots = []

    def apply_state(self, state: 'libjmgr.JailState.JailState') -> None:
        """Take over the runtime attributes reported by jls."""
        self.jid = state.jid
        self.cpuset_id = state.cpuset_id
        self.hostname = str(state.data.get("hostname", self.hostname))
        self.path = str(state.data.get("path", self.path))
        self.ip4_addrs = state.ip4_addrs
        self.ip6_addrs = state.ip6_addrs

    def apply_declaration(
        self,
        record: 'libjmgr.Config.Jail.File.JailConf.JailConfRecord'
    ) -> None:
        """Merge the fields captured from a jail declaration."""
        for field, setter in DECLARATION_FIELD_SETTERS:
            if field in record.keys():
                setter(self, record[field])
        self.config_path = record.config_path

    @property
    def running(self) -> bool:
        """Return True if the jail is running."""
        return self.jid > 0

    @property
    def stopped(self) -> bool:
        """Return True if the jail is stopped."""
        return self.running is False

    @property
    def is_child(self) -> bool:
        """Return True if the jail is managed via its parent."""
        return self.parent_name != ""

    @property
    def has_dataset(self) -> bool:
        """Return True if the jail root is a ZFS dataset."""
        return self.dataset_name != ""

    @property
    def release_name(self) -> str:
        """Return the installed release without its patch level."""
        return _patch_level_pattern.sub("", self.os_version.strip())

    @property
    def inherits_ip4(self) -> bool:
        """Return True if the jail shares the IPv4 addresses of the host."""
        return self.ip4_inherit == "inherit"

    @property
    def is_legacy(self) -> bool:
        """Return True if the jail is declared in /etc/jail.conf."""
        return self.config_path == self.host.config.legacy_jail_conf

    @property
    def _declared_per_jail(self) -> bool:
        marker = libjmgr.Config.Jail.File.JailConf.PER_JAIL_DIRECTORY_MARKER
        return marker in self.config_path

    def query_jid(self) -> None:
        """Invoke update of the jails JID."""
        state = libjmgr.JailState.JailState(self.name, logger=self.logger)
        state.query()
        self.jid = state.jid

    def start(
        self,
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.Generator['libjmgr.events.JmgrEvent', None, None]:
        """Create the jail from its declaration unless it is running."""
        self.require_jail_not_child()
        self.require_root("start a jail")

        jailLaunchEvent = libjmgr.events.JailLaunch(
            jail=self,
            scope=event_scope
        )
        yield jailLaunchEvent.begin()

        if self.running is True:
            yield jailLaunchEvent.skip(message="already running")
            return

        if self._declared_per_jail is True:
            command = [JAIL_BIN, "-c", "-f", self.config_path]
        else:
            command = [JAIL_BIN, "-c", self.name]

        try:
            libjmgr.helpers.exec(command, logger=self.logger)
        except libjmgr.errors.JmgrException as e:
            yield jailLaunchEvent.fail(e)
            raise

        self.query_jid()
        yield jailLaunchEvent.end()

    def stop(
        self,
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.Generator['libjmgr.events.JmgrEvent', None, None]:
        """Remove the jail unless it is stopped."""
        self.require_jail_not_child()
        self.require_root("stop a jail")

        jailStopEvent = libjmgr.events.JailStop(
            jail=self,
            scope=event_scope
        )
        yield jailStopEvent.begin()

        if self.running is False:
            yield jailStopEvent.skip(message="not running")
            return

        if self.config_path != "":
            command = [JAIL_BIN, "-r", "-f", self.config_path, self.name]
        else:
            command = [JAIL_BIN, "-r", self.name]

        try:
            libjmgr.helpers.exec(command, logger=self.logger)
        except libjmgr.errors.JmgrException as e:
            yield jailStopEvent.fail(e)
            raise

        self.jid = 0
        yield jailStopEvent.end()

    def restart(
        self,
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.Generator['libjmgr.events.JmgrEvent', None, None]:
        """Remove and create the jail in a single jail(8) call."""
        self.require_jail_not_child()
        self.require_root("restart a jail")

        jailRestartEvent = libjmgr.events.JailRestart(
            jail=self,
            scope=event_scope
        )
        yield jailRestartEvent.begin()

        if self._declared_per_jail is True:
            command = [JAIL_BIN, "-rc", "-f", self.config_path]
        else:
            command = [JAIL_BIN, "-rc", self.name]

        try:
            libjmgr.helpers.exec(command, logger=self.logger)
        except libjmgr.errors.JmgrException as e:
            yield jailRestartEvent.fail(e)
            raise

        self.query_jid()
        yield jailRestartEvent.end()

    def attach(self, user: typing.Optional[str]=None) -> None:
        """Attach the terminal to a login shell in the running jail."""
        self.require_root("enter a jail")
        self.require_jail_running()

        if user is None:
            user = self.host.config.jail_user

        libjmgr.helpers.exec_passthru(
            [JEXEC_BIN, self.name, "login", "-f", user],
            logger=self.logger
        )

    def snapshot(
        self,
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.Generator['libjmgr.events.JmgrEvent', None, None]:
        """Take a timestamped snapshot of the jails dataset."""
        self.require_jail_not_child()
        self.require_root("snapshot a jail")
        self.require_dataset()

        jailSnapshotEvent = libjmgr.events.JailSnapshot(
            jail=self,
            scope=event_scope
        )
        yield jailSnapshotEvent.begin()
        try:
            snapshot_name = self.zfs.snapshot(self.dataset_name)
        except libjmgr.errors.JmgrException as e:
            yield jailSnapshotEvent.fail(e)
            raise
        self.snapshots.append(snapshot_name)
        yield jailSnapshotEvent.end(message=snapshot_name)

    def rollback(
        self,
        snapshot_name: str,
        force: bool=False,
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.Generator['libjmgr.events.JmgrEvent', None, None]:
        """
        Roll the jails dataset back to its latest snapshot.

        Rolling back to an older snapshot would destroy the more recent
        snapshots, so those need to be destroyed explicitly before.
        """
        self.require_jail_not_child()
        self.require_root("rollback a jail")
        self.require_dataset()

        latest_snapshot_name = self.zfs.latest_snapshot(self.dataset_name)
        if snapshot_name != latest_snapshot_name:
            raise libjmgr.errors.SnapshotNotLatest(
                snapshot_name=snapshot_name,
                latest_snapshot_name=latest_snapshot_name,
                logger=self.logger
            )

        self.prompts.confirm(
            f"Rollback jail {self.name} to snapshot {snapshot_name}",
            force=force
        )

        jailRollbackEvent = libjmgr.events.JailRollback(
            jail=self,
            scope=event_scope
        )
        yield jailRollbackEvent.begin()

        if self.running is True:
            self.prompts.confirm(
                f"Jail is running, stop {self.name}",
                force=force
            )
            yield from self.stop(event_scope=jailRollbackEvent.scope)

        try:
            self.zfs.rollback(snapshot_name)
        except libjmgr.errors.JmgrException as e:
            yield jailRollbackEvent.fail(e)
            raise
        yield jailRollbackEvent.end()

    def destroy(
        self,
        force: bool=False,
        recursive: bool=False,
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.Generator['libjmgr.events.JmgrEvent', None, None]:
        """
        Destroy a jail with its storage and declaration file.

        Args:

            force (bool): (default=False)
                Destroy the jail without asking for confirmation.

            recursive (bool): (default=False)
                Destroy the snapshots of the jails dataset as well. Without
                this flag jails with snapshots are not destroyed.
        """
        self.require_jail_not_child()
        self.require_root("destroy a jail")

        if self.is_legacy is True:
            raise libjmgr.errors.JailConfigLegacy(
                jail=self,
                logger=self.logger
            )

        if (self.has_dataset is True) and (recursive is False):
            if len(self.zfs.snapshots_of(self.dataset_name)) > 0:
                raise libjmgr.errors.JailHasSnapshots(
                    jail=self,
                    logger=self.logger
                )

        if self.is_parent is True:
            self.logger.warn(
                f"Jail {self.name} has child jails that will most likely "
                "be destroyed as well"
            )
        self.prompts.confirm(f"Destroy jail {self.name}", force=force)

        jailDestroyEvent = libjmgr.events.JailDestroy(
            jail=self,
            scope=event_scope
        )
        _scope = jailDestroyEvent.scope
        yield jailDestroyEvent.begin()

        if self.running is True:
            yield from self.stop(event_scope=_scope)
            time.sleep(STOP_SETTLE_SECONDS)

        jailStorageDestroyEvent = libjmgr.events.JailStorageDestroy(
            jail=self,
            scope=_scope
        )
        yield jailStorageDestroyEvent.begin()
        try:
            if self.has_dataset is True:
                self.zfs.destroy_dataset(
                    self.dataset_name,
                    recursive=recursive,
                    force=recursive
                )
                self.snapshots = []
            elif self.path != "":
                libjmgr.Storage.remove_tree(self.path, logger=self.logger)
            else:
                self.logger.warn(f"Jail {self.name} has no filesystem path")
        except libjmgr.errors.JmgrException as e:
            yield jailStorageDestroyEvent.fail(e)
            yield jailDestroyEvent.fail(e)
            raise
        yield jailStorageDestroyEvent.end()

        if self.start_on_boot == "Yes":
            yield from self.disable(event_scope=_scope)

        jailConfigRemoveEvent = libjmgr.events.JailConfigRemove(
            jail=self,
            scope=_scope
        )
        yield jailConfigRemoveEvent.begin()
        try:
            os.remove(self.config_path)
            yield jailConfigRemoveEvent.end()
        except FileNotFoundError:
            yield jailConfigRemoveEvent.skip(message="already removed")

        yield jailDestroyEvent.end()

    def enable(
        self,
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.Generator['libjmgr.events.JmgrEvent', None, None]:
        """Start the jail on boot."""
        self.require_jail_not_child()
        self.require_root("enable a jail")

        jailBootEnableEvent = libjmgr.events.JailBootEnable(
            jail=self,
            scope=event_scope
        )
        yield jailBootEnableEvent.begin()

        if self.start_on_boot == "Yes":
            yield jailBootEnableEvent.skip(message="already enabled")
            return

        try:
            self.host.enable_jail(self.name)
        except libjmgr.errors.JmgrException as e:
            yield jailBootEnableEvent.fail(e)
            raise
        self.start_on_boot = "Yes"
        yield jailBootEnableEvent.end()

    def disable(
        self,
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.Generator['libjmgr.events.JmgrEvent', None, None]:
        """Do not start the jail on boot."""
        self.require_jail_not_child()
        self.require_root("disable a jail")

        jailBootDisableEvent = libjmgr.events.JailBootDisable(
            jail=self,
            scope=event_scope
        )
        yield jailBootDisableEvent.begin()

        if self.start_on_boot != "Yes":
            yield jailBootDisableEvent.skip(message="already disabled")
            return

        try:
            self.host.disable_jail(self.name)
        except libjmgr.errors.JmgrException as e:
            yield jailBootDisableEvent.fail(e)
            raise
        self.start_on_boot = "No"
        yield jailBootDisableEvent.end()

    def _snapshot_before_update(
        self,
        force: bool,
        snapshot: typing.Optional[bool],
        event_scope: typing.Optional['libjmgr.events.Scope']
    ) -> typing.Generator['libjmgr.events.JmgrEvent', None, None]:
        if self.has_dataset is False:
            return
        if snapshot is None:
            if force is True:
                snapshot = True
            else:
                snapshot = self.prompts.ask("Create snapshot before continue")
        if snapshot is True:
            yield from self.snapshot(event_scope=event_scope)

    def update_patch(
        self,
        force: bool=False,
        snapshot: typing.Optional[bool]=None,
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.Generator['libjmgr.events.JmgrEvent', None, None]:
        """Fetch and install the patches of the jails release."""
        self.require_jail_not_child()
        self.require_root("update a jail")

        self.prompts.confirm(
            f"Update FreeBSD on {self.name}, filesystem {self.path}",
            force=force
        )

        jailPatchUpdateEvent = libjmgr.events.JailPatchUpdate(
            jail=self,
            scope=event_scope
        )
        yield jailPatchUpdateEvent.begin()

        yield from self._snapshot_before_update(
            force=force,
            snapshot=snapshot,
            event_scope=jailPatchUpdateEvent.scope
        )

        try:
            libjmgr.helpers.exec(
                [
                    "/usr/bin/env",
                    f"UNAME_r={self.os_version}",
                    FREEBSD_UPDATE_BIN,
                    "-b", self.path,
                    "--currently-running", self.os_version,
                    "--not-running-from-cron",
                    "fetch", "install"
                ],
                logger=self.logger
            )
        except libjmgr.errors.JmgrException as e:
            yield jailPatchUpdateEvent.fail(e)
            raise
        yield jailPatchUpdateEvent.end()

    def upgrade_release(
        self,
        release_name: str,
        force: bool=False,
        snapshot: typing.Optional[bool]=None,
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.Generator['libjmgr.events.JmgrEvent', None, None]:
        """
        Upgrade the jail to another release.

        freebsd-update installs the new kernel components first. After a
        restart of the jail the userland is installed with a second run.
        """
        self.require_jail_not_child()
        self.require_root("upgrade a jail")

        if release_name == self.release_name:
            raise libjmgr.errors.JailReleaseInstalled(
                jail=self,
                release_name=release_name,
                logger=self.logger
            )

        self.prompts.confirm(
            f"Upgrade {self.name} from {self.os_version} to {release_name}",
            force=force
        )

        jailReleaseUpgradeEvent = libjmgr.events.JailReleaseUpgrade(
            jail=self,
            scope=event_scope
        )
        _scope = jailReleaseUpgradeEvent.scope
        yield jailReleaseUpgradeEvent.begin()

        yield from self._snapshot_before_update(
            force=force,
            snapshot=snapshot,
            event_scope=_scope
        )

        install_command = [FREEBSD_UPDATE_BIN, "-b", self.path, "install"]
        try:
            libjmgr.helpers.exec_passthru(
                [
                    FREEBSD_UPDATE_BIN,
                    "-b", self.path,
                    "--currently-running", self.os_version,
                    "-r", release_name,
                    "upgrade"
                ],
                logger=self.logger
            )
            libjmgr.helpers.exec_passthru(install_command, logger=self.logger)
            yield from self.stop(event_scope=_scope)
            time.sleep(RESTART_SETTLE_SECONDS)
            yield from self.start(event_scope=_scope)
            libjmgr.helpers.exec_passthru(install_command, logger=self.logger)
        except libjmgr.errors.JmgrException as e:
            yield jailReleaseUpgradeEvent.fail(e)
            raise

        self.os_version = self.host.jail_os_version(self.path)
        yield jailReleaseUpgradeEvent.end()

    def update_packages(
        self,
        force: bool=False,
        snapshot: typing.Optional[bool]=None,
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.Generator['libjmgr.events.JmgrEvent', None, None]:
        """Update the package catalogue and upgrade all packages."""
        self.require_jail_not_child()
        self.require_root("update packages of a jail")

        self.prompts.confirm(
            f"Upgrade all installed packages on {self.name}",
            force=force
        )

        jailPackageUpdateEvent = libjmgr.events.JailPackageUpdate(
            jail=self,
            scope=event_scope
        )
        _scope = jailPackageUpdateEvent.scope
        yield jailPackageUpdateEvent.begin()

        if self.running is False:
            self.prompts.confirm(
                f"Start {self.name} (needed for pkg update)",
                force=force
            )
            yield from self.start(event_scope=_scope)

        yield from self._snapshot_before_update(
            force=force,
            snapshot=snapshot,
            event_scope=_scope
        )

        try:
            for pkg_command in ["update", "upgrade"]:
                libjmgr.helpers.exec_passthru(
                    [PKG_BIN, "-j", self.name, pkg_command],
                    logger=self.logger
                )
        except libjmgr.errors.JmgrException as e:
            yield jailPackageUpdateEvent.fail(e)
            raise
        yield jailPackageUpdateEvent.end()

    def require_jail_not_child(self, log_errors: bool=True) -> None:
        """Raise JailIsChild if the jail is managed via its parent."""
        if self.is_child is True:
            raise libjmgr.errors.JailIsChild(
                jail=self,
                logger=(self.logger if log_errors else None)
            )

    def require_jail_running(self, log_errors: bool=True) -> None:
        """Raise JailNotRunning exception if the jail is stopped."""
        if self.running is False:
            raise libjmgr.errors.JailNotRunning(
                jail=self,
                logger=(self.logger if log_errors else None)
            )

    def require_dataset(self, log_errors: bool=True) -> None:
        """Raise JailHasNoVolume if the jail root is not a ZFS dataset."""
        if self.has_dataset is False:
            raise libjmgr.errors.JailHasNoVolume(
                jail=self,
                logger=(self.logger if log_errors else None)
            )

    def require_root(self, action: str) -> None:
        """Raise MustBeRoot when jmgr runs unprivileged."""
        if self.host.is_root is False:
            raise libjmgr.errors.MustBeRoot(action, logger=self.logger)

    def to_dict(self) -> typing.Dict[str, typing.Any]:
        """Return the jail attributes for display."""
        return dict(
            name=self.name,
            jid=self.jid,
            hostname=self.hostname,
            path=self.path,
            config_path=self.config_path,
            dataset=self.dataset_name,
            interface=self.interface,
            ip4=self.ip4,
            ip4_addrs=self.ip4_addrs,
            ip6_addrs=self.ip6_addrs,
            os_version=self.os_version,
            start_on_boot=self.start_on_boot,
            parent=self.parent_name,
            is_parent=self.is_parent,
            snapshots=self.snapshots
        )

    def __repr__(self) -> str:
        """Return the jail name and its JID."""
        return f"<Jail {self.name} jid={self.jid}>"


class Jail(JailGenerator):
    """Synchronous wrapper of JailGenerator."""

    def start(  # noqa: T484
        self,
        *args,
        **kwargs
    ) -> typing.List['libjmgr.events.JmgrEvent']:
        """Start the jail."""
        return list(JailGenerator.start(self, *args, **kwargs))

    def stop(  # noqa: T484
        self,
        *args,
        **kwargs
    ) -> typing.List['libjmgr.events.JmgrEvent']:
        """Stop the jail."""
        return list(JailGenerator.stop(self, *args, **kwargs))

    def restart(  # noqa: T484
        self,
        *args,
        **kwargs
    ) -> typing.List['libjmgr.events.JmgrEvent']:
        """Restart the jail."""
        return list(JailGenerator.restart(self, *args, **kwargs))

    def snapshot(  # noqa: T484
        self,
        *args,
        **kwargs
    ) -> typing.List['libjmgr.events.JmgrEvent']:
        """Take a snapshot of the jail."""
        return list(JailGenerator.snapshot(self, *args, **kwargs))

    def rollback(  # noqa: T484
        self,
        *args,
        **kwargs
    ) -> typing.List['libjmgr.events.JmgrEvent']:
        """Rollback the jail to its latest snapshot."""
        return list(JailGenerator.rollback(self, *args, **kwargs))

    def destroy(  # noqa: T484
        self,
        *args,
        **kwargs
    ) -> typing.List['libjmgr.events.JmgrEvent']:
        """Destroy the jail."""
        return list(JailGenerator.destroy(self, *args, **kwargs))

    def enable(  # noqa: T484
        self,
        *args,
        **kwargs
    ) -> typing.List['libjmgr.events.JmgrEvent']:
        """Start the jail on boot."""
        return list(JailGenerator.enable(self, *args, **kwargs))

    def disable(  # noqa: T484
        self,
        *args,
        **kwargs
    ) -> typing.List['libjmgr.events.JmgrEvent']:
        """Do not start the jail on boot."""
        return list(JailGenerator.disable(self, *args, **kwargs))

    def update_patch(  # noqa: T484
        self,
        *args,
        **kwargs
    ) -> typing.List['libjmgr.events.JmgrEvent']:
        """Install the patches of the jails release."""
        return list(JailGenerator.update_patch(self, *args, **kwargs))

    def upgrade_release(  # noqa: T484
        self,
        *args,
        **kwargs
    ) -> typing.List['libjmgr.events.JmgrEvent']:
        """Upgrade the jail to another release."""
        return list(JailGenerator.upgrade_release(self, *args, **kwargs))

    def update_packages(  # noqa: T484
        self,
        *args,
        **kwargs
    ) -> typing.List['libjmgr.events.JmgrEvent']:
        """Upgrade the packages of the jail."""
        return list(JailGenerator.update_packages(self, *args, **kwargs))
