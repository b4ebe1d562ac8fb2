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
"""jmgr module of jail collections."""
import typing
import os
import subprocess  # nosec: B404

import libjmgr.Jail
import libjmgr.JailState
import libjmgr.NewJail
import libjmgr.Release
import libjmgr.Storage
import libjmgr.Types
import libjmgr.errors
import libjmgr.events
import libjmgr.helpers
import libjmgr.helpers_object
import libjmgr.Config.Jail.File.JailConf

CHILDREN_COUNT_SYSCTL = "security.jail.children.cur"


class JailsGenerator:
    """
    Registry of all jails known to the host.

    The registry is rebuilt on every instantiation from the running jails,
    the declaration files, the boot list and the ZFS datasets of the jails.
    Enrichment of a single jail never fails the whole registry.
    """

    _jails: typing.List['libjmgr.Jail.JailGenerator']

    def __init__(
        self,
        host: typing.Optional['libjmgr.Host.HostGenerator']=None,
        zfs: typing.Optional['libjmgr.ZFS.ZFS']=None,
        prompts: typing.Optional['libjmgr.Prompts.Prompts']=None,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:

        self.logger = libjmgr.helpers_object.init_logger(self, logger)
        self.zfs = libjmgr.helpers_object.init_zfs(self, zfs)
        self.host = libjmgr.helpers_object.init_host(self, host)
        self.prompts = libjmgr.helpers_object.init_prompts(self, prompts)

        self._jails = []
        self.query()

    @property
    def _class_jail(self) -> typing.Type['libjmgr.Jail.JailGenerator']:
        return libjmgr.Jail.JailGenerator

    @property
    def config(self) -> 'libjmgr.Config.Jmgr.JmgrConfig':
        """Return the jmgr configuration of the host."""
        return self.host.config

    def _new_jail_instance(self, name: str) -> 'libjmgr.Jail.JailGenerator':
        return self._class_jail(
            name,
            host=self.host,
            zfs=self.zfs,
            prompts=self.prompts,
            logger=self.logger
        )

    def query(self) -> None:
        """Rebuild the registry from the host."""
        self._jails = []
        self._add_running_jails()
        self._add_declared_jails()

        boot_list = self.host.jail_list
        for jail in self._jails:
            jail.start_on_boot = "Yes" if (jail.name in boot_list) else "No"

        for jail in self._jails:
            try:
                self._detect_dataset(jail)
            except libjmgr.errors.JmgrException as e:
                self.logger.verbose(
                    f"Could not detect the dataset of {jail.name}: {e}"
                )

        for jail in self._jails:
            if jail.path != "":
                jail.os_version = self.host.jail_os_version(jail.path)

        for jail in self._jails:
            if (jail.ip4 == "") and (len(jail.ip4_addrs) > 0):
                jail.ip4 = jail.ip4_addrs[0]
            elif jail.ip4_inherit != "":
                jail.ip4 = jail.ip4_inherit

        for jail in self._jails:
            self._detect_parent(jail)

    def _add_running_jails(self) -> None:
        states = libjmgr.JailState.JailStates()
        try:
            states.query(logger=self.logger)
        except libjmgr.errors.JailStateUpdateFailed:
            self.logger.warn("Running jails could not be listed")
            return

        for name, state in states.items():
            jail = self._new_jail_instance(name)
            jail.apply_state(state)
            self._jails.append(jail)

    def _add_declared_jails(self) -> None:
        JailConf = libjmgr.Config.Jail.File.JailConf
        files = JailConf.list_declaration_files(self.config.jails_conf_d)
        files.append(self.config.legacy_jail_conf)

        for path in files:
            self.parse_declaration_file(path)

    def parse_declaration_file(self, path: str) -> None:
        """Merge the jails declared in a file into the registry."""
        conf_file = libjmgr.Config.Jail.File.JailConf.JailConfFile(
            path,
            logger=self.logger
        )
        for record in conf_file.read():
            if self.exists(record.name) is True:
                jail = self[record.name]
            else:
                jail = self._new_jail_instance(record.name)
                self._jails.append(jail)
            jail.apply_declaration(record)

    def _detect_dataset(self, jail: 'libjmgr.Jail.JailGenerator') -> None:
        if (jail.path == "") or (os.path.isdir(jail.path) is False):
            return

        columns = self.zfs.list_dataset(jail.path)
        if (columns is None) or (len(columns) == 0):
            return

        dataset_name = columns[0]
        if dataset_name.split("/")[-1] != jail.name:
            return

        jail.dataset_name = dataset_name
        jail.snapshots = self.zfs.snapshots_of(dataset_name)

    def _detect_parent(self, jail: 'libjmgr.Jail.JailGenerator') -> None:
        if "." not in jail.name:
            return

        parent_name = jail.name.split(".", maxsplit=1)[0]
        if self.exists(parent_name) is False:
            return

        self[parent_name].is_parent = True

        if self.host.is_root is False:
            # jexec is not permitted, the naming convention has to do
            jail.parent_name = parent_name
            return

        stdout, _, returncode = libjmgr.helpers.exec(
            [
                libjmgr.Jail.JEXEC_BIN,
                parent_name,
                "/sbin/sysctl",
                "-n",
                CHILDREN_COUNT_SYSCTL
            ],
            logger=self.logger,
            ignore_error=True,
            stderr=subprocess.DEVNULL
        )
        if returncode > 0:
            jail.parent_name = libjmgr.Jail.UNDETERMINED_PARENT
            return

        try:
            children_count = libjmgr.helpers.parse_int(str(stdout).strip())
        except TypeError:
            jail.parent_name = libjmgr.Jail.UNDETERMINED_PARENT
            return

        if children_count > 0:
            jail.parent_name = parent_name

    def exists(self, name: str) -> bool:
        """Return True if a jail with this name is registered."""
        return any(jail.name == name for jail in self._jails)

    def __getitem__(self, name: str) -> 'libjmgr.Jail.JailGenerator':
        """Return the jail with the given name."""
        for jail in self._jails:
            if jail.name == name:
                return jail
        raise libjmgr.errors.JailNotFound(text=name, logger=self.logger)

    def __iter__(self) -> typing.Iterator['libjmgr.Jail.JailGenerator']:
        """Iterate over the jails in the order they were discovered."""
        return iter(list(self._jails))

    def __len__(self) -> int:
        """Return the number of registered jails."""
        return len(self._jails)

    @property
    def running(self) -> typing.List['libjmgr.Jail.JailGenerator']:
        """Return the running jails."""
        return [jail for jail in self._jails if jail.running is True]

    def _require_root(self, action: str) -> None:
        if self.host.is_root is False:
            raise libjmgr.errors.MustBeRoot(action, logger=self.logger)

    def _require_post_install(self) -> typing.Optional[str]:
        hook = self.config.post_install
        if hook is None:
            return None
        executable = os.access(hook, os.X_OK)
        if (os.path.isfile(hook) is False) or (executable is False):
            raise libjmgr.errors.PostInstallInvalid(
                path=hook,
                logger=self.logger
            )
        return hook

    def _provision_storage(self, new_jail: 'libjmgr.NewJail.NewJail') -> None:
        if new_jail.dataset_name is not None:
            self.zfs.create_dataset(new_jail.dataset_name)
            new_jail.path = self.zfs.get_mountpoint(new_jail.dataset_name)
        else:
            libjmgr.helpers.makedirs_safe(new_jail.path, logger=self.logger)

    def _write_declaration(
        self,
        new_jail: 'libjmgr.NewJail.NewJail',
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.Generator['libjmgr.events.JmgrEvent', None, None]:
        jailConfigWriteEvent = libjmgr.events.JailConfigWrite(
            jail=new_jail,
            scope=event_scope
        )
        yield jailConfigWriteEvent.begin()
        template = libjmgr.Config.Jail.File.JailConf.JailConfTemplate(
            self.config.jail_conf_template,
            logger=self.logger
        )
        try:
            template.write(
                new_jail.config_path,
                name=new_jail.name,
                path=new_jail.path,
                ip_conf=new_jail.ip_conf
            )
        except libjmgr.errors.JmgrException as e:
            yield jailConfigWriteEvent.fail(e)
            raise
        yield jailConfigWriteEvent.end()

    def _register(
        self,
        new_jail: 'libjmgr.NewJail.NewJail'
    ) -> 'libjmgr.Jail.JailGenerator':
        jail = self._new_jail_instance(new_jail.name)
        jail.path = new_jail.path
        jail.config_path = new_jail.config_path
        jail.dataset_name = new_jail.dataset_name or ""
        if new_jail.inherit_ip is True:
            jail.ip4_inherit = "inherit"
            jail.ip4 = "inherit"
        else:
            jail.ip4 = str(new_jail.ip)
            jail.interface = str(new_jail.interface)
        self._jails.append(jail)
        return jail

    def create(
        self,
        name: str,
        ip: typing.Optional[str]=None,
        interface: typing.Optional[str]=None,
        release_name: typing.Optional[str]=None,
        force: bool=False,
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.Generator['libjmgr.events.JmgrEvent', None, None]:
        """
        Create a new jail from a release.

        Args:

            name (str):
                Name of the new jail.

            ip (str): (optional)
                IPv4 address used when the name does not resolve.

            interface (str): (optional)
                Network interface of the IPv4 address.

            release_name (str): (optional)
                The release to install. Defaults to the host release.

            force (bool): (default=False)
                Create the jail without asking for confirmation.
        """
        self._require_root("create a jail")

        new_jail = libjmgr.NewJail.check(
            name,
            jails=self,
            ip=ip,
            interface=interface,
            force=force
        )
        post_install = self._require_post_install()

        if release_name is None:
            release_name = self.host.release_version
        release = libjmgr.Release.ReleaseGenerator(
            name=release_name,
            host=self.host,
            logger=self.logger
        )

        self.logger.info(f"{new_jail}\nJail Release: {release_name}")
        self.prompts.confirm("Create jail", force=force)

        jailProvisionEvent = libjmgr.events.JailProvision(
            jail=new_jail,
            scope=event_scope
        )
        _scope = jailProvisionEvent.scope
        yield jailProvisionEvent.begin()

        try:
            yield from release.fetch(event_scope=_scope)
            self._provision_storage(new_jail)
            yield from release.extract(new_jail.path, event_scope=_scope)
            yield from self._write_declaration(new_jail, event_scope=_scope)
        except libjmgr.errors.JmgrException as e:
            yield jailProvisionEvent.fail(e)
            raise

        jail = self._register(new_jail)

        if post_install is not None:
            jailHookPostInstallEvent = libjmgr.events.JailHookPostInstall(
                jail=jail,
                scope=_scope
            )
            yield jailHookPostInstallEvent.begin()
            try:
                stdout, _, _ = libjmgr.helpers.exec(
                    [
                        post_install,
                        new_jail.name,
                        new_jail.path,
                        new_jail.config_path
                    ],
                    logger=self.logger
                )
            except libjmgr.errors.JmgrException as e:
                yield jailHookPostInstallEvent.fail(e)
                yield jailProvisionEvent.fail(e)
                raise
            yield jailHookPostInstallEvent.end(stdout=stdout)

        yield jailProvisionEvent.end()

    def clone(
        self,
        source_name: str,
        name: str,
        ip: typing.Optional[str]=None,
        interface: typing.Optional[str]=None,
        force: bool=False,
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.Generator['libjmgr.events.JmgrEvent', None, None]:
        """
        Create a new jail from the storage of an existing jail.

        A source on ZFS is snapshotted and sent to the new dataset, which is
        flattened to a dataset without snapshots afterwards. Other sources are
        stopped and copied with a tar stream.
        """
        self._require_root("clone a jail")

        source = self[source_name]
        source.require_jail_not_child()

        new_jail = libjmgr.NewJail.check(
            name,
            jails=self,
            ip=ip,
            interface=interface,
            force=force
        )

        self.logger.info(f"{new_jail}\nJail Source: {source.name}")
        self.prompts.confirm("Clone jail", force=force)

        jailCloneEvent = libjmgr.events.JailClone(
            jail=new_jail,
            scope=event_scope
        )
        _scope = jailCloneEvent.scope
        yield jailCloneEvent.begin()

        try:
            if source.has_dataset and (new_jail.dataset_name is not None):
                self._clone_dataset(source, new_jail)
            else:
                if source.running is True:
                    self.prompts.confirm(
                        f"Jail {source.name} is running, stop it",
                        force=force
                    )
                    yield from source.stop(event_scope=_scope)
                self._provision_storage(new_jail)
                libjmgr.Storage.clone(
                    False,
                    source.path,
                    new_jail.path,
                    logger=self.logger
                )
            yield from self._write_declaration(new_jail, event_scope=_scope)
        except libjmgr.errors.JmgrException as e:
            yield jailCloneEvent.fail(e)
            raise

        self._register(new_jail)
        yield jailCloneEvent.end()

    def _clone_dataset(
        self,
        source: 'libjmgr.Jail.JailGenerator',
        new_jail: 'libjmgr.NewJail.NewJail'
    ) -> None:
        dataset_name = str(new_jail.dataset_name)

        snapshot_name = self.zfs.snapshot(source.dataset_name)
        source.snapshots.append(snapshot_name)

        libjmgr.Storage.clone(
            True,
            snapshot_name,
            dataset_name,
            logger=self.logger
        )

        received_snapshots = self.zfs.snapshots_of(dataset_name)
        if len(received_snapshots) == 0:
            raise libjmgr.errors.CloneSnapshotMissing(
                dataset_name=dataset_name,
                logger=self.logger
            )
        self.zfs.rollback(received_snapshots[0])
        self.zfs.destroy_snapshot(received_snapshots[0])

        new_jail.path = self.zfs.get_mountpoint(dataset_name)

    def destroy(
        self,
        target: str,
        force: bool=False,
        recursive: bool=False,
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.Generator['libjmgr.events.JmgrEvent', None, None]:
        """Destroy a jail or a single snapshot named <dataset>@<snapshot>."""
        if self.exists(target) is True:
            jail = self[target]
            yield from jail.destroy(
                force=force,
                recursive=recursive,
                event_scope=event_scope
            )
            self._jails.remove(jail)
            return

        self._require_root("destroy a snapshot")

        try:
            libjmgr.Types.SnapshotName(target)
        except ValueError:
            raise libjmgr.errors.InvalidSnapshotIdentifier(
                identifier=target,
                logger=self.logger
            )
        if self.zfs.exists(target) is False:
            raise libjmgr.errors.InvalidSnapshotIdentifier(
                identifier=target,
                logger=self.logger
            )

        self.prompts.confirm(f"Destroy snapshot {target}", force=force)

        snapshotDestroyEvent = libjmgr.events.SnapshotDestroy(
            snapshot_name=target,
            scope=event_scope
        )
        yield snapshotDestroyEvent.begin()
        try:
            self.zfs.destroy_snapshot(target)
        except libjmgr.errors.JmgrException as e:
            yield snapshotDestroyEvent.fail(e)
            raise

        for jail in self._jails:
            if target in jail.snapshots:
                jail.snapshots.remove(target)
        yield snapshotDestroyEvent.end()


class Jails(JailsGenerator):
    """Synchronous wrapper of JailsGenerator."""

    @property
    def _class_jail(self) -> typing.Type['libjmgr.Jail.Jail']:
        return libjmgr.Jail.Jail

    def __getitem__(self, name: str) -> 'libjmgr.Jail.Jail':
        """Return the Jail with the given name."""
        _getitem = JailsGenerator.__getitem__
        jail = _getitem(self, name)  # type: libjmgr.Jail.Jail
        return jail

    def create(  # noqa: T484
        self,
        *args,
        **kwargs
    ) -> typing.List['libjmgr.events.JmgrEvent']:
        """Create a new jail."""
        return list(JailsGenerator.create(self, *args, **kwargs))

    def clone(  # noqa: T484
        self,
        *args,
        **kwargs
    ) -> typing.List['libjmgr.events.JmgrEvent']:
        """Clone an existing jail."""
        return list(JailsGenerator.clone(self, *args, **kwargs))

    def destroy(  # noqa: T484
        self,
        *args,
        **kwargs
    ) -> typing.List['libjmgr.events.JmgrEvent']:
        """Destroy a jail or a snapshot."""
        return list(JailsGenerator.destroy(self, *args, **kwargs))
