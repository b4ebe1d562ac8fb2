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
"""Unit tests of the jail registry."""
import typing
import os

import pytest

import helper_functions
from helper_functions import CommandRecorder, RecordingPrompts

import libjmgr.errors
import libjmgr.Jail
import libjmgr.Jails

JLS = ["/usr/sbin/jls", "-v"]
JAIL_LIST = ["/usr/sbin/sysrc", "-n", "jail_list"]
SNAPSHOT_LIST = ["/sbin/zfs", "list", "-H", "-t", "snapshot", "-o", "name"]

MakeJails = typing.Callable[..., libjmgr.Jails.Jails]
JmgrDirs = typing.Dict[str, str]


def _declare(
    jmgr_dirs: JmgrDirs,
    name: str,
    ip_conf: str="ip4 = inherit;",
    legacy: bool=False
) -> str:
    path = os.path.join(jmgr_dirs["jails_home"], name)
    content = helper_functions.JAIL_CONF_TEMPLATE
    for placeholder, value in [
        ("<JailName>", name),
        ("<JailPath>", path),
        ("<IPConf>", ip_conf)
    ]:
        content = content.replace(placeholder, value)
    return helper_functions.write_declaration(
        jmgr_dirs,
        name,
        content,
        legacy=legacy
    )


def _fetched_release(jmgr_dirs: JmgrDirs, name: str="13.2-RELEASE") -> None:
    with open(os.path.join(jmgr_dirs["media"], f"{name}.txz"), "w") as f:
        f.write("base")


def _zfs_host(commands: CommandRecorder, jmgr_dirs: JmgrDirs) -> None:
    commands.add(
        ["/sbin/zfs", "list", "-H", "zroot/jails"],
        f"zroot/jails\t1G\t20G\t96K\t{jmgr_dirs['jails_home']}"
    )


class TestRegistry(object):
    """Merge the sources of truth into one registry."""

    def test_running_and_declared_jail_are_merged(
        self,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        path = os.path.join(jmgr_dirs["jails_home"], "web")
        commands.add(JLS, helper_functions.jls_output(dict(
            jid=3,
            name="web",
            path=path,
            hostname="web",
            cpusetid=4,
            ipv4_addrs=["10.0.0.10"],
            ipv6_addrs=[]
        )))
        config_path = _declare(
            jmgr_dirs,
            "web",
            ip_conf="ip4.addr = 10.0.0.10;\n\tinterface = em0;"
        )

        jails = make_jails()

        assert len(jails) == 1
        web = jails["web"]
        assert web.jid == 3
        assert web.running is True
        assert web.cpuset_id == 4
        assert web.config_path == config_path
        assert web.ip4 == "10.0.0.10"
        assert web.path == path

    def test_declared_jails_are_stopped(
        self,
        jmgr_dirs: JmgrDirs,
        make_jails: MakeJails
    ) -> None:
        _declare(jmgr_dirs, "web")
        _declare(jmgr_dirs, "db", legacy=True)

        jails = make_jails()

        assert [jail.name for jail in jails] == ["web", "db"]
        assert all(jail.jid == 0 for jail in jails)
        assert jails["db"].is_legacy is True
        assert jails["web"].is_legacy is False
        assert jails["web"].ip4 == "inherit"

    def test_parsing_a_file_twice_adds_no_jails(
        self,
        jmgr_dirs: JmgrDirs,
        make_jails: MakeJails
    ) -> None:
        config_path = _declare(jmgr_dirs, "web")
        jails = make_jails()
        jails.parse_declaration_file(config_path)
        assert len(jails) == 1

    def test_failing_jls_is_tolerated(
        self,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        commands.add(JLS, returncode=1)
        _declare(jmgr_dirs, "web")
        jails = make_jails()
        assert len(jails) == 1

    def test_boot_list(
        self,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        commands.add(JAIL_LIST, "web")
        _declare(jmgr_dirs, "web")
        _declare(jmgr_dirs, "db")

        jails = make_jails()

        assert jails["web"].start_on_boot == "Yes"
        assert jails["db"].start_on_boot == "No"

    def test_dataset_is_detected(
        self,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        path = os.path.join(jmgr_dirs["jails_home"], "web")
        os.makedirs(path)
        commands.add(
            ["/sbin/zfs", "list", "-H", path],
            f"zroot/jails/web\t1G\t20G\t1G\t{path}"
        )
        commands.add(
            SNAPSHOT_LIST + ["zroot/jails/web"],
            "zroot/jails/web@a\nzroot/jails/web@b"
        )
        _declare(jmgr_dirs, "web")

        web = make_jails()["web"]

        assert web.has_dataset is True
        assert web.dataset_name == "zroot/jails/web"
        assert web.snapshots == ["zroot/jails/web@a", "zroot/jails/web@b"]

    def test_dataset_of_other_name_is_ignored(
        self,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        path = os.path.join(jmgr_dirs["jails_home"], "web")
        os.makedirs(path)
        commands.add(
            ["/sbin/zfs", "list", "-H", path],
            f"zroot/jails\t1G\t20G\t96K\t{jmgr_dirs['jails_home']}"
        )
        _declare(jmgr_dirs, "web")

        web = make_jails()["web"]

        assert web.has_dataset is False
        assert web.snapshots == []

    def test_missing_jail(self, make_jails: MakeJails) -> None:
        jails = make_jails()
        assert jails.exists("web") is False
        with pytest.raises(libjmgr.errors.JailNotFound):
            jails["web"]


class TestHierarchy(object):
    """Detect child jails."""

    def test_unprivileged_naming_convention(
        self,
        unprivileged: None,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        _declare(jmgr_dirs, "web")
        _declare(jmgr_dirs, "web.child")

        jails = make_jails()

        assert jails["web"].is_parent is True
        assert jails["web"].is_child is False
        assert jails["web.child"].parent_name == "web"
        assert jails["web.child"].is_child is True

    def test_jail_without_children(
        self,
        root: None,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        commands.add([libjmgr.Jail.JEXEC_BIN, "web"], "0")
        _declare(jmgr_dirs, "web")
        _declare(jmgr_dirs, "web.child")

        jails = make_jails()

        assert jails["web.child"].parent_name == ""
        assert jails["web.child"].is_child is False

    def test_jail_with_children(
        self,
        root: None,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        commands.add([libjmgr.Jail.JEXEC_BIN, "web"], "2")
        _declare(jmgr_dirs, "web")
        _declare(jmgr_dirs, "web.child")

        jails = make_jails()

        assert jails["web.child"].parent_name == "web"

    def test_failing_probe(
        self,
        root: None,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        commands.add([libjmgr.Jail.JEXEC_BIN, "web"], returncode=1)
        _declare(jmgr_dirs, "web")
        _declare(jmgr_dirs, "web.child")

        jails = make_jails()

        child = jails["web.child"]
        assert child.parent_name == libjmgr.Jail.UNDETERMINED_PARENT
        assert child.is_child is True

    def test_dotted_name_without_parent(
        self,
        unprivileged: None,
        jmgr_dirs: JmgrDirs,
        make_jails: MakeJails
    ) -> None:
        _declare(jmgr_dirs, "www.example")
        jails = make_jails()
        assert jails["www.example"].is_child is False


class TestCreate(object):
    """Create new jails from a release."""

    def test_inherits_host_address(
        self,
        root: None,
        unresolvable: None,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        prompts: RecordingPrompts,
        make_jails: MakeJails
    ) -> None:
        _fetched_release(jmgr_dirs)
        jails = make_jails()

        jails.create("testJ99", release_name="13.2-RELEASE", force=True)

        config_path = os.path.join(jmgr_dirs["conf_d"], "testJ99.conf")
        with open(config_path, "r", encoding="UTF-8") as f:
            declaration = f.read()
        assert "ip4 = inherit;" in declaration
        assert "ip4.addr" not in declaration
        assert prompts.questions == []

        jail_path = os.path.join(jmgr_dirs["jails_home"], "testJ99")
        assert os.path.isdir(jail_path) is True
        assert commands.called([
            "/usr/bin/tar",
            "-xf",
            os.path.join(jmgr_dirs["media"], "13.2-RELEASE.txz"),
            "-C",
            jail_path
        ])
        assert jails["testJ99"].ip4 == "inherit"
        assert jails["testJ99"].config_path == config_path

    def test_with_address(
        self,
        root: None,
        unresolvable: None,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        _fetched_release(jmgr_dirs)
        commands.add(["/sbin/ifconfig", "-l"], "em0 lo0")
        commands.add(["/sbin/ping"], returncode=2)
        jails = make_jails()

        jails.create(
            "web",
            ip="10.0.0.10",
            interface="em0",
            release_name="13.2-RELEASE",
            force=True
        )

        web = jails["web"]
        assert web.ip4 == "10.0.0.10"
        assert web.interface == "em0"
        with open(web.config_path, "r", encoding="UTF-8") as f:
            assert "ip4.addr = 10.0.0.10;" in f.read()

    def test_declined_inheritance(
        self,
        root: None,
        unresolvable: None,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        prompts: RecordingPrompts,
        make_jails: MakeJails
    ) -> None:
        _fetched_release(jmgr_dirs)
        jails = make_jails()

        with pytest.raises(libjmgr.errors.OperationAborted):
            jails.create("web", release_name="13.2-RELEASE")

        assert len(prompts.questions) == 1
        assert commands.calls == []

    def test_address_in_use(
        self,
        root: None,
        unresolvable: None,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        commands.add(["/sbin/ifconfig", "-l"], "em0 lo0")
        jails = make_jails()

        with pytest.raises(libjmgr.errors.IPAddressInUse):
            jails.create("web", ip="10.0.0.10", interface="em0", force=True)

        assert commands.called(["/usr/bin/tar"]) is False
        assert os.listdir(jmgr_dirs["conf_d"]) == []

    def test_invalid_address(
        self,
        root: None,
        unresolvable: None,
        make_jails: MakeJails
    ) -> None:
        jails = make_jails()
        with pytest.raises(libjmgr.errors.InvalidIPAddress):
            jails.create("web", ip="10.0.0.300", interface="em0", force=True)

    def test_invalid_interface(
        self,
        root: None,
        unresolvable: None,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        commands.add(["/sbin/ifconfig", "-l"], "em0 lo0")
        commands.add(["/sbin/ping"], returncode=2)
        jails = make_jails()
        with pytest.raises(libjmgr.errors.InvalidInterfaceName):
            jails.create("web", ip="10.0.0.10", interface="em9", force=True)

    def test_existing_jail(
        self,
        root: None,
        jmgr_dirs: JmgrDirs,
        make_jails: MakeJails
    ) -> None:
        _declare(jmgr_dirs, "web")
        jails = make_jails()
        with pytest.raises(libjmgr.errors.JailAlreadyExists):
            jails.create("web", force=True)

    def test_invalid_name(self, root: None, make_jails: MakeJails) -> None:
        jails = make_jails()
        with pytest.raises(libjmgr.errors.InvalidJailName):
            jails.create("web/../db", force=True)

    def test_requires_root(
        self,
        unprivileged: None,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        jails = make_jails()
        with pytest.raises(libjmgr.errors.MustBeRoot):
            jails.create("web", force=True)
        assert commands.calls == []

    def test_bad_config(
        self,
        root: None,
        unresolvable: None,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        jails = make_jails(JailsHome="/nonexistent/jails")
        with pytest.raises(libjmgr.errors.BadConfig):
            jails.create("web", force=True)
        assert commands.calls == []

    def test_invalid_post_install_hook(
        self,
        root: None,
        unresolvable: None,
        jmgr_dirs: JmgrDirs,
        tmp_path: typing.Any,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        hook = tmp_path / "postinstall.sh"
        hook.write_text("#!/bin/sh\n")
        hook.chmod(0o644)
        jails = make_jails(PostInstall=str(hook))

        with pytest.raises(libjmgr.errors.PostInstallInvalid):
            jails.create("web", release_name="13.2-RELEASE", force=True)

        assert commands.calls == []
        assert os.listdir(jmgr_dirs["conf_d"]) == []

    def test_post_install_hook(
        self,
        root: None,
        unresolvable: None,
        jmgr_dirs: JmgrDirs,
        tmp_path: typing.Any,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        _fetched_release(jmgr_dirs)
        hook = tmp_path / "postinstall.sh"
        hook.write_text("#!/bin/sh\n")
        hook.chmod(0o755)
        jails = make_jails(PostInstall=str(hook))

        jails.create("web", release_name="13.2-RELEASE", force=True)

        web = jails["web"]
        assert commands.calls[-1] == [
            str(hook),
            "web",
            web.path,
            web.config_path
        ]

    def test_zfs_dataset(
        self,
        root: None,
        unresolvable: None,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        _fetched_release(jmgr_dirs)
        _zfs_host(commands, jmgr_dirs)
        jail_path = os.path.join(jmgr_dirs["jails_home"], "web")
        commands.add(
            ["/sbin/zfs", "list", "-H", "-o", "mountpoint", "zroot/jails/web"],
            jail_path
        )
        jails = make_jails(ZFSdataSet="zroot/jails")

        jails.create("web", release_name="13.2-RELEASE", force=True)

        create_index = commands.find(
            ["/sbin/zfs", "create", "zroot/jails/web"]
        )
        extract_index = commands.find(["/usr/bin/tar", "-xf"])
        assert 0 <= create_index < extract_index
        assert jails["web"].dataset_name == "zroot/jails/web"
        assert jails["web"].path == jail_path

    def test_existing_dataset(
        self,
        root: None,
        unresolvable: None,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        _zfs_host(commands, jmgr_dirs)
        commands.add(
            ["/sbin/zfs", "list", "-H", "zroot/jails/web"],
            "zroot/jails/web\t1G\t20G\t1G\t/jails/web"
        )
        jails = make_jails(ZFSdataSet="zroot/jails")

        with pytest.raises(libjmgr.errors.DatasetExists):
            jails.create("web", release_name="13.2-RELEASE", force=True)
        assert commands.called(["/sbin/zfs", "create"]) is False


class TestClone(object):
    """Clone jails from existing jails."""

    def _zfs_source(
        self,
        commands: CommandRecorder,
        jmgr_dirs: JmgrDirs
    ) -> None:
        _zfs_host(commands, jmgr_dirs)
        path = os.path.join(jmgr_dirs["jails_home"], "web")
        os.makedirs(path)
        commands.add(
            ["/sbin/zfs", "list", "-H", path],
            f"zroot/jails/web\t1G\t20G\t1G\t{path}"
        )
        commands.add(
            ["/sbin/zfs", "list", "-H", "-o", "mountpoint", "zroot/jails/db"],
            os.path.join(jmgr_dirs["jails_home"], "db")
        )
        _declare(jmgr_dirs, "web")

    def test_zfs_clone(
        self,
        root: None,
        unresolvable: None,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        self._zfs_source(commands, jmgr_dirs)
        commands.add(
            SNAPSHOT_LIST + ["zroot/jails/db"],
            "zroot/jails/db@received"
        )
        jails = make_jails(ZFSdataSet="zroot/jails")

        jails.clone("web", "db", force=True)

        snapshot_index = commands.find(["/sbin/zfs", "snapshot"])
        send_index = commands.find(["/sbin/zfs", "send"])
        rollback_index = commands.find(
            ["/sbin/zfs", "rollback", "zroot/jails/db@received"]
        )
        destroy_index = commands.find(
            ["/sbin/zfs", "destroy", "zroot/jails/db@received"]
        )
        assert 0 <= snapshot_index < send_index
        assert send_index < rollback_index < destroy_index

        send = commands.calls[send_index]
        assert send[2].startswith("zroot/jails/web@")
        assert send[3:] == ["|", "/sbin/zfs", "receive", "zroot/jails/db"]

        db = jails["db"]
        assert db.dataset_name == "zroot/jails/db"
        assert db.path == os.path.join(jmgr_dirs["jails_home"], "db")
        assert os.path.isfile(db.config_path) is True

    def test_received_dataset_without_snapshot(
        self,
        root: None,
        unresolvable: None,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        self._zfs_source(commands, jmgr_dirs)
        jails = make_jails(ZFSdataSet="zroot/jails")

        with pytest.raises(libjmgr.errors.CloneSnapshotMissing):
            jails.clone("web", "db", force=True)

        assert commands.called(["/sbin/zfs", "rollback"]) is False
        assert jails.exists("db") is False

    def test_directory_clone(
        self,
        root: None,
        unresolvable: None,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        source_path = os.path.join(jmgr_dirs["jails_home"], "web")
        os.makedirs(source_path)
        _declare(jmgr_dirs, "web")
        jails = make_jails()

        jails.clone("web", "db", force=True)

        target_path = os.path.join(jmgr_dirs["jails_home"], "db")
        assert os.path.isdir(target_path) is True
        assert commands.calls == [[
            "/usr/bin/tar", "-cpf", "-", "-C", source_path, ".",
            "|",
            "/usr/bin/tar", "-xpf", "-", "-C", target_path
        ]]
        assert jails["db"].has_dataset is False

    def test_running_directory_source_is_stopped(
        self,
        root: None,
        unresolvable: None,
        jmgr_dirs: JmgrDirs,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        source_path = os.path.join(jmgr_dirs["jails_home"], "web")
        os.makedirs(source_path)
        source_config = _declare(jmgr_dirs, "web")
        commands.add(JLS, helper_functions.jls_output(
            dict(jid=3, name="web", path=source_path)
        ))
        jails = make_jails()
        assert jails["web"].running is True

        jails.clone("web", "db", force=True)

        target_path = os.path.join(jmgr_dirs["jails_home"], "db")
        assert commands.calls == [
            [libjmgr.Jail.JAIL_BIN, "-r", "-f", source_config, "web"],
            [
                "/usr/bin/tar", "-cpf", "-", "-C", source_path, ".",
                "|",
                "/usr/bin/tar", "-xpf", "-", "-C", target_path
            ]
        ]
        assert jails["web"].running is False

    def test_unknown_source(
        self,
        root: None,
        make_jails: MakeJails
    ) -> None:
        jails = make_jails()
        with pytest.raises(libjmgr.errors.JailNotFound):
            jails.clone("web", "db", force=True)


class TestDestroySnapshot(object):
    """Destroy single snapshots."""

    def test_destroy_snapshot(
        self,
        root: None,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        commands.add(
            ["/sbin/zfs", "list", "-H", "zroot/jails/web@a"],
            "zroot/jails/web@a\t0\t-\t1G\t-"
        )
        jails = make_jails()

        jails.destroy("zroot/jails/web@a", force=True)

        assert commands.calls[-1] == [
            "/sbin/zfs",
            "destroy",
            "zroot/jails/web@a"
        ]

    def test_declined(
        self,
        root: None,
        commands: CommandRecorder,
        prompts: RecordingPrompts,
        make_jails: MakeJails
    ) -> None:
        commands.add(
            ["/sbin/zfs", "list", "-H", "zroot/jails/web@a"],
            "zroot/jails/web@a\t0\t-\t1G\t-"
        )
        jails = make_jails()

        with pytest.raises(libjmgr.errors.OperationAborted):
            jails.destroy("zroot/jails/web@a")

        assert prompts.questions == ["Destroy snapshot zroot/jails/web@a"]
        assert commands.called(["/sbin/zfs", "destroy"]) is False

    @pytest.mark.parametrize("target", ["web", "zroot@a@b", "zroot/a b@c"])
    def test_invalid_identifier(
        self,
        root: None,
        target: str,
        make_jails: MakeJails
    ) -> None:
        jails = make_jails()
        with pytest.raises(libjmgr.errors.InvalidSnapshotIdentifier):
            jails.destroy(target, force=True)

    def test_missing_snapshot(
        self,
        root: None,
        commands: CommandRecorder,
        make_jails: MakeJails
    ) -> None:
        commands.add(["/sbin/zfs", "list"], returncode=1)
        jails = make_jails()
        with pytest.raises(libjmgr.errors.InvalidSnapshotIdentifier):
            jails.destroy("zroot/jails/web@a", force=True)
