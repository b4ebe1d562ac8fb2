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
"""Unit tests of the zfs(8) wrapper."""
import pytest

from helper_functions import CommandRecorder

import libjmgr.errors
import libjmgr.ZFS

SNAPSHOT_LIST = ["/sbin/zfs", "list", "-H", "-t", "snapshot", "-o", "name"]


class TestZFS(object):
    """Query and modify datasets and snapshots."""

    def test_list_dataset_columns(
        self,
        zfs: libjmgr.ZFS.ZFS,
        commands: CommandRecorder
    ) -> None:
        commands.add(
            ["/sbin/zfs", "list", "-H", "/jails/web"],
            "zroot/jails/web\t1.2G\t20G\t1.2G\t/jails/web"
        )
        assert zfs.list_dataset("/jails/web") == [
            "zroot/jails/web",
            "1.2G",
            "20G",
            "1.2G",
            "/jails/web"
        ]

    def test_missing_dataset(
        self,
        zfs: libjmgr.ZFS.ZFS,
        commands: CommandRecorder
    ) -> None:
        commands.add(["/sbin/zfs", "list"], returncode=1)
        assert zfs.list_dataset("zroot/missing") is None
        assert zfs.exists("zroot/missing") is False

    def test_snapshots_without_placeholders(
        self,
        zfs: libjmgr.ZFS.ZFS,
        commands: CommandRecorder
    ) -> None:
        commands.add(
            SNAPSHOT_LIST,
            "zroot/jails/web@2023-01-01T10:00:00\n-\n"
            "zroot/jails/web@2023-02-01T10:00:00"
        )
        assert zfs.snapshots_of("zroot/jails/web") == [
            "zroot/jails/web@2023-01-01T10:00:00",
            "zroot/jails/web@2023-02-01T10:00:00"
        ]

    def test_latest_snapshot(
        self,
        zfs: libjmgr.ZFS.ZFS,
        commands: CommandRecorder
    ) -> None:
        commands.add(
            SNAPSHOT_LIST,
            "zroot/jails/web@a\nzroot/jails/web@b\nzroot/jails/web@c"
        )
        assert zfs.latest_snapshot("zroot/jails/web") == "zroot/jails/web@c"

    def test_latest_snapshot_of_dataset_without_snapshots(
        self,
        zfs: libjmgr.ZFS.ZFS,
        commands: CommandRecorder
    ) -> None:
        with pytest.raises(libjmgr.errors.SnapshotNotFound):
            zfs.latest_snapshot("zroot/jails/web")

    def test_snapshot_is_timestamped(
        self,
        zfs: libjmgr.ZFS.ZFS,
        commands: CommandRecorder
    ) -> None:
        snapshot_name = zfs.snapshot("zroot/jails/web")
        dataset_name, timestamp = snapshot_name.split("@")
        assert dataset_name == "zroot/jails/web"
        assert len(timestamp) == len("2023-01-01T10:00:00")
        assert commands.calls == [["/sbin/zfs", "snapshot", snapshot_name]]

    def test_destroy_snapshot_requires_snapshot_name(
        self,
        zfs: libjmgr.ZFS.ZFS,
        commands: CommandRecorder
    ) -> None:
        with pytest.raises(libjmgr.errors.InvalidSnapshotIdentifier):
            zfs.destroy_snapshot("zroot/jails/web")
        assert commands.calls == []

    def test_recursive_destroy(
        self,
        zfs: libjmgr.ZFS.ZFS,
        commands: CommandRecorder
    ) -> None:
        zfs.destroy_dataset("zroot/jails/web", recursive=True, force=True)
        assert commands.calls == [
            ["/sbin/zfs", "destroy", "-r", "-f", "zroot/jails/web"]
        ]
