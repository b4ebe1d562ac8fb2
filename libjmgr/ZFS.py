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
"""jmgr ZFS module."""
import typing
import datetime
import subprocess  # nosec: B404

import libjmgr.errors
import libjmgr.helpers
import libjmgr.helpers_object
import libjmgr.Types

ZFS_BIN = "/sbin/zfs"
SNAPSHOT_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


class ZFS:
    """Wrapper of the zfs(8) command line interface."""

    def __init__(
        self,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        self.logger = libjmgr.helpers_object.init_logger(self, logger)

    def _exec(
        self,
        arguments: typing.List[str],
        ignore_error: bool=False
    ) -> libjmgr.helpers.CommandOutput:
        return libjmgr.helpers.exec(
            [ZFS_BIN] + arguments,
            logger=self.logger,
            ignore_error=ignore_error
        )

    def list_dataset(self, name: str) -> typing.Optional[typing.List[str]]:
        """Return the columns of `zfs list` for a dataset or path."""
        stdout, _, returncode = self._exec(
            ["list", "-H", name],
            ignore_error=True
        )
        if (returncode > 0) or (stdout is None) or (stdout == ""):
            return None
        return stdout.splitlines()[0].split()

    def exists(self, name: str) -> bool:
        """Return True if the dataset or snapshot exists."""
        return self.list_dataset(name) is not None

    def get_mountpoint(self, dataset_name: str) -> str:
        """Return the mountpoint of a dataset."""
        stdout, _, _ = self._exec(
            ["list", "-H", "-o", "mountpoint", dataset_name]
        )
        return str(stdout).strip()

    def create_dataset(self, dataset_name: str) -> None:
        """Create a ZFS dataset."""
        self.logger.verbose(f"Creating ZFS dataset {dataset_name}")
        self._exec(["create", dataset_name])

    def destroy_dataset(
        self,
        dataset_name: str,
        recursive: bool=False,
        force: bool=False
    ) -> None:
        """Destroy a ZFS dataset and optionally all its snapshots."""
        command = ["destroy"]
        if recursive is True:
            command.append("-r")
        if force is True:
            command.append("-f")
        command.append(dataset_name)
        self.logger.verbose(f"Destroying ZFS dataset {dataset_name}")
        self._exec(command)

    def snapshot(self, dataset_name: str) -> str:
        """Take a timestamped snapshot and return its full name."""
        timestamp = datetime.datetime.now().strftime(SNAPSHOT_TIMESTAMP_FORMAT)
        snapshot_name = f"{dataset_name}@{timestamp}"
        self.logger.verbose(f"Taking snapshot {snapshot_name}")
        self._exec(["snapshot", snapshot_name])
        return snapshot_name

    def list_snapshots(self, dataset_name: str) -> typing.List[str]:
        """Return the raw snapshot listing of a dataset, oldest first."""
        stdout, _, returncode = libjmgr.helpers.exec(
            [ZFS_BIN, "list", "-H", "-t", "snapshot", "-o", "name",
             dataset_name],
            logger=self.logger,
            ignore_error=True,
            stderr=subprocess.DEVNULL
        )
        if (returncode > 0) or (stdout is None):
            return []
        return [line.strip() for line in stdout.splitlines()]

    def snapshots_of(self, dataset_name: str) -> typing.List[str]:
        """Return the snapshot names of a dataset without placeholders."""
        return list(filter(
            lambda x: libjmgr.helpers.is_none(x) is False,
            self.list_snapshots(dataset_name)
        ))

    def latest_snapshot(self, dataset_name: str) -> str:
        """Return the most recent snapshot of a dataset."""
        snapshots = self.snapshots_of(dataset_name)
        if len(snapshots) == 0:
            raise libjmgr.errors.SnapshotNotFound(
                name=dataset_name,
                logger=self.logger
            )
        return snapshots[-1]

    def rollback(self, snapshot_name: str) -> None:
        """Roll a dataset back to one of its snapshots."""
        self.logger.verbose(f"Rolling back to snapshot {snapshot_name}")
        self._exec(["rollback", snapshot_name])

    def destroy_snapshot(self, snapshot_name: str) -> None:
        """Destroy a single snapshot."""
        try:
            libjmgr.Types.SnapshotName(snapshot_name)
        except ValueError:
            raise libjmgr.errors.InvalidSnapshotIdentifier(
                identifier=snapshot_name,
                logger=self.logger
            )
        self.logger.verbose(f"Destroying snapshot {snapshot_name}")
        self._exec(["destroy", snapshot_name])


def get_zfs(
    logger: typing.Optional['libjmgr.Logger.Logger']=None
) -> ZFS:
    """Get an instance of jmgr's ZFS class."""
    return ZFS(logger=logger)
