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
"""Copy and remove jail storage."""
import typing

import libjmgr.helpers
import libjmgr.ZFS

TAR_BIN = "/usr/bin/tar"


def clone(
    use_zfs: bool,
    source: str,
    destination: str,
    logger: typing.Optional['libjmgr.Logger.Logger']=None
) -> None:
    """
    Copy the storage of a jail by piping one process into another.

    Args:

        use_zfs (bool):

            When enabled, source is the snapshot that gets sent and
            destination the dataset that receives it. Otherwise both are
            directories and the content is copied with a tar stream.

        source (str):

            Snapshot name or source directory.

        destination (str):

            Dataset name or existing destination directory.
    """
    if use_zfs is True:
        sender = [libjmgr.ZFS.ZFS_BIN, "send", source]
        receiver = [libjmgr.ZFS.ZFS_BIN, "receive", destination]
    else:
        sender = [TAR_BIN, "-cpf", "-", "-C", source, "."]
        receiver = [TAR_BIN, "-xpf", "-", "-C", destination]

    if logger is not None:
        logger.verbose(f"Copying {source} to {destination}")

    libjmgr.helpers.exec_piped(sender, receiver, logger=logger)


def remove_tree(
    path: str,
    logger: typing.Optional['libjmgr.Logger.Logger']=None
) -> None:
    """Clear file flags and remove a directory tree."""
    if logger is not None:
        logger.verbose(f"Removing {path}")
    libjmgr.helpers.exec(["/bin/chflags", "-R", "0", path], logger=logger)
    libjmgr.helpers.exec(["/bin/rm", "-rf", path], logger=logger)


def extract_archive(
    archive: str,
    destination: str,
    logger: typing.Optional['libjmgr.Logger.Logger']=None
) -> None:
    """Extract a tar archive into a directory."""
    libjmgr.helpers.exec(
        [TAR_BIN, "-xf", archive, "-C", destination],
        logger=logger
    )

