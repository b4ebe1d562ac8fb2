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
"""Validated string types of jmgr."""
import re


class AbsolutePath(str):
    """A normalized absolute filesystem path."""

    blacklist = re.compile(r"(//)|(/\.\.?(/|$))|[\n\r]")

    def __init__(self, sequence: str) -> None:
        if isinstance(sequence, str) is False:
            raise TypeError("AbsolutePath must be a string")
        if sequence.startswith("/") is False:
            raise ValueError(f"Path is not absolute: {sequence}")
        if self.blacklist.search(sequence) is not None:
            raise ValueError(f"Illegal path: {sequence}")


class SnapshotName(str):
    """A ZFS snapshot identifier in the form <dataset>@<snapshot>."""

    pattern = re.compile(r"^(?P<dataset>[^@\s]+)@(?P<snapshot>[^@\s]+)$")

    def __init__(self, sequence: str) -> None:
        if isinstance(sequence, str) is False:
            raise TypeError("SnapshotName must be a string")
        if self.pattern.match(sequence) is None:
            raise ValueError(f"Not a snapshot name: {sequence}")

    @property
    def dataset(self) -> str:
        """Return the name of the snapshotted dataset."""
        return self.split("@", maxsplit=1)[0]

    @property
    def snapshot(self) -> str:
        """Return the name of the snapshot without its dataset."""
        return self.split("@", maxsplit=1)[1]
