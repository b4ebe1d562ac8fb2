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
"""Runtime state of jails as reported by jls(8)."""
import typing
import subprocess  # nosec: B404
import json

import libjmgr.errors
import libjmgr.helpers

JLS_BIN = "/usr/sbin/jls"
JLS_OUTPUT_ARGS = ["-v", "--libxo=json"]


def parse_jls_output(
    data: str,
    logger: typing.Optional['libjmgr.Logger.Logger']=None
) -> typing.Dict[str, 'JailState']:
    """Map the jail names of jls libxo JSON output to their state."""
    if data.strip() == "":
        return {}
    try:
        entries = json.loads(data)["jail-information"]["jail"]
        return {
            entry["name"]: JailState(entry["name"], entry, logger=logger)
            for entry in entries
        }
    except (ValueError, KeyError, TypeError):
        raise libjmgr.errors.JailStateUpdateFailed(logger=logger)


def _int_or_zero(value: typing.Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class JailState(dict):
    """
    State of a single jail.

    The state is empty while the jail is not running. Reading any value
    of a state that was never queried runs jls first.
    """

    name: str
    queried: bool
    logger: typing.Optional['libjmgr.Logger.Logger']

    def __init__(
        self,
        name: str,
        data: typing.Optional[typing.Dict[str, typing.Any]]=None,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        dict.__init__(self, data or {})
        self.name = name
        self.logger = logger
        self.queried = (data is not None)

    def query(self) -> None:
        """Replace the state with the current jls output of the jail."""
        if self.logger is not None:
            self.logger.verbose(f"Querying jail status of {self.name}")

        stdout, _, returncode = libjmgr.helpers.exec(
            [JLS_BIN, "-j", self.name] + JLS_OUTPUT_ARGS,
            stderr=subprocess.DEVNULL,
            ignore_error=True,
            logger=self.logger
        )

        self.clear()
        self.queried = True
        if (returncode > 0) or (stdout is None):
            return

        states = parse_jls_output(stdout, logger=self.logger)
        if self.name in states:
            self.update(states[self.name])

    @property
    def data(self) -> typing.Dict[str, typing.Any]:
        """Return the state, querying jls when it is unknown."""
        if self.queried is False:
            self.query()
        return dict(self)

    @property
    def jid(self) -> int:
        """Return the runtime id or 0 when the jail is not running."""
        return _int_or_zero(self.data.get("jid"))

    @property
    def cpuset_id(self) -> int:
        return _int_or_zero(self.data.get("cpusetid"))

    @property
    def ip4_addrs(self) -> typing.List[str]:
        return list(self.data.get("ipv4_addrs", []))

    @property
    def ip6_addrs(self) -> typing.List[str]:
        return list(self.data.get("ipv6_addrs", []))


class JailStates(dict):
    """The states of all running jails, indexed by jail name."""

    queried: bool = False

    def query(
        self,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        """Replace the states with the current jls output."""
        if logger is not None:
            logger.verbose("Querying all running jails status")

        stdout, _, returncode = libjmgr.helpers.exec(
            [JLS_BIN] + JLS_OUTPUT_ARGS,
            stderr=subprocess.DEVNULL,
            ignore_error=True,
            logger=logger
        )

        self.clear()
        if (returncode > 0) or (stdout is None):
            raise libjmgr.errors.JailStateUpdateFailed(logger=logger)

        self.update(parse_jls_output(stdout, logger=logger))
        self.queried = True
