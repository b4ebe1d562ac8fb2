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
"""jmgr Host module."""
import typing
import os
import re
import socket

import libjmgr.Distribution
import libjmgr.errors
import libjmgr.helpers
import libjmgr.helpers_object

_distribution_types = typing.Union[
    libjmgr.Distribution.DistributionGenerator,
    libjmgr.Distribution.Distribution,
]

SYSRC_BIN = "/usr/sbin/sysrc"


class HostGenerator:
    """Asynchronous representation of the jail host."""

    _class_distribution = libjmgr.Distribution.DistributionGenerator

    distribution: _distribution_types

    __release_pattern = re.compile(r"(?P<release>.*RELEASE)")

    def __init__(
        self,
        config: typing.Optional['libjmgr.Config.Jmgr.JmgrConfig']=None,
        zfs: typing.Optional['libjmgr.ZFS.ZFS']=None,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:

        self.logger = libjmgr.helpers_object.init_logger(self, logger)
        self.zfs = libjmgr.helpers_object.init_zfs(self, zfs)
        self.config = libjmgr.helpers_object.init_config(self, config)

        self.distribution = self._class_distribution(
            host=self,
            logger=self.logger
        )

    @property
    def release_version(self) -> str:
        """Return the host release version, e.g. 13.2-RELEASE."""
        stdout, _, _ = libjmgr.helpers.exec(
            ["/bin/freebsd-version"],
            logger=self.logger
        )
        match = self.__release_pattern.search(str(stdout))
        if match is None:
            raise libjmgr.errors.HostReleaseUnknown(logger=self.logger)
        return match["release"]

    @property
    def processor(self) -> str:
        """Return the hosts machine architecture."""
        return os.uname().machine

    @property
    def interfaces(self) -> typing.List[str]:
        """Return the names of all network interfaces."""
        stdout, _, _ = libjmgr.helpers.exec(
            ["/sbin/ifconfig", "-l"],
            logger=self.logger
        )
        return libjmgr.helpers.split_words(stdout)

    def has_interface(self, name: str) -> bool:
        """Return True if the network interface exists on the host."""
        return name in self.interfaces

    def address_in_use(self, address: str) -> bool:
        """Return True if a host answers ping on the address."""
        _, _, returncode = libjmgr.helpers.exec(
            ["/sbin/ping", "-c", "2", "-t", "2", address],
            logger=self.logger,
            ignore_error=True
        )
        return returncode == 0

    def resolve(self, hostname: str) -> typing.Optional[str]:
        """Return the IPv4 address of a hostname or None."""
        try:
            return socket.gethostbyname(hostname)
        except OSError:
            self.logger.debug(f"{hostname} does not resolve")
            return None

    @property
    def jail_list(self) -> typing.List[str]:
        """Return the jails started on boot."""
        stdout, _, _ = libjmgr.helpers.exec(
            [SYSRC_BIN, "-n", "jail_list"],
            logger=self.logger,
            ignore_error=True
        )
        return libjmgr.helpers.split_words(stdout)

    @property
    def jail_enabled(self) -> bool:
        """Return True if the jail rc script is enabled."""
        stdout, _, _ = libjmgr.helpers.exec(
            [SYSRC_BIN, "-n", "jail_enable"],
            logger=self.logger,
            ignore_error=True
        )
        return str(stdout).strip().upper() == "YES"

    def enable_jail(self, name: str) -> None:
        """Start a jail on boot."""
        if self.jail_enabled is False:
            libjmgr.helpers.exec(
                [SYSRC_BIN, "jail_enable=YES"],
                logger=self.logger
            )
        libjmgr.helpers.exec(
            [SYSRC_BIN, f"jail_list+={name}"],
            logger=self.logger
        )

    def disable_jail(self, name: str) -> None:
        """Do not start a jail on boot."""
        libjmgr.helpers.exec(
            [SYSRC_BIN, f"jail_list-={name}"],
            logger=self.logger
        )

    def jail_os_version(self, path: str) -> str:
        """Return the userland version installed below a jail root."""
        version_bin = os.path.join(path, "bin/freebsd-version")
        if os.path.isfile(version_bin) is False:
            return ""
        stdout, _, returncode = libjmgr.helpers.exec(
            ["/usr/bin/env", f"ROOT={path}", version_bin],
            logger=self.logger,
            ignore_error=True
        )
        if (returncode > 0) or (stdout is None):
            return ""
        return stdout.strip()

    @property
    def is_root(self) -> bool:
        """Return True if jmgr runs with root privileges."""
        return libjmgr.helpers.is_root()


class Host(HostGenerator):
    """Synchronous wrapper of HostGenerator."""

    _class_distribution = libjmgr.Distribution.Distribution
