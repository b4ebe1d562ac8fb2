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
"""Descriptor and prerequisite checks of jails that are about to be created."""
import typing
import ipaddress
import os.path

import libjmgr.errors
import libjmgr.helpers


class NewJail:
    """
    Provisioning details of a jail that does not exist yet.

    A NewJail only lives until the declaration file of the jail was written.
    """

    name: str
    ip: typing.Optional[str]
    interface: typing.Optional[str]
    inherit_ip: bool
    dataset_name: typing.Optional[str]
    path: str
    config_path: str

    def __init__(
        self,
        name: str,
        path: str,
        config_path: str,
        ip: typing.Optional[str]=None,
        interface: typing.Optional[str]=None,
        inherit_ip: bool=False,
        dataset_name: typing.Optional[str]=None
    ) -> None:
        self.name = name
        self.path = path
        self.config_path = config_path
        self.ip = ip
        self.interface = interface
        self.inherit_ip = inherit_ip
        self.dataset_name = dataset_name

    @property
    def ip_conf(self) -> str:
        """Return the IP configuration fragment of the declaration."""
        if self.inherit_ip is True:
            return "ip4 = inherit;"
        return f"ip4.addr = {self.ip};\n\tinterface = {self.interface};"

    def __str__(self) -> str:
        """Return a summary of the new jail."""
        lines = [f"Jail Name: {self.name}"]
        if self.inherit_ip is True:
            lines.append("Jail IP: Inherit host IP address")
        else:
            lines.append(f"Jail IP: {self.ip}")
            lines.append(f"Jail Iface: {self.interface}")
        return "\n".join(lines)


def check(
    name: str,
    jails: 'libjmgr.Jails.JailsGenerator',
    ip: typing.Optional[str]=None,
    interface: typing.Optional[str]=None,
    force: bool=False
) -> NewJail:
    """
    Verify that a jail can be created and return its descriptor.

    Args:

        name (str):

            Name of the new jail. A name that resolves to an address assigns
            this address to the jail.

        jails (libjmgr.Jails.JailsGenerator):

            The registry the new jail will be part of.

        ip (str): (optional)

            IPv4 address of the jail when its name does not resolve.

        interface (str): (optional)

            Network interface of the address. Defaults to the configured
            JailIface.

        force (bool): (default=False)

            Inherit the host address without asking when no address is known.
    """
    logger = jails.logger
    host = jails.host
    config = jails.config

    if libjmgr.helpers.validate_name(name) is False:
        raise libjmgr.errors.InvalidJailName(name=name, logger=logger)

    if jails.exists(name) is True:
        raise libjmgr.errors.JailAlreadyExists(name=name, logger=logger)

    config.require_good_config()

    resolved_ip = host.resolve(name)
    if resolved_ip is not None:
        logger.verbose(f"{name} resolves to {resolved_ip}")
        ip = resolved_ip
    elif ip is not None:
        try:
            ipaddress.ip_network(f"{ip}/24", strict=False)
        except ValueError:
            raise libjmgr.errors.InvalidIPAddress(address=ip, logger=logger)

    inherit_ip = False
    if interface is None:
        interface = config.jail_iface

    if ip is None:
        jails.prompts.confirm(
            "No IP address found. Use host IP",
            force=force
        )
        inherit_ip = True
        interface = None
    else:
        if host.address_in_use(ip) is True:
            raise libjmgr.errors.IPAddressInUse(address=ip, logger=logger)
        if (interface is None) or (host.has_interface(interface) is False):
            raise libjmgr.errors.InvalidInterfaceName(
                name=str(interface),
                logger=logger
            )

    conf_d = config.jails_conf_d
    if os.path.isdir(conf_d) is False:
        raise libjmgr.errors.JailConfigDirectoryMissing(
            path=conf_d,
            logger=logger
        )

    config_path = os.path.join(conf_d, f"{name}.conf")
    if os.path.exists(config_path) is True:
        raise libjmgr.errors.JailConfigExists(path=config_path, logger=logger)

    path = os.path.join(config.jails_home, name)
    dataset_name: typing.Optional[str] = None
    if config.use_zfs is True:
        dataset_name = f"{config.zfs_dataset}/{name}"
        if jails.zfs.exists(dataset_name) is True:
            raise libjmgr.errors.DatasetExists(
                dataset_name=dataset_name,
                logger=logger
            )
    elif os.path.exists(path) is True:
        raise libjmgr.errors.JailConfigExists(path=path, logger=logger)

    return NewJail(
        name=name,
        path=path,
        config_path=config_path,
        ip=ip,
        interface=interface,
        inherit_ip=inherit_ip,
        dataset_name=dataset_name
    )
