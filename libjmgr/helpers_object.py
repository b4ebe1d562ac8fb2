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
Attach shared collaborators to jmgr objects.

Each init_ function returns the collaborator the object already carries,
the one passed in by the caller, or a newly created default, in this
order of preference.
"""
import typing

import libjmgr.Logger


def _existing(self: typing.Any, attribute: str) -> typing.Any:
    try:
        return object.__getattribute__(self, attribute)
    except AttributeError:
        return None


def init_logger(
    self: typing.Any,
    logger: typing.Optional['libjmgr.Logger.Logger']=None
) -> 'libjmgr.Logger.Logger':
    """Attach or initialize a Logger object."""
    existing = _existing(self, "logger")
    if existing is not None:
        return existing
    if logger is None:
        logger = libjmgr.Logger.Logger()
    object.__setattr__(self, "logger", logger)
    return logger


def init_zfs(
    self: typing.Any,
    zfs: typing.Optional['libjmgr.ZFS.ZFS']=None
) -> 'libjmgr.ZFS.ZFS':
    """Attach or initialize a ZFS object."""
    existing = _existing(self, "zfs")
    if existing is not None:
        return existing

    import libjmgr.ZFS
    if isinstance(zfs, libjmgr.ZFS.ZFS) is False:
        zfs = libjmgr.ZFS.get_zfs(logger=self.logger)
    object.__setattr__(self, "zfs", zfs)
    return zfs


def init_config(
    self: typing.Any,
    config: typing.Optional['libjmgr.Config.Jmgr.JmgrConfig']=None
) -> 'libjmgr.Config.Jmgr.JmgrConfig':
    """Attach or initialize the jmgr configuration."""
    existing = _existing(self, "config")
    if existing is not None:
        return existing

    import libjmgr.Config.Jmgr
    if isinstance(config, libjmgr.Config.Jmgr.JmgrConfig):
        return config
    return libjmgr.Config.Jmgr.JmgrConfig(logger=self.logger, zfs=self.zfs)


def init_host(
    self: typing.Any,
    host: typing.Optional['libjmgr.Host.HostGenerator']=None
) -> 'libjmgr.Host.HostGenerator':
    """Attach or initialize a Host object."""
    existing = _existing(self, "host")
    if existing is not None:
        return existing

    import libjmgr.Host
    if isinstance(host, libjmgr.Host.HostGenerator):
        return host
    return libjmgr.Host.HostGenerator(
        logger=self.logger,
        zfs=_existing(self, "zfs"),
        config=_existing(self, "config")
    )


def init_prompts(
    self: typing.Any,
    prompts: typing.Optional['libjmgr.Prompts.Prompts']=None
) -> 'libjmgr.Prompts.Prompts':
    """Attach or initialize a Prompts object."""
    existing = _existing(self, "prompts")
    if existing is not None:
        return existing

    import libjmgr.Prompts
    if isinstance(prompts, libjmgr.Prompts.Prompts):
        return prompts
    return libjmgr.Prompts.Prompts(logger=self.logger)
