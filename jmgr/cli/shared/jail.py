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
"""Jail lookup of the jmgr commands."""
import typing

import click

import libjmgr.Jails
import libjmgr.errors


def get_jails(ctx: click.core.Context) -> libjmgr.Jails.JailsGenerator:
    """Build the jail registry of the host."""
    return libjmgr.Jails.JailsGenerator(
        host=ctx.host,
        zfs=ctx.zfs,
        prompts=ctx.prompts,
        logger=ctx.logger
    )


def get_jail(
    name: str,
    ctx: click.core.Context,
    jails: typing.Optional[libjmgr.Jails.JailsGenerator]=None
) -> 'libjmgr.Jail.JailGenerator':
    """Return the jail with the given name or exit."""
    if jails is None:
        jails = get_jails(ctx)
    try:
        return jails[name]
    except libjmgr.errors.JailNotFound:
        exit(1)
