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
"""Create a jail with the CLI."""
import typing

import click

from .shared.jail import get_jails
from .shared.releases import print_releases

__rootcmd__ = True


@click.command(name="create", help="Create a jail from a FreeBSD release.")
@click.pass_context
@click.option("--force", "-f", is_flag=True, default=False,
              help="Assume yes on all questions.")
@click.option("--release", "-v", "release_name", default=None,
              help="FreeBSD release of the jail, defaults to the host.")
@click.option("--list", "-l", "list_releases", is_flag=True, default=False,
              help="List the available FreeBSD releases.")
@click.argument("name", nargs=1, required=False)
@click.argument("ip", nargs=1, required=False)
@click.argument("interface", nargs=1, required=False)
def cli(
    ctx: click.core.Context,
    force: bool,
    release_name: typing.Optional[str],
    list_releases: bool,
    name: typing.Optional[str],
    ip: typing.Optional[str],
    interface: typing.Optional[str]
) -> None:
    """Create a jail with an optional IP address and interface."""
    logger = ctx.parent.logger

    if list_releases is True:
        print_releases(ctx.parent)
        return

    if name is None:
        logger.error("No jail name provided")
        exit(1)

    jails = get_jails(ctx.parent)
    ctx.parent.print_events(jails.create(
        name,
        ip=ip,
        interface=interface,
        release_name=release_name,
        force=force
    ))
    logger.log(f"{name} successfully created")
