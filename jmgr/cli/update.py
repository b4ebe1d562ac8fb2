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
"""Update jails with the CLI."""
import typing

import click

from .shared.jail import get_jail
from .shared.releases import print_releases

__rootcmd__ = True

UPDATE_MODES = ["patch", "rel", "pkgs"]


@click.command(name="update", help="Update FreeBSD or packages of a jail.")
@click.pass_context
@click.option("--force", "-f", is_flag=True, default=False,
              help="Assume yes on all questions.")
@click.option("--release", "-v", "release_name", default=None,
              help="Target release of a release upgrade.")
@click.option("--list", "-l", "list_releases", is_flag=True, default=False,
              help="List the available FreeBSD releases.")
@click.option("--snapshot/--no-snapshot", default=None,
              help="Snapshot the jail before updating.")
@click.argument("mode", nargs=1, required=False,
                type=click.Choice(UPDATE_MODES))
@click.argument("jail", nargs=1, required=False)
def cli(
    ctx: click.core.Context,
    force: bool,
    release_name: typing.Optional[str],
    list_releases: bool,
    snapshot: typing.Optional[bool],
    mode: typing.Optional[str],
    jail: typing.Optional[str]
) -> None:
    """Install patches, upgrade the release or upgrade packages of a jail."""
    logger = ctx.parent.logger

    if list_releases is True:
        print_releases(ctx.parent)
        return

    if (mode is None) or (jail is None):
        logger.error("Update mode and jail name are required")
        exit(1)

    jmgr_jail = get_jail(jail, ctx.parent)

    if mode == "patch":
        events = jmgr_jail.update_patch(force=force, snapshot=snapshot)
    elif mode == "rel":
        if release_name is None:
            release_name = ctx.parent.host.release_version
        events = jmgr_jail.upgrade_release(
            release_name,
            force=force,
            snapshot=snapshot
        )
    else:
        events = jmgr_jail.update_packages(force=force, snapshot=snapshot)

    ctx.parent.print_events(events)
