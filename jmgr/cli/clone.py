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
"""Clone a jail with the CLI."""
import typing

import click

from .shared.jail import get_jails

__rootcmd__ = True


@click.command(name="clone", help="Create a jail from an existing jail.")
@click.pass_context
@click.option("--force", "-f", is_flag=True, default=False,
              help="Assume yes on all questions.")
@click.argument("source", nargs=1, required=True)
@click.argument("name", nargs=1, required=True)
@click.argument("ip", nargs=1, required=False)
@click.argument("interface", nargs=1, required=False)
def cli(
    ctx: click.core.Context,
    force: bool,
    source: str,
    name: str,
    ip: typing.Optional[str],
    interface: typing.Optional[str]
) -> None:
    """Clone the storage of a jail into a new jail."""
    jails = get_jails(ctx.parent)
    ctx.parent.print_events(jails.clone(
        source,
        name,
        ip=ip,
        interface=interface,
        force=force
    ))
    ctx.parent.logger.log(f"{name} successfully cloned from {source}")
