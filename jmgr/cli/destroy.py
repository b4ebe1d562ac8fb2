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
"""Destroy jails or snapshots with the CLI."""
import typing

import click

import libjmgr.errors

from .shared.jail import get_jails

__rootcmd__ = True


@click.command(name="destroy", help="Destroy jails or snapshots.")
@click.pass_context
@click.option("--force", "-f", is_flag=True, default=False,
              help="Destroy without prompting for confirmation.")
@click.option("--recursive", "-r", is_flag=True, default=False,
              help="Destroy the jails including their snapshots.")
@click.argument("targets", nargs=-1)
def cli(
    ctx: click.core.Context,
    force: bool,
    recursive: bool,
    targets: typing.Tuple[str, ...]
) -> None:
    """Destroy jails by name or snapshots named <dataset>@<snapshot>."""
    logger = ctx.parent.logger

    if len(targets) == 0:
        logger.error("No jail or snapshot specified")
        exit(1)

    jails = get_jails(ctx.parent)

    for target in targets:
        ctx.parent.print_events(jails.destroy(
            target,
            force=force,
            recursive=recursive
        ))
        logger.log(f"{target} destroyed")
