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
"""Start, stop and restart jails from the CLI."""
import typing

import click

import libjmgr.errors

from .jail import get_jails


def run_transition(
    ctx: click.core.Context,
    action: str,
    names: typing.Tuple[str, ...],
    all_jails: bool
) -> None:
    """Apply a runtime transition to the selected jails."""
    logger = ctx.logger

    if (all_jails is False) and (len(names) == 0):
        logger.error("No jail selector provided")
        exit(1)

    if (all_jails is True) and (len(names) > 0):
        logger.error("Cannot use --all and jail names simultaneously")
        exit(1)

    jails = get_jails(ctx)

    if all_jails is True:
        selected = [jail for jail in jails if jail.is_child is False]
    else:
        selected = []
        for name in names:
            if jails.exists(name) is False:
                logger.warn(f"{name} does not exist")
                continue
            jail = jails[name]
            if jail.is_child is True:
                logger.warn(
                    f"{jail.name} is a child of {jail.parent_name}, skipped"
                )
                continue
            selected.append(jail)

    for jail in selected:
        ctx.print_events(getattr(jail, action)())
        if jail.running is True:
            logger.log(f"{jail.name} running as JID {jail.jid}")
