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
"""List jails with the CLI."""
import typing

import click

import libjmgr.Jail

from .shared.jail import get_jails
from .shared.output import print_table

DEFAULT_COLUMNS = ["jid", "name", "ip4", "path", "os_version", "boot"]
LONG_COLUMNS = [
    "jid", "name", "ip4", "path", "config", "os_version", "boot"
]


def _lookup_jail_values(
    jail: libjmgr.Jail.JailGenerator,
    columns: typing.List[str]
) -> typing.List[str]:
    values = dict(
        jid=str(jail.jid),
        name=jail.name,
        ip4=jail.ip4,
        path=jail.path,
        config=jail.config_path,
        os_version=jail.os_version,
        boot=jail.start_on_boot,
        parent=jail.parent_name
    )
    return [values[column] for column in columns]


def list_jails(
    ctx: click.core.Context,
    running_only: bool,
    long_mode: bool,
    header: bool,
    sort_key: typing.Optional[str]
) -> None:
    """Print a table of the jails known to the host."""
    columns = LONG_COLUMNS if (long_mode is True) else DEFAULT_COLUMNS
    table_data = []
    for jail in get_jails(ctx):
        if (running_only is True) and (jail.running is False):
            continue
        table_data.append(_lookup_jail_values(jail, columns))
    print_table(table_data, columns, header, sort_key)


@click.command(name="jails", help="List all jails.")
@click.pass_context
@click.option("--long", "-l", "_long", is_flag=True, default=False,
              help="Show the declaration file of the jails.")
@click.option("--sort", "-s", "_sort", default=None, nargs=1,
              help="Sorts the list by the given column")
@click.option("--header/--no-header", "-H/-NH", is_flag=True, default=True,
              help="Show or hide column name heading.")
def cli(
    ctx: click.core.Context,
    _long: bool,
    _sort: typing.Optional[str],
    header: bool
) -> None:
    """List jails in a table."""
    list_jails(ctx.parent, False, _long, header, _sort)
