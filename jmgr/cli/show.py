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
"""Show the details of a jail with the CLI."""
import typing

import click

import libjmgr.Jail
import libjmgr.helpers

from .shared.jail import get_jail
from .shared.output import print_rows


def _detail_rows(
    jail: libjmgr.Jail.JailGenerator
) -> typing.List[typing.Tuple[str, str]]:

    state = "Running" if jail.running else "Not running"
    rows = [
        ("Jid", f"{jail.jid} ({state})"),
        ("Name", jail.name),
        ("Hostname", jail.hostname)
    ]

    if len(jail.ip4_addrs) > 0:
        rows += [("IPv4", address) for address in jail.ip4_addrs]
    else:
        rows.append(("IP Address", jail.ip4))

    if jail.interface != "":
        rows.append(("Interface", jail.interface))

    rows += [("IPv6", address) for address in jail.ip6_addrs]

    if jail.is_child is True:
        rows.append(("Parent jail", jail.parent_name))
    if jail.is_parent is True:
        rows.append(("Jail Parent", "True"))

    rows += [
        ("Config", jail.config_path),
        ("OS Version", jail.os_version),
        ("Path", jail.path),
        ("Boot", jail.start_on_boot)
    ]

    if jail.has_dataset is True:
        rows.append(("Dataset", jail.dataset_name))
        rows += [("Snapshot", snapshot) for snapshot in jail.snapshots]

    return rows


def show_jail(ctx: click.core.Context, name: str, output_json: bool) -> None:
    """Print the details of a jail."""
    jail = get_jail(name, ctx)
    if output_json is True:
        print(libjmgr.helpers.to_json(jail.to_dict()))
    else:
        print_rows(_detail_rows(jail))


@click.command(name="show", help="Show the details of a jail.")
@click.pass_context
@click.option("--json", "-j", "output_json", is_flag=True, default=False,
              help="Print the jail details as JSON.")
@click.argument("jail", nargs=1, required=True)
def cli(ctx: click.core.Context, output_json: bool, jail: str) -> None:
    """Show the details of a jail."""
    show_jail(ctx.parent, jail, output_json)


def get_jail_command(name: str) -> click.core.Command:
    """Return a command that shows the jail named like the subcommand."""
    @click.command(name=name, help=f"Show the details of jail {name}.")
    @click.pass_context
    @click.option("--json", "-j", "output_json", is_flag=True,
                  default=False, help="Print the jail details as JSON.")
    def _cli(ctx: click.core.Context, output_json: bool) -> None:
        show_jail(ctx.parent, name, output_json)
    return _cli
