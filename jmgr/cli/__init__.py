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
"""The main CLI for jmgr."""
import typing
import importlib
import locale
import os
import signal
import sys

import click

import libjmgr
import libjmgr.errors
import libjmgr.helpers
from libjmgr.Logger import Logger
from libjmgr.events import JmgrEvent
from libjmgr.errors import InvalidLogLevel
from libjmgr.ZFS import get_zfs
from libjmgr.Host import HostGenerator
from libjmgr.Prompts import Prompts

logger = Logger()

user_locale = os.environ.get("LANG", "en_US.UTF-8")
try:
    locale.setlocale(locale.LC_ALL, user_locale)
except locale.Error:
    logger.debug(f"Locale {user_locale} is not available")

JMGR_CMD_FOLDER = os.path.abspath(os.path.dirname(__file__))

# Sometimes SIGINT won't be installed.
signal.signal(signal.SIGINT, signal.default_int_handler)
# If a utility decides to cut off the pipe, we don't care (IE: head)
signal.signal(signal.SIGPIPE, signal.SIG_DFL)


def _format_event(event: JmgrEvent) -> str:
    indicator = "+" if (event.done or event.skipped) else "-"
    name = event.type
    if event.identifier is not None:
        name = f"{name}@{event.identifier}"

    status = event.message
    if status is None:
        status = event.get_state_string(
            done="OK",
            error="FAILED",
            skipped="SKIPPED",
            pending="..."
        )

    output = f"[{indicator}] {name}: {status}"
    if event.duration is not None:
        output += f" [{round(event.duration, 3)}s]"
    return output


def print_events(
    generator: typing.Iterable[JmgrEvent]
) -> None:
    """
    Print the events of a jail operation.

    The line of an event is redrawn when it changes state. Nested events
    are indented below the event that was pending when they began.
    """
    lines: typing.Dict[typing.Tuple[str, str], 'libjmgr.Logger.LogEntry'] = {}
    for event in generator:
        key = (event.type, str(event.identifier))
        output = _format_event(event)
        if key in lines:
            lines[key].edit(output, indent=event.parent_count)
        else:
            lines[key] = logger.screen(output, indent=event.parent_count)


class JmgrCLI(click.Group):
    """
    Load the commands from the modules of the cli directory.

    A name that is no command shows the details of the jail of that name.
    """

    def list_commands(self, ctx: click.core.Context) -> typing.List[str]:
        return sorted(
            filename[:-3] for filename in os.listdir(JMGR_CMD_FOLDER)
            if filename.endswith(".py") and (filename != "__init__.py")
        )

    def get_command(
        self,
        ctx: click.core.Context,
        name: str
    ) -> typing.Optional[click.core.Command]:
        ctx.print_events = print_events

        if name not in self.list_commands(ctx):
            import jmgr.cli.show
            return jmgr.cli.show.get_jail_command(name)

        mod = importlib.import_module(f"jmgr.cli.{name}")
        requires_root = getattr(mod, "__rootcmd__", False)
        if requires_root and ("--help" not in sys.argv[1:]):
            if libjmgr.helpers.is_root() is False:
                logger.error(f"You need to have root privileges to run {name}")
                exit(1)
        return mod.cli

    def invoke(self, ctx: click.core.Context) -> typing.Any:
        try:
            return super().invoke(ctx)
        except libjmgr.errors.OperationAborted:
            exit(0)
        except libjmgr.errors.JmgrException:
            exit(1)


@click.option(
    "--log-level",
    "-d",
    default=None,
    help=(
        f"Set the CLI log level {Logger.LOG_LEVELS}"
    )
)
@click.group(cls=JmgrCLI)
@click.version_option(version=libjmgr.VERSION, prog_name="jmgr")
@click.pass_context
def cli(ctx, log_level: str) -> None:
    """A jail manager for jails declared in /etc/jail.conf.d."""
    if log_level is not None:
        try:
            logger.print_level = log_level
        except InvalidLogLevel:
            exit(1)
    ctx.logger = logger

    ctx.zfs = get_zfs(logger=ctx.logger)
    ctx.host = HostGenerator(
        logger=ctx.logger,
        zfs=ctx.zfs
    )
    ctx.prompts = Prompts(logger=ctx.logger)
