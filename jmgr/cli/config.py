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
"""Show the jmgr configuration with the CLI."""
import click

import libjmgr.helpers

from .shared.output import print_rows


@click.command(name="config", help="Show the jmgr configuration.")
@click.pass_context
@click.option("--json", "-j", "output_json", is_flag=True, default=False,
              help="Print the configuration as JSON.")
def cli(ctx: click.core.Context, output_json: bool) -> None:
    """Print the effective configuration and its problems."""
    config = ctx.parent.host.config
    data = config.to_dict()

    if output_json is True:
        data["Problems"] = list(config.problems)
        print(libjmgr.helpers.to_json(data))
        return

    print_rows([
        (key, libjmgr.helpers.to_string(value))
        for key, value in sorted(data.items())
    ])
    for problem in config.problems:
        ctx.parent.logger.warn(problem)
