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
"""Tabular output of the jmgr commands."""
import typing

import texttable


def _new_table(column_count: int) -> texttable.Texttable:
    table = texttable.Texttable(max_width=0)
    table.set_cols_dtype(["t"] * column_count)
    return table


def print_table(
    data: typing.List[typing.List[str]],
    columns: typing.List[str],
    show_header: bool=True,
    sort_key: typing.Optional[str]=None
) -> None:
    """Print a table of rows to stdout."""
    rows = list(data)
    if sort_key in columns:
        sort_index = columns.index(str(sort_key))
        rows.sort(key=lambda row: row[sort_index])

    if show_header is True:
        rows.insert(0, [column.upper() for column in columns])

    if len(rows) == 0:
        return

    table = _new_table(len(columns))
    table.add_rows(rows, header=show_header)
    print(table.draw())


def print_rows(rows: typing.List[typing.Tuple[str, str]]) -> None:
    """Print label and value pairs without borders."""
    if len(rows) == 0:
        return
    table = _new_table(2)
    table.set_deco(0)
    table.add_rows([list(row) for row in rows], header=False)
    print(table.draw())
