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
"""Declarative jail(8) configuration files."""
import typing
import os
import re

import libjmgr.errors

PER_JAIL_DIRECTORY_MARKER = "jail.conf.d"
DECLARATION_SUFFIX = ".conf"

RECORD_START_PATTERN = re.compile(
    r"^\s*(?P<name>[^\s#{][^{]*?)\s*\{\s*((#|//).*)?$"
)
RECORD_END_PATTERN = re.compile(r"^\s*\}")

# field name and pattern in the order they are tested on each line
FIELD_PATTERNS: typing.List[typing.Tuple[str, typing.Pattern[str]]] = [
    (
        "ip4_addr",
        re.compile(r"ip4\.addr\s*\+?=\s*\"?(\d+\.\d+\.\d+\.\d+)")
    ),
    (
        "ip4",
        re.compile(r"(?<![\w.])ip4\s*=\s*\"?(\w+)\"?\s*;")
    ),
    (
        "path",
        re.compile(r"(?<![\w.])path\s*=\s*\"?([^\";]*)\"?\s*;")
    ),
    (
        "hostname",
        re.compile(r"hostname\s*=\s*\"?([^\";]*)\"?\s*;")
    )
]

TEMPLATE_PLACEHOLDERS = (
    "<JailName>",
    "<JailPath>",
    "<IPConf>"
)


class JailConfRecord(dict):
    """Fields captured from one jail declaration in a jail.conf file."""

    name: str
    config_path: str

    def __init__(self, name: str, config_path: str) -> None:
        self.name = name
        self.config_path = config_path
        dict.__init__(self, {})

    def capture(self, line: str) -> None:
        """Store the fields a line declares unless captured before."""
        for field, pattern in FIELD_PATTERNS:
            if field in self.keys():
                continue
            match = pattern.search(line)
            if match is not None:
                dict.__setitem__(self, field, match.group(1).strip())


class JailConfFile:
    """A jail.conf(5) file holding one or many jail declarations."""

    path: str
    logger: typing.Optional['libjmgr.Logger.Logger']

    def __init__(
        self,
        path: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        self.path = path
        self.logger = logger

    @property
    def is_per_jail_file(self) -> bool:
        """Return True if the file resides in the per-jail directory."""
        return PER_JAIL_DIRECTORY_MARKER in self.path

    def parse_lines(self, lines: typing.Iterable[str]) -> typing.List[
        JailConfRecord
    ]:
        """Parse the jail declarations of a jail.conf file."""
        records: typing.List[JailConfRecord] = []
        record: typing.Optional[JailConfRecord] = None

        for line in lines:
            if record is None:
                match = RECORD_START_PATTERN.match(line)
                if match is None:
                    continue
                record = JailConfRecord(match.group("name"), self.path)
                continue

            if RECORD_END_PATTERN.match(line) is not None:
                # the wildcard record holds defaults of all jails
                if record.name != "*":
                    records.append(record)
                record = None
                continue

            record.capture(line)

        return records

    def read(self) -> typing.List[JailConfRecord]:
        """Return the declarations or nothing when the file is unreadable."""
        try:
            with open(self.path, "r", encoding="UTF-8") as f:
                records = self.parse_lines(f.read().splitlines())
        except (OSError, UnicodeDecodeError) as e:
            if self.logger is not None:
                self.logger.verbose(f"Skipping {self.path}: {e}")
            return []

        if self.logger is not None:
            self.logger.spam(
                f"{len(records)} jail declarations found in {self.path}"
            )
        return records


def list_declaration_files(directory: str) -> typing.List[str]:
    """Return the declaration files in the per-jail directory."""
    try:
        filenames = sorted(os.listdir(directory))
    except OSError:
        return []
    return [
        os.path.join(directory, filename)
        for filename in filenames
        if DECLARATION_SUFFIX in filename
    ]


class JailConfTemplate:
    """Template a jail declaration file is rendered from."""

    path: str
    logger: typing.Optional['libjmgr.Logger.Logger']

    def __init__(
        self,
        path: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        self.path = path
        self.logger = logger

    def read(self) -> str:
        """Return the template text."""
        try:
            with open(self.path, "r", encoding="UTF-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise libjmgr.errors.JailConfigTemplateUnavailable(
                path=self.path,
                reason=str(e),
                logger=self.logger
            )

    def render(self, name: str, path: str, ip_conf: str) -> str:
        """Substitute the jail name, path and IP configuration."""
        output = self.read()
        for placeholder, value in zip(
            TEMPLATE_PLACEHOLDERS,
            (name, path, ip_conf)
        ):
            output = output.replace(placeholder, value)
        return output

    def write(
        self,
        destination: str,
        name: str,
        path: str,
        ip_conf: str
    ) -> None:
        """Render the template into a new declaration file."""
        content = self.render(name=name, path=path, ip_conf=ip_conf)
        try:
            with open(destination, "x", encoding="UTF-8") as f:
                f.write(content)
        except FileExistsError:
            raise libjmgr.errors.JailConfigExists(
                path=destination,
                logger=self.logger
            )
        if self.logger is not None:
            self.logger.verbose(f"Jail declaration written to {destination}")
