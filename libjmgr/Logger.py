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
"""
jmgr logging module.

Log entries are printed to the terminal when their level is at least as
severe as the print level of the Logger. Entries of the `screen` level are
always printed and can be redrawn in place, which the CLI uses to update the
state of running jail operations.
"""
import os
import sys
import typing

import libjmgr.errors

LOG_LEVEL_ENV = "JMGR_LOG_LEVEL"

ANSI_COLORS = dict(
    red=31,
    green=32,
    yellow=33,
    blue=34,
    magenta=35
)


class LogLevel(typing.NamedTuple):
    """Presentation of a log level."""

    name: str
    color: typing.Optional[str]=None
    bold: bool=False
    stderr: bool=False


class LogEntry:
    """A message that was logged, possibly printed already."""

    message: str
    level: str
    indent: int
    logger: typing.Optional['Logger']

    def __init__(
        self,
        message: str,
        level: str,
        indent: int=0,
        logger: typing.Optional['Logger']=None
    ) -> None:
        self.message = message
        self.level = level
        self.indent = indent
        self.logger = logger

    def edit(
        self,
        message: typing.Optional[str]=None,
        indent: typing.Optional[int]=None
    ) -> None:
        """Replace the message and redraw the printed entry."""
        if self.logger is None:
            raise libjmgr.errors.CannotRedrawLine(
                reason="No logger available"
            )
        if message is not None:
            self.message = message
        if indent is not None:
            self.indent = indent
        self.logger.redraw(self)

    @property
    def line_count(self) -> int:
        """Return the number of terminal lines the entry occupies."""
        return max(1, len(self.message.splitlines()))


class Logger:
    """Print log entries of jmgr to the terminal."""

    # most severe first
    LEVELS: typing.Tuple[LogLevel, ...] = (
        LogLevel("critical", color="red", bold=True, stderr=True),
        LogLevel("error", color="red", stderr=True),
        LogLevel("warn", color="yellow"),
        LogLevel("info"),
        LogLevel("notice", color="magenta"),
        LogLevel("verbose", color="blue"),
        LogLevel("debug", color="green"),
        LogLevel("spam", color="green"),
        LogLevel("screen")
    )

    LOG_LEVELS = tuple(level.name for level in LEVELS)

    DEFAULT_PRINT_LEVEL = "info"
    INDENT = "  "

    _print_level: typing.Optional[str]
    history: typing.List[LogEntry]

    def __init__(
        self,
        print_level: typing.Optional[str]=None
    ) -> None:
        self._print_level = None
        self.history = []
        if print_level is None:
            print_level = os.environ.get(LOG_LEVEL_ENV, None)
        if print_level is not None:
            self.print_level = print_level

    @property
    def print_level(self) -> str:
        """Return the least severe level that is printed."""
        if self._print_level is None:
            return self.DEFAULT_PRINT_LEVEL
        return self._print_level

    @print_level.setter
    def print_level(self, value: str) -> None:
        """Print entries of the given level and more severe ones."""
        if value not in self.LOG_LEVELS:
            raise libjmgr.errors.InvalidLogLevel(log_level=value, logger=self)
        self._print_level = value

    def log(
        self,
        message: str,
        level: str="info",
        indent: int=0
    ) -> LogEntry:
        """Log a message and print it when the print level permits."""
        log_entry = LogEntry(
            message=message,
            level=level,
            indent=indent,
            logger=self
        )
        if self._is_printed(level) is True:
            self._print(log_entry)
            self.history.append(log_entry)
        return log_entry

    def critical(self, message: str, indent: int=0) -> LogEntry:
        """Log a critical message."""
        return self.log(message, level="critical", indent=indent)

    def error(self, message: str, indent: int=0) -> LogEntry:
        """Log an error."""
        return self.log(message, level="error", indent=indent)

    def warn(self, message: str, indent: int=0) -> LogEntry:
        """Log a warning."""
        return self.log(message, level="warn", indent=indent)

    def info(self, message: str, indent: int=0) -> LogEntry:
        """Log an informational message."""
        return self.log(message, level="info", indent=indent)

    def notice(self, message: str, indent: int=0) -> LogEntry:
        """Log a notice."""
        return self.log(message, level="notice", indent=indent)

    def verbose(self, message: str, indent: int=0) -> LogEntry:
        """Log a message shown in verbose mode."""
        return self.log(message, level="verbose", indent=indent)

    def debug(self, message: str, indent: int=0) -> LogEntry:
        """Log a debug message."""
        return self.log(message, level="debug", indent=indent)

    def spam(self, message: str, indent: int=0) -> LogEntry:
        """Log executed commands and their output."""
        return self.log(message, level="spam", indent=indent)

    def screen(self, message: str, indent: int=0) -> LogEntry:
        """Print a message regardless of the print level."""
        return self.log(message, level="screen", indent=indent)

    def redraw(self, log_entry: LogEntry) -> None:
        """Overwrite a printed screen entry with its current message."""
        if log_entry not in self.history:
            raise libjmgr.errors.CannotRedrawLine(
                reason="Log entry not found in history"
            )
        if log_entry.level != "screen":
            raise libjmgr.errors.CannotRedrawLine(
                reason=(
                    "Only screen entries can be redrawn, "
                    f"not {log_entry.level}"
                )
            )

        position = self.history.index(log_entry)
        lines_up = sum(
            entry.line_count for entry in self.history[position:]
        )
        sys.stdout.write("".join([
            f"\r\033[{lines_up}F",  # cursor to the start of the entry
            self._indent(log_entry.message, log_entry.indent),
            "\033[K",  # erase the rest of the line
            "\n" * lines_up,
            "\r"
        ]))

    def _level(self, name: str) -> LogLevel:
        for level in self.LEVELS:
            if level.name == name:
                return level
        raise libjmgr.errors.InvalidLogLevel(log_level=name)

    def _is_printed(self, level: str) -> bool:
        if level == "screen":
            return True
        severity = self.LOG_LEVELS.index(level)
        return severity <= self.LOG_LEVELS.index(self.print_level)

    def _print(self, log_entry: LogEntry) -> None:
        level = self._level(log_entry.level)
        stream = sys.stderr if (level.stderr is True) else sys.stdout
        message = self._indent(log_entry.message, log_entry.indent)
        print(self._colorize(message, level, stream), file=stream)

    def _indent(self, message: str, indent: int) -> str:
        prefix = self.INDENT * indent
        return "\n".join(f"{prefix}{line}" for line in message.splitlines())

    def _colorize(
        self,
        message: str,
        level: LogLevel,
        stream: typing.TextIO
    ) -> str:
        if (level.color is None) or (stream.isatty() is False):
            return message
        weight = 1 if (level.bold is True) else 0
        return f"\033[{weight};{ANSI_COLORS[level.color]}m{message}\033[0m"
