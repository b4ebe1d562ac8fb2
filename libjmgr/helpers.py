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
"""Collection of jmgr helper functions."""
import typing
import json
import os
import re
import subprocess  # nosec: B404
import sys
import tempfile

import libjmgr.errors
import libjmgr.Logger

CommandOutput = typing.Tuple[typing.Optional[str], typing.Optional[str], int]


def _decode(output: typing.Optional[bytes]) -> typing.Optional[str]:
    if output is None:
        return None
    return output.decode("UTF-8").strip()


def _indent_output(output: str) -> str:
    return "\n".join(f"    {line}" for line in output.splitlines())


def exec(
    command: typing.List[str],
    logger: typing.Optional['libjmgr.Logger.Logger']=None,
    ignore_error: bool=False,
    **subprocess_args: typing.Any
) -> CommandOutput:
    """
    Execute a command and capture its output.

    Returns the stripped stdout and stderr together with the exit code.
    A non-zero exit raises CommandFailure unless ignore_error is set.
    """
    command_str = " ".join(command)
    if logger is not None:
        logger.spam(f"Executing: {command_str}")

    subprocess_args.setdefault("stdout", subprocess.PIPE)
    subprocess_args.setdefault("stderr", subprocess.PIPE)

    child = subprocess.Popen(command, **subprocess_args)  # nosec: B603
    raw_stdout, raw_stderr = child.communicate()
    stdout = _decode(raw_stdout)
    stderr = _decode(raw_stderr)
    returncode = child.returncode

    if (logger is not None) and stdout:
        logger.spam(_indent_output(stdout))

    if returncode == 0:
        return stdout, stderr, returncode

    if logger is not None:
        log_level = "spam" if ignore_error else "verbose"
        logger.log(f"{command_str} exited with {returncode}", level=log_level)
        if stderr:
            logger.log(_indent_output(stderr), level=log_level)

    if ignore_error is False:
        raise libjmgr.errors.CommandFailure(
            command=command,
            returncode=returncode,
            stderr=stderr,
            logger=logger
        )
    return stdout, stderr, returncode


def exec_passthru(
    command: typing.List[str],
    logger: typing.Optional['libjmgr.Logger.Logger']=None,
    ignore_error: bool=False,
    **subprocess_args: typing.Any
) -> CommandOutput:
    """Execute a command attached to the terminal of the caller."""
    if logger is not None:
        logger.spam("Executing (interactive): " + " ".join(command))

    child = subprocess.Popen(  # nosec: B603
        command,
        stdin=sys.stdin,
        stdout=sys.stdout,
        stderr=sys.stderr,
        close_fds=True,
        **subprocess_args
    )
    returncode = child.wait()

    if (returncode > 0) and (ignore_error is False):
        raise libjmgr.errors.CommandFailure(
            command=command,
            returncode=returncode,
            logger=logger
        )

    return None, None, returncode


def exec_piped(
    sender: typing.List[str],
    receiver: typing.List[str],
    logger: typing.Optional['libjmgr.Logger.Logger']=None
) -> None:
    """
    Pipe the output of a sender command into a receiver command.

    Both processes run concurrently. The output of the receiver is read
    until it closes its stdout before waiting for the sender and then the
    receiver. A failing receiver is raised in favour of the sender it cut
    off. Any output of the receiver is raised as ReceiverReport, even
    when both commands succeeded.

    Errors of each side are captured in temporary files so that a chatty
    stderr cannot block either process.
    """
    sender_str = " ".join(sender)
    receiver_str = " ".join(receiver)

    if logger is not None:
        logger.spam(f"Executing: {sender_str} | {receiver_str}")

    with tempfile.TemporaryFile() as sender_stderr, \
            tempfile.TemporaryFile() as receiver_stderr:

        sender_child = subprocess.Popen(  # nosec: B603
            sender,
            stdout=subprocess.PIPE,
            stderr=sender_stderr
        )
        try:
            receiver_child = subprocess.Popen(  # nosec: B603
                receiver,
                stdin=sender_child.stdout,
                stdout=subprocess.PIPE,
                stderr=receiver_stderr
            )
        except OSError:
            sender_child.kill()
            sender_child.wait()
            raise

        # the receiver owns the read end now
        sender_child.stdout.close()

        report = receiver_child.stdout.read()
        receiver_child.stdout.close()

        sender_returncode = sender_child.wait()
        receiver_returncode = receiver_child.wait()

        sender_stderr.seek(0)
        sender_error = sender_stderr.read().decode("UTF-8").strip()
        receiver_stderr.seek(0)
        receiver_error = receiver_stderr.read().decode("UTF-8").strip()

    # a failing receiver closes the pipe early and takes the sender with it
    if receiver_returncode != 0:
        if sender_returncode != 0:
            receiver_error = "\n".join(filter(None, [
                receiver_error,
                f"{sender_str} exited with {sender_returncode}",
                sender_error
            ]))
        raise libjmgr.errors.CommandFailure(
            command=receiver,
            returncode=receiver_returncode,
            stderr=receiver_error,
            logger=logger
        )

    if sender_returncode != 0:
        raise libjmgr.errors.CommandFailure(
            command=sender,
            returncode=sender_returncode,
            stderr=sender_error,
            logger=logger
        )

    report_text = report.decode("UTF-8").strip()
    if report_text != "":
        raise libjmgr.errors.ReceiverReport(
            command=receiver,
            report=report_text,
            logger=logger
        )


def is_root() -> bool:
    """Return True when the current process runs with root privileges."""
    return os.geteuid() == 0


_name_pattern = re.compile(r"[a-z0-9][a-z0-9\.\-_]{0,62}", re.I)


def validate_name(name: str) -> bool:
    """Return True if the name is usable for jails and their datasets."""
    return _name_pattern.fullmatch(name) is not None


NONE_STRINGS = ("none", "-", "")


def is_none(data: typing.Any) -> bool:
    """Return True if the input is None or one of its string spellings."""
    if data is None:
        return True
    return isinstance(data, str) and (data.strip().lower() in NONE_STRINGS)


def parse_int(data: typing.Optional[typing.Union[str, int]]) -> int:
    """
    Parse an integer or raise a TypeError.

    Usage:
        >>> parse_int(" 2 ")
        2
        >>> parse_int("two")
        TypeError: Value is not an integer: two
    """
    try:
        return int(str(data).strip())
    except ValueError:
        raise TypeError(f"Value is not an integer: {data}")


def split_words(data: typing.Optional[str]) -> typing.List[str]:
    """Split a whitespace delimited token list."""
    if data is None:
        return []
    return data.split()


def to_string(
    data: typing.Union[str, bool, int, None, typing.List[typing.Any]],
    none: str="-"
) -> str:
    """
    Render a configuration or state value for humans.

    Booleans become yes/no and lists are joined by commas.
    """
    if isinstance(data, bool):
        return "yes" if data else "no"
    if isinstance(data, list):
        data = ",".join(to_string(x, none="") for x in data if x is not None)
    if (data is None) or (str(data) == ""):
        return none
    return str(data)


def to_json(data: typing.Dict[str, typing.Any]) -> str:
    """Create an indented JSON document of strings from the input data."""
    def _stringify(value: typing.Any) -> typing.Any:
        if isinstance(value, dict):
            return {key: _stringify(x) for key, x in value.items()}
        return to_string(value, none="none")
    return str(json.dumps(_stringify(data), sort_keys=True, indent=4))


def makedirs_safe(
    target: str,
    mode: int=0o755,
    logger: typing.Optional['libjmgr.Logger.Logger']=None
) -> None:
    """Create a directory unless a component of its path is a symlink."""
    current = target
    while current not in ("", "/"):
        if os.path.islink(current):
            raise libjmgr.errors.SecurityViolation(
                reason=f"{current} is a symbolic link",
                logger=logger
            )
        current = os.path.dirname(current)
    if logger is not None:
        logger.verbose(f"Safely creating {target} directory")
    os.makedirs(target, mode=mode, exist_ok=True)
