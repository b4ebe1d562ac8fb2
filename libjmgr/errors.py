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
"""Collection of jmgr errors."""
import typing

# MyPy
import libjmgr.Logger  # noqa: F401


class JmgrException(Exception):
    """A well-known exception raised by libjmgr."""

    def __init__(
        self,
        message: str,
        level: str="error",
        silent: bool=False,
        append_warning: bool=False,
        warning: typing.Optional[str]=None,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        if (logger is not None) and (silent is False):
            logger.__getattribute__(level)(message)
            if (append_warning is True) and (warning is not None):
                logger.warn(warning)
        super().__init__(message)


# Taxonomy


class ValidationError(JmgrException):
    """Raised before any external mutation when a request is invalid."""

    pass


class ExecutionError(JmgrException):
    """Raised when an external process failed."""

    pass


class PartialStateError(JmgrException):
    """Raised when an operation may have left partially created state."""

    pass


class OperationAborted(JmgrException):
    """Raised when the operator declined a confirmation."""

    def __init__(
        self,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = "Operation aborted"
        super().__init__(message=msg, level="verbose", logger=logger)


class MustBeRoot(JmgrException, PermissionError):
    """Raised when jmgr is executed without root permission."""

    def __init__(
        self,
        message: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        _msg = (
            f"Must be root to {message}"
        )
        super().__init__(message=_msg, logger=logger)


# Commands


class CommandFailure(ExecutionError):
    """Raised when jmgr fails to execute a command."""

    command: typing.List[str]
    returncode: int
    stderr: str

    def __init__(
        self,
        command: typing.List[str],
        returncode: int,
        stderr: typing.Optional[str]=None,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr if (stderr is not None) else ""
        command_str = " ".join(command)
        msg = f"Command exited with {returncode}: {command_str}"
        if self.stderr != "":
            msg += f": {self.stderr}"
        super().__init__(message=msg, logger=logger)


class ReceiverReport(PartialStateError):
    """Raised when the receiving end of a pipe reported output."""

    report: str

    def __init__(
        self,
        command: typing.List[str],
        report: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        self.report = report
        command_str = " ".join(command)
        msg = f"{command_str} reported: {report}"
        super().__init__(message=msg, logger=logger)


# Jails


class JailException(JmgrException):
    """Raised when an exception related to a jail occurs."""

    jail: 'libjmgr.Jail.JailGenerator'

    def __init__(
        self,
        jail: 'libjmgr.Jail.JailGenerator',
        message: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        self.jail = jail
        JmgrException.__init__(self, message=message, logger=logger)


class JailNotFound(ValidationError):
    """Raised when the jail was not found."""

    def __init__(
        self,
        text: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"Jail {text} does not exist"
        super().__init__(message=msg, logger=logger)


class JailAlreadyExists(ValidationError):
    """Raised when the jail already exists."""

    def __init__(
        self,
        name: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"Jail {name} already exists"
        super().__init__(message=msg, logger=logger)


class JailNotRunning(JailException, ValidationError):
    """Raised when the jail is not running."""

    def __init__(
        self,
        jail: 'libjmgr.Jail.JailGenerator',
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"Jail {jail.name} is not running"
        JailException.__init__(self, message=msg, jail=jail, logger=logger)


class JailIsChild(JailException, ValidationError):
    """Raised when a child jail is targeted directly."""

    def __init__(
        self,
        jail: 'libjmgr.Jail.JailGenerator',
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = (
            f"Jail {jail.name} is a child of {jail.parent_name}: "
            "it must be managed via its parent"
        )
        JailException.__init__(self, message=msg, jail=jail, logger=logger)


class JailConfigLegacy(JailException, ValidationError):
    """Raised when the jail is declared in the legacy jail.conf file."""

    def __init__(
        self,
        jail: 'libjmgr.Jail.JailGenerator',
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = (
            f"Jail configuration is in {jail.config_path}. "
            "Remove this jail manually"
        )
        JailException.__init__(self, message=msg, jail=jail, logger=logger)


class JailHasNoVolume(JailException, ValidationError):
    """Raised when a volume operation targets a directory backed jail."""

    def __init__(
        self,
        jail: 'libjmgr.Jail.JailGenerator',
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"Jail {jail.name} does not support ZFS snapshots"
        JailException.__init__(self, message=msg, jail=jail, logger=logger)


class JailHasSnapshots(JailException, ValidationError):
    """Raised when a jail with snapshots is destroyed non-recursively."""

    def __init__(
        self,
        jail: 'libjmgr.Jail.JailGenerator',
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = (
            f"Jail {jail.name} has snapshot(s). Please destroy all snapshots "
            "before continuing or destroy recursively"
        )
        JailException.__init__(self, message=msg, jail=jail, logger=logger)


class JailReleaseInstalled(JailException, ValidationError):
    """Raised when a jail is upgraded to the release it already runs."""

    def __init__(
        self,
        jail: 'libjmgr.Jail.JailGenerator',
        release_name: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"Jail {jail.name} is already at release {release_name}"
        JailException.__init__(self, message=msg, jail=jail, logger=logger)


class JailStateUpdateFailed(ExecutionError):
    """Raised when the status of running jails could not be queried."""

    def __init__(
        self,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = "Updating the jail state from jls failed"
        super().__init__(message=msg, logger=logger)


# New Jails


class InvalidJailName(ValidationError):
    """Raised when a jail has an invalid name."""

    def __init__(
        self,
        name: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = (
            f"Invalid jail name '{name}': "
            "Names may only contain alphanumeric characters, dot, dash "
            "and underscore"
        )
        super().__init__(message=msg, logger=logger)


class InvalidIPAddress(ValidationError, ValueError):
    """Raised when an invalid IP address was provided."""

    def __init__(
        self,
        address: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"Not a valid IP address: {address}"
        super().__init__(message=msg, logger=logger)


class IPAddressInUse(ValidationError):
    """Raised when a host already answers on the requested address."""

    def __init__(
        self,
        address: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"IP address already in use, {address} responds to ping"
        super().__init__(message=msg, logger=logger)


class InvalidInterfaceName(ValidationError):
    """Raised when the requested interface does not exist on the host."""

    def __init__(
        self,
        name: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"Cannot find interface {name} on this system"
        super().__init__(message=msg, logger=logger)


class JailConfigExists(ValidationError):
    """Raised when a declaration file or jail directory already exists."""

    def __init__(
        self,
        path: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"{path} already exists"
        super().__init__(message=msg, logger=logger)


class JailConfigDirectoryMissing(ValidationError):
    """Raised when the declaration file directory is unusable."""

    def __init__(
        self,
        path: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"{path} is not a directory. Please create it and try again"
        super().__init__(message=msg, logger=logger)


class JailConfigTemplateUnavailable(ValidationError):
    """Raised when the declaration template cannot be read."""

    def __init__(
        self,
        path: str,
        reason: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"Cannot read jail config template {path}: {reason}"
        super().__init__(message=msg, logger=logger)


class PostInstallInvalid(ValidationError):
    """Raised when the post-install hook is not an executable file."""

    def __init__(
        self,
        path: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"PostInstall script {path} is not a file and/or not executable"
        super().__init__(message=msg, logger=logger)


# Config


class BadConfig(ValidationError):
    """Raised when the jmgr configuration cannot create new jails."""

    def __init__(
        self,
        problems: typing.List[str],
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = "jmgr config is not ok: " + "; ".join(problems)
        super().__init__(message=msg, logger=logger)


class InvalidLogLevel(JmgrException):
    """Raised when the logger was initialized with an invalid log level."""

    def __init__(
        self,
        log_level: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        available_log_levels = libjmgr.Logger.Logger.LOG_LEVELS
        available_log_levels_string = ", ".join(available_log_levels[:-1])
        msg = (
            f"Invalid log-level '{log_level}'. Choose one of "
            f"{available_log_levels_string} or {available_log_levels[-1]}"
        )
        super().__init__(message=msg, logger=logger)


# Host


class HostReleaseUnknown(JmgrException):
    """Raised when the host release could not be determined."""

    def __init__(
        self,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = "The host release is unknown"
        super().__init__(message=msg, logger=logger)


class ReleaseListUnavailable(JmgrException):
    """Raised when the list of releases could not be fetched."""

    def __init__(
        self,
        url: str,
        reason: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"The list of releases at {url} is unavailable: {reason}"
        super().__init__(message=msg, logger=logger)


class DownloadFailed(ExecutionError):
    """Raised when downloading a release asset failed."""

    def __init__(
        self,
        url: str,
        reason: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"Failed downloading {url}: {reason}"
        super().__init__(message=msg, logger=logger)


# ZFS


class DatasetExists(ValidationError):
    """Raised when a dataset already exists."""

    def __init__(
        self,
        dataset_name: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"ZFS dataset {dataset_name} already exists"
        super().__init__(message=msg, logger=logger)


class SnapshotNotFound(ValidationError):
    """Raised when a snapshot does not exist."""

    def __init__(
        self,
        name: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"No snapshots found for {name}"
        super().__init__(message=msg, logger=logger)


class SnapshotNotLatest(ValidationError):
    """Raised when a rollback does not target the latest snapshot."""

    def __init__(
        self,
        snapshot_name: str,
        latest_snapshot_name: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = (
            f"Snapshot {snapshot_name} is not the latest snapshot "
            f"({latest_snapshot_name}). "
            "Destroy the more recent snapshots first"
        )
        super().__init__(message=msg, logger=logger)


class InvalidSnapshotIdentifier(ValidationError):
    """Raised when a destroy target is neither a jail nor a snapshot."""

    def __init__(
        self,
        identifier: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"{identifier} is not a jail or snapshot"
        super().__init__(message=msg, logger=logger)


class CloneSnapshotMissing(PartialStateError):
    """Raised when a received dataset carries no snapshot to roll back to."""

    def __init__(
        self,
        dataset_name: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = (
            f"Problem with the snapshot of the new dataset {dataset_name}, "
            "cannot continue"
        )
        super().__init__(message=msg, logger=logger)


class SecurityViolation(JmgrException):
    """Raised when jmgr has security concerns."""

    def __init__(
        self,
        reason: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"Security violation: {reason}"
        super().__init__(message=msg, logger=logger)


# Logger


class LogException(JmgrException):
    """Raised when logging fails."""

    pass


class CannotRedrawLine(LogException):
    """Raised when the logger is unable to redraw a line."""

    def __init__(
        self,
        reason: str,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = "Logger can't redraw line"
        if reason is not None:
            msg += f": {reason}"
        super().__init__(message=msg, logger=logger)


# Events


class EventAlreadyFinished(JmgrException):
    """Raised when a finished event should get started again."""

    def __init__(
        self,
        event: 'libjmgr.events.JmgrEvent',
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        msg = f"This {event.type} event is already finished"
        JmgrException.__init__(self, message=msg, logger=logger)
