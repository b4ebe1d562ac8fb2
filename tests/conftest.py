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
"""Shared fixtures of the jmgr tests."""
import typing
import os

import pytest

import helper_functions
from helper_functions import CommandRecorder, RecordingPrompts

import libjmgr.helpers
import libjmgr.Config.Jmgr
import libjmgr.Host
import libjmgr.Jails
import libjmgr.Logger
import libjmgr.ZFS


@pytest.fixture
def logger() -> libjmgr.Logger.Logger:
    """Make the jmgr Logger available to the tests."""
    return libjmgr.Logger.Logger()


@pytest.fixture
def commands(monkeypatch: typing.Any) -> CommandRecorder:
    """Replace the process gateway with a recorder."""
    recorder = CommandRecorder()
    monkeypatch.setattr(libjmgr.helpers, "exec", recorder.exec)
    monkeypatch.setattr(
        libjmgr.helpers,
        "exec_passthru",
        recorder.exec_passthru
    )
    monkeypatch.setattr(libjmgr.helpers, "exec_piped", recorder.exec_piped)
    return recorder


@pytest.fixture
def root(monkeypatch: typing.Any) -> None:
    """Pretend to run with root privileges."""
    monkeypatch.setattr(libjmgr.helpers, "is_root", lambda: True)


@pytest.fixture
def unprivileged(monkeypatch: typing.Any) -> None:
    """Pretend to run without root privileges."""
    monkeypatch.setattr(libjmgr.helpers, "is_root", lambda: False)


@pytest.fixture
def unresolvable(monkeypatch: typing.Any) -> None:
    """Let no jail name resolve to an address."""
    monkeypatch.setattr(
        libjmgr.Host.HostGenerator,
        "resolve",
        lambda self, hostname: None
    )


@pytest.fixture
def jmgr_dirs(tmp_path: typing.Any) -> typing.Dict[str, str]:
    """Create the directories and files of a jail host."""
    dirs = dict(
        conf_d=str(tmp_path / "etc" / "jail.conf.d"),
        jail_conf=str(tmp_path / "etc" / "jail.conf"),
        jails_home=str(tmp_path / "jails"),
        media=str(tmp_path / "media"),
        template=str(tmp_path / "jail.conf.template")
    )
    os.makedirs(dirs["conf_d"])
    os.makedirs(dirs["jails_home"])
    os.makedirs(dirs["media"])
    with open(dirs["template"], "w", encoding="UTF-8") as f:
        f.write(helper_functions.JAIL_CONF_TEMPLATE)
    return dirs


@pytest.fixture
def config_data(jmgr_dirs: typing.Dict[str, str]) -> typing.Dict[str, str]:
    """Return the configuration of a host without ZFS."""
    return dict(
        JailsHome=jmgr_dirs["jails_home"],
        JailsConfD=jmgr_dirs["conf_d"],
        JailConf=jmgr_dirs["jail_conf"],
        OsMediaDir=jmgr_dirs["media"],
        JailConfTemplate=jmgr_dirs["template"]
    )


@pytest.fixture
def zfs(
    logger: libjmgr.Logger.Logger,
    commands: CommandRecorder
) -> libjmgr.ZFS.ZFS:
    """Return the zfs(8) wrapper."""
    return libjmgr.ZFS.ZFS(logger=logger)


@pytest.fixture
def prompts(logger: libjmgr.Logger.Logger) -> RecordingPrompts:
    """Return prompts that decline every question."""
    return RecordingPrompts(logger=logger, answer=False)


@pytest.fixture
def make_jails(
    config_data: typing.Dict[str, str],
    zfs: libjmgr.ZFS.ZFS,
    prompts: RecordingPrompts,
    logger: libjmgr.Logger.Logger,
    commands: CommandRecorder
) -> typing.Callable[..., libjmgr.Jails.Jails]:
    """Return a factory of jail registries built from the recorder."""
    def _make_jails(**config_overrides: str) -> libjmgr.Jails.Jails:
        data = dict(config_data)
        data.update(config_overrides)
        config = libjmgr.Config.Jmgr.JmgrConfig(
            data=data,
            zfs=zfs,
            logger=logger
        )
        host = libjmgr.Host.Host(config=config, zfs=zfs, logger=logger)
        jails = libjmgr.Jails.Jails(
            host=host,
            zfs=zfs,
            prompts=prompts,
            logger=logger
        )
        commands.clear()
        return jails
    return _make_jails
