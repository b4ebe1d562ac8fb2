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
"""Unit tests of the jmgr configuration."""
import typing
import os

import pytest

from helper_functions import CommandRecorder

import libjmgr.errors
import libjmgr.Config.Jmgr
import libjmgr.Logger
import libjmgr.ZFS


def _config(
    data: typing.Dict[str, typing.Any],
    zfs: libjmgr.ZFS.ZFS,
    logger: libjmgr.Logger.Logger
) -> libjmgr.Config.Jmgr.JmgrConfig:
    return libjmgr.Config.Jmgr.JmgrConfig(data=data, zfs=zfs, logger=logger)


class TestJmgrConfig(object):
    """Read and validate the jmgr configuration."""

    def test_good_config(
        self,
        config_data: typing.Dict[str, str],
        zfs: libjmgr.ZFS.ZFS,
        logger: libjmgr.Logger.Logger
    ) -> None:
        config = _config(config_data, zfs, logger)
        assert config.bad_config is False
        assert config.use_zfs is False
        assert config.jails_home == config_data["JailsHome"]
        config.require_good_config()

    def test_defaults(
        self,
        config_data: typing.Dict[str, str],
        zfs: libjmgr.ZFS.ZFS,
        logger: libjmgr.Logger.Logger
    ) -> None:
        config = _config(dict(JailsHome=config_data["JailsHome"]), zfs, logger)
        assert config.jails_conf_d == "/etc/jail.conf.d"
        assert config.legacy_jail_conf == "/etc/jail.conf"
        assert config.jail_user == "root"
        assert config.post_install is None
        assert config.jail_iface is None

    def test_missing_jails_home(
        self,
        zfs: libjmgr.ZFS.ZFS,
        logger: libjmgr.Logger.Logger
    ) -> None:
        config = _config({}, zfs, logger)
        assert config.bad_config is True
        with pytest.raises(libjmgr.errors.BadConfig):
            config.require_good_config()

    def test_keys_are_case_insensitive(
        self,
        config_data: typing.Dict[str, str],
        zfs: libjmgr.ZFS.ZFS,
        logger: libjmgr.Logger.Logger
    ) -> None:
        data = dict(config_data)
        data["jailuser"] = "admin"
        data["unknownkey"] = "ignored"
        config = _config(data, zfs, logger)
        assert config.jail_user == "admin"
        assert "unknownkey" not in config.to_dict()

    def test_jails_home_from_dataset(
        self,
        jmgr_dirs: typing.Dict[str, str],
        zfs: libjmgr.ZFS.ZFS,
        logger: libjmgr.Logger.Logger,
        commands: CommandRecorder
    ) -> None:
        jails_home = jmgr_dirs["jails_home"]
        commands.add(
            ["/sbin/zfs", "list", "-H", "zroot/jails"],
            f"zroot/jails\t1G\t20G\t96K\t{jails_home}"
        )
        config = _config(dict(ZFSdataSet="zroot/jails"), zfs, logger)
        assert config.bad_config is False
        assert config.use_zfs is True
        assert config.jails_home == jails_home

    def test_jails_home_mismatch(
        self,
        jmgr_dirs: typing.Dict[str, str],
        zfs: libjmgr.ZFS.ZFS,
        logger: libjmgr.Logger.Logger,
        commands: CommandRecorder
    ) -> None:
        commands.add(
            ["/sbin/zfs", "list", "-H", "zroot/jails"],
            f"zroot/jails\t1G\t20G\t96K\t{jmgr_dirs['jails_home']}"
        )
        config = _config(
            dict(JailsHome="/usr/local/jails", ZFSdataSet="zroot/jails"),
            zfs,
            logger
        )
        assert config.bad_config is True

    def test_missing_dataset(
        self,
        config_data: typing.Dict[str, str],
        zfs: libjmgr.ZFS.ZFS,
        logger: libjmgr.Logger.Logger,
        commands: CommandRecorder
    ) -> None:
        commands.add(["/sbin/zfs", "list"], returncode=1)
        data = dict(config_data)
        data["ZFSdataSet"] = "zroot/missing"
        config = _config(data, zfs, logger)
        assert config.bad_config is True

    def test_reads_ucl_file(
        self,
        jmgr_dirs: typing.Dict[str, str],
        tmp_path: typing.Any,
        zfs: libjmgr.ZFS.ZFS,
        logger: libjmgr.Logger.Logger
    ) -> None:
        config_file = tmp_path / "jmgr.conf"
        config_file.write_text(
            f"JailsHome = \"{jmgr_dirs['jails_home']}\";\n"
            "JailIface = \"em0\";\n"
        )
        config = libjmgr.Config.Jmgr.JmgrConfig(
            file=str(config_file),
            zfs=zfs,
            logger=logger
        )
        assert config.bad_config is False
        assert config.jail_iface == "em0"
        assert config.file == str(config_file)

    def test_missing_file(
        self,
        tmp_path: typing.Any,
        zfs: libjmgr.ZFS.ZFS,
        logger: libjmgr.Logger.Logger
    ) -> None:
        config = libjmgr.Config.Jmgr.JmgrConfig(
            file=str(tmp_path / "missing.conf"),
            zfs=zfs,
            logger=logger
        )
        assert config.bad_config is True
        assert os.path.exists(str(tmp_path / "missing.conf")) is False
