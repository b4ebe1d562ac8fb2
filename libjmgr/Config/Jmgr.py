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
"""jmgr configuration stored in an UCL file."""
import typing
import os

import libjmgr.errors
import libjmgr.helpers
import libjmgr.helpers_object
import libjmgr.Types

CONFIG_FILE_ENV = "JMGR_CONFIG"
DEFAULT_CONFIG_FILE = "/usr/local/etc/jmgr/jmgr.conf"

JAILS_CONF_D = "/etc/jail.conf.d"
LEGACY_JAIL_CONF = "/etc/jail.conf"

ConfigData = typing.Dict[str, typing.Optional[str]]


class JmgrConfig:
    """
    Configuration of the jail manager.

    The configuration is read from an UCL file or passed in as dict. Reading
    and validating never raises. Each problem found is recorded in `problems`
    and marks the configuration as bad. A bad configuration still allows to
    list jails, but new jails cannot be created or cloned.
    """

    defaults: ConfigData = {
        "JailsHome": None,
        "JailsConfD": JAILS_CONF_D,
        "JailConf": LEGACY_JAIL_CONF,
        "OsMediaDir": "/usr/local/jails/media",
        "ZFSdataSet": None,
        "JailConfTemplate": "/usr/local/etc/jmgr/jail.conf.template",
        "PostInstall": None,
        "OsUrlPrefix": "https://download.freebsd.org/ftp/releases",
        "JailUser": "root",
        "JailIface": None
    }

    file: typing.Optional[str]
    data: ConfigData
    problems: typing.List[str]

    def __init__(
        self,
        data: typing.Optional[typing.Dict[str, typing.Any]]=None,
        file: typing.Optional[str]=None,
        zfs: typing.Optional['libjmgr.ZFS.ZFS']=None,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:

        self.logger = libjmgr.helpers_object.init_logger(self, logger)
        self.zfs = libjmgr.helpers_object.init_zfs(self, zfs)
        self.problems = []
        self.data = dict(self.defaults)

        if data is None:
            if file is None:
                file = os.environ.get(CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE)
            self.file = file
            data = self._read_file()
        else:
            self.file = None

        known_keys = dict((key.lower(), key) for key in self.defaults)
        for key, value in data.items():
            if str(key).lower() not in known_keys:
                self.logger.warn(f"Unknown jmgr config property: {key}")
                continue
            name = known_keys[str(key).lower()]
            self.data[name] = None if (value is None) else str(value)

        self._validate()

    def _read_file(self) -> typing.Dict[str, typing.Any]:
        path = str(self.file)
        self.logger.verbose(f"Reading jmgr config from {path}")
        try:
            with open(path, "r", encoding="UTF-8") as f:
                content = f.read()
        except FileNotFoundError:
            self._problem(f"Config file {path} does not exist")
            return {}
        except IsADirectoryError:
            self._problem(f"Config file {path} is a directory")
            return {}
        except (PermissionError, UnicodeDecodeError) as e:
            self._problem(f"Config file {path} is not readable: {e}")
            return {}

        import ucl
        try:
            data = ucl.load(content)
        except ValueError as e:
            self._problem(f"Config file {path} cannot be parsed: {e}")
            return {}

        if isinstance(data, dict) is False:
            self._problem(f"Config file {path} is not a key-value document")
            return {}

        return dict(data)

    def _problem(self, message: str) -> None:
        self.logger.verbose(message)
        self.problems.append(message)

    def _validate(self) -> None:
        dataset_name = self.zfs_dataset
        if dataset_name is not None:
            columns = self.zfs.list_dataset(dataset_name)
            if columns is None:
                self._problem(f"ZFS dataset {dataset_name} does not exist")
            elif len(columns) < 5:
                self._problem(f"Cannot read mountpoint of {dataset_name}")
            else:
                mountpoint = columns[4]
                configured_home = self.data["JailsHome"]
                if (configured_home is not None) and (
                    configured_home.rstrip("/") != mountpoint.rstrip("/")
                ):
                    self._problem(
                        f"JailsHome {configured_home} does not match where "
                        f"{dataset_name} is mounted ({mountpoint})"
                    )
                self.data["JailsHome"] = mountpoint

        jails_home = self.data["JailsHome"]
        if jails_home is None:
            self._problem("JailsHome is not configured")
        elif os.path.isdir(jails_home) is False:
            self._problem(f"JailsHome {jails_home} is not a directory")
        else:
            try:
                libjmgr.Types.AbsolutePath(jails_home)
            except ValueError as e:
                self._problem(str(e))

    @property
    def bad_config(self) -> bool:
        """Return True when jails cannot be created with this config."""
        return len(self.problems) > 0

    def require_good_config(self) -> None:
        """Raise when the configuration cannot create new jails."""
        if self.bad_config is True:
            raise libjmgr.errors.BadConfig(
                problems=self.problems,
                logger=self.logger
            )

    @property
    def use_zfs(self) -> bool:
        """Return True when new jails are backed by ZFS datasets."""
        return self.zfs_dataset is not None

    @property
    def jails_home(self) -> str:
        """Return the directory that holds the jail filesystems."""
        return str(self.data["JailsHome"])

    @property
    def jails_conf_d(self) -> str:
        """Return the directory of the per-jail declaration files."""
        return str(self.data["JailsConfD"])

    @property
    def legacy_jail_conf(self) -> str:
        """Return the path of the singleton jail.conf file."""
        return str(self.data["JailConf"])

    @property
    def os_media_dir(self) -> str:
        """Return the directory base archives are cached in."""
        return str(self.data["OsMediaDir"])

    @property
    def zfs_dataset(self) -> typing.Optional[str]:
        """Return the parent dataset of ZFS backed jails."""
        value = self.data["ZFSdataSet"]
        if libjmgr.helpers.is_none(value):
            return None
        return value

    @property
    def jail_conf_template(self) -> str:
        """Return the path of the declaration template."""
        return str(self.data["JailConfTemplate"])

    @property
    def post_install(self) -> typing.Optional[str]:
        """Return the path of the post-install hook."""
        value = self.data["PostInstall"]
        if libjmgr.helpers.is_none(value):
            return None
        return value

    @property
    def os_url_prefix(self) -> str:
        """Return the URL release directories are found in."""
        return str(self.data["OsUrlPrefix"]).rstrip("/")

    @property
    def jail_user(self) -> str:
        """Return the user that logs in when entering a jail."""
        return str(self.data["JailUser"])

    @property
    def jail_iface(self) -> typing.Optional[str]:
        """Return the default network interface for new jails."""
        value = self.data["JailIface"]
        if libjmgr.helpers.is_none(value):
            return None
        return value

    def to_dict(self) -> typing.Dict[str, typing.Any]:
        """Return the effective configuration."""
        output: typing.Dict[str, typing.Any] = dict(self.data)
        output["ConfigFile"] = self.file
        output["UseZFS"] = self.use_zfs
        output["BadConfig"] = self.bad_config
        return output
