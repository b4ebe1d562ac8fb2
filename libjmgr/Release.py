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
"""jmgr Release module."""
import typing
import os
import urllib.error
import urllib.request

import libjmgr.errors
import libjmgr.events
import libjmgr.helpers
import libjmgr.helpers_object
import libjmgr.Storage


class ReleaseGenerator:
    """
    A FreeBSD release a jail can be installed from.

    The base archive of a release is cached in the OsMediaDir as
    `<release>.txz` and downloaded from the OsUrlPrefix mirror when missing.
    """

    name: str
    host: 'libjmgr.Host.HostGenerator'
    logger: 'libjmgr.Logger.Logger'

    def __init__(
        self,
        name: str,
        host: typing.Optional['libjmgr.Host.HostGenerator']=None,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        self.logger = libjmgr.helpers_object.init_logger(self, logger)
        self.host = libjmgr.helpers_object.init_host(self, host)
        self.name = name

    @property
    def config(self) -> 'libjmgr.Config.Jmgr.JmgrConfig':
        """Return the jmgr configuration of the host."""
        return self.host.config

    @property
    def archive_path(self) -> str:
        """Return the path of the cached base archive."""
        return os.path.join(self.config.os_media_dir, f"{self.name}.txz")

    @property
    def remote_url(self) -> str:
        """Return the URL of the base archive on the mirror."""
        prefix = self.config.os_url_prefix
        return f"{prefix}/{self.host.processor}/{self.name}/base.txz"

    @property
    def fetched(self) -> bool:
        """Return True if the base archive is cached and not empty."""
        try:
            return os.path.getsize(self.archive_path) > 0
        except OSError:
            return False

    def fetch(
        self,
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.Generator['libjmgr.events.JmgrEvent', None, None]:
        """Download the base archive unless it was cached before."""
        releaseDownloadEvent = libjmgr.events.ReleaseDownload(
            release=self,
            scope=event_scope
        )
        yield releaseDownloadEvent.begin()

        if self.fetched is True:
            self.logger.verbose(f"{self.archive_path} was already downloaded")
            yield releaseDownloadEvent.skip(message="already downloaded")
            return

        url = self.remote_url
        libjmgr.helpers.makedirs_safe(
            self.config.os_media_dir,
            logger=self.logger
        )
        partial_path = f"{self.archive_path}.part"
        try:
            self.logger.debug(f"Starting download of {url}")
            urllib.request.urlretrieve(  # nosec: configured URL
                url,
                partial_path
            )
            os.replace(partial_path, self.archive_path)
        except (urllib.error.URLError, OSError) as e:
            if os.path.exists(partial_path):
                os.remove(partial_path)
            yield releaseDownloadEvent.fail(e)
            raise libjmgr.errors.DownloadFailed(
                url=url,
                reason=str(e),
                logger=self.logger
            )
        self.logger.verbose(f"{url} was saved to {self.archive_path}")
        yield releaseDownloadEvent.end()

    def extract(
        self,
        destination: str,
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.Generator['libjmgr.events.JmgrEvent', None, None]:
        """Extract the base archive into the root of a jail."""
        releaseExtractionEvent = libjmgr.events.ReleaseExtraction(
            release=self,
            scope=event_scope
        )
        yield releaseExtractionEvent.begin()
        try:
            libjmgr.Storage.extract_archive(
                self.archive_path,
                destination,
                logger=self.logger
            )
        except libjmgr.errors.JmgrException as e:
            yield releaseExtractionEvent.fail(e)
            raise
        yield releaseExtractionEvent.end()

    def __str__(self) -> str:
        """Return the release name."""
        return self.name


class Release(ReleaseGenerator):
    """Release with synchronous interfaces."""

    def fetch(  # noqa: T484
        self,
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.List['libjmgr.events.JmgrEvent']:
        """Fetch the release from the remote synchronously."""
        return list(ReleaseGenerator.fetch(
            self,
            event_scope=event_scope
        ))

    def extract(  # noqa: T484
        self,
        destination: str,
        event_scope: typing.Optional['libjmgr.events.Scope']=None
    ) -> typing.List['libjmgr.events.JmgrEvent']:
        """Extract the release synchronously."""
        return list(ReleaseGenerator.extract(
            self,
            destination=destination,
            event_scope=event_scope
        ))
