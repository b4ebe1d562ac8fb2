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
"""FreeBSD releases offered by the configured download mirror."""
import typing
import html.parser
import re
import urllib.error
import urllib.request

import libjmgr.errors
import libjmgr.helpers_object
import libjmgr.Release

_release_name_pattern = re.compile(r"^(?P<major>\d+)\.(?P<minor>\d+)-RELEASE$")


class _DirectoryListingParser(html.parser.HTMLParser):
    """Collect the subdirectory links of a mirror index page."""

    directories: typing.List[str]

    def __init__(self) -> None:
        super().__init__()
        self.directories = []

    def handle_starttag(
        self,
        tag: str,
        attrs: typing.List[typing.Tuple[str, typing.Optional[str]]]
    ) -> None:
        if tag != "a":
            return
        for name, value in attrs:
            if (name == "href") and (value is not None):
                if value.endswith("/"):
                    self.directories.append(value.strip("/"))


def _release_sort_key(release_name: str) -> typing.Tuple[int, int]:
    match = _release_name_pattern.match(release_name)
    if match is None:
        return (0, 0)
    return (int(match["major"]), int(match["minor"]))


class DistributionGenerator:
    """The releases a jail of this host can be created from."""

    _releases: typing.Optional[typing.List['libjmgr.Release.ReleaseGenerator']]

    host: 'libjmgr.Host.HostGenerator'
    logger: 'libjmgr.Logger.Logger'

    def __init__(
        self,
        host: typing.Optional['libjmgr.Host.HostGenerator']=None,
        logger: typing.Optional['libjmgr.Logger.Logger']=None
    ) -> None:
        self.logger = libjmgr.helpers_object.init_logger(self, logger)
        self.host = libjmgr.helpers_object.init_host(self, host)
        self._releases = None

    @property
    def _class_release(
        self
    ) -> typing.Type['libjmgr.Release.ReleaseGenerator']:
        return libjmgr.Release.ReleaseGenerator

    @property
    def mirror_url(self) -> str:
        """Return the index URL of the releases for the host architecture."""
        processor = self.host.processor
        return f"{self.host.config.os_url_prefix}/{processor}/"

    def parse_release_names(self, index_html: str) -> typing.List[str]:
        """Return the release names linked on a mirror index, oldest first."""
        parser = _DirectoryListingParser()
        parser.feed(index_html)
        release_names = set(filter(
            lambda x: _release_name_pattern.match(x) is not None,
            parser.directories
        ))
        return sorted(release_names, key=_release_sort_key)

    def fetch_releases(self) -> None:
        """Download the mirror index and cache the releases it offers."""
        url = self.mirror_url
        self.logger.verbose(f"Fetching the list of releases from {url}")
        try:
            with urllib.request.urlopen(url) as response:  # nosec: config
                charset = response.headers.get_content_charset() or "UTF-8"
                index_html = response.read().decode(charset)
        except (urllib.error.URLError, ValueError, OSError) as e:
            raise libjmgr.errors.ReleaseListUnavailable(
                url=url,
                reason=str(e),
                logger=self.logger
            )

        self._releases = [
            self._class_release(
                name=release_name,
                host=self.host,
                logger=self.logger
            )
            for release_name in self.parse_release_names(index_html)
        ]

    @property
    def releases(self) -> typing.List['libjmgr.Release.ReleaseGenerator']:
        """Return the releases offered by the mirror."""
        if self._releases is None:
            self.fetch_releases()
        if not self._releases:
            raise libjmgr.errors.ReleaseListUnavailable(
                url=self.mirror_url,
                reason="no releases found",
                logger=self.logger
            )
        return self._releases


class Distribution(DistributionGenerator):
    """Distribution that creates synchronous releases."""

    @property
    def _class_release(self) -> typing.Type['libjmgr.Release.Release']:
        return libjmgr.Release.Release
