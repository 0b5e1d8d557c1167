# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Directory listing discovery strategy for vert.

Fallback for every host without a structured API. The master site is
fetched as-is and treated as a directory listing: the greatest version
found in any anchor href wins.

    GET https://www.sudo.ws/dist
    -> <a href="sudo-1.9.14.tar.gz">... <a href="sudo-1.9.15.tar.gz">...
    -> 1.9.15

Scraped text is not trusted, so the result only counts as new when it is
numerically greater than the recorded version ("ordered" comparison).
"""

from __future__ import annotations

from vert.io.http import fetch
from vert.versioning.html import find_latest_version
from vert.versioning.keys import DiscoveredVersion

from .base import DiscoveryContext, HostKind, register_strategy


class DirectoryListingStrategy:
    """Discovery strategy for plain HTML download directories."""

    comparison = "ordered"

    def discover(
        self, url: str, context: DiscoveryContext
    ) -> DiscoveredVersion | None:
        """Scrape the newest version linked from a page.

        Args:
            url: Page URL, usually an "Index of /dist" listing.
            context: Session, timeout and logger.

        Returns:
            The greatest version rendered as dotted text, or None if no
                link carried a version.

        Raises:
            HTTPStatusError: On a non-200 status.
            NetworkError: On transport errors.

        """
        logger = context.logger
        logger.debug("DISCOVERY", f"Fetching page: {url}")

        response = fetch(context.session, url, timeout=context.timeout)
        # raw bytes so the parser detects the charset from the markup
        html = response.content
        logger.debug("DISCOVERY", f"Page fetched ({len(html)} bytes)")

        latest = find_latest_version(html)
        if latest is None:
            return None

        logger.debug("DISCOVERY", f"Greatest linked version: {latest}")
        return DiscoveredVersion(version=str(latest), source="directory")


# Register this strategy when the module is imported
register_strategy(HostKind.GENERIC, DirectoryListingStrategy)
