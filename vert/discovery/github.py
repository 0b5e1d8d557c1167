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

"""GitHub releases discovery strategy for vert.

Master sites on github.com (https://github.com/<owner>/<repo>) are checked
through the releases API:

    GET https://api.github.com/repos/<owner>/<repo>/releases/latest
    -> {"tag_name": "v1.2.3", ...}

Leading non-digit characters are stripped from the tag, so "v1.2.3" and
"release-1.2.3" both record as "1.2.3". The stripped tag is compared with
the recorded version by text inequality.

Authentication:
    Anonymous requests are limited to 60 per hour. When credentials are
    configured the request uses HTTP basic auth with the account name and
    a personal access token (classic token, read access is enough).
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any
from urllib.parse import urlsplit

from vert.exceptions import DecodeError
from vert.io.http import get_json
from vert.versioning.keys import DiscoveredVersion

from .base import DiscoveryContext, HostKind, register_strategy

GITHUB_LATEST_URL = "https://api.github.com/repos{path}/releases/latest"
GITHUB_HEADERS = {
    "Accept": "application/vnd.github+json",
    "X-GitHub-Api-Version": "2022-11-28",
}

_LEADING_NON_DIGITS = re.compile(r"^[^0-9]+")


@dataclass(frozen=True)
class GithubRelease:
    """The part of a GitHub release object vert reads."""

    tag_name: str

    @classmethod
    def from_json(cls, data: Any) -> GithubRelease:
        """Decode a JSON payload, rejecting any other shape.

        Raises:
            DecodeError: If 'tag_name' is missing or not a string.

        """
        if not isinstance(data, dict):
            raise DecodeError(f"expected a JSON object, got {type(data).__name__}")
        tag_name = data.get("tag_name")
        if not isinstance(tag_name, str):
            raise DecodeError("missing string field 'tag_name'")
        return cls(tag_name=tag_name)


def version_from_tag(tag_name: str) -> str:
    """Strip leading non-digit characters ("v1.2.3" -> "1.2.3")."""
    return _LEADING_NON_DIGITS.sub("", tag_name)


class GithubStrategy:
    """Discovery strategy for github.com repositories."""

    comparison = "text"

    def discover(
        self, url: str, context: DiscoveryContext
    ) -> DiscoveredVersion | None:
        """Read the latest release tag of a GitHub repository.

        Args:
            url: Master site such as "https://github.com/psf/requests".
            context: Session, credentials, timeout and logger.

        Returns:
            The tag with leading non-digits removed.

        Raises:
            HTTPStatusError: On a non-200 status (404 when the repository
                has no releases, 403 when rate limited).
            NetworkError: On transport errors.
            DecodeError: If the response is not the expected JSON shape.

        """
        logger = context.logger
        api_url = GITHUB_LATEST_URL.format(path=urlsplit(url).path)

        auth = None
        if context.credentials is not None:
            auth = context.credentials.basic_auth()
            logger.debug("DISCOVERY", "Using authenticated API request")

        logger.debug("DISCOVERY", f"Fetching release from: {api_url}")
        data = get_json(
            context.session,
            api_url,
            headers=GITHUB_HEADERS,
            auth=auth,
            timeout=context.timeout,
        )
        try:
            release = GithubRelease.from_json(data)
        except DecodeError as err:
            raise DecodeError(f"Unexpected GitHub response from {api_url}: {err}") from err

        version = version_from_tag(release.tag_name)
        logger.debug("DISCOVERY", f"Release tag {release.tag_name!r} -> {version!r}")
        return DiscoveredVersion(version=version, source="github")


# Register this strategy when the module is imported
register_strategy(HostKind.RELEASE, GithubStrategy)
