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

"""PyPI discovery strategy for vert.

Master sites on pypi.org (https://pypi.org/project/<name>) are checked
through the JSON API:

    GET https://pypi.org/pypi/<name>/json
    -> {"info": {"version": "2.32.3", ...}, ...}

The "info.version" field is authoritative, so it is recorded verbatim and
compared with the recorded version by text inequality. A version that is
merely reformatted ("2.0" vs "2.0.0") therefore counts as new.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

from vert.exceptions import DecodeError
from vert.io.http import get_json
from vert.versioning.keys import DiscoveredVersion

from .base import DiscoveryContext, HostKind, register_strategy

PYPI_JSON_URL = "https://pypi.org/pypi/{project}/json"


@dataclass(frozen=True)
class PypiProjectInfo:
    version: str


@dataclass(frozen=True)
class PypiProject:
    """The part of the PyPI JSON API response vert reads."""

    info: PypiProjectInfo

    @classmethod
    def from_json(cls, data: Any) -> PypiProject:
        """Decode a JSON payload, rejecting any other shape.

        Raises:
            DecodeError: If 'info' is not an object or 'info.version' is
                not a string.

        """
        if not isinstance(data, dict):
            raise DecodeError(f"expected a JSON object, got {type(data).__name__}")
        info = data.get("info")
        if not isinstance(info, dict):
            raise DecodeError("missing object field 'info'")
        version = info.get("version")
        if not isinstance(version, str):
            raise DecodeError("missing string field 'info.version'")
        return cls(info=PypiProjectInfo(version=version))


def project_name(url: str) -> str:
    """Last path segment of a pypi.org project URL ("" if there is none)."""
    return urlsplit(url).path.split("/")[-1]


class PypiStrategy:
    """Discovery strategy for pypi.org projects."""

    comparison = "text"

    def discover(
        self, url: str, context: DiscoveryContext
    ) -> DiscoveredVersion | None:
        """Read the latest version of a PyPI project.

        Args:
            url: Master site such as "https://pypi.org/project/requests".
            context: Session, timeout and logger.

        Returns:
            The version from "info.version", or None if the URL has no
                project segment.

        Raises:
            HTTPStatusError: If PyPI answers with a non-200 status.
            NetworkError: On transport errors.
            DecodeError: If the response is not the expected JSON shape.

        """
        logger = context.logger
        project = project_name(url)
        if not project:
            logger.warning("DISCOVERY", f"No project name in {url}")
            return None

        api_url = PYPI_JSON_URL.format(project=project)
        logger.debug("DISCOVERY", f"Fetching PyPI metadata: {api_url}")

        data = get_json(context.session, api_url, timeout=context.timeout)
        try:
            pypi_project = PypiProject.from_json(data)
        except DecodeError as err:
            raise DecodeError(f"Unexpected PyPI response for {project!r}: {err}") from err

        logger.debug("DISCOVERY", f"PyPI version: {pypi_project.info.version}")
        return DiscoveredVersion(version=pypi_project.info.version, source="pypi")


# Register this strategy when the module is imported
register_strategy(HostKind.INDEX, PypiStrategy)
