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

"""Tracked package entity for vert.

A TrackedPackage is one row of the package store: where to look for new
releases (master_site), the newest version seen there (version), and the
version actually installed (local_version).

The entity is mutable on purpose: a check updates 'version' and
'last_check' in place and the caller writes it back to the store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from vert.versioning.keys import Version, leading_release_tuple, try_parse_version


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class TrackedPackage:
    """A package whose upstream releases are being followed.

    Attributes:
        distname: Package name, unique within the store.
        master_site: Upstream URL checked for new releases.
        version: Newest version text seen upstream.
        local_version: Version installed locally, if recorded.
        last_check: When the upstream was last checked (UTC).

    """

    distname: str
    master_site: str
    version: str
    local_version: str | None = None
    last_check: datetime = field(default_factory=utcnow)

    @property
    def current_version(self) -> Version | None:
        """The recorded upstream version parsed as a Version, if possible."""
        return try_parse_version(self.version)

    def is_latest(self) -> bool:
        """True when the installed version is at least the upstream one.

        Both sides are compared by their leading dot-separated integers.
        A package with no recorded local version is never latest.
        """
        if self.local_version is None:
            return False
        return leading_release_tuple(self.local_version) >= leading_release_tuple(
            self.version
        )

    def describe(self) -> list[str]:
        """Lines for the detailed 'info' display."""
        return [
            f"Distname:      {self.distname}",
            f"Master site:   {self.master_site}",
            f"Version:       {self.version}",
            f"Local version: {self.local_version or '-'}",
            f"Last check:    {self.last_check.isoformat()}",
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "master_site": self.master_site,
            "version": self.version,
            "local_version": self.local_version,
            "last_check": self.last_check.isoformat(),
        }

    @classmethod
    def from_dict(cls, distname: str, data: dict[str, Any]) -> TrackedPackage:
        """Build a package from its stored JSON record.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If last_check is not an ISO-8601 timestamp.

        """
        last_check = datetime.fromisoformat(data["last_check"])
        if last_check.tzinfo is None:
            last_check = last_check.replace(tzinfo=UTC)
        return cls(
            distname=distname,
            master_site=data["master_site"],
            version=data["version"],
            local_version=data.get("local_version"),
            last_check=last_check,
        )

    def __str__(self) -> str:
        return f"{self.distname} {self.local_version or '-'} -> {self.version}"
