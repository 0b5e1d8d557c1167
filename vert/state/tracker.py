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

"""Package store implementation for vert.

This module persists tracked packages in a JSON state file keyed by
package name:

    {
      "metadata": {"vert_version": "0.1.0", "schema_version": "1", ...},
      "packages": {
        "sudo": {
          "master_site": "https://www.sudo.ws/dist",
          "version": "1.9.15",
          "local_version": "1.9.14",
          "last_check": "2025-06-01T10:00:00+00:00"
        }
      }
    }

Key Features:

- JSON-based state storage (fast parsing, standard library)
- Auto-creation of state files and directories
- Corrupted files are backed up before starting fresh
- Sorted keys and trailing newline for stable diffs

Example:
    High-level API with PackageTracker:
        ```python
        from pathlib import Path
        from vert.state import PackageTracker

        tracker = PackageTracker(Path("state/packages.json"))
        tracker.load()
        tracker.add("sudo", "https://www.sudo.ws/dist", "1.9.14")
        tracker.save()
        ```

"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
import json
from pathlib import Path
from typing import Any

from vert import __version__
from vert.exceptions import StateError
from vert.package import TrackedPackage, utcnow


class PackageTracker:
    """Manages the tracked-package store with automatic persistence.

    Attributes:
        state_file: Path to the JSON state file.
        state: In-memory state dictionary.

    """

    def __init__(self, state_file: Path):
        """Initialize package tracker.

        Args:
            state_file: Path to JSON state file. Created if doesn't exist.

        """
        self.state_file = state_file
        self.state: dict[str, Any] = {}

    def load(self) -> dict[str, Any]:
        """Load state from file.

        Creates default state structure if file doesn't exist.

        Returns:
            Loaded state dictionary.

        Raises:
            StateError: If the file is not valid JSON, or its top level or
                'packages' is not an object. It is renamed to
                '<name>.json.backup' and a fresh file is written first.

        """
        try:
            state = load_state(self.state_file)
        except FileNotFoundError:
            self.state = create_default_state()
            self.save()
            return self.state
        except json.JSONDecodeError as err:
            raise self._replace_corrupted() from err

        if not isinstance(state, dict) or not isinstance(
            state.setdefault("packages", {}), dict
        ):
            raise self._replace_corrupted()

        self.state = state
        return self.state

    def _replace_corrupted(self) -> StateError:
        """Back up an unusable state file, start fresh, return the error."""
        backup = self.state_file.with_suffix(".json.backup")
        self.state_file.rename(backup)
        self.state = create_default_state()
        self.save()
        return StateError(
            f"Corrupted state file backed up to {backup}. "
            f"Created fresh state file."
        )

    def save(self) -> None:
        """Save current state to file, updating metadata.last_updated."""
        self.state.setdefault("metadata", {})
        self.state["metadata"]["last_updated"] = datetime.now(UTC).isoformat()
        save_state(self.state, self.state_file)

    @property
    def _packages(self) -> dict[str, dict[str, Any]]:
        return self.state.setdefault("packages", {})

    def __contains__(self, distname: str) -> bool:
        return distname in self._packages

    def get(self, distname: str) -> TrackedPackage:
        """Get a tracked package by name.

        Raises:
            StateError: If the package is not tracked or its record is
                malformed.

        """
        record = self._packages.get(distname)
        if record is None:
            raise StateError(f"Package not tracked: {distname!r}")
        try:
            return TrackedPackage.from_dict(distname, record)
        except (KeyError, TypeError, ValueError) as err:
            raise StateError(f"Invalid record for {distname!r}: {err}") from err

    def put(self, package: TrackedPackage) -> None:
        """Write a package back into the in-memory state."""
        self._packages[package.distname] = package.to_dict()

    def add(self, distname: str, master_site: str, version: str) -> TrackedPackage:
        """Start tracking a package.

        The given version is recorded both as the upstream version and as
        the installed version.

        Raises:
            StateError: If a package with this name is already tracked.

        """
        if distname in self:
            raise StateError(f"Package already tracked: {distname!r}")
        package = TrackedPackage(
            distname=distname,
            master_site=master_site,
            version=version,
            local_version=version,
            last_check=utcnow(),
        )
        self.put(package)
        return package

    def update(
        self,
        distname: str,
        *,
        new_name: str | None = None,
        master_site: str | None = None,
        local_version: str | None = None,
    ) -> tuple[TrackedPackage, bool]:
        """Change name, master site and/or installed version.

        Only arguments that are not None are applied.

        Returns:
            A tuple (package, changed), where changed is False when no
                field was given.

        Raises:
            StateError: If 'distname' is unknown or 'new_name' is taken.

        """
        package = self.get(distname)
        changed = False

        if new_name is not None and new_name != distname:
            if new_name in self:
                raise StateError(f"Package already tracked: {new_name!r}")
            del self._packages[distname]
            package.distname = new_name
            changed = True
        if master_site is not None:
            package.master_site = master_site
            changed = True
        if local_version is not None:
            package.local_version = local_version
            changed = True

        if changed:
            self.put(package)
        return package, changed

    def delete(self, distname: str) -> TrackedPackage:
        """Stop tracking a package and return its last record.

        Raises:
            StateError: If the package is not tracked.

        """
        package = self.get(distname)
        del self._packages[distname]
        return package

    def mark_latest(self, distname: str) -> tuple[TrackedPackage, str | None, bool]:
        """Record the upstream version as installed.

        Returns:
            A tuple (package, previous_local_version, changed). changed is
                False if the local version already matched.

        """
        package = self.get(distname)
        previous = package.local_version
        if previous == package.version:
            return package, previous, False
        package.local_version = package.version
        self.put(package)
        return package, previous, True

    def packages(self) -> list[TrackedPackage]:
        """All tracked packages, sorted by name."""
        return [self.get(name) for name in sorted(self._packages)]

    def due_for_check(self, now: datetime, interval: timedelta) -> list[TrackedPackage]:
        """Packages last checked at or before 'now - interval', sorted by name."""
        cutoff = now - interval
        return [p for p in self.packages() if p.last_check <= cutoff]

    def pending_count(self) -> int:
        """Number of packages whose installed version differs from upstream."""
        return sum(1 for p in self.packages() if p.local_version != p.version)


def create_default_state() -> dict[str, Any]:
    """Create a default empty state structure."""
    return {
        "metadata": {
            "vert_version": __version__,
            "schema_version": "1",
            "last_updated": datetime.now(UTC).isoformat(),
        },
        "packages": {},
    }


def load_state(state_file: Path) -> dict[str, Any]:
    """Load state from JSON file.

    Raises:
        FileNotFoundError: If state file doesn't exist.
        json.JSONDecodeError: If file contains invalid JSON.

    """
    with open(state_file, encoding="utf-8") as f:
        return json.load(f)


def save_state(state: dict[str, Any], state_file: Path) -> None:
    """Save state to JSON file with pretty-printing.

    Creates parent directories if needed. Uses 2-space indentation
    and sorted keys for consistent diffs in version control.
    """
    state_file.parent.mkdir(parents=True, exist_ok=True)

    with open(state_file, "w", encoding="utf-8") as f:
        json.dump(state, f, indent=2, sort_keys=True)
        f.write("\n")  # Trailing newline for git
