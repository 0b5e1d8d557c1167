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

"""Core orchestration for vert.

This module ties discovery, comparison and the package store together.

Functions:

- normalize_master_site: Canonical form of a master-site URL
- check_package: Check one package upstream; True if its version changed
- refresh_package: normalize + check + stamp last_check for one package
- check_all: Refresh every package that is due, concurrently

check_package() is the boundary where failures stop. Transport errors,
non-200 responses, malformed JSON and pages without versions are all
logged and reported as "no update" (False). Nothing raises out of it, so
one broken upstream never aborts a run over many packages.

Comparison rules differ by source:

- pypi / github: the API field is authoritative; ANY textual difference
  from the recorded version is an update.
- directory listings: scraped text is untrusted; only a numerically
  greater Version is an update.

Example:
    Check a single package:
        ```python
        from vert.core import check_package
        from vert.package import TrackedPackage

        pkg = TrackedPackage("requests", "https://pypi.org/project/requests", "2.31.0")
        if check_package(pkg):
            print(f"new version {pkg.version}")
        ```

"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

import requests

from vert.discovery import (
    Credentials,
    DiscoveryContext,
    classify_host,
    get_strategy,
)
from vert.discovery.base import Comparison
from vert.exceptions import DecodeError, HTTPStatusError, NetworkError
from vert.io.http import DEFAULT_TIMEOUT, make_session
from vert.logging import Logger, get_global_logger
from vert.package import TrackedPackage, utcnow
from vert.versioning.keys import try_parse_version

if TYPE_CHECKING:
    from vert.state import PackageTracker

LEGACY_PYPI = "pypi.python.org/pypi/"
MODERN_PYPI = "pypi.org/project/"

DEFAULT_MAX_WORKERS = 10
DEFAULT_CHECK_INTERVAL = timedelta(hours=2)


def normalize_master_site(url: str) -> str:
    """Return the canonical form of a master-site URL.

    - All trailing "/" are removed.
    - Legacy "pypi.python.org/pypi/<name>" becomes "pypi.org/project/<name>".

    Applying it twice gives the same result as once.

    Example:
        ```python
        normalize_master_site("https://pypi.python.org/pypi/foo/")
        # 'https://pypi.org/project/foo'
        ```

    """
    return url.rstrip("/").replace(LEGACY_PYPI, MODERN_PYPI)


def is_update(comparison: Comparison, recorded: str, found: str) -> bool:
    """Decide whether 'found' should replace 'recorded'.

    Args:
        comparison: "text" for inequality, "ordered" for strictly greater.
        recorded: Version text currently stored for the package.
        found: Version text just discovered upstream.

    Returns:
        True if the package should be updated to 'found'.

    Note:
        With "ordered", a recorded version that cannot be parsed is
        replaced by any parseable discovered version.

    """
    if comparison == "text":
        return found != recorded

    found_version = try_parse_version(found)
    if found_version is None:
        return False
    recorded_version = try_parse_version(recorded)
    if recorded_version is None:
        return True
    return found_version > recorded_version


def check_package(
    package: TrackedPackage,
    *,
    session: requests.Session | None = None,
    credentials: Credentials | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    logger: Logger | None = None,
) -> bool:
    """Check a package's master site for a new version.

    On success 'package.version' is replaced with the discovered version.
    Never raises for network, HTTP status, decode or parse problems; those
    are logged as warnings and reported as False.

    Args:
        package: Package to check (mutated on update).
        session: HTTP session to reuse; a fresh one is made and closed if
            omitted.
        credentials: Optional GitHub account/token for basic auth.
        timeout: Per-request timeout in seconds.
        logger: Logger for output; defaults to the global logger.

    Returns:
        True if a new version was found and recorded on 'package'.

    """
    if logger is None:
        logger = get_global_logger()
    if session is None:
        with make_session() as own_session:
            return check_package(
                package,
                session=own_session,
                credentials=credentials,
                timeout=timeout,
                logger=logger,
            )

    kind = classify_host(package.master_site)
    if kind is None:
        logger.warning(
            "CHECK",
            f"No domain in master site for {package.distname}: {package.master_site!r}",
        )
        return False

    strategy = get_strategy(kind)
    context = DiscoveryContext(
        session=session,
        credentials=credentials,
        timeout=timeout,
        logger=logger,
    )
    logger.verbose("CHECK", f"{package.distname}: {kind.value} [{package.master_site}]")

    try:
        discovered = strategy.discover(package.master_site, context)
    except HTTPStatusError as err:
        logger.warning("HTTP", f"Status {err.status_code} for {package.distname}")
        return False
    except DecodeError as err:
        logger.warning(
            "JSON",
            f"JSON error for {package.distname} [{package.master_site}]: {err}",
        )
        return False
    except NetworkError as err:
        logger.warning("HTTP", f"Error fetching {package.distname}: {err}")
        return False

    if discovered is None:
        logger.warning("CHECK", f"No version for {package.distname}")
        return False

    if not is_update(strategy.comparison, package.version, discovered.version):
        logger.verbose(
            "CHECK", f"{package.distname} unchanged at {package.version}"
        )
        return False

    logger.info(
        "CHECK",
        f"{package.distname} {package.local_version or '-'} -> {discovered.version}",
    )
    package.version = discovered.version
    return True


def refresh_package(
    package: TrackedPackage,
    *,
    session: requests.Session | None = None,
    credentials: Credentials | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    logger: Logger | None = None,
    now: datetime | None = None,
) -> tuple[bool, bool]:
    """Normalize, check and timestamp one package in place.

    Returns:
        A tuple (site_fixed, changed), where site_fixed tells whether the
            master site was rewritten and changed is check_package()'s
            result.

    """
    if logger is None:
        logger = get_global_logger()

    normalized = normalize_master_site(package.master_site)
    site_fixed = normalized != package.master_site
    if site_fixed:
        logger.verbose(
            "CHECK",
            f"{package.distname}: master site {package.master_site} -> {normalized}",
        )
        package.master_site = normalized

    changed = check_package(
        package,
        session=session,
        credentials=credentials,
        timeout=timeout,
        logger=logger,
    )
    package.last_check = now or utcnow()
    return site_fixed, changed


def check_all(
    tracker: PackageTracker,
    *,
    credentials: Credentials | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    max_workers: int = DEFAULT_MAX_WORKERS,
    interval: timedelta = DEFAULT_CHECK_INTERVAL,
    session: requests.Session | None = None,
    logger: Logger | None = None,
) -> list[str]:
    """Refresh every package not checked within 'interval'.

    Checks run on a thread pool of at most 'max_workers'. Results are
    written back to the tracker on the calling thread, with one progress
    step logged per finished package, and the tracker is saved once at the
    end. A session created here is closed before returning.

    Returns:
        Names of packages whose version changed, sorted.

    """
    if logger is None:
        logger = get_global_logger()
    if session is None:
        with make_session() as own_session:
            return check_all(
                tracker,
                credentials=credentials,
                timeout=timeout,
                max_workers=max_workers,
                interval=interval,
                session=own_session,
                logger=logger,
            )

    now = utcnow()
    due = tracker.due_for_check(now, interval)
    logger.verbose("CHECK", f"{len(due)} package(s) due for check")

    changed: list[str] = []
    if due:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = {
                pool.submit(
                    refresh_package,
                    package,
                    session=session,
                    credentials=credentials,
                    timeout=timeout,
                    logger=logger,
                    now=now,
                ): package
                for package in due
            }
            for done, future in enumerate(as_completed(futures), start=1):
                package = futures[future]
                _, was_changed = future.result()
                tracker.put(package)
                logger.step(done, len(due), f"Checked {package.distname}")
                if was_changed:
                    changed.append(package.distname)

    tracker.save()
    return sorted(changed)
