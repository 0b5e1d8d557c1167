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

"""Discovery strategy base protocol, host classification and registry.

This module defines the foundational components for the discovery system:

- HostKind: Closed set of upstream kinds a master site can belong to
- classify_host(): Maps a master-site URL to a HostKind
- DiscoveryContext: Read-only inputs shared by all strategies
- DiscoveryStrategy protocol: Interface that all strategies must implement
- Strategy registry: register_strategy() and get_strategy()

Host kinds:

- INDEX (pypi.org): version read from the package index JSON API
- RELEASE (github.com): version read from the latest release tag
- GENERIC (anything else): version scraped from an HTML directory listing

Design Philosophy:
    - Strategies are Protocol classes (structural subtyping, not inheritance)
    - Registration happens at module import time (strategies self-register)
    - Each strategy is stateless and can be instantiated on-demand
    - Each strategy declares how its result is compared with the recorded
      version, so adding a host never touches the reporting code

Example:
    Implementing a custom strategy:
        ```python
        from vert.discovery.base import HostKind, register_strategy
        from vert.versioning import DiscoveredVersion

        class MirrorStrategy:
            comparison = "ordered"

            def discover(self, url, context):
                ...
                return DiscoveredVersion(version="1.2.3", source="mirror")

        register_strategy(HostKind.GENERIC, MirrorStrategy)
        ```

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import ipaddress
from typing import Literal, Protocol
from urllib.parse import urlsplit

import requests

from vert.exceptions import ConfigError
from vert.io.http import DEFAULT_TIMEOUT
from vert.logging import Logger, get_global_logger
from vert.versioning.keys import DiscoveredVersion

Comparison = Literal["text", "ordered"]

# -------------------------------
# Host classification
# -------------------------------


class HostKind(Enum):
    """Upstream source kinds."""

    INDEX = "pypi"
    RELEASE = "github"
    GENERIC = "directory"


_KNOWN_HOSTS: dict[str, HostKind] = {
    "pypi.org": HostKind.INDEX,
    "github.com": HostKind.RELEASE,
}


def domain_of(url: str) -> str | None:
    """Return the domain name of 'url', or None if it has none.

    URLs without a host, unparseable URLs and IP-literal hosts have no
    domain.
    """
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return None
    if not host:
        return None
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return host
    return None


def classify_host(url: str) -> HostKind | None:
    """Classify a master-site URL by its domain.

    Args:
        url: Master-site URL (normalized or not).

    Returns:
        The HostKind, or None when the URL has no domain component.

    Example:
        ```python
        classify_host("https://pypi.org/project/requests")  # HostKind.INDEX
        classify_host("https://github.com/psf/requests")    # HostKind.RELEASE
        classify_host("https://www.sudo.ws/dist")           # HostKind.GENERIC
        classify_host("not a url")                          # None
        ```

    """
    domain = domain_of(url)
    if domain is None:
        return None
    return _KNOWN_HOSTS.get(domain, HostKind.GENERIC)


# -------------------------------
# Shared inputs
# -------------------------------


@dataclass(frozen=True)
class Credentials:
    """Account and token for authenticated release-API requests.

    Attributes:
        account: Account name used as the basic-auth user.
        token: Personal access token used as the password (may be None).

    """

    account: str
    token: str | None = None

    def basic_auth(self) -> tuple[str, str]:
        return (self.account, self.token or "")

    def __repr__(self) -> str:
        return f"Credentials(account={self.account!r}, token=***)"


@dataclass(frozen=True)
class DiscoveryContext:
    """Read-only inputs for one discovery call.

    Attributes:
        session: Shared HTTP session.
        credentials: Optional release-API credentials.
        timeout: Per-request timeout in seconds.
        logger: Logger for debug/verbose output.

    """

    session: requests.Session
    credentials: Credentials | None = None
    timeout: float = DEFAULT_TIMEOUT
    logger: Logger = field(default_factory=get_global_logger)


# -------------------------------
# Strategy Protocol
# -------------------------------


class DiscoveryStrategy(Protocol):
    """Protocol for version discovery strategies.

    Attributes:
        comparison: "text" if any textual difference from the recorded
            version counts as new (authoritative API fields), "ordered"
            if the found version must be numerically greater (scraped
            text).
    """

    comparison: Comparison

    def discover(
        self, url: str, context: DiscoveryContext
    ) -> DiscoveredVersion | None:
        """Find the latest upstream version for a master site.

        Args:
            url: Normalized master-site URL.
            context: Session, credentials, timeout and logger.

        Returns:
            The discovered version, or None if the source had no usable
                version (e.g. a listing with no versioned links).

        Raises:
            NetworkError: On transport errors (HTTPStatusError on non-200).
            DecodeError: If a JSON response has the wrong shape.

        """
        ...


# -------------------------------
# Strategy Registry
# -------------------------------

_STRATEGY_REGISTRY: dict[HostKind, type[DiscoveryStrategy]] = {}


def register_strategy(kind: HostKind, strategy_class: type[DiscoveryStrategy]) -> None:
    """Register the strategy used for a host kind.

    Registering the same kind twice overwrites the previous registration
    (allows monkey-patching for tests).
    """
    _STRATEGY_REGISTRY[kind] = strategy_class


def get_strategy(kind: HostKind) -> DiscoveryStrategy:
    """Get a new strategy instance for a host kind.

    Raises:
        ConfigError: If no strategy is registered for 'kind'.

    """
    if kind not in _STRATEGY_REGISTRY:
        available = ", ".join(k.value for k in _STRATEGY_REGISTRY)
        raise ConfigError(
            f"No discovery strategy for {kind!r}. Available: {available or '(none)'}"
        )
    return _STRATEGY_REGISTRY[kind]()
