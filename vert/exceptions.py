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

"""Exception hierarchy for vert.

This module defines a custom exception hierarchy that allows library users
to distinguish between different types of errors:

- VersionParseError: A string did not contain a usable version number
- NetworkError: Transport failures and non-success HTTP responses
- DecodeError: A response body did not have the expected JSON shape
- ConfigError: Configuration-related errors (YAML parse, bad values)
- StateError: Package store errors (unknown package, corrupted file)

All exceptions inherit from VertError, allowing users to catch all vert
errors with a single except clause if needed.

Example:
    Telling fetch and decode failures apart:
        ```python
        from vert.discovery import get_strategy
        from vert.exceptions import DecodeError, HTTPStatusError, NetworkError

        try:
            discovered = strategy.discover(url, context)
        except HTTPStatusError as e:
            print(f"Status {e.status_code}")
        except DecodeError as e:
            print(f"JSON error: {e}")
        except NetworkError as e:
            print(f"Network error: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "VertError",
    "VersionParseError",
    "NoDigitFoundError",
    "InsufficientComponentsError",
    "NetworkError",
    "HTTPStatusError",
    "DecodeError",
    "ConfigError",
    "StateError",
]


class VertError(Exception):
    """Base exception for all vert errors."""

    pass


class VersionParseError(VertError, ValueError):
    """Raised when a string cannot be turned into a Version.

    Subclasses ValueError so callers that only care about "bad input"
    can catch the builtin.
    """

    pass


class NoDigitFoundError(VersionParseError):
    """Raised when the input string contains no ASCII digit at all."""

    pass


class InsufficientComponentsError(VersionParseError):
    """Raised when fewer than two numeric components could be decoded.

    This rejects bare numbers ("5") and digit-bearing names that are not
    versions ("SHA256").
    """

    pass


class NetworkError(VertError):
    """Raised for transport-level failures.

    This exception is raised when there are problems with:

    - DNS resolution or connection failures
    - Timeouts
    - Any other requests.RequestException
    """

    pass


class HTTPStatusError(NetworkError):
    """Raised when a request completed with a non-200 status code.

    Attributes:
        status_code: HTTP status returned by the server.
        url: The requested URL.
    """

    def __init__(self, status_code: int, url: str, reason: str = "") -> None:
        self.status_code = status_code
        self.url = url
        self.reason = reason
        detail = f"{status_code} {reason}".strip()
        super().__init__(f"Status {detail} from {url}")


class DecodeError(VertError):
    """Raised when a response body does not decode into the expected shape.

    Distinct from NetworkError: the request succeeded, but the payload is
    not valid JSON or is missing a required field.
    """

    pass


class ConfigError(VertError):
    """Raised for configuration-related errors.

    This exception is raised when there are problems with:

    - YAML parsing (syntax errors, invalid structure)
    - Invalid configuration values
    - Unknown discovery strategies
    """

    pass


class StateError(VertError):
    """Raised for package store errors.

    This exception is raised when there are problems with:

    - Looking up a package that is not tracked
    - Adding a package that is already tracked
    - A corrupted state file
    """

    pass
