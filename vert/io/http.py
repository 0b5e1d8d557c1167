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

"""HTTP read helpers for vert.

Every upstream check is a single GET. This module owns the session
defaults and converts the three ways a GET can go wrong into distinct
exceptions:

- Transport failure (DNS, refused connection, timeout) -> NetworkError
- Completed request with a status other than 200 -> HTTPStatusError
- 200 response whose body is not JSON -> DecodeError (via get_json)

Design notes:

- **No retries.** Sessions mount no retry adapter. A failed check is
  reported as "no update" and the next scheduled run tries again.
- **One shared session.** make_session() is called once per run and the
  session is shared read-only across concurrent checks.
"""

from __future__ import annotations

from typing import Any

import requests

from vert.exceptions import DecodeError, HTTPStatusError, NetworkError

DEFAULT_TIMEOUT = 30
USER_AGENT = "Version-Tracker"


def make_session() -> requests.Session:
    """Create a requests.Session with vert's default headers.

    - Accept: application/json, which JSON APIs honour and HTML servers
      ignore.
    - A fixed User-Agent; api.github.com rejects requests without one.
    """
    s = requests.Session()
    s.headers.update(
        {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
    )
    return s


def fetch(
    session: requests.Session,
    url: str,
    *,
    headers: dict[str, str] | None = None,
    auth: tuple[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> requests.Response:
    """Issue a GET and insist on HTTP 200.

    Args:
        session: Session to send the request with.
        url: URL to fetch.
        headers: Extra headers merged over the session defaults.
        auth: Optional (user, password) pair for HTTP basic auth.
        timeout: Per-request timeout in seconds.

    Returns:
        The successful response.

    Raises:
        HTTPStatusError: If the server answered with any status but 200.
        NetworkError: On connection, DNS, timeout or other transport errors.

    """
    try:
        response = session.get(url, headers=headers, auth=auth, timeout=timeout)
    except requests.exceptions.RequestException as err:
        raise NetworkError(f"Failed to fetch {url}: {err}") from err

    if response.status_code != requests.codes.ok:
        raise HTTPStatusError(response.status_code, url, response.reason or "")
    return response


def get_json(
    session: requests.Session,
    url: str,
    *,
    headers: dict[str, str] | None = None,
    auth: tuple[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Any:
    """GET a URL and decode the body as JSON.

    Raises:
        HTTPStatusError: On a non-200 status.
        NetworkError: On transport errors.
        DecodeError: If the body is not valid JSON.

    """
    response = fetch(session, url, headers=headers, auth=auth, timeout=timeout)
    try:
        return response.json()
    except ValueError as err:
        raise DecodeError(f"Invalid JSON from {url}: {err}") from err
