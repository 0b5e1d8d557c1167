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

"""Extract the newest version from an HTML directory listing.

Directory listings ("Index of /dist/") are untrusted and often malformed,
but every release tarball shows up as an anchor whose href contains the
version. This module scans anchor tags only, tries Version.parse() on each
href, and keeps the maximum.

Parsing uses BeautifulSoup with the stdlib "html.parser" builder and a
SoupStrainer limited to <a> elements, so the tokenizer makes a single
tolerant pass and only anchors are materialized. Text, comments, and
unclosed tags are ignored.

Example:
    Find the latest sudo release:
        ```python
        from vert.versioning.html import find_latest_version

        html = requests.get("https://www.sudo.ws/dist/").text
        latest = find_latest_version(html)
        print(latest)  # e.g. 1.9.15
        ```

"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from bs4 import BeautifulSoup, SoupStrainer

from vert.exceptions import VersionParseError

from .keys import Version


def _keep_all_values(attrs: dict[str, Any], key: str, value: str) -> None:
    """Collect repeated attributes on one tag instead of replacing them."""
    existing = attrs[key]
    if isinstance(existing, list):
        existing.append(value)
    else:
        attrs[key] = [existing, value]


def iter_anchor_hrefs(html: str | bytes) -> Iterator[str]:
    """Yield href values of all <a> tags in document order.

    A tag with several href attributes yields each of them.
    """
    soup = BeautifulSoup(
        html,
        "html.parser",
        parse_only=SoupStrainer("a"),
        on_duplicate_attribute=_keep_all_values,
    )
    for anchor in soup.find_all("a"):
        yield from anchor.get_attribute_list("href", [])


def iter_versions(html: str | bytes) -> Iterator[Version]:
    """Yield every Version parsed from an anchor href; others are skipped."""
    for href in iter_anchor_hrefs(html):
        if not href:
            continue
        try:
            yield Version.parse(href)
        except VersionParseError:
            continue


def find_latest_version(html: str | bytes) -> Version | None:
    """Return the greatest Version linked from 'html'.

    Args:
        html: Page body, as text or raw bytes.

    Returns:
        The maximum version, or None if no href held a version. When
            several hrefs carry the same maximum, the first one wins.

    """
    return max(iter_versions(html), default=None)
