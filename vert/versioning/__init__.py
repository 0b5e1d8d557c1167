"""
Version parsing, ordering and extraction utilities for vert.

This package turns loosely formatted strings into comparable numeric
versions and pulls the newest version out of HTML directory listings.

Modules
-------
keys : module
    The Version value type (parse, order, render) and DiscoveredVersion DTO.
html : module
    Anchor-href scraper that returns the maximum Version on a page.

Public API
----------
Version : dataclass
    Immutable numeric version with at least two components.
DiscoveredVersion : dataclass
    Version text found upstream with the strategy that found it.
parse_version : function
    Parse a Version from noisy text; raises on failure.
try_parse_version : function
    Parse a Version from noisy text; returns None on failure.
find_latest_version : function
    Maximum Version among the anchor hrefs of an HTML page.

Examples
--------
    >>> from vert.versioning import Version, parse_version
    >>> parse_version("package-1.2.3.tar.gz")
    Version(components=(1, 2, 3))
    >>> Version((1, 2)) < Version((1, 2, 0)) < Version((1, 2, 1))
    True

Notes
-----
- Pre-release and build metadata are not interpreted: "1.8.10p1" is 1.8.10.
- Comparison is purely numeric and has no network or file I/O.
"""

from .html import find_latest_version
from .keys import (
    DiscoveredVersion,
    Version,
    leading_release_tuple,
    parse_version,
    try_parse_version,
)

__all__ = [
    "DiscoveredVersion",
    "Version",
    "find_latest_version",
    "leading_release_tuple",
    "parse_version",
    "try_parse_version",
]
