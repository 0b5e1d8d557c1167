"""
vert - upstream version tracker

A Python CLI and library that follows upstream releases of software
packages and reports when a newer one appears.

vert provides:
  - A tolerant numeric Version type that parses versions out of file
    names, tags and URLs
  - Version discovery from PyPI, GitHub releases, and plain HTML
    directory listings
  - A JSON package store recording upstream and installed versions
  - Concurrent checking of all tracked packages

Quick Start
-----------
Track a package:

    $ vert add sudo --url https://www.sudo.ws/dist --release 1.9.14

Check for new versions:

    $ vert check

For full CLI documentation:

    $ vert --help

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
core : module
    URL normalization, single-package checks and the concurrent driver.
config : package
    YAML configuration and credentials.
discovery : package
    Host classification and per-host discovery strategies.
versioning : package
    Version parsing/ordering and the HTML directory-listing scraper.
io : package
    HTTP session and GET helpers.
state : package
    JSON package store.

Public API
----------
    from vert.core import check_package, normalize_master_site
    from vert.versioning import Version, find_latest_version
    from vert.package import TrackedPackage
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"
__description__ = "Track upstream releases of software packages"

# Re-export commonly used functions for convenience
from vert.core import check_package, normalize_master_site
from vert.package import TrackedPackage
from vert.versioning import DiscoveredVersion, Version, find_latest_version

__all__ = [
    "__version__",
    "__license__",
    "__description__",
    "check_package",
    "normalize_master_site",
    "TrackedPackage",
    "DiscoveredVersion",
    "Version",
    "find_latest_version",
]
