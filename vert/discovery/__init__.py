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

"""Discovery strategies for vert.

This package finds the latest upstream version of a tracked package. The
master-site URL is classified by host and handed to one strategy per host
kind:

Available Strategies:
    pypi : PypiStrategy (HostKind.INDEX)
        Reads "info.version" from the PyPI JSON API. Text comparison.
    github : GithubStrategy (HostKind.RELEASE)
        Reads the latest release tag from the GitHub API. Text comparison.
    directory : DirectoryListingStrategy (HostKind.GENERIC)
        Scrapes anchor hrefs of an HTML listing. Numeric comparison.

Example:
    Discover a version directly:

        from vert.discovery import DiscoveryContext, classify_host, get_strategy
        from vert.io import make_session

        url = "https://pypi.org/project/requests"
        strategy = get_strategy(classify_host(url))
        found = strategy.discover(url, DiscoveryContext(session=make_session()))
        print(found.version)

"""

# Import strategy modules to trigger self-registration
from . import (
    directory,  # noqa: F401
    github,  # noqa: F401
    pypi,  # noqa: F401
)
from .base import (
    Credentials,
    DiscoveryContext,
    DiscoveryStrategy,
    HostKind,
    classify_host,
    get_strategy,
    register_strategy,
)

__all__ = [
    "Credentials",
    "DiscoveryContext",
    "DiscoveryStrategy",
    "HostKind",
    "classify_host",
    "get_strategy",
    "register_strategy",
]
