"""
Pytest configuration and shared fixtures for vert tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
import yaml

from vert.package import TrackedPackage

SUDO_LISTING = """<html>
<head><title>Index of /dist/</title></head>
<body>
<h1>Index of /dist/</h1><hr><pre><a href="../">../</a>
<a href="README">README</a>                                             12-Jun-2022 20:55                7893
<a href="SHA256">SHA256</a>                                             12-Jun-2022 20:57               13753
<a href="SHA256.sig">SHA256.sig</a>                                         12-Jun-2022 20:58                 566
<a href="sudo-1.8.0.tar.gz">sudo-1.8.0.tar.gz</a>                                  25-Feb-2011 19:58             1209024
<a href="sudo-1.8.0.tar.gz.sig">sudo-1.8.0.tar.gz.sig</a>                              04-Dec-2017 22:45                 543
<a href="sudo-1.8.1.tar.gz">sudo-1.8.1.tar.gz</a>                                  09-Apr-2011 15:17             1238495
<a href="sudo-1.8.1.tar.gz.sig">sudo-1.8.1.tar.gz.sig</a>                              04-Dec-2017 22:45                 543
<a href="sudo-1.8.10.tar.gz">sudo-1.8.10.tar.gz</a>                                 10-Mar-2014 12:35             2259801
<a href="sudo-1.8.10.tar.gz.sig">sudo-1.8.10.tar.gz.sig</a>                             04-Dec-2017 22:45                 543
<a href="sudo-1.8.10p1.patch.gz">sudo-1.8.10p1.patch.gz</a>                             13-Mar-2014 21:22                4879
<a href="sudo-1.8.10p1.patch.gz.sig">sudo-1.8.10p1.patch.gz.sig</a>                         04-Dec-2017 22:45                 543
<a href="sudo-1.8.10p1.tar.gz">sudo-1.8.10p1.tar.gz</a>                               13-Mar-2014 21:20             2260994
<a href="sudo-1.8.10p1.tar.gz.sig">sudo-1.8.10p1.tar.gz.sig</a>                           04-Dec-2017 22:45                 543
<a href="sudo-1.8.10p2.patch.gz">sudo-1.8.10p2.patch.gz</a>                             17-Mar-2014 14:33                2692
</body></html>
"""


class RecordingLogger:
    """Logger that keeps every message for assertions."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str, str]] = []

    def step(self, step: int, total: int, message: str) -> None:
        self.messages.append(("step", "", f"[{step}/{total}] {message}"))

    def info(self, prefix: str, message: str) -> None:
        self.messages.append(("info", prefix, message))

    def warning(self, prefix: str, message: str) -> None:
        self.messages.append(("warning", prefix, message))

    def verbose(self, prefix: str, message: str) -> None:
        self.messages.append(("verbose", prefix, message))

    def debug(self, prefix: str, message: str) -> None:
        self.messages.append(("debug", prefix, message))

    def of_level(self, level: str) -> list[str]:
        return [m for lvl, _, m in self.messages if lvl == level]


@pytest.fixture
def sudo_listing() -> str:
    """Provide a real-world Apache directory listing of sudo releases."""
    return SUDO_LISTING


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def make_package():
    """
    Factory fixture for TrackedPackage instances.

    Usage:
        pkg = make_package("sudo", "https://www.sudo.ws/dist", "1.8.1")
    """

    def _make(
        distname: str = "sudo",
        master_site: str = "https://www.sudo.ws/dist",
        version: str = "1.8.1",
        local_version: str | None = "1.8.1",
        last_check: datetime | None = None,
    ) -> TrackedPackage:
        return TrackedPackage(
            distname=distname,
            master_site=master_site,
            version=version,
            local_version=local_version,
            last_check=last_check or datetime(2025, 1, 1, tzinfo=UTC),
        )

    return _make


@pytest.fixture
def state_file(tmp_path: Path) -> Path:
    return tmp_path / "state" / "packages.json"


@pytest.fixture
def create_yaml_file(tmp_path: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("vert.yaml", {"timeout": 5})
    """

    def _create(filename: str, data: Any) -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create
