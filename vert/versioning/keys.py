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

"""Core version parsing and ordering for vert.

This module is format-agnostic: it does NOT download or read files.
It only extracts numeric versions from loosely formatted strings
(file names, tag names, URL path segments) and orders them.

Parsing rules:

- Skip everything before the first ASCII digit ("sudo-1.8.0" -> "1.8.0").
- Split the rest on "." and "-".
- Decode tokens as integers left to right, stopping at the first token
  that is not all digits ("1.2.3.tar.gz" -> (1, 2, 3)).
- Require at least two integers, so "SHA256" and "5" are rejected.

Ordering is plain tuple ordering: element-wise, and a strict prefix
sorts first, so (1, 2) < (1, 2, 0) < (1, 2, 1).
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from vert.exceptions import (
    InsufficientComponentsError,
    NoDigitFoundError,
)

_FIRST_DIGIT = re.compile(r"[0-9]")
_SEP = re.compile(r"[.-]")
_NUMBER = re.compile(r"[0-9]+")

# ----------------------------
# Shared DTO
# ----------------------------


@dataclass(frozen=True)
class DiscoveredVersion:
    """Container for a version found upstream.

    Attributes:
        version: Version text as it will be recorded (e.g., "2.0.0").
        source: Strategy that produced it (e.g., "pypi", "github").

    """

    version: str
    source: str


# ----------------------------
# Version value
# ----------------------------


def _decode_components(text: str) -> tuple[int, ...]:
    """Decode the leading run of numeric tokens from 'text'.

    Raises NoDigitFoundError if 'text' has no ASCII digit.
    """
    m = _FIRST_DIGIT.search(text)
    if not m:
        raise NoDigitFoundError(f"no digit found in {text!r}")

    nums: list[int] = []
    for token in _SEP.split(text[m.start() :]):
        if not _NUMBER.fullmatch(token):
            break
        nums.append(int(token))
    return tuple(nums)


@dataclass(frozen=True, order=True)
class Version:
    """A numeric version with at least two components.

    Instances compare by their component tuple, which gives a total
    order. Use Version.parse() for noisy input and the constructor when
    the components are already known.

    Attributes:
        components: Non-negative integers, most significant first.

    Example:
        Parse and compare:
            ```python
            Version.parse("sudo-1.8.10.tar.gz")   # Version((1, 8, 10))
            Version.parse("1.2") < Version((1, 2, 0))   # True
            str(Version((1, 2, 3)))               # "1.2.3"
            ```

    """

    components: tuple[int, ...]

    def __post_init__(self) -> None:
        components = tuple(self.components)
        if len(components) < 2:
            raise InsufficientComponentsError(
                f"a version needs at least two components, got {components!r}"
            )
        for c in components:
            if isinstance(c, bool) or not isinstance(c, int) or c < 0:
                raise InsufficientComponentsError(
                    f"version components must be non-negative integers, "
                    f"got {components!r}"
                )
        object.__setattr__(self, "components", components)

    @classmethod
    def parse(cls, text: str) -> Version:
        """Extract a Version from an arbitrary string.

        Args:
            text: File name, tag, URL segment or any other string.

        Returns:
            The parsed version.

        Raises:
            NoDigitFoundError: If 'text' contains no ASCII digit.
            InsufficientComponentsError: If fewer than two numeric
                components could be decoded.

        """
        nums = _decode_components(text)
        if len(nums) < 2:
            raise InsufficientComponentsError(
                f"fewer than two numeric components in {text!r}"
            )
        return cls(nums)

    def __str__(self) -> str:
        return ".".join(str(c) for c in self.components)


def parse_version(text: str) -> Version:
    """Module-level alias for Version.parse()."""
    return Version.parse(text)


def try_parse_version(text: str) -> Version | None:
    """Like parse_version() but returns None instead of raising."""
    try:
        return Version.parse(text)
    except (NoDigitFoundError, InsufficientComponentsError):
        return None


def leading_release_tuple(text: str) -> tuple[int, ...]:
    """Integers from the start of 'text', split on "." only.

    Unlike Version.parse(), nothing is skipped: "v1.2" yields (). Used for
    the installed-vs-known check, where both sides are plain recorded
    version strings.
    """
    nums: list[int] = []
    for token in text.split("."):
        if not _NUMBER.fullmatch(token):
            break
        nums.append(int(token))
    return tuple(nums)
