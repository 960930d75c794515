"""Semantic version parsing and ordering for SDK catalog entries."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

# major.minor[.patch[.build]][-prerelease][+metadata]
VERSION_PATTERN = re.compile(
    r"^(\d+)\.(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:-([0-9A-Za-z.-]+))?(?:\+[0-9A-Za-z.-]+)?$"
)


@dataclass(frozen=True, eq=False)
class VersionInfo:
    """Version information with major.minor.patch components.

    Equality and ordering both use sort_key, so 3.1.999 equals 3.1.999.0.
    """

    major: int
    minor: int
    patch: int = 0
    build: int | None = None
    prerelease: str | None = None
    raw: str = field(default="", compare=False)

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.build is not None:
            text += f".{self.build}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        return text

    @property
    def sort_key(self) -> tuple:
        """Key ordering versions numerically; a prerelease sorts before its release."""
        if self.prerelease is None:
            pre: tuple = (1,)
        else:
            pre = (0,) + tuple(
                (0, int(part), "") if part.isdigit() else (1, 0, part)
                for part in self.prerelease.split(".")
            )
        return (self.major, self.minor, self.patch, self.build or 0, pre)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VersionInfo):
            return NotImplemented
        return self.sort_key == other.sort_key

    def __hash__(self) -> int:
        return hash(self.sort_key)

    def __lt__(self, other: VersionInfo) -> bool:
        if not isinstance(other, VersionInfo):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __le__(self, other: VersionInfo) -> bool:
        if not isinstance(other, VersionInfo):
            return NotImplemented
        return self.sort_key <= other.sort_key

    def __gt__(self, other: VersionInfo) -> bool:
        if not isinstance(other, VersionInfo):
            return NotImplemented
        return self.sort_key > other.sort_key

    def __ge__(self, other: VersionInfo) -> bool:
        if not isinstance(other, VersionInfo):
            return NotImplemented
        return self.sort_key >= other.sort_key

    @classmethod
    def from_string(cls, version_str: str) -> VersionInfo | None:
        """Parse version from string like '3.1', '6.0.36' or '8.0.100-rc.2'."""
        if not version_str:
            return None

        match = VERSION_PATTERN.match(version_str.strip())
        if not match:
            return None

        major = int(match.group(1))
        minor = int(match.group(2))
        patch = int(match.group(3)) if match.group(3) else 0
        build = int(match.group(4)) if match.group(4) else None

        return cls(
            major=major,
            minor=minor,
            patch=patch,
            build=build,
            prerelease=match.group(5),
            raw=version_str,
        )
