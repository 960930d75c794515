"""Match a requested .NET version against the SDK catalog."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .catalog import SdkArchitecture, SdkCatalogEntry
from .version import VersionInfo


@dataclass(frozen=True)
class RemoteSdk:
    """SDK build selected for a remote target."""

    name: str
    architecture: SdkArchitecture
    version: VersionInfo | None = None

    @property
    def runtime(self) -> str:
        return self.architecture.runtime

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "architecture": self.architecture.value,
            "runtime": self.runtime,
        }


def find_sdk(
    catalog: Iterable[SdkCatalogEntry],
    major: int,
    minor: int,
    architecture: SdkArchitecture = SdkArchitecture.ARM32,
) -> RemoteSdk | None:
    """Find the newest standalone SDK for major.minor and an architecture.

    Args:
        catalog: Catalog entries (not modified)
        major: Requested major version
        minor: Requested minor version
        architecture: Target architecture

    Returns:
        RemoteSdk for the highest matching version, None if nothing matches
    """
    best: SdkCatalogEntry | None = None

    for entry in catalog:
        if not entry.is_standalone or entry.architecture != architecture:
            continue
        if entry.version.major != major or entry.version.minor != minor:
            continue
        if best is None or entry.version > best.version:
            best = entry

    if best is None:
        return None

    return RemoteSdk(name=best.display_name, architecture=best.architecture, version=best.version)
