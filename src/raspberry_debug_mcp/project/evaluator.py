"""Decide whether a project can be debugged on a Raspberry Pi, and with what.

Combines the target framework moniker, the SDK catalog, the project's launch
profile and the connection registry into one CompatibilityVerdict. Nothing is
cached: call evaluate_project() again whenever any input changes.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Final

from ..connection import ConnectionRecord, ConnectionRegistry
from ..errors import NoDefaultConnection, UnknownConnection
from ..launch import LaunchDescriptor, extract_launch_profile
from ..sdk import RemoteSdk, SdkArchitecture, SdkCatalogEntry, VersionInfo, find_sdk

logger = logging.getLogger(__name__)

NET_CORE_FRAMEWORK: Final[str] = ".NETCoreApp"
OUTPUT_TYPE_EXECUTABLE: Final[int] = 1

# Second moniker segment, e.g. "Version=v3.1"
MONIKER_VERSION_PATTERN: Final[re.Pattern[str]] = re.compile(r"^Version=v(\d+(?:\.\d+)+)$")


@dataclass
class ProjectFacts:
    """Raw project properties read from the IDE or project file."""

    target_framework_moniker: str
    output_type: int
    project_name: str
    launch_profile_document: Mapping[str, Any] | None = None
    debug_connection_name: str | None = None
    debug_enabled: bool = True


@dataclass(frozen=True)
class CompatibilityVerdict:
    """Resolved remote debugging configuration for one project."""

    is_net_core_executable: bool = False
    is_supported_sdk_version: bool = False
    target_version: VersionInfo | None = None
    resolved_sdk: RemoteSdk | None = None
    resolved_connection: ConnectionRecord | None = None
    connection_error: str | None = None
    launch: LaunchDescriptor = field(default_factory=LaunchDescriptor)
    # Project setting, reported alongside and never folded into compatibility
    debug_enabled: bool = True

    @property
    def is_raspberry_compatible(self) -> bool:
        return self.is_net_core_executable and self.is_supported_sdk_version

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "isNetCoreExecutable": self.is_net_core_executable,
            "isSupportedSdkVersion": self.is_supported_sdk_version,
            "isRaspberryCompatible": self.is_raspberry_compatible,
            "debugEnabled": self.debug_enabled,
            "targetVersion": str(self.target_version) if self.target_version else None,
            "sdk": self.resolved_sdk.to_dict() if self.resolved_sdk else None,
            "connection": self.resolved_connection.to_dict() if self.resolved_connection else None,
            "connectionError": self.connection_error,
            "launch": self.launch.to_dict(),
        }


def parse_framework_moniker(moniker: str | None) -> tuple[bool, VersionInfo | None]:
    """Split a moniker like ``.NETCoreApp,Version=v3.1``.

    Returns:
        (is .NET Core, target version or None when the version is unreadable)
    """
    segments = (moniker or "").split(",")
    if segments[0] != NET_CORE_FRAMEWORK:
        return False, None

    if len(segments) < 2:
        return True, None

    match = MONIKER_VERSION_PATTERN.match(segments[1].strip())
    if not match:
        logger.debug(f"Unreadable framework version in moniker '{moniker}'")
        return True, None

    return True, VersionInfo.from_string(match.group(1))


def evaluate_project(
    facts: ProjectFacts,
    catalog: Iterable[SdkCatalogEntry],
    registry: ConnectionRegistry,
    architecture: SdkArchitecture = SdkArchitecture.ARM32,
) -> CompatibilityVerdict:
    """Resolve SDK, launch settings and connection for a project.

    Args:
        facts: Project properties
        catalog: SDK catalog entries
        registry: Connections to choose the debug target from
        architecture: Raspberry Pi architecture to match SDKs against

    Returns:
        A new CompatibilityVerdict

    Raises:
        MalformedLaunchProfile: If the project's launch profile is malformed
    """
    is_net_core, target_version = parse_framework_moniker(facts.target_framework_moniker)
    if not is_net_core:
        return CompatibilityVerdict(debug_enabled=facts.debug_enabled)

    is_executable = facts.output_type == OUTPUT_TYPE_EXECUTABLE

    resolved_sdk = None
    if target_version is not None:
        resolved_sdk = find_sdk(catalog, target_version.major, target_version.minor, architecture)
        if resolved_sdk is None:
            logger.debug(
                f"No {architecture.value} SDK for .NET {target_version.major}.{target_version.minor}"
            )

    launch = extract_launch_profile(facts.launch_profile_document, facts.project_name)

    resolved_connection = None
    connection_error = None
    try:
        resolved_connection = registry.resolve(facts.debug_connection_name)
    except (UnknownConnection, NoDefaultConnection) as e:
        connection_error = str(e)

    return CompatibilityVerdict(
        is_net_core_executable=is_executable,
        is_supported_sdk_version=resolved_sdk is not None,
        target_version=target_version,
        resolved_sdk=resolved_sdk,
        resolved_connection=resolved_connection,
        connection_error=connection_error,
        launch=launch,
        debug_enabled=facts.debug_enabled,
    )
