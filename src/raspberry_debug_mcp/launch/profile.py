"""Launch profile extraction from a parsed launchSettings.json tree."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Final
from urllib.parse import urlsplit

from ..errors import MalformedArgumentSyntax, MalformedLaunchProfile
from .args import parse_args

logger = logging.getLogger(__name__)

IIS_EXPRESS_PROFILE: Final[str] = "IIS Express"
FALLBACK_WEB_PORT: Final[int] = 5000
DEFAULT_BROWSER_URI: Final[str] = "/"
DEFAULT_SCHEME_PORTS: Final[dict[str, int]] = {"http": 80, "https": 443}


@dataclass(frozen=True)
class LaunchDescriptor:
    """Arguments, environment and web settings for launching a program remotely."""

    command_line_args: tuple[str, ...] = ()
    environment_variables: Mapping[str, str] = field(default_factory=dict)
    is_web_app: bool = False
    web_port: int = 0
    launch_browser: bool = False
    relative_browser_uri: str = DEFAULT_BROWSER_URI

    def __post_init__(self):
        object.__setattr__(
            self, "environment_variables", MappingProxyType(dict(self.environment_variables))
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "commandLineArgs": list(self.command_line_args),
            "environmentVariables": dict(self.environment_variables),
            "isWebApp": self.is_web_app,
            "webPort": self.web_port,
            "launchBrowser": self.launch_browser,
            "relativeBrowserUri": self.relative_browser_uri,
        }


def is_valid_port(port: int | None) -> bool:
    return port is not None and 1 <= port <= 65535


def _to_env_value(value: Any) -> str:
    """Coerce a JSON value to the string stored in an environment variable."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_web_port(application_url: Any) -> int:
    """Extract the listening port from an ``applicationUrl`` value.

    Multiple URLs separated by ``;`` use the first one. Falls back to 5000
    when the value is missing, malformed or its port is out of range.
    """
    if not isinstance(application_url, str) or not application_url.strip():
        return FALLBACK_WEB_PORT

    url = application_url.split(";")[0].strip()
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        logger.debug(f"Unparseable applicationUrl '{application_url}', using {FALLBACK_WEB_PORT}")
        return FALLBACK_WEB_PORT

    if not parts.scheme or not parts.hostname:
        return FALLBACK_WEB_PORT

    if port is None:
        port = DEFAULT_SCHEME_PORTS.get(parts.scheme.lower())

    return port if is_valid_port(port) else FALLBACK_WEB_PORT


def normalize_browser_uri(launch_url: Any) -> str:
    """Reduce an IIS Express ``launchUrl`` to a path and query.

    Absolute URLs keep only their path and query, relative ones are returned
    as given. Empty or unparseable values give ``/``.
    """
    if not isinstance(launch_url, str) or not launch_url:
        return DEFAULT_BROWSER_URI

    try:
        parts = urlsplit(launch_url)
        # Accessing port validates the network location
        _ = parts.port
    except ValueError:
        return DEFAULT_BROWSER_URI

    if not (parts.scheme and parts.netloc):
        return launch_url

    path = parts.path or "/"
    return f"{path}?{parts.query}" if parts.query else path


def _get_object(container: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    value = container.get(key)
    return value if isinstance(value, Mapping) else None


def extract_launch_profile(
    document: Mapping[str, Any] | None,
    profile_name: str,
    *,
    drop_empty_args: bool = False,
) -> LaunchDescriptor:
    """Build the launch descriptor for one profile of a launch settings document.

    Args:
        document: Parsed launchSettings.json, None when the file does not exist
        profile_name: Profile to extract (the project name)
        drop_empty_args: Forwarded to the argument tokenizer

    Returns:
        LaunchDescriptor, with empty defaults when the profile is absent

    Raises:
        MalformedLaunchProfile: If the profile's command line cannot be tokenized
    """
    if not isinstance(document, Mapping):
        return LaunchDescriptor()

    profiles = _get_object(document, "profiles")
    if profiles is None:
        return LaunchDescriptor()

    profile = _get_object(profiles, profile_name)
    if profile is None:
        logger.debug(f"No launch profile named '{profile_name}'")
        return LaunchDescriptor()

    command_line = profile.get("commandLineArgs")
    if command_line is not None and not isinstance(command_line, str):
        command_line = str(command_line)
    try:
        args = parse_args(command_line, drop_empty=drop_empty_args)
    except MalformedArgumentSyntax as e:
        raise MalformedLaunchProfile(
            f"Launch profile '{profile_name}' has invalid commandLineArgs: {e}"
        ) from e

    environment: dict[str, str] = {}
    variables = _get_object(profile, "environmentVariables")
    if variables is not None:
        for name, value in variables.items():
            environment[str(name)] = _to_env_value(value)

    if "iisSettings" not in document:
        return LaunchDescriptor(command_line_args=tuple(args), environment_variables=environment)

    launch_browser = profile.get("launchBrowser")

    browser_uri = DEFAULT_BROWSER_URI
    iis_express = _get_object(profiles, IIS_EXPRESS_PROFILE)
    if iis_express is not None:
        browser_uri = normalize_browser_uri(iis_express.get("launchUrl"))

    return LaunchDescriptor(
        command_line_args=tuple(args),
        environment_variables=environment,
        is_web_app=True,
        web_port=parse_web_port(profile.get("applicationUrl")),
        launch_browser=launch_browser if isinstance(launch_browser, bool) else False,
        relative_browser_uri=browser_uri,
    )
