"""Per-project remote debugging settings stored with the solution.

The file lives at ``<solution>/.vs/raspberry-projects.json`` and maps each
project's unique name to its settings:

    {"App/App.csproj": {"EnableRemoteDebugging": true,
                        "RemoteDebugTarget": "pi@raspberrypi.local"}}

A RemoteDebugTarget of null selects the default connection.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..errors import ProjectSettingsError
from ..files import write_text_atomic

logger = logging.getLogger(__name__)

SETTINGS_FOLDER = ".vs"
SETTINGS_FILE = "raspberry-projects.json"


@dataclass
class ProjectSettings:
    """Remote debugging settings for one project."""

    enable_remote_debugging: bool = True
    remote_debug_target: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "enableRemoteDebugging": self.enable_remote_debugging,
            "remoteDebugTarget": self.remote_debug_target,
        }


class ProjectSettingsInfo(BaseModel):
    """Persisted form of ProjectSettings."""

    model_config = ConfigDict(populate_by_name=True)

    enable_remote_debugging: bool = Field(default=True, alias="EnableRemoteDebugging")
    remote_debug_target: str | None = Field(default=None, alias="RemoteDebugTarget")


_SETTINGS_MAP = TypeAdapter(dict[str, ProjectSettingsInfo])


def settings_path(solution_root: str | Path) -> Path:
    return Path(solution_root) / SETTINGS_FOLDER / SETTINGS_FILE


class ProjectSettingsStore:
    """Settings for all projects of a solution."""

    def __init__(self, path: str | Path | None = None):
        self._path = Path(path) if path else None
        self._projects: dict[str, ProjectSettings] = {}

    @property
    def path(self) -> Path | None:
        return self._path

    def __contains__(self, unique_name: object) -> bool:
        return unique_name in self._projects

    def get(self, unique_name: str) -> ProjectSettings:
        """Settings for a project, or defaults for a project not stored yet.

        Defaults are not added to the store; use set() to keep them.
        """
        settings = self._projects.get(unique_name)
        if settings is None:
            return ProjectSettings()
        return settings

    def set(self, unique_name: str, settings: ProjectSettings) -> None:
        self._projects[unique_name] = settings

    def loads(self, text: str | bytes) -> None:
        """Replace the settings with a serialized settings map.

        Raises:
            ProjectSettingsError: If the text is not a valid settings map
        """
        try:
            infos = _SETTINGS_MAP.validate_json(text)
        except ValidationError as e:
            raise ProjectSettingsError(f"Invalid project settings: {e}") from e

        self._projects = {
            name: ProjectSettings(
                enable_remote_debugging=info.enable_remote_debugging,
                remote_debug_target=info.remote_debug_target or None,
            )
            for name, info in infos.items()
        }

    def dumps(self) -> str:
        payload = {
            name: ProjectSettingsInfo(
                enable_remote_debugging=settings.enable_remote_debugging,
                remote_debug_target=settings.remote_debug_target,
            ).model_dump(by_alias=True)
            for name, settings in self._projects.items()
        }
        return json.dumps(payload, indent=2)

    def load(self) -> None:
        """Load from the store path. A missing file leaves the store empty."""
        if self._path is None or not self._path.is_file():
            return
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise ProjectSettingsError(f"Failed to read {self._path}: {e}") from e
        self.loads(text)
        logger.debug(f"Loaded settings for {len(self._projects)} projects from {self._path}")

    def save(self) -> None:
        if self._path is None:
            return
        write_text_atomic(self._path, self.dumps())
