"""Remote debugging session - holds the inputs shared by every resolution.

One RaspberrySession is created per debugging session and passed to whatever
needs the catalog, the connections or the solution's project settings.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .connection import ConnectionRegistry, load_connections, save_connections
from .errors import MalformedLaunchProfile
from .project import (
    CompatibilityVerdict,
    ProjectFacts,
    ProjectSettingsStore,
    evaluate_project,
    settings_path,
)
from .sdk import SdkArchitecture, SdkCatalogEntry, load_catalog_file

logger = logging.getLogger(__name__)


def read_launch_settings(project_dir: str | Path) -> dict[str, Any] | None:
    """Read ``Properties/launchSettings.json`` from a project directory.

    Returns:
        Parsed document, None if the project has no launch settings

    Raises:
        MalformedLaunchProfile: If the file exists but is not valid JSON
    """
    path = Path(project_dir) / "Properties" / "launchSettings.json"
    if not path.is_file():
        return None
    try:
        # launchSettings.json is often written with a BOM
        return json.loads(path.read_text(encoding="utf-8-sig"))
    except (json.JSONDecodeError, OSError) as e:
        raise MalformedLaunchProfile(f"Cannot read {path}: {e}") from e


class RaspberrySession:
    """Catalog, connections and project settings for one debugging session."""

    def __init__(
        self,
        catalog: tuple[SdkCatalogEntry, ...] = (),
        registry: ConnectionRegistry | None = None,
        project_settings: ProjectSettingsStore | None = None,
        connections_path: str | Path | None = None,
        architecture: SdkArchitecture = SdkArchitecture.ARM32,
    ):
        self._catalog = tuple(catalog)
        self._registry = registry if registry is not None else ConnectionRegistry()
        self._project_settings = project_settings or ProjectSettingsStore()
        self._connections_path = Path(connections_path) if connections_path else None
        self._architecture = architecture
        self._save_error: str | None = None
        self._registry.add_listener(self._on_connections_changed)

    @classmethod
    def open(
        cls,
        connections_path: str | Path | None = None,
        catalog_path: str | Path | None = None,
        solution_root: str | Path | None = None,
        architecture: SdkArchitecture = SdkArchitecture.ARM32,
    ) -> RaspberrySession:
        """Load the session inputs from their files.

        Raises:
            CatalogError, ConnectionStoreError, ProjectSettingsError: If a
                file exists but cannot be parsed
        """
        catalog: tuple[SdkCatalogEntry, ...] = ()
        if catalog_path:
            catalog = load_catalog_file(catalog_path)
        else:
            logger.warning("No SDK catalog configured - no project will have a supported SDK")

        registry = load_connections(connections_path) if connections_path else ConnectionRegistry()

        store = ProjectSettingsStore(settings_path(solution_root) if solution_root else None)
        store.load()

        logger.info(
            f"Session opened: {len(catalog)} catalog entries, {len(registry)} connections"
        )
        return cls(
            catalog=catalog,
            registry=registry,
            project_settings=store,
            connections_path=connections_path,
            architecture=architecture,
        )

    @property
    def catalog(self) -> tuple[SdkCatalogEntry, ...]:
        return self._catalog

    @property
    def registry(self) -> ConnectionRegistry:
        return self._registry

    @property
    def project_settings(self) -> ProjectSettingsStore:
        return self._project_settings

    @property
    def architecture(self) -> SdkArchitecture:
        return self._architecture

    @property
    def save_error(self) -> str | None:
        """Why the last connection change could not be written, None if it was."""
        return self._save_error

    def _on_connections_changed(self, registry: ConnectionRegistry) -> None:
        if self._connections_path is None:
            return
        try:
            save_connections(registry, self._connections_path)
        except OSError as e:
            # The in-memory change stands; the next successful save persists it
            self._save_error = f"Cannot save connections to {self._connections_path}: {e}"
            logger.error(self._save_error)
        else:
            self._save_error = None

    def evaluate(self, facts: ProjectFacts) -> CompatibilityVerdict:
        """Evaluate a project against the current session state."""
        return evaluate_project(facts, self._catalog, self._registry, self._architecture)

    def evaluate_project_dir(
        self,
        project_dir: str | Path | None,
        project_name: str,
        target_framework_moniker: str,
        output_type: int,
        unique_name: str | None = None,
        debug_connection_name: str | None = None,
    ) -> CompatibilityVerdict:
        """Evaluate a project on disk.

        Reads the project's launch settings when a directory is given. With a
        unique name, the solution's project settings supply the remote
        debugging switch and, when no connection is named, the debug target.
        """
        debug_enabled = True
        if unique_name:
            settings = self._project_settings.get(unique_name)
            debug_enabled = settings.enable_remote_debugging
            if debug_connection_name is None:
                debug_connection_name = settings.remote_debug_target

        document = read_launch_settings(project_dir) if project_dir else None

        facts = ProjectFacts(
            target_framework_moniker=target_framework_moniker,
            output_type=output_type,
            project_name=project_name,
            launch_profile_document=document,
            debug_connection_name=debug_connection_name,
            debug_enabled=debug_enabled,
        )
        return self.evaluate(facts)
