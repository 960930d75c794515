"""Project compatibility evaluation and per-project settings."""

from .evaluator import (
    CompatibilityVerdict,
    ProjectFacts,
    evaluate_project,
    parse_framework_moniker,
)
from .settings import (
    SETTINGS_FILE,
    SETTINGS_FOLDER,
    ProjectSettings,
    ProjectSettingsStore,
    settings_path,
)

__all__ = [
    "CompatibilityVerdict",
    "ProjectFacts",
    "evaluate_project",
    "parse_framework_moniker",
    "ProjectSettings",
    "ProjectSettingsStore",
    "settings_path",
    "SETTINGS_FILE",
    "SETTINGS_FOLDER",
]
