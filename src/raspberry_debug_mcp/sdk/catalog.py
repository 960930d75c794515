"""SDK catalog entries and the catalog document loader.

The catalog is the locally cached copy of the periodically refreshed .NET SDK
feed. Each item describes one SDK build for one Raspberry Pi architecture:

    {"Items": [{"Name": "3.1.426", "Version": "3.1.426",
                "Architecture": "ARM32", "IsStandalone": true,
                "Link": "https://...", "SHA512": "..."}]}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import CatalogError
from .version import VersionInfo

logger = logging.getLogger(__name__)


class SdkArchitecture(str, Enum):
    """Raspberry Pi CPU architectures an SDK can target."""

    ARM32 = "arm32"
    ARM64 = "arm64"

    @property
    def runtime(self) -> str:
        """.NET runtime identifier used when publishing for this architecture."""
        return "linux-arm" if self is SdkArchitecture.ARM32 else "linux-arm64"


@dataclass(frozen=True)
class SdkCatalogEntry:
    """One SDK build listed in the catalog."""

    version: VersionInfo
    architecture: SdkArchitecture
    is_standalone: bool
    name: str = ""
    link: str | None = None
    sha512: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.version.raw or str(self.version)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "name": self.display_name,
            "version": self.version.raw or str(self.version),
            "architecture": self.architecture.value,
            "isStandalone": self.is_standalone,
        }
        if self.link:
            result["link"] = self.link
        return result


class SdkCatalogItem(BaseModel):
    """Wire form of a catalog item."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = Field(default=None, alias="Name")
    version: str = Field(alias="Version")
    architecture: SdkArchitecture = Field(alias="Architecture")
    is_standalone: bool = Field(default=False, alias="IsStandalone")
    link: str | None = Field(default=None, alias="Link")
    sha512: str | None = Field(default=None, alias="SHA512")

    @field_validator("architecture", mode="before")
    @classmethod
    def _normalize_architecture(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


def load_catalog(document: str | bytes | dict[str, Any] | list[Any]) -> tuple[SdkCatalogEntry, ...]:
    """Parse a catalog document into entries.

    Accepts the JSON text or an already parsed tree, either the
    ``{"Items": [...]}`` object or a bare list of items. Items that fail
    validation or carry an unparseable version are skipped with a warning.

    Raises:
        CatalogError: If the document is not JSON or has no item list
    """
    if isinstance(document, (str, bytes)):
        try:
            document = json.loads(document)
        except json.JSONDecodeError as e:
            raise CatalogError(f"SDK catalog is not valid JSON: {e}") from e

    if isinstance(document, dict):
        items = document.get("Items", document.get("items"))
    else:
        items = document

    if not isinstance(items, list):
        raise CatalogError("SDK catalog has no item list")

    entries: list[SdkCatalogEntry] = []
    for index, raw_item in enumerate(items):
        try:
            item = SdkCatalogItem.model_validate(raw_item)
        except ValidationError as e:
            logger.warning(f"Skipping SDK catalog item {index}: {e.error_count()} validation error(s)")
            continue

        version = VersionInfo.from_string(item.version)
        if version is None:
            logger.warning(f"Skipping SDK catalog item {index}: bad version '{item.version}'")
            continue

        entries.append(
            SdkCatalogEntry(
                version=version,
                architecture=item.architecture,
                is_standalone=item.is_standalone,
                name=item.name or item.version,
                link=item.link,
                sha512=item.sha512,
            )
        )

    logger.debug(f"Loaded {len(entries)} SDK catalog entries")
    return tuple(entries)


def load_catalog_file(path: str | Path) -> tuple[SdkCatalogEntry, ...]:
    """Read and parse a catalog file.

    Raises:
        CatalogError: If the file cannot be read or parsed
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(f"Failed to read SDK catalog {path}: {e}") from e
    return load_catalog(text)
