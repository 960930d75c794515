"""SDK catalog, versions and version matching."""

from .catalog import SdkArchitecture, SdkCatalogEntry, load_catalog, load_catalog_file
from .matcher import RemoteSdk, find_sdk
from .version import VersionInfo

__all__ = [
    "SdkArchitecture",
    "SdkCatalogEntry",
    "load_catalog",
    "load_catalog_file",
    "RemoteSdk",
    "find_sdk",
    "VersionInfo",
]
