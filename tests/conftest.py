"""Pytest fixtures for raspberry-debug-mcp tests."""

import pytest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from raspberry_debug_mcp.sdk import SdkArchitecture, SdkCatalogEntry, VersionInfo  # noqa: E402


def make_entry(version: str, architecture=SdkArchitecture.ARM32, is_standalone=True):
    return SdkCatalogEntry(
        version=VersionInfo.from_string(version),
        architecture=architecture,
        is_standalone=is_standalone,
        name=version,
    )


@pytest.fixture
def sample_catalog():
    """Catalog with several 3.1 and 5.0 builds across architectures."""
    return (
        make_entry("3.1.201"),
        make_entry("3.1.999"),
        make_entry("3.1.402"),
        make_entry("3.1.1000", is_standalone=False),
        make_entry("3.1.2000", architecture=SdkArchitecture.ARM64),
        make_entry("5.0.100"),
        make_entry("5.0.103"),
    )


@pytest.fixture
def sample_catalog_document():
    """Catalog document as stored on disk."""
    return {
        "Items": [
            {
                "Name": "3.1.426",
                "Version": "3.1.426",
                "Architecture": "ARM32",
                "IsStandalone": True,
                "Link": "https://download.example/dotnet-sdk-3.1.426-linux-arm.tar.gz",
                "SHA512": "abc123",
            },
            {
                "Name": "6.0.100",
                "Version": "6.0.100",
                "Architecture": "ARM64",
                "IsStandalone": True,
            },
        ]
    }


@pytest.fixture
def sample_launch_settings():
    """ASP.NET style launchSettings.json document."""
    return {
        "iisSettings": {
            "windowsAuthentication": False,
            "anonymousAuthentication": True,
            "iisExpress": {"applicationUrl": "http://localhost:51234", "sslPort": 0},
        },
        "profiles": {
            "IIS Express": {
                "commandName": "IISExpress",
                "launchBrowser": True,
                "launchUrl": "http://localhost:51234/weatherforecast?days=5",
                "environmentVariables": {"ASPNETCORE_ENVIRONMENT": "Development"},
            },
            "WebApp": {
                "commandName": "Project",
                "commandLineArgs": "--urls \"http://*:5002\" -v",
                "launchBrowser": True,
                "applicationUrl": "http://localhost:5002",
                "environmentVariables": {
                    "ASPNETCORE_ENVIRONMENT": "Development",
                    "RETRIES": 3,
                },
            },
        },
    }


@pytest.fixture
def catalog_entry():
    """Factory for catalog entries."""
    return make_entry
