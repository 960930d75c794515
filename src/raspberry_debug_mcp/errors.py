"""Remote target resolution exceptions."""


class ResolutionError(Exception):
    """Base exception for remote target resolution errors."""

    pass


class MalformedArgumentSyntax(ResolutionError):
    """Raised when a command line has an unterminated quote or dangling escape."""

    pass


class MalformedLaunchProfile(ResolutionError):
    """Raised when a launch profile cannot be extracted."""

    pass


class UnknownConnection(ResolutionError):
    """Raised when a named connection is not in the registry."""

    def __init__(self, name: str):
        super().__init__(f"Connection not found: {name}")
        self.name = name


class NoDefaultConnection(ResolutionError):
    """Raised when no connection is named and none is marked as default."""

    def __init__(self):
        super().__init__("No connection name given and no default connection is configured")


class ConnectionStoreError(Exception):
    """Raised when the persisted connection list cannot be loaded."""

    pass


class CatalogError(Exception):
    """Raised when the SDK catalog document cannot be loaded."""

    pass


class ProjectSettingsError(Exception):
    """Raised when the solution's project settings cannot be loaded."""

    pass
