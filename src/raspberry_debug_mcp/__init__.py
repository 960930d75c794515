"""Remote target resolution for debugging .NET applications on a Raspberry Pi."""

__version__ = "0.1.0"
