"""Raspberry Pi connection registry and persistence."""

from .registry import AuthenticationType, ConnectionRecord, ConnectionRegistry
from .store import (
    ConnectionInfo,
    dumps_connections,
    load_connections,
    loads_connections,
    new_connection,
    save_connections,
)

__all__ = [
    "AuthenticationType",
    "ConnectionRecord",
    "ConnectionRegistry",
    "ConnectionInfo",
    "dumps_connections",
    "loads_connections",
    "load_connections",
    "save_connections",
    "new_connection",
]
