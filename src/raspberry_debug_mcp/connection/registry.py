"""Named Raspberry Pi connections with a single default."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Final

from ..errors import NoDefaultConnection, UnknownConnection

logger = logging.getLogger(__name__)

DEFAULT_SSH_PORT: Final[int] = 22
DEFAULT_USER: Final[str] = "pi"


class AuthenticationType(str, Enum):
    """How a connection authenticates with the Raspberry Pi."""

    PASSWORD = "password"
    PUBLIC_KEY = "public-key"


@dataclass(frozen=True)
class ConnectionRecord:
    """SSH connection details for one Raspberry Pi."""

    host: str
    port: int = DEFAULT_SSH_PORT
    user: str = DEFAULT_USER
    password: str | None = None
    private_key_path: str | None = None
    public_key_path: str | None = None
    is_default: bool = False

    @property
    def name(self) -> str:
        """Connection identity, ``user@host``."""
        return f"{self.user}@{self.host}"

    @property
    def sort_key(self) -> str:
        return self.name.lower()

    @property
    def authentication(self) -> AuthenticationType:
        if self.private_key_path:
            return AuthenticationType.PUBLIC_KEY
        return AuthenticationType.PASSWORD

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output. Secrets are not included."""
        result: dict[str, Any] = {
            "name": self.name,
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "authentication": self.authentication.value,
            "isDefault": self.is_default,
        }
        if self.private_key_path:
            result["privateKeyPath"] = self.private_key_path
        if self.public_key_path:
            result["publicKeyPath"] = self.public_key_path
        return result


RegistryListener = Callable[["ConnectionRegistry"], None]


class ConnectionRegistry:
    """Ordered set of connections keyed by ``user@host``.

    At most one record is the default. Every mutation replaces records under a
    lock so the new default and the cleared flags become visible together;
    listeners are called synchronously once the lock is released.
    """

    def __init__(self, records: list[ConnectionRecord] | None = None):
        self._records: list[ConnectionRecord] = []
        self._lock = threading.Lock()
        self._listeners: list[RegistryListener] = []
        for record in records or []:
            self._insert(record)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, name: object) -> bool:
        return any(record.name == name for record in self._records)

    def __iter__(self) -> Iterator[ConnectionRecord]:
        """Iterate in insertion order."""
        return iter(list(self._records))

    def add_listener(self, listener: RegistryListener) -> None:
        """Register a callback invoked after each mutation."""
        self._listeners.append(listener)

    def remove_listener(self, listener: RegistryListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _index_of(self, name: str) -> int:
        for index, record in enumerate(self._records):
            if record.name == name:
                return index
        return -1

    def _insert(self, record: ConnectionRecord) -> None:
        records = list(self._records)
        if record.is_default:
            records = [replace(r, is_default=False) if r.is_default else r for r in records]

        index = next((i for i, r in enumerate(records) if r.name == record.name), -1)
        if index >= 0:
            records[index] = record
        else:
            records.append(record)
        self._records = records

    def add(self, record: ConnectionRecord) -> None:
        """Add a connection, replacing any existing one with the same name."""
        with self._lock:
            self._insert(record)
        logger.debug(f"Connection added: {record.name}")
        self._notify()

    def remove(self, name: str) -> bool:
        """Remove a connection. Returns True if found."""
        with self._lock:
            index = self._index_of(name)
            if index < 0:
                return False
            self._records = self._records[:index] + self._records[index + 1 :]
        logger.debug(f"Connection removed: {name}")
        self._notify()
        return True

    def get(self, name: str) -> ConnectionRecord | None:
        index = self._index_of(name)
        return self._records[index] if index >= 0 else None

    def list(self) -> tuple[ConnectionRecord, ...]:
        """Snapshot of the connections ordered by case-insensitive name."""
        with self._lock:
            return tuple(sorted(self._records, key=lambda r: r.sort_key))

    def set_default(self, name: str) -> ConnectionRecord:
        """Make the named connection the only default.

        Raises:
            UnknownConnection: If no connection has that name
        """
        with self._lock:
            if self._index_of(name) < 0:
                raise UnknownConnection(name)
            self._records = [replace(r, is_default=(r.name == name)) for r in self._records]
            default = self._records[self._index_of(name)]
        logger.debug(f"Default connection: {name}")
        self._notify()
        return default

    @property
    def default(self) -> ConnectionRecord | None:
        return next((r for r in self._records if r.is_default), None)

    def resolve(self, name: str | None = None) -> ConnectionRecord:
        """Find the connection to debug against.

        Args:
            name: Connection name, empty or None selects the default

        Raises:
            UnknownConnection: If a name is given and not found
            NoDefaultConnection: If no name is given and there is no default
        """
        if name:
            record = self.get(name)
            if record is None:
                raise UnknownConnection(name)
            return record

        default = self.default
        if default is None:
            raise NoDefaultConnection()
        return default
