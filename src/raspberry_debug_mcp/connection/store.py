"""JSON persistence for the connection registry.

Connections are stored as a JSON list using the field names of the
Visual Studio extension settings, so existing files load unchanged:

    [{"Host": "raspberrypi.local", "Port": 22, "User": "pi",
      "Password": "raspberry", "IsDefault": true}]
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..errors import ConnectionStoreError
from ..files import write_text_atomic
from .registry import DEFAULT_SSH_PORT, DEFAULT_USER, ConnectionRecord, ConnectionRegistry

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "raspberry"


class ConnectionInfo(BaseModel):
    """Persisted form of a connection record."""

    model_config = ConfigDict(populate_by_name=True)

    host: str = Field(alias="Host", min_length=1)
    port: int = Field(alias="Port", ge=1, le=65535)
    user: str = Field(alias="User", min_length=1)
    password: str | None = Field(default=DEFAULT_PASSWORD, alias="Password")
    private_key_path: str | None = Field(default=None, alias="PrivateKeyPath")
    public_key_path: str | None = Field(default=None, alias="PublicKeyPath")
    is_default: bool = Field(alias="IsDefault")

    @classmethod
    def from_record(cls, record: ConnectionRecord) -> ConnectionInfo:
        return cls(
            host=record.host,
            port=record.port,
            user=record.user,
            password=record.password,
            private_key_path=record.private_key_path,
            public_key_path=record.public_key_path,
            is_default=record.is_default,
        )

    def to_record(self) -> ConnectionRecord:
        return ConnectionRecord(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            private_key_path=self.private_key_path,
            public_key_path=self.public_key_path,
            is_default=self.is_default,
        )


_CONNECTION_LIST = TypeAdapter(list[ConnectionInfo])


def dumps_connections(registry: ConnectionRegistry) -> str:
    """Serialize connections in registry order."""
    infos = [ConnectionInfo.from_record(record) for record in registry]
    payload = _CONNECTION_LIST.dump_python(infos, by_alias=True, mode="json")
    return json.dumps(payload, indent=2)


def loads_connections(text: str | bytes) -> ConnectionRegistry:
    """Parse serialized connections into a registry.

    Only the first record marked as default keeps the flag.

    Raises:
        ConnectionStoreError: If the text is not a valid connection list
    """
    try:
        infos = _CONNECTION_LIST.validate_json(text)
    except ValidationError as e:
        raise ConnectionStoreError(f"Invalid connection list: {e}") from e

    records: list[ConnectionRecord] = []
    default_seen = False
    for info in infos:
        record = info.to_record()
        if record.is_default:
            if default_seen:
                logger.warning(f"Clearing extra default flag on connection {record.name}")
                record = replace(record, is_default=False)
            default_seen = True
        records.append(record)

    return ConnectionRegistry(records)


def load_connections(path: str | Path) -> ConnectionRegistry:
    """Load connections from a file. A missing file gives an empty registry."""
    path = Path(path)
    if not path.is_file():
        logger.info(f"No connection store at {path}, starting empty")
        return ConnectionRegistry()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConnectionStoreError(f"Failed to read {path}: {e}") from e
    return loads_connections(text)


def save_connections(registry: ConnectionRegistry, path: str | Path) -> None:
    """Write connections to a file, replacing it atomically."""
    write_text_atomic(path, dumps_connections(registry))
    logger.debug(f"Saved {len(registry)} connections to {path}")


def new_connection(
    host: str,
    port: int = DEFAULT_SSH_PORT,
    user: str = DEFAULT_USER,
    password: str | None = DEFAULT_PASSWORD,
    private_key_path: str | None = None,
    public_key_path: str | None = None,
    is_default: bool = False,
) -> ConnectionRecord:
    """Validate connection fields the same way a stored record is validated.

    Raises:
        ConnectionStoreError: If a field is invalid
    """
    try:
        info = ConnectionInfo(
            host=host,
            port=port,
            user=user,
            password=password,
            private_key_path=private_key_path,
            public_key_path=public_key_path,
            is_default=is_default,
        )
    except ValidationError as e:
        raise ConnectionStoreError(f"Invalid connection: {e}") from e
    return info.to_record()
