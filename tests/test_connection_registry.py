"""Tests for the connection registry."""

import threading

import pytest

from raspberry_debug_mcp.connection import (
    AuthenticationType,
    ConnectionRecord,
    ConnectionRegistry,
)
from raspberry_debug_mcp.errors import NoDefaultConnection, UnknownConnection


def defaults(registry: ConnectionRegistry) -> list[str]:
    return [r.name for r in registry if r.is_default]


class TestConnectionRecord:
    """Tests for ConnectionRecord dataclass."""

    def test_defaults(self):
        record = ConnectionRecord(host="raspberrypi.local")

        assert record.port == 22
        assert record.user == "pi"
        assert record.password is None
        assert record.is_default is False
        assert record.name == "pi@raspberrypi.local"

    def test_sort_key_is_case_insensitive(self):
        assert ConnectionRecord(host="PI4", user="Admin").sort_key == "admin@pi4"

    def test_authentication(self):
        assert ConnectionRecord(host="a", password="x").authentication == AuthenticationType.PASSWORD
        keyed = ConnectionRecord(host="a", private_key_path="~/.ssh/id_rsa", public_key_path="~/.ssh/id_rsa.pub")
        assert keyed.authentication == AuthenticationType.PUBLIC_KEY

    def test_to_dict_hides_password(self):
        data = ConnectionRecord(host="a", password="secret", is_default=True).to_dict()
        assert "password" not in data
        assert data == {
            "name": "pi@a",
            "host": "a",
            "port": 22,
            "user": "pi",
            "authentication": "password",
            "isDefault": True,
        }


class TestRegistryMutation:
    """Tests for add/remove/list."""

    def test_add_and_get(self):
        registry = ConnectionRegistry()
        registry.add(ConnectionRecord(host="pi1"))

        assert len(registry) == 1
        assert "pi@pi1" in registry
        assert registry.get("pi@pi1").host == "pi1"
        assert registry.get("pi@missing") is None

    def test_add_same_name_replaces_in_place(self):
        registry = ConnectionRegistry(
            [ConnectionRecord(host="a"), ConnectionRecord(host="b"), ConnectionRecord(host="c")]
        )
        registry.add(ConnectionRecord(host="b", port=2222))

        assert [r.name for r in registry] == ["pi@a", "pi@b", "pi@c"]
        assert registry.get("pi@b").port == 2222

    def test_identity_is_case_sensitive(self):
        registry = ConnectionRegistry([ConnectionRecord(host="Pi")])
        registry.add(ConnectionRecord(host="pi"))

        assert len(registry) == 2
        assert "pi@Pi" in registry
        assert "pi@pi" in registry

    def test_remove(self):
        registry = ConnectionRegistry([ConnectionRecord(host="a"), ConnectionRecord(host="b")])

        assert registry.remove("pi@a") is True
        assert registry.remove("pi@a") is False
        assert [r.name for r in registry] == ["pi@b"]

    def test_list_sorted_case_insensitive(self):
        registry = ConnectionRegistry(
            [
                ConnectionRecord(host="zeta"),
                ConnectionRecord(host="Beta", user="root"),
                ConnectionRecord(host="alpha"),
                ConnectionRecord(host="beta", user="Pi"),
            ]
        )
        assert [r.name for r in registry.list()] == ["pi@alpha", "Pi@beta", "pi@zeta", "root@Beta"]

    def test_list_can_be_iterated_twice(self):
        registry = ConnectionRegistry([ConnectionRecord(host="b"), ConnectionRecord(host="a")])
        connections = registry.list()

        assert [r.name for r in connections] == ["pi@a", "pi@b"]
        assert [r.name for r in connections] == ["pi@a", "pi@b"]
        assert len(connections) == 2

    def test_list_is_a_snapshot(self):
        registry = ConnectionRegistry([ConnectionRecord(host="a")])
        connections = registry.list()
        registry.add(ConnectionRecord(host="b"))

        assert [r.name for r in connections] == ["pi@a"]

    def test_adding_default_clears_others(self):
        registry = ConnectionRegistry([ConnectionRecord(host="a", is_default=True)])
        registry.add(ConnectionRecord(host="b", is_default=True))

        assert defaults(registry) == ["pi@b"]


class TestDefaultConnection:
    """Tests for set_default and resolve."""

    def test_set_default_twice(self):
        registry = ConnectionRegistry([ConnectionRecord(host="a"), ConnectionRecord(host="b")])

        registry.set_default("pi@a")
        registry.set_default("pi@b")

        assert defaults(registry) == ["pi@b"]
        assert registry.resolve(None).name == "pi@b"
        assert registry.resolve("").name == "pi@b"

    def test_set_default_unknown(self):
        registry = ConnectionRegistry([ConnectionRecord(host="a", is_default=True)])

        with pytest.raises(UnknownConnection):
            registry.set_default("pi@missing")
        assert defaults(registry) == ["pi@a"]

    def test_resolve_by_name(self):
        registry = ConnectionRegistry([ConnectionRecord(host="a", is_default=True), ConnectionRecord(host="b")])
        assert registry.resolve("pi@b").host == "b"

    def test_resolve_unknown_name(self):
        registry = ConnectionRegistry([ConnectionRecord(host="a", is_default=True)])
        with pytest.raises(UnknownConnection) as exc_info:
            registry.resolve("pi@missing")
        assert exc_info.value.name == "pi@missing"

    def test_resolve_without_default(self):
        registry = ConnectionRegistry([ConnectionRecord(host="a")])
        with pytest.raises(NoDefaultConnection):
            registry.resolve(None)

    def test_removing_default_leaves_none(self):
        registry = ConnectionRegistry([ConnectionRecord(host="a", is_default=True)])
        registry.remove("pi@a")
        assert registry.default is None

    def test_concurrent_set_default_keeps_single_default(self):
        registry = ConnectionRegistry([ConnectionRecord(host=f"pi{i}") for i in range(20)])

        threads = [
            threading.Thread(target=registry.set_default, args=(f"pi@pi{i}",)) for i in range(20)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(defaults(registry)) == 1


class TestListeners:
    """Tests for change notification."""

    def test_mutations_notify(self):
        calls = []
        registry = ConnectionRegistry()
        registry.add_listener(lambda r: calls.append(len(r)))

        registry.add(ConnectionRecord(host="a"))
        registry.set_default("pi@a")
        registry.remove("pi@a")

        assert calls == [1, 1, 0]

    def test_failed_mutations_do_not_notify(self):
        calls = []
        registry = ConnectionRegistry()
        registry.add_listener(lambda r: calls.append(r))

        registry.remove("pi@missing")
        with pytest.raises(UnknownConnection):
            registry.set_default("pi@missing")

        assert calls == []

    def test_listener_sees_consistent_default(self):
        seen = []
        registry = ConnectionRegistry([ConnectionRecord(host="a", is_default=True), ConnectionRecord(host="b")])
        registry.add_listener(lambda r: seen.append(defaults(r)))

        registry.set_default("pi@b")

        assert seen == [["pi@b"]]

    def test_remove_listener(self):
        calls = []
        listener = calls.append
        registry = ConnectionRegistry()
        registry.add_listener(listener)
        registry.remove_listener(listener)

        registry.add(ConnectionRecord(host="a"))
        assert calls == []
