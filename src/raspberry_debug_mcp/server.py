"""MCP Server for Raspberry Pi remote debugging target resolution."""

from __future__ import annotations

import json
import logging

from mcp.server.fastmcp import Context, FastMCP
from pydantic import AnyUrl

from .connection import new_connection
from .launch import parse_args
from .project import ProjectSettings
from .sdk import SdkArchitecture, find_sdk
from .session import RaspberrySession

logger = logging.getLogger(__name__)

CONNECTIONS_URI = "raspberry://connections"
CATALOG_URI = "raspberry://catalog"


def create_server(session: RaspberrySession) -> FastMCP:
    """Create and configure the MCP server.

    Args:
        session: Session whose catalog, connections and project settings
            every tool works against
    """
    mcp = FastMCP("raspberry-debug-mcp")
    registry = session.registry

    async def notify_connections_changed(ctx: Context) -> None:
        """Notify client that the connections resource has changed."""
        try:
            if ctx.session:
                await ctx.session.send_resource_updated(AnyUrl(CONNECTIONS_URI))
        except Exception:
            pass  # Notification failure shouldn't break the tool

    def connection_result(data: dict) -> dict:
        """Successful mutation result, warning when the change was not saved."""
        result = {"success": True, "data": data}
        if session.save_error:
            result["warning"] = session.save_error
        return result

    # ============== Resolution Tools ==============

    @mcp.tool()
    async def evaluate_project(
        project_name: str,
        target_framework_moniker: str,
        output_type: int = 1,
        project_dir: str | None = None,
        unique_name: str | None = None,
        debug_connection_name: str | None = None,
    ) -> dict:
        """
        Check whether a .NET project can be debugged on a Raspberry Pi.

        Resolves the remote SDK, the launch arguments/environment/web settings
        from Properties/launchSettings.json and the target connection.
        isRaspberryCompatible and the connection are independent: a compatible
        project can still report a connectionError. debugEnabled is the project's
        stored remote debugging switch.

        Args:
            project_name: Project name (selects the launch profile)
            target_framework_moniker: e.g. ".NETCoreApp,Version=v3.1"
            output_type: Project output type (1 = executable)
            project_dir: Project directory containing Properties/launchSettings.json
            unique_name: Project unique name for stored project settings
            debug_connection_name: Connection "user@host", default connection if omitted
        """
        try:
            verdict = session.evaluate_project_dir(
                project_dir=project_dir,
                project_name=project_name,
                target_framework_moniker=target_framework_moniker,
                output_type=output_type,
                unique_name=unique_name,
                debug_connection_name=debug_connection_name,
            )
            return {"success": True, "data": verdict.to_dict()}
        except Exception as e:
            return {"success": False, "error": str(e)}

    @mcp.tool()
    async def find_remote_sdk(major: int, minor: int, architecture: str = "arm32") -> dict:
        """
        Find the newest standalone SDK in the catalog for a .NET major.minor version.

        Args:
            major: .NET major version
            minor: .NET minor version
            architecture: "arm32" or "arm64"
        """
        try:
            sdk = find_sdk(session.catalog, major, minor, SdkArchitecture(architecture.lower()))
            return {"success": True, "data": sdk.to_dict() if sdk else None}
        except Exception as e:
            return {"success": False, "error": str(e)}

    @mcp.tool()
    async def tokenize_command_line(command_line: str) -> dict:
        """
        Split a launch profile command line into arguments.

        Args:
            command_line: Shell-style command line with quotes and escapes
        """
        try:
            return {"success": True, "data": parse_args(command_line)}
        except Exception as e:
            return {"success": False, "error": str(e)}

    # ============== Connection Tools ==============

    @mcp.tool()
    async def list_connections() -> dict:
        """List Raspberry Pi connections ordered by name."""
        try:
            return {"success": True, "data": [c.to_dict() for c in registry.list()]}
        except Exception as e:
            return {"success": False, "error": str(e)}

    @mcp.tool()
    async def add_connection(
        ctx: Context,
        host: str,
        port: int = 22,
        user: str = "pi",
        password: str | None = None,
        private_key_path: str | None = None,
        public_key_path: str | None = None,
        is_default: bool = False,
    ) -> dict:
        """
        Add or replace a Raspberry Pi connection.

        A connection with the same user@host is replaced. Making it the default
        clears the default flag on every other connection.
        The change is kept even when the connection file cannot be written; the
        result then carries a warning.

        Args:
            host: Host name or IP address
            port: SSH port
            user: SSH user
            password: SSH password (omit when using a key)
            private_key_path: Private key for key-based authentication
            public_key_path: Matching public key
            is_default: Use this connection when a project names none
        """
        try:
            record = new_connection(
                host=host,
                port=port,
                user=user,
                password=password,
                private_key_path=private_key_path,
                public_key_path=public_key_path,
                is_default=is_default,
            )
            registry.add(record)
            await notify_connections_changed(ctx)
            return connection_result(record.to_dict())
        except Exception as e:
            return {"success": False, "error": str(e)}

    @mcp.tool()
    async def remove_connection(ctx: Context, name: str) -> dict:
        """
        Remove a connection.

        Args:
            name: Connection name, "user@host"
        """
        try:
            removed = registry.remove(name)
            if removed:
                await notify_connections_changed(ctx)
            return connection_result({"removed": removed, "name": name})
        except Exception as e:
            return {"success": False, "error": str(e)}

    @mcp.tool()
    async def set_default_connection(ctx: Context, name: str) -> dict:
        """
        Make a connection the default debug target.

        Args:
            name: Connection name, "user@host"
        """
        try:
            record = registry.set_default(name)
            await notify_connections_changed(ctx)
            return connection_result(record.to_dict())
        except Exception as e:
            return {"success": False, "error": str(e)}

    @mcp.tool()
    async def resolve_connection(name: str | None = None) -> dict:
        """
        Resolve the connection a debug session would use.

        Args:
            name: Connection name, the default connection if omitted
        """
        try:
            return {"success": True, "data": registry.resolve(name).to_dict()}
        except Exception as e:
            return {"success": False, "error": str(e)}

    # ============== Project Settings Tools ==============

    @mcp.tool()
    async def get_project_settings(unique_name: str) -> dict:
        """
        Get the stored remote debugging settings of a project.

        Args:
            unique_name: Project unique name within the solution
        """
        try:
            return {"success": True, "data": session.project_settings.get(unique_name).to_dict()}
        except Exception as e:
            return {"success": False, "error": str(e)}

    @mcp.tool()
    async def update_project_settings(
        unique_name: str,
        enable_remote_debugging: bool = True,
        remote_debug_target: str | None = None,
    ) -> dict:
        """
        Store the remote debugging settings of a project.

        Args:
            unique_name: Project unique name within the solution
            enable_remote_debugging: Whether the project debugs on the Raspberry Pi
            remote_debug_target: Connection name, omit to use the default connection
        """
        try:
            settings = ProjectSettings(
                enable_remote_debugging=enable_remote_debugging,
                remote_debug_target=remote_debug_target or None,
            )
            session.project_settings.set(unique_name, settings)
            session.project_settings.save()
            return {"success": True, "data": settings.to_dict()}
        except Exception as e:
            return {"success": False, "error": str(e)}

    # ============== Resources ==============

    @mcp.resource(CONNECTIONS_URI, mime_type="application/json")
    async def connections_resource() -> str:
        """Configured Raspberry Pi connections (JSON, no passwords).

        Updates when: connections are added, removed or the default changes.
        """
        return json.dumps([c.to_dict() for c in registry.list()], indent=2)

    @mcp.resource(CATALOG_URI, mime_type="application/json")
    async def catalog_resource() -> str:
        """SDK catalog entries loaded for this session (JSON)."""
        return json.dumps([entry.to_dict() for entry in session.catalog], indent=2)

    logger.info("Raspberry Debug MCP Server initialized")
    return mcp
