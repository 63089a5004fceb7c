"""
MCP server wiring.

``ToolServer`` answers ``tools/list`` and ``tools/call`` in plain dicts;
``build_mcp_server`` binds it to the ``mcp`` low-level server and ``serve``
runs that over stdio.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from ocimcp.adapters import build_adapters
from ocimcp.auth import AuthHandle, select_auth
from ocimcp.config import CompartmentScope, Settings
from ocimcp.dispatcher import Dispatcher, ToolCall
from ocimcp.envelope import render
from ocimcp.tools import CapabilityRegistry

logger = logging.getLogger("oci-mcp.server")

SERVER_NAME = "oci-mcp-server"


class ToolCallFailed(Exception):
    """Carries the rendered text of a failed call to the protocol layer."""


class ToolServer:
    def __init__(self, dispatcher: Dispatcher):
        self.dispatcher = dispatcher

    @property
    def registry(self) -> CapabilityRegistry:
        return self.dispatcher.registry

    def list_tools(self) -> list[dict]:
        return [d.definition() for d in self.registry.list_capabilities()]

    async def call_tool(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> dict:
        envelope = await self.dispatcher.handle(ToolCall(name=name, arguments=arguments or {}))
        return render(envelope, name)


def compartment_scope(settings: Settings, auth: AuthHandle) -> CompartmentScope:
    """Default compartment scope; session placeholders borrow the real tenancy from the auth config."""
    creds = settings.credentials
    tenancy = creds.tenancy
    if creds.is_placeholder and auth.tenancy_id:
        tenancy = auth.tenancy_id
    return CompartmentScope(tenancy_id=tenancy, compartment_id=creds.compartment_id)


def create_tool_server(settings: Settings) -> ToolServer:
    """Assemble the server.  Raises AuthenticationError when no auth path works."""
    auth = select_auth(settings)
    scope = compartment_scope(settings, auth)
    adapters = build_adapters(auth, scope)
    registry = CapabilityRegistry(read_only=settings.read_only)
    return ToolServer(Dispatcher(registry, adapters))


def build_mcp_server(tool_server: ToolServer) -> Server:
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def _list_tools() -> list[types.Tool]:
        return [types.Tool(**definition) for definition in tool_server.list_tools()]

    @server.call_tool()
    async def _call_tool(name: str, arguments: Optional[dict]) -> list[types.TextContent]:
        result = await tool_server.call_tool(name, arguments)
        text = result["content"][0]["text"]
        if result.get("isError"):
            # The low-level server reports raised errors with isError set.
            raise ToolCallFailed(text)
        return [types.TextContent(type="text", text=text)]

    return server


async def serve(tool_server: ToolServer) -> None:
    server = build_mcp_server(tool_server)
    names = [t["name"] for t in tool_server.list_tools()]
    logger.info("OCI MCP Server running on stdio (read-only=%s)", tool_server.registry.read_only)
    logger.info("Available tools: %s", ", ".join(names))
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def describe(settings: Settings, auth: AuthHandle) -> dict:
    """Summary printed by ``oci-mcp-server check``."""
    return {
        "credentialSource": settings.credentials.source,
        "authSource": auth.source,
        "region": auth.region or settings.credentials.region,
        "mode": "read-only" if settings.read_only else "read-write",
        "tools": len(CapabilityRegistry(settings.read_only).list_capabilities()),
    }
