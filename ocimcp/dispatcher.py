"""
Tool-call dispatcher.

Looks a call up in the capability registry, enforces the read-only policy,
runs the matching resource adapter and normalizes every outcome into a
ResultEnvelope.  Per-call errors never escape ``handle``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

import oci

from ocimcp.adapters.base import ResourceAdapter
from ocimcp.envelope import ResultEnvelope
from ocimcp.errors import (
    INVALID_ARGUMENT,
    PERMISSION_DENIED,
    PROVIDER_ERROR,
    UNKNOWN_TOOL,
    InvalidArgumentError,
    UnknownToolError,
)
from ocimcp.tools import CapabilityRegistry

logger = logging.getLogger("oci-mcp.dispatcher")

READ_ONLY_MESSAGE = (
    "Destructive operations are disabled in read-only mode. "
    "Set OCI_MCP_READ_ONLY=false to enable."
)


@dataclass(frozen=True)
class ToolCall:
    name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)


def provider_message(exc: BaseException) -> str:
    """Human-readable text for a provider-side failure."""
    if isinstance(exc, oci.exceptions.ServiceError):
        return f"{exc.status} {exc.code}: {exc.message}"
    return f"{type(exc).__name__}: {exc}"


class Dispatcher:
    """Routes tool calls to adapters.  Holds no per-call state."""

    def __init__(self, registry: CapabilityRegistry, adapters: Mapping[str, ResourceAdapter]):
        self.registry = registry
        self.adapters = adapters

    async def handle(self, call: ToolCall) -> ResultEnvelope:
        try:
            descriptor = self.registry.lookup(call.name)
        except UnknownToolError as e:
            return ResultEnvelope.failure(UNKNOWN_TOOL, str(e), tool=call.name)

        if descriptor.destructive and self.registry.read_only:
            logger.info("Refused destructive tool %s in read-only mode", call.name)
            return ResultEnvelope.failure(PERMISSION_DENIED, READ_ONLY_MESSAGE, tool=call.name)

        adapter = self.adapters.get(descriptor.family)
        if adapter is None:
            return ResultEnvelope.failure(
                UNKNOWN_TOOL, f"No adapter for {descriptor.family} tool: {call.name}", tool=call.name
            )

        try:
            # SDK clients block; keep the event loop free while they run.
            value = await asyncio.to_thread(adapter.handle, call.name, dict(call.arguments or {}))
            return ResultEnvelope.success(value, tool=call.name)
        except InvalidArgumentError as e:
            return ResultEnvelope.failure(INVALID_ARGUMENT, str(e), tool=call.name)
        except UnknownToolError as e:
            return ResultEnvelope.failure(UNKNOWN_TOOL, str(e), tool=call.name)
        except Exception as e:
            logger.warning("Tool execution error for %s: %s", call.name, e)
            return ResultEnvelope.failure(PROVIDER_ERROR, provider_message(e), tool=call.name)
