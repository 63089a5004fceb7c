#!/usr/bin/env python3
"""
OCI MCP Server — CLI entry point.

Usage:
    oci-mcp-server           Serve OCI tools over MCP on stdio
    oci-mcp-server tools     List the tools advertised in the current mode
    oci-mcp-server check     Resolve credentials and authentication, then report

Environment:
    OCI_MCP_READ_ONLY=true   Hide and refuse destructive tools
    OCI_MCP_LOG_LEVEL=INFO   Log level (stderr); default WARNING
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import signal
import sys

from ocimcp.config import LOG_LEVEL_ENV, is_read_only, load_settings
from ocimcp.errors import AuthenticationError, ConfigurationError

logger = logging.getLogger("oci-mcp")


def _configure_logging() -> None:
    # stdout carries the protocol; logs go to stderr only.
    logging.basicConfig(
        level=os.environ.get(LOG_LEVEL_ENV, "WARNING").upper(),
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )


def _fatal(exc: Exception) -> None:
    print(f"oci-mcp-server: {exc}", file=sys.stderr)
    sys.exit(1)


def main() -> None:
    """Dispatch to the appropriate sub-command."""
    args = sys.argv[1:]
    _configure_logging()

    if not args:
        _cmd_serve()
    elif args[0] == "tools":
        _cmd_tools()
    elif args[0] == "check":
        _cmd_check()
    else:
        print(f"Unknown command: {args[0]}", file=sys.stderr)
        print(__doc__, file=sys.stderr)
        sys.exit(1)


# ---------------------------------------------------------------------------
# oci-mcp-server tools
# ---------------------------------------------------------------------------

def _cmd_tools() -> None:
    """Print advertised tool names without touching credentials."""
    from ocimcp.tools import build_tool_definitions

    for definition in build_tool_definitions(is_read_only(os.environ)):
        print(definition["name"])


# ---------------------------------------------------------------------------
# oci-mcp-server check
# ---------------------------------------------------------------------------

def _cmd_check() -> None:
    from ocimcp.auth import select_auth
    from ocimcp.server import describe

    try:
        settings = load_settings()
        auth = select_auth(settings)
    except (ConfigurationError, AuthenticationError) as exc:
        _fatal(exc)
        return
    print(json.dumps(describe(settings, auth), indent=2))


# ---------------------------------------------------------------------------
# oci-mcp-server (serve)
# ---------------------------------------------------------------------------

def _handle_sigterm(signum, frame) -> None:
    logger.info("Received SIGTERM, shutting down")
    sys.exit(0)


def _cmd_serve() -> None:
    from ocimcp.server import create_tool_server, serve

    try:
        settings = load_settings()
        tool_server = create_tool_server(settings)
    except (ConfigurationError, AuthenticationError) as exc:
        _fatal(exc)
        return

    signal.signal(signal.SIGTERM, _handle_sigterm)
    try:
        asyncio.run(serve(tool_server))
    except KeyboardInterrupt:
        logger.info("Received SIGINT, shutting down")
    sys.exit(0)


if __name__ == "__main__":
    main()
