"""
Error taxonomy for the OCI MCP server.

Startup errors (configuration, authentication) abort the process.  Per-call
errors are caught at the dispatcher boundary and reported in-band.
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Error kinds reported in result envelopes
# ---------------------------------------------------------------------------

UNKNOWN_TOOL = "UNKNOWN_TOOL"
PERMISSION_DENIED = "PERMISSION_DENIED"
PROVIDER_ERROR = "PROVIDER_ERROR"
INVALID_ARGUMENT = "INVALID_ARGUMENT"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class OCIMCPError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(OCIMCPError):
    """A credential source is missing or malformed."""


class AuthenticationError(OCIMCPError):
    """No authentication path produced a usable handle."""


class UnknownToolError(OCIMCPError):
    """Raised when a tool name matches no capability in any family."""


class InvalidArgumentError(OCIMCPError):
    """A required tool argument is missing or has the wrong type."""


class ProviderContractError(OCIMCPError):
    """The provider response lacks a field that must never be defaulted."""
