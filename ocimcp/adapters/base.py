"""Shared plumbing for resource adapters."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ocimcp.config import CompartmentScope
from ocimcp.errors import InvalidArgumentError, UnknownToolError


def required(arguments: Mapping[str, Any], key: str, kind: type = str) -> Any:
    """Return a required argument, raising InvalidArgumentError if absent or mistyped."""
    value = arguments.get(key)
    if value is None or value == "":
        raise InvalidArgumentError(f"Missing required argument: {key}")
    if kind is int:
        # JSON numbers arrive as int or float.
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value != int(value):
            raise InvalidArgumentError(f"Argument {key} must be an integer")
        return int(value)
    if not isinstance(value, kind):
        raise InvalidArgumentError(f"Argument {key} must be of type {kind.__name__}")
    return value


def optional(arguments: Mapping[str, Any], key: str) -> Optional[Any]:
    value = arguments.get(key)
    return None if value == "" else value


def flag(arguments: Mapping[str, Any], key: str, default: bool = False) -> bool:
    """Return an optional boolean argument.  Strings such as "false" are rejected."""
    value = arguments.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise InvalidArgumentError(f"Argument {key} must be a boolean")
    return value


class ResourceAdapter:
    """Base for per-family adapters.

    Subclasses implement one method per tool plus ``handle``, which routes a
    tool name to the method through an explicit if/elif chain.
    """

    family = ""

    def __init__(self, scope: CompartmentScope):
        self.scope = scope

    def compartment(self, arguments: Mapping[str, Any]) -> str:
        return self.scope.resolve(optional(arguments, "compartmentId"))

    def handle(self, tool_name: str, arguments: Mapping[str, Any]) -> Any:
        raise NotImplementedError

    def _unknown(self, tool_name: str) -> UnknownToolError:
        return UnknownToolError(f"Unknown {self.family} tool: {tool_name}")
