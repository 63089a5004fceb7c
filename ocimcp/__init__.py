"""OCI MCP — Oracle Cloud Infrastructure resource tools over the Model Context Protocol."""

__version__ = "0.1.0"
