"""MCP server that lets AI agents run gcloud commands under an access control list."""

__version__ = "0.1.0"
