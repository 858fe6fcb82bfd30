"""DuraCube contract-review knowledge server (MCP over HTTP)."""

__version__ = "1.0.0"
