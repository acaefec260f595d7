"""Walrus MCP server - decentralized blob storage as MCP tools and resources."""

__version__ = "1.0.0"
