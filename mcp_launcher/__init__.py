"""
MCP launcher - a local development supervisor for MCP servers.

Spawns the servers listed in .mcp.json, multiplexes their output into one
labeled, color-coded console log and shuts them all down together.
"""

__version__ = "0.1.0"
