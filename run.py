"""Run the MCP launcher."""

from mcp_launcher.main import cli

if __name__ == "__main__":
    cli()
