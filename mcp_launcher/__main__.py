"""
Entry point for running the launcher via `python -m mcp_launcher`.
"""

from .main import cli

if __name__ == "__main__":
    cli()
