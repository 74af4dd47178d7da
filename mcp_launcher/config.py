"""
Configuration for the MCP launcher.

Loads settings from environment variables with sensible defaults. A local
.env file is honored. These settings only tune the launcher itself; child
processes always inherit the full environment plus their own overlay.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


@dataclass
class Config:
    """Launcher configuration."""

    # Server definitions
    config_path: Path = Path(os.environ.get("MCP_CONFIG_PATH", ".mcp.json"))

    # Timers (seconds)
    status_delay: float = float(os.environ.get("MCP_STATUS_DELAY", "2.0"))
    shutdown_grace: float = float(os.environ.get("MCP_SHUTDOWN_GRACE", "0.5"))

    # Logging
    log_level: str = os.environ.get("MCP_LOG_LEVEL", "WARNING")
    log_file: Path = None
    log_max_bytes: int = int(os.environ.get("LOG_MAX_BYTES", str(10 * 1024 * 1024)))  # 10MB
    log_backup_count: int = int(os.environ.get("LOG_BACKUP_COUNT", "5"))

    # Console
    color: bool = not os.environ.get("NO_COLOR")

    def __post_init__(self):
        """Resolve optional paths."""
        log_file = os.environ.get("MCP_LOG_FILE")
        if self.log_file is None and log_file:
            self.log_file = Path(log_file).expanduser()


config = Config()
