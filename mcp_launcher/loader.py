"""
Configuration loader.

Reads an .mcp.json document and returns its server definitions in document
order. Only existence and parseability are checked; a definition without a
command is accepted here and fails when it is spawned.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from .errors import ConfigNotFound, ConfigParseError
from .models import ServerDefinition

logger = logging.getLogger(__name__)

SERVERS_KEY = "mcpServers"


def load_servers(path: Path) -> dict[str, ServerDefinition]:
    """Load server definitions from `path`, keyed by name in document order."""
    path = Path(path)
    if not path.is_file():
        raise ConfigNotFound(path)

    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigParseError(path, str(e)) from e

    if not isinstance(document, dict):
        raise ConfigParseError(path, "top level must be a JSON object")

    raw_servers = document.get(SERVERS_KEY)
    if raw_servers is None:
        raw_servers = {}
    if not isinstance(raw_servers, dict):
        raise ConfigParseError(path, f"'{SERVERS_KEY}' must be a JSON object")

    servers: dict[str, ServerDefinition] = {}
    for name, entry in raw_servers.items():
        if not isinstance(entry, dict):
            raise ConfigParseError(path, f"server '{name}' must be a JSON object")
        try:
            servers[name] = ServerDefinition(
                name=name,
                command=entry.get("command"),
                args=entry.get("args"),
                env=entry.get("env"),
            )
        except ValidationError as e:
            raise ConfigParseError(path, f"server '{name}': {e.errors()[0]['msg']}") from e

    logger.info(f"Loaded {len(servers)} server definition(s) from {path}")
    return servers
