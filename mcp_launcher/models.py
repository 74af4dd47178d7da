"""
Data models for the MCP launcher.

Server definitions are read from the `mcpServers` object of an .mcp.json
document and are immutable once loaded. Filters narrow the configured set
down to the servers that actually get spawned.
"""

from enum import Enum
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ServerDefinition(BaseModel):
    """A named, declarative description of one subprocess to launch."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Unique server name (key in mcpServers)")
    command: Optional[str] = Field(None, description="Executable path or name")
    args: list[str] = Field(default_factory=list, description="Ordered command arguments")
    env: dict[str, str] = Field(default_factory=dict, description="Environment overlay")

    @field_validator("args", mode="before")
    @classmethod
    def _stringify_args(cls, value):
        if value is None:
            return []
        if isinstance(value, list):
            return [str(arg) for arg in value]
        return value

    @field_validator("env", mode="before")
    @classmethod
    def _stringify_env(cls, value):
        if value is None:
            return {}
        if isinstance(value, dict):
            # JSON booleans become "true"/"false"; null leaves the inherited value alone
            return {
                str(key): (str(val).lower() if isinstance(val, bool) else str(val))
                for key, val in value.items()
                if val is not None
            }
        return value

    def command_line(self) -> str:
        """Render the command and its arguments for display."""
        return " ".join([self.command or "<missing command>", *self.args])

    def build_env(self, base: Mapping[str, str]) -> dict[str, str]:
        """Overlay this definition's env on top of `base`; definition wins."""
        env = dict(base)
        env.update(self.env)
        return env


class FilterMode(Enum):
    ONLY = "only"
    EXCLUDE = "exclude"


class Filter(BaseModel):
    """Inclusion or exclusion rule over configured server names."""

    model_config = ConfigDict(frozen=True)

    mode: FilterMode
    names: frozenset[str] = Field(default_factory=frozenset)

    def accepts(self, name: str) -> bool:
        if self.mode is FilterMode.ONLY:
            return name in self.names
        return name not in self.names
