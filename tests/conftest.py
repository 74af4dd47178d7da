import io
import json
import sys

import pytest

from mcp_launcher.models import ServerDefinition
from mcp_launcher.output import LogMultiplexer


@pytest.fixture
def write_config(tmp_path):
    """Write an .mcp.json document and return its path."""

    def _write(document, name=".mcp.json"):
        path = tmp_path / name
        if isinstance(document, str):
            path.write_text(document)
        else:
            path.write_text(json.dumps(document))
        return path

    return _write


@pytest.fixture
def console():
    """A colorless multiplexer writing into a buffer."""
    buffer = io.StringIO()
    output = LogMultiplexer(stream=buffer, color=False)
    output.lines = lambda: buffer.getvalue().splitlines()
    return output


def python_server(name, code, **kwargs):
    """A server definition that runs `code` with the current interpreter."""
    return ServerDefinition(name=name, command=sys.executable, args=["-c", code], **kwargs)
