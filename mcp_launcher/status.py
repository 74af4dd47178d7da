"""
One-shot status summary.

A short while after all spawns were issued, prints a table of every server
with its liveness, PID, resident memory and uptime.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

import psutil

from .output import GREEN, RED, LogMultiplexer
from .process import ProcessManager, SupervisedProcess

logger = logging.getLogger(__name__)

RULE = "─" * 45
NAME_WIDTH = 25


def get_memory_mb(pid: Optional[int]) -> Optional[float]:
    """Resident memory of a process in MB, or None if it can't be read."""
    if pid is None:
        return None
    try:
        return psutil.Process(pid).memory_info().rss / 1024 / 1024
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return None


class StatusReporter:
    """Prints the server status table once."""

    def __init__(self, manager: ProcessManager, output: LogMultiplexer, delay: float = 2.0):
        self.manager = manager
        self.output = output
        self.delay = delay
        self.reported = False
        self._handle: Optional[asyncio.TimerHandle] = None

    def schedule(self, loop: asyncio.AbstractEventLoop):
        """Arm the one-shot report."""
        if self._handle is None:
            self._handle = loop.call_later(self.delay, self.report)

    def cancel(self):
        if self._handle is not None:
            self._handle.cancel()

    def format_row(self, record: SupervisedProcess) -> str:
        # Liveness comes from the has-exited flag; exit code 0 means stopped too
        if record.alive:
            status = self.output.paint(GREEN, "✅ Running")
            memory = get_memory_mb(record.pid)
            uptime = f"{(datetime.now() - record.started_at).total_seconds():.0f}s"
        else:
            status = self.output.paint(RED, "❌ Stopped")
            memory = None
            uptime = "-"

        pid = record.pid if record.pid is not None else "-"
        mem = f"{memory:.1f} MB" if memory is not None else "-"
        name = self.output.paint(record.color, record.name.ljust(NAME_WIDTH))
        return f"  {name} {status} (PID: {pid}, MEM: {mem}, UP: {uptime})"

    def report(self):
        """Print the status table."""
        self.reported = True
        self.output.write()
        self.output.write(RULE)
        self.output.write("  📋 MCP Server Status")
        self.output.write(RULE)
        for record in self.manager.processes:
            self.output.write(self.format_row(record))
        self.output.write(RULE)
        self.output.write()
        self.output.write("  Press Ctrl+C to stop all servers.")
        self.output.write()
        logger.debug("Status report printed")
