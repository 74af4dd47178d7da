"""
Coordinated shutdown.

On SIGINT or SIGTERM every live server gets a SIGTERM, then the launcher
waits a fixed grace period and finishes. Children that ignore the signal are
not waited for.
"""

import asyncio
import logging
import signal
from enum import Enum
from typing import Optional

from .output import LogMultiplexer
from .process import ProcessManager

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownState(Enum):
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    TERMINATED = "terminated"


class ShutdownCoordinator:
    """Moves the launcher from RUNNING through SHUTTING_DOWN to TERMINATED."""

    def __init__(self, manager: ProcessManager, output: LogMultiplexer, grace: float = 0.5):
        self.manager = manager
        self.output = output
        self.grace = grace
        self.state = ShutdownState.RUNNING
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._terminated = asyncio.Event()

    def install(self, loop: asyncio.AbstractEventLoop):
        """Route SIGINT and SIGTERM to request_shutdown."""
        self._loop = loop
        for signum in SHUTDOWN_SIGNALS:
            loop.add_signal_handler(signum, self.request_shutdown, signum)

    def uninstall(self):
        if self._loop is None:
            return
        for signum in SHUTDOWN_SIGNALS:
            self._loop.remove_signal_handler(signum)

    def request_shutdown(self, signum: Optional[int] = None):
        """Terminate all live servers and start the grace timer.

        Further requests after the first are ignored.
        """
        if self.state is not ShutdownState.RUNNING:
            logger.debug(f"Shutdown already in progress, ignoring signal {signum}")
            return

        if signum is not None:
            logger.info(f"Received {signal.Signals(signum).name}, shutting down")
        self.state = ShutdownState.SHUTTING_DOWN
        self.manager.close()

        self.output.write()
        self.output.write("⏳ Shutting down servers...")
        for record in self.manager.processes:
            if self.manager.terminate(record):
                self.output.emit(record.name, record.color, "Process terminated.")

        loop = self._loop or asyncio.get_running_loop()
        loop.call_later(self.grace, self._finish)

    def _finish(self):
        self.state = ShutdownState.TERMINATED
        self.output.write("✅ All servers stopped.")
        self.output.write()
        self._terminated.set()

    async def wait(self):
        """Block until the grace period after a shutdown request has elapsed."""
        await self._terminated.wait()
