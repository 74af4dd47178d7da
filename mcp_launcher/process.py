"""
Process manager for supervised MCP servers.

Spawns one child per server definition on the running event loop, wires its
stdout/stderr into the console multiplexer and reports how it exits. Exits
are observed only: nothing is restarted and siblings are left alone.
"""

import asyncio
import logging
import os
import signal
import subprocess
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from .models import ServerDefinition
from .output import GREEN, RED, LogMultiplexer, color_for_index

logger = logging.getLogger(__name__)

# How long an exited child's pipes may keep draining before its exit is reported
DRAIN_TIMEOUT = 1.0


@dataclass
class SupervisedProcess:
    """A spawned (or failed) server and what is known about it."""

    name: str
    color: str
    definition: ServerDefinition
    process: Optional[asyncio.subprocess.Process] = None
    started_at: datetime = field(default_factory=datetime.now)
    exit_code: Optional[int] = None
    exited: bool = False
    killed: bool = False
    error: Optional[str] = None

    @property
    def pid(self) -> Optional[int]:
        return self.process.pid if self.process else None

    @property
    def alive(self) -> bool:
        return self.process is not None and not self.exited


class ProcessManager:
    """Spawns and tracks the selected servers for one launcher run."""

    def __init__(self, output: LogMultiplexer, base_env=None):
        self.output = output
        self._base_env = base_env
        self._processes: list[SupervisedProcess] = []
        self._tasks: list[asyncio.Task] = []
        self.closing = False

    @property
    def processes(self) -> list[SupervisedProcess]:
        return list(self._processes)

    async def spawn_all(self, definitions: Iterable[ServerDefinition]) -> list[SupervisedProcess]:
        """Spawn every definition in order. Failures are reported per server."""
        definitions = list(definitions)
        self.output.write()
        self.output.write(f"🚀 Spawning {len(definitions)} MCP server(s)...")
        self.output.write()

        for index, definition in enumerate(definitions):
            if self.closing:
                skipped = ", ".join(d.name for d in definitions[index:])
                logger.info(f"Shutdown requested, not spawning: {skipped}")
                break
            await self.spawn(definition, color_for_index(index))
        return self.processes

    async def spawn(self, definition: ServerDefinition, color: str) -> SupervisedProcess:
        """Start one server and hook up its output and exit reporting."""
        record = SupervisedProcess(name=definition.name, color=color, definition=definition)
        self._processes.append(record)

        self.output.emit(record.name, color, f"Command: {definition.command_line()}")

        try:
            if not definition.command:
                raise ValueError("no command configured")
            env = definition.build_env(os.environ if self._base_env is None else self._base_env)
            record.process = await asyncio.create_subprocess_exec(
                definition.command,
                *definition.args,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=env,
            )
        except (OSError, ValueError) as e:
            record.exited = True
            record.error = e.strerror if isinstance(e, OSError) and e.strerror else str(e)
            logger.error(f"Failed to start server {record.name}: {e}")
            self.output.emit(record.name, RED, f"❌ Failed to start: {record.error}")
            return record

        logger.info(f"Started server {record.name} with PID {record.pid}")
        self.output.emit(record.name, color, f"✅ Process started (PID: {record.pid})")

        # A shutdown request may have landed while this spawn was in flight
        if self.closing and self.terminate(record):
            self.output.emit(record.name, color, "Process terminated.")

        readers = [
            asyncio.create_task(
                self.output.pump(record.name, color, record.process.stdout),
                name=f"{record.name}-stdout",
            ),
            asyncio.create_task(
                self.output.pump(record.name, color, record.process.stderr, is_stderr=True),
                name=f"{record.name}-stderr",
            ),
        ]
        self._tasks.extend(readers)
        self._tasks.append(
            asyncio.create_task(self._watch_exit(record, readers), name=f"{record.name}-exit")
        )
        return record

    async def _watch_exit(self, record: SupervisedProcess, readers: list[asyncio.Task]):
        """Record the exit code, let the pipes drain, then report the exit."""
        code = await record.process.wait()
        record.exit_code = code
        record.exited = True
        logger.info(f"Server {record.name} exited with code {code}")

        await asyncio.wait(readers, timeout=DRAIN_TIMEOUT)

        if code == 0:
            self.output.emit(record.name, GREEN, "✅ Exited successfully.")
        elif code < 0:
            self.output.emit(record.name, RED, f"❌ Exited with code {code} ({_signal_name(-code)}).")
        else:
            self.output.emit(record.name, RED, f"❌ Exited with code {code}.")

    def close(self):
        """Stop issuing spawns; servers started from now on are terminated at once."""
        self.closing = True

    def terminate(self, record: SupervisedProcess) -> bool:
        """Send SIGTERM to a live, not yet killed server. Returns True if sent."""
        if not record.alive or record.killed:
            return False
        try:
            record.process.terminate()
        except ProcessLookupError:
            # Exited between the check and the signal
            logger.debug(f"Server {record.name} already gone")
            return False
        record.killed = True
        logger.info(f"Sent SIGTERM to server {record.name} (PID {record.pid})")
        return True

    async def wait_reported(self):
        """Wait until every output pump and exit report has finished."""
        if self._tasks:
            await asyncio.gather(*self._tasks)

    def cancel(self):
        """Cancel outstanding reader and exit-watcher tasks."""
        for task in self._tasks:
            task.cancel()


def _signal_name(signum: int) -> str:
    try:
        return signal.Signals(signum).name
    except ValueError:
        return f"signal {signum}"
