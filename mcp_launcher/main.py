"""
MCP launcher command-line application.

Reads the server definitions, spawns the selected servers on a single asyncio
event loop, prints a status summary after a short delay and keeps running
until SIGINT or SIGTERM, at which point all children are terminated.
"""

import argparse
import asyncio
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .config import config
from .errors import LauncherError
from .loader import load_servers
from .models import ServerDefinition
from .output import RED, LogMultiplexer
from .process import ProcessManager
from .selector import add_filter_arguments, parse_filter, select
from .shutdown import ShutdownCoordinator, ShutdownState
from .status import StatusReporter

logger = logging.getLogger(__name__)

log_formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def setup_logging(level: str = None, log_file: Path = None):
    """Configure launcher diagnostics. Stdout stays reserved for server output."""
    handlers = []

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(log_formatter)
    handlers.append(console_handler)

    # Rotating file handler
    log_file = log_file or config.log_file
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=config.log_max_bytes,
            backupCount=config.log_backup_count,
        )
        file_handler.setFormatter(log_formatter)
        handlers.append(file_handler)

    logging.basicConfig(
        level=(level or config.log_level).upper(),
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcp-launcher",
        description="Spawn the MCP servers defined in .mcp.json and multiplex their output.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"path to the server definitions (default: {config.config_path})",
    )
    add_filter_arguments(parser)
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="disable ANSI colors",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


async def run(
    definitions: Sequence[ServerDefinition],
    output: LogMultiplexer,
    status_delay: float = None,
    shutdown_grace: float = None,
    install_signals: bool = True,
    on_started=None,
) -> int:
    """Supervise `definitions` until a shutdown is requested. Returns the exit code.

    `on_started` is called with the ShutdownCoordinator once every spawn has
    been issued.
    """
    loop = asyncio.get_running_loop()
    manager = ProcessManager(output)
    reporter = StatusReporter(
        manager,
        output,
        delay=config.status_delay if status_delay is None else status_delay,
    )
    coordinator = ShutdownCoordinator(
        manager,
        output,
        grace=config.shutdown_grace if shutdown_grace is None else shutdown_grace,
    )

    if install_signals:
        coordinator.install(loop)
    try:
        await manager.spawn_all(definitions)
        if coordinator.state is ShutdownState.RUNNING:
            reporter.schedule(loop)
        if on_started is not None:
            on_started(coordinator)
        await coordinator.wait()
    finally:
        reporter.cancel()
        manager.cancel()
        if install_signals:
            coordinator.uninstall()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging()

    output = LogMultiplexer(color=config.color and not args.no_color)
    config_path = args.config or config.config_path

    try:
        servers = load_servers(config_path)
        definitions = select(servers, parse_filter(args))
    except LauncherError as e:
        logger.debug(f"Startup failed: {e!r}")
        print(output.paint(RED, f"❌ {e}"), file=sys.stderr)
        return 1

    return asyncio.run(run(definitions, output))


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()
