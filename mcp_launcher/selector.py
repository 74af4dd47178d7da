"""
Server selection.

Turns the --only / --exclude command-line options into a Filter and applies
it to the configured servers, keeping the document order.
"""

import argparse
import logging
from typing import Mapping, Optional

from .errors import NoServersSelected
from .models import Filter, FilterMode, ServerDefinition

logger = logging.getLogger(__name__)


def add_filter_arguments(parser: argparse.ArgumentParser):
    """Register --only and --exclude. Each takes names up to the next flag."""
    parser.add_argument(
        "--only",
        nargs="*",
        metavar="NAME",
        help="spawn only these servers",
    )
    parser.add_argument(
        "--exclude",
        nargs="*",
        metavar="NAME",
        help="spawn all servers except these",
    )


def parse_filter(args: argparse.Namespace) -> Optional[Filter]:
    """Build the active Filter from parsed arguments, or None for all servers."""
    only = getattr(args, "only", None)
    exclude = getattr(args, "exclude", None)

    if only is not None:
        if exclude is not None:
            logger.warning("Both --only and --exclude given; ignoring --exclude")
        return Filter(mode=FilterMode.ONLY, names=frozenset(only))
    if exclude is not None:
        return Filter(mode=FilterMode.EXCLUDE, names=frozenset(exclude))
    return None


def select(
    servers: Mapping[str, ServerDefinition],
    flt: Optional[Filter] = None,
) -> list[ServerDefinition]:
    """Return the definitions to spawn, in configuration order.

    Names in the filter that are not configured are ignored. Raises
    NoServersSelected when nothing is left.
    """
    if flt is None:
        selected = list(servers.values())
    else:
        selected = [definition for name, definition in servers.items() if flt.accepts(name)]

    if not selected:
        raise NoServersSelected()

    logger.info(f"Selected servers: {', '.join(d.name for d in selected)}")
    return selected
