"""
Custodian - Command Line Entry Point

Usage:
    custodian [IMPORT_ROOT ...] DEST

Every IMPORT_ROOT is a pack whose Custodianfile can be pulled in with a
``(from "<name>")`` step. DEST is the project whose own Custodianfile is
applied.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from custodian.executor import Action
from custodian.logging_setup import configure_logging
from custodian.session import Session

logger = logging.getLogger(__name__)

console = Console()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="custodian",
        description="Apply template packs to a project directory.",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="Import pack roots followed by the destination directory",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a table of performed actions when done",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override CUSTODIAN_LOG_LEVEL (DEBUG, INFO, WARNING, ...)",
    )
    return parser


def _exception_handler(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    """Log asynchronous failures nobody awaited."""
    logger.error(
        "Unhandled exception in %s: %s",
        context.get("future") or context.get("task"),
        context.get("exception") or context.get("message"),
    )


async def _run(session: Session, imports: Sequence[str], dest: str) -> None:
    asyncio.get_running_loop().set_exception_handler(_exception_handler)
    await session.run(imports, dest)


def _print_summary(actions: List[Action]) -> None:
    table = Table(title="Custodian", show_header=True)
    table.add_column("Action", style="cyan")
    table.add_column("Source", style="dim")
    table.add_column("Destination", style="green")

    for action in actions:
        table.add_row(action.kind, action.src or "", action.dest or "")

    console.print(table)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = _build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if not args.paths:
        console.print("Need at least one input")
        return 0

    *imports, dest = args.paths
    session = Session()

    try:
        asyncio.run(_run(session, imports, dest))
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received")
        return 1
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1

    if args.summary:
        _print_summary(session.actions)
    return 0


if __name__ == "__main__":
    sys.exit(main())
