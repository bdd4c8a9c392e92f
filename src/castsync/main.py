from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from castsync.app import DEFAULT_MAX_ROUNDS, sync_stored_nodes
from castsync.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile castsync node entities")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="Reconcile stored nodes until they settle")
    sync.add_argument(
        "--node",
        dest="node_ids",
        action="append",
        metavar="NODE_ID",
        help="Reconcile only this node (repeatable; defaults to every stored node)",
    )
    sync.add_argument(
        "--max-rounds",
        type=int,
        default=DEFAULT_MAX_ROUNDS,
        help="Stop after this many rounds even if nodes keep changing (default: %(default)s)",
    )
    sync.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every pass at DEBUG level",
    )
    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command == "sync" and parsed_args.max_rounds < 1:
            raise ValueError("--max-rounds must be at least 1")  # noqa: TRY301
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(verbose=parsed_args.verbose)

    try:
        if parsed_args.command == "sync":
            result = sync_stored_nodes(
                node_ids=parsed_args.node_ids,
                max_rounds=parsed_args.max_rounds,
            )
            log.info(
                "Sync finished: rounds=%s, passes=%s, commits=%s, converged=%s",
                result.rounds,
                result.passes,
                result.commits,
                result.converged,
            )
            for node_id, names in result.duplicates.items():
                log.warning("Duplicate entities in node_id=%s: %s", node_id, ", ".join(names))
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    run()
