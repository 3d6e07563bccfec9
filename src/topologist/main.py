#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
import sys
from logging import getLogger
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from topologist import __version__
from topologist.app import build_topology_builder
from topologist.config import (
    ALLOW_DELETE_OPTION,
    BROKERS_OPTION,
    CLIENT_CONFIG_OPTION,
    DRY_RUN_OPTION,
    QUIET_OPTION,
    ConfigurationError,
    configure_logging,
)
from topologist.domain.errors import TopologyValidationError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="topologist",
        description="Reconcile a Kafka cluster with a declarative topology",
    )
    parser.add_argument(
        "--topology",
        required=True,
        help="Topology descriptor file or a directory of descriptors",
    )
    parser.add_argument("--brokers", help="Bootstrap servers (overrides bootstrap.servers)")
    parser.add_argument(
        "--client-config",
        required=True,
        help="Properties file with Kafka admin client and tool settings",
    )
    parser.add_argument(
        "--allow-delete",
        action="store_true",
        help="Delete topics and bindings that are no longer described",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the planned changes without applying them",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not print the cluster state after applying",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(list(argv))


def _options(args: argparse.Namespace) -> dict[str, object]:
    return {
        BROKERS_OPTION: args.brokers,
        CLIENT_CONFIG_OPTION: args.client_config,
        ALLOW_DELETE_OPTION: args.allow_delete,
        DRY_RUN_OPTION: args.dry_run,
        QUIET_OPTION: args.quiet,
    }


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        with build_topology_builder(args.topology, _options(args)) as builder:
            builder.run()
    except (ConfigurationError, TopologyValidationError) as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(2)
    except Exception:
        log.exception("Topology run failed")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
