"""
Command-line interface for the transfer fan-out tool.

Provides commands for sending a batch of transfers and generating keypairs.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

import structlog
from pydantic import ValidationError

from fanout import __version__
from fanout.config import CommitmentLevel, FanoutConfig, set_config
from fanout.core.endpoint import Endpoint
from fanout.engine.submitter import BatchSummary, submit_batch
from fanout.loader import ConfigError, load_transfer_file
from fanout.reporter import print_report
from fanout.tx.signer import generate_test_keypair, write_keypair

EXIT_OK = 0
EXIT_TRANSFER_FAILED = 1
EXIT_CONFIG_ERROR = 2


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Configure structured logging."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if json_format
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Logs go to stderr so stdout carries only the report
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="fanout",
        description="Send a batch of SOL transfers concurrently",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Send command
    send_parser = subparsers.add_parser("send", help="Submit every transfer in a transfer file")
    send_parser.add_argument(
        "--config",
        default="config.yaml",
        help="Transfer file (default: config.yaml)",
    )
    send_parser.add_argument(
        "--rpc-url",
        help="Override the RPC URL from the transfer file",
    )
    send_parser.add_argument(
        "--commitment",
        choices=[level.value for level in CommitmentLevel],
        help="Commitment level to wait for (default: confirmed)",
    )
    send_parser.add_argument(
        "--timeout",
        type=int,
        help="Confirmation deadline in seconds (default: 60)",
    )
    send_parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    send_parser.add_argument(
        "--log-json",
        action="store_true",
        help="Output logs in JSON format",
    )

    # Keygen command
    keygen_parser = subparsers.add_parser("keygen", help="Generate a new keypair file")
    keygen_parser.add_argument(
        "--outfile",
        required=True,
        help="Path of the keypair file to write",
    )
    keygen_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing file",
    )

    return parser


def build_config(args: argparse.Namespace) -> FanoutConfig:
    """Merge command-line overrides into environment settings."""
    overrides = {}
    if getattr(args, "commitment", None) is not None:
        overrides["commitment"] = CommitmentLevel(args.commitment)
    if getattr(args, "timeout", None) is not None:
        overrides["confirmation_timeout_seconds"] = args.timeout
    if getattr(args, "log_level", None) is not None:
        overrides["log_level"] = args.log_level
    if getattr(args, "log_json", False):
        overrides["log_json"] = True
    return FanoutConfig(**overrides)


async def send_transfers(args: argparse.Namespace, config: FanoutConfig) -> int:
    """Load the transfer file, submit the batch and print the report."""
    try:
        transfer_file = load_transfer_file(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    endpoint = Endpoint.from_config(config, url=args.rpc_url or transfer_file.rpc_url)
    requests = transfer_file.to_requests()

    if not requests:
        print("No transfers configured.")
        return EXIT_OK

    print(f"Sending {len(requests)} transfer(s) via {endpoint.url} ({endpoint.commitment.value})")
    print()

    outcomes = await submit_batch(endpoint, requests)
    print_report(outcomes)

    summary = BatchSummary.from_outcomes(outcomes)
    return EXIT_OK if summary.all_confirmed else EXIT_TRANSFER_FAILED


def generate_keypair(args: argparse.Namespace) -> int:
    """Write a new keypair file and print its public key."""
    path = Path(args.outfile).expanduser()
    if path.exists() and not args.force:
        print(f"Refusing to overwrite {path} (use --force)", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    keypair = generate_test_keypair()
    write_keypair(keypair, str(path))
    print(f"Wrote keypair to {path}")
    print(f"Public key: {keypair.pubkey()}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_CONFIG_ERROR

    try:
        config = build_config(args)
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    set_config(config)
    setup_logging(config.log_level, config.log_json)

    if args.command == "send":
        return asyncio.run(send_transfers(args, config))
    if args.command == "keygen":
        return generate_keypair(args)

    parser.print_help()
    return EXIT_CONFIG_ERROR


if __name__ == "__main__":
    sys.exit(main())
