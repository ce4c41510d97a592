# main.py

"""Entry point for the price_compare application (CLI or HTTP API)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("price_compare.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_markets = ", ".join(m["label"] for m in Settings.AVAILABLE_MARKETS)

    parser = argparse.ArgumentParser(
        prog="price_compare",
        description="Supermarket price comparison across online markets.",
        epilog=f"Available markets: {valid_markets}",
    )
    parser.add_argument(
        "term",
        nargs="?",
        default=None,
        help="Search term.",
    )
    parser.add_argument(
        "-m",
        "--market",
        default=None,
        help="Search a single market by name (case-insensitive).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--markets",
        action="store_true",
        default=False,
        dest="list_markets",
        help="List the available markets and exit.",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        default=False,
        help="Run the HTTP API instead of a one-off search.",
    )
    parser.add_argument(
        "--host",
        default=Settings.API_HOST,
        help=f"API bind address (default: {Settings.API_HOST}).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=Settings.API_PORT,
        help=f"API port (default: {Settings.API_PORT}).",
    )
    return parser


def _run_search(args: argparse.Namespace) -> None:
    """Run a one-off search and exit."""
    from src.cli.runner import cli_search

    exit_code = asyncio.run(
        cli_search(
            term=args.term,
            market=args.market,
            output_format=args.output_format,
        )
    )
    sys.exit(exit_code)


def _run_list_markets(args: argparse.Namespace) -> None:
    """Print the market registry and exit."""
    from src.cli.runner import list_markets

    sys.exit(list_markets(args.output_format))


def _run_server(args: argparse.Namespace) -> None:
    """Serve the HTTP API."""
    from src.cli.runner import run_server

    try:
        exit_code = run_server(args.host, args.port)
    except Exception:
        logger.critical("Fatal error while serving API", exc_info=True)
        raise
    finally:
        logger.info("price_compare API shutting down")
    sys.exit(exit_code)


def main() -> None:
    """Route to the market list, the API server, or a search."""
    log_file = setup_logging()
    logger.info("price_compare starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.list_markets:
        _run_list_markets(args)
    elif args.serve:
        _run_server(args)
    elif args.term is None:
        parser.error("a search term is required (or use --markets / --serve)")
    else:
        _run_search(args)


if __name__ == "__main__":
    main()
