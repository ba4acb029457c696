"""
Command-line interface for the HTS Supply Collector.
"""

import argparse
import asyncio
import inspect
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from hts_supply_collector import __version__
from hts_supply_collector.clients import create_mirror_client
from hts_supply_collector.collectors import SupplyAggregator
from hts_supply_collector.config import ConfigManager, SupplyConfig
from hts_supply_collector.models.core import AggregationResult
from hts_supply_collector.utils.error_handling import exit_code_for
from hts_supply_collector.utils.structured_logging import logging_manager

logger = logging.getLogger(__name__)

CLXY_SOURCE = "mainnet-public.mirrornode.hedera.com"
CLXY_TOKEN = "0.0.859814"
CLXY_TREASURIES = [
    "0.0.849428", "0.0.859877", "0.0.859897", "0.0.859903",
    "0.0.859906", "0.0.859908", "0.0.859910", "0.0.859911",
]

SUPPLY_USAGE = "hts-supply supply <mirror host> <token id> [ <treasury id> ...]"


def _add_output_arguments(parser):
    parser.add_argument(
        '--format', '-f',
        choices=['csv', 'json'],
        help='Report format (default: from configuration, csv)'
    )
    parser.add_argument(
        '--timeout',
        type=float,
        help='Per-request timeout in seconds (default: wait indefinitely)'
    )
    parser.add_argument(
        '--mock-fixtures',
        metavar='PATH',
        help='Answer requests from a JSON fixture file instead of the network'
    )


def _add_supply_command(subparsers):
    """Add supply command parser."""
    supply_parser = subparsers.add_parser(
        'supply',
        help='Compute the circulating supply of a token',
        description='Query a mirror node for the total supply and all balances of a token, '
                    'excluding treasury holdings from the circulating supply.',
        usage=SUPPLY_USAGE
    )
    supply_parser.add_argument(
        'host',
        nargs='?',
        help='Mirror node host name (default: mirror.host from configuration)'
    )
    supply_parser.add_argument(
        'token',
        nargs='?',
        help='Token ID in shard.realm.num format (default: token.token_id from configuration)'
    )
    supply_parser.add_argument(
        'treasuries',
        nargs='*',
        help='Treasury account IDs whose holdings are not circulating'
    )
    _add_output_arguments(supply_parser)


def _add_clxy_command(subparsers):
    """Add clxy command parser."""
    clxy_parser = subparsers.add_parser(
        'clxy',
        help='Compute the circulating supply of the $CLXY token',
        description=f'Report $CLXY ({CLXY_TOKEN}) balances from {CLXY_SOURCE}.'
    )
    _add_output_arguments(clxy_parser)


def _add_init_command(subparsers):
    """Add init command parser."""
    init_parser = subparsers.add_parser(
        'init',
        help='Write a default configuration file'
    )
    init_parser.add_argument(
        '--force',
        action='store_true',
        help='Overwrite an existing configuration file'
    )


def _add_validate_command(subparsers):
    """Add validate command parser."""
    subparsers.add_parser(
        'validate',
        help='Validate the configuration file'
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="hts-supply",
        description="HTS token circulating supply calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hts-supply supply mainnet-public.mirrornode.hedera.com 0.0.859814 0.0.849428
  hts-supply supply --format json testnet.mirrornode.hedera.com 0.0.1234
  hts-supply clxy                            # $CLXY with its fixed treasuries
  hts-supply init --force                    # Write default config.yaml
  hts-supply validate                        # Validate current configuration
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"hts-supply-collector {__version__}"
    )

    parser.add_argument(
        "--config",
        type=str,
        default="config.yaml",
        help="Path to configuration file (default: config.yaml)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress non-error output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    _add_supply_command(subparsers)
    _add_clxy_command(subparsers)
    _add_init_command(subparsers)
    _add_validate_command(subparsers)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    command_handlers = {
        "supply": supply_command,
        "clxy": clxy_command,
        "init": init_command,
        "validate": validate_command,
    }

    handler = command_handlers[args.command]
    try:
        if inspect.iscoroutinefunction(handler):
            return asyncio.run(handler(args))
        return handler(args)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        return 130
    except Exception as e:
        if args.verbose:
            logger.exception("Command failed")
        print(f"Error: {e}", file=sys.stderr)
        return exit_code_for(e)


def _load_config(args) -> SupplyConfig:
    """Load configuration and set up logging for a command."""
    config = ConfigManager(args.config).load_config()

    if args.quiet:
        level = "ERROR"
    elif args.verbose:
        level = "DEBUG"
    else:
        level = config.logging.level

    logging_manager.setup_logging(
        log_level=level,
        log_file=config.logging.log_file,
        structured_format=config.logging.structured
    )
    return config


async def supply_command(args) -> int:
    """Compute and print the circulating supply of a token."""
    config = _load_config(args)

    host = args.host or config.mirror.host
    if args.token:
        token = args.token
        treasuries = list(args.treasuries)
    else:
        token = config.token.token_id
        treasuries = list(config.token.treasuries)

    if not host or not token:
        print(f"Usage: {SUPPLY_USAGE}", file=sys.stderr)
        return 1

    return await _run_aggregation(args, config, host, token, treasuries)


async def clxy_command(args) -> int:
    """Compute and print the circulating supply of $CLXY."""
    config = _load_config(args)
    return await _run_aggregation(args, config, CLXY_SOURCE, CLXY_TOKEN, CLXY_TREASURIES)


async def _run_aggregation(args, config: SupplyConfig, host: str, token: str,
                           treasuries: List[str]) -> int:
    SupplyAggregator.validate_input(host, token, treasuries)

    mirror_config = config.mirror
    if args.timeout is not None:
        mirror_config = replace(mirror_config, timeout=args.timeout)

    client = create_mirror_client(
        mirror_config,
        use_mock=bool(args.mock_fixtures),
        fixtures_path=args.mock_fixtures
    )
    async with client:
        result = await SupplyAggregator(client).aggregate(host, token, treasuries)

    output_format = args.format or config.output.format
    if output_format == "json":
        print(format_json_report(result))
    else:
        print(format_csv_report(result))
    return 0


def format_csv_report(result: AggregationResult) -> str:
    """
    Render a result in the comma separated console layout.

    Summary rows come first, followed by the treasury and consumer sections,
    each preceded by a blank line and omitted when empty.
    """
    lines = [
        f"Token,{result.token}",
        f"Decimals,{result.decimals}",
        f"Source,{result.source}",
        f"Timestamp,{result.timestamp}",
        f"Total Supply,{result.total_supply}",
        f"Circulating,{result.circulating}",
    ]
    if result.treasury_balances:
        lines.extend(["", "Treasuries"])
        lines.extend(f"{account},{balance}" for account, balance in result.treasury_balances.items())
    if result.consumer_balances:
        lines.extend(["", "Consumers"])
        lines.extend(f"{account},{balance}" for account, balance in result.consumer_balances.items())
    return "\n".join(lines)


def format_json_report(result: AggregationResult) -> str:
    """Render a result as JSON with amounts as decimal strings."""
    return json.dumps(result.to_dict(), indent=2)


def init_command(args) -> int:
    """Write a default configuration file."""
    manager = ConfigManager(args.config)
    if not manager.create_default_config(force=args.force):
        print(f"Configuration file already exists: {manager.config_file_path} (use --force to overwrite)")
        return 1

    print(f"Configuration written to {manager.config_file_path}")
    return 0


def validate_command(args) -> int:
    """Validate the configuration file."""
    manager = ConfigManager(args.config)
    is_valid, errors = manager.validate_config_file()
    if is_valid:
        print(f"Configuration is valid: {manager.config_file_path}")
        return 0

    print(f"Configuration is invalid: {manager.config_file_path}")
    for error in errors:
        print(f"  - {error}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
