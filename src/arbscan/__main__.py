"""
Entry point for a one-shot scan.

Usage:
    python -m arbscan --strategy deep
    arbscan --simulate --json  # if installed via pip

Exit codes:
    0  scan completed (even with no opportunities)
    1  invalid settings
    2  price source unavailable
    3  anchor pair missing from the snapshot
    4  unknown strategy
"""

import argparse
import asyncio
import sys
from collections.abc import Callable

import orjson
from pydantic import ValidationError


# Try to use uvloop for better performance
LOOP_FACTORY: Callable[[], asyncio.AbstractEventLoop] | None
try:
    import uvloop

    LOOP_FACTORY = uvloop.new_event_loop
    UVLOOP_ENABLED = True
except ImportError:
    LOOP_FACTORY = None
    UVLOOP_ENABLED = False


EXIT_OK = 0
EXIT_SETTINGS = 1
EXIT_SOURCE_UNAVAILABLE = 2
EXIT_CONFIGURATION = 3
EXIT_UNKNOWN_STRATEGY = 4


def positive_int(value: str) -> int:
    """Parse a strictly positive integer option."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arbscan",
        description="Scan one exchange snapshot for triangular and cross-pair arbitrage.",
    )
    parser.add_argument(
        "--strategy",
        "-s",
        default=None,
        help="Strategy name (default: configured default strategy)",
    )
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Scan a synthetic snapshot instead of live market data",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for --simulate",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="as_json",
        help="Print the result as JSON",
    )
    parser.add_argument(
        "--top",
        type=positive_int,
        default=None,
        help="Show only the N best opportunities",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success).
    """
    from arbscan.config.settings import get_settings
    from arbscan.core.engine import ScanEngine
    from arbscan.core.errors import ConfigurationError, SourceUnavailable, UnknownStrategyError
    from arbscan.core.types import SnapshotProvider
    from arbscan.market.snapshot import create_provider
    from arbscan.simulation.market import SyntheticSnapshotProvider
    from arbscan.telemetry.logger import setup_logging
    from arbscan.telemetry.reporter import OpportunityTable

    args = build_parser().parse_args(argv)

    # Load settings
    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_SETTINGS

    async_logger = setup_logging(args.log_level or settings.log_level)

    async def run_scan() -> int:
        try:
            config = settings.scan_config(args.strategy)
        except UnknownStrategyError as e:
            print(f"{e} (available: {', '.join(e.available)})", file=sys.stderr)
            return EXIT_UNKNOWN_STRATEGY

        provider: SnapshotProvider = (
            SyntheticSnapshotProvider(seed=args.seed)
            if args.simulate
            else create_provider(settings)
        )
        engine = ScanEngine()

        try:
            result = await engine.run(provider, config, deadline=settings.fetch_deadline_s)
        except SourceUnavailable as e:
            print(f"Source unavailable: {e}", file=sys.stderr)
            return EXIT_SOURCE_UNAVAILABLE
        except ConfigurationError as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            return EXIT_CONFIGURATION
        finally:
            await provider.close()

        if args.as_json:
            payload = result.to_dict()
            if args.top is not None:
                payload["opportunities"] = payload["opportunities"][: args.top]
            sys.stdout.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())
            sys.stdout.write("\n")
        else:
            OpportunityTable().display(result, top=args.top)
        return EXIT_OK

    try:
        with asyncio.Runner(loop_factory=LOOP_FACTORY) as runner:
            return runner.run(run_scan())
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return EXIT_OK
    finally:
        async_logger.stop()


if __name__ == "__main__":
    sys.exit(main())
