# scripts/run_loader.py
"""
Command-line entry point for the Taxi Trip Grid Loader

Usage Examples:
    # Load a trip file into Snowflake with default batching
    python scripts/run_loader.py data/sorted_data.csv

    # Bigger batches, shorter pause between them
    python scripts/run_loader.py data/sorted_data.csv --batch-size 5000 --pause-millis 200

    # Parse and grid the file without touching Snowflake
    python scripts/run_loader.py data/sorted_data.csv --dry-run --output-format json
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.config.settings import settings
from src.loaders.snowflake_loader import SnowflakeTripWriter
from src.loaders.store_writer import InMemoryTripStore
from src.orchestrator.trip_loader import TripLoader
from src.utils.logger import setup_pipeline_logging, get_logger
from src.utils.exceptions import PipelineError, ConfigurationError


def parse_arguments(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description='Taxi Trip Grid Loader',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        'input_file',
        nargs='?',
        default=None,
        help='Trip file to load (default: INPUT_FILE environment variable)'
    )

    parser.add_argument(
        '--batch-size',
        type=int,
        help=f'Trips per flush (default: {settings.loader.batch_size})'
    )

    parser.add_argument(
        '--pause-millis',
        type=int,
        help=f'Pause after each flush in milliseconds (default: {settings.loader.pause_millis})'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=None,
        help=f'Logging level (default: {settings.loader.log_level})'
    )

    parser.add_argument(
        '--log-dir',
        type=str,
        help='Directory for log files (default: console only)'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Load into an in-memory store instead of Snowflake'
    )

    parser.add_argument(
        '--validate-config',
        action='store_true',
        help='Validate configuration and exit'
    )

    parser.add_argument(
        '--output-format',
        choices=['text', 'json'],
        default='text',
        help='Output format (default: text)'
    )

    return parser.parse_args(argv)


def setup_environment(args):
    """Override configuration with command line arguments and set up logging"""
    if args.input_file:
        settings.loader.input_file = Path(args.input_file)

    if args.batch_size is not None:
        settings.loader.batch_size = args.batch_size

    if args.pause_millis is not None:
        settings.loader.pause_millis = args.pause_millis

    if args.log_level:
        settings.loader.log_level = args.log_level

    if args.log_dir:
        settings.loader.log_dir = args.log_dir

    setup_pipeline_logging(log_level=settings.loader.log_level, log_dir=settings.loader.log_dir)


def print_results(result, output_format: str):
    """Print load results"""
    if output_format == 'json':
        print(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        print("=== Load Results ===")
        print(f"Status: {result.status}")
        print(f"Source: {result.source}")
        print(f"Records Loaded: {result.records_loaded:,}")
        print(f"Batches Flushed: {result.batches_flushed:,}")
        print(f"Rejected Lines: {result.error_count:,}")
        print(f"Processing Time: {result.processing_time_seconds:.2f} seconds")

        if result.records_loaded > 0 and result.processing_time_seconds > 0:
            records_per_second = result.records_loaded / result.processing_time_seconds
            print(f"Records per Second: {records_per_second:,.0f}")


def run_load(args) -> int:
    """Build the store writer and loader, run the load, report"""
    logger = get_logger(__name__)

    if args.dry_run:
        store_writer = InMemoryTripStore()
    else:
        store_writer = SnowflakeTripWriter(settings.snowflake)

    with store_writer:
        if not args.dry_run:
            store_writer.create_trip_table()

        loader = TripLoader(
            source_path=settings.loader.input_file,
            store_writer=store_writer,
            batch_size=settings.loader.batch_size,
            pause_seconds=settings.loader.pause_seconds
        )
        result = loader.load()

    print_results(result, args.output_format)

    if result.status == 'completed':
        logger.info("Load completed successfully")
        return 0

    logger.warning(f"Load completed with {result.error_count} rejected lines")
    return 1


def main(argv=None):
    """Main entry point"""
    args = parse_arguments(argv)

    try:
        setup_environment(args)
        logger = get_logger(__name__)

        logger.info("Starting Taxi Trip Grid Loader")
        logger.info(f"Arguments: {vars(args)}")

        problems = settings.validation_errors(require_store=not args.dry_run)
        if settings.loader.input_file is None:
            problems.append("No input file given (argument or INPUT_FILE)")

        if args.validate_config:
            if not problems:
                print("✓ Configuration is valid")
                return 0
            print("✗ Configuration is invalid:")
            for problem in problems:
                print(f"  - {problem}")
            return 1

        if problems:
            raise ConfigurationError("; ".join(problems))

        return run_load(args)

    except ConfigurationError as e:
        print(f"Configuration Error: {e}")
        return 1

    except PipelineError as e:
        print(f"Pipeline Error: {e}")
        return 2

    except KeyboardInterrupt:
        print("\nLoad interrupted by user")
        return 130


if __name__ == '__main__':
    sys.exit(main())
