"""
Command-line interface for CSV to Elasticsearch imports.

Usage:
    es-importer <csv_file> <index_name> [--host http://localhost:9200] [--batch-size 1000] [--user USER --pass PASS]
"""

import argparse
import sys

from dotenv import load_dotenv

from es_importer.batch.pipeline import BulkImportPipeline
from es_importer.core.config import build_config
from es_importer.core.errors import ImporterError
from es_importer.observability.logger import get_logger, setup_logger
from es_importer.observability.metrics import write_metrics
from es_importer.transport import HttpTransport


logger = get_logger(__name__)


def import_command(args) -> int:
    """
    Execute an import.

    Args:
        args: Parsed command-line arguments

    Returns:
        Process exit status
    """
    config = build_config(
        csv_file=args.csv_file,
        index_name=args.index_name,
        overrides={
            "host": args.host,
            "batch_size": args.batch_size,
            "user": args.user,
            "password": args.password,
            "timeout": args.timeout,
            "log_level": args.log_level,
            "log_format": args.log_format,
        },
        config_path=args.config,
    )
    setup_logger(level=config.log_level, format_type=config.log_format)

    logger.info(f"Importing {config.csv_file} into index '{config.index_name}' at {config.host}")
    transport = HttpTransport(
        target=config.target,
        credentials=config.credentials,
        timeout=config.timeout,
    )
    pipeline = BulkImportPipeline(
        transport=transport,
        index_name=config.index_name,
        batch_size=config.batch_size,
    )

    try:
        result = pipeline.run(config.csv_file)
    finally:
        if args.metrics_file:
            path = write_metrics(args.metrics_file)
            logger.info(f"Metrics written to {path}")

    if result.rejected_batches:
        logger.warning(f"{result.rejected_batches} of {result.batches_sent} batches reported item errors")
    print(result.summary())
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="es-importer",
        description="Upload a CSV file to an Elasticsearch index using the _bulk API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Import into a local cluster
  es-importer data/people.csv people

  # Remote cluster with authentication and smaller batches
  es-importer data/people.csv people --host http://es.internal:9200 \\
      --batch-size 500 --user elastic --pass changeme

  # Settings from a YAML file, bounded socket waits
  es-importer data/people.csv people --config importer.yaml --timeout 30

Environment variables ES_HOST, ES_USER, ES_PASSWORD, ES_BATCH_SIZE,
ES_TIMEOUT, LOG_LEVEL and LOG_FORMAT (also read from a .env file) are used
when the matching flag is not given.
        """
    )

    parser.add_argument("csv_file", help="Path to the CSV file (first row is the header)")
    parser.add_argument("index_name", help="Target index name")
    parser.add_argument(
        "--host",
        default=None,
        help="Cluster base URL, http only (default: http://localhost:9200)"
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Documents per bulk request (default: 1000)"
    )
    parser.add_argument("--user", default=None, help="Basic auth user")
    parser.add_argument("--pass", dest="password", default=None, help="Basic auth password")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Socket timeout in seconds for connect, send and receive (default: wait forever)"
    )
    parser.add_argument("--config", default=None, help="YAML file with an 'importer' section")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: INFO)"
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "text"],
        help="Log format (default: json)"
    )
    parser.add_argument(
        "--metrics-file",
        default=None,
        help="Write Prometheus metrics to this file when the run ends"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    # Configured again once settings are resolved
    setup_logger(level=args.log_level, format_type=args.log_format)

    try:
        return import_command(args)
    except ImporterError as e:
        logger.error(f"Import failed: {e}")
        return 1
    except KeyboardInterrupt:
        print("\n\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
