"""
run_checker.py - Main Application Entry Point
==============================================
This is the main script that ties the IFSC checker together.

What it does:
-------------
1. Loads configuration from environment variables (.env file)
2. Reads the input file (Excel or CSV), if one is given
3. Validates every code and fetches bank/branch details for valid ones
4. Writes the results to the output workbook
5. Opens the interactive menu (and/or serves the HTTP endpoint)

Usage:
------
    python -m ifsccheck.run_checker sample.xlsx
    python -m ifsccheck.run_checker sample.xlsx --no-menu
    python -m ifsccheck.run_checker --serve
    python -m ifsccheck.run_checker sample.xlsx --dry-run

Command Line Options:
---------------------
    input_file      : Path to input Excel (.xlsx, .xls) or CSV file (optional)
    --output        : Output workbook (default: IFSC_OUTPUT_FILE or output.xlsx)
    --no-menu       : Exit after the bulk run instead of opening the menu
    --serve         : Also serve POST /validate over HTTP
    --dry-run       : Load and validate input without making API calls
    --debug         : Enable debug logging for troubleshooting
"""

import sys
import logging
import threading
import argparse
from pathlib import Path

import uvicorn

from .api import create_app
from .cache import ResultCache
from .config import Settings, load_settings
from .console import Console
from .loader import load_input_data
from .logging_config import configure_logging
from .lookup import IfscClient
from .processor import process_rows
from .region import RegionSearchClient
from .sink import ResultSink


logger = logging.getLogger(__name__)


# =============================================================================
# COMMAND LINE ARGUMENT PARSING
# =============================================================================

def parse_arguments(argv=None):
    """
    Parse command-line arguments.

    Returns:
        Namespace object with the parsed arguments:
        - input_file: Path to the input file, or None
        - output: Output workbook path, or None for the configured default
        - no_menu, serve, dry_run, debug: Booleans
    """
    parser = argparse.ArgumentParser(
        description='Validate IFSC codes and record bank/branch details',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m ifsccheck.run_checker sample.xlsx
  python -m ifsccheck.run_checker sample.csv --output reports/output.xlsx --no-menu
  python -m ifsccheck.run_checker --serve
        """
    )

    parser.add_argument(
        'input_file',
        nargs='?',
        help='Path to input Excel (.xlsx, .xls) or CSV file; first column holds the codes'
    )
    parser.add_argument(
        '--output',
        help='Output workbook (default: IFSC_OUTPUT_FILE or output.xlsx)'
    )
    parser.add_argument(
        '--no-menu',
        action='store_true',
        help='Do not open the interactive menu'
    )
    parser.add_argument(
        '--serve',
        action='store_true',
        help='Serve POST /validate on IFSC_API_HOST:IFSC_API_PORT'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Load and validate input without making API calls'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    return parser.parse_args(argv)


# =============================================================================
# HTTP SERVER
# =============================================================================

def build_server(settings: Settings, cache: ResultCache, sink: ResultSink, region_client: RegionSearchClient):
    app = create_app(cache, sink, region_client)
    config = uvicorn.Config(app, host=settings.api_host, port=settings.api_port, log_config=None)
    return uvicorn.Server(config)


def start_background_server(server: uvicorn.Server) -> threading.Thread:
    """Run the HTTP server next to the console; both share one cache and one sink."""
    thread = threading.Thread(target=server.run, name="ifsc-api", daemon=True)
    thread.start()
    return thread


# =============================================================================
# MAIN EXECUTION FUNCTION
# =============================================================================

def run_checker(argv=None):
    """
    Main execution logic for the IFSC checker.

    Errors that make the run impossible (bad config, missing or unreadable
    input/output file) are logged and exit with status 1. Ctrl+C during the
    bulk run saves the rows processed so far.
    """
    args = parse_arguments(argv)
    configure_logging(logging.DEBUG if args.debug else logging.INFO)

    ifsc_client = None
    region_client = None

    try:
        # ---------------------------------------------------------------------
        # STEP 1: Load configuration and open the output workbook
        # ---------------------------------------------------------------------
        settings = load_settings()
        output_path = Path(args.output or settings.output_file)
        logger.info(f"IFSC directory: {settings.lookup_url}")
        logger.info(f"Output workbook: {output_path}")

        sink = ResultSink(output_path)

        ifsc_client = IfscClient.from_settings(settings)
        region_client = RegionSearchClient.from_settings(settings)
        cache = ResultCache(ifsc_client)

        # ---------------------------------------------------------------------
        # STEP 2: Bulk run over the input file
        # ---------------------------------------------------------------------
        if args.input_file:
            logger.info(f"Reading {args.input_file}...")
            rows = load_input_data(args.input_file, settings.input_header_row)
            logger.info(f"Loaded {len(rows)} rows")

            if args.dry_run:
                valid = sum(1 for row in rows if cache.get_or_validate(row['IFSC']))
                logger.info("DRY RUN MODE - No API calls will be made")
                logger.info(f"Well-formed codes: {valid}, malformed: {len(rows) - valid}")
                return

            process_rows(rows, cache, sink, settings.progress_every)

        # ---------------------------------------------------------------------
        # STEP 3: HTTP endpoint and/or interactive menu
        # ---------------------------------------------------------------------
        server = build_server(settings, cache, sink, region_client) if args.serve else None

        if args.no_menu:
            if server:
                server.run()
            return

        if server:
            start_background_server(server)
            logger.info(f"Serving on http://{settings.api_host}:{settings.api_port}")

        Console(cache, sink, region_client, region_file=Path(settings.region_file)).run()

        if server:
            server.should_exit = True

    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")

    except (RuntimeError, FileNotFoundError, ValueError, OSError) as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)

    finally:
        if ifsc_client:
            ifsc_client.close()
        if region_client:
            region_client.close()


# =============================================================================
# SCRIPT ENTRY POINT
# =============================================================================

if __name__ == '__main__':
    if __package__ is None:
        print(
            "ERROR: This script must be run as a module.\n"
            "Usage: python -m ifsccheck.run_checker <input_file>"
        )
        sys.exit(1)

    run_checker()
