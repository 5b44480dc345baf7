"""New homeowners extractor: weekly residential sales from TPAD for one county."""

import argparse
import asyncio
import logging
import os
import sys
from typing import Dict, List, Optional

from mailer import send_report_email, send_test_email
from models.parcel import DateRange
from processors.pipeline import run_pipeline
from scraper.client import TpadClient
from scraper.exceptions import ScraperError
from utils.config import ConfigError, load_config, validate_config
from utils.date_range import (
    format_date_range,
    get_date_range_filename,
    get_previous_week_range,
    get_week_range_from_monday,
)
from utils.markdown_generator import MarkdownGenerator
from utils.output_writer import (
    generate_filename,
    write_cleaned_csv,
    write_cleaned_json,
    write_raw_csv,
)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging from --verbose, LOG_LEVEL and LOG_FILE."""
    level_name = "DEBUG" if verbose else os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    log_file = os.environ.get("LOG_FILE")
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)

    # Suppress per-request logs from the HTTP client
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="newhomeowners",
        description="Extract new homeowner data from TPAD for lawn care marketing",
    )
    parser.add_argument(
        "-w",
        "--week",
        help="Monday of the week to process (YYYY-MM-DD), defaults to previous week",
    )
    parser.add_argument("-o", "--out", help="Output directory (overrides config)")
    parser.add_argument(
        "-d", "--dry-run", action="store_true", help="Run without sending email"
    )
    parser.add_argument(
        "--test-email", action="store_true", help="Send a test email to verify configuration"
    )
    parser.add_argument("-c", "--config", help="Path to config.json")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def resolve_date_range(week: Optional[str]) -> DateRange:
    """--week Monday, or the previous full week."""
    return get_week_range_from_monday(week) if week else get_previous_week_range()


async def run(args: argparse.Namespace) -> int:
    """Run one extraction. Returns the process exit code."""
    config = load_config(args.config)

    if args.out:
        config.setdefault("output", {})["out_dir"] = args.out

    if args.test_email:
        return EXIT_OK if await send_test_email(config) else EXIT_FAILURE

    errors = validate_config(config, require_email=not args.dry_run)
    if errors:
        for error in errors:
            logger.error(error)
        if not args.dry_run:
            return EXIT_USAGE

    try:
        date_range = resolve_date_range(args.week)
    except ValueError as e:
        logger.error(f"Invalid --week: {e}")
        return EXIT_USAGE

    county_name = config.get("county_name", "")
    out_dir = config.get("output", {}).get("out_dir", "./data")

    logger.info(f"Starting extraction: {format_date_range(date_range)}, {county_name} County")

    async with TpadClient(config) as client:
        extraction = await client.extract(date_range)

    if not extraction.raw_records:
        logger.info("No records found for the specified period")
        return EXIT_OK

    pipeline = run_pipeline(extraction.raw_records, config, date_range)
    cleaned_sales = pipeline.cleaned_sales

    output_files: Dict[str, str] = {
        "raw_csv": write_raw_csv(
            extraction.raw_records,
            out_dir,
            generate_filename("raw_export", date_range.label, "csv"),
        ),
        "cleaned_csv": write_cleaned_csv(
            cleaned_sales,
            out_dir,
            generate_filename("cleaned_sales", date_range.label, "csv"),
        ),
        "cleaned_json": write_cleaned_json(
            cleaned_sales,
            date_range,
            county_name,
            out_dir,
            generate_filename("cleaned_sales", date_range.label, "json"),
        ),
    }

    if config.get("output", {}).get("generate_summary", True):
        MarkdownGenerator(county_name).write_summary(
            out_dir,
            f"summary_{get_date_range_filename(date_range)}.md",
            date_range,
            extraction,
            pipeline,
            output_files,
        )

    if args.dry_run:
        logger.info("Dry run mode - skipping email")
    elif not await send_report_email(config, cleaned_sales, date_range):
        logger.warning("Email was not sent - check configuration")

    logger.info(
        f"Extraction complete: {extraction.total_parcels} parcels, "
        f"{extraction.total_pages} pages, {len(extraction.raw_records)} raw records, "
        f"{len(cleaned_sales)} cleaned sales → {out_dir}"
    )
    return EXIT_OK


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the extractor."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        return await run(args)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_USAGE
    except ScraperError as e:
        logger.error(f"Scraping failed: {e}", exc_info=True)
        return EXIT_FAILURE
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return EXIT_FAILURE


def cli() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
