#!/usr/bin/env python3
"""
Wayback Saver
=============

Logs into archive.org with a real browser and submits each URL to the
Wayback Machine "Save Page Now" form, printing one status line per URL.

Usage:
    python main.py -b firefox -l login.json -u https://example.com https://example.org
    python main.py -b chrome -l login.txt -up urls.txt -up more_urls.txt

Exit codes:
    0 - every URL was attempted (whatever the individual outcomes)
    1 - startup failure (arguments, settings, login file, browser or login)
"""
import argparse
import logging
import sys
from datetime import datetime
from typing import List, Optional

from selenium.common.exceptions import WebDriverException

from common.credentials import load_credentials
from common.errors import StartupError
from common.logging_utils import setup_rotating_file_logger
from common.selenium_utils import BrowserType, create_driver
from common.url_sources import collect_urls
from config import settings
from src.save_page_now import login, save_urls

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> str:
    """
    Configure logging for this run.

    Returns:
        Path to the active log file
    """
    run_date = datetime.now().strftime('%Y-%m-%d')
    log_file = setup_rotating_file_logger(
        run_date,
        settings.LOG_FILENAME,
        log_root=settings.LOG_DIR,
        verbose=verbose,
        log_level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        stream_level=logging.WARNING,
        retention_days=settings.LOG_RETENTION_DAYS,
    )
    logger.info(f"Logging initialized - output to {log_file}")
    return log_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Save URLs to the Wayback Machine through the archive.org website'
    )
    parser.add_argument(
        '--browser', '-b',
        type=str,
        metavar='{' + ','.join(b.value for b in BrowserType) + '}',
        help='Which browser to use'
    )
    parser.add_argument(
        '--urls', '-u',
        type=str,
        nargs='+',
        action='extend',
        help='The URL/s to save, e.g. -u youtube.com twitter.com or -u youtube.com -u twitter.com'
    )
    parser.add_argument(
        '--urls-path', '-up',
        type=str,
        nargs='+',
        action='extend',
        dest='urls_path',
        help='Path to a file containing URLs to save, one URL per line'
    )
    parser.add_argument(
        '--login-file', '-l',
        type=str,
        default=settings.ARCHIVE_LOGIN_FILE,
        help='JSON (or two-line text) file containing the login credentials'
    )
    parser.add_argument(
        '--strict-urls-file',
        action='store_true',
        help='Treat any invalid line (or missing file) in --urls-path as fatal'
    )
    parser.add_argument(
        '--headless',
        action='store_true',
        default=None,
        help='Run the browser without a window (default: SELENIUM_HEADLESS)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show debug logging on the console'
    )
    return parser


def run(args: argparse.Namespace) -> int:
    """
    Validate inputs, log in and save every URL.

    Args:
        args: Parsed command-line arguments

    Returns:
        Process exit code
    """
    start_time = datetime.now()

    try:
        settings.validate_config()
        driver = create_driver(args.browser, headless=args.headless)
        credentials = load_credentials(args.login_file)
        urls = collect_urls(args.urls, args.urls_path, strict=args.strict_urls_file)
    except StartupError as e:
        print(f"❌ {e}", file=sys.stderr)
        logger.info(f"Startup failed: {e}")
        return 1

    if not urls:
        print("⚠️  No valid URLs to save")
        logger.info("No valid URLs to save, browser not started")
        return 0

    try:
        with driver as browser:
            if not login(browser, credentials):
                return 1
            results = save_urls(browser, urls)
    except StartupError as e:
        print(f"❌ {e}", file=sys.stderr)
        logger.info(f"Startup failed: {e}")
        return 1
    except WebDriverException as e:
        print(f"❌ Browser error: {e.msg}", file=sys.stderr)
        logger.info(f"Browser error: {e}", exc_info=True)
        return 1

    duration = (datetime.now() - start_time).total_seconds()
    logger.info(f"Wayback Saver - {len(results)} URLs attempted in {duration:.2f}s")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)
    return run(args)


if __name__ == '__main__':
    sys.exit(main())
