"""
Cobweb, a screen scraper for PrepMod (https://www.maimmunizations.org)
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

import httpx

from cobweb.config import get_settings
from cobweb.core.logger import logger, set_level
from cobweb.paginator import Paginator, SearchResult
from cobweb.reporter import Reporter
from cobweb.scrapers.base import SearchFilters
from cobweb.scrapers.prepmod import PrepModScraper


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cobweb", description=__doc__.strip())
    parser.add_argument(
        "-a", "--all", dest="show_all", action="store_true",
        help="show all clinics, even those with no availability",
    )
    parser.add_argument(
        "-f", "--from", dest="from_date", metavar="DATE",
        help="start search from a date, for example, -f 2021-02-25",
    )
    parser.add_argument(
        "-n", "--name", dest="venue_name", metavar="NAME",
        help="filter results by name, for example, -n gillette",
    )
    parser.add_argument(
        "-w", "--wait", action="store_true",
        help="keep retrying while the site shows its waiting room instead of giving up",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output")
    return parser


async def search(
    filters: SearchFilters,
    wait: bool = False,
    scraper: Optional[PrepModScraper] = None,
    **paginator_kwargs,
) -> SearchResult:
    settings = get_settings()
    scraper = scraper or PrepModScraper()
    paginator = Paginator(
        scraper,
        filters,
        wait=wait,
        wait_seconds=settings.waiting_room_wait_seconds,
        **paginator_kwargs,
    )
    try:
        return await paginator.run()
    finally:
        await scraper.close()


def main(argv: Optional[Sequence[str]] = None, scraper: Optional[PrepModScraper] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        set_level(logging.DEBUG)

    # Filters are passed through verbatim, the site does its own validation
    filters = SearchFilters(from_date=args.from_date, venue_name=args.venue_name)
    scraper = scraper or PrepModScraper()

    print(f"Searching {scraper.base_url}")
    print()

    try:
        result = asyncio.run(search(filters, wait=args.wait, scraper=scraper))
    except httpx.TransportError as e:
        logger.error(f"Search aborted: {e!r}")
        return 1

    Reporter(show_all=args.show_all).report(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
