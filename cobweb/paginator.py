"""
Pagination driver: walks the PrepMod search pages until the site stops
returning results, handling the virtual waiting room along the way.

    SEARCHING ──non-success──────────────────────────▶ DONE
    SEARCHING ──results page (page += 1)─────────────▶ SEARCHING
    SEARCHING ──waiting room─────────────────────────▶ WAITING_ROOM
    WAITING_ROOM ──wait: sleep, same page────────────▶ SEARCHING
    WAITING_ROOM ──no wait───────────────────────────▶ BAILED ──▶ DONE
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Optional

from cobweb.core.logger import logger as log
from cobweb.scrapers.base import BaseScraper, ClinicRecord, SearchFilters, WaitingRoom

BAIL_NOTICE = "Waiting room is active, giving up (use --wait to keep trying)"


class SearchState(Enum):
    SEARCHING = "searching"
    WAITING_ROOM = "waiting_room"
    BAILED = "bailed"
    DONE = "done"


@dataclass
class SearchResult:
    records: list[ClinicRecord] = field(default_factory=list)
    page_number: int = 1
    bailed: bool = False

    @property
    def pages_fetched(self) -> int:
        return self.page_number - 1

    @property
    def with_availability(self) -> int:
        return sum(1 for r in self.records if r.has_availability)


class Paginator:
    def __init__(
        self,
        scraper: BaseScraper,
        filters: Optional[SearchFilters] = None,
        wait: bool = False,
        wait_seconds: float = 10,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        echo: Callable[[str], None] = print,
    ):
        self.scraper = scraper
        self.filters = filters or SearchFilters()
        self.wait = wait
        self.wait_seconds = wait_seconds
        self._sleep = sleep
        self._echo = echo

        self.state = SearchState.SEARCHING
        self.page_number = 1
        self.records: list[ClinicRecord] = []
        self.waiting_room: Optional[WaitingRoom] = None
        self.bailed = False

    async def run(self) -> SearchResult:
        """Drive the state machine to DONE. Transport errors propagate."""
        while self.state is not SearchState.DONE:
            await self.step()

        log.info(f"[Paginator] Done: {len(self.records)} clinics over {self.page_number - 1} pages")
        return SearchResult(records=self.records, page_number=self.page_number, bailed=self.bailed)

    async def step(self) -> SearchState:
        """Perform exactly one transition from the current state."""
        if self.state is SearchState.SEARCHING:
            self.state = await self._search()
        elif self.state is SearchState.WAITING_ROOM:
            self.state = await self._leave_waiting_room()
        elif self.state is SearchState.BAILED:
            self.state = SearchState.DONE
        return self.state

    async def _search(self) -> SearchState:
        resp = await self.scraper.fetch_page(self.page_number, self.filters)

        if not resp.is_success:
            # Paging past the last result redirects, anything else is unexpected
            if not resp.is_redirect:
                log.warning(
                    f"[Paginator] Page {self.page_number} fetch failed with unexpected status {resp.status_code}"
                )
            return SearchState.DONE

        soup = self.scraper.parse_document(resp.text)

        waiting_room = self.scraper.detect_waiting_room(soup)
        if waiting_room is not None:
            self.waiting_room = waiting_room
            self._echo(waiting_room.summary)
            return SearchState.WAITING_ROOM

        records = self.scraper.extract_clinics(soup)
        log.debug(f"[Paginator] Page {self.page_number}: {len(records)} clinics")
        self.records.extend(records)
        self.page_number += 1
        return SearchState.SEARCHING

    async def _leave_waiting_room(self) -> SearchState:
        if not self.wait:
            self._echo(BAIL_NOTICE)
            self.bailed = True
            return SearchState.BAILED

        log.info(f"[Paginator] In waiting room, retrying page {self.page_number} in {self.wait_seconds}s")
        await self._sleep(self.wait_seconds)
        return SearchState.SEARCHING
