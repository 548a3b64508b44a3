"""
PrepMod (maimmunizations.org) Scraper

Scrapes:
1. /clinic/search?...&page={n}    → one page of clinic search results

Under heavy load the site puts a virtual waiting room in front of the search
page. That page is recognised by its <title>.
"""

from typing import Optional

import httpx
from bs4 import BeautifulSoup, Tag

from cobweb.core.logger import logger as log
from cobweb.scrapers.base import (
    BaseScraper,
    ClinicRecord,
    PageResponse,
    SearchFilters,
    WaitingRoom,
)
from cobweb.config import get_settings

HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/121.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}

AVAILABILITY_LABEL = "Available Appointments"


def _text_nodes(tag: Tag) -> list[str]:
    """All descendant text nodes of a tag, in document order."""
    return [str(s) for s in tag.strings]


class PrepModScraper(BaseScraper):
    BASE_URL = "https://www.maimmunizations.org"

    # CSS selectors for the search results layout
    CLINICS_SELECTOR = (
        r"body > div.main-container > div.mt-24.border-t.border-gray-200"
        r" > div.md\:flex > div.md\:flex-shrink"
    )
    NAME_SELECTOR = "p"
    AVAILABILITY_SELECTOR = "p > strong"
    SCHEDULE_SELECTOR = "p > a"

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = base_url or settings.base_url or self.BASE_URL
        self.search_url = f"{self.base_url}{settings.search_path}"
        self.timeout = settings.request_timeout
        self.waiting_room_title = settings.waiting_room_title
        self.waiting_room_heading_selector = settings.waiting_room_heading_selector
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers=HEADERS,
                timeout=self.timeout,
                follow_redirects=False,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    # ─────────────────────────────────────────────────────────
    # 1. Fetch one page of search results
    # ─────────────────────────────────────────────────────────
    @staticmethod
    def search_params(page_number: int, filters: SearchFilters) -> list[tuple[str, str]]:
        return [
            ("location", ""),
            ("search_radius", "All"),
            ("q[venue_search_name_or_venue_name_i_cont]", filters.venue_name or ""),
            ("q[clinic_date_gteq]", filters.from_date or ""),
            ("q[vaccinations_name_i_cont]", ""),
            ("commit", "Search"),
            ("page", str(page_number)),
        ]

    async def fetch_page(self, page_number: int, filters: SearchFilters) -> PageResponse:
        """
        GET one search page. Redirects are returned as-is, never followed;
        the site answers with a 302 once we page past the last result.

        Transport errors (DNS, connection, TLS, timeouts) propagate.
        """
        log.debug(f"[PrepMod] Fetching page {page_number}")
        client = await self._get_client()
        resp = await client.get(self.search_url, params=self.search_params(page_number, filters))
        log.debug(f"[PrepMod] GET page {page_number} -> {resp.status_code} ({len(resp.text)} chars)")
        return PageResponse(status_code=resp.status_code, text=resp.text)

    # ─────────────────────────────────────────────────────────
    # 2. Waiting room detection
    # ─────────────────────────────────────────────────────────
    def detect_waiting_room(self, soup: BeautifulSoup) -> Optional[WaitingRoom]:
        title = soup.title.get_text(strip=True) if soup.title else None
        if title != self.waiting_room_title:
            return None

        heading = soup.select_one(self.waiting_room_heading_selector)
        summary = heading.get_text(" ", strip=True) if heading else ""
        return WaitingRoom(summary=summary or title)

    # ─────────────────────────────────────────────────────────
    # 3. Extract clinics from a results page
    # ─────────────────────────────────────────────────────────
    def extract_clinics(self, soup: BeautifulSoup) -> list[ClinicRecord]:
        """
        HTML structure of one clinic:
        <div class="md:flex-shrink ...">
          <p class="text-xl ...">Gillette Stadium on 02/25/2021</p>
          <p><strong>Address:</strong> 1 Patriot Pl, Foxborough MA, 02035</p>
          <p><strong>Available Appointments:</strong> 5</p>
          <p class="my-3 flex"><a href="/client/registration?clinic_id=123">Sign Up</a></p>
        </div>
        """
        records: list[ClinicRecord] = []
        for element in soup.select(self.CLINICS_SELECTOR):
            name = self._extract_name(element)
            if not name:
                log.warning("[PrepMod] Clinic element without a name, page layout may have changed")
                continue

            records.append(
                ClinicRecord.from_scraped(
                    name,
                    availability=self._extract_availability(element),
                    registration_url=self._extract_registration_url(element),
                )
            )
        return records

    def _extract_name(self, element: Tag) -> Optional[str]:
        # The select is too generous, only the first paragraph holds the name
        p = element.select_one(self.NAME_SELECTOR)
        if p is None:
            return None
        first = next(iter(p.strings), None)
        return first.strip() if first is not None else None

    def _extract_availability(self, element: Tag) -> Optional[str]:
        # The selector matches every property label, so find ours by text
        # and read the value from the label's parent paragraph
        for label in element.select(self.AVAILABILITY_SELECTOR):
            if " ".join(_text_nodes(label)).startswith(AVAILABILITY_LABEL):
                parts = _text_nodes(label.parent)
                return parts[1].strip() if len(parts) > 1 else None
        return None

    def _extract_registration_url(self, element: Tag) -> Optional[str]:
        # Last link wins
        registration_url = None
        for link in element.select(self.SCHEDULE_SELECTOR):
            href = link.get("href")
            if href:
                log.debug(f"[PrepMod] >>>>> {link.get_text(strip=True)} {self.base_url}{href}")
                registration_url = f"{self.base_url}{href}"
        return registration_url
