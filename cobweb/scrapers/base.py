import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from bs4 import BeautifulSoup


@dataclass(frozen=True)
class SearchFilters:
    from_date: Optional[str] = None     # e.g. '2021-02-25', passed through verbatim
    venue_name: Optional[str] = None    # e.g. 'gillette'


@dataclass(frozen=True)
class PageResponse:
    status_code: int
    text: str

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status_code < 400


@dataclass(frozen=True)
class WaitingRoom:
    summary: str


@dataclass(frozen=True)
class ClinicRecord:
    name: str
    date: Optional[str] = None              # 'MM/DD/YYYY'
    availability: Optional[str] = None      # count as scraped, e.g. '5'
    clinic_id: Optional[str] = None         # reserved, never populated
    registration_url: Optional[str] = None

    # "<name> on <MM/DD/YYYY>"
    NAME_DATE_PATTERN = re.compile(r"^(.*) on (\d\d/\d\d/\d\d\d\d)$")

    @classmethod
    def from_scraped(
        cls,
        raw_name: str,
        availability: Optional[str] = None,
        registration_url: Optional[str] = None,
    ) -> "ClinicRecord":
        """Build a record, splitting the date off the scraped name when present."""
        m = cls.NAME_DATE_PATTERN.match(raw_name)
        if m:
            return cls(
                name=m.group(1),
                date=m.group(2),
                availability=availability,
                registration_url=registration_url,
            )
        return cls(name=raw_name, availability=availability, registration_url=registration_url)

    @property
    def has_availability(self) -> bool:
        return self.availability is not None and self.availability != "0"

    @property
    def name_and_date(self) -> str:
        if self.date is not None:
            return f"{self.name} on {self.date}"
        return self.name


class BaseScraper(ABC):
    BASE_URL: str = ""

    @abstractmethod
    async def fetch_page(self, page_number: int, filters: SearchFilters) -> PageResponse:
        ...

    @abstractmethod
    def detect_waiting_room(self, soup: BeautifulSoup) -> Optional[WaitingRoom]:
        ...

    @abstractmethod
    def extract_clinics(self, soup: BeautifulSoup) -> list[ClinicRecord]:
        ...

    @staticmethod
    def parse_document(html: str) -> BeautifulSoup:
        """Parse raw HTML into a queryable tree. Malformed input never raises."""
        return BeautifulSoup(html, "lxml")

    async def close(self):
        pass
