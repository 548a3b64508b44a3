from typing import Callable

from cobweb.paginator import SearchResult
from cobweb.scrapers.base import ClinicRecord


class Reporter:
    def __init__(self, show_all: bool = False, echo: Callable[[str], None] = print):
        self.show_all = show_all
        self._echo = echo

    def clinic_lines(self, record: ClinicRecord) -> list[str]:
        if record.has_availability:
            lines = [f"{record.name_and_date} has {record.availability} available"]
            if record.registration_url:
                lines.append(f"Register at {record.registration_url}")
            lines.append("")  # blank line between clinics
            return lines

        if self.show_all:
            return [f"{record.name_and_date} has no availability"]
        return []

    @staticmethod
    def summary_line(result: SearchResult) -> str:
        return (
            f"Found {len(result.records)} clinics, {result.with_availability} with availability "
            f"(fetched {result.pages_fetched} pages)"
        )

    def report(self, result: SearchResult) -> None:
        """Print every clinic in extraction order, then the summary."""
        for record in result.records:
            for line in self.clinic_lines(record):
                self._echo(line)
        self._echo(self.summary_line(result))
