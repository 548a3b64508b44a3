from typing import Callable, Optional

import httpx
import pytest

from cobweb.scrapers.prepmod import PrepModScraper

BASE_URL = "https://www.maimmunizations.org"


# ══════════════════════════════════════════════════════════════════════════════
# HTML FIXTURES
# ══════════════════════════════════════════════════════════════════════════════

def clinic_html(
    name: Optional[str] = "Gillette Stadium on 02/25/2021",
    availability: Optional[str] = "5",
    links: tuple[str, ...] = ("/client/registration?clinic_id=123",),
) -> str:
    """One clinic container as the search page renders it."""
    parts = []
    # A missing name still leaves its (empty) heading paragraph behind
    parts.append(f'<p class="text-xl font-black">{name or ""}</p>')
    parts.append("<p><strong>Address:</strong> 1 Patriot Pl, Foxborough MA, 02035</p>")
    parts.append("<p><strong>Vaccinations offered:</strong> Pfizer-BioNTech COVID-19 Vaccine</p>")
    if availability is not None:
        parts.append(f"<p><strong>Available Appointments:</strong> {availability}</p>")
    for href in links:
        parts.append(f'<p class="my-3 flex"><a href="{href}" class="button-primary">Sign Up for a COVID-19 Vaccination</a></p>')
    return (
        '<div class="md:flex-shrink text-gray-800">'
        + "\n".join(parts)
        + "</div>"
    )


def results_page(*clinics: str) -> str:
    containers = "\n".join(f'<div class="md:flex">{c}</div>' for c in clinics)
    return f"""
    <html>
      <head><title>PrepMod</title></head>
      <body>
        <div class="main-container">
          <h1>Find a Vaccination Clinic</h1>
          <div class="mt-24 border-t border-gray-200">
            {containers}
          </div>
        </div>
      </body>
    </html>
    """


WAITING_ROOM_HTML = """
<html>
  <head><title>Waiting Room</title></head>
  <body>
    <div class="main-container">
      <h1>You are now in line. Your estimated wait time is 12 minutes.</h1>
      <p>Please do not refresh this page.</p>
    </div>
  </body>
</html>
"""


# ══════════════════════════════════════════════════════════════════════════════
# HTTP FIXTURES
# ══════════════════════════════════════════════════════════════════════════════

def sequence_transport(responses: list, seen: Optional[list] = None) -> httpx.MockTransport:
    """
    MockTransport that replays `responses` in order, one per request.

    Each item is either (status_code, body) or an exception instance to raise.
    Requests are appended to `seen` when given.
    """
    queue = list(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        status_code, body = item
        headers = {"Location": f"{BASE_URL}/clinic/search"} if 300 <= status_code < 400 else {}
        return httpx.Response(status_code, text=body, headers=headers)

    return httpx.MockTransport(handler)


@pytest.fixture
def make_scraper() -> Callable[..., PrepModScraper]:
    def _make(responses: list, seen: Optional[list] = None) -> PrepModScraper:
        return PrepModScraper(base_url=BASE_URL, transport=sequence_transport(responses, seen))
    return _make


@pytest.fixture
def scraper():
    return PrepModScraper(base_url=BASE_URL)


@pytest.fixture
def sleeps():
    """Recorder standing in for asyncio.sleep."""
    calls: list[float] = []

    async def _sleep(seconds: float) -> None:
        calls.append(seconds)

    _sleep.calls = calls
    return _sleep
