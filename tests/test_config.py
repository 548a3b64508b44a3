import logging

import pytest

from cobweb.config import Settings, get_settings
from cobweb.core.logger import setup_logger, set_level, logger
from cobweb.scrapers.prepmod import PrepModScraper


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch):
    for var in ("COBWEB_BASE_URL", "COBWEB_WAITING_ROOM_WAIT_SECONDS", "COBWEB_WAITING_ROOM_TITLE"):
        monkeypatch.delenv(var, raising=False)
    settings = Settings(_env_file=None)
    assert settings.base_url == "https://www.maimmunizations.org"
    assert settings.search_path == "/clinic/search"
    assert settings.waiting_room_wait_seconds == 10
    assert settings.waiting_room_title == "Waiting Room"
    assert settings.waiting_room_heading_selector == "h1"
    assert settings.log_file is None


def test_env_overrides(monkeypatch, fresh_settings):
    monkeypatch.setenv("COBWEB_BASE_URL", "https://prepmod.example.org")
    monkeypatch.setenv("cobweb_waiting_room_wait_seconds", "3")

    settings = get_settings()
    assert settings.base_url == "https://prepmod.example.org"
    assert settings.waiting_room_wait_seconds == 3
    assert PrepModScraper().search_url == "https://prepmod.example.org/clinic/search"


def test_get_settings_is_cached(fresh_settings):
    assert get_settings() is get_settings()


def test_setup_logger_is_idempotent(tmp_path):
    log_file = tmp_path / "cobweb.log"
    first = setup_logger("cobweb.test_idempotent", str(log_file))
    second = setup_logger("cobweb.test_idempotent", str(log_file))

    assert first is second
    assert len(first.handlers) == 2
    first.warning("written to file")
    for handler in first.handlers:
        handler.flush()
    assert "written to file" in log_file.read_text(encoding="utf-8")
    for handler in first.handlers:
        handler.close()


def test_set_level():
    original = logger.level
    try:
        set_level(logging.DEBUG)
        assert logger.level == logging.DEBUG
        assert all(h.level == logging.DEBUG for h in logger.handlers)
    finally:
        set_level(original)
