"""Cobweb: screen scraper for PrepMod clinic availability."""

__version__ = "0.1.0"
