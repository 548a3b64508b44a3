# scrapers package
from cobweb.scrapers.prepmod import PrepModScraper

__all__ = ['PrepModScraper']
