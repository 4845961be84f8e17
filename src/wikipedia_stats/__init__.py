"""Word, size and year statistics of MediaWiki XML dumps."""

__version__ = "0.1.0"
