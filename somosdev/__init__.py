"""A small community message board: SQLite-backed posts served as HTML over WSGI."""

__version__ = "0.1.0"