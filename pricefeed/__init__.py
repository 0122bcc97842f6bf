"""Exchange price fetching and parsing, in-memory price caches, admin tokens
and SQLite storage of price history and settings."""

__version__ = "0.1.0"