"""Storage of failed exchange requests."""

from __future__ import annotations

import sqlite3
import time
from dataclasses import dataclass
from typing import Optional

from pricefeed.repository.schema import TABLE_HTTP_ERROR


@dataclass
class HttpErrorInfo:
    """A failed request to an exchange."""

    url: str
    symbol: str
    error: str
    timestamp: int


class HttpErrorRepository:
    """Reads and writes recorded request failures."""

    def __init__(self, connection: sqlite3.Connection):
        self._connection = connection

    def insert(
        self, url: str, symbol: str, error_info: str, timestamp: Optional[int] = None
    ) -> None:
        """Record a failure; the timestamp defaults to now."""
        if timestamp is None:
            timestamp = int(time.time())
        with self._connection:
            self._connection.execute(
                f"insert into {TABLE_HTTP_ERROR} (url,symbol,error,timestamp)"
                " values(?,?,?,?)",
                (url, symbol, error_info, timestamp),
            )

    def page(self, index: int, page_size: int, symbol: str) -> list[HttpErrorInfo]:
        """Return one page of a symbol's failures, newest first."""
        rows = self._connection.execute(
            f"select url,symbol,error,timestamp from {TABLE_HTTP_ERROR}"
            " where symbol = ? order by id desc limit ? offset ?",
            (symbol, page_size, index * page_size),
        ).fetchall()
        return [
            HttpErrorInfo(url=url, symbol=sym, error=error, timestamp=int(ts))
            for url, sym, error, ts in rows
        ]

    def count(self, symbol: str) -> int:
        """Return the number of failures recorded for a symbol."""
        (total,) = self._connection.execute(
            f"select count(1) from {TABLE_HTTP_ERROR} where symbol = ?", (symbol,)
        ).fetchone()
        return int(total)