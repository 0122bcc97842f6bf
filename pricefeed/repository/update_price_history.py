"""Storage of the moments at which each symbol's price was refreshed."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass

from pricefeed.repository.schema import TABLE_UPDATE_PRICE_HISTORY

logger = logging.getLogger(__name__)

_BUCKET_SECONDS = 10 * 60


@dataclass
class UpdatePriceHistory:
    """A price refresh of one symbol."""

    timestamp: int
    symbol: str


class UpdatePriceRepository:
    """Reads and prunes the price refresh history."""

    def __init__(self, connection: sqlite3.Connection):
        self._connection = connection

    def count_by_symbol(self, symbol: str) -> int:
        """Return the number of refreshes recorded for a symbol."""
        (total,) = self._connection.execute(
            f"select count(1) from {TABLE_UPDATE_PRICE_HISTORY} where symbol = ?", (symbol,)
        ).fetchone()
        return int(total)

    def page_by_symbol(self, index: int, page_size: int, symbol: str) -> list[UpdatePriceHistory]:
        """Return one page of a symbol's refreshes, newest first."""
        rows = self._connection.execute(
            f"select symbol, timestamp from {TABLE_UPDATE_PRICE_HISTORY}"
            " where symbol = ? order by timestamp desc limit ? offset ?",
            (symbol, page_size, index * page_size),
        ).fetchall()
        return [UpdatePriceHistory(timestamp=int(ts), symbol=sym) for sym, ts in rows]

    def by_interval(self, since: int, symbol: str) -> list[UpdatePriceHistory]:
        """Return the first refresh in each ten-minute window from since on, oldest first."""
        rows = self._connection.execute(
            "select b.timestamp, b.symbol from"
            " (select min(timestamp) as timestamp, symbol,"
            f" (timestamp / {_BUCKET_SECONDS}) * {_BUCKET_SECONDS} as intervals"
            f" from {TABLE_UPDATE_PRICE_HISTORY} where timestamp >= ? and symbol = ?"
            " group by intervals, symbol) as b order by b.timestamp",
            (since, symbol),
        ).fetchall()
        return [UpdatePriceHistory(timestamp=int(ts), symbol=sym) for ts, sym in rows]

    def delete_older_than(self, timestamp: int) -> int:
        """Delete refreshes at or before timestamp; return how many went."""
        with self._connection:
            cursor = self._connection.execute(
                f"delete from {TABLE_UPDATE_PRICE_HISTORY} where timestamp <= ?", (timestamp,)
            )
        logger.info("exec delete update price history success,%d rows", cursor.rowcount)
        return cursor.rowcount