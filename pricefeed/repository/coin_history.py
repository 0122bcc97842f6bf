"""Storage of collected price quotes."""

from __future__ import annotations

import logging
import sqlite3
from typing import Iterable

from pricefeed.models import PriceInfo
from pricefeed.repository.schema import TABLE_COIN_PRICE, TABLE_UPDATE_PRICE_HISTORY

logger = logging.getLogger(__name__)

_INSERT_PRICE = (
    f"insert into {TABLE_COIN_PRICE} (symbol,timestamp,price,price_origin,weight)"
    " values(?,?,?,?,?)"
)
_INSERT_HISTORY = f"insert into {TABLE_UPDATE_PRICE_HISTORY} (timestamp,symbol) values (?,?)"
_COLUMNS = "symbol, timestamp, price, weight, price_origin"


def _to_price_info(row) -> PriceInfo:
    symbol, timestamp, price, weight, price_origin = row
    return PriceInfo(
        symbol=symbol,
        price=float(price),
        price_origin=price_origin,
        weight=int(weight),
        timestamp=int(timestamp),
    )


class CoinHistoryRepository:
    """Reads and writes the price quote history."""

    def __init__(self, connection: sqlite3.Connection):
        self._connection = connection

    def insert_price_infos(self, infos: Iterable[PriceInfo]) -> None:
        """Store quotes and record each (timestamp, symbol) update once."""
        infos = list(infos)
        updates = dict.fromkeys((info.timestamp, info.symbol) for info in infos)
        with self._connection:
            self._connection.executemany(_INSERT_HISTORY, list(updates))
            self._connection.executemany(
                _INSERT_PRICE,
                [
                    (info.symbol, info.timestamp, info.price, info.price_origin, info.weight)
                    for info in infos
                ],
            )

    def count_by_symbol(self, symbol: str) -> int:
        """Return the number of quotes stored for a symbol."""
        (total,) = self._connection.execute(
            f"select count(1) from {TABLE_COIN_PRICE} where symbol = ?", (symbol,)
        ).fetchone()
        return int(total)

    def history_by_symbol(self, index: int, page_size: int, symbol: str) -> list[PriceInfo]:
        """Return one page of a symbol's quotes, newest first."""
        rows = self._connection.execute(
            f"select {_COLUMNS} from {TABLE_COIN_PRICE} where symbol = ?"
            " order by id desc limit ? offset ?",
            (symbol, page_size, index * page_size),
        ).fetchall()
        return [_to_price_info(row) for row in rows]

    def history_by_symbol_and_timestamp(self, symbol: str, timestamp: int) -> list[PriceInfo]:
        """Return a symbol's quotes taken at a timestamp, newest first."""
        rows = self._connection.execute(
            f"select {_COLUMNS} from {TABLE_COIN_PRICE}"
            " where symbol = ? and timestamp = ? order by id desc",
            (symbol, timestamp),
        ).fetchall()
        return [_to_price_info(row) for row in rows]

    def delete_older_than(self, timestamp: int) -> int:
        """Delete quotes taken at or before timestamp; return how many went."""
        with self._connection:
            cursor = self._connection.execute(
                f"delete from {TABLE_COIN_PRICE} where timestamp <= ?", (timestamp,)
            )
        logger.info("exec delete coin history success,%d rows", cursor.rowcount)
        return cursor.rowcount