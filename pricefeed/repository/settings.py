"""Persistent per-symbol settings: update intervals and exchange weights."""

from __future__ import annotations

import sqlite3

from pricefeed.repository.schema import TABLE_UPDATE_INTERVAL, TABLE_WEIGHT_INFO


class RecordNotFoundError(LookupError):
    """Raised when a setting to change has never been stored."""


class UpdateIntervalRepository:
    """Update interval in seconds per symbol."""

    def __init__(self, connection: sqlite3.Connection):
        self._connection = connection

    def _stored(self, symbol: str):
        return self._connection.execute(
            f"select interval_second from {TABLE_UPDATE_INTERVAL} where symbol = ?", (symbol,)
        ).fetchone()

    def check_update_interval(self, symbol: str, interval: int) -> int:
        """Return the stored interval, storing the given one if there is none."""
        row = self._stored(symbol)
        if row is not None:
            return int(row[0])
        with self._connection:
            self._connection.execute(
                f"insert into {TABLE_UPDATE_INTERVAL} (symbol,interval_second) values(?,?)",
                (symbol, interval),
            )
        return interval

    def set_update_interval(self, symbol: str, interval: int) -> None:
        """Change the stored interval of a symbol."""
        if self._stored(symbol) is None:
            raise RecordNotFoundError(f"no update interval stored for {symbol}")
        with self._connection:
            self._connection.execute(
                f"update {TABLE_UPDATE_INTERVAL} set interval_second = ? where symbol = ?",
                (interval, symbol),
            )


class WeightInfoRepository:
    """Weight of each exchange per symbol."""

    def __init__(self, connection: sqlite3.Connection):
        self._connection = connection

    def _stored(self, symbol: str, exchange: str):
        return self._connection.execute(
            f"select weight from {TABLE_WEIGHT_INFO} where symbol = ? and exchange = ?",
            (symbol, exchange),
        ).fetchone()

    def check_update_weight(self, symbol: str, exchange: str, weight: int) -> int:
        """Return the stored weight, storing the given one if there is none."""
        row = self._stored(symbol, exchange)
        if row is not None:
            return int(row[0])
        with self._connection:
            self._connection.execute(
                f"insert into {TABLE_WEIGHT_INFO} (symbol,exchange,weight) values(?,?,?)",
                (symbol, exchange, weight),
            )
        return weight

    def set_weight(self, symbol: str, exchange: str, weight: int) -> None:
        """Change the stored weight of an exchange for a symbol."""
        if self._stored(symbol, exchange) is None:
            raise RecordNotFoundError(f"no weight stored for {symbol} on {exchange}")
        with self._connection:
            self._connection.execute(
                f"update {TABLE_WEIGHT_INFO} set weight = ? where symbol = ? and exchange = ?",
                (weight, symbol, exchange),
            )