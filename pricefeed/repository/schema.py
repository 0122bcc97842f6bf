"""Database schema and connection setup for the price store."""

from __future__ import annotations

import sqlite3
from os import PathLike
from typing import Union

TABLE_COIN_PRICE = "t_coin_history_info"
TABLE_LOG_INFO = "t_log_info"
TABLE_HTTP_ERROR = "t_http_error"
TABLE_WEIGHT_INFO = "t_weight_info"
TABLE_UPDATE_PRICE_HISTORY = "t_update_price_history"
TABLE_UPDATE_INTERVAL = "t_update_interval"

ALL_TABLES = (
    TABLE_COIN_PRICE,
    TABLE_LOG_INFO,
    TABLE_HTTP_ERROR,
    TABLE_WEIGHT_INFO,
    TABLE_UPDATE_PRICE_HISTORY,
    TABLE_UPDATE_INTERVAL,
)

_ID = ("id", "INTEGER PRIMARY KEY AUTOINCREMENT")

# Column layout per table; constraints beyond the columns go in _EXTRA.
_COLUMNS: dict[str, tuple[tuple[str, str], ...]] = {
    TABLE_COIN_PRICE: (
        _ID,
        ("symbol", "TEXT NOT NULL"),
        ("timestamp", "INTEGER NOT NULL"),
        ("price", "REAL NOT NULL"),
        ("price_origin", "TEXT NOT NULL"),
        ("weight", "INTEGER NOT NULL"),
    ),
    TABLE_LOG_INFO: (
        _ID,
        ("client_ip", "TEXT NOT NULL"),
        ("request_time", "TEXT NOT NULL"),
        ("user_agent", "TEXT NOT NULL"),
        ("request_url", "TEXT NOT NULL"),
        ("response_time", "TEXT NOT NULL"),
        ("use_symbol", "INTEGER NOT NULL"),
        ("request_response", "TEXT NOT NULL"),
        ("request_timestamp", "INTEGER"),
        ("response_timestamp", "INTEGER"),
    ),
    TABLE_HTTP_ERROR: (
        _ID,
        ("url", "TEXT NOT NULL"),
        ("symbol", "TEXT NOT NULL"),
        ("error", "TEXT NOT NULL"),
        ("timestamp", "INTEGER NOT NULL"),
    ),
    TABLE_WEIGHT_INFO: (
        _ID,
        ("symbol", "TEXT NOT NULL"),
        ("exchange", "TEXT NOT NULL"),
        ("weight", "INTEGER NOT NULL"),
    ),
    TABLE_UPDATE_PRICE_HISTORY: (
        ("timestamp", "INTEGER NOT NULL"),
        ("symbol", "TEXT NOT NULL"),
    ),
    TABLE_UPDATE_INTERVAL: (
        _ID,
        ("symbol", "TEXT NOT NULL"),
        ("interval_second", "INTEGER NOT NULL"),
    ),
}

_EXTRA: dict[str, tuple[str, ...]] = {
    TABLE_UPDATE_PRICE_HISTORY: ("PRIMARY KEY (timestamp, symbol)",),
}


def _table_ddl(table: str) -> str:
    parts = [f"{name} {kind}" for name, kind in _COLUMNS[table]]
    parts.extend(_EXTRA.get(table, ()))
    body = ", ".join(parts)
    return f"CREATE TABLE IF NOT EXISTS {table} ({body})"


def create_tables(connection: sqlite3.Connection) -> None:
    """Create every table the service uses, leaving existing ones alone."""
    with connection:
        for table in ALL_TABLES:
            connection.execute(_table_ddl(table))


def connect(path: Union[str, "PathLike[str]"] = ":memory:") -> sqlite3.Connection:
    """Open the database at path and make sure its tables exist."""
    connection = sqlite3.connect(path, check_same_thread=False)
    try:
        create_tables(connection)
    except sqlite3.Error:
        connection.close()
        raise
    return connection