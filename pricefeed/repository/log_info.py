"""Storage of served API requests."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from pricefeed.repository.schema import TABLE_LOG_INFO

logger = logging.getLogger(__name__)

_INSERT = (
    f"insert into {TABLE_LOG_INFO} (client_ip,request_time,user_agent,request_url,"
    "response_time,request_response,use_symbol,request_timestamp,response_timestamp)"
    " values(?,?,?,?,?,?,?,?,?)"
)
_SYMBOL_FILTER = (
    " where (request_response like '%' || ? || '%'"
    " or request_url like '%' || ? || '%') and use_symbol = 1"
)


@dataclass
class LogInfo:
    """A served request with its full response."""

    client_ip: str
    request_time: str
    user_agent: str
    request_url: str
    response_time: str
    response: str


@dataclass
class RequestLogInfo:
    """A served request that asked for a symbol's price."""

    req_url: str
    response: str
    ip: str
    request_time: str
    request_timestamp: Optional[int]


def _symbol_clause(symbol: str, ip: str) -> tuple[str, list[Any]]:
    clause = _SYMBOL_FILTER
    args: list[Any] = [symbol, symbol]
    if ip:
        clause += " and client_ip = ?"
        args.append(ip)
    return clause, args


class LogInfoRepository:
    """Reads and writes the request log."""

    def __init__(self, connection: sqlite3.Connection):
        self._connection = connection

    def insert(self, entry: Mapping[str, Any], use_symbol: int) -> None:
        """Store one request; use_symbol is 1 for price requests, else 0."""
        with self._connection:
            self._connection.execute(
                _INSERT,
                (
                    entry.get("request_client_ip"),
                    entry.get("request_time"),
                    entry.get("request_ua"),
                    entry.get("request_uri"),
                    entry.get("response_time"),
                    entry.get("response"),
                    use_symbol,
                    entry.get("request_timestamp"),
                    entry.get("response_timestamp"),
                ),
            )

    def page(self, index: int, page_size: int) -> list[LogInfo]:
        """Return one page of the request log, newest first."""
        rows = self._connection.execute(
            "select client_ip,request_time,user_agent,request_url,response_time,"
            f"request_response from {TABLE_LOG_INFO} order by id desc limit ? offset ?",
            (page_size, index * page_size),
        ).fetchall()
        return [LogInfo(*row) for row in rows]

    def count_by_symbol(self, symbol: str, ip: str = "") -> int:
        """Count price requests mentioning a symbol, optionally from one client."""
        clause, args = _symbol_clause(symbol, ip)
        (total,) = self._connection.execute(
            f"select count(1) from {TABLE_LOG_INFO}{clause}", args
        ).fetchone()
        return int(total)

    def page_by_symbol(
        self, index: int, page_size: int, symbol: str, ip: str = ""
    ) -> list[RequestLogInfo]:
        """Return one page of price requests mentioning a symbol, newest first."""
        clause, args = _symbol_clause(symbol, ip)
        rows = self._connection.execute(
            "select client_ip,request_url,request_time,request_response,request_timestamp"
            f" from {TABLE_LOG_INFO}{clause} order by id desc limit ? offset ?",
            [*args, page_size, index * page_size],
        ).fetchall()
        return [
            RequestLogInfo(
                req_url=url,
                response=response,
                ip=client_ip,
                request_time=request_time,
                request_timestamp=None if ts is None else int(ts),
            )
            for client_ip, url, request_time, response, ts in rows
        ]

    def delete_older_than(self, timestamp: int) -> int:
        """Delete requests made at or before timestamp; return how many went."""
        with self._connection:
            cursor = self._connection.execute(
                f"delete from {TABLE_LOG_INFO} where request_timestamp <= ?", (timestamp,)
            )
        logger.info("exec delete log success,%d rows", cursor.rowcount)
        return cursor.rowcount