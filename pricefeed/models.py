"""Core value types shared across the price feed: price records, exchange
configuration entries and API error codes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Mapping

MSG_URL_NOT_FIND = "url not find"
MSG_PRICE_NOT_READY = "price not ready"
MSG_PARAM_NOT_TRUE = "param not true"
MSG_GET_ARES_ERROR = "get ares info error"
MSG_PARSE_PARAM_ERROR = "parse param error"
MSG_GET_LOG_INFO_ERROR = "get log info error"
MSG_CHECK_USER_ERROR = "user and password not match"


@dataclass
class PriceInfo:
    """One price quote for a symbol from one exchange at one moment."""

    symbol: str = ""
    price: float = 0.0
    price_origin: str = ""
    weight: int = 0
    timestamp: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the record with the field names used on the wire."""
        return {
            "symbol": self.symbol,
            "price": self.price,
            "priceOrigin": self.price_origin,
            "weight": self.weight,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PriceInfo":
        """Build a record from its wire form; missing fields take zero values."""
        return cls(
            symbol=data.get("symbol", ""),
            price=float(data.get("price", 0.0)),
            price_origin=data.get("priceOrigin", ""),
            weight=int(data.get("weight", 0)),
            timestamp=int(data.get("timestamp", 0)),
        )


@dataclass
class ExchangeConfig:
    """An exchange to query: its name, URL template and weight."""

    name: str
    url: str = ""
    weight: int = 0


class ErrorCode(IntEnum):
    """Codes carried in API error responses."""

    ERROR = -1000
    NO_MATCH_FORMAT_ERROR = -999
    PARAM_NOT_TRUE_ERROR = -998
    GET_ARES_INFO_ERROR = -997
    PARSE_PARAM_ERROR = -996
    GET_LOG_INFO_ERROR = -995
    GET_HTTP_ERROR_ERROR = -994
    CHECK_USER_ERROR = -993
    SET_WEIGHT_ERROR = -992
    SET_UPDATE_INTERVAL_ERROR = -991