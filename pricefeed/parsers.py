"""Parsers that pull a price out of each exchange's ticker response."""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Callable

logger = logging.getLogger(__name__)


class PriceParseError(ValueError):
    """Raised when an exchange response holds no usable price."""


class UnknownExchangeError(ValueError):
    """Raised when no parser exists for an exchange name."""


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def _load(text: str) -> Any:
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise PriceParseError(f"invalid JSON: {exc}") from exc


def _load_object(text: str) -> dict[str, Any]:
    data = _load(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise PriceParseError(f"expected a JSON object: {text}")
    return data


def _field(obj: dict[str, Any], name: str) -> Any:
    """Look a key up case-insensitively; the last matching key wins."""
    wanted = name.lower()
    value = None
    for key, item in obj.items():
        if key.lower() == wanted:
            value = item
    return value


def _string_field(obj: dict[str, Any], name: str) -> str:
    value = _field(obj, name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise PriceParseError(f"field {name!r} is not a string")
    return value


def _parse_float(text: str) -> float:
    if text != text.strip() or "_" in text:
        raise PriceParseError(f"invalid number: {text!r}")
    try:
        value = float(text)
    except ValueError as exc:
        raise PriceParseError(f"invalid number: {text!r}") from exc
    if math.isinf(value) and "inf" not in text.lower():
        raise PriceParseError(f"number out of range: {text!r}")
    return value


def parse_binance_price(text: str) -> float:
    """Parse a response such as {"symbol":"BTCUSDT","price":"47653.01000000"}."""
    return _parse_float(_string_field(_load_object(text), "price"))


def parse_bitfinex_price(text: str) -> float:
    """Take the second element of a tickers response; "[]" means no price."""
    if text == "[]":
        return 0.0
    first = text.find(",")
    if first == -1:
        raise PriceParseError("unknow rsp format:" + text)
    rest = text[first + 1:]
    second = rest.find(",")
    if second == -1:
        raise PriceParseError("unknow rsp format:" + text)
    return _parse_float(rest[:second])


def parse_bitstamp_price(text: str) -> float:
    """Parse the "last" field of a ticker response."""
    return _parse_float(_string_field(_load_object(text), "last"))


def parse_coinbase_price(text: str) -> float:
    """Parse the best bid of an order-book response."""
    bids = _field(_load_object(text), "bids")
    if bids is None:
        bids = []
    if not isinstance(bids, list) or not all(
        isinstance(row, list) or row is None for row in bids
    ):
        raise PriceParseError("field 'bids' is not a list of lists")
    try:
        best = bids[0][0]
    except (IndexError, TypeError) as exc:
        raise PriceParseError("no bids in response") from exc
    if not isinstance(best, str):
        raise PriceParseError("bid price is not a string")
    return _parse_float(best)


def parse_cryptocompare_price(text: str) -> float:
    """Parse a response such as {"USD":45883.67}."""
    colon = text.find(":")
    if colon == -1:
        raise PriceParseError("unknow rsp format:" + text)
    return _parse_float(text[colon + 1:len(text) - 1])


def parse_huobi_price(text: str) -> float:
    """Parse the best ask of a merged-detail response."""
    data = _load_object(text)
    status = _string_field(data, "status")
    error_message = _string_field(data, "err-msg")
    tick = _field(data, "tick")
    if tick is None:
        tick = {}
    if not isinstance(tick, dict):
        raise PriceParseError("field 'tick' is not an object")
    ask = _field(tick, "ask")
    if ask is None:
        ask = []
    if not isinstance(ask, list) or not all(
        isinstance(item, (int, float)) and not isinstance(item, bool) for item in ask
    ):
        raise PriceParseError("field 'ask' is not a list of numbers")

    if status == "error":
        if error_message == "invalid symbol":
            return 0.0
        raise PriceParseError("some error")
    if not ask:
        logger.info("response: %s Tick: %s", status, tick)
        return 0.0
    return float(ask[0])


def parse_kucoin_price(text: str) -> float:
    """Parse a level-1 response; a null data block means no price."""
    data = _load(text)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise PriceParseError(f"expected a JSON object: {text}")
    if data.get("code") != "200000":
        raise PriceParseError("some error")
    payload = data.get("data")
    if payload is None:
        return 0.0
    if not isinstance(payload, dict) or not isinstance(payload.get("price"), str):
        raise PriceParseError("no price string in data")
    return _parse_float(payload["price"])


def parse_ok_price(text: str) -> float:
    """Parse the "best_ask" field of a ticker response."""
    return _parse_float(_string_field(_load_object(text), "best_ask"))


_PARSERS: dict[str, Callable[[str], float]] = {
    "binance": parse_binance_price,
    "huobi": parse_huobi_price,
    "bitfinex": parse_bitfinex_price,
    "ok": parse_ok_price,
    "cryptocompare": parse_cryptocompare_price,
    "coinbase": parse_coinbase_price,
    "bitstamp": parse_bitstamp_price,
    "kucoin": parse_kucoin_price,
}


def parse_price(exchange_name: str, text: str) -> float:
    """Parse a response with the parser of the named exchange."""
    parser = _PARSERS.get(exchange_name.lower())
    if parser is None:
        raise UnknownExchangeError(f"unknown exchange: {exchange_name}")
    return parser(text)