"""Fetching prices from exchanges over HTTP."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Callable, Mapping, Optional, Sequence

import requests

from pricefeed.models import ExchangeConfig, PriceInfo
from pricefeed.parsers import PriceParseError, UnknownExchangeError, parse_price

logger = logging.getLogger(__name__)

_TIMEOUT = 10.0
_PROXY_HEADER_TIMEOUT = 5.0
_STAGGERED_EXCHANGES = frozenset({"coinbase", "bitfinex"})

SymbolReplaces = Mapping[str, Mapping[str, str]]
ErrorCallback = Callable[[str, str, str], None]
WeightCheck = Callable[[str, str, int], int]


@dataclass
class FetchSettings:
    """What to query and how hard to try."""

    exchanges: list[ExchangeConfig] = field(default_factory=list)
    symbols: list[str] = field(default_factory=list)
    proxy: str = ""
    retry_count: int = 3
    symbol_replaces: dict[str, dict[str, str]] = field(default_factory=dict)
    retry_delay: float = 3.0
    stagger_delay: float = 0.11


class ExchangeRequestError(Exception):
    """Raised when an exchange cannot be asked for a price."""


def fetch_text(url: str, proxy: str = "") -> str:
    """GET a URL, optionally through a proxy, and return the body text."""
    options: dict = {"timeout": _TIMEOUT}
    if proxy:
        options["proxies"] = {"http": proxy, "https": proxy}
        options["timeout"] = (_TIMEOUT, _PROXY_HEADER_TIMEOUT)
    try:
        with requests.get(url, **options) as response:
            if response.status_code != 200:
                raise ExchangeRequestError(
                    f"status code :{response.status_code} url:{url}"
                )
            return response.text
    except requests.RequestException as exc:
        logger.error("getPrice error: %s", exc)
        raise ExchangeRequestError(str(exc)) from exc


def _split_pair(symbol: str) -> tuple[str, str]:
    base, dash, quote = symbol.partition("-")
    if not dash:
        raise ExchangeRequestError(f"symbol has no pair separator: {symbol}")
    return base, quote


def build_exchange_url(
    url: str, symbol: str, exchange_name: str, replaces: Optional[SymbolReplaces] = None
) -> str:
    """Fill the symbol placeholders of an exchange URL template."""
    low_name = exchange_name.lower()
    symbol_replaces = (replaces or {}).get(symbol) or {}
    symbol = symbol_replaces.get(low_name, symbol)

    if low_name in ("ok", "cryptocompare"):
        if "{$symbol1}" not in url or "{$symbol2}" not in url:
            raise ExchangeRequestError(f"symbol not find in {low_name} url")
        base, quote = _split_pair(symbol)
        return url.replace("{$symbol1}", base).replace("{$symbol2}", quote)

    if low_name == "binance":
        filled = symbol.replace("-", "").upper()
    elif low_name == "huobi":
        filled = symbol.replace("-", "").lower()
    elif low_name == "bitfinex":
        filled = symbol.replace("-", "").replace("usdt", "usd").upper()
    elif low_name == "coinbase":
        filled = symbol.lower()
    elif low_name == "bitstamp":
        filled = symbol.replace("-", "").lower()
    elif low_name == "kucoin":
        filled = symbol.upper()
    else:
        raise ExchangeRequestError("unknow exchangeName:" + exchange_name)

    if "{$symbol}" not in url:
        raise ExchangeRequestError(f"symbol not find in {low_name} url")
    return url.replace("{$symbol}", filled)


def fetch_exchange_response(
    url: str,
    symbol: str,
    exchange_name: str,
    proxy: str = "",
    replaces: Optional[SymbolReplaces] = None,
) -> str:
    """Ask one exchange for the ticker of a symbol and return the raw body."""
    return fetch_text(build_exchange_url(url, symbol, exchange_name, replaces), proxy)


def get_price_by_conf(
    exchange: ExchangeConfig,
    symbol: str,
    settings: FetchSettings,
    on_error: Optional[ErrorCallback] = None,
) -> float:
    """Return the exchange's price for a symbol, or 0.0 when none is had.

    Failed requests are retried, except on HTTP 404. When every attempt
    fails, on_error receives the URL template, the symbol and the message.
    """
    response_text = ""
    error: Optional[ExchangeRequestError] = None
    for attempt in range(settings.retry_count):
        try:
            response_text = fetch_exchange_response(
                exchange.url, symbol, exchange.name, settings.proxy, settings.symbol_replaces
            )
        except ExchangeRequestError as exc:
            error = exc
            if "404" in str(exc) or attempt == settings.retry_count - 1:
                break
            time.sleep(settings.retry_delay)
        else:
            error = None
            break

    if error is not None:
        logger.error(
            "get price by symbol exchange error,symbol:%s,exchange:%s: %s",
            symbol, exchange.name, error,
        )
        if on_error is not None:
            try:
                on_error(exchange.url, symbol, str(error))
            except Exception:
                logger.exception("recording the http error failed")
        return 0.0

    try:
        return parse_price(exchange.name, response_text)
    except UnknownExchangeError:
        logger.error(
            "unknown exchange,symbol:%s,exchange:%s, response:%s",
            symbol, exchange.name, response_text,
        )
    except PriceParseError as exc:
        logger.error("response: %s err: %s", response_text, exc)
    return 0.0


def get_symbol_exchange_price(
    symbol: str,
    request_conf: Mapping[str, Sequence[ExchangeConfig]],
    settings: FetchSettings,
    on_error: Optional[ErrorCallback] = None,
) -> list[PriceInfo]:
    """Query every exchange configured for a symbol at once.

    All quotes share one timestamp; exchanges that gave no price are left out.
    """
    timestamp = int(time.time())
    confs = list(request_conf.get(symbol, []))
    if not confs:
        return []
    clean_symbol = symbol.replace("-", "")

    def quote(conf: ExchangeConfig) -> PriceInfo:
        weight = next((c.weight for c in confs if c.name == conf.name), 0)
        return PriceInfo(
            symbol=clean_symbol,
            price=get_price_by_conf(conf, symbol, settings, on_error),
            price_origin=conf.name,
            weight=weight,
            timestamp=timestamp,
        )

    with ThreadPoolExecutor(max_workers=len(confs)) as pool:
        infos = list(pool.map(quote, confs))
    return [info for info in infos if info.price != 0]


def init_request_price_conf(
    settings: FetchSettings, check_weight: Optional[WeightCheck] = None
) -> dict[str, list[ExchangeConfig]]:
    """Probe every exchange for every symbol and keep those that answer.

    check_weight, when given, receives (symbol, exchange name, weight) and
    returns the weight to use; its exceptions propagate.
    """
    probes = []
    workers = max(1, len(settings.exchanges) * len(settings.symbols))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        for exchange in settings.exchanges:
            for symbol in settings.symbols:
                future = pool.submit(get_price_by_conf, exchange, symbol, settings)
                probes.append((exchange, symbol, future))
                if exchange.name in _STAGGERED_EXCHANGES:
                    time.sleep(settings.stagger_delay)

    result: dict[str, list[ExchangeConfig]] = {}
    for exchange, symbol, future in probes:
        if future.result() != 0:
            result.setdefault(symbol, []).append(replace(exchange))

    if check_weight is not None:
        for symbol, confs in result.items():
            result[symbol] = [
                replace(conf, weight=int(check_weight(symbol, conf.name, conf.weight)))
                for conf in confs
            ]
    return result