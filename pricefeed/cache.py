"""Thread-safe in-memory caches for prices, request configuration and
update intervals."""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import Iterable, Mapping, Optional

from pricefeed.models import ExchangeConfig, PriceInfo

PriceInfos = list[PriceInfo]


class PriceInfoCache:
    """Per-symbol history of price snapshots, oldest first."""

    def __init__(self, initial: Optional[Mapping[str, Iterable[Iterable[PriceInfo]]]] = None):
        self._lock = threading.RLock()
        self._cache: dict[str, list[PriceInfos]] = {
            symbol: [list(infos) for infos in snapshots]
            for symbol, snapshots in (initial or {}).items()
        }

    def latest(self, symbol: str) -> PriceInfos:
        """Return the newest snapshot for a symbol, or an empty list."""
        with self._lock:
            snapshots = self._cache.get(symbol)
            return list(snapshots[-1]) if snapshots else []

    def find_by_timestamp(self, symbol: str, timestamp: int) -> Optional[PriceInfos]:
        """Return the oldest non-empty snapshot taken at the timestamp, or None."""
        with self._lock:
            return next(
                (
                    list(infos)
                    for infos in self._cache.get(symbol, [])
                    if infos and infos[0].timestamp == timestamp
                ),
                None,
            )

    def by_range(self, symbol: str, start: int, end: int) -> dict[str, list[PriceInfos]]:
        """Return snapshots start..end of a symbol; empty when start is past the end."""
        if start < 0 or end < start:
            raise ValueError(f"invalid range {start}:{end}")
        with self._lock:
            snapshots = self._cache.get(symbol, [])
            if start >= len(snapshots):
                return {}
            return {symbol: [list(infos) for infos in snapshots[start:end]]}

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def symbol_length(self, symbol: str) -> int:
        """Return the number of snapshots held for a symbol."""
        with self._lock:
            return len(self._cache.get(symbol, []))

    def update(self, symbol: str, infos: Iterable[PriceInfo], max_mem_time: int) -> None:
        """Append a snapshot, dropping the oldest one when over max_mem_time."""
        symbol = symbol.replace("-", "")
        with self._lock:
            snapshots = self._cache.setdefault(symbol, [])
            snapshots.append(list(infos))
            if len(snapshots) > max_mem_time:
                del snapshots[0]


class RequestPriceConfs:
    """Exchange configuration per symbol, shared between threads."""

    def __init__(self):
        self._lock = threading.RLock()
        self._confs: dict[str, list[ExchangeConfig]] = {}

    def set_confs(self, confs: Mapping[str, Iterable[ExchangeConfig]]) -> None:
        """Replace the whole configuration."""
        new_confs = {symbol: list(items) for symbol, items in confs.items()}
        with self._lock:
            self._confs = new_confs

    def snapshot(self) -> dict[str, list[ExchangeConfig]]:
        """Return a copy of the configuration for every symbol."""
        with self._lock:
            return {symbol: list(items) for symbol, items in self._confs.items()}

    def for_symbol(self, symbol: str) -> list[ExchangeConfig]:
        """Return the exchanges configured for a symbol."""
        with self._lock:
            return list(self._confs.get(symbol, []))

    def update_symbol_weight(self, symbol: str, exchange: str, weight: int) -> None:
        """Set the weight of one exchange for a symbol, if configured."""
        with self._lock:
            items = self._confs.get(symbol, [])
            for position, conf in enumerate(items):
                if conf.name == exchange:
                    items[position] = replace(conf, weight=int(weight))
                    break


class UpdateIntervalCache:
    """Update interval in seconds per symbol."""

    def __init__(self):
        self._lock = threading.RLock()
        self._intervals: dict[str, int] = {}

    def set(self, symbol: str, interval: int) -> None:
        """Record the interval for a symbol."""
        with self._lock:
            self._intervals[symbol] = interval

    def get(self, symbol: str) -> int:
        """Return the interval for a symbol, 0 when unknown."""
        with self._lock:
            return self._intervals.get(symbol, 0)