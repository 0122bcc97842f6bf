# pricefeed

`pricefeed` asks several exchanges for the spot price of trading pairs,
keeps recent price rounds in memory and stores price history, request logs,
fetch errors, exchange weights and update intervals in SQLite.

## Installation

```
pip install pricefeed
```

To run the tests:

```
pip install "pricefeed[test]"
pytest
```

## Modules

### `pricefeed.models`

- `PriceInfo`: one quote (`symbol`, `price`, `price_origin`, `weight`,
  `timestamp`). `to_dict()` gives the wire form with the key `priceOrigin`.
  `PriceInfo.from_dict()` reads it back.
- `ExchangeConfig`: an exchange `name`, its URL template `url` and its `weight`.
- `ErrorCode`: the integer codes used in API error responses, from
  `ERROR = -1000` to `SET_UPDATE_INTERVAL_ERROR = -991`. The module also
  defines the matching message strings such as `MSG_PARAM_NOT_TRUE`.

### `pricefeed.cache`

The caches are thread-safe and guarded by a lock.

- `PriceInfoCache`: a list of price rounds per symbol, oldest first.
  - `update(symbol, infos, max_mem_time)` strips `-` from the symbol and
    appends a round. Once there are more than `max_mem_time` rounds, it drops
    the oldest.
  - `latest(symbol)` returns the newest round, or `[]`.
  - `find_by_timestamp(symbol, timestamp)` returns the oldest non-empty round
    whose first quote has that timestamp, or `None`.
  - `by_range(symbol, start, end)` returns `{symbol: rounds[start:end]}`. It
    returns `{}` when `start` is past the end, and raises `ValueError` for a
    negative start or when `end < start`.
  - `len(cache)` is the number of symbols. `symbol_length(symbol)` is the
    number of rounds for one symbol.
- `RequestPriceConfs`: the exchanges to query for each symbol. It has
  `set_confs`, `snapshot`, `for_symbol` and `update_symbol_weight`.
- `UpdateIntervalCache`: the update interval for each symbol, set with `set`
  and read with `get`. `get` returns 0 for an unknown symbol.

### `pricefeed.tokens`

- `generate_token(username, secret)` issues an HS256 token. The token
  carries the `username`, the issuer `get-price` and an expiry two hours
  ahead.
- `parse_token(token, secret)` verifies a token and returns `AdminClaims`
  (`username`, `expires_at`, `issuer`). A token that is expired, forged or
  malformed raises `InvalidTokenError`.

### `pricefeed.parsers`

There is one parser per response format: `parse_binance_price`,
`parse_bitfinex_price`, `parse_bitstamp_price`, `parse_coinbase_price`,
`parse_cryptocompare_price`, `parse_huobi_price`, `parse_kucoin_price` and
`parse_ok_price`.

- A parser returns the price as a float. It returns `0.0` where the
  exchange reports that it has no price: an empty bitfinex list, a huobi
  "invalid symbol" error or an empty ask, or null kucoin data.
- A parser raises `PriceParseError` for any other malformed or error
  response.
- `parse_price(exchange_name, text)` picks the parser by name, ignoring
  case. It raises `UnknownExchangeError` for a name it does not know.

### `pricefeed.exchange`

- `FetchSettings` holds the exchanges, symbols, proxy, retry count, symbol
  replacements and delays.
- `build_exchange_url(url, symbol, exchange_name, replaces)` fills the
  placeholders of a URL template, formatting the symbol the way each
  exchange expects. Templates use `{$symbol}`, or `{$symbol1}` and
  `{$symbol2}` for ok and cryptocompare.
- `fetch_text(url, proxy)` and `fetch_exchange_response(...)` perform the
  GET. Any failure or non-200 status raises `ExchangeRequestError`.
- `get_price_by_conf(exchange, symbol, settings, on_error)` retries failed
  requests, except on HTTP 404. It returns `0.0` when no price could be
  had. After the last failed attempt it calls
  `on_error(url_template, symbol, message)`.
- `get_symbol_exchange_price(symbol, request_conf, settings, on_error)`
  queries all configured exchanges in parallel. It returns the non-zero
  quotes, all stamped with the same timestamp.
- `init_request_price_conf(settings, check_weight)` probes every exchange
  for every symbol and keeps those that answer. It can settle each weight
  through `check_weight(symbol, exchange, weight)`.

### `pricefeed.repository`

- `schema.connect(path=":memory:")` opens a SQLite database and creates the
  tables. `schema.create_tables(connection)` does the same for an existing
  connection.
- `coin_history.CoinHistoryRepository` stores and pages price quotes. It
  records each refresh in the update history as well.
- `http_errors.HttpErrorRepository` records failed exchange requests as
  `HttpErrorInfo`.
- `log_info.LogInfoRepository` stores served requests and searches them by
  symbol and client IP. Results come back as `LogInfo` and `RequestLogInfo`.
- `update_price_history.UpdatePriceRepository` pages refresh times as
  `UpdatePriceHistory`. It also returns the first refresh in each ten-minute
  window.
- `settings.UpdateIntervalRepository` and `settings.WeightInfoRepository`
  keep intervals and weights.
  - `check_update_*` returns the stored value, storing the given one first
    when there is none.
  - `set_*` changes a stored value and raises `RecordNotFoundError` when
    there is none.

All page methods take a zero-based page index and a page size.
`delete_older_than(timestamp)` methods return the number of rows deleted.

## Example

```python
from pricefeed.cache import PriceInfoCache
from pricefeed.models import PriceInfo
from pricefeed.parsers import parse_price

price = parse_price("binance", '{"symbol":"BTCUSDT","price":"47653.01000000"}')

cache = PriceInfoCache()
cache.update(
    "btc-usdt",
    [PriceInfo(symbol="btcusdt", price=price, price_origin="binance",
               weight=1, timestamp=1640745642)],
    max_mem_time=10,
)
latest = cache.latest("btcusdt")
```

```python
from pricefeed.exchange import FetchSettings, get_symbol_exchange_price
from pricefeed.models import ExchangeConfig
from pricefeed.repository.coin_history import CoinHistoryRepository
from pricefeed.repository.http_errors import HttpErrorRepository
from pricefeed.repository.schema import connect

connection = connect("prices.db")
errors = HttpErrorRepository(connection)
history = CoinHistoryRepository(connection)

binance = ExchangeConfig(
    name="binance",
    url="https://exchange.example.com/ticker?symbol={$symbol}",
    weight=1,
)
settings = FetchSettings(exchanges=[binance], symbols=["btc-usdt"])

quotes = get_symbol_exchange_price(
    "btc-usdt", {"btc-usdt": [binance]}, settings, on_error=errors.insert
)
history.insert_price_infos(quotes)
```

## What it does not do

`pricefeed` is a library. It has no command-line entry point and no HTTP
server, so it has no API routes, request-logging middleware or token-checking
middleware. It also has no scheduler that refreshes prices or prunes old rows
on its own. Applications call the functions and repositories above
themselves, for example `delete_older_than` on a timer of their own.