import pytest
from freezegun import freeze_time

from pricefeed.repository.http_errors import HttpErrorInfo, HttpErrorRepository
from pricefeed.repository.schema import connect

HTTP_ERROR_INFO = HttpErrorInfo(
    url="https://api-pub.bitfinex.com/v2/tickers?symbols=t{$symbol}",
    symbol="knc-usdt",
    error="status code :429 url:https://api-pub.bitfinex.com/v2/tickers?symbols=tKNCUSD",
    timestamp=1639641289,
)


@pytest.fixture
def repo():
    conn = connect()
    yield HttpErrorRepository(conn)
    conn.close()


def test_page(repo):
    repo.insert(
        HTTP_ERROR_INFO.url,
        HTTP_ERROR_INFO.symbol,
        HTTP_ERROR_INFO.error,
        HTTP_ERROR_INFO.timestamp,
    )
    assert repo.page(0, 20, "knc-usdt") == [HTTP_ERROR_INFO]


def test_count(repo):
    for _ in range(10):
        repo.insert(HTTP_ERROR_INFO.url, HTTP_ERROR_INFO.symbol, HTTP_ERROR_INFO.error)
    assert repo.count("knc-usdt") == 10
    assert repo.count("btc-usdt") == 0


def test_insert_uses_current_time():
    conn = connect()
    try:
        repo = HttpErrorRepository(conn)
        with freeze_time("2021-12-16 07:54:49"):
            repo.insert(HTTP_ERROR_INFO.url, HTTP_ERROR_INFO.symbol, HTTP_ERROR_INFO.error)
        assert repo.page(0, 20, "knc-usdt") == [HTTP_ERROR_INFO]
    finally:
        conn.close()


def test_page_is_newest_first_and_filtered(repo):
    repo.insert("u1", "knc-usdt", "e1", 1)
    repo.insert("u2", "knc-usdt", "e2", 2)
    repo.insert("u3", "btc-usdt", "e3", 3)
    repo.insert("u4", "knc-usdt", "e4", 4)
    first = repo.page(0, 2, "knc-usdt")
    second = repo.page(1, 2, "knc-usdt")
    assert [info.url for info in first] == ["u4", "u2"]
    assert [info.url for info in second] == ["u1"]
    assert repo.page(2, 2, "knc-usdt") == []