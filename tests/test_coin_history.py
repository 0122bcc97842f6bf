import pytest

from pricefeed.models import PriceInfo
from pricefeed.repository.coin_history import CoinHistoryRepository
from pricefeed.repository.schema import TABLE_UPDATE_PRICE_HISTORY, connect

PRICE_INFO = PriceInfo(
    symbol="btcusd",
    price=58609,
    price_origin="huobi",
    weight=2,
    timestamp=1640330341,
)


@pytest.fixture
def connection():
    conn = connect()
    yield conn
    conn.close()


@pytest.fixture
def repo(connection):
    return CoinHistoryRepository(connection)


def test_history_by_symbol(repo):
    repo.insert_price_infos([PRICE_INFO])
    assert repo.history_by_symbol(0, 20, "btcusd") == [PRICE_INFO]


def test_history_by_symbol_and_timestamp(repo):
    repo.insert_price_infos([PRICE_INFO])
    assert repo.history_by_symbol_and_timestamp("btcusd", 1640330341) == [PRICE_INFO]
    assert repo.history_by_symbol_and_timestamp("btcusd", 1640330340) == []


def test_count_by_symbol(repo):
    repo.insert_price_infos(
        PriceInfo("btcusd", 58609, "huobi", 2, 1640330341 + n) for n in range(10)
    )
    assert repo.count_by_symbol("btcusd") == 10
    assert repo.count_by_symbol("ethusd") == 0


def test_insert_records_update_history_once(repo, connection):
    other = PriceInfo("btcusd", 58610, "binance", 1, 1640330341)
    repo.insert_price_infos([PRICE_INFO, other])
    rows = connection.execute(
        f"select timestamp, symbol from {TABLE_UPDATE_PRICE_HISTORY}"
    ).fetchall()
    assert rows == [(1640330341, "btcusd")]
    assert repo.count_by_symbol("btcusd") == 2


def test_pagination_newest_first(repo):
    infos = [PriceInfo("btcusd", 58609 + n, "huobi", 2, 1640330341 + n) for n in range(3)]
    repo.insert_price_infos(infos)
    assert repo.history_by_symbol(0, 2, "btcusd") == [infos[2], infos[1]]
    assert repo.history_by_symbol(1, 2, "btcusd") == [infos[0]]
    assert repo.history_by_symbol(2, 2, "btcusd") == []


def test_same_timestamp_ordered_newest_first(repo):
    other = PriceInfo("btcusd", 58610, "binance", 1, 1640330341)
    repo.insert_price_infos([PRICE_INFO, other])
    assert repo.history_by_symbol_and_timestamp("btcusd", 1640330341) == [other, PRICE_INFO]


def test_delete_older_than(repo):
    infos = [PriceInfo("btcusd", 58609, "huobi", 2, 1640330341 + n) for n in range(3)]
    repo.insert_price_infos(infos)
    assert repo.delete_older_than(1640330342) == 2
    assert repo.history_by_symbol(0, 20, "btcusd") == [infos[2]]