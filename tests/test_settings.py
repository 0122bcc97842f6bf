import pytest

from pricefeed.repository.schema import TABLE_WEIGHT_INFO, connect
from pricefeed.repository.settings import (
    RecordNotFoundError,
    UpdateIntervalRepository,
    WeightInfoRepository,
)


@pytest.fixture
def connection():
    conn = connect()
    yield conn
    conn.close()


def test_check_update_weight_reads_record(connection):
    with connection:
        connection.execute(
            f"insert into {TABLE_WEIGHT_INFO} (symbol,exchange,weight) values (?,?,?)",
            ("btcusdt", "huobi", 2),
        )
    assert WeightInfoRepository(connection).check_update_weight("btcusdt", "huobi", 5) == 2


def test_check_update_weight_inserts_record(connection):
    repo = WeightInfoRepository(connection)
    assert repo.check_update_weight("btcusdt", "huobi", 2) == 2
    assert repo.check_update_weight("btcusdt", "huobi", 7) == 2


def test_set_weight(connection):
    repo = WeightInfoRepository(connection)
    repo.check_update_weight("btcusdt", "huobi", 2)
    repo.set_weight("btcusdt", "huobi", 3)
    assert repo.check_update_weight("btcusdt", "huobi", 1) == 3


def test_set_weight_only_touches_one_exchange(connection):
    repo = WeightInfoRepository(connection)
    repo.check_update_weight("btcusdt", "huobi", 2)
    repo.check_update_weight("btcusdt", "ok", 1)
    repo.set_weight("btcusdt", "huobi", 4)
    assert repo.check_update_weight("btcusdt", "ok", 9) == 1


def test_set_weight_missing_raises(connection):
    with pytest.raises(RecordNotFoundError):
        WeightInfoRepository(connection).set_weight("btcusdt", "huobi", 2)


def test_check_update_interval_inserts_then_reads(connection):
    repo = UpdateIntervalRepository(connection)
    assert repo.check_update_interval("btc-usdt", 60) == 60
    assert repo.check_update_interval("btc-usdt", 120) == 60


def test_set_update_interval(connection):
    repo = UpdateIntervalRepository(connection)
    repo.check_update_interval("btc-usdt", 60)
    repo.set_update_interval("btc-usdt", 30)
    assert repo.check_update_interval("btc-usdt", 90) == 30


def test_set_update_interval_missing_raises(connection):
    with pytest.raises(RecordNotFoundError):
        UpdateIntervalRepository(connection).set_update_interval("btc-usdt", 30)