import pytest

from pricefeed.models import ErrorCode, ExchangeConfig, PriceInfo


def test_price_info_to_dict_uses_wire_names():
    info = PriceInfo("btcusd", 58609.0, "huobi", 2, 1640330341)
    assert info.to_dict() == {
        "symbol": "btcusd",
        "price": 58609.0,
        "priceOrigin": "huobi",
        "weight": 2,
        "timestamp": 1640330341,
    }


def test_price_info_round_trip():
    info = PriceInfo("ethusdt", 3100.5, "binance", 1, 1640745642)
    assert PriceInfo.from_dict(info.to_dict()) == info


def test_price_info_from_partial_dict_uses_zero_values():
    info = PriceInfo.from_dict({"symbol": "btcusdt"})
    assert info == PriceInfo(symbol="btcusdt")
    assert info.price == 0.0
    assert info.weight == 0


def test_error_code_starts_at_minus_thousand():
    assert ErrorCode(-1000) is ErrorCode.ERROR


@pytest.mark.parametrize("offset", range(10))
def test_error_codes_are_consecutive(offset):
    code = ErrorCode(-1000 + offset)
    assert list(ErrorCode).index(code) == offset
    assert int(code) == -1000 + offset


def test_error_code_lookup_by_value():
    assert ErrorCode(int(ErrorCode.PARAM_NOT_TRUE_ERROR)) is ErrorCode.PARAM_NOT_TRUE_ERROR
    assert ErrorCode.PARAM_NOT_TRUE_ERROR == ErrorCode.NO_MATCH_FORMAT_ERROR + 1


def test_exchange_config_defaults_and_equality():
    conf = ExchangeConfig("huobi")
    assert conf.weight == 0
    assert conf.url == ""
    assert conf == ExchangeConfig(name="huobi", url="", weight=0)