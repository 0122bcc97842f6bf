import sqlite3

import pytest

from pricefeed.repository.schema import (
    ALL_TABLES,
    TABLE_COIN_PRICE,
    TABLE_UPDATE_PRICE_HISTORY,
    connect,
    create_tables,
)


def _table_names(connection):
    rows = connection.execute(
        "select name from sqlite_master where type = 'table'"
    ).fetchall()
    return {row[0] for row in rows}


def test_connect_creates_all_tables():
    connection = connect()
    try:
        assert set(ALL_TABLES) <= _table_names(connection)
    finally:
        connection.close()


def test_connect_creates_tables_named_by_source():
    connection = connect()
    try:
        names = _table_names(connection)
        expected = {
            "t_coin_history_info",
            "t_log_info",
            "t_http_error",
            "t_weight_info",
            "t_update_price_history",
            "t_update_interval",
        }
        assert expected <= names
    finally:
        connection.close()


def test_create_tables_is_idempotent():
    connection = connect()
    try:
        connection.execute(
            f"insert into {TABLE_COIN_PRICE} (symbol,timestamp,price,price_origin,weight)"
            " values(?,?,?,?,?)",
            ("btcusd", 1640330341, 58609.0, "huobi", 2),
        )
        connection.commit()
        create_tables(connection)
        count = connection.execute(f"select count(1) from {TABLE_COIN_PRICE}").fetchone()[0]
        assert count == 1
    finally:
        connection.close()


def test_update_history_primary_key_rejects_duplicates():
    connection = connect()
    try:
        sql = f"insert into {TABLE_UPDATE_PRICE_HISTORY} (timestamp,symbol) values (?,?)"
        connection.execute(sql, (1640330341, "btcusd"))
        with pytest.raises(sqlite3.IntegrityError):
            connection.execute(sql, (1640330341, "btcusd"))
    finally:
        connection.close()


def test_file_database_persists(tmp_path):
    path = tmp_path / "prices.db"
    first = connect(path)
    first.execute(
        f"insert into {TABLE_UPDATE_PRICE_HISTORY} (timestamp,symbol) values (?,?)",
        (1640330341, "btcusd"),
    )
    first.commit()
    first.close()

    second = connect(path)
    try:
        rows = second.execute(
            f"select timestamp, symbol from {TABLE_UPDATE_PRICE_HISTORY}"
        ).fetchall()
        assert rows == [(1640330341, "btcusd")]
    finally:
        second.close()