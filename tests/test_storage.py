import random
import sqlite3

import pytest

from proggen.library import PowerOfTwoRecord
from proggen.storage import (
    CHARSET,
    Cheating,
    connect,
    create_tables,
    random_string,
    save_genetic,
    save_peano,
    save_pow2,
)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "results.db")


def _rows(path, query):
    with sqlite3.connect(path) as db:
        return db.execute(query).fetchall()


def _history():
    return [
        PowerOfTwoRecord(4.0, 1.0, 0),
        PowerOfTwoRecord(3.0, 0.0, 1),
        PowerOfTwoRecord(8.0, 0.5, 2),
    ]


def test_connect_answers_queries(db_path):
    db = connect(db_path)
    try:
        assert db.execute("select 1").fetchone() == (1,)
    finally:
        db.close()


def test_create_tables(db_path):
    create_tables(db_path)
    create_tables(db_path)
    names = {row[0] for row in _rows(db_path, "select name from sqlite_master where type='table'")}
    assert names == {"history_power_of_two", "program_history", "campaigns"}


def test_random_string_uses_charset():
    s = random_string(40, random.Random(3))
    assert len(s) == 40
    assert set(s) <= set(CHARSET)


def test_random_string_deterministic_with_seed():
    first = random_string(16, random.Random(9))
    second = random_string(16, random.Random(9))
    assert len(first) == 16
    assert set(first) <= set(CHARSET)
    assert first == second


def test_cheating_values_are_stored(db_path):
    for depth, cheating in enumerate(Cheating):
        save_peano(db_path, 10, 0.0, False, 1, {depth: 1}, cheating)
    rows = _rows(db_path, "select depth, cheating from wiring order by depth")
    assert rows == [(0, 0), (1, 1), (2, 2)]


def test_save_peano(db_path):
    histogram = {1: 5, 2: 3}
    written = save_peano(db_path, 10, 0.1, True, 1, histogram, Cheating.ZERO_VALUE)
    assert written == len(histogram)
    rows = _rows(db_path, "select prog_l, wr_decay, wr_nearby, n_prog, depth, count, cheating from wiring order by depth")
    assert rows == [(10, 0.1, 1, 1, 1, 5, 1), (10, 0.1, 1, 1, 2, 3, 1)]


def test_save_pow2(db_path):
    history = _history()
    campaign_id = save_pow2(db_path, history, 100, 1.0)
    assert len(campaign_id) == 16
    rows = _rows(db_path, "select value, reward, time, campaign_id, proglen, decay from wire_pow_of_two order by time")
    assert rows == [
        (r.value, r.reward, r.time, campaign_id, 100, 1.0) for r in history
    ]


def test_save_genetic_needs_mut_column(db_path):
    create_tables(db_path)
    with pytest.raises(sqlite3.OperationalError):
        save_genetic(db_path, _history(), 1)


def test_save_genetic(db_path):
    with sqlite3.connect(db_path) as db:
        db.execute(
            "create table history_power_of_two "
            "(value real, reward real, time int, campaign_id string, mut int)"
        )
    campaign_id = save_genetic(db_path, _history(), 2)
    rows = _rows(db_path, "select value, campaign_id, mut from history_power_of_two order by time")
    assert rows == [(r.value, campaign_id, 2) for r in _history()]