"""Saving experiment results to SQLite."""

from __future__ import annotations

import enum
import logging
import random
import sqlite3
from contextlib import closing
from typing import Iterable, Mapping

from proggen.library import PowerOfTwoRecord

logger = logging.getLogger(__name__)

CHARSET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
CAMPAIGN_ID_LENGTH = 16


class Cheating(enum.IntEnum):
    """Whether the Peano ``zero`` is made special in an experiment."""

    NO_CHEATING = 0
    ZERO_VALUE = 1
    ZERO_ONLY_ONCE = 2


def connect(path: str) -> sqlite3.Connection:
    """Open the database at ``path`` and check that it answers."""
    db = sqlite3.connect(path)
    try:
        db.execute("select 1").fetchone()
    except sqlite3.Error:
        db.close()
        raise
    return db


def create_tables(path: str) -> None:
    """Create the history, program history and campaign tables."""
    statements = (
        "create table if not exists history_power_of_two "
        "(value real, reward real, time int, campaign_id string)",
        "create table if not exists program_history "
        "(prog string, reward real, time int, campaign_id string)",
        "create table if not exists campaigns "
        "(campaign_id string, dtime datetime, n_iter int, ltype int)",
    )
    with closing(connect(path)) as db, db:
        for statement in statements:
            db.execute(statement)


def random_string(length: int, rng: random.Random | None = None) -> str:
    """A random alphanumeric string of ``length`` characters."""
    rng = rng if rng is not None else random.Random()
    return "".join(rng.choice(CHARSET) for _ in range(length))


def save_peano(
    path: str,
    program_length: int,
    decay: float,
    wire_nearby: bool,
    nprog: int,
    histogram: Mapping[int, int],
    cheating: Cheating,
) -> int:
    """Store a value histogram of a wiring experiment; return rows written.

    Insertion stops at the first failing row, which is logged.
    """
    written = 0
    with closing(connect(path)) as db, db:
        db.execute(
            "create table if not exists wiring(prog_l int, wr_decay real, "
            "wr_nearby bool, n_prog int, depth int, count int, cheating int)"
        )
        for value, count in histogram.items():
            try:
                db.execute(
                    "insert into wiring values(?,?,?,?,?,?,?)",
                    (
                        program_length,
                        decay,
                        bool(wire_nearby),
                        nprog,
                        value,
                        count,
                        int(cheating),
                    ),
                )
            except sqlite3.Error as exc:
                logger.error(
                    "Error saving wiring: length=%s decay=%s nprog=%s: %s",
                    program_length,
                    decay,
                    nprog,
                    exc,
                )
                break
            written += 1
    return written


def save_pow2(
    path: str,
    history: Iterable[PowerOfTwoRecord],
    program_length: int,
    decay: float,
) -> str:
    """Store power-of-two history of a wiring run; return its campaign id."""
    campaign_id = random_string(CAMPAIGN_ID_LENGTH)
    with closing(connect(path)) as db, db:
        db.execute(
            "create table if not exists wire_pow_of_two (value real, reward real, "
            "time int, campaign_id string, proglen int, decay float)"
        )
        db.executemany(
            "insert into wire_pow_of_two "
            "(value, reward, time, campaign_id, proglen, decay) values (?,?,?,?,?,?)",
            (
                (r.value, r.reward, r.time, campaign_id, program_length, decay)
                for r in history
            ),
        )
    return campaign_id


def save_genetic(
    path: str, history: Iterable[PowerOfTwoRecord], ltype: int
) -> str:
    """Store power-of-two history of a genetic run; return its campaign id.

    The ``history_power_of_two`` table must already have a ``mut`` column.
    """
    campaign_id = random_string(CAMPAIGN_ID_LENGTH)
    with closing(connect(path)) as db, db:
        db.executemany(
            "insert into history_power_of_two "
            "(value, reward, time, campaign_id, mut) values (?,?,?,?,?)",
            ((r.value, r.reward, r.time, campaign_id, int(ltype)) for r in history),
        )
    return campaign_id