import sqlite3

import pytest

from n8line.database.create_schema import connect
from n8line.database.db_utils import (
    count_hands,
    fetch_hands,
    first_hand_date,
    get_hand_by_id,
    insert_hand,
)
from n8line.errors import DuplicateHandError, StorageError, ValidationError
from n8line.ingest import batch_import as bi
from n8line.models import Action, Stage
from n8line.parse.hand_parser import parse_text


# ---------- db_utils ----------
def test_insert_and_read_back(db, hh_three):
    hand = parse_text(hh_three)[1]
    insert_hand(db, hand)
    stored = get_hand_by_id(db, hand.hand_id)
    assert stored == hand
    row = db.execute(
        "SELECT hero_preflop_actions, hero_flop_actions, game_type FROM poker_hands"
    ).fetchone()
    assert tuple(row) == ("R", "B", "Rush & Cash")


def test_get_missing_hand(db):
    assert get_hand_by_id(db, "RC404") is None


def test_duplicate_insert_raises(db, make_hand):
    hand = make_hand(hand_id="RC1")
    insert_hand(db, hand)
    with pytest.raises(DuplicateHandError) as exc:
        insert_hand(db, hand)
    assert exc.value.hand_id == "RC1"
    assert count_hands(db) == 1


def test_empty_hand_id_rejected(db, make_hand):
    with pytest.raises(ValidationError):
        insert_hand(db, make_hand(hand_id=" "))
    assert count_hands(db) == 0


def test_storage_error_wrapped(tmp_path, make_hand):
    cx = connect(tmp_path / "x.db")
    cx.close()
    with pytest.raises(StorageError) as exc:
        insert_hand(cx, make_hand())
    assert isinstance(exc.value.original, sqlite3.Error)
    assert exc.value.operation == "insert_hand"


def test_fetch_hands_order_and_dates(db, make_hand):
    for ts in ("2024/01/20 10:00:00", "2024/01/10 10:00:00", "2024/02/01 00:00:01"):
        insert_hand(db, make_hand(start_time=ts))

    asc = [h.start_time[:10] for h in fetch_hands(db)]
    assert asc == ["2024/01/10", "2024/01/20", "2024/02/01"]
    desc = [h.start_time[:10] for h in fetch_hands(db, "DESC")]
    assert desc == list(reversed(asc))

    jan = fetch_hands(db, date_from="2024-01-10", date_to="2024-01-20")
    assert len(jan) == 2  # обе границы включительно
    assert len(fetch_hands(db, date_from="2024-01-21")) == 1
    assert len(fetch_hands(db, date_to="2024-01-09")) == 0


def test_first_hand_date(db, make_hand):
    assert first_hand_date(db) is None
    insert_hand(db, make_hand(start_time="2023/11/05 09:00:00"))
    insert_hand(db, make_hand(start_time="2024/01/15 20:00:00"))
    assert first_hand_date(db) == "2023-11-05"


def test_fetch_hands_bad_order(db):
    with pytest.raises(ValidationError):
        fetch_hands(db, "RANDOM")


# ---------- batch_import ----------
def test_store_hands_is_idempotent(db, hh_three):
    hands = parse_text(hh_three)
    first = bi.store_hands(db, hands)
    assert (first.inserted, first.skipped) == (3, 0)
    assert first.profit == 3.55

    second = bi.store_hands(db, hands)
    assert (second.inserted, second.skipped) == (0, 3)
    assert second.profit == 0.0
    assert count_hands(db) == 3


def test_store_hands_unique_fallback(db, make_hand, monkeypatch):
    hand = make_hand(hand_id="RC42")
    insert_hand(db, hand)
    # предпроверка «не видит» раздачу — спасает UNIQUE constraint
    monkeypatch.setattr(bi, "get_hand_by_id", lambda cx, hand_id: None)
    stats = bi.store_hands(db, [hand])
    assert (stats.inserted, stats.skipped) == (0, 1)
    assert count_hands(db) == 1


def test_store_hands_counts_rejected(db, make_hand):
    stats = bi.store_hands(db, [make_hand(hand_id=""), make_hand()])
    assert (stats.inserted, stats.rejected) == (1, 1)


def test_store_hands_storage_error_keeps_earlier_inserts(db, make_hand, monkeypatch):
    good, bad = make_hand(), make_hand()
    real_insert = bi.insert_hand

    def flaky_insert(cx, hand):
        if hand is bad:
            raise StorageError("disk I/O error", "insert_hand")
        real_insert(cx, hand)

    monkeypatch.setattr(bi, "insert_hand", flaky_insert)
    with pytest.raises(StorageError):
        bi.store_hands(db, [good, bad])
    assert get_hand_by_id(db, good.hand_id) is not None


def test_batch_import_folder(tmp_path, hh_dir):
    db_path = tmp_path / "out" / "poker.db"
    seen = []
    summary = bi.batch_import(hh_dir, db_path, on_file=lambda f, s: seen.append(f.name))

    assert seen == ["GG20240115-RushAndCash.txt", "GG20240201-Paris.txt"]
    assert summary.totals.inserted == 4
    assert summary.totals.profit == 3.45
    assert db_path.exists()

    again = bi.batch_import(hh_dir, db_path)
    assert (again.totals.inserted, again.totals.skipped) == (0, 4)
    assert hh_dir.joinpath("GG20240115-RushAndCash.txt").exists()  # файлы не удаляем


def test_batch_import_survives_invalid_bytes(tmp_path, hh_three, hh_cash_feb):
    folder = tmp_path / "hh"
    folder.mkdir()
    (folder / "a.txt").write_bytes(b"\xff\xfe junk \x80\n" + hh_cash_feb.encode("utf-8"))
    (folder / "b.txt").write_text(hh_three, encoding="utf-8")

    summary = bi.batch_import(folder, tmp_path / "poker.db")
    assert summary.totals.inserted == 4


def test_batch_import_missing_folder(tmp_path):
    with pytest.raises(ValidationError):
        bi.batch_import(tmp_path / "nope", tmp_path / "poker.db")


def test_batch_import_no_files(tmp_path):
    (tmp_path / "empty").mkdir()
    with pytest.raises(ValidationError):
        bi.batch_import(tmp_path / "empty", tmp_path / "poker.db")


def test_actions_survive_storage(db, hh_cash_feb):
    hand = parse_text(hh_cash_feb)[0]
    insert_hand(db, hand)
    stored = fetch_hands(db)[0]
    assert stored.hero_actions[Stage.FLOP] == (Action.CHECK, Action.FOLD)
    assert stored.hero_actions[Stage.TURN] == ()
