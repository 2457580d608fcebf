# db_utils.py

from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Literal

from n8line.errors import DuplicateHandError, StorageError, ValidationError
from n8line.models import (
    STREETS,
    Action,
    GameType,
    HandRecord,
    HandResult,
    Position,
    Stage,
)
from n8line.utils import is_unique_constraint_error, is_valid_hand_id

Order = Literal["ASC", "DESC"]

COLUMNS = [
    "hand_id",
    "hand_start_time",
    "game_type",
    "table_name",
    "small_blind",
    "big_blind",
    "hero_position",
    "hero_hole_cards",
    "hero_stack",
    "flop_cards",
    "turn_card",
    "river_card",
    "hero_preflop_investment",
    "hero_flop_investment",
    "hero_turn_investment",
    "hero_river_investment",
    "hero_preflop_actions",
    "hero_flop_actions",
    "hero_turn_actions",
    "hero_river_actions",
    "pot_amount",
    "jackpot_amount",
    "hero_profit",
    "hero_rake",
    "hero_hand_result",
    "final_stage",
]

INSERT_SQL = (
    f"INSERT INTO poker_hands ({', '.join(COLUMNS)}) "
    f"VALUES ({', '.join('?' * len(COLUMNS))});"
)


def hand_to_row(hand: HandRecord) -> Dict[str, Any]:
    """HandRecord → dict колонок poker_hands (действия склеиваем в 'RC', 'XF' ...)."""
    row: Dict[str, Any] = {
        "hand_id": hand.hand_id,
        "hand_start_time": hand.start_time,
        "game_type": hand.game_type.value,
        "table_name": hand.table_name,
        "small_blind": hand.small_blind,
        "big_blind": hand.big_blind,
        "hero_position": hand.hero_position.value,
        "hero_hole_cards": hand.hero_hole_cards,
        "hero_stack": hand.hero_stack,
        "flop_cards": hand.flop_cards,
        "turn_card": hand.turn_card,
        "river_card": hand.river_card,
        "pot_amount": hand.pot_amount,
        "jackpot_amount": hand.jackpot_amount,
        "hero_profit": hand.hero_profit,
        "hero_rake": hand.hero_rake,
        "hero_hand_result": hand.hand_result.value,
        "final_stage": hand.final_stage.value,
    }
    for street in STREETS:
        row[f"hero_{street.value}_investment"] = hand.hero_investments.get(street, 0.0)
        row[f"hero_{street.value}_actions"] = "".join(
            a.value for a in hand.hero_actions.get(street, ())
        )
    return row


def row_to_hand(row: sqlite3.Row) -> HandRecord:
    return HandRecord(
        hand_id=row["hand_id"],
        start_time=row["hand_start_time"],
        game_type=GameType(row["game_type"]),
        small_blind=row["small_blind"],
        big_blind=row["big_blind"],
        hero_position=Position(row["hero_position"]),
        hero_hole_cards=row["hero_hole_cards"] or "",
        flop_cards=row["flop_cards"] or "",
        turn_card=row["turn_card"] or "",
        river_card=row["river_card"] or "",
        hero_investments={s: row[f"hero_{s.value}_investment"] or 0.0 for s in STREETS},
        hero_actions={
            s: tuple(Action(code) for code in (row[f"hero_{s.value}_actions"] or ""))
            for s in STREETS
        },
        pot_amount=row["pot_amount"] or 0.0,
        jackpot_amount=row["jackpot_amount"] or 0.0,
        hero_profit=row["hero_profit"],
        hero_rake=row["hero_rake"] or 0.0,
        hand_result=HandResult(row["hero_hand_result"]),
        final_stage=Stage(row["final_stage"]),
        table_name=row["table_name"] or "",
        hero_stack=row["hero_stack"] or 0.0,
    )


def insert_hand(cx: sqlite3.Connection, hand: HandRecord) -> None:
    """
    Вставляет раздачу в базу и сразу коммитит.

    Raises:
        ValidationError: пустой hand_id — в базу не идём
        DuplicateHandError: hand_id уже есть (UNIQUE constraint)
        StorageError: любая другая ошибка SQLite
    """
    if not is_valid_hand_id(hand.hand_id):
        raise ValidationError(f"пустой hand_id (начало раздачи {hand.start_time})", "insert_hand")

    row = hand_to_row(hand)
    try:
        with cx:
            cx.execute(INSERT_SQL, [row[c] for c in COLUMNS])
    except sqlite3.Error as e:
        if isinstance(e, sqlite3.IntegrityError) and is_unique_constraint_error(e):
            raise DuplicateHandError(hand.hand_id) from e
        msg = f"Ошибка при вставке раздачи {hand.hand_id}: {e}"
        raise StorageError(msg, "insert_hand", e) from e


def get_hand_by_id(cx: sqlite3.Connection, hand_id: str) -> HandRecord | None:
    try:
        cx.row_factory = sqlite3.Row
        row = cx.execute("SELECT * FROM poker_hands WHERE hand_id = ?;", (hand_id,)).fetchone()
    except sqlite3.Error as e:
        raise StorageError(str(e), "get_hand_by_id", e) from e
    return row_to_hand(row) if row else None


def fetch_hands(
    cx: sqlite3.Connection,
    order: Order = "ASC",
    date_from: str | None = None,
    date_to: str | None = None,
) -> List[HandRecord]:
    """
    Все раздачи по времени начала (ASC — от старых к новым, как нужно графикам).
    date_from / date_to — 'YYYY-MM-DD', включительно.
    """
    if order not in ("ASC", "DESC"):
        raise ValidationError(f"неизвестный порядок сортировки: {order}", "fetch_hands")

    conditions = []
    params: List[str] = []
    # в базе время в формате сайта 'YYYY/MM/DD HH:MM:SS'
    day_expr = "replace(substr(hand_start_time, 1, 10), '/', '-')"
    if date_from:
        conditions.append(f"{day_expr} >= ?")
        params.append(date_from)
    if date_to:
        conditions.append(f"{day_expr} <= ?")
        params.append(date_to)
    where_clause = " AND ".join(conditions) if conditions else "1=1"

    query = f"""
    SELECT *
    FROM   poker_hands
    WHERE  {where_clause}
    ORDER  BY hand_start_time {order}, id {order};
    """
    try:
        cx.row_factory = sqlite3.Row
        rows = cx.execute(query, params).fetchall()
    except sqlite3.Error as e:
        raise StorageError(str(e), "fetch_hands", e) from e
    return [row_to_hand(r) for r in rows]


def count_hands(cx: sqlite3.Connection) -> int:
    try:
        return cx.execute("SELECT COUNT(*) FROM poker_hands;").fetchone()[0]
    except sqlite3.Error as e:
        raise StorageError(str(e), "count_hands", e) from e


def first_hand_date(cx: sqlite3.Connection) -> str | None:
    """Дата самой ранней раздачи ('YYYY-MM-DD') или None, если база пуста."""
    try:
        row = cx.execute(
            "SELECT replace(substr(MIN(hand_start_time), 1, 10), '/', '-') FROM poker_hands;"
        ).fetchone()
    except sqlite3.Error as e:
        raise StorageError(str(e), "first_hand_date", e) from e
    return row[0] if row else None
