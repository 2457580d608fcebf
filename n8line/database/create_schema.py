"""
Структура базы N8Line: одна таблица poker_hands (1 строка = 1 раздача Hero).

▪ hand_id UNIQUE — повторный импорт той же раздачи ничего не пишет
▪ индексы под выборки графиков: время, позиция, финальная улица, результат
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

SCHEMA_SQL = """
PRAGMA foreign_keys = ON;

CREATE TABLE IF NOT EXISTS poker_hands (
    id                       INTEGER PRIMARY KEY AUTOINCREMENT,
    hand_id                  TEXT    NOT NULL UNIQUE,   -- RC3171234567
    hand_start_time          TEXT    NOT NULL,          -- 2024/01/15 20:31:05
    game_type                TEXT    NOT NULL,          -- Rush & Cash / Cash Game
    table_name               TEXT,
    small_blind              REAL    NOT NULL,
    big_blind                REAL    NOT NULL,
    hero_position            TEXT    NOT NULL,          -- UTG / HJ / CO / BTN / SB / BB
    hero_hole_cards          TEXT,                      -- 'Ah Kd'
    hero_stack               REAL    DEFAULT 0,
    flop_cards               TEXT    DEFAULT '',
    turn_card                TEXT    DEFAULT '',
    river_card               TEXT    DEFAULT '',
    hero_preflop_investment  REAL    DEFAULT 0,
    hero_flop_investment     REAL    DEFAULT 0,
    hero_turn_investment     REAL    DEFAULT 0,
    hero_river_investment    REAL    DEFAULT 0,
    hero_preflop_actions     TEXT    DEFAULT '',        -- 'RC' = raise, потом call
    hero_flop_actions        TEXT    DEFAULT '',
    hero_turn_actions        TEXT    DEFAULT '',
    hero_river_actions       TEXT    DEFAULT '',
    pot_amount               REAL    DEFAULT 0,
    jackpot_amount           REAL    DEFAULT 0,
    hero_profit              REAL    NOT NULL,          -- $ после рейка, со знаком
    hero_rake                REAL    DEFAULT 0,
    hero_hand_result         TEXT    NOT NULL,          -- showdown_win / ... / no_showdown_loss
    final_stage              TEXT    NOT NULL,          -- preflop ... showdown
    created_at               TEXT    DEFAULT CURRENT_TIMESTAMP
);

/* --------- индексы для отчётов ---------- */
CREATE INDEX IF NOT EXISTS idx_hands_start_time ON poker_hands(hand_start_time);
CREATE INDEX IF NOT EXISTS idx_hands_position ON poker_hands(hero_position);
CREATE INDEX IF NOT EXISTS idx_hands_final_stage ON poker_hands(final_stage);
CREATE INDEX IF NOT EXISTS idx_hands_result ON poker_hands(hero_hand_result);
"""


def create_schema(cx: sqlite3.Connection) -> None:
    cx.executescript(SCHEMA_SQL)
    cx.commit()


def connect(db_path: str | Path) -> sqlite3.Connection:
    """Открывает (и при необходимости создаёт) базу со схемой."""
    db_path = Path(db_path)
    db_path.parent.mkdir(exist_ok=True, parents=True)
    cx = sqlite3.connect(db_path, timeout=30.0)
    cx.row_factory = sqlite3.Row
    create_schema(cx)
    return cx
