"""
Общие утилиты: разбор чисел, скобок с картами, округление, валидация.
"""

from __future__ import annotations

import re
from datetime import datetime
from decimal import ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal
from typing import List

from n8line.config import DECIMALS, TABLE_SIZE

RE_BRACKETS = re.compile(r"\[([^\]]+)\]")
RE_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def round2(num: float, decimals: int = DECIMALS) -> float:
    """
    Округляет деньги до 2 знаков (и убирает -0.0).
    Половинки — к +∞, как Math.round: 0.125 → 0.13, -0.125 → -0.12.
    """
    value = Decimal(repr(float(num)))
    rounding = ROUND_HALF_UP if value >= 0 else ROUND_HALF_DOWN
    return float(value.quantize(Decimal(1).scaleb(-decimals), rounding=rounding)) + 0.0


def safe_float(value: str | None, default: float = 0.0) -> float:
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        return default


def safe_int(value: str | None, default: int = 0) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


def is_empty_line(line: str) -> bool:
    return not line.strip()


def extract_brackets(text: str) -> List[str]:
    """'*** TURN *** [Ah Kd 2c] [7s]' → ['Ah Kd 2c', '7s']"""
    return RE_BRACKETS.findall(text)


def parse_cards(cards: str) -> List[str]:
    return cards.split()


def relative_position(seat: int, button_seat: int, table_size: int = TABLE_SIZE) -> int:
    """Смещение места от баттона: 0 — BTN, 1 — SB, 2 — BB ..."""
    return (seat - button_seat + table_size) % table_size


def is_valid_hand_id(hand_id: str | None) -> bool:
    return bool(hand_id and hand_id.strip())


def is_valid_date(date_str: str) -> bool:
    """Проверяет формат даты YYYY-MM-DD."""
    if not RE_DATE.match(date_str):
        return False
    try:
        datetime.strptime(date_str, "%Y-%m-%d")
        return True
    except ValueError:
        return False


def format_currency(amount: float) -> str:
    return f"${amount:.2f}"


def format_bb100(value: float) -> str:
    return f"{value:.2f} BB/100"


def is_unique_constraint_error(error: Exception) -> bool:
    return "UNIQUE constraint failed" in str(error)
