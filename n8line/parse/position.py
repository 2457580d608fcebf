"""Позиция Hero по номерам мест (6-max)."""

from __future__ import annotations

from n8line.config import TABLE_SIZE
from n8line.models import SEAT_ROTATION, Position
from n8line.utils import relative_position


def resolve_position(
    hero_seat: int | None, button_seat: int | None, table_size: int = TABLE_SIZE
) -> Position:
    """
    offset = (hero – btn + 6) mod 6
        0  BTN
        1  SB
        2  BB
        3  UTG
        4  HJ
        5  CO
    Нет места Hero или баттона → BTN.
    """
    if hero_seat is None or button_seat is None:
        return Position.BTN
    return SEAT_ROTATION[relative_position(hero_seat, button_seat, table_size)]
