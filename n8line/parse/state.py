"""
ParseState — всё, что копится при проходе по строкам одной раздачи.

Парсер мутирует его построчно, finalize() превращает в HandRecord.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from n8line.models import STREETS, Action, GameType, Stage
from n8line.utils import round2


def _street_lists() -> Dict[Stage, List[Action]]:
    return {s: [] for s in STREETS}


def _street_zeros() -> Dict[Stage, float]:
    return {s: 0.0 for s in STREETS}


@dataclass
class ParseState:
    hand_id: str
    start_time: str
    small_blind: float
    big_blind: float
    game_type: GameType = GameType.RUSH_AND_CASH
    table_name: str = ""

    section: Stage = Stage.PREFLOP
    hero_seat: int | None = None
    button_seat: int | None = None
    hero_stack: float = 0.0

    hole_cards: str = ""
    flop_cards: str = ""
    turn_card: str = ""
    river_card: str = ""

    actions: Dict[Stage, List[Action]] = field(default_factory=_street_lists)
    investments: Dict[Stage, float] = field(default_factory=_street_zeros)

    pot_amount: float = 0.0
    rake: float = 0.0
    jackpot: float = 0.0
    collected: float = 0.0  # сколько Hero забрал из банка (won / collected), ещё не профит
    showed: bool = False
    summary_seen: bool = False

    def advance(self, street: Stage) -> None:
        """Переход на следующую улицу. Назад не откатываемся."""
        if street.order > self.section.order:
            self.section = street

    def add_investment(self, amount: float) -> None:
        self.investments[self.section] = round2(self.investments[self.section] + amount)

    def set_investment(self, amount: float, street: Stage | None = None) -> None:
        self.investments[street or self.section] = round2(amount)
