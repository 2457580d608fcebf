"""
Типы N8Line: перечисления (позиции, действия, улицы, результаты) и HandRecord.

HandRecord — одна раздача глазами Hero. Создаётся парсером один раз на заголовок,
после finalize() неизменяема.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple


class GameType(str, Enum):
    RUSH_AND_CASH = "Rush & Cash"
    CASH_GAME = "Cash Game"


class Position(str, Enum):
    UTG = "UTG"
    HJ = "HJ"
    CO = "CO"
    BTN = "BTN"
    SB = "SB"
    BB = "BB"


# порядок для таблиц/графиков: UTG → BB
POSITIONS: Tuple[Position, ...] = tuple(Position)

# порядок мест от баттона (offset = (hero - btn) % 6)
SEAT_ROTATION: Tuple[Position, ...] = (
    Position.BTN,
    Position.SB,
    Position.BB,
    Position.UTG,
    Position.HJ,
    Position.CO,
)


class Action(str, Enum):
    FOLD = "F"
    CHECK = "X"
    CALL = "C"
    BET = "B"
    RAISE = "R"


class Stage(str, Enum):
    PREFLOP = "preflop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"
    SHOWDOWN = "showdown"

    @property
    def order(self) -> int:
        return STAGES.index(self)


STAGES: Tuple[Stage, ...] = tuple(Stage)
STREETS: Tuple[Stage, ...] = STAGES[:4]  # улицы с торговлей


class HandResult(str, Enum):
    SHOWDOWN_WIN = "showdown_win"
    SHOWDOWN_LOSS = "showdown_loss"
    NO_SHOWDOWN_WIN = "no_showdown_win"
    NO_SHOWDOWN_LOSS = "no_showdown_loss"

    @property
    def is_showdown(self) -> bool:
        return self in (HandResult.SHOWDOWN_WIN, HandResult.SHOWDOWN_LOSS)

    @property
    def is_win(self) -> bool:
        return self in (HandResult.SHOWDOWN_WIN, HandResult.NO_SHOWDOWN_WIN)

    @classmethod
    def classify(cls, showdown: bool, profit: float) -> "HandResult":
        if showdown:
            return cls.SHOWDOWN_WIN if profit > 0 else cls.SHOWDOWN_LOSS
        return cls.NO_SHOWDOWN_WIN if profit > 0 else cls.NO_SHOWDOWN_LOSS


def empty_investments() -> Dict[Stage, float]:
    return {s: 0.0 for s in STREETS}


def empty_actions() -> Dict[Stage, Tuple[Action, ...]]:
    return {s: () for s in STREETS}


@dataclass(frozen=True)
class HandRecord:
    hand_id: str
    start_time: str  # как в HH: 'YYYY/MM/DD HH:MM:SS'
    game_type: GameType
    small_blind: float
    big_blind: float
    hero_position: Position
    hero_hole_cards: str = ""
    flop_cards: str = ""
    turn_card: str = ""
    river_card: str = ""
    hero_investments: Dict[Stage, float] = field(default_factory=empty_investments)
    hero_actions: Dict[Stage, Tuple[Action, ...]] = field(default_factory=empty_actions)
    pot_amount: float = 0.0
    jackpot_amount: float = 0.0
    hero_profit: float = 0.0
    hero_rake: float = 0.0
    hand_result: HandResult = HandResult.NO_SHOWDOWN_LOSS
    final_stage: Stage = Stage.PREFLOP
    table_name: str = ""
    hero_stack: float = 0.0

    @property
    def total_investment(self) -> float:
        return round(sum(self.hero_investments.values()), 2)

    @property
    def is_showdown(self) -> bool:
        return self.hand_result.is_showdown

    def reached(self, stage: Stage) -> bool:
        """Дошла ли раздача до улицы stage (showdown считается дальше river)."""
        return self.final_stage.order >= stage.order

    def last_action(self, street: Stage) -> Action | None:
        acts = self.hero_actions.get(street, ())
        return acts[-1] if acts else None
