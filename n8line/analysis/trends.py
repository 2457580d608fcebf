# n8line/analysis/trends.py
"""
Тренды профита и bb/100 по рукам (вход — руки от старых к новым).

Четыре накопительные линии:
• without_rake  — профит, если бы не было рейка (рейк прибавляем только на выигранных руках)
• actual        — фактический профит
• showdown      — профит только по рукам со вскрытием
• no_showdown   — профит только по рукам без вскрытия

bb/100 — мгновенное значение после каждой руки: линия / сумма BB всех сыгранных рук × 100.

Сглаживание: значения копим в окне из `interval` рук, точку ставим на каждой
interval-й руке и на последней руке (хвост короче interval тоже попадает в график).
Все четыре линии получают точки на одних и тех же номерах рук.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple

from n8line.config import DEFAULT_BB100_INTERVAL, DEFAULT_PROFIT_INTERVAL
from n8line.errors import ValidationError
from n8line.models import POSITIONS, HandRecord
from n8line.utils import round2

OVERALL = "Overall"
LINES = ("without_rake", "actual", "showdown", "no_showdown")

Values = Tuple[float, float, float, float]


@dataclass(frozen=True)
class ChartPoint:
    hand_number: int
    value: float
    timestamp: str


@dataclass
class TrendSeries:
    without_rake: List[ChartPoint] = field(default_factory=list)
    actual: List[ChartPoint] = field(default_factory=list)
    showdown: List[ChartPoint] = field(default_factory=list)
    no_showdown: List[ChartPoint] = field(default_factory=list)

    def lines(self) -> List[Tuple[str, List[ChartPoint]]]:
        return [(name, getattr(self, name)) for name in LINES]

    def last(self, name: str) -> float:
        points = getattr(self, name)
        return points[-1].value if points else 0.0

    def __len__(self) -> int:
        return len(self.actual)


@dataclass(frozen=True)
class FinalStatistics:
    total_hands: int = 0
    profit_without_rake: float = 0.0
    actual_profit: float = 0.0
    rake_impact: float = 0.0
    showdown_profit: float = 0.0
    no_showdown_profit: float = 0.0
    bb100_without_rake: float = 0.0
    bb100_actual: float = 0.0
    bb100_showdown: float = 0.0
    bb100_no_showdown: float = 0.0


@dataclass
class PositionTrend:
    position: str
    profit: TrendSeries
    bb100: TrendSeries


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------
def _cumulative(hands: Sequence[HandRecord]) -> Iterator[Values]:
    without_rake = actual = showdown = no_showdown = 0.0
    for hand in hands:
        profit = hand.hero_profit
        # рейк берут только из выигрыша
        rake = hand.hero_rake if profit > 0 else 0.0
        without_rake = round2(without_rake + profit + rake)
        actual = round2(actual + profit)
        if hand.is_showdown:
            showdown = round2(showdown + profit)
        else:
            no_showdown = round2(no_showdown + profit)
        yield without_rake, actual, showdown, no_showdown


def _bb100(hands: Sequence[HandRecord]) -> Iterator[Values]:
    total_bb = 0.0
    for hand, sums in zip(hands, _cumulative(hands)):
        total_bb += hand.big_blind
        if total_bb <= 0:
            yield 0.0, 0.0, 0.0, 0.0
        else:
            yield tuple(s / total_bb * 100 for s in sums)  # type: ignore[misc]


def _smooth(hands: Sequence[HandRecord], per_hand: Iterator[Values], interval: int) -> TrendSeries:
    if interval < 1:
        raise ValidationError(f"interval должен быть ≥ 1, получен {interval}", "trends")
    series = TrendSeries()
    acc = [0.0, 0.0, 0.0, 0.0]
    count = 0
    total = len(hands)
    for hand_number, (hand, values) in enumerate(zip(hands, per_hand), start=1):
        acc = [a + v for a, v in zip(acc, values)]
        count += 1
        if hand_number % interval == 0 or hand_number == total:
            for name, a in zip(LINES, acc):
                getattr(series, name).append(
                    ChartPoint(hand_number, round2(a / count), hand.start_time)
                )
            acc = [0.0, 0.0, 0.0, 0.0]
            count = 0
    return series


# ---------------------------------------------------------------------------
# public API
# ---------------------------------------------------------------------------
def calculate_profit_data(
    hands: Sequence[HandRecord], interval: int = DEFAULT_PROFIT_INTERVAL
) -> TrendSeries:
    """Накопительный профит ($), сглаженный по interval рук."""
    return _smooth(hands, _cumulative(hands), interval)


def calculate_bb100_data(
    hands: Sequence[HandRecord], interval: int = DEFAULT_BB100_INTERVAL
) -> TrendSeries:
    """bb/100 после каждой руки, сглаженный по interval рук."""
    return _smooth(hands, _bb100(hands), interval)


def get_final_statistics(profit: TrendSeries, bb100: TrendSeries) -> FinalStatistics:
    """Последние значения всех линий. Пустые ряды → всё по нулям."""
    if not profit.actual:
        return FinalStatistics()
    without_rake = profit.last("without_rake")
    actual = profit.last("actual")
    return FinalStatistics(
        total_hands=profit.actual[-1].hand_number,
        profit_without_rake=without_rake,
        actual_profit=actual,
        rake_impact=round2(without_rake - actual),
        showdown_profit=profit.last("showdown"),
        no_showdown_profit=profit.last("no_showdown"),
        bb100_without_rake=bb100.last("without_rake"),
        bb100_actual=bb100.last("actual"),
        bb100_showdown=bb100.last("showdown"),
        bb100_no_showdown=bb100.last("no_showdown"),
    )


def calculate_position_trends(
    hands: Sequence[HandRecord], interval: int = DEFAULT_PROFIT_INTERVAL
) -> List[PositionTrend]:
    """Те же тренды отдельно для Overall и каждой позиции (номера рук — внутри позиции)."""
    groups: List[Tuple[str, Sequence[HandRecord]]] = [(OVERALL, hands)]
    groups += [(pos.value, [h for h in hands if h.hero_position is pos]) for pos in POSITIONS]
    return [
        PositionTrend(
            position=label,
            profit=calculate_profit_data(subset, interval),
            bb100=calculate_bb100_data(subset, interval),
        )
        for label, subset in groups
    ]
