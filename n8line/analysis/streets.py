# n8line/analysis/streets.py
"""
Срезы по улицам и позициям (строки: Overall, затем UTG → BB).

• calculate_action_analysis      — последнее действие Hero на улице, доли R/B/C/X/F;
                                   для showdown — win rate
• calculate_street_profit_analysis — выигрыш/проигрыш в BB по финальной улице руки
• calculate_result_categories    — 10 столбцов «улица × win/loss» в $
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from n8line.analysis.trends import OVERALL
from n8line.models import POSITIONS, STAGES, STREETS, Action, HandRecord, Stage
from n8line.utils import round2

ACTION_ORDER: Tuple[Action, ...] = (
    Action.RAISE,
    Action.BET,
    Action.CALL,
    Action.CHECK,
    Action.FOLD,
)


@dataclass(frozen=True)
class ActionStats:
    position: str
    fold_pct: float = 0.0
    check_pct: float = 0.0
    call_pct: float = 0.0
    bet_pct: float = 0.0
    raise_pct: float = 0.0
    total_hands: int = 0

    def pct(self, action: Action) -> float:
        return {
            Action.FOLD: self.fold_pct,
            Action.CHECK: self.check_pct,
            Action.CALL: self.call_pct,
            Action.BET: self.bet_pct,
            Action.RAISE: self.raise_pct,
        }[action]


@dataclass(frozen=True)
class WinRateStats:
    position: str
    win_pct: float = 0.0
    total_hands: int = 0


@dataclass
class ActionAnalysis:
    streets: Dict[Stage, List[ActionStats]]
    showdown: List[WinRateStats]


@dataclass(frozen=True)
class StreetProfitStats:
    position: str
    profit: float = 0.0  # BB
    loss: float = 0.0  # BB, ≤ 0
    total_pnl: float = 0.0
    profit_count: int = 0
    loss_count: int = 0


@dataclass(frozen=True)
class ResultCategory:
    label: str
    stage: Stage
    win: bool
    total_profit: float
    hand_count: int


# ---------------------------------------------------------------------------
def position_groups(hands: Sequence[HandRecord]) -> List[Tuple[str, List[HandRecord]]]:
    """[('Overall', все руки), ('UTG', ...), ..., ('BB', ...)]"""
    groups = [(OVERALL, list(hands))]
    groups += [(pos.value, [h for h in hands if h.hero_position is pos]) for pos in POSITIONS]
    return groups


def _shares(counts: Dict[Action, int], total: int) -> Dict[Action, float]:
    """
    Доли в % с 1 знаком, которые в сумме дают ровно 100.0
    (метод наибольших остатков по десятым долям процента).
    """
    if total <= 0:
        return {a: 0.0 for a in counts}
    raw = {a: c * 1000 / total for a, c in counts.items()}
    tenths = {a: int(v) for a, v in raw.items()}
    left = 1000 - sum(tenths.values())
    for a in sorted(raw, key=lambda a: raw[a] - tenths[a], reverse=True)[:left]:
        tenths[a] += 1
    return {a: t / 10 for a, t in tenths.items()}


def _action_stats(label: str, hands: Sequence[HandRecord], street: Stage) -> ActionStats:
    last_actions = [
        h.last_action(street)
        for h in hands
        if h.reached(street) and h.hero_actions.get(street)
    ]
    counts = {a: 0 for a in Action}
    for action in last_actions:
        counts[action] += 1
    pct = _shares(counts, len(last_actions))
    return ActionStats(
        position=label,
        fold_pct=pct[Action.FOLD],
        check_pct=pct[Action.CHECK],
        call_pct=pct[Action.CALL],
        bet_pct=pct[Action.BET],
        raise_pct=pct[Action.RAISE],
        total_hands=len(last_actions),
    )


def _win_rate(label: str, hands: Sequence[HandRecord]) -> WinRateStats:
    showdowns = [h for h in hands if h.final_stage is Stage.SHOWDOWN]
    if not showdowns:
        return WinRateStats(position=label)
    wins = sum(1 for h in showdowns if h.hero_profit > 0)
    return WinRateStats(
        position=label,
        win_pct=round2(wins * 100 / len(showdowns), 1),
        total_hands=len(showdowns),
    )


# ---------------------------------------------------------------------------
def calculate_action_analysis(hands: Sequence[HandRecord]) -> ActionAnalysis:
    groups = position_groups(hands)
    return ActionAnalysis(
        streets={
            street: [_action_stats(label, subset, street) for label, subset in groups]
            for street in STREETS
        },
        showdown=[_win_rate(label, subset) for label, subset in groups],
    )


def calculate_street_profit_analysis(
    hands: Sequence[HandRecord],
) -> Dict[Stage, List[StreetProfitStats]]:
    """
    Для каждой финальной улицы: сколько BB выиграли / проиграли руки,
    которые на ней закончились. BB — средний big blind всех рук этой улицы.
    """
    result: Dict[Stage, List[StreetProfitStats]] = {}
    for stage in STAGES:
        stage_hands = [h for h in hands if h.final_stage is stage]
        avg_bb = (
            sum(h.big_blind for h in stage_hands) / len(stage_hands) if stage_hands else 0.0
        )
        rows = []
        for label, subset in position_groups(stage_hands):
            wins = [h.hero_profit for h in subset if h.hero_profit > 0]
            losses = [h.hero_profit for h in subset if h.hero_profit <= 0]
            profit = round2(sum(wins) / avg_bb) if avg_bb > 0 else 0.0
            loss = round2(sum(losses) / avg_bb) if avg_bb > 0 else 0.0
            rows.append(
                StreetProfitStats(
                    position=label,
                    profit=profit,
                    loss=loss,
                    total_pnl=round2(profit + loss),
                    profit_count=len(wins),
                    loss_count=len(losses),
                )
            )
        result[stage] = rows
    return result


def calculate_result_categories(hands: Sequence[HandRecord]) -> List[ResultCategory]:
    """Preflop Win, Preflop Loss, ..., Showdown Loss — профит в $ и число рук."""
    categories = []
    for stage in STAGES:
        for win in (True, False):
            subset = [
                h for h in hands if h.final_stage is stage and (h.hero_profit > 0) == win
            ]
            categories.append(
                ResultCategory(
                    label=f"{stage.value.capitalize()} {'Win' if win else 'Loss'}",
                    stage=stage,
                    win=win,
                    total_profit=round2(sum(h.hero_profit for h in subset)),
                    hand_count=len(subset),
                )
            )
    return categories
