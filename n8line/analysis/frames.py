"""
DataFrame'ы из результатов аналитики — для графиков и дашборда.
Никаких новых вычислений: только раскладка по колонкам.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

import pandas as pd

from n8line.analysis.streets import (
    ACTION_ORDER,
    ActionStats,
    ResultCategory,
    StreetProfitStats,
    WinRateStats,
)
from n8line.analysis.trends import LINES, FinalStatistics, TrendSeries
from n8line.models import HandRecord, Stage

HANDS_COLUMNS = [
    "Дата",
    "HandID",
    "Карты",
    "Борд",
    "Профит $",
    "Профит bb",
    "Позиция",
    "Улица",
    "Лимит",
]


def trend_frame(series: TrendSeries) -> pd.DataFrame:
    """hand_number | timestamp | without_rake | actual | showdown | no_showdown"""
    if not len(series):
        return pd.DataFrame(
            {
                "hand_number": pd.Series(dtype="int64"),
                "timestamp": pd.Series(dtype="object"),
                **{name: pd.Series(dtype="float64") for name in LINES},
            }
        )
    df = pd.DataFrame(
        {
            "hand_number": [p.hand_number for p in series.actual],
            "timestamp": [p.timestamp for p in series.actual],
        }
    )
    for name, points in series.lines():
        df[name] = [p.value for p in points]
    return df


def action_frame(rows: Sequence[ActionStats]) -> pd.DataFrame:
    """Строки — Overall/позиции, колонки — R B C X F (в %) и число рук."""
    df = pd.DataFrame(
        [
            {
                "position": r.position,
                **{a.value: r.pct(a) for a in ACTION_ORDER},
                "hands": r.total_hands,
            }
            for r in rows
        ],
        columns=["position", *(a.value for a in ACTION_ORDER), "hands"],
    )
    return df.set_index("position")


def win_rate_frame(rows: Sequence[WinRateStats]) -> pd.DataFrame:
    df = pd.DataFrame(
        [{"position": r.position, "win_pct": r.win_pct, "hands": r.total_hands} for r in rows],
        columns=["position", "win_pct", "hands"],
    )
    return df.set_index("position")


def street_profit_frame(rows: Sequence[StreetProfitStats]) -> pd.DataFrame:
    df = pd.DataFrame(
        [
            {
                "position": r.position,
                "profit": r.profit,
                "loss": r.loss,
                "total_pnl": r.total_pnl,
                "profit_count": r.profit_count,
                "loss_count": r.loss_count,
            }
            for r in rows
        ],
        columns=["position", "profit", "loss", "total_pnl", "profit_count", "loss_count"],
    )
    return df.set_index("position")


def street_profit_summary(tables: Dict[Stage, List[StreetProfitStats]]) -> pd.DataFrame:
    """Итог по улицам (строка Overall каждой улицы): stage | profit | loss | total_pnl."""
    return pd.DataFrame(
        [
            {"stage": stage.value, "profit": r.profit, "loss": r.loss, "total_pnl": r.total_pnl}
            for stage, rows in tables.items()
            for r in rows[:1]
        ],
        columns=["stage", "profit", "loss", "total_pnl"],
    )


def result_category_frame(categories: Sequence[ResultCategory]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"category": c.label, "profit": c.total_profit, "hands": c.hand_count}
            for c in categories
        ],
        columns=["category", "profit", "hands"],
    )


def statistics_frame(stats: FinalStatistics) -> pd.DataFrame:
    """Две колонки: Profit $ и BB/100 по каждой линии."""
    return pd.DataFrame(
        {
            "Profit $": [
                stats.profit_without_rake,
                stats.actual_profit,
                stats.showdown_profit,
                stats.no_showdown_profit,
            ],
            "BB/100": [
                stats.bb100_without_rake,
                stats.bb100_actual,
                stats.bb100_showdown,
                stats.bb100_no_showdown,
            ],
        },
        index=list(LINES),
    )


def hands_frame(hands: Sequence[HandRecord]) -> pd.DataFrame:
    """Таблица рук под UI (новые сверху)."""
    df = pd.DataFrame(
        [
            {
                "Дата": h.start_time[:10].replace("/", "-"),
                "HandID": h.hand_id,
                "Карты": h.hero_hole_cards,
                "Борд": " ".join(c for c in (h.flop_cards, h.turn_card, h.river_card) if c),
                "Профит $": h.hero_profit,
                "Профит bb": h.hero_profit / h.big_blind if h.big_blind else 0.0,
                "Позиция": h.hero_position.value,
                "Улица": h.final_stage.value,
                "Лимит": h.big_blind,
            }
            for h in reversed(hands)
        ],
        columns=HANDS_COLUMNS,
    )
    if df.empty:
        return df
    # округление
    df["Профит $"] = df["Профит $"].round(2)
    df["Профит bb"] = df["Профит bb"].round(1)
    return df
