# n8line/dashboard.py
"""
Streamlit-дашборд N8Line — те же данные, что и у `n8line chart`, только интерактивно.
Запуск:
    streamlit run n8line/dashboard.py
"""

from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import List

import pandas as pd
import streamlit as st

from n8line.analysis.frames import (
    action_frame,
    hands_frame,
    result_category_frame,
    statistics_frame,
    street_profit_frame,
    street_profit_summary,
    trend_frame,
    win_rate_frame,
)
from n8line.analysis.streets import (
    calculate_action_analysis,
    calculate_result_categories,
    calculate_street_profit_analysis,
)
from n8line.analysis.trends import (
    OVERALL,
    calculate_bb100_data,
    calculate_position_trends,
    calculate_profit_data,
    get_final_statistics,
)
from n8line.config import DB_PATH, DEFAULT_PROFIT_INTERVAL
from n8line.database.create_schema import connect
from n8line.database.db_utils import fetch_hands, first_hand_date
from n8line.models import STAGES, STREETS, HandRecord


def load_hands(
    db_path: str | Path, date_from: dt.date | None, date_to: dt.date | None
) -> List[HandRecord]:
    """Руки из базы за период (от старых к новым)."""
    cx = connect(db_path)
    try:
        return fetch_hands(
            cx,
            "ASC",
            date_from.isoformat() if date_from else None,
            date_to.isoformat() if date_to else None,
        )
    finally:
        cx.close()


def earliest_date(db_path: str | Path) -> dt.date:
    """Дата первой руки в базе (для фильтра «с»); пустая база — сегодня."""
    cx = connect(db_path)
    try:
        first = first_hand_date(cx)
    finally:
        cx.close()
    return dt.date.fromisoformat(first) if first else dt.date.today()


def _line_chart(df: pd.DataFrame, column) -> None:
    column.line_chart(df.set_index("hand_number").drop(columns=["timestamp"]))


def main() -> None:
    st.set_page_config(page_title="N8Line Poker", layout="wide")

    # --- sidebar фильтры --------------------------------------------------------
    st.sidebar.header("Фильтры")
    db_path = st.sidebar.text_input("База", value=str(DB_PATH))
    date_col1, date_col2 = st.sidebar.columns(2)
    date_from = date_col1.date_input("c", value=earliest_date(db_path))
    date_to = date_col2.date_input("по", value=dt.date.today())
    interval = st.sidebar.number_input(
        "Рук на точку", min_value=1, value=DEFAULT_PROFIT_INTERVAL, step=1
    )

    if date_from > date_to:
        st.error("Дата «с» позже даты «по».")
        return

    hands = load_hands(db_path, date_from, date_to)
    if not hands:
        st.info("Нет рук под выбранные фильтры.")
        return

    profit = calculate_profit_data(hands, int(interval))
    bb100 = calculate_bb100_data(hands, int(interval))
    stats = get_final_statistics(profit, bb100)

    tab1, tab2, tab3, tab4 = st.tabs(["📊 Dashboard", "🛣️ Улицы", "🪑 Позиции", "📋 Список рук"])

    with tab1:
        st.title("N8Line Poker — Dashboard Overall")
        cols = st.columns(5)
        cols[0].metric("Рук сыграно", stats.total_hands)
        cols[1].metric("Профит $", stats.actual_profit)
        cols[2].metric("Рейк $", stats.rake_impact)
        cols[3].metric("bb/100", stats.bb100_actual)
        cols[4].metric("bb/100 без рейка", stats.bb100_without_rake)

        st.markdown("---")
        c1, c2 = st.columns(2)
        c1.subheader("Профит $")
        _line_chart(trend_frame(profit), c1)
        c2.subheader("BB/100")
        _line_chart(trend_frame(bb100), c2)

        st.subheader("Итоги по линиям")
        st.dataframe(statistics_frame(stats))
        st.subheader("Результат по финальной улице")
        categories = result_category_frame(calculate_result_categories(hands))
        st.bar_chart(categories.set_index("category")["profit"])

    with tab2:
        actions = calculate_action_analysis(hands)
        street_profit = calculate_street_profit_analysis(hands)
        for street in STREETS:
            st.subheader(f"{street.value.capitalize()} — последнее действие Hero, %")
            st.dataframe(action_frame(actions.streets[street]))
        st.subheader("Showdown — win rate %")
        st.dataframe(win_rate_frame(actions.showdown))

        st.markdown("---")
        st.subheader("Итог по улицам, BB")
        st.bar_chart(street_profit_summary(street_profit).set_index("stage")[["profit", "loss"]])
        for stage in STAGES:
            st.subheader(f"{stage.value.capitalize()} — профит, BB")
            st.dataframe(street_profit_frame(street_profit[stage]))

    with tab3:
        for trend in calculate_position_trends(hands, int(interval)):
            with st.expander(trend.position, expanded=trend.position == OVERALL):
                c1, c2 = st.columns(2)
                _line_chart(trend_frame(trend.profit), c1)
                _line_chart(trend_frame(trend.bb100), c2)

    with tab4:
        st.header("📋 Список всех рук")
        st.dataframe(hands_frame(hands), hide_index=True)


if __name__ == "__main__":
    main()
