# n8line/charts/chart_generator.py
"""
JPEG-графики по результатам аналитики (matplotlib, backend Agg — без дисплея).

За один запуск `n8line chart` пишутся три файла:
    poker-profit-analysis-chart-YYYY-MM-DD.jpg           профит $ + bb/100 (4 линии)
    poker-street-analysis-chart-YYYY-MM-DD.jpg           действия и профит по улицам/позициям
    poker-position-profit-analysis-chart-YYYY-MM-DD.jpg  профит и bb/100 отдельно по позициям

Считать здесь ничего не считаем — только раскладываем готовые ряды/таблицы по осям.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from n8line.analysis.frames import (  # noqa: E402
    action_frame,
    street_profit_frame,
    trend_frame,
    win_rate_frame,
)
from n8line.analysis.streets import ACTION_ORDER, ActionAnalysis, StreetProfitStats  # noqa: E402
from n8line.analysis.trends import LINES, PositionTrend, TrendSeries  # noqa: E402
from n8line.config import (  # noqa: E402
    CHART_COLORS,
    CHART_DPI,
    CHART_FILE_EXT,
    CHART_HEIGHT_IN,
    CHART_WIDTH_IN,
    CHARTS_DIR,
)
from n8line.errors import ChartError  # noqa: E402
from n8line.models import STAGES, Stage  # noqa: E402

logger = logging.getLogger(__name__)

LINE_LABELS = {
    "without_rake": "Без рейка",
    "actual": "Фактический",
    "showdown": "Showdown",
    "no_showdown": "Non-showdown",
}

ACTION_LABELS = {"R": "Raise", "B": "Bet", "C": "Call", "X": "Check", "F": "Fold"}


@dataclass(frozen=True)
class ChartGenerationResult:
    file_path: Path
    total_hands: int
    final_values: Dict[str, float] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------
def _plot_trend(ax, series: TrendSeries, title: str, ylabel: str) -> None:
    df = trend_frame(series)
    for name in LINES:
        ax.plot(
            df["hand_number"],
            df[name],
            color=CHART_COLORS[name],
            linewidth=1.8,
            label=LINE_LABELS[name],
        )
    ax.axhline(0, color="#A0AEC0", linewidth=0.8)
    ax.set_title(title)
    ax.set_xlabel("Руки")
    ax.set_ylabel(ylabel)
    ax.grid(True, alpha=0.2)
    ax.legend(loc="upper left", fontsize="small")


def _plot_actions(ax, analysis: ActionAnalysis, stage: Stage) -> None:
    if stage is Stage.SHOWDOWN:
        df = win_rate_frame(analysis.showdown)
        ax.bar(df.index, df["win_pct"], color=CHART_COLORS["win_rate"])
        ax.set_ylim(0, 100)
        ax.set_title("Showdown: win rate %")
        return
    df = action_frame(analysis.streets[stage])
    bottom = [0.0] * len(df)
    for action in ACTION_ORDER:
        values = df[action.value].tolist()
        ax.bar(
            df.index,
            values,
            bottom=bottom,
            color=CHART_COLORS[action.value],
            label=ACTION_LABELS[action.value],
        )
        bottom = [b + v for b, v in zip(bottom, values)]
    ax.set_ylim(0, 100)
    ax.set_title(f"{stage.value.capitalize()}: последнее действие Hero, %")
    ax.legend(loc="upper right", fontsize="x-small", ncol=5)


def _plot_street_profit(ax, rows: List[StreetProfitStats], stage: Stage) -> None:
    df = street_profit_frame(rows)
    ax.bar(df.index, df["profit"], color=CHART_COLORS["wins"], label="Выигрыш")
    ax.bar(df.index, df["loss"], color=CHART_COLORS["losses"], label="Проигрыш")
    ax.axhline(0, color="#A0AEC0", linewidth=0.8)
    ax.set_title(f"{stage.value.capitalize()}: профит, BB")
    ax.grid(True, axis="y", alpha=0.2)


# ---------------------------------------------------------------------------
class ChartGenerator:
    """Рисует и сохраняет графики в output_dir."""

    def __init__(self, output_dir: str | Path = CHARTS_DIR, stamp: str | None = None):
        self.output_dir = Path(output_dir)
        self.stamp = stamp or dt.date.today().isoformat()
        self.written: List[Path] = []  # файлы этого запуска, для discard()

    def _path(self, name: str) -> Path:
        return self.output_dir / f"poker-{name}-chart-{self.stamp}{CHART_FILE_EXT}"

    def _save(self, fig, name: str) -> Path:
        path = self._path(name)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            fig.tight_layout()
            fig.savefig(path, dpi=CHART_DPI, format="jpg", pil_kwargs={"quality": 95})
        except (OSError, ValueError) as e:
            if path.is_file():
                path.unlink()
            raise ChartError(f"Не удалось сохранить {path}: {e}", "save_chart", e) from e
        finally:
            plt.close(fig)
        self.written.append(path)
        logger.info("График сохранён: %s", path)
        return path

    def discard(self) -> None:
        """Удаляет графики, уже сохранённые этим генератором."""
        for path in self.written:
            path.unlink(missing_ok=True)
            logger.info("График удалён: %s", path)
        self.written.clear()

    # ---------- 1. профит + bb/100 ----------
    def generate_profit_analysis_chart(
        self, profit: TrendSeries, bb100: TrendSeries
    ) -> ChartGenerationResult:
        fig, (ax_profit, ax_bb) = plt.subplots(2, 1, figsize=(CHART_WIDTH_IN, CHART_HEIGHT_IN))
        _plot_trend(ax_profit, profit, "Профит", "$")
        _plot_trend(ax_bb, bb100, "BB/100", "bb/100")
        path = self._save(fig, "profit-analysis")

        final_values = {name: profit.last(name) for name in LINES}
        final_values.update({f"bb100_{name}": bb100.last(name) for name in LINES})
        total = profit.actual[-1].hand_number if profit.actual else 0
        return ChartGenerationResult(path, total, final_values)

    # ---------- 2. улицы ----------
    def generate_street_analysis_chart(
        self,
        actions: ActionAnalysis,
        street_profit: Dict[Stage, List[StreetProfitStats]],
    ) -> ChartGenerationResult:
        fig, axes = plt.subplots(
            len(STAGES), 2, figsize=(CHART_WIDTH_IN * 1.5, CHART_HEIGHT_IN * 2.5)
        )
        for row, stage in enumerate(STAGES):
            _plot_actions(axes[row][0], actions, stage)
            _plot_street_profit(axes[row][1], street_profit[stage], stage)
        path = self._save(fig, "street-analysis")

        # Overall — первая строка каждой улицы
        final_values = {
            stage.value: street_profit[stage][0].total_pnl for stage in STAGES
        }
        total = sum(
            street_profit[stage][0].profit_count + street_profit[stage][0].loss_count
            for stage in STAGES
        )
        return ChartGenerationResult(path, total, final_values)

    # ---------- 3. позиции ----------
    def generate_position_profit_analysis_chart(
        self, trends: List[PositionTrend]
    ) -> ChartGenerationResult:
        fig, axes = plt.subplots(
            len(trends),
            2,
            figsize=(CHART_WIDTH_IN * 1.5, CHART_HEIGHT_IN / 2 * len(trends)),
            squeeze=False,
        )
        for row, trend in enumerate(trends):
            _plot_trend(axes[row][0], trend.profit, f"{trend.position}: профит", "$")
            _plot_trend(axes[row][1], trend.bb100, f"{trend.position}: BB/100", "bb/100")
        path = self._save(fig, "position-profit-analysis")

        final_values = {t.position: t.profit.last("actual") for t in trends}
        overall = trends[0].profit if trends else TrendSeries()
        total = overall.actual[-1].hand_number if overall.actual else 0
        return ChartGenerationResult(path, total, final_values)
