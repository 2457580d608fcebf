# n8line/cli.py
"""
N8Line CLI:
    n8line parse --input <папка_с_HH> [--db data/poker.db]
    n8line chart [--db ...] [--output charts] [--start YYYY-MM-DD] [--end YYYY-MM-DD] [--interval N]
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import NoReturn, Optional

import typer

from n8line.analysis.streets import calculate_action_analysis, calculate_street_profit_analysis
from n8line.analysis.trends import (
    FinalStatistics,
    calculate_bb100_data,
    calculate_position_trends,
    calculate_profit_data,
    get_final_statistics,
)
from n8line.charts.chart_generator import ChartGenerator
from n8line.config import CHARTS_DIR, DB_PATH, DEFAULT_PROFIT_INTERVAL, LOG_FILE_EXT
from n8line.database.create_schema import connect
from n8line.database.db_utils import fetch_hands
from n8line.errors import ChartError, PokerToolError, ValidationError
from n8line.ingest.batch_import import StoreStats, batch_import
from n8line.utils import format_bb100, format_currency, is_valid_date

app = typer.Typer(add_completion=False, help="N8Line CLI — импорт HH Natural8 и графики по Hero.")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Подробный лог (DEBUG)"),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _fail(e: Exception) -> NoReturn:
    typer.echo(f"❌ {e}", err=True)
    raise typer.Exit(code=1)


def validate_date_range(start: str | None, end: str | None) -> None:
    for name, value in (("--start", start), ("--end", end)):
        if value and not is_valid_date(value):
            raise ValidationError(f"{name}: неверная дата {value!r}, нужен YYYY-MM-DD", "chart")
    if start and end and start > end:
        raise ValidationError(f"--start {start} позже --end {end}", "chart")


# ---------- parse ----------
@app.command("parse")
def parse_cmd(
    input_dir: Path = typer.Option(..., "--input", "-i", help="Папка с .txt HH"),
    db: Path = typer.Option(DB_PATH, "--db", "-d", help="Путь к SQLite базе"),
    keep_truncated: bool = typer.Option(
        False, "--keep-truncated", help="Сохранять раздачи без SUMMARY (обрезанные файлы)"
    ),
):
    """Парсит все HH из папки в базу, дубликаты пропускаются."""
    typer.echo("🚀 Импорт истории рук...")

    def on_file(file: Path, stats: StoreStats) -> None:
        typer.echo(
            f"📄 {file.name}: новых {stats.inserted}, пропущено {stats.skipped}"
            + (f", отклонено {stats.rejected}" if stats.rejected else "")
        )

    try:
        summary = batch_import(
            input_dir, db, LOG_FILE_EXT, keep_truncated=keep_truncated, on_file=on_file
        )
    except (PokerToolError, sqlite3.Error) as e:
        _fail(e)

    totals = summary.totals
    parsed = totals.inserted + totals.skipped + totals.rejected
    typer.echo(
        f"🎯 Рук распарсено: {parsed} | новых: {totals.inserted} | пропущено: {totals.skipped}"
    )
    typer.echo(f"💰 Профит: {format_currency(totals.profit)}")
    typer.echo("✅ Импорт завершён!")


# ---------- chart ----------
def _echo_statistics(stats: FinalStatistics) -> None:
    typer.echo("📊 Статистика:")
    typer.echo(f"   - Рук: {stats.total_hands}")
    if not stats.total_hands:
        return
    typer.echo(f"   - Профит без рейка: {format_currency(stats.profit_without_rake)}")
    typer.echo(f"   - Профит фактический: {format_currency(stats.actual_profit)}")
    typer.echo(f"   - Рейк: {format_currency(stats.rake_impact)}")
    typer.echo(f"   - Showdown: {format_currency(stats.showdown_profit)}")
    typer.echo(f"   - Non-showdown: {format_currency(stats.no_showdown_profit)}")
    typer.echo(f"   - bb/100 без рейка: {format_bb100(stats.bb100_without_rake)}")
    typer.echo(f"   - bb/100 фактический: {format_bb100(stats.bb100_actual)}")
    typer.echo(f"   - bb/100 showdown: {format_bb100(stats.bb100_showdown)}")
    typer.echo(f"   - bb/100 non-showdown: {format_bb100(stats.bb100_no_showdown)}")


@app.command("chart")
def chart_cmd(
    db: Path = typer.Option(DB_PATH, "--db", "-d", help="Путь к SQLite базе"),
    output: Path = typer.Option(CHARTS_DIR, "--output", "-o", help="Папка для графиков"),
    start: Optional[str] = typer.Option(None, "--start", help="С даты (YYYY-MM-DD)"),
    end: Optional[str] = typer.Option(None, "--end", help="По дату включительно (YYYY-MM-DD)"),
    interval: int = typer.Option(
        DEFAULT_PROFIT_INTERVAL, "--interval", "-i", min=1, help="Сглаживание: рук на точку"
    ),
):
    """Строит графики профита, bb/100, улиц и позиций по рукам из базы."""
    typer.echo("📊 Построение графиков...")
    try:
        validate_date_range(start, end)
        cx = connect(db)
        try:
            hands = fetch_hands(cx, "ASC", start, end)
        finally:
            cx.close()

        if not hands:
            typer.echo("⚠️ В базе нет рук под выбранные фильтры.")
            return
        typer.echo(f"📊 Рук для графиков: {len(hands)}")

        # сначала все расчёты, потом отрисовка
        profit = calculate_profit_data(hands, interval)
        bb100 = calculate_bb100_data(hands, interval)
        actions = calculate_action_analysis(hands)
        street_profit = calculate_street_profit_analysis(hands)
        positions = calculate_position_trends(hands, interval)

        generator = ChartGenerator(output)
        try:
            results = [
                generator.generate_profit_analysis_chart(profit, bb100),
                generator.generate_street_analysis_chart(actions, street_profit),
                generator.generate_position_profit_analysis_chart(positions),
            ]
        except ChartError:
            generator.discard()
            raise
    except (PokerToolError, sqlite3.Error) as e:
        _fail(e)

    typer.echo("🖼️ Графики сохранены:")
    for res in results:
        typer.echo(f"   - {res.file_path}")
    _echo_statistics(get_final_statistics(profit, bb100))
    typer.echo("✅ Готово!")


if __name__ == "__main__":
    app()
