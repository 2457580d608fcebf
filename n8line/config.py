"""
Константы и формат HH для N8Line.

▪ пути по умолчанию (БД, папка с графиками) — как DB_PATH в bbline.utils
▪ HandFormat — неизменяемый набор regex'ов / маркеров формата PokerCraft,
  передаётся в парсер, чтобы его можно было тестировать с другим форматом
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Pattern, Tuple

# ---------- пути ----------
DB_PATH = Path("data") / "poker.db"
CHARTS_DIR = Path("charts")
LOG_FILE_EXT = ".txt"

# ---------- покер ----------
TABLE_SIZE = 6
DECIMALS = 2

# ---------- графики ----------
DEFAULT_PROFIT_INTERVAL = 1
DEFAULT_BB100_INTERVAL = 100
CHART_FILE_EXT = ".jpg"
CHART_WIDTH_IN = 12
CHART_HEIGHT_IN = 8
CHART_DPI = 100

CHART_COLORS = {
    "without_rake": "#86efac",
    "actual": "#22c55e",
    "showdown": "#3b82f6",
    "no_showdown": "#ef4444",
    "wins": "#22c55e",
    "losses": "#ef4444",
    "R": "#991b1b",  # raise — тёмно-красный
    "B": "#ef4444",
    "C": "#15803d",
    "X": "#86efac",
    "F": "#93c5fd",
    "win_rate": "#22c55e",
}


@dataclass(frozen=True)
class HandFormat:
    """Описание формата HH (Natural8 / GGPoker PokerCraft)."""

    hand_header: Pattern[str] = re.compile(
        r"^Poker Hand #(?P<hand_id>[^:]+): Hold'em No Limit "
        r"\(\$(?P<sb>[0-9.]+)/\$(?P<bb>[0-9.]+)\) - (?P<timestamp>.+)$"
    )
    hand_prefix: str = "Poker Hand #"
    table_info: Pattern[str] = re.compile(r"^Table '(?P<table>[^']+)'")
    button_seat: Pattern[str] = re.compile(r"Seat #(?P<button>\d+) is the button")
    hero_seat: Pattern[str] = re.compile(
        r"^Seat (?P<seat>\d+): Hero \(\$(?P<stack>[0-9.]+) in chips\)"
    )
    hole_cards: Pattern[str] = re.compile(r"^Dealt to Hero \[(?P<cards>[^\]]+)\]")
    hero_action: Pattern[str] = re.compile(
        r"^Hero: (?:"
        r"(?P<posts>posts) (?:small|big) blind \$(?P<post_amt>[0-9.]+)"
        r"|(?P<raises>raises) \$[0-9.]+ to \$(?P<raise_to>[0-9.]+)"
        r"|(?P<bets>bets) \$(?P<bet_amt>[0-9.]+)"
        r"|(?P<calls>calls) \$(?P<call_amt>[0-9.]+)"
        r"|(?P<folds>folds)"
        r"|(?P<checks>checks))"
    )
    uncalled_bet: Pattern[str] = re.compile(
        r"^Uncalled bet \(\$(?P<amt>[0-9.]+)\) returned to Hero"
    )
    total_pot: Pattern[str] = re.compile(r"Total pot \$(?P<amt>[0-9.]+)")
    rake: Pattern[str] = re.compile(r"Rake \$(?P<amt>[0-9.]+)")
    jackpot: Pattern[str] = re.compile(r"Jackpot \$(?P<amt>[0-9.]+)")
    # строка Hero в SUMMARY; {seat} подставляется номером места
    hero_summary: str = r"^Seat {seat}: Hero\b"
    won: Pattern[str] = re.compile(r"won \(\$(?P<amt>[0-9.]+)\)")
    collected: Pattern[str] = re.compile(r"collected \(\$(?P<amt>[0-9.]+)\)")
    street_markers: Tuple[Tuple[str, str], ...] = (
        ("*** FLOP ***", "flop"),
        ("*** TURN ***", "turn"),
        ("*** RIVER ***", "river"),
    )
    summary_marker: str = "*** SUMMARY ***"
    showed_marker: str = "showed"
    rush_table_prefix: str = "RushAndCash"
    # номер карты в общем списке, если TURN/RIVER пришли одной группой скобок
    turn_index: int = 3
    river_index: int = 4

    def hero_summary_line(self, seat: int) -> Pattern[str]:
        return re.compile(self.hero_summary.format(seat=seat))


HAND_FORMAT = HandFormat()
