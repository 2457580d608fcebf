import pytest

from n8line.database.create_schema import connect
from n8line.models import (
    GameType,
    HandRecord,
    HandResult,
    Position,
    Stage,
    empty_actions,
    empty_investments,
)

# --- Hero BB, пас на рейз: профит = −0.05 ---------------------------------
HH_FOLD = """\
Poker Hand #RC1000000001: Hold'em No Limit ($0.02/$0.05) - 2024/01/15 20:31:05
Table 'RushAndCash12345' 6-max Seat #1 is the button
Seat 1: Player1 ($5.00 in chips)
Seat 2: Player2 ($5.00 in chips)
Seat 3: Hero ($5.00 in chips)
Seat 4: Player4 ($5.00 in chips)
Seat 5: Player5 ($5.00 in chips)
Seat 6: Player6 ($5.00 in chips)
Player2: posts small blind $0.02
Hero: posts big blind $0.05
*** HOLE CARDS ***
Dealt to Player1
Dealt to Hero [7h 2c]
Player4: raises $0.10 to $0.15
Player5: folds
Player6: folds
Player1: folds
Player2: folds
Hero: folds
Uncalled bet ($0.10) returned to Player4
*** SHOWDOWN ***
Player4 collected $0.12 from pot
*** SUMMARY ***
Total pot $0.12 | Rake $0 | Jackpot $0 | Bingo $0 | Fortune $0 | Tax $0
Seat 1: Player1 (button) folded before Flop (didn't bet)
Seat 2: Player2 (small blind) folded before Flop
Seat 3: Hero (big blind) folded before Flop
Seat 4: Player4 collected ($0.12)
Seat 5: Player5 folded before Flop (didn't bet)
Seat 6: Player6 folded before Flop (didn't bet)
"""

# --- Hero BTN, вскрытие, won $5.00 при вложенных $2.00, рейк $0.50 ----------
HH_SHOWDOWN_WIN = """\
Poker Hand #RC1000000002: Hold'em No Limit ($0.02/$0.05) - 2024/01/15 20:32:10
Table 'RushAndCash12345' 6-max Seat #1 is the button
Seat 1: Hero ($10.00 in chips)
Seat 2: Player2 ($5.00 in chips)
Seat 3: Player3 ($12.40 in chips)
Player2: posts small blind $0.02
Player3: posts big blind $0.05
*** HOLE CARDS ***
Dealt to Hero [Ah Kd]
Hero: raises $0.45 to $0.50
Player2: folds
Player3: calls $0.45
*** FLOP *** [Ac 7c 2d]
Player3: checks
Hero: bets $0.50
Player3: calls $0.50
*** TURN *** [Ac 7c 2d] [9s]
Player3: checks
Hero: bets $1.00
Player3: calls $1.00
*** RIVER *** [Ac 7c 2d 9s] [3h]
Player3: checks
Hero: checks
*** SHOWDOWN ***
Player3: shows [Qc Qd]
Hero: shows [Ah Kd]
Hero collected $5.00 from pot
*** SUMMARY ***
Total pot $5.50 | Rake $0.50 | Jackpot $0 | Bingo $0 | Fortune $0 | Tax $0
Board [Ac 7c 2d 9s 3h]
Seat 1: Hero (button) showed [Ah Kd] and won ($5.00) with a pair of Aces
Seat 2: Player2 (small blind) folded before Flop
Seat 3: Player3 (big blind) showed [Qc Qd] and lost with a pair of Queens
"""

# --- Hero CO, выиграл без вскрытия $1.00 при вложенных $0.40 ----------------
HH_NO_SHOWDOWN_WIN = """\
Poker Hand #RC1000000003: Hold'em No Limit ($0.02/$0.05) - 2024/01/15 20:33:40
Table 'RushAndCash12345' 6-max Seat #1 is the button
Seat 1: Player1 ($5.00 in chips)
Seat 3: Player3 ($5.00 in chips)
Seat 6: Hero ($7.25 in chips)
Player2: posts small blind $0.02
Player3: posts big blind $0.05
*** HOLE CARDS ***
Dealt to Hero [Js Ts]
Hero: raises $0.10 to $0.15
Player1: folds
Player3: calls $0.10
*** FLOP *** [Jd 8h 4c]
Player3: checks
Hero: bets $0.50
Player3: folds
Uncalled bet ($0.25) returned to Hero
*** SHOWDOWN ***
Hero collected $1.00 from pot
*** SUMMARY ***
Total pot $1.00 | Rake $0 | Jackpot $0 | Bingo $0 | Fortune $0 | Tax $0
Board [Jd 8h 4c]
Seat 1: Player1 (button) folded before Flop (didn't bet)
Seat 3: Player3 (big blind) folded on the Flop
Seat 6: Hero collected ($1.00)
"""

# --- другой день, обычный кэш-стол ------------------------------------------
HH_CASH_FEB = """\
Poker Hand #HD2000000001: Hold'em No Limit ($0.05/$0.10) - 2024/02/01 10:00:00
Table 'Paris' 6-max Seat #2 is the button
Seat 2: Player2 ($10.00 in chips)
Seat 3: Hero ($10.00 in chips)
Seat 4: Player4 ($10.00 in chips)
Hero: posts small blind $0.05
Player4: posts big blind $0.10
*** HOLE CARDS ***
Dealt to Hero [5d 5c]
Player2: folds
Hero: calls $0.05
Player4: checks
*** FLOP *** [Kh Qs 2c]
Hero: checks
Player4: bets $0.20
Hero: folds
Uncalled bet ($0.20) returned to Player4
*** SHOWDOWN ***
Player4 collected $0.19 from pot
*** SUMMARY ***
Total pot $0.20 | Rake $0.01 | Jackpot $0 | Bingo $0 | Fortune $0 | Tax $0
Board [Kh Qs 2c]
Seat 2: Player2 (button) folded before Flop (didn't bet)
Seat 3: Hero (small blind) folded on the Flop
Seat 4: Player4 (big blind) collected ($0.19)
"""


@pytest.fixture
def hh_three():
    """Три руки из одного файла: пас префлоп, вскрытие +3, без вскрытия +0.60."""
    return "\n".join([HH_FOLD, HH_SHOWDOWN_WIN, HH_NO_SHOWDOWN_WIN])


@pytest.fixture
def hh_cash_feb():
    return HH_CASH_FEB


@pytest.fixture
def hh_dir(tmp_path, hh_three, hh_cash_feb):
    """Папка с двумя HH-файлами (и одним лишним не-.txt)."""
    folder = tmp_path / "hh"
    folder.mkdir()
    (folder / "GG20240115-RushAndCash.txt").write_text(hh_three, encoding="utf-8")
    (folder / "GG20240201-Paris.txt").write_text(hh_cash_feb, encoding="utf-8")
    (folder / "notes.md").write_text("не HH", encoding="utf-8")
    return folder


@pytest.fixture
def db(tmp_path):
    cx = connect(tmp_path / "data" / "poker.db")
    yield cx
    cx.close()


@pytest.fixture
def make_hand():
    """Фабрика HandRecord для тестов аналитики (по умолчанию — пас префлоп с BTN)."""
    counter = iter(range(1, 1_000_000))

    def _make(
        profit: float = 0.0,
        position: Position = Position.BTN,
        stage: Stage = Stage.PREFLOP,
        showdown: bool = False,
        rake: float = 0.0,
        big_blind: float = 0.05,
        actions: dict | None = None,
        hand_id: str | None = None,
        start_time: str | None = None,
    ) -> HandRecord:
        n = next(counter)
        if showdown:
            stage = Stage.SHOWDOWN
        hero_actions = empty_actions()
        hero_actions.update({s: tuple(a) for s, a in (actions or {}).items()})
        return HandRecord(
            hand_id=f"RC{n:010d}" if hand_id is None else hand_id,
            start_time=start_time or f"2024/01/15 20:{n // 60 % 60:02d}:{n % 60:02d}",
            game_type=GameType.RUSH_AND_CASH,
            small_blind=round(big_blind / 2, 2),
            big_blind=big_blind,
            hero_position=position,
            hero_investments=empty_investments(),
            hero_actions=hero_actions,
            hero_profit=profit,
            hero_rake=rake,
            hand_result=HandResult.classify(showdown, profit),
            final_stage=stage,
        )

    return _make
