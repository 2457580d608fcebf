# n8line/parse/hand_parser.py
"""
Natural8 / GGPoker PokerCraft HH → HandRecord.
▪ только NLHE cash (Rush & Cash / обычный кэш), 6-max, Hero-only
▪ один проход по строкам: regex + state-machine (ParseState)

Улицы идут строго вперёд: preflop → flop → turn → river.
Раздача заканчивается на *** SUMMARY *** (или на следующем заголовке / EOF).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, NamedTuple

from n8line.config import HAND_FORMAT, HandFormat
from n8line.errors import ParseError
from n8line.models import Action, GameType, HandRecord, Stage
from n8line.parse.finalize import finalize
from n8line.parse.state import ParseState
from n8line.utils import extract_brackets, is_empty_line, parse_cards, safe_float, safe_int

logger = logging.getLogger(__name__)


class ParseResult(NamedTuple):
    hand: HandRecord
    next_index: int
    complete: bool  # False — до SUMMARY не дошли (обрезанный файл)


# ------------------------------------------------------------
def parse_header(line: str, fmt: HandFormat = HAND_FORMAT) -> ParseState | None:
    """'Poker Hand #RC123: Hold'em No Limit ($0.02/$0.05) - 2024/01/15 20:31:05'"""
    m = fmt.hand_header.match(line)
    if not m:
        return None
    return ParseState(
        hand_id=m.group("hand_id").strip(),
        start_time=m.group("timestamp").strip(),
        small_blind=safe_float(m.group("sb")),
        big_blind=safe_float(m.group("bb")),
    )


def _parse_table_line(state: ParseState, line: str, fmt: HandFormat) -> bool:
    m_table = fmt.table_info.match(line)
    if not m_table:
        return False
    state.table_name = m_table.group("table")
    state.game_type = (
        GameType.RUSH_AND_CASH
        if state.table_name.startswith(fmt.rush_table_prefix)
        else GameType.CASH_GAME
    )
    m_btn = fmt.button_seat.search(line)
    if m_btn:
        state.button_seat = safe_int(m_btn.group("button"))
    return True


def _parse_hero_seat(state: ParseState, line: str, fmt: HandFormat) -> bool:
    m = fmt.hero_seat.match(line)
    if not m:
        return False
    state.hero_seat = safe_int(m.group("seat"))
    state.hero_stack = safe_float(m.group("stack"))
    return True


def _parse_hole_cards(state: ParseState, line: str, fmt: HandFormat) -> bool:
    m = fmt.hole_cards.match(line)
    if not m:
        return False
    state.hole_cards = m.group("cards")
    return True


def _street_of(line: str, fmt: HandFormat) -> Stage | None:
    for marker, street in fmt.street_markers:
        if line.startswith(marker):
            return Stage(street)
    return None


def _parse_street(state: ParseState, street: Stage, line: str, fmt: HandFormat) -> None:
    """
    FLOP:        [Ah Kd 2c]
    TURN/RIVER:  [Ah Kd 2c] [7s]   — новая карта во второй группе
                 [Ah Kd 2c 7s]     — или одной группой, тогда берём 4-ю / 5-ю карту
    """
    groups = extract_brackets(line)
    if street is Stage.FLOP:
        if groups:
            state.flop_cards = groups[0]
    elif street in (Stage.TURN, Stage.RIVER):
        idx = fmt.turn_index if street is Stage.TURN else fmt.river_index
        if len(groups) >= 2:
            card = groups[1]
        elif groups:
            cards = parse_cards(groups[0])
            card = cards[idx] if len(cards) > idx else ""
        else:
            card = ""
        if street is Stage.TURN:
            state.turn_card = card
        else:
            state.river_card = card
    state.advance(street)


def _parse_hero_action(state: ParseState, line: str, fmt: HandFormat) -> bool:
    """
    posts SB/BB  → вложение префлоп = блайнд (не складываем: это первое действие)
    calls / bets → += сумма
    raises X to Y → вложение улицы = Y (рейз поглощает всё, что Hero уже поставил)
    """
    m = fmt.hero_action.match(line)
    if not m:
        return False
    section = state.section
    if m.group("posts"):
        state.set_investment(safe_float(m.group("post_amt")), Stage.PREFLOP)
    elif m.group("folds"):
        state.actions[section].append(Action.FOLD)
    elif m.group("checks"):
        state.actions[section].append(Action.CHECK)
    elif m.group("calls"):
        state.actions[section].append(Action.CALL)
        state.add_investment(safe_float(m.group("call_amt")))
    elif m.group("bets"):
        state.actions[section].append(Action.BET)
        state.add_investment(safe_float(m.group("bet_amt")))
    elif m.group("raises"):
        state.actions[section].append(Action.RAISE)
        state.set_investment(safe_float(m.group("raise_to")))
    return True


def _parse_uncalled(state: ParseState, line: str, fmt: HandFormat) -> bool:
    m = fmt.uncalled_bet.match(line)
    if not m:
        return False
    state.add_investment(-safe_float(m.group("amt")))
    return True


def _parse_pot_line(state: ParseState, line: str, fmt: HandFormat) -> bool:
    """'Total pot $1.35 | Rake $0.05 | Jackpot $0.01 | ...' — рейк/джекпот бывают не всегда."""
    m_pot = fmt.total_pot.search(line)
    if not m_pot:
        return False
    state.pot_amount = safe_float(m_pot.group("amt"))
    m_rake = fmt.rake.search(line)
    if m_rake:
        state.rake = safe_float(m_rake.group("amt"))
    m_jp = fmt.jackpot.search(line)
    if m_jp:
        state.jackpot = safe_float(m_jp.group("amt"))
    return True


def _parse_hero_result(state: ParseState, line: str, fmt: HandFormat) -> None:
    """'Seat 3: Hero (button) showed [Ah Kd] and won ($2.50) with ...'"""
    m = fmt.won.search(line) or fmt.collected.search(line)
    state.collected = safe_float(m.group("amt")) if m else 0.0
    state.showed = fmt.showed_marker in line


def _parse_summary(lines: List[str], start: int, state: ParseState, fmt: HandFormat) -> int:
    """
    Разбирает блок SUMMARY, возвращает индекс следующего заголовка (или len(lines)).
    Строку Hero ищем по номеру места: без места выигрыш не засчитываем.
    """
    state.summary_seen = True
    hero_line = fmt.hero_summary_line(state.hero_seat) if state.hero_seat is not None else None
    i = start + 1
    while i < len(lines) and not lines[i].startswith(fmt.hand_prefix):
        ln = lines[i]
        if _parse_pot_line(state, ln, fmt):
            i += 1
            continue
        if hero_line is not None and hero_line.match(ln):
            _parse_hero_result(state, ln, fmt)
        i += 1
    return i


# порядок важен: строка места Hero раньше, чем его действия
LINE_HANDLERS = (
    _parse_table_line,
    _parse_hero_seat,
    _parse_hole_cards,
    _parse_hero_action,
    _parse_uncalled,
)


def parse_hand(
    lines: List[str], start_index: int, fmt: HandFormat = HAND_FORMAT
) -> ParseResult | None:
    """
    Разбирает одну раздачу, начиная с заголовка lines[start_index].
    None — если на start_index не заголовок (вызывающий сдвигается на 1 строку).
    Все строки разбираются только regex'ами из fmt.
    """
    if start_index >= len(lines):
        return None
    state = parse_header(lines[start_index], fmt)
    if state is None:
        return None
    if state.big_blind <= 0:
        raise ParseError(f"некорректные блайнды в заголовке: {lines[start_index]!r}", state.hand_id)

    i = start_index + 1
    while i < len(lines) and not lines[i].startswith(fmt.hand_prefix):
        ln = lines[i]
        if is_empty_line(ln):
            i += 1
            continue

        if ln.startswith(fmt.summary_marker):
            i = _parse_summary(lines, i, state, fmt)
            break
        street = _street_of(ln, fmt)
        if street is not None:
            _parse_street(state, street, ln, fmt)
        else:
            for handler in LINE_HANDLERS:
                if handler(state, ln, fmt):
                    break
        i += 1

    return ParseResult(finalize(state), i, state.summary_seen)


def _next_header(lines: List[str], start: int, fmt: HandFormat) -> int:
    i = start
    while i < len(lines) and not lines[i].startswith(fmt.hand_prefix):
        i += 1
    return i


def parse_lines(
    lines: List[str], fmt: HandFormat = HAND_FORMAT, keep_truncated: bool = False
) -> List[HandRecord]:
    """
    Все раздачи из списка строк.
    Обрезанные раздачи (без SUMMARY) по умолчанию выкидываем — иначе в базу
    попадут «нулевые» руки с профитом −вложения.
    """
    hands: List[HandRecord] = []
    i = 0
    while i < len(lines):
        if not lines[i].startswith(fmt.hand_prefix):
            i += 1
            continue
        try:
            res = parse_hand(lines, i, fmt)
        except (ParseError, ValueError, IndexError) as e:
            logger.warning("Ошибка при парсинге раздачи (строка %d): %s", i + 1, e)
            i = _next_header(lines, i + 1, fmt)
            continue
        if res is None:
            logger.debug("Строка %d похожа на заголовок, но не распознана: %r", i + 1, lines[i])
            i += 1
            continue
        if res.complete or keep_truncated:
            hands.append(res.hand)
        else:
            logger.warning("Раздача %s без SUMMARY — пропускаю", res.hand.hand_id)
        i = max(res.next_index, i + 1)
    return hands


def split_lines(text: str) -> List[str]:
    return [ln.strip() for ln in text.lstrip("\ufeff").splitlines()]


def parse_text(
    text: str, fmt: HandFormat = HAND_FORMAT, keep_truncated: bool = False
) -> List[HandRecord]:
    return parse_lines(split_lines(text), fmt, keep_truncated)


def parse_file(
    path: str | Path, fmt: HandFormat = HAND_FORMAT, keep_truncated: bool = False
) -> List[HandRecord]:
    """
    Парсит все раздачи из файла. Ошибки чтения файла пробрасываем наверх.
    Битые байты заменяются на U+FFFD: строка с ними просто не совпадёт ни с одним regex.
    """
    with open(path, "r", encoding="utf-8-sig", errors="replace") as f:
        raw_text_content = f.read()
    return parse_text(raw_text_content, fmt, keep_truncated)
