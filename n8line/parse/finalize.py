"""
Финализация раздачи: профит, финальная улица, результат, позиция.

profit:
    collected > 0  →  collected − всё вложенное за 4 улицы
    иначе          →  −всё вложенное (split-pot частями формат не отдаёт)
"""

from __future__ import annotations

from n8line.models import HandRecord, HandResult, Stage
from n8line.parse.position import resolve_position
from n8line.parse.state import ParseState
from n8line.utils import round2


def hero_profit(collected: float, total_investment: float) -> float:
    if collected > 0:
        return round2(collected - total_investment)
    return round2(-total_investment)


def final_stage(result: HandResult, flop: str, turn: str, river: str) -> Stage:
    if result.is_showdown:
        return Stage.SHOWDOWN
    if river:
        return Stage.RIVER
    if turn:
        return Stage.TURN
    if flop:
        return Stage.FLOP
    return Stage.PREFLOP


def finalize(state: ParseState) -> HandRecord:
    investments = {street: round2(amt) for street, amt in state.investments.items()}
    total_investment = round2(sum(investments.values()))
    profit = hero_profit(state.collected, total_investment)
    # результат считаем по итоговому профиту, чтобы win ⇔ profit > 0 выполнялось всегда
    result = HandResult.classify(state.showed, profit)

    return HandRecord(
        hand_id=state.hand_id,
        start_time=state.start_time,
        game_type=state.game_type,
        small_blind=round2(state.small_blind),
        big_blind=round2(state.big_blind),
        hero_position=resolve_position(state.hero_seat, state.button_seat),
        hero_hole_cards=state.hole_cards,
        flop_cards=state.flop_cards,
        turn_card=state.turn_card,
        river_card=state.river_card,
        hero_investments=investments,
        hero_actions={street: tuple(acts) for street, acts in state.actions.items()},
        pot_amount=round2(state.pot_amount),
        jackpot_amount=round2(state.jackpot),
        hero_profit=profit,
        hero_rake=round2(state.rake),
        hand_result=result,
        final_stage=final_stage(result, state.flop_cards, state.turn_card, state.river_card),
        table_name=state.table_name,
        hero_stack=round2(state.hero_stack),
    )
